"""
Environment prober: prerequisite commands, OS identity, CPU architecture,
privilege escalation and writable directories.
"""

import getpass
import logging
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from .runner import CommandRunner
from ..errors import (
    MissingPrerequisiteError,
    PrivilegeError,
    UnwritableDirectoryError,
)
from ..models.tool import SUPPORTED_ARCHES


# Raw `uname -m` spellings -> canonical architecture
ARCH_ALIASES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}

DEBIAN_FAMILY = ("debian", "ubuntu")


@dataclass
class SystemInfo:
    """What the prober learned about the host."""
    os_id: str
    os_name: str
    arch: str
    raw_arch: str
    os_like: List[str] = field(default_factory=list)
    escalation: List[str] = field(default_factory=list)
    admin_group: Optional[str] = None
    is_root: bool = False

    @property
    def is_debian_family(self) -> bool:
        return self.os_id in DEBIAN_FAMILY or any(x in DEBIAN_FAMILY for x in self.os_like)


def parse_os_release(path: Path) -> Dict[str, str]:
    """Parse an os-release file into a dict; empty when the file is absent."""
    data: Dict[str, str] = {}
    try:
        lines = Path(path).read_text().splitlines()
    except OSError:
        return data
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key] = value.strip().strip('"').strip("'")
    return data


def normalize_machine(raw: str) -> str:
    """Map a raw machine string to its canonical name; unknown ones pass through lowercased."""
    return ARCH_ALIASES.get(raw.lower(), raw.lower())


class EnvironmentProber:
    """Checks the host before anything is installed or written."""

    def __init__(self,
                 runner: CommandRunner,
                 required_commands: Sequence[str] = ("curl", "groups"),
                 admin_groups: Sequence[str] = ("wheel", "sudo", "root", "admin"),
                 supported_os_ids: Sequence[str] = DEBIAN_FAMILY,
                 os_release_path: Path = Path("/etc/os-release"),
                 machine: Callable[[], str] = platform.machine,
                 euid: Callable[[], int] = os.geteuid,
                 doas_conf: Path = Path("/etc/doas.conf")):
        self.logger = logging.getLogger(__name__)
        self.runner = runner
        self.required_commands = list(required_commands)
        self.admin_groups = list(admin_groups)
        self.supported_os_ids = list(supported_os_ids)
        self.os_release_path = Path(os_release_path)
        self.machine = machine
        self.euid = euid
        self.doas_conf = Path(doas_conf)

    def probe(self, writable_dirs: Sequence[Path] = (), check_privileges: bool = True) -> SystemInfo:
        """
        Run every check in order and return the host description.

        Raises:
            EnvironmentCheckError: on the first fatal problem
        """
        self.logger.info("Checking system environment and prerequisites...")
        self.check_prerequisites()
        info = self.detect_system()

        for directory in writable_dirs:
            self.check_writable(directory)

        if check_privileges:
            info.is_root = self.euid() == 0
            info.escalation = self.detect_escalation(info.is_root)
            if not info.is_root:
                info.admin_group = self.check_admin_group()
                self.prime_credentials(info.escalation)
            self.logger.info(
                "Using %s as privilege escalation software",
                " ".join(info.escalation) or "none (running as root)"
            )

        self.logger.info("Environment check completed successfully")
        return info

    def check_prerequisites(self) -> None:
        for command in self.required_commands:
            if not self.runner.which(command):
                raise MissingPrerequisiteError(command)
            self.logger.debug(f"Found prerequisite: {command}")

    def detect_system(self) -> SystemInfo:
        release = parse_os_release(self.os_release_path)
        raw_arch = self.machine()
        info = SystemInfo(
            os_id=release.get("ID", platform.system().lower()),
            os_name=release.get("PRETTY_NAME", platform.system()),
            os_like=release.get("ID_LIKE", "").split(),
            raw_arch=raw_arch,
            arch=normalize_machine(raw_arch),
        )
        supported = info.os_id in self.supported_os_ids or any(
            x in self.supported_os_ids for x in info.os_like
        )
        if not supported:
            self.logger.warning(f"This program is designed for Ubuntu/Debian. Your system: {info.os_name}")
            self.logger.info("Continuing anyway, but some features may not work correctly.")
        self.logger.info(f"Detected architecture: {raw_arch} ({info.arch})")
        if info.arch not in SUPPORTED_ARCHES:
            self.logger.warning(
                f"No release builds for {info.arch}; tools installed from GitHub releases will fail")
        return info

    def detect_escalation(self, is_root: bool) -> List[str]:
        if is_root:
            return []
        if self.runner.which("sudo"):
            return ["sudo"]
        if self.runner.which("doas") and self.doas_conf.exists():
            return ["doas"]
        if self.runner.which("su"):
            return ["su", "-c"]
        raise PrivilegeError("No privilege escalation command found (sudo, doas or su)")

    def user_groups(self, user: Optional[str] = None) -> List[str]:
        """Group names of the invoking user, as reported by `groups`."""
        user = user or os.environ.get("SUDO_USER") or getpass.getuser()
        result = self.runner.run(["groups", user])
        if not result.ok:
            raise PrivilegeError(f"Cannot determine groups of {user}: {result.output}")
        # Output is either "user : g1 g2" or "g1 g2"
        names = result.stdout.split(":", 1)[-1]
        return names.split()

    def check_admin_group(self) -> str:
        groups = self.user_groups()
        for group in self.admin_groups:
            if group in groups:
                self.logger.info(f"Super user group {group}")
                return group
        raise PrivilegeError(
            f"You need to be a member of one of these groups: {', '.join(self.admin_groups)}"
        )

    def prime_credentials(self, escalation: List[str]) -> None:
        """Ask for the password once, up front, instead of mid-install."""
        self.runner.escalation = list(escalation)
        result = self.runner.run(["true"], privileged=True)
        if not result.ok:
            raise PrivilegeError(f"Failed to obtain {' '.join(escalation)} privileges")

    def check_writable(self, directory: Path) -> None:
        directory = Path(directory)
        if not directory.is_dir() or not os.access(directory, os.W_OK):
            raise UnwritableDirectoryError(f"Cannot write to directory: {directory}")
