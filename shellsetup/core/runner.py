"""
Command runner wrapping subprocess for every external call.
"""

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence


@dataclass
class CommandResult:
    """Outcome of one external command."""
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return (self.stdout or self.stderr or "").strip()


class CommandRunner:
    """Runs external commands sequentially, with optional privilege escalation."""

    def __init__(self,
                 escalation: Optional[Sequence[str]] = None,
                 extra_path: Optional[Sequence[Path]] = None,
                 dry_run: bool = False):
        """
        Initialize the runner.

        Args:
            escalation: Prefix for privileged commands (e.g. ["sudo"]);
                empty when already root
            extra_path: Directories appended to PATH for lookups and children
            dry_run: If True, log commands instead of executing them
        """
        self.logger = logging.getLogger(__name__)
        self.escalation = list(escalation or [])
        self.extra_path = [Path(p) for p in (extra_path or [])]
        self.dry_run = dry_run

    @property
    def search_path(self) -> str:
        entries = [p for p in os.environ.get("PATH", "").split(os.pathsep) if p]
        for extra in self.extra_path:
            if str(extra) not in entries:
                entries.append(str(extra))
        return os.pathsep.join(entries)

    def which(self, name: str) -> Optional[str]:
        """Locate an executable on PATH plus the extra directories."""
        return shutil.which(name, path=self.search_path)

    def _privileged(self, args: List[str]) -> List[str]:
        if not self.escalation:
            return args
        # `su -c` takes the whole command as one string
        if self.escalation[-1] == "-c":
            return self.escalation + [shlex.join(args)]
        return self.escalation + args

    def run(self,
            args: Sequence[str],
            privileged: bool = False,
            env: Optional[Dict[str, str]] = None,
            cwd: Optional[Path] = None,
            timeout: Optional[float] = None) -> CommandResult:
        """
        Run a command and capture its output.

        A missing executable or a timeout is reported as a failed result
        rather than raised, so callers only have to check `ok`.
        """
        cmd = [str(a) for a in args]
        if privileged:
            cmd = self._privileged(cmd)

        self.logger.debug(f"$ {shlex.join(cmd)}")
        if self.dry_run:
            self.logger.info(f"[dry-run] {shlex.join(cmd)}")
            return CommandResult(args=cmd, returncode=0)

        child_env = os.environ.copy()
        child_env["PATH"] = self.search_path
        if env:
            child_env.update(env)

        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                env=child_env,
                cwd=str(cwd) if cwd else None,
                timeout=timeout
            )
        except FileNotFoundError:
            return CommandResult(args=cmd, returncode=127, stderr=f"{cmd[0]}: command not found")
        except subprocess.TimeoutExpired:
            return CommandResult(args=cmd, returncode=124, stderr=f"Timed out after {timeout} seconds")

        result = CommandResult(
            args=cmd,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or ""
        )
        if not result.ok:
            self.logger.debug(f"Exit code {result.returncode}: {result.stderr.strip()[:500]}")
        return result
