"""
Tool installer: installs each catalog tool with its configured method.
"""

import logging
import shutil
import tarfile
import tempfile
import time
import zipfile
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .runner import CommandRunner
from .verifier import Verifier
from ..errors import ConfigurationError, InstallError, UnsupportedArchitectureError
from ..integrations.github_releases import GitHubReleasesClient, ReleaseAsset
from ..models.installation import InstallResult, Outcome, RunReport
from ..models.tool import InstallMethod, ToolDescriptor


TAR_SUFFIXES = (".tar.gz", ".tgz", ".tar.xz", ".txz", ".tar.bz2")


def extract_archive(archive: Path, dest: Path) -> Optional[Path]:
    """
    Extract a tar or zip archive into `dest`.

    Returns:
        `dest`, or None when `archive` is not an archive (a bare binary)
    """
    name = archive.name.lower()
    dest.mkdir(parents=True, exist_ok=True)
    if name.endswith(".zip"):
        with zipfile.ZipFile(archive) as zf:
            zf.extractall(dest)
        return dest
    if name.endswith(TAR_SUFFIXES):
        with tarfile.open(archive, "r:*") as tf:
            if hasattr(tarfile, "data_filter"):
                tf.extractall(dest, filter="data")
            else:
                tf.extractall(dest)
        return dest
    return None


def validate_overrides(descriptors: List[ToolDescriptor],
                       method_overrides: Dict[str, InstallMethod]) -> None:
    """Reject overrides naming unknown tools or unavailable methods."""
    by_name = {d.name: d for d in descriptors}
    for name, method in method_overrides.items():
        if name not in by_name:
            raise ConfigurationError(f"Install method override for unknown tool: {name}")
        by_name[name].resolve(method)


class ToolInstaller:
    """Installs tools one after another; one failure never stops the rest."""

    def __init__(self,
                 runner: CommandRunner,
                 releases: GitHubReleasesClient,
                 verifier: Verifier,
                 arch: str,
                 bin_dir: Path,
                 home: Path,
                 method_overrides: Optional[Dict[str, InstallMethod]] = None,
                 skip: Sequence[str] = ()):
        """
        Initialize the installer.

        Args:
            runner: Command runner (already carrying the escalation prefix)
            releases: GitHub releases client for release and script downloads
            verifier: Used to detect tools that are already present
            arch: Canonical architecture reported by the prober
            bin_dir: Destination for downloaded binaries and symlinks
            home: The invoking user's home directory
            method_overrides: Per-tool install method choice
            skip: Tool names never to install
        """
        self.logger = logging.getLogger(__name__)
        self.runner = runner
        self.releases = releases
        self.verifier = verifier
        self.arch = arch
        self.bin_dir = Path(bin_dir)
        self.home = Path(home)
        self.method_overrides = dict(method_overrides or {})
        self.skip = set(skip)
        self._apt_updated = False

        self._handlers = {
            InstallMethod.APT: self._install_apt,
            InstallMethod.SNAP: self._install_snap,
            InstallMethod.CARGO: self._install_cargo,
            InstallMethod.PIPX: self._install_pipx,
            InstallMethod.GO: self._install_go,
            InstallMethod.GITHUB_RELEASE: self._install_release,
            InstallMethod.SCRIPT: self._install_script,
            InstallMethod.FONT: self._install_font,
        }

    def install_all(self, descriptors: List[ToolDescriptor], report: RunReport) -> RunReport:
        """Install every descriptor in order, recording one result per tool."""
        self.logger.info(f"Starting tool installation phase ({len(descriptors)} tools)")
        for descriptor in descriptors:
            result = self.install(descriptor)
            report.record_install(result)
            if result.outcome == Outcome.FAILURE:
                self.logger.error(f"✗ {descriptor.name}: {result.message}")
            else:
                self.logger.info(f"✓ {descriptor.name}: {result.message}")
        return report

    def install(self, descriptor: ToolDescriptor) -> InstallResult:
        """Install a single tool. Never raises."""
        start = time.monotonic()
        method = None
        try:
            if descriptor.name in self.skip:
                return InstallResult(
                    tool_name=descriptor.name,
                    outcome=Outcome.SKIPPED,
                    message="skipped by configuration"
                )

            method, package = descriptor.resolve(self.method_overrides.get(descriptor.name))

            if self.is_installed(descriptor):
                self._link(descriptor)
                return InstallResult(
                    tool_name=descriptor.name,
                    method=method,
                    outcome=Outcome.SUCCESS,
                    message="already installed"
                )

            self.logger.info(f"Installing {descriptor.name} via {method.value}")
            self._handlers[method](descriptor, package)
            self._link(descriptor)
            self._check_binary(descriptor)

            return InstallResult(
                tool_name=descriptor.name,
                method=method,
                outcome=Outcome.SUCCESS,
                message=f"installed via {method.value}",
                duration_seconds=time.monotonic() - start
            )
        except Exception as e:
            self.logger.debug(f"Install of {descriptor.name} failed", exc_info=True)
            return InstallResult(
                tool_name=descriptor.name,
                method=method,
                outcome=Outcome.FAILURE,
                message=str(e),
                duration_seconds=time.monotonic() - start
            )

    def is_installed(self, descriptor: ToolDescriptor) -> bool:
        if descriptor.binary:
            return self.runner.which(descriptor.binary) is not None
        if descriptor.verify_cmd:
            return self.verifier.check(descriptor).outcome == Outcome.SUCCESS
        return False

    def _run(self, args: List[str], what: str, privileged: bool = False) -> None:
        result = self.runner.run(args, privileged=privileged)
        if not result.ok:
            raise InstallError(f"{what} failed (exit {result.returncode}): {result.output[:300]}")

    def _require(self, command: str) -> str:
        path = self.runner.which(command)
        if not path:
            raise InstallError(f"'{command}' is not available; install it first")
        return path

    # ── package managers ────────────────────────────────────────────────

    def _install_apt(self, descriptor: ToolDescriptor, package: str) -> None:
        if not self._apt_updated:
            self._run(["apt-get", "update", "-q"], "apt-get update", privileged=True)
            self._apt_updated = True
        self._run(
            ["env", "DEBIAN_FRONTEND=noninteractive", "apt-get", "install", "-y", "-q", package],
            f"apt-get install {package}",
            privileged=True
        )

    def _install_snap(self, descriptor: ToolDescriptor, package: str) -> None:
        self._require("snap")
        self._run(["snap", "install", package, "--classic"], f"snap install {package}", privileged=True)

    def _install_cargo(self, descriptor: ToolDescriptor, package: str) -> None:
        cargo = self._require("cargo")
        self._run([cargo, "install", "--locked", package], f"cargo install {package}")

    def _install_pipx(self, descriptor: ToolDescriptor, package: str) -> None:
        pipx = self._require("pipx")
        self._run([pipx, "install", package], f"pipx install {package}")

    def _install_go(self, descriptor: ToolDescriptor, package: str) -> None:
        go = self._require("go")
        self._run([go, "install", f"{package}@latest"], f"go install {package}")

    # ── downloads ───────────────────────────────────────────────────────

    def _install_release(self, descriptor: ToolDescriptor, package: str) -> None:
        if not descriptor.supports_arch(self.arch):
            raise UnsupportedArchitectureError(f"{descriptor.repo} publishes no release for {self.arch}")
        if self.runner.dry_run:
            self.logger.info(f"[dry-run] would download the latest {descriptor.repo} release")
            return
        tag = self.releases.latest_tag(descriptor.repo)
        asset = ReleaseAsset(
            repo=descriptor.repo,
            tag=tag,
            name=descriptor.render_asset(descriptor.asset_template, tag, self.arch)
        )

        with tempfile.TemporaryDirectory(prefix="multishell-") as tmp:
            tmp_path = Path(tmp)
            archive = self.releases.download(asset.url, tmp_path / asset.name)
            extracted = extract_archive(archive, tmp_path / "extract")

            if extracted is None:
                source = archive
            else:
                inner = descriptor.render_asset(
                    descriptor.archive_binary or descriptor.binary, tag, self.arch
                )
                source = extracted / inner
            if not source.is_file():
                raise InstallError(f"{source.name} not found in {asset.name}")

            target = self.bin_dir / (descriptor.binary or descriptor.name)
            self._run(
                ["install", "-m", "755", str(source), str(target)],
                f"install {target}",
                privileged=True
            )

            for rel, dest in descriptor.archive_extras.items():
                src = extracted / descriptor.render_asset(rel, tag, self.arch) if extracted else None
                if src is None or not src.exists():
                    raise InstallError(f"{rel} not found in {asset.name}")
                dest_path = self.home / dest
                if src.is_dir():
                    shutil.copytree(src, dest_path, dirs_exist_ok=True)
                else:
                    dest_path.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(src, dest_path)
                self.logger.debug(f"Copied {rel} to {dest_path}")

    def _install_script(self, descriptor: ToolDescriptor, package: str) -> None:
        if not descriptor.script_url:
            raise InstallError(f"{descriptor.name} has no install script URL")
        if self.runner.dry_run:
            self.logger.info(f"[dry-run] would run {descriptor.script_url}")
            return
        with tempfile.TemporaryDirectory(prefix="multishell-") as tmp:
            script = self.releases.download(descriptor.script_url, Path(tmp) / "install.sh")
            self._run(["sh", str(script), *descriptor.script_args], f"{descriptor.name} install script")

    def _install_font(self, descriptor: ToolDescriptor, package: str) -> None:
        if not descriptor.download_url:
            raise InstallError(f"{descriptor.name} has no download URL")
        if self.runner.dry_run:
            self.logger.info(f"[dry-run] would install font from {descriptor.download_url}")
            return
        font_dir = self.home / ".local" / "share" / "fonts" / descriptor.name
        with tempfile.TemporaryDirectory(prefix="multishell-") as tmp:
            tmp_path = Path(tmp)
            archive = self.releases.download(descriptor.download_url, tmp_path / "font.zip")
            extracted = extract_archive(archive, tmp_path / "extract")
            if extracted is None:
                raise InstallError(f"{archive.name} is not an archive")
            fonts = sorted(extracted.rglob("*.ttf"))
            if not fonts:
                raise InstallError(f"No .ttf files in {descriptor.download_url}")
            font_dir.mkdir(parents=True, exist_ok=True)
            for font in fonts:
                shutil.copy2(font, font_dir / font.name)
        self.logger.info(f"Installed {len(fonts)} font files to {font_dir}")
        self._run(["fc-cache", "-f"], "fc-cache")

    # ── post-install ────────────────────────────────────────────────────

    def _link(self, descriptor: ToolDescriptor) -> None:
        """Expose distro-renamed binaries under their upstream name (batcat -> bat)."""
        for name, target in descriptor.links.items():
            if self.runner.which(name):
                continue
            target_path = self.runner.which(target)
            if not target_path:
                self.logger.debug(f"Link target {target} not found; not linking {name}")
                continue
            link = self.bin_dir / name
            self._run(["ln", "-sf", target_path, str(link)], f"link {link}", privileged=True)
            self.logger.info(f"Linked {link} -> {target_path}")

    def _check_binary(self, descriptor: ToolDescriptor) -> None:
        if self.runner.dry_run or not descriptor.binary:
            return
        if not self.runner.which(descriptor.binary):
            raise InstallError(f"installed, but '{descriptor.binary}' is not on PATH")
