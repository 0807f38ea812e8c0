"""
Setup orchestrator: environment check → install tools → configure shells →
verify → summary.
"""

import logging
from pathlib import Path
from typing import List, Optional

from config.settings import Settings
from .aliases import AliasUnifier
from .configurators import CONFIGURATORS, BashConfigurator, ShellConfigurator, ZshConfigurator
from .file_manager import ConfigFileManager
from .installer import ToolInstaller, validate_overrides
from .prober import EnvironmentProber, SystemInfo
from .runner import CommandRunner
from .verifier import Verifier
from ..integrations.github_releases import GitHubReleasesClient
from ..models.installation import RunReport
from ..models.shell import ShellTarget
from ..models.tool import ToolCatalog


def user_bin_dirs(home: Path) -> List[Path]:
    """Per-user install locations of cargo, go, pipx and vendor scripts."""
    return [home / ".local" / "bin", home / ".cargo" / "bin", home / "go" / "bin"]


class SetupOrchestrator:
    """Runs the setup pipeline once and returns its report."""

    def __init__(self,
                 settings: Settings,
                 catalog: ToolCatalog,
                 runner: Optional[CommandRunner] = None,
                 releases: Optional[GitHubReleasesClient] = None,
                 prober: Optional[EnvironmentProber] = None,
                 skip_tools: bool = False,
                 shell: Optional[ShellTarget] = None,
                 test_only: bool = False,
                 log_file: Optional[Path] = None):
        """
        Initialize the orchestrator.

        Args:
            settings: Application settings
            catalog: Tool catalog
            runner: Command runner (built from settings if omitted)
            releases: GitHub releases client (built from settings if omitted)
            prober: Environment prober (built from settings if omitted)
            skip_tools: Skip the tool installation phase
            shell: Configure only this shell
            test_only: Only run verification
            log_file: Run log; its summary JSON is written next to it
        """
        self.logger = logging.getLogger(__name__)
        self.settings = settings
        self.catalog = catalog
        self.skip_tools = skip_tools
        self.shell = shell
        self.test_only = test_only
        self.log_file = log_file

        home = settings.shells.home
        self.runner = runner or CommandRunner(
            extra_path=user_bin_dirs(home) + [settings.install.bin_dir],
            dry_run=settings.dry_run
        )
        self.releases = releases or GitHubReleasesClient(
            github_token=settings.install.github_token,
            timeout=settings.install.http_timeout
        )
        self.prober = prober or EnvironmentProber(
            runner=self.runner,
            required_commands=settings.probe.required_commands,
            admin_groups=settings.probe.admin_groups,
            supported_os_ids=settings.probe.supported_os_ids,
            os_release_path=settings.probe.os_release_path
        )
        self.files = ConfigFileManager(dry_run=settings.dry_run)
        self.verifier = Verifier(self.runner, timeout=settings.verify.timeout_seconds)
        self.aliases = AliasUnifier()

    @property
    def installing(self) -> bool:
        return not (self.skip_tools or self.test_only)

    def run(self) -> RunReport:
        """
        Main orchestration method.

        Raises:
            EnvironmentCheckError: when the host fails a fatal check
            ConfigurationError: when the settings are inconsistent

        Returns:
            The completed run report
        """
        self.logger.info("Multi-Shell Setup started")
        report = RunReport()
        descriptors = self.catalog.select(self.settings.install.only)
        if self.installing:
            validate_overrides(self.catalog.tools, self.settings.install.method_overrides)

        writable = [self.settings.logging.log_dir]
        if not self.test_only:
            writable.append(self.settings.shells.home)
        info = self.prober.probe(writable_dirs=writable, check_privileges=not self.test_only)
        self.runner.escalation = list(info.escalation)

        if self.installing:
            self._build_installer(info).install_all(descriptors, report)
        else:
            self.logger.info("Skipping tool installation phase")

        if not self.test_only:
            self.logger.info("Starting shell configuration phase...")
            for target in self.shell_targets():
                report.record_shell(self._build_configurator(target).configure())
        else:
            self.logger.info("Skipping shell configuration phase")

        self.verifier.verify_all(descriptors, report)
        report.complete()
        self._log_summary(report)

        if self.log_file:
            self.files.save_json(self.log_file.with_suffix(".summary.json"), report.summary())
        return report

    def shell_targets(self) -> List[ShellTarget]:
        return [self.shell] if self.shell else list(ShellTarget)

    def _build_installer(self, info: SystemInfo) -> ToolInstaller:
        install = self.settings.install
        return ToolInstaller(
            runner=self.runner,
            releases=self.releases,
            verifier=self.verifier,
            arch=info.arch,
            bin_dir=install.bin_dir,
            home=self.settings.shells.home,
            method_overrides=install.method_overrides,
            skip=install.skip
        )

    def _build_configurator(self, target: ShellTarget) -> ShellConfigurator:
        shells = self.settings.shells
        kwargs = {}
        if CONFIGURATORS[target] is BashConfigurator:
            kwargs["backup_existing"] = shells.backup_existing
        elif CONFIGURATORS[target] is ZshConfigurator:
            kwargs["plugin_dirs"] = shells.zsh_plugin_dirs
        return CONFIGURATORS[target](
            shells.home,
            self.files,
            self.aliases,
            self.catalog.names(),
            editor=shells.editor,
            env=shells.env,
            **kwargs
        )

    def _log_summary(self, report: RunReport) -> None:
        summary = report.summary()
        self.logger.info("=" * 60)
        self.logger.info("SUMMARY")
        self.logger.info("=" * 60)
        if summary["installed"]:
            self.logger.info(f"Successfully installed tools: {' '.join(summary['installed'])}")
        if summary["install_failed"]:
            self.logger.warning(f"Failed to install: {' '.join(summary['install_failed'])}")
        if summary["shells_configured"]:
            self.logger.info(f"Configured shells: {' '.join(summary['shells_configured'])}")
        if summary["shells_failed"]:
            self.logger.warning(f"Shell configuration failed: {' '.join(summary['shells_failed'])}")
        self.logger.info(
            f"Verification: {len(summary['verified'])} passed, {len(summary['verify_failed'])} failed"
        )
        if summary["verify_failed"]:
            self.logger.warning(f"Failed verification: {' '.join(summary['verify_failed'])}")
        self.logger.info(f"Duration: {summary['duration_seconds']:.2f} seconds")
        self.logger.info("=" * 60)
        self.logger.info("Next steps:")
        self.logger.info("1. Restart your terminal or run: source ~/.bashrc")
        self.logger.info("2. Try the new tools: exa, bat, zoxide, helix, etc.")
        self.logger.info("3. Switch shells: zsh, nu (nushell)")
        if self.log_file:
            self.logger.info(f"4. Check the log file: {self.log_file}")
