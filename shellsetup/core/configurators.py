"""
Shell configurators: one per supported shell, each writing its own files.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Type

from .aliases import AliasUnifier
from .file_manager import ConfigFileManager
from .templates import (
    BASH_PROFILE_SOURCE_LINE,
    is_generated,
    render_bashrc,
    render_nu_config,
    render_nu_env,
    render_starship_toml,
    render_zshrc,
)
from ..models.installation import Outcome, ShellResult
from ..models.shell import ShellProfile, ShellTarget


INIT_TOOLS = ("starship", "zoxide", "atuin")
PATH_ENTRIES = [".local/bin", ".cargo/bin", "go/bin"]
ZSH_PLUGINS = ("zsh-autosuggestions", "zsh-syntax-highlighting")


class ShellConfigurator:
    """Base class: builds a ShellProfile and writes it through templates."""

    shell: ShellTarget

    def __init__(self,
                 home: Path,
                 files: ConfigFileManager,
                 aliases: AliasUnifier,
                 catalog_tools: Sequence[str],
                 editor: Optional[str] = "hx",
                 env: Optional[Dict[str, str]] = None):
        self.logger = logging.getLogger(__name__)
        self.home = Path(home)
        self.files = files
        self.aliases = aliases
        self.catalog_tools = list(catalog_tools)
        self.editor = editor
        self.env = dict(env or {})

    @property
    def config_dir(self) -> Path:
        return self.home / ".config"

    def build_profile(self) -> ShellProfile:
        return ShellProfile(
            shell=self.shell,
            aliases=self.aliases.build(self.catalog_tools),
            path_entries=list(PATH_ENTRIES),
            init_tools=[t for t in INIT_TOOLS if t in self.catalog_tools],
            env=dict(self.env),
            editor=self.editor,
        )

    def configure(self) -> ShellResult:
        """Write this shell's configuration. Never raises."""
        self.logger.info(f"Configuring {self.shell.value}...")
        try:
            profile = self.build_profile()
            alias_block = self.aliases.render(self.shell, profile.aliases)
            result = ShellResult(shell=self.shell, outcome=Outcome.SUCCESS)
            self.write(profile, alias_block, result)
            if "starship" in profile.init_tools:
                result.files_written.append(str(self.write_prompt_config()))
            result.message = f"{len(profile.aliases)} aliases"
            self.logger.info(f"✓ {self.shell.value} configured ({result.message})")
            return result
        except Exception as e:
            self.logger.error(f"✗ {self.shell.value} configuration failed: {e}")
            self.logger.debug("Configuration traceback", exc_info=True)
            return ShellResult(shell=self.shell, outcome=Outcome.FAILURE, message=str(e))

    def write(self, profile: ShellProfile, alias_block: str, result: ShellResult) -> None:
        raise NotImplementedError

    def write_prompt_config(self) -> Path:
        """Shared starship prompt, identical for every shell."""
        return self.files.write(self.config_dir / "starship.toml", render_starship_toml())


class BashConfigurator(ShellConfigurator):
    """Backs up ~/.bashrc, writes a new one and makes ~/.bash_profile source it."""

    shell = ShellTarget.BASH

    def __init__(self, *args, backup_existing: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.backup_existing = backup_existing

    def write(self, profile: ShellProfile, alias_block: str, result: ShellResult) -> None:
        bashrc = self.home / ".bashrc"
        if self.backup_existing and bashrc.exists():
            # A file we generated ourselves is not worth keeping
            if not is_generated(bashrc.read_text(encoding="utf-8", errors="replace")):
                backup = self.files.backup(bashrc)
                result.backup_path = str(backup) if backup else None

        result.files_written.append(str(self.files.write(bashrc, render_bashrc(profile, alias_block))))

        bash_profile = self.home / ".bash_profile"
        if self.files.ensure_line(bash_profile, BASH_PROFILE_SOURCE_LINE, marker=".bashrc"):
            result.files_written.append(str(bash_profile))


class ZshConfigurator(ShellConfigurator):
    """Writes a fresh ~/.zshrc sourcing the plugins already on disk."""

    shell = ShellTarget.ZSH

    def __init__(self, *args, plugin_dirs: Sequence[Path] = (), **kwargs):
        super().__init__(*args, **kwargs)
        self.plugin_dirs = [Path(p) for p in plugin_dirs]

    def find_plugins(self) -> List[str]:
        found = []
        for plugin in ZSH_PLUGINS:
            for base in self.plugin_dirs:
                candidate = base / plugin / f"{plugin}.zsh"
                if candidate.is_file():
                    found.append(str(candidate))
                    break
            else:
                self.logger.debug(f"zsh plugin {plugin} not found in {self.plugin_dirs}")
        return found

    def build_profile(self) -> ShellProfile:
        profile = super().build_profile()
        profile.plugins = self.find_plugins()
        return profile

    def write(self, profile: ShellProfile, alias_block: str, result: ShellResult) -> None:
        zshrc = self.files.write(self.home / ".zshrc", render_zshrc(profile, alias_block))
        result.files_written.append(str(zshrc))


class NushellConfigurator(ShellConfigurator):
    """Writes fresh env.nu and config.nu under ~/.config/nushell."""

    shell = ShellTarget.NUSHELL

    def write(self, profile: ShellProfile, alias_block: str, result: ShellResult) -> None:
        nu_dir = self.config_dir / "nushell"
        env_nu = self.files.write(nu_dir / "env.nu", render_nu_env(profile, alias_block))
        config_nu = self.files.write(nu_dir / "config.nu", render_nu_config(profile))
        result.files_written.extend([str(env_nu), str(config_nu)])


CONFIGURATORS: Dict[ShellTarget, Type[ShellConfigurator]] = {
    ShellTarget.BASH: BashConfigurator,
    ShellTarget.ZSH: ZshConfigurator,
    ShellTarget.NUSHELL: NushellConfigurator,
}
