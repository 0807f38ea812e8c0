"""
Configuration settings for the multi-shell setup system.
"""

import os
import pwd
from typing import Optional, Dict, List
from pathlib import Path
from pydantic import BaseModel, Field, validator
from pydantic_settings import BaseSettings

from shellsetup.models.tool import InstallMethod


CATALOG_PATH = Path(__file__).parent / "tools.json"


def real_home() -> Path:
    """Return the invoking user's home (the sudo caller if present)."""
    sudo_user = os.environ.get("SUDO_USER")
    if sudo_user:
        try:
            return Path(pwd.getpwnam(sudo_user).pw_dir)
        except KeyError:
            pass
    return Path.home()


class ProbeConfig(BaseModel):
    """Environment check configuration."""
    required_commands: List[str] = Field(
        default_factory=lambda: ["curl", "groups"],
        description="Commands that must be on PATH"
    )
    admin_groups: List[str] = Field(
        default_factory=lambda: ["wheel", "sudo", "root", "admin"],
        description="Groups granting administrative rights"
    )
    supported_os_ids: List[str] = Field(
        default_factory=lambda: ["ubuntu", "debian"],
        description="OS identifiers the tool catalog targets"
    )
    os_release_path: Path = Field(default=Path("/etc/os-release"))


class InstallConfig(BaseModel):
    """Tool installation configuration."""
    catalog_path: Path = Field(default=CATALOG_PATH, description="Path to the tool catalog")
    bin_dir: Path = Field(default=Path("/usr/local/bin"), description="Destination for downloaded binaries")
    method_overrides: Dict[str, InstallMethod] = Field(
        default_factory=dict,
        description="Per-tool install method choice (tool name -> method)"
    )
    only: List[str] = Field(default_factory=list, description="Install only these tools")
    skip: List[str] = Field(default_factory=list, description="Never install these tools")
    github_token: Optional[str] = Field(None, description="GitHub token (falls back to GITHUB_TOKEN)")
    http_timeout: Optional[float] = Field(default=60.0, description="Timeout for API lookups and downloads")

    @validator('catalog_path')
    def validate_catalog_exists(cls, v):
        if not v.exists():
            raise ValueError(f"Tool catalog not found: {v}")
        return v


class ShellConfig(BaseModel):
    """Shell configuration targets."""
    home: Path = Field(default_factory=real_home, description="Home directory receiving dotfiles")
    backup_existing: bool = Field(default=True, description="Back up an existing .bashrc")
    zsh_plugin_dirs: List[Path] = Field(
        default_factory=lambda: [Path("/usr/share"), Path("/usr/share/zsh/plugins")],
        description="Directories searched for zsh plugins"
    )
    editor: str = Field(default="hx", description="EDITOR for generated configs")
    env: Dict[str, str] = Field(default_factory=dict, description="Extra environment variables exported by every shell")

    @property
    def config_dir(self) -> Path:
        return self.home / ".config"


class VerifyConfig(BaseModel):
    """Verification configuration."""
    timeout_seconds: float = Field(default=15.0, description="Timeout per verification command")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO", description="Console logging level")
    log_dir: Path = Field(default_factory=Path.cwd, description="Directory for the run log")
    file_prefix: str = Field(default="setup", description="Log file name prefix")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format"
    )

    @validator('level')
    def validate_level(cls, v):
        if v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"Unknown log level: {v}")
        return v.upper()


class Settings(BaseSettings):
    """Main application settings."""
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    install: InstallConfig = Field(default_factory=InstallConfig)
    shells: ShellConfig = Field(default_factory=ShellConfig)
    verify: VerifyConfig = Field(default_factory=VerifyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Operational settings
    dry_run: bool = Field(default=False, description="Log commands instead of running them")

    class Config:
        env_prefix = "MULTISHELL_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_nested_delimiter = "__"
        extra = "ignore"  # Ignore extra fields from environment
