"""
Shell configuration models.
"""

from enum import Enum
from typing import Optional, Dict, List
from pydantic import BaseModel, Field


class ShellTarget(str, Enum):
    """Shells this program can configure."""
    BASH = "bash"
    ZSH = "zsh"
    NUSHELL = "nushell"


class Alias(BaseModel):
    """One entry of the cross-shell alias table."""
    name: str = Field(..., description="Alias name (e.g. ls)")
    command: str = Field(..., description="Replacement command line")
    tool: str = Field(..., description="Catalog tool providing the command")

    @property
    def binary(self) -> str:
        return self.command.split()[0]


class ShellProfile(BaseModel):
    """Structured content of a generated shell configuration."""
    shell: ShellTarget
    aliases: List[Alias] = Field(default_factory=list)
    path_entries: List[str] = Field(default_factory=list, description="Directories prepended to PATH")
    env: Dict[str, str] = Field(default_factory=dict, description="Exported environment variables")
    init_tools: List[str] = Field(
        default_factory=list,
        description="Tools with a shell init hook (starship, zoxide, atuin)"
    )
    plugins: List[str] = Field(default_factory=list, description="Plugin files sourced at startup")
    editor: Optional[str] = Field(None, description="Value for EDITOR/VISUAL")
