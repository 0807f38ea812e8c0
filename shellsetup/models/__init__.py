"""
Data models for the multi-shell setup system.
"""

from .tool import InstallMethod, ToolCatalog, ToolDescriptor, SUPPORTED_ARCHES
from .shell import Alias, ShellProfile, ShellTarget
from .installation import (
    InstallResult,
    Outcome,
    RunReport,
    ShellResult,
    VerificationResult,
)

__all__ = [
    "InstallMethod",
    "ToolCatalog",
    "ToolDescriptor",
    "SUPPORTED_ARCHES",
    "Alias",
    "ShellProfile",
    "ShellTarget",
    "InstallResult",
    "Outcome",
    "RunReport",
    "ShellResult",
    "VerificationResult",
]
