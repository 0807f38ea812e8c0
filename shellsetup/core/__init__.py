"""
Core modules for the multi-shell setup system.
"""

from .orchestrator import SetupOrchestrator
from .prober import EnvironmentProber
from .installer import ToolInstaller
from .configurators import BashConfigurator, ZshConfigurator, NushellConfigurator
from .verifier import Verifier

__all__ = [
    "SetupOrchestrator",
    "EnvironmentProber",
    "ToolInstaller",
    "BashConfigurator",
    "ZshConfigurator",
    "NushellConfigurator",
    "Verifier"
]
