"""
Exception hierarchy for the setup pipeline.

Environment errors are fatal and abort the run. Install, download and
configuration errors raised inside a phase are caught there and recorded
in the run report.
"""


class SetupError(Exception):
    """Base class for all setup errors."""


class EnvironmentCheckError(SetupError):
    """The host does not satisfy the requirements to run setup."""


class MissingPrerequisiteError(EnvironmentCheckError):
    """A required command is not available on PATH."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Required command '{command}' not found. Please install it first.")


class PrivilegeError(EnvironmentCheckError):
    """The invoking user cannot escalate privileges."""


class UnwritableDirectoryError(EnvironmentCheckError):
    """A directory setup must write to is not writable."""


class CatalogError(SetupError):
    """The tool catalog is malformed."""


class ConfigurationError(SetupError):
    """Invalid settings or per-tool configuration choice."""


class InstallError(SetupError):
    """A single tool failed to install."""


class DownloadError(InstallError):
    """A release lookup or file download failed."""


class UnsupportedArchitectureError(InstallError):
    """A release tool publishes no asset for the host architecture."""
