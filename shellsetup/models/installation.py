"""
Installation, configuration and verification result models.
"""

from enum import Enum
from typing import Optional, Dict, Any, List
from datetime import datetime
from pydantic import BaseModel, Field

from .shell import ShellTarget
from .tool import InstallMethod


class Outcome(str, Enum):
    """Outcome of a single step."""
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


class InstallResult(BaseModel):
    """Result of installing one tool."""
    tool_name: str = Field(..., description="Tool name")
    method: Optional[InstallMethod] = Field(None, description="Effective install method")
    outcome: Outcome = Field(..., description="Install outcome")
    message: Optional[str] = Field(None, description="Detail or error message")
    duration_seconds: Optional[float] = Field(None, description="Install duration")

    class Config:
        json_schema_extra = {
            "example": {
                "tool_name": "ripgrep",
                "method": "apt",
                "outcome": "success",
                "duration_seconds": 3.1
            }
        }


class ShellResult(BaseModel):
    """Result of configuring one shell."""
    shell: ShellTarget
    outcome: Outcome
    files_written: List[str] = Field(default_factory=list)
    backup_path: Optional[str] = None
    message: Optional[str] = None


class VerificationResult(BaseModel):
    """Result of running a tool's verification command."""
    tool_name: str = Field(..., description="Tool name")
    outcome: Outcome = Field(..., description="Verification outcome")
    output: Optional[str] = Field(None, description="First line of command output")
    error: Optional[str] = Field(None, description="Error message if failed")


class RunReport(BaseModel):
    """
    Ordered record of everything that happened during a run.

    One instance is created by the orchestrator and passed through each
    phase, which appends its results and hands it back.
    """
    started_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None
    installs: List[InstallResult] = Field(default_factory=list)
    shells: List[ShellResult] = Field(default_factory=list)
    verifications: List[VerificationResult] = Field(default_factory=list)

    def record_install(self, result: InstallResult) -> InstallResult:
        self.installs.append(result)
        return result

    def record_shell(self, result: ShellResult) -> ShellResult:
        self.shells.append(result)
        return result

    def record_verification(self, result: VerificationResult) -> VerificationResult:
        self.verifications.append(result)
        return result

    @property
    def successful_tools(self) -> List[str]:
        return [r.tool_name for r in self.installs if r.outcome == Outcome.SUCCESS]

    @property
    def failed_tools(self) -> List[str]:
        return [r.tool_name for r in self.installs if r.outcome == Outcome.FAILURE]

    @property
    def failed_shells(self) -> List[str]:
        return [r.shell.value for r in self.shells if r.outcome == Outcome.FAILURE]

    @property
    def failed_verifications(self) -> List[str]:
        return [r.tool_name for r in self.verifications if r.outcome == Outcome.FAILURE]

    def complete(self) -> None:
        """Mark the run as complete."""
        self.completed_at = datetime.utcnow()

    def summary(self) -> Dict[str, Any]:
        """Plain dictionary used for the log summary and the JSON file."""
        duration = None
        if self.completed_at:
            duration = (self.completed_at - self.started_at).total_seconds()
        return {
            "started_at": self.started_at.isoformat(),
            "duration_seconds": duration,
            "installed": self.successful_tools,
            "install_failed": self.failed_tools,
            "install_skipped": [r.tool_name for r in self.installs if r.outcome == Outcome.SKIPPED],
            "shells_configured": [r.shell.value for r in self.shells if r.outcome == Outcome.SUCCESS],
            "shells_failed": self.failed_shells,
            "verified": [r.tool_name for r in self.verifications if r.outcome == Outcome.SUCCESS],
            "verify_failed": self.failed_verifications,
        }
