"""
Verifier: runs each tool's version/help command and reports pass/fail.
"""

import logging
import re
from typing import List

from .runner import CommandRunner
from ..models.installation import Outcome, RunReport, VerificationResult
from ..models.tool import ToolDescriptor


class Verifier:
    """Checks installed tools without ever aborting the run."""

    def __init__(self, runner: CommandRunner, timeout: float = 15.0):
        self.logger = logging.getLogger(__name__)
        self.runner = runner
        self.timeout = timeout

    def check(self, descriptor: ToolDescriptor) -> VerificationResult:
        """Run the descriptor's verification command."""
        if not descriptor.verify_cmd:
            return VerificationResult(
                tool_name=descriptor.name,
                outcome=Outcome.SKIPPED,
                output="no verification command"
            )

        result = self.runner.run(descriptor.verify_cmd, timeout=self.timeout)
        first_line = result.output.splitlines()[0] if result.output else ""

        if not result.ok:
            return VerificationResult(
                tool_name=descriptor.name,
                outcome=Outcome.FAILURE,
                output=first_line or None,
                error=f"{' '.join(descriptor.verify_cmd)} exited with {result.returncode}"
            )

        if descriptor.verify_pattern:
            pattern = re.compile(descriptor.verify_pattern)
            matched = next(
                (line for line in f"{result.stdout}\n{result.stderr}".splitlines() if pattern.search(line)),
                None
            )
            if matched is None:
                return VerificationResult(
                    tool_name=descriptor.name,
                    outcome=Outcome.FAILURE,
                    error=f"output does not match {descriptor.verify_pattern!r}"
                )
            first_line = matched.strip()

        return VerificationResult(
            tool_name=descriptor.name,
            outcome=Outcome.SUCCESS,
            output=first_line or None
        )

    def verify_all(self, descriptors: List[ToolDescriptor], report: RunReport) -> RunReport:
        self.logger.info("Starting verification tests...")
        for descriptor in descriptors:
            result = report.record_verification(self.check(descriptor))
            if result.outcome == Outcome.SUCCESS:
                self.logger.info(f"✓ {descriptor.name} {result.output or ''}".rstrip())
            elif result.outcome == Outcome.FAILURE:
                self.logger.warning(f"✗ {descriptor.name}: {result.error}")
            else:
                self.logger.debug(f"- {descriptor.name}: {result.output}")
        return report
