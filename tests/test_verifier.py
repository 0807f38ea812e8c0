"""
Tests for the verifier.
"""

from shellsetup.core.verifier import Verifier
from shellsetup.models.installation import Outcome, RunReport
from shellsetup.models.tool import ToolDescriptor
from tests.fakes import FakeRunner


FONT = ToolDescriptor(
    name="meslo-nerd-font",
    method="font",
    download_url="https://example.invalid/Meslo.zip",
    verify_cmd=["fc-list", ":family"],
    verify_pattern="(?i)MesloLGS Nerd Font",
)


class TestVerifier:
    """Per-tool verification outcomes."""

    def test_success_keeps_first_line(self):
        runner = FakeRunner(outputs={"jq": "jq-1.7.1\nextra\n"})
        result = Verifier(runner).check(ToolDescriptor(name="jq", method="apt", binary="jq"))

        assert result.outcome == Outcome.SUCCESS
        assert result.output == "jq-1.7.1"
        assert runner.commands == [["jq", "--version"]]

    def test_nonzero_exit_is_failure(self):
        runner = FakeRunner(failing=[("jq",)])
        result = Verifier(runner).check(ToolDescriptor(name="jq", method="apt", binary="jq"))

        assert result.outcome == Outcome.FAILURE
        assert "exited with 1" in result.error

    def test_pattern_match_keeps_matching_line(self):
        runner = FakeRunner(outputs={"fc-list": "DejaVu Sans\n  MesloLGS Nerd Font Mono \n"})
        result = Verifier(runner).check(FONT)

        assert result.outcome == Outcome.SUCCESS
        assert result.output == "MesloLGS Nerd Font Mono"

    def test_pattern_mismatch(self):
        runner = FakeRunner(outputs={"fc-list": "DejaVu Sans\n"})
        result = Verifier(runner).check(FONT)

        assert result.outcome == Outcome.FAILURE
        assert "MesloLGS" in result.error

    def test_no_command_is_skipped(self):
        runner = FakeRunner()
        result = Verifier(runner).check(ToolDescriptor(name="meta", method="apt"))

        assert result.outcome == Outcome.SKIPPED
        assert runner.calls == []

    def test_verify_all_records_every_tool(self, sample_catalog):
        runner = FakeRunner(failing=[("exa",)])
        report = Verifier(runner).verify_all(sample_catalog.select(["jq", "exa"]), RunReport())

        assert [r.tool_name for r in report.verifications] == ["jq", "exa"]
        assert report.failed_verifications == ["exa"]
