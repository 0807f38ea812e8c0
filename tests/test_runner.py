"""
Tests for the command runner.
"""

from shellsetup.core.runner import CommandRunner


class TestCommandRunner:
    """Subprocess wrapping, escalation and PATH handling."""

    def test_captures_output(self):
        result = CommandRunner().run(["sh", "-c", "echo hello"])
        assert result.ok
        assert result.stdout == "hello\n"

    def test_nonzero_exit(self):
        result = CommandRunner().run(["sh", "-c", "echo oops >&2; exit 3"])
        assert not result.ok
        assert result.returncode == 3
        assert result.output == "oops"

    def test_missing_executable(self):
        result = CommandRunner().run(["multishell-no-such-command"])
        assert result.returncode == 127

    def test_timeout(self):
        result = CommandRunner().run(["sh", "-c", "sleep 5"], timeout=0.2)
        assert result.returncode == 124

    def test_dry_run_executes_nothing(self, tmp_path):
        marker = tmp_path / "marker"
        result = CommandRunner(dry_run=True).run(["touch", str(marker)])
        assert result.ok
        assert not marker.exists()

    def test_privileged_prefix(self):
        runner = CommandRunner(escalation=["sudo"], dry_run=True)
        assert runner.run(["apt-get", "update"], privileged=True).args == ["sudo", "apt-get", "update"]
        assert runner.run(["apt-get", "update"]).args == ["apt-get", "update"]

    def test_su_takes_one_command_string(self):
        runner = CommandRunner(escalation=["su", "-c"], dry_run=True)
        result = runner.run(["install", "-m", "755", "/tmp/a b", "/usr/local/bin/x"], privileged=True)
        assert result.args == ["su", "-c", "install -m 755 '/tmp/a b' /usr/local/bin/x"]

    def test_which_searches_extra_path(self, tmp_path):
        tool = tmp_path / "bin" / "multishell-test-tool"
        tool.parent.mkdir()
        tool.write_text("#!/bin/sh\n")
        tool.chmod(0o755)

        assert CommandRunner().which("multishell-test-tool") is None
        assert CommandRunner(extra_path=[tool.parent]).which("multishell-test-tool") == str(tool)

    def test_children_see_extra_path(self, tmp_path):
        tool = tmp_path / "bin" / "multishell-test-tool"
        tool.parent.mkdir()
        tool.write_text("#!/bin/sh\necho found\n")
        tool.chmod(0o755)

        result = CommandRunner(extra_path=[tool.parent]).run(["sh", "-c", "multishell-test-tool"])
        assert result.stdout == "found\n"
