"""
Tests for the tool catalog, descriptors and run report.
"""

import json

import pytest
from pydantic import ValidationError

from config.settings import CATALOG_PATH
from shellsetup.errors import CatalogError, ConfigurationError
from shellsetup.models.installation import InstallResult, Outcome, RunReport, ShellResult
from shellsetup.models.shell import ShellTarget
from shellsetup.models.tool import InstallMethod, ToolCatalog, ToolDescriptor


class TestToolDescriptor:
    """Descriptor validation and helpers."""

    def test_verify_cmd_defaults_to_version_flag(self):
        tool = ToolDescriptor(name="jq", method="apt", binary="jq")
        assert tool.verify_cmd == ["jq", "--version"]

    def test_explicit_verify_cmd_is_kept(self):
        tool = ToolDescriptor(name="tmux", method="apt", binary="tmux", verify_cmd=["tmux", "-V"])
        assert tool.verify_cmd == ["tmux", "-V"]

    def test_no_binary_means_no_default_verify(self):
        tool = ToolDescriptor(name="fonts", method="apt")
        assert tool.verify_cmd is None

    def test_release_requires_repo_and_template(self):
        with pytest.raises(ValidationError):
            ToolDescriptor(name="x", method="github_release", binary="x")

    def test_partial_arch_map_is_rejected(self):
        with pytest.raises(ValidationError, match="aarch64"):
            ToolDescriptor(
                name="x", method="github_release", binary="x",
                repo="o/x", asset_template="x-{arch}.tar.gz",
                arch_map={"x86_64": "amd64"}
            )

    def test_resolve_defaults_to_package_or_name(self):
        fd = ToolDescriptor(name="fd", method="apt", package="fd-find", binary="fd")
        jq = ToolDescriptor(name="jq", method="apt", binary="jq")
        assert fd.resolve() == (InstallMethod.APT, "fd-find")
        assert jq.resolve() == (InstallMethod.APT, "jq")

    def test_resolve_alternative(self):
        rg = ToolDescriptor(name="ripgrep", method="apt", binary="rg", alternatives={"cargo": "ripgrep"})
        assert rg.resolve(InstallMethod.CARGO) == (InstallMethod.CARGO, "ripgrep")

    def test_resolve_unavailable_method_raises(self):
        rg = ToolDescriptor(name="ripgrep", method="apt", binary="rg", alternatives={"cargo": "ripgrep"})
        with pytest.raises(ConfigurationError, match="apt, cargo"):
            rg.resolve(InstallMethod.SNAP)

    def test_render_asset_substitutes_vendor_arch(self, sample_catalog):
        lazydocker = sample_catalog.get("lazydocker")
        helix = sample_catalog.get("helix")

        assert lazydocker.render_asset(lazydocker.asset_template, "v0.23.1", "aarch64") == \
            "lazydocker_0.23.1_Linux_arm64.tar.gz"
        assert lazydocker.render_asset(lazydocker.asset_template, "v0.23.1", "x86_64") == \
            "lazydocker_0.23.1_Linux_x86_64.tar.gz"
        assert helix.render_asset(helix.asset_template, "25.01", "aarch64") == \
            "helix-25.01-aarch64-linux.tar.xz"


class TestToolCatalog:
    """Catalog loading and selection."""

    def test_shipped_catalog_loads(self):
        catalog = ToolCatalog.load(CATALOG_PATH)
        names = catalog.names()

        assert len(names) == len(set(names))
        for expected in ("zsh", "ripgrep", "bat", "exa", "helix", "lazydocker", "nushell", "starship"):
            assert expected in names

    def test_shipped_release_tools_cover_supported_arches(self):
        catalog = ToolCatalog.load(CATALOG_PATH)
        for tool in catalog.tools:
            if tool.method == InstallMethod.GITHUB_RELEASE:
                for arch in ("x86_64", "aarch64"):
                    assert tool.render_asset(tool.asset_template, "v1.0.0", arch)

    def test_duplicate_names_rejected(self, tmp_path):
        path = tmp_path / "tools.json"
        path.write_text(json.dumps({"tools": [
            {"name": "jq", "method": "apt"},
            {"name": "jq", "method": "snap"},
        ]}))
        with pytest.raises(CatalogError, match="Duplicate"):
            ToolCatalog.load(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(CatalogError):
            ToolCatalog.load(tmp_path / "missing.json")

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "tools.json"
        path.write_text("{not json")
        with pytest.raises(CatalogError):
            ToolCatalog.load(path)

    def test_select_preserves_catalog_order(self, sample_catalog):
        selected = sample_catalog.select(["exa", "jq"])
        assert [t.name for t in selected] == ["jq", "exa"]

    def test_select_unknown_tool(self, sample_catalog):
        with pytest.raises(ConfigurationError, match="nope"):
            sample_catalog.select(["jq", "nope"])

    def test_get_unknown_tool(self, sample_catalog):
        with pytest.raises(KeyError):
            sample_catalog.get("nope")


class TestRunReport:
    """Report accumulation and summary."""

    def test_summary_groups_outcomes(self):
        report = RunReport()
        report.record_install(InstallResult(tool_name="jq", outcome=Outcome.SUCCESS))
        report.record_install(InstallResult(tool_name="bat", outcome=Outcome.FAILURE, message="boom"))
        report.record_install(InstallResult(tool_name="exa", outcome=Outcome.SKIPPED))
        report.record_shell(ShellResult(shell=ShellTarget.ZSH, outcome=Outcome.SUCCESS))
        report.complete()

        summary = report.summary()

        assert summary["installed"] == ["jq"]
        assert summary["install_failed"] == ["bat"]
        assert summary["install_skipped"] == ["exa"]
        assert summary["shells_configured"] == ["zsh"]
        assert summary["duration_seconds"] >= 0

    def test_summary_before_completion_has_no_duration(self):
        assert RunReport().summary()["duration_seconds"] is None
