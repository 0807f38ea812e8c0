"""
Shared test fixtures.
"""

import logging
from pathlib import Path

import pytest

from config.settings import Settings
from shellsetup.core.prober import EnvironmentProber
from shellsetup.core.runner import CommandRunner
from shellsetup.models.tool import ToolCatalog
from tests.fakes import FakeRunner


SAMPLE_TOOLS = [
    {"name": "jq", "method": "apt", "binary": "jq"},
    {"name": "bat", "method": "apt", "binary": "bat", "links": {"bat": "batcat"},
     "alternatives": {"cargo": "bat"}},
    {"name": "exa", "method": "apt", "binary": "exa"},
    {"name": "bash-completion", "method": "apt", "verify_cmd": ["dpkg", "-s", "bash-completion"]},
    {"name": "starship", "method": "script", "binary": "starship",
     "script_url": "https://example.invalid/starship.sh", "script_args": ["-y"]},
    {"name": "zoxide", "method": "script", "binary": "zoxide",
     "script_url": "https://example.invalid/zoxide.sh"},
    {"name": "lazydocker", "method": "github_release", "binary": "lazydocker",
     "repo": "jesseduffield/lazydocker",
     "asset_template": "lazydocker_{version}_Linux_{arch}.tar.gz",
     "archive_binary": "lazydocker",
     "arch_map": {"x86_64": "x86_64", "aarch64": "arm64"}},
    {"name": "helix", "method": "github_release", "binary": "hx",
     "repo": "helix-editor/helix",
     "asset_template": "helix-{tag}-{arch}-linux.tar.xz",
     "archive_binary": "helix-{tag}-{arch}-linux/hx",
     "archive_extras": {"helix-{tag}-{arch}-linux/runtime": ".config/helix/runtime"}},
]


@pytest.fixture
def sample_catalog() -> ToolCatalog:
    return ToolCatalog(tools=SAMPLE_TOOLS)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A temporary home directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    return home_dir


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "logs"
    directory.mkdir()
    return directory


@pytest.fixture
def os_release(tmp_path: Path) -> Path:
    path = tmp_path / "os-release"
    path.write_text('ID=ubuntu\nID_LIKE=debian\nPRETTY_NAME="Ubuntu 24.04 LTS"\n')
    return path


@pytest.fixture
def settings(home: Path, log_dir: Path, os_release: Path, tmp_path: Path) -> Settings:
    plugin_root = tmp_path / "plugins"
    plugin_root.mkdir()
    return Settings(
        probe={"os_release_path": str(os_release)},
        install={"bin_dir": str(tmp_path / "bin")},
        shells={"home": str(home), "zsh_plugin_dirs": [str(plugin_root)]},
        logging={"log_dir": str(log_dir)},
    )


@pytest.fixture
def runner() -> FakeRunner:
    """A runner on a healthy host: prerequisites present, user in sudo."""
    return FakeRunner(
        available={"curl", "groups", "sudo"},
        outputs={"groups": "me : me sudo"},
    )


@pytest.fixture
def make_prober(os_release: Path):
    def factory(runner: CommandRunner, machine: str = "x86_64", euid: int = 1000, **kwargs):
        return EnvironmentProber(
            runner=runner,
            os_release_path=os_release,
            machine=lambda: machine,
            euid=lambda: euid,
            **kwargs
        )
    return factory


@pytest.fixture
def restore_root_logger():
    """Put back the root handlers that setup_root_logger replaces."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
