"""
Tests for logging setup.
"""

import logging
from datetime import datetime

import pytest

from shellsetup.utils.logging import setup_root_logger, timestamped_log_file


def test_timestamped_log_file(tmp_path):
    path = timestamped_log_file(tmp_path, now=datetime(2025, 3, 4, 5, 6, 7))
    assert path == tmp_path / "setup_20250304_050607.log"


@pytest.mark.usefixtures("restore_root_logger")
class TestSetupRootLogger:
    """Handler wiring."""

    def test_file_records_debug_while_console_stays_at_level(self, tmp_path):
        log_file = tmp_path / "logs" / "setup.log"
        root = setup_root_logger(log_file, level="WARNING")

        logging.getLogger("shellsetup.test").debug("apt-get output detail")
        for handler in root.handlers:
            handler.flush()

        console, file_handler = root.handlers
        assert console.level == logging.WARNING
        assert file_handler.level == logging.DEBUG
        assert "apt-get output detail" in log_file.read_text()

    def test_repeated_setup_replaces_handlers(self, tmp_path):
        setup_root_logger(level="INFO")
        root = setup_root_logger(tmp_path / "setup.log", level="INFO")
        assert len(root.handlers) == 2
