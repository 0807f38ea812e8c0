"""
Logging configuration and utilities.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional


DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def timestamped_log_file(log_dir: Path, prefix: str = "setup",
                         now: Optional[datetime] = None) -> Path:
    """Return the per-run log path, e.g. setup_20240101_120000.log."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return Path(log_dir) / f"{prefix}_{stamp}.log"


def setup_root_logger(log_file: Optional[Path] = None,
                      level: str = "INFO",
                      format_string: Optional[str] = None) -> logging.Logger:
    """
    Set up the root logger for the application.

    The console follows `level`; the run log always records DEBUG so a
    failed install can be diagnosed after the fact.

    Args:
        log_file: Optional log file path
        level: Console logging level
        format_string: Log format string

    Returns:
        The root logger
    """
    root_logger = logging.getLogger()

    # Clear any existing handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
        ))
        root_logger.addHandler(file_handler)

    # Set levels for third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    return root_logger
