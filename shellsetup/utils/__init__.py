"""
Utility modules for the multi-shell setup system.
"""

from .logging import setup_root_logger, timestamped_log_file

__all__ = ["setup_root_logger", "timestamped_log_file"]
