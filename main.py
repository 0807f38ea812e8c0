#!/usr/bin/env python3
"""
Main entry point for Multi-Shell Setup - installs modern terminal utilities
and configures bash, zsh and nushell with consistent aliases.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from shellsetup.core.orchestrator import SetupOrchestrator
from shellsetup.errors import ConfigurationError, SetupError, UnwritableDirectoryError
from shellsetup.models.shell import ShellTarget
from shellsetup.models.tool import ToolCatalog
from shellsetup.utils.logging import setup_root_logger, timestamped_log_file
from config.settings import Settings


EPILOG = """
examples:
    multishell-setup                    # Full installation
    multishell-setup --verbose          # Full installation with detailed output
    multishell-setup --shell zsh        # Configure only zsh
    multishell-setup --skip-tools       # Skip tool installation, configure shells only
    multishell-setup --test-only        # Run verification tests only
"""


class SetupArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit 1 like every other setup failure."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = SetupArgumentParser(
        prog="multishell-setup",
        description="Install modern CLI tools and configure bash, zsh and nushell",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "--skip-tools",
        action="store_true",
        help="Skip tool installation phase"
    )

    parser.add_argument(
        "--shell",
        choices=[s.value for s in ShellTarget],
        help="Configure only specific shell (bash|zsh|nushell)"
    )

    parser.add_argument(
        "--test-only",
        action="store_true",
        help="Run verification tests without installation or configuration"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable detailed logging"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file (JSON format)"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log commands and file writes instead of performing them"
    )

    parser.add_argument(
        "--only",
        action="append",
        metavar="TOOL",
        help="Install/verify only this tool (repeatable)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Console logging level (default: logging.level setting, INFO)"
    )

    return parser.parse_args(argv)


def load_config(args) -> Settings:
    """Load configuration from file, environment and command line."""
    config_data = {}
    if args.config:
        if not args.config.exists():
            raise ConfigurationError(f"Configuration file not found: {args.config}")
        with open(args.config) as f:
            try:
                config_data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {args.config}: {e}")

    # Override with command line args
    if args.dry_run:
        config_data["dry_run"] = True
    if args.only:
        config_data.setdefault("install", {})["only"] = args.only

    try:
        return Settings(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    """Run setup and return the process exit code."""
    args = parse_arguments(argv)
    level = "DEBUG" if args.verbose else (args.log_level or "INFO")

    # Console only until we know where the run log goes
    setup_root_logger(level=level)
    logger = logging.getLogger(__name__)

    try:
        settings = load_config(args)
        if not args.verbose and not args.log_level:
            level = settings.logging.level

        log_file = timestamped_log_file(settings.logging.log_dir, settings.logging.file_prefix)
        try:
            setup_root_logger(log_file, level, settings.logging.format)
        except OSError as e:
            raise UnwritableDirectoryError(f"Cannot write log file {log_file}: {e}")

        logger.info("=== Multi-Shell Setup ===")
        logger.info(f"Arguments: {vars(args)}")

        catalog = ToolCatalog.load(settings.install.catalog_path)
        orchestrator = SetupOrchestrator(
            settings=settings,
            catalog=catalog,
            skip_tools=args.skip_tools,
            shell=ShellTarget(args.shell) if args.shell else None,
            test_only=args.test_only,
            log_file=log_file
        )
        orchestrator.run()

    except SetupError as e:
        logger.error(f"✗ {e}")
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 1

    return 0


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    sys.exit(main())


if __name__ == "__main__":
    run()
