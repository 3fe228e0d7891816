"""
CLI Handler for the Translation Review Bot.

This module handles command-line argument parsing and validation
for the review bot application.
"""

import argparse
import sys
from typing import Any, Dict, List, Optional

from .utils.logger import get_logger, setup_logging
from .utils.exceptions import ConfigurationError


class CLIHandler:
    """
    Handles command-line interface and execution for the review bot.

    This class is responsible for:
    - Parsing and validating command-line arguments
    - Setting up logging configuration
    - Printing a run summary for CI logs
    """

    def __init__(self, settings):
        """
        Initialize the CLI handler with settings.

        Args:
            settings: Application settings instance
        """
        self.settings = settings
        self.logger = None

    def create_parser(self) -> argparse.ArgumentParser:
        """
        Create and configure the argument parser.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="translation-review",
            description="AI review of translation changes in GitHub pull requests",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Review the pull request named by GITHUB_REPOSITORY and PR_NUMBER
  translation-review

  # Review without deleting comments or creating a check run
  translation-review --dry-run --log-level DEBUG

  # Check the environment only
  translation-review --validate-only
            """
        )

        # Dry run mode
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Run the review without deleting comments or creating a check run"
        )

        # Logging options
        parser.add_argument(
            "--log-level",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Override logging level"
        )

        parser.add_argument(
            "--log-format",
            choices=["text", "json"],
            help="Override log format"
        )

        parser.add_argument(
            "--log-file",
            type=str,
            help="Also write JSON logs to this file"
        )

        # Validation only mode
        parser.add_argument(
            "--validate-only",
            action="store_true",
            help="Only validate environment and exit"
        )

        return parser

    def parse_args(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments.

        Args:
            argv: List of command-line arguments (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        parser = self.create_parser()
        return parser.parse_args(argv)

    def setup_logging(self, args: argparse.Namespace) -> bool:
        """
        Setup logging with command-line overrides.

        Args:
            args: Parsed command-line arguments

        Returns:
            True if logging setup succeeded, False otherwise
        """
        try:
            setup_logging(
                level=args.log_level or self.settings.log_level,
                format_type=args.log_format or self.settings.log_format,
                log_file=args.log_file or self.settings.log_file,
                context=self.settings.log_context()
            )
            self.logger = get_logger("cli")
            return True
        except (OSError, ValueError) as e:
            print(f"Failed to setup logging: {e}", file=sys.stderr)
            return False

    def validate_args(self, args: argparse.Namespace) -> None:
        """
        Validate parsed command-line arguments.

        Args:
            args: Parsed arguments

        Raises:
            ConfigurationError: If arguments are invalid
        """
        if args.log_file is not None and not args.log_file.strip():
            raise ConfigurationError("log-file cannot be empty")

        if args.validate_only and args.dry_run:
            raise ConfigurationError("--validate-only and --dry-run cannot be combined")

    def print_success_summary(self, result: Dict[str, Any], dry_run: bool) -> None:
        """
        Print a success summary to stdout for CI logs.

        Args:
            result: Processing result dictionary
            dry_run: Whether this was a dry run
        """
        print(f"✅ Review completed in {result['processing_time']:.2f}s")
        print(f"🌐 Found {result.get('changes', 0)} translation changes")
        if result.get("issues", 0) > 0:
            print(f"📝 Reported {result['issues']} issues")
            if dry_run:
                print(f"🧪 Dry run: {result.get('annotations', 0)} annotations not published")
            else:
                print(f"📤 Published {result.get('annotations', 0)} annotations")
