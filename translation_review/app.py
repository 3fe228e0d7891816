"""
Translation Review Bot - Main Entry Point

This module orchestrates a review run: argument parsing, environment
validation and the review itself.
"""

import sys
from typing import List, Optional

from .cli_handler import CLIHandler
from .config.settings import Settings
from .config_manager import ConfigurationManager
from .review_processor import ReviewProcessor
from .utils.exceptions import ReviewBotError


class ReviewBotApp:
    """
    Main application class that orchestrates the review bot.

    This class ties together:
    - CLI Handler for argument parsing
    - Configuration Manager for settings validation
    - Review Processor for main logic
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize the application."""
        self.settings = settings or Settings.from_env()
        self.config_manager = ConfigurationManager(self.settings)
        self.cli_handler = CLIHandler(self.settings)
        self.review_processor = None

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Run the review bot application.

        Args:
            argv: Command line arguments (uses sys.argv if None)

        Returns:
            Exit code
        """
        try:
            # Parse command line arguments
            args = self.cli_handler.parse_args(argv)

            # Setup logging
            if not self.cli_handler.setup_logging(args):
                return 1

            # Validate arguments
            self.cli_handler.validate_args(args)

            # Validate environment
            self.config_manager.validate_environment(dry_run=args.dry_run)

            if args.validate_only:
                self.cli_handler.logger.info("Environment validation completed successfully")
                return 0

            # Initialize review processor
            self.review_processor = ReviewProcessor(self.settings)

            # Process the pull request
            result = self.review_processor.process_pull_request(dry_run=args.dry_run)

            # Handle results
            if result["status"] == "success":
                self.cli_handler.print_success_summary(result, args.dry_run)
                return 0

            if self.cli_handler.logger:
                self.cli_handler.logger.error(
                    f"Review processing failed: {result.get('message', 'Unknown error')}"
                )
            return 1

        except KeyboardInterrupt:
            if self.cli_handler.logger:
                self.cli_handler.logger.info("Review processing interrupted by user")
            return 130
        except ReviewBotError as e:
            if self.cli_handler.logger:
                self.cli_handler.logger.error(f"Review bot error: {e}", extra={"error_details": e.to_dict()})
            else:
                print(f"Review bot error: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            if self.cli_handler.logger:
                self.cli_handler.logger.error(f"Unexpected error: {e}", exc_info=True)
            else:
                print(f"Unexpected error: {e}", file=sys.stderr)
            return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the Translation Review Bot."""
    try:
        app = ReviewBotApp()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1
    return app.run(argv)


if __name__ == "__main__":
    sys.exit(main())
