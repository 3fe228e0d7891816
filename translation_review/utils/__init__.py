"""
Utilities module for the Translation Review Bot.
"""

from .logger import setup_logging, get_logger, api_logger, review_logger
from .exceptions import (
    ReviewBotError,
    ConfigurationError,
    GitHubAPIError,
    CompletionAPIError,
    ReviewParseError,
    CheckRunError,
    RetryExhaustedError
)
from .retry import retry_with_backoff, api_retry, RetryConfig

__all__ = [
    "setup_logging",
    "get_logger",
    "api_logger",
    "review_logger",
    "ReviewBotError",
    "ConfigurationError",
    "GitHubAPIError",
    "CompletionAPIError",
    "ReviewParseError",
    "CheckRunError",
    "RetryExhaustedError",
    "retry_with_backoff",
    "api_retry",
    "RetryConfig"
]
