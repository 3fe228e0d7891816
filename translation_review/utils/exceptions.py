"""
Custom exception classes for the Translation Review Bot.

Provides specific exception types for the collaborators around the
translation core (GitHub, the completion API, check-run publishing)
with machine-readable error codes and structured details.

The diff/translation core itself never raises these: absent input,
missing matches and missing reference values are reported through
sentinel return values instead.
"""

from typing import Optional, Dict, Any


class ReviewBotError(Exception):
    """
    Base exception for the Translation Review Bot.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary representation."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(ReviewBotError):
    """
    Raised when there's a configuration error.

    This includes missing environment variables,
    invalid configuration values, etc.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[str] = None
    ):
        """Initialize configuration error."""
        details = {}
        if config_key:
            details["config_key"] = config_key
        if config_value:
            details["config_value"] = config_value

        super().__init__(
            message=message,
            error_code="CONFIG_ERROR",
            details=details
        )


class GitHubAPIError(ReviewBotError):
    """
    Raised when there's an error with the GitHub API.

    This includes authentication errors, permission issues,
    resource not found, rate limiting, etc.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[Any] = None,
        endpoint: Optional[str] = None
    ):
        """Initialize GitHub API error."""
        details = {}
        if status_code:
            details["status_code"] = status_code
        if response_body:
            details["response_body"] = response_body
        if endpoint:
            details["endpoint"] = endpoint

        super().__init__(
            message=message,
            error_code="GITHUB_API_ERROR",
            details=details
        )
        self.status_code = status_code


class CompletionAPIError(ReviewBotError):
    """
    Raised when there's an error with the chat completion API.

    This includes network errors, API errors, rate limiting,
    empty responses, etc.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[Any] = None,
        deployment: Optional[str] = None
    ):
        """Initialize completion API error."""
        details = {}
        if status_code:
            details["status_code"] = status_code
        if response_body:
            details["response_body"] = response_body
        if deployment:
            details["deployment"] = deployment

        super().__init__(
            message=message,
            error_code="COMPLETION_API_ERROR",
            details=details
        )
        self.status_code = status_code


class ReviewParseError(ReviewBotError):
    """
    Raised when the model's review cannot be parsed.

    The model is asked for a JSON object with a summary and a list of
    issues; anything else ends up here.
    """

    def __init__(self, message: str, raw_content: Optional[str] = None):
        """Initialize review parse error."""
        details = {}
        if raw_content:
            details["raw_content"] = raw_content[:2000]

        super().__init__(
            message=message,
            error_code="REVIEW_PARSE_ERROR",
            details=details
        )


class CheckRunError(ReviewBotError):
    """Raised when the check run cannot be created."""

    def __init__(
        self,
        message: str,
        annotation_count: Optional[int] = None,
        head_sha: Optional[str] = None
    ):
        """Initialize check run error."""
        details = {}
        if annotation_count:
            details["annotation_count"] = annotation_count
        if head_sha:
            details["head_sha"] = head_sha

        super().__init__(
            message=message,
            error_code="CHECK_RUN_ERROR",
            details=details
        )


class RetryExhaustedError(ReviewBotError):
    """
    Raised when all retry attempts are exhausted.

    This indicates that an operation failed repeatedly
    despite retry attempts.
    """

    def __init__(
        self,
        message: str,
        attempts: Optional[int] = None,
        last_error: Optional[Exception] = None,
        retry_summary: Optional[Dict[str, Any]] = None
    ):
        """Initialize retry exhausted error."""
        details = {}
        if attempts:
            details["attempts"] = attempts
        if last_error:
            details["last_error_type"] = type(last_error).__name__
            details["last_error_message"] = str(last_error)
        if retry_summary:
            details["retry_summary"] = retry_summary

        super().__init__(
            message=message,
            error_code="RETRY_EXHAUSTED_ERROR",
            details=details
        )
        self.attempts = attempts
        self.last_error = last_error
