"""
Logging infrastructure for the Translation Review Bot.

Provides structured logging with configurable formats and levels.

This module offers:
- JSON and text formatters
- Specialized loggers for API calls and review runs
- Pull request context injected into every record
- Redaction of tokens and API keys before anything is written

Example:
    >>> from translation_review.utils.logger import get_logger, setup_logging
    >>> setup_logging(level="DEBUG", format_type="json")
    >>> logger = get_logger(__name__)
    >>> logger.info("Review started", extra={"pr_number": "42"})
"""

import logging
import sys
import json
import re
from datetime import datetime, timezone
from typing import Dict, Any, Optional, Union, List, Pattern
from pathlib import Path
from enum import Enum


class LogLevel(Enum):
    """Supported logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(Enum):
    """Supported log formats."""
    JSON = "json"
    TEXT = "text"


class Colors:
    """ANSI color codes for console output."""
    CYAN = '\033[36m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    RED = '\033[31m'
    MAGENTA = '\033[35m'
    RESET = '\033[0m'

    LEVEL_COLORS = {
        LogLevel.DEBUG.value: CYAN,
        LogLevel.INFO.value: GREEN,
        LogLevel.WARNING.value: YELLOW,
        LogLevel.ERROR.value: RED,
        LogLevel.CRITICAL.value: MAGENTA,
    }


# Field names whose values are always redacted
SENSITIVE_FIELDS = {
    'authorization', 'token', 'password', 'secret',
    'api_key', 'api-key', 'access_token', 'bearer',
    'credential', 'credentials', 'github_token',
    'azure_openai_key', 'azure_open_ai_secret'
}

DEFAULT_TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'

# Standard log record fields to exclude when copying extra fields
STANDARD_LOG_FIELDS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'message'
}

REDACTION_PLACEHOLDER = "***REDACTED***"


# ============================================================================
# Sensitive Data Redaction
# ============================================================================

class SensitiveDataRedactor:
    """
    Redacts credentials from strings and structured log data.

    Field-name matching catches values passed through ``extra``;
    pattern matching catches credentials embedded in messages, URLs
    and exception text.
    """

    def __init__(self, placeholder: str = REDACTION_PLACEHOLDER):
        self.placeholder = placeholder
        self.patterns: List[Pattern] = [
            # Authorization headers and bearer/token schemes
            re.compile(r'(?i)((?:bearer|token)\s+)([a-zA-Z0-9_\-\.]{8,})'),
            # api-key / api_key / secret assignments
            re.compile(r'(?i)((?:api[_-]?key|secret|access[_-]?token)["\']?\s*[:=]\s*["\']?)([^"\'\s,&]+)'),
            # GitHub personal and installation tokens
            re.compile(r'()(gh[pousr]_[A-Za-z0-9]{20,})'),
            # Credentials in query strings
            re.compile(r'(?i)([?&](?:api[_-]?key|token|access_token|sig)=)([^&\s]+)'),
        ]

    def is_sensitive_key(self, key: str) -> bool:
        """Check whether a field name denotes a credential."""
        lowered = key.lower()
        return lowered in SENSITIVE_FIELDS or any(
            sensitive in lowered for sensitive in ('token', 'secret', 'password', 'api_key', 'api-key', 'authorization')
        ) and not lowered.endswith(('_tokens', '_count'))

    def redact_string(self, text: str) -> str:
        """
        Redact credentials from a string.

        Args:
            text: String to redact

        Returns:
            Redacted string
        """
        if not isinstance(text, str):
            return text

        redacted = text
        for pattern in self.patterns:
            redacted = pattern.sub(lambda m: f"{m.group(1)}{self.placeholder}", redacted)
        return redacted

    def redact_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Recursively redact sensitive data in a dictionary.

        Args:
            data: Dictionary to redact

        Returns:
            Dictionary with sensitive values redacted
        """
        if not isinstance(data, dict):
            return data
        return {key: self.redact_value(str(key), value) for key, value in data.items()}

    def redact_value(self, key: str, value: Any) -> Any:
        """Redact a value based on its key and content."""
        if value is None:
            return value

        if isinstance(value, dict):
            return self.redact_dict(value)
        if isinstance(value, (list, tuple)):
            return type(value)(self.redact_value(key, item) for item in value)

        if self.is_sensitive_key(key):
            return self.placeholder

        if isinstance(value, str):
            return self.redact_string(value)

        return value


# ============================================================================
# Formatter Classes
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Example output:
        {
            "timestamp": "2024-05-01T10:30:45.123456Z",
            "level": "INFO",
            "logger": "translation_review.review_processor",
            "message": "Extracted translation changes",
            "module": "review_processor",
            "function": "process_pull_request",
            "line": 42,
            "repository": "owner/repo",
            "pr_number": "17"
        }
    """

    def __init__(self, ensure_ascii: bool = False, sort_keys: bool = True):
        """
        Initialize JSON formatter.

        Args:
            ensure_ascii: Whether to ensure ASCII encoding in JSON output
            sort_keys: Whether to sort keys in JSON output
        """
        super().__init__()
        self.ensure_ascii = ensure_ascii
        self.sort_keys = sort_keys
        self.redactor = SensitiveDataRedactor()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string."""
        log_entry = self._create_base_log_entry(record)
        self._add_extra_fields(log_entry, record)
        self._add_exception_info(log_entry, record)

        return json.dumps(
            log_entry,
            default=str,
            ensure_ascii=self.ensure_ascii,
            sort_keys=self.sort_keys
        )

    def _create_base_log_entry(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Create the base log entry with standard fields."""
        return {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

    def _add_extra_fields(self, log_entry: Dict[str, Any], record: logging.LogRecord) -> None:
        """Add extra fields from the record while excluding standard fields."""
        for key, value in record.__dict__.items():
            if key not in STANDARD_LOG_FIELDS and value is not None:
                log_entry[key] = self.redactor.redact_value(key, value)

    def _add_exception_info(self, log_entry: Dict[str, Any], record: logging.LogRecord) -> None:
        """Add exception information if present in the record."""
        if record.exc_info:
            log_entry["exception"] = self.redactor.redact_string(self.formatException(record.exc_info))


class TextFormatter(logging.Formatter):
    """
    Text formatter for human-readable logging with optional colors.

    Example output:
        [2024-05-01 10:30:45] INFO     translation_review.cli:42 - Review completed (repo=owner/repo, pr=17)
    """

    def __init__(self, use_colors: bool = True, timestamp_format: Optional[str] = None):
        super().__init__()
        self.use_colors = use_colors and self._supports_color()
        self.timestamp_format = timestamp_format or DEFAULT_TIMESTAMP_FORMAT

    def _supports_color(self) -> bool:
        """Check if the terminal supports color output."""
        return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as (optionally colored) text."""
        timestamp = datetime.fromtimestamp(record.created).strftime(self.timestamp_format)

        message = (
            f"[{timestamp}] {record.levelname:8} "
            f"{record.name}:{record.lineno} - {record.getMessage()}"
        )

        context_str = self._build_context_string(record)
        if context_str:
            message += context_str

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        if self.use_colors:
            color = Colors.LEVEL_COLORS.get(record.levelname, '')
            message = f"{color}{message}{Colors.RESET}"

        return message

    def _build_context_string(self, record: logging.LogRecord) -> str:
        """Build pull request context string if available."""
        context_parts = []
        repository = getattr(record, "repository", None)
        pr_number = getattr(record, "pr_number", None)
        if repository:
            context_parts.append(f"repo={repository}")
        if pr_number:
            context_parts.append(f"pr={pr_number}")

        return f" ({', '.join(context_parts)})" if context_parts else ""


# ============================================================================
# Filter Classes
# ============================================================================

class ContextFilter(logging.Filter):
    """
    Filter to add pull request context to log records.

    Injects ``repository`` and ``pr_number`` into every record that
    passes through, unless the record already carries its own values.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.context = dict(context or {})

    def filter(self, record: logging.LogRecord) -> bool:
        for key in ("repository", "pr_number"):
            if getattr(record, key, None) is None:
                setattr(record, key, self.context.get(key))
        return True


class SensitiveDataFilter(logging.Filter):
    """
    Filter that redacts credentials from log messages and extra fields.
    """

    def __init__(self, redactor: Optional[SensitiveDataRedactor] = None):
        super().__init__()
        self.redactor = redactor or SensitiveDataRedactor()
        self.records_redacted = 0

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            redacted_msg = self.redactor.redact_string(record.msg)
            if redacted_msg != record.msg:
                record.msg = redacted_msg
                self.records_redacted += 1

        for key in list(record.__dict__.keys()):
            if key in STANDARD_LOG_FIELDS:
                continue
            if self.redactor.is_sensitive_key(key):
                setattr(record, key, self.redactor.placeholder)
                self.records_redacted += 1

        return True


# ============================================================================
# Logger Setup and Configuration
# ============================================================================

def validate_log_level(level: str) -> str:
    """
    Validate and normalize log level string.

    Raises:
        ValueError: If the log level is not supported
    """
    if not level:
        raise ValueError("Log level cannot be empty")

    level_upper = level.upper()
    valid_levels = {log_level.value for log_level in LogLevel}

    if level_upper not in valid_levels:
        raise ValueError(f"Invalid log level: {level}. Valid levels: {', '.join(sorted(valid_levels))}")

    return level_upper


def validate_log_format(format_type: str) -> str:
    """
    Validate and normalize log format string.

    Raises:
        ValueError: If the log format is not supported
    """
    if not format_type:
        raise ValueError("Log format cannot be empty")

    format_lower = format_type.lower()
    valid_formats = {log_format.value for log_format in LogFormat}

    if format_lower not in valid_formats:
        raise ValueError(f"Invalid log format: {format_type}. Valid formats: {', '.join(sorted(valid_formats))}")

    return format_lower


def setup_logging(
    level: Optional[Union[str, LogLevel]] = None,
    format_type: Optional[Union[str, LogFormat]] = None,
    log_file: Optional[str] = None,
    use_colors: Optional[bool] = None,
    context: Optional[Dict[str, Any]] = None
) -> logging.Logger:
    """
    Configure the root logger.

    Installs a console handler (JSON or text) and, when ``log_file`` is
    given, a JSON file handler. Every handler gets the context and
    redaction filters.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Log format ('json' or 'text')
        log_file: Optional log file path
        use_colors: Whether to use colors in text output (auto-detected if None)
        context: Pull request context (``repository``, ``pr_number``)

    Returns:
        Configured root logger
    """
    level_str = level.value if isinstance(level, LogLevel) else (level or LogLevel.INFO.value)
    format_str = format_type.value if isinstance(format_type, LogFormat) else (format_type or LogFormat.TEXT.value)

    try:
        validated_level = validate_log_level(level_str)
        validated_format = validate_log_format(format_str)
    except ValueError as e:
        validated_level = LogLevel.INFO.value
        validated_format = LogFormat.TEXT.value
        print(f"Warning: {e}. Using fallback settings.", file=sys.stderr)

    numeric_level = getattr(logging, validated_level, logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    filters: List[logging.Filter] = [ContextFilter(context), SensitiveDataFilter()]

    if validated_format == LogFormat.JSON.value:
        console_formatter: logging.Formatter = JSONFormatter()
    else:
        console_formatter = TextFormatter(use_colors=use_colors if use_colors is not None else True)

    logger.addHandler(_create_handler(logging.StreamHandler(sys.stdout), numeric_level, console_formatter, filters))

    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            # Files always get JSON
            logger.addHandler(_create_handler(file_handler, numeric_level, JSONFormatter(), filters))
        except OSError as e:
            print(f"Warning: Failed to create file handler: {e}", file=sys.stderr)

    return logger


def _create_handler(
    handler: logging.Handler,
    level: int,
    formatter: logging.Formatter,
    filters: List[logging.Filter]
) -> logging.Handler:
    """Attach level, formatter and filters to a handler."""
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for filter_obj in filters:
        handler.addFilter(filter_obj)
    return handler


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


class APILogger:
    """Specialized logger for HTTP API interactions with redaction."""

    def __init__(self, logger_name: str = "api"):
        self.logger = get_logger(logger_name)
        self.redactor = SensitiveDataRedactor()

    def log_request(
        self,
        api_name: str,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Any] = None
    ):
        """Log an API request; headers and URL are redacted."""
        sanitized_url = self.redactor.redact_string(url)
        self.logger.debug(
            f"API Request: {method} {sanitized_url}",
            extra={
                "api_name": api_name,
                "method": method,
                "url": sanitized_url,
                "headers": self.redactor.redact_dict(headers or {}),
                "has_body": body is not None
            }
        )

    def log_response(
        self,
        api_name: str,
        method: str,
        url: str,
        status_code: int,
        response_time_ms: Optional[float] = None
    ):
        """Log an API response."""
        sanitized_url = self.redactor.redact_string(url)
        self.logger.info(
            f"API Response: {method} {sanitized_url} - {status_code}",
            extra={
                "api_name": api_name,
                "method": method,
                "url": sanitized_url,
                "status_code": status_code,
                "response_time_ms": response_time_ms
            }
        )

    def log_error(
        self,
        api_name: str,
        method: str,
        url: str,
        error: Exception,
        status_code: Optional[int] = None
    ):
        """Log an API error; the error message is redacted too."""
        sanitized_url = self.redactor.redact_string(url)
        error_message = self.redactor.redact_string(str(error))
        self.logger.error(
            f"API Error: {method} {sanitized_url} - {error_message}",
            extra={
                "api_name": api_name,
                "method": method,
                "url": sanitized_url,
                "status_code": status_code,
                "error_type": type(error).__name__,
                "error_message": error_message
            }
        )


class ReviewLogger:
    """Specialized logger for translation review runs."""

    def __init__(self, logger_name: str = "review"):
        self.logger = get_logger(logger_name)

    def log_diff_processing(
        self,
        diff_size: int,
        filtered_size: int,
        changes_found: int,
        reference_keys: int,
        processing_time_ms: float
    ):
        """Log diff filtering and extraction statistics."""
        self.logger.info(
            f"Loaded {reference_keys} reference keys, using {changes_found} for context",
            extra={
                "diff_size": diff_size,
                "filtered_size": filtered_size,
                "changes_found": changes_found,
                "reference_keys": reference_keys,
                "processing_time_ms": processing_time_ms
            }
        )

    def log_line_location(self, issues_total: int, issues_located: int):
        """Log how many review issues were anchored to a line."""
        self.logger.info(
            "Line location completed",
            extra={
                "issues_total": issues_total,
                "issues_located": issues_located,
                "issues_unlocated": issues_total - issues_located
            }
        )

    def log_check_publication(
        self,
        annotations: int,
        general_comments: int,
        conclusion: str,
        publication_time_ms: float
    ):
        """Log check run publication statistics."""
        self.logger.info(
            f"Creating check run with {annotations} annotations and {general_comments} general comments",
            extra={
                "annotations": annotations,
                "general_comments": general_comments,
                "conclusion": conclusion,
                "publication_time_ms": publication_time_ms
            }
        )


api_logger = APILogger()
review_logger = ReviewLogger()


__all__ = [
    "setup_logging",
    "get_logger",
    "APILogger",
    "ReviewLogger",
    "SensitiveDataRedactor",
    "api_logger",
    "review_logger"
]
