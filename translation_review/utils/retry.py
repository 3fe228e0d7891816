"""
Retry mechanism with exponential backoff for the Translation Review Bot.

Provides a decorator and utilities for retrying network operations
with configurable backoff strategies.
"""

import time
import random
import functools
from typing import Any, Optional, List, Tuple, Dict, Callable, Type, TypeVar
from dataclasses import dataclass

from .exceptions import (
    ReviewBotError,
    ConfigurationError,
    ReviewParseError,
    RetryExhaustedError,
)
from .logger import get_logger

T = TypeVar('T')


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay between retries in seconds
        backoff_factor: Multiplier for exponential backoff
        max_delay: Maximum delay between retries in seconds
        jitter: Whether to add random jitter to delays
        retryable_exceptions: Exception types that should trigger retries
        non_retryable_exceptions: Exception types that should NOT trigger retries
    """
    max_retries: int = 3
    initial_delay: float = 1.0
    backoff_factor: float = 2.0
    max_delay: float = 60.0
    jitter: bool = True
    retryable_exceptions: Tuple[Type[Exception], ...] = (
        ReviewBotError,
        ConnectionError,
        TimeoutError,
        OSError,
    )
    non_retryable_exceptions: Tuple[Type[Exception], ...] = (
        ValueError,
        TypeError,
        KeyError,
        NotImplementedError,
    )

    def should_retry(self, exception: Exception) -> bool:
        """
        Determine if an exception should trigger a retry.

        Client errors (4xx other than 429) carried on an exception's
        ``status_code`` are never retried.

        Args:
            exception: Exception to evaluate

        Returns:
            True if the exception should trigger a retry
        """
        for exc_type in self.non_retryable_exceptions:
            if isinstance(exception, exc_type):
                return False

        status_code = getattr(exception, "status_code", None)
        if isinstance(status_code, int) and 400 <= status_code < 500 and status_code != 429:
            return False

        for exc_type in self.retryable_exceptions:
            if isinstance(exception, exc_type):
                return True

        return False

    def calculate_delay(self, attempt: int) -> float:
        """
        Calculate delay for a given retry attempt.

        Args:
            attempt: Current attempt number (0-based)

        Returns:
            Delay in seconds
        """
        delay = self.initial_delay * (self.backoff_factor ** attempt)
        delay = min(delay, self.max_delay)

        if self.jitter:
            # +/-25% random jitter
            jitter_factor = 0.75 + (random.random() * 0.5)
            delay *= jitter_factor

        return delay


class RetryState:
    """
    State tracking for retry operations.

    Maintains information about retry attempts,
    timing, and error history.
    """

    def __init__(self, config: RetryConfig):
        """Initialize retry state."""
        self.config = config
        self.attempts: List[Tuple[int, float, Exception]] = []  # (attempt, timestamp, exception)
        self.start_time = time.time()

    def record_attempt(self, attempt: int, exception: Exception):
        """Record a failed attempt."""
        self.attempts.append((attempt, time.time(), exception))

    def should_continue(self, attempt: int, exception: Exception) -> bool:
        """Determine if retrying should continue."""
        return attempt < self.config.max_retries and self.config.should_retry(exception)

    def get_next_delay(self, attempt: int) -> float:
        """Get delay for next retry attempt."""
        return self.config.calculate_delay(attempt)

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of retry attempts."""
        return {
            "failed_attempts": len(self.attempts),
            "error_types": [type(error).__name__ for _, _, error in self.attempts],
            "duration_seconds": time.time() - self.start_time,
            "config": {
                "max_retries": self.config.max_retries,
                "initial_delay": self.config.initial_delay,
                "backoff_factor": self.config.backoff_factor
            }
        }


def retry_with_backoff(
    config: Optional[RetryConfig] = None,
    sleep: Optional[Callable[[float], None]] = None,
    **config_kwargs
):
    """
    Decorator for retrying functions with exponential backoff.

    Exceptions the config does not consider retryable are re-raised
    immediately. When every attempt fails with a retryable error a
    RetryExhaustedError carrying the last error is raised.

    Args:
        config: Retry configuration (if not provided, created from config_kwargs)
        sleep: Function used to wait between attempts
        **config_kwargs: Configuration options for RetryConfig

    Returns:
        Decorated function that retries on failures
    """
    if config is None:
        config = RetryConfig(**config_kwargs)

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            logger = get_logger("retry")
            state = RetryState(config)
            last_exception: Optional[Exception] = None

            for attempt in range(config.max_retries + 1):
                try:
                    if attempt > 0:
                        (sleep or time.sleep)(state.get_next_delay(attempt - 1))

                    result = func(*args, **kwargs)

                    if attempt > 0:
                        logger.info(
                            f"Operation succeeded after {attempt} retries",
                            extra={
                                "function": func.__name__,
                                "attempts": attempt + 1,
                                "duration_seconds": time.time() - state.start_time
                            }
                        )

                    return result

                except Exception as e:
                    last_exception = e
                    state.record_attempt(attempt, e)

                    if not config.should_retry(e):
                        raise

                    if not state.should_continue(attempt, e):
                        break

                    logger.warning(
                        f"Operation failed, retrying... (attempt {attempt + 1}/{config.max_retries})",
                        extra={
                            "function": func.__name__,
                            "attempt": attempt + 1,
                            "max_retries": config.max_retries,
                            "error_type": type(e).__name__,
                            "error_message": str(e)
                        }
                    )

            raise RetryExhaustedError(
                f"Operation '{func.__name__}' failed after {config.max_retries} retries",
                attempts=config.max_retries,
                last_error=last_exception,
                retry_summary=state.get_summary()
            )

        return wrapper

    return decorator


API_RETRY_CONFIG = RetryConfig(
    max_retries=3,
    initial_delay=1.0,
    backoff_factor=2.0,
    max_delay=30.0,
    jitter=True,
    retryable_exceptions=(
        ReviewBotError,
        ConnectionError,
        TimeoutError,
        OSError,
    ),
    non_retryable_exceptions=(
        ConfigurationError,
        ReviewParseError,
        ValueError,
        TypeError,
        KeyError,
    )
)


def api_retry(func: Callable[..., T]) -> Callable[..., T]:
    """Decorator for API calls with standard retry configuration."""
    return retry_with_backoff(API_RETRY_CONFIG)(func)
