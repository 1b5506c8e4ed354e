"""Retry strategies for different exception types."""

import logging as stdlib_logging

from telegram.error import BadRequest
from telegram.error import NetworkError as TelegramNetworkError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

# Stdlib logger needed for tenacity's before_sleep_log
_stdlib_logger = stdlib_logging.getLogger(__name__)


def is_transient_telegram_error(exc: BaseException) -> bool:
    """Network-level failures worth retrying; BadRequest is a NetworkError subclass but permanent."""
    if isinstance(exc, BadRequest):
        return False
    return isinstance(exc, (TelegramNetworkError, OSError))


def _make_retry(attempts: int, wait_strategy: object, predicate) -> object:
    """
    Factory for creating retry decorators with consistent configuration.

    Args:
        attempts: Maximum number of retry attempts
        wait_strategy: Tenacity wait strategy
        predicate: Returns True for exceptions that should be retried

    Returns:
        Configured retry decorator
    """
    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_strategy,
        retry=retry_if_exception(predicate),
        before_sleep=before_sleep_log(_stdlib_logger, stdlib_logging.WARNING),
        reraise=True,
    )


def get_telegram_retry(attempts: int = 3, max_wait: float = 8):
    """Get retry strategy for Telegram API operations."""
    return _make_retry(
        attempts=attempts,
        wait_strategy=wait_exponential(multiplier=1, min=1, max=max_wait) + wait_random(0, 1),
        predicate=is_transient_telegram_error,
    )
