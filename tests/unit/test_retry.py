"""Tests for retry strategies."""

import pytest
from telegram.error import BadRequest, NetworkError, TimedOut

from cita_checker.core.retry import get_telegram_retry, is_transient_telegram_error


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (TimedOut(), True),
        (NetworkError("connection reset"), True),
        (ConnectionError(), True),
        (OSError(), True),
        (BadRequest("Chat not found"), False),
        (ValueError(), False),
    ],
)
def test_is_transient_telegram_error(error, expected):
    assert is_transient_telegram_error(error) is expected


def test_get_telegram_retry():
    """Test telegram retry decorator can be created."""
    retry_decorator = get_telegram_retry()
    assert retry_decorator is not None


def test_non_transient_error_not_retried():
    attempt_count = [0]

    @get_telegram_retry()
    def failing_function():
        attempt_count[0] += 1
        raise ValueError("permanent")

    with pytest.raises(ValueError):
        failing_function()

    assert attempt_count[0] == 1
