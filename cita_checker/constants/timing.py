"""Timing-related constants (timeouts, delays)."""

from typing import Final


class Timeouts:
    """Timeout values - MILLISECONDS for Playwright."""

    NAVIGATION: Final[int] = 30_000
    ELEMENT: Final[int] = 10_000
    QUEUE_DRAIN: Final[int] = 30_000
    PROCEDURE_HIDDEN: Final[int] = 10_000
    APPOINTMENT_SECTION: Final[int] = 30_000


class Delays:
    """UI settling delays in SECONDS."""

    # Used only when the procedure selector never reports hidden
    PROCEDURE_FALLBACK: Final[float] = 2.0
    # Server re-render latency not covered by the AJAX queue signal
    AFTER_CONFIRM_SETTLE: Final[float] = 1.0
    QUEUE_POLL_INTERVAL_MS: Final[int] = 100
