"""Data models."""

from .outcome import AvailabilityOutcome, FailureReason, NotificationMessage, OutcomeKind

__all__ = ["AvailabilityOutcome", "FailureReason", "NotificationMessage", "OutcomeKind"]
