"""Run outcome and notification message models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cita_checker.constants import ExitCodes, Messages


class OutcomeKind(str, Enum):
    """Kind of availability outcome."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"


class FailureReason:
    """Failure reasons, one per workflow step that can abort the run."""

    NAVIGATION = "navigation"
    SELECT_OFFICE = "select-office"
    SELECT_AREA = "select-area"
    SUBMIT_SELECTION = "submit-selection"
    CONFIRM_PROCEDURE = "confirm-procedure"
    TIMEOUT_APPOINTMENT_SECTION = "timeout-appointment-section"
    CHECK_CALENDAR = "check-calendar"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class AvailabilityOutcome:
    """Single result of one availability check."""

    kind: OutcomeKind
    reason: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def available(cls) -> "AvailabilityOutcome":
        return cls(OutcomeKind.AVAILABLE)

    @classmethod
    def unavailable(cls) -> "AvailabilityOutcome":
        return cls(OutcomeKind.UNAVAILABLE)

    @classmethod
    def failed(cls, reason: str, error: Optional[str] = None) -> "AvailabilityOutcome":
        return cls(OutcomeKind.FAILED, reason=reason, error=error)

    @property
    def is_success(self) -> bool:
        """True when the check completed, whether or not slots were found."""
        return self.kind is not OutcomeKind.FAILED

    @property
    def exit_code(self) -> int:
        return ExitCodes.OK if self.is_success else ExitCodes.FAILURE

    def __str__(self) -> str:
        if self.kind is OutcomeKind.FAILED:
            return f"Failed(reason={self.reason!r})"
        return self.kind.name.capitalize()


@dataclass(frozen=True)
class NotificationMessage:
    """Plain text payload and its destination chat."""

    chat_id: Optional[str]
    text: str

    @classmethod
    def for_outcome(
        cls,
        outcome: AvailabilityOutcome,
        chat_id: Optional[str],
        notify_when_unavailable: bool = False,
    ) -> Optional["NotificationMessage"]:
        """
        Build the message for an outcome.

        Args:
            outcome: Outcome of the run
            chat_id: Destination chat id
            notify_when_unavailable: Whether "no appointments" gets a message

        Returns:
            Message to send, or None if the outcome is not notified
        """
        if outcome.kind is OutcomeKind.AVAILABLE:
            return cls(chat_id=chat_id, text=Messages.AVAILABLE)
        if outcome.kind is OutcomeKind.UNAVAILABLE:
            if notify_when_unavailable:
                return cls(chat_id=chat_id, text=Messages.UNAVAILABLE)
            return None
        return cls.for_error(chat_id, outcome.reason or "unknown", outcome.error or "")

    @classmethod
    def for_error(cls, chat_id: Optional[str], reason: str, error: str) -> "NotificationMessage":
        text = f"{Messages.ERROR_PREFIX}: {reason}"
        if error:
            text += f": {error}"
        return cls(chat_id=chat_id, text=text)
