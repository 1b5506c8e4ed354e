"""Custom exception classes for Cita-Checker."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class CitaCheckerError(Exception):
    """Base exception for Cita-Checker."""

    def __init__(
        self, message: str, recoverable: bool = False, details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize Cita-Checker error.

        Args:
            message: Error message
            recoverable: Whether the error is recoverable with retry
            details: Additional error details
        """
        self.message = message
        self.recoverable = recoverable
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "recoverable": self.recoverable,
            "details": self.details,
            "timestamp": self.timestamp,
        }


class LaunchError(CitaCheckerError):
    """Browser executable or runtime is unavailable."""

    def __init__(self, message: str = "Browser launch failed"):
        super().__init__(message, recoverable=False)


class NavigationError(CitaCheckerError):
    """Page load failed (network error or timeout)."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        message = f"Navigation to {url} failed"
        if reason:
            message += f": {reason}"
        super().__init__(message, recoverable=False, details={"url": url})


class ElementNotFoundError(CitaCheckerError):
    """Selector matched nothing in time - portal layout may have changed."""

    def __init__(self, selector_name: str, selector: str, timeout_ms: Optional[int] = None):
        """
        Initialize element not found error.

        Args:
            selector_name: Logical role of the element (e.g. "office")
            selector: Locator expression that was tried
            timeout_ms: Timeout that elapsed, if any
        """
        self.selector_name = selector_name
        self.selector = selector
        message = f"Element '{selector_name}' not found ({selector})"
        if timeout_ms is not None:
            message += f" within {timeout_ms}ms"
        super().__init__(
            message,
            recoverable=False,
            details={"selector_name": selector_name, "selector": selector},
        )


class WaitTimeoutError(CitaCheckerError):
    """A state wait or AJAX queue drain exceeded its bound."""

    def __init__(self, what: str, timeout_ms: int, recoverable: bool = False):
        self.what = what
        self.timeout_ms = timeout_ms
        super().__init__(
            f"Timed out after {timeout_ms}ms waiting for {what}",
            recoverable=recoverable,
            details={"what": what, "timeout_ms": timeout_ms},
        )


class ConfigurationError(CitaCheckerError):
    """Configuration is missing or invalid."""

    def __init__(self, message: str = "Configuration error"):
        super().__init__(message, recoverable=False)


class NotificationDeliveryError(CitaCheckerError):
    """Messaging API send failed."""

    def __init__(self, message: str = "Notification delivery failed"):
        super().__init__(message, recoverable=True)


class WorkflowStepError(CitaCheckerError):
    """A workflow step failed; carries the step's failure reason."""

    def __init__(self, reason: str, message: str):
        self.reason = reason
        self.error_message = message
        super().__init__(f"{reason}: {message}", recoverable=False, details={"reason": reason})
