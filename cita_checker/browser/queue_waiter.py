"""Wait for the portal's PrimeFaces AJAX queue to drain."""

from typing import Any, Optional

from loguru import logger

from cita_checker.constants import Delays, Timeouts
from cita_checker.core.exceptions import WaitTimeoutError

from .page_driver import BrowserSession, PageDriver

# Vacuously true while PrimeFaces is not loaded
QUEUE_EMPTY_PREDICATE = """
() => {
    const pf = window.PrimeFaces;
    if (!pf || !pf.ajax || !pf.ajax.Queue) {
        return true;
    }
    return pf.ajax.Queue.isEmpty();
}
"""


class AsyncQueueWaiter:
    """Blocks until every queued AJAX request has been applied to the DOM."""

    def __init__(
        self,
        driver: PageDriver,
        poll_interval_ms: int = Delays.QUEUE_POLL_INTERVAL_MS,
        log: Optional[Any] = None,
    ):
        self._driver = driver
        self.poll_interval_ms = poll_interval_ms
        self._log = log or logger.bind(component="queue_waiter")

    async def wait_queue_drained(
        self, session: BrowserSession, timeout_ms: int = Timeouts.QUEUE_DRAIN
    ) -> None:
        """
        Poll the queue-empty predicate.

        Raises:
            WaitTimeoutError: Marked recoverable; the caller decides whether to retry
        """
        try:
            await self._driver.wait_for_predicate(
                session,
                QUEUE_EMPTY_PREDICATE,
                what="AJAX queue to drain",
                timeout_ms=timeout_ms,
                polling_ms=self.poll_interval_ms,
            )
        except WaitTimeoutError as e:
            self._log.warning(f"AJAX queue still busy after {timeout_ms}ms")
            raise WaitTimeoutError(e.what, e.timeout_ms, recoverable=True) from e
        self._log.debug("AJAX queue drained")
