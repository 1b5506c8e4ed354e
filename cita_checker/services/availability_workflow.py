"""Appointment availability check against the DGT cita previa portal.

The portal is a PrimeFaces form: every control that changes issues an AJAX
request and the server re-renders part of the form. Each step therefore
mutates the page and then waits for the AJAX queue to drain before the next
step reads the DOM. Skipping a wait reads a stale form and reports "no
appointments" when there are some.

Steps, in order:

1. open the portal
2. select the office, wait for the queue
3. select the area, wait for the queue
4. submit the selection, wait for the queue
5. wait for the procedure control to become hidden (bounded; on timeout sleep
   a fixed fallback delay and carry on, since step 6 is safe to repeat; other
   page failures here are reported as the confirm-procedure step)
6. confirm the procedure with a scripted click, wait for the queue, settle
7. wait for the appointment section (diagnostics are captured on timeout)
8. the calendar widget being visible means appointments are available
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from loguru import logger

from cita_checker.browser import (
    AsyncQueueWaiter,
    BrowserSession,
    ClickMode,
    ElementState,
    FormSelectorSet,
    PageDriver,
)
from cita_checker.core.exceptions import (
    CitaCheckerError,
    LaunchError,
    WaitTimeoutError,
    WorkflowStepError,
)
from cita_checker.core.settings import CheckerSettings
from cita_checker.models import AvailabilityOutcome, FailureReason
from cita_checker.utils.diagnostics import DiagnosticCapture

APPOINTMENT_SECTION_STEP = "appointment_section_timeout"


class AvailabilityWorkflow:
    """Drives the portal form up to the calendar and reports availability."""

    def __init__(
        self,
        settings: CheckerSettings,
        driver: PageDriver,
        queue_waiter: AsyncQueueWaiter,
        diagnostics: DiagnosticCapture,
        selectors: Optional[FormSelectorSet] = None,
        log: Optional[Any] = None,
    ):
        """
        Initialize the workflow.

        Args:
            settings: Portal codes, timeouts and delays
            driver: Browser facade; owns session launch and release
            queue_waiter: AJAX queue waiter bound to the same driver
            diagnostics: Artifact writer used on the appointment-section timeout
            selectors: Selector table (defaults to the built-in one)
            log: Logger to use (defaults to the loguru logger)
        """
        self.settings = settings
        self.selectors = selectors or FormSelectorSet()
        self._driver = driver
        self._queue_waiter = queue_waiter
        self._diagnostics = diagnostics
        self._log = log or logger.bind(component="workflow")

    @classmethod
    def from_settings(
        cls,
        settings: CheckerSettings,
        selectors: Optional[FormSelectorSet] = None,
        log: Optional[Any] = None,
    ) -> "AvailabilityWorkflow":
        driver = PageDriver(
            headless=settings.headless,
            navigation_timeout_ms=settings.navigation_timeout_ms,
            element_timeout_ms=settings.element_timeout_ms,
            log=log,
        )
        return cls(
            settings=settings,
            driver=driver,
            queue_waiter=AsyncQueueWaiter(driver, log=log),
            diagnostics=DiagnosticCapture(driver, log=log),
            selectors=selectors,
            log=log,
        )

    async def check(self) -> AvailabilityOutcome:
        """
        Run every step in a fresh browser session.

        The session is released on every exit path.

        Returns:
            AvailabilityOutcome.available() or AvailabilityOutcome.unavailable()

        Raises:
            WorkflowStepError: If any step fails; ``reason`` names the step
        """
        self._log.info(
            f"Checking appointments (office={self.settings.office_code}, "
            f"area={self.settings.area_code})"
        )
        try:
            async with self._driver.session() as session:
                return await self._run_steps(session)
        except LaunchError as e:
            self._log.error(f"Step '{FailureReason.NAVIGATION}' failed: {e.message}")
            raise WorkflowStepError(FailureReason.NAVIGATION, e.message) from e

    async def _run_steps(self, session: BrowserSession) -> AvailabilityOutcome:
        async with self._step(FailureReason.NAVIGATION):
            await self._driver.navigate(session, self.settings.portal_url)

        async with self._step(FailureReason.SELECT_OFFICE):
            office = self._driver.locate(session, "office", self.selectors.office)
            await self._driver.select_option(office, self.settings.office_code)
            await self._wait_queue(session)

        async with self._step(FailureReason.SELECT_AREA):
            area = self._driver.locate(session, "area", self.selectors.area)
            await self._driver.select_option(area, self.settings.area_code)
            await self._wait_queue(session)

        async with self._step(FailureReason.SUBMIT_SELECTION):
            submit = self._driver.locate(session, "submit", self.selectors.submit)
            await self._driver.click(session, submit)
            await self._wait_queue(session)

        async with self._step(FailureReason.CONFIRM_PROCEDURE):
            await self.await_procedure_selector_hidden(session)
            await self.confirm_procedure(session)

        async with self._step(FailureReason.TIMEOUT_APPOINTMENT_SECTION):
            await self.await_appointment_section(session)

        async with self._step(FailureReason.CHECK_CALENDAR):
            calendar = self._driver.locate(session, "calendar", self.selectors.calendar)
            available = await self._driver.is_visible(calendar)

        if available:
            self._log.info("Calendar visible: appointments available")
            return AvailabilityOutcome.available()

        self._log.info("Calendar not rendered: no appointments available")
        return AvailabilityOutcome.unavailable()

    @asynccontextmanager
    async def _step(self, reason: str) -> AsyncIterator[None]:
        """Translate project errors raised inside a step into WorkflowStepError."""
        self._log.debug(f"Step '{reason}' started")
        try:
            yield
        except WorkflowStepError:
            raise
        except CitaCheckerError as e:
            self._log.error(f"Step '{reason}' failed: {e.message}")
            raise WorkflowStepError(reason, e.message) from e

    async def _wait_queue(self, session: BrowserSession) -> None:
        # A drain timeout is retryable in principle; this workflow treats it as fatal
        await self._queue_waiter.wait_queue_drained(session, self.settings.queue_drain_timeout_ms)

    async def await_procedure_selector_hidden(self, session: BrowserSession) -> bool:
        """
        Wait for the procedure control to be hidden by the server re-render.

        Returns:
            True if the hidden state was observed, False if the fallback delay was used
        """
        procedure = self._driver.locate(
            session, "procedure_confirmation", self.selectors.procedure_confirmation
        )
        try:
            await self._driver.wait_for_state(
                procedure, ElementState.HIDDEN, self.settings.procedure_hidden_timeout_ms
            )
            return True
        except WaitTimeoutError as e:
            self._log.warning(
                f"{e.message}; continuing after {self.settings.procedure_fallback_delay}s"
            )
            await asyncio.sleep(self.settings.procedure_fallback_delay)
            return False

    async def confirm_procedure(self, session: BrowserSession) -> bool:
        """
        Trigger the procedure confirmation with a scripted click.

        The portal's widget library keeps this control zero-size or
        display:none, so a simulated user click cannot reach it. Repeating the
        call on an already confirmed page is harmless.

        Returns:
            True if the control was present and clicked
        """
        procedure = self._driver.locate(
            session, "procedure_confirmation", self.selectors.procedure_confirmation
        )
        clicked = await self._driver.click(session, procedure, mode=ClickMode.FORCED_SCRIPT)
        if not clicked:
            self._log.warning("Procedure confirmation control not present; continuing")

        await self._wait_queue(session)
        await asyncio.sleep(self.settings.settle_delay)
        return clicked

    async def await_appointment_section(self, session: BrowserSession) -> None:
        """
        Wait for the appointment section; capture diagnostics on timeout.

        Raises:
            WaitTimeoutError: If the section does not become visible in time
        """
        section = self._driver.locate(
            session, "appointment_section", self.selectors.appointment_section
        )
        try:
            await self._driver.wait_for_state(
                section, ElementState.VISIBLE, self.settings.appointment_section_timeout_ms
            )
        except WaitTimeoutError as e:
            await self._diagnostics.capture(session, APPOINTMENT_SECTION_STEP, e, container=section)
            raise
