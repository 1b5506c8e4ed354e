"""Single availability run: workflow, outcome notification, failure reporting."""

from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger

from cita_checker.browser import FormSelectorSet
from cita_checker.constants import ExitCodes
from cita_checker.core.exceptions import (
    CitaCheckerError,
    ConfigurationError,
    NotificationDeliveryError,
    WorkflowStepError,
)
from cita_checker.core.logger import flush_logging
from cita_checker.core.settings import CheckerSettings
from cita_checker.models import AvailabilityOutcome, FailureReason, NotificationMessage
from cita_checker.services.availability_workflow import AvailabilityWorkflow
from cita_checker.services.notification import TelegramNotifier


@dataclass(frozen=True)
class RunReport:
    """What one run produced."""

    outcome: AvailabilityOutcome
    notification_sent: bool
    exit_code: int


class CheckRunner:
    """Outer boundary of a run: every failure ends here."""

    def __init__(
        self,
        settings: CheckerSettings,
        workflow: AvailabilityWorkflow,
        notifier: TelegramNotifier,
        log: Optional[Any] = None,
    ):
        self.settings = settings
        self._workflow = workflow
        self._notifier = notifier
        self._log = log or logger.bind(component="runner")

    @classmethod
    def from_settings(
        cls, settings: CheckerSettings, selectors: Optional[FormSelectorSet] = None
    ) -> "CheckRunner":
        return cls(
            settings=settings,
            workflow=AvailabilityWorkflow.from_settings(settings, selectors=selectors),
            notifier=TelegramNotifier.from_settings(settings),
        )

    async def run(self) -> RunReport:
        """
        Run one check and notify the operator.

        Returns:
            RunReport with the single outcome of this run
        """
        try:
            outcome = await self._check()
            self._log.info(f"Outcome: {outcome}")

            if outcome.is_success:
                return await self._report_success(outcome)

            sent = await self._report_failure(outcome)
            return RunReport(outcome=outcome, notification_sent=sent, exit_code=outcome.exit_code)
        finally:
            flush_logging()

    async def _check(self) -> AvailabilityOutcome:
        try:
            return await self._workflow.check()
        except WorkflowStepError as e:
            return AvailabilityOutcome.failed(e.reason, e.error_message)
        except CitaCheckerError as e:
            self._log.error(f"Check failed: {e.message}")
            return AvailabilityOutcome.failed(FailureReason.UNEXPECTED, e.message)
        except Exception as e:
            self._log.exception(f"Unexpected error during check: {e}")
            return AvailabilityOutcome.failed(FailureReason.UNEXPECTED, str(e) or type(e).__name__)

    async def _report_success(self, outcome: AvailabilityOutcome) -> RunReport:
        message = NotificationMessage.for_outcome(
            outcome, self._notifier.chat_id, self.settings.notify_when_unavailable
        )
        if message is None:
            self._log.info("No notification for this outcome")
            return RunReport(outcome=outcome, notification_sent=False, exit_code=ExitCodes.OK)

        try:
            await self._notifier.send(message)
        except ConfigurationError as e:
            self._log.error(f"Cannot notify: {e.message}")
            return RunReport(
                outcome=outcome, notification_sent=False, exit_code=ExitCodes.CONFIGURATION
            )
        except NotificationDeliveryError as e:
            self._log.error(f"Notification not delivered: {e.message}")
            return RunReport(outcome=outcome, notification_sent=False, exit_code=ExitCodes.OK)

        return RunReport(outcome=outcome, notification_sent=True, exit_code=ExitCodes.OK)

    async def _report_failure(self, outcome: AvailabilityOutcome) -> bool:
        """One best-effort failure notification; its own errors are only logged."""
        message = NotificationMessage.for_error(
            self._notifier.chat_id, outcome.reason or FailureReason.UNEXPECTED, outcome.error or ""
        )
        try:
            await self._notifier.send(message)
        except CitaCheckerError as e:
            self._log.warning(f"Failure notification not sent: {e.message}")
            return False
        return True
