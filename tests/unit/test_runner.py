"""Tests for CheckRunner."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cita_checker.constants import ExitCodes, Messages
from cita_checker.core.exceptions import (
    ConfigurationError,
    NotificationDeliveryError,
    WorkflowStepError,
)
from cita_checker.models import AvailabilityOutcome, FailureReason, OutcomeKind
from cita_checker.services.notification import TelegramNotifier
from cita_checker.services.runner import CheckRunner


def make_workflow(outcome=None, error=None):
    workflow = MagicMock(name="AvailabilityWorkflow")
    workflow.check = AsyncMock(return_value=outcome, side_effect=error)
    return workflow


class TestCheckRunnerSuccess:
    """Completed checks."""

    @pytest.mark.asyncio
    async def test_available_sends_literal_text(self, settings, notifier, telegram_client):
        runner = CheckRunner(settings, make_workflow(AvailabilityOutcome.available()), notifier)

        report = await runner.run()

        telegram_client.send_message.assert_awaited_once_with(
            chat_id="-10042", text=Messages.AVAILABLE
        )
        assert report.exit_code == ExitCodes.OK
        assert report.notification_sent is True

    @pytest.mark.asyncio
    async def test_unavailable_is_silent_by_default(self, settings, notifier, telegram_client):
        runner = CheckRunner(settings, make_workflow(AvailabilityOutcome.unavailable()), notifier)

        report = await runner.run()

        telegram_client.send_message.assert_not_awaited()
        assert report.outcome.kind is OutcomeKind.UNAVAILABLE
        assert report.exit_code == ExitCodes.OK

    @pytest.mark.asyncio
    async def test_unavailable_notified_when_enabled(self, settings, notifier, telegram_client):
        settings = settings.model_copy(update={"notify_when_unavailable": True})
        runner = CheckRunner(settings, make_workflow(AvailabilityOutcome.unavailable()), notifier)

        report = await runner.run()

        telegram_client.send_message.assert_awaited_once_with(
            chat_id="-10042", text=Messages.UNAVAILABLE
        )
        assert report.notification_sent is True

    @pytest.mark.asyncio
    async def test_delivery_error_keeps_outcome_and_exit_code(
        self, settings, notifier, telegram_client
    ):
        telegram_client.send_message.side_effect = NotificationDeliveryError("boom")
        runner = CheckRunner(settings, make_workflow(AvailabilityOutcome.available()), notifier)

        report = await runner.run()

        assert report.outcome.kind is OutcomeKind.AVAILABLE
        assert report.notification_sent is False
        assert report.exit_code == ExitCodes.OK

    @pytest.mark.asyncio
    async def test_missing_credentials_is_configuration_exit(self, settings, telegram_client):
        notifier = TelegramNotifier(
            bot_token=None, chat_id=None, client_factory=lambda token: telegram_client
        )
        runner = CheckRunner(settings, make_workflow(AvailabilityOutcome.available()), notifier)

        report = await runner.run()

        assert report.outcome.kind is OutcomeKind.AVAILABLE
        assert report.exit_code == ExitCodes.CONFIGURATION
        telegram_client.send_message.assert_not_awaited()


class TestCheckRunnerFailure:
    """Failed checks."""

    @pytest.mark.asyncio
    async def test_step_failure_becomes_failed_outcome(self, settings, notifier, telegram_client):
        error = WorkflowStepError(FailureReason.SELECT_AREA, "Element 'area' not found")
        runner = CheckRunner(settings, make_workflow(error=error), notifier)

        report = await runner.run()

        assert report.outcome == AvailabilityOutcome.failed(
            FailureReason.SELECT_AREA, "Element 'area' not found"
        )
        assert report.exit_code == ExitCodes.FAILURE
        telegram_client.send_message.assert_awaited_once_with(
            chat_id="-10042", text="Error: select-area: Element 'area' not found"
        )

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_reported(self, settings, notifier, telegram_client):
        runner = CheckRunner(settings, make_workflow(error=RuntimeError("kaboom")), notifier)

        report = await runner.run()

        assert report.outcome.reason == FailureReason.UNEXPECTED
        assert report.exit_code == ExitCodes.FAILURE
        assert "kaboom" in telegram_client.send_message.await_args.kwargs["text"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "notify_error",
        [NotificationDeliveryError("down"), ConfigurationError("Missing TELEGRAM_BOT_TOKEN")],
    )
    async def test_failure_notification_errors_are_swallowed(
        self, settings, notifier, telegram_client, notify_error
    ):
        telegram_client.send_message.side_effect = notify_error
        error = WorkflowStepError(FailureReason.NAVIGATION, "timed out")
        runner = CheckRunner(settings, make_workflow(error=error), notifier)

        report = await runner.run()

        assert report.outcome.reason == FailureReason.NAVIGATION
        assert report.notification_sent is False
        assert report.exit_code == ExitCodes.FAILURE
        telegram_client.send_message.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_logs_flushed_on_every_path(self, settings, notifier):
        error = WorkflowStepError(FailureReason.NAVIGATION, "timed out")
        runner = CheckRunner(settings, make_workflow(error=error), notifier)

        with patch("cita_checker.services.runner.flush_logging") as flush:
            await runner.run()

        flush.assert_called_once()
