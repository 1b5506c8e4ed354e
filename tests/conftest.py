"""Pytest configuration and common fixtures."""

import sys
import warnings
from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from cita_checker.browser import AsyncQueueWaiter, PageDriver
from cita_checker.core.settings import CheckerSettings, reset_settings
from cita_checker.services.availability_workflow import AvailabilityWorkflow
from cita_checker.services.notification import TelegramNotifier
from cita_checker.utils.diagnostics import DiagnosticCapture
from tests.fakes import FakePortal


def pytest_configure(config):
    """Configure pytest environment before tests run."""
    warnings.filterwarnings("ignore", message="coroutine.*was never awaited")


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Isolate every test from the developer's environment."""
    for var in (
        "TELEGRAM_BOT_TOKEN",
        "TELEGRAM_CHAT_ID",
        "LOG_LEVEL",
        "HEADLESS",
        "NOTIFY_WHEN_UNAVAILABLE",
        "SELECTORS_FILE",
    ):
        monkeypatch.delenv(var, raising=False)

    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> CheckerSettings:
    """Settings with Telegram credentials and no sleeping."""
    return CheckerSettings(
        _env_file=None,
        telegram_bot_token="123456:test-token",
        telegram_chat_id="-10042",
        procedure_fallback_delay=0,
        settle_delay=0,
        procedure_hidden_timeout_ms=50,
        appointment_section_timeout_ms=50,
    )


@pytest.fixture
def portal() -> FakePortal:
    return FakePortal()


@pytest.fixture
def make_workflow(settings, tmp_path):
    """Build an AvailabilityWorkflow wired to a FakePortal."""

    def _make(portal: FakePortal, workflow_settings: Optional[CheckerSettings] = None):
        driver = PageDriver(playwright_factory=portal.factory)
        return AvailabilityWorkflow(
            settings=workflow_settings or settings,
            driver=driver,
            queue_waiter=AsyncQueueWaiter(driver),
            diagnostics=DiagnosticCapture(driver, artifacts_dir=tmp_path / "artifacts"),
        )

    return _make


@pytest.fixture
def telegram_client() -> MagicMock:
    """TelegramClient double."""
    client = MagicMock(name="TelegramClient")
    client.send_message = AsyncMock()
    return client


@pytest.fixture
def notifier(telegram_client) -> TelegramNotifier:
    return TelegramNotifier(
        bot_token="123456:test-token",
        chat_id="-10042",
        client_factory=lambda token: telegram_client,
    )
