"""Notification services."""

from .notifier import TelegramNotifier
from .telegram_client import TelegramClient

__all__ = ["TelegramClient", "TelegramNotifier"]
