"""Operator notifications over Telegram."""

from typing import Any, Callable, Optional

from loguru import logger
from telegram.error import TelegramError

from cita_checker.core.exceptions import ConfigurationError
from cita_checker.core.settings import CheckerSettings
from cita_checker.models import NotificationMessage

from .telegram_client import TelegramClient


class TelegramNotifier:
    """Sends NotificationMessages; credentials are checked on send, not at startup."""

    def __init__(
        self,
        bot_token: Optional[str],
        chat_id: Optional[str],
        client_factory: Callable[[str], TelegramClient] = TelegramClient,
        log: Optional[Any] = None,
    ):
        self._bot_token = bot_token
        self.chat_id = chat_id
        self._client_factory = client_factory
        self._client: Optional[TelegramClient] = None
        self._log = log or logger.bind(component="notifier")

    @classmethod
    def from_settings(
        cls, settings: CheckerSettings, log: Optional[Any] = None
    ) -> "TelegramNotifier":
        return cls(
            bot_token=settings.get_bot_token(), chat_id=settings.telegram_chat_id, log=log
        )

    def __repr__(self) -> str:
        masked_token = "'***'" if self._bot_token else "None"
        return f"TelegramNotifier(bot_token={masked_token}, chat_id={self.chat_id!r})"

    def message(self, text: str) -> NotificationMessage:
        return NotificationMessage(chat_id=self.chat_id, text=text)

    async def send(self, message: NotificationMessage) -> None:
        """
        Send ``message``.

        Raises:
            ConfigurationError: If the bot token or chat id is missing
            NotificationDeliveryError: If Telegram rejects or never receives the message
        """
        if not self._bot_token or not message.chat_id:
            raise ConfigurationError("Missing TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID.")

        if self._client is None:
            try:
                self._client = self._client_factory(self._bot_token)
            except TelegramError as e:
                raise ConfigurationError(f"Invalid TELEGRAM_BOT_TOKEN: {e}") from e

        await self._client.send_message(chat_id=message.chat_id, text=message.text)
        self._log.info(f"Telegram notification sent: {message.text[:80]}")
