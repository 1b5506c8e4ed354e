"""Telegram client wrapper."""

from typing import List, Optional

from loguru import logger
from telegram import Bot
from telegram.error import TelegramError

from cita_checker.core.exceptions import NotificationDeliveryError
from cita_checker.core.retry import get_telegram_retry


class TelegramClient:
    """Plain-text Telegram sender using python-telegram-bot."""

    # Telegram API message limit
    TELEGRAM_MESSAGE_LIMIT = 4096

    def __init__(self, bot_token: str):
        """
        Initialize Telegram client.

        Args:
            bot_token: Telegram bot token
        """
        self._bot = Bot(token=bot_token)

    @staticmethod
    def split_message(text: str, max_length: Optional[int] = None) -> List[str]:
        """
        Split a message into chunks that fit within the max_length limit.

        Tries to split at newlines first, then at spaces to avoid breaking words.
        """
        if max_length is None:
            max_length = TelegramClient.TELEGRAM_MESSAGE_LIMIT

        if len(text) <= max_length:
            return [text]

        chunks = []
        remaining = text

        while remaining:
            if len(remaining) <= max_length:
                chunks.append(remaining)
                break

            split_pos = remaining.rfind("\n", 0, max_length)
            if split_pos == -1:
                split_pos = remaining.rfind(" ", 0, max_length)

            if split_pos == -1:
                chunks.append(remaining[:max_length])
                remaining = remaining[max_length:]
            else:
                # Skip the delimiter
                chunks.append(remaining[:split_pos])
                remaining = remaining[split_pos + 1 :]

        return chunks

    async def send_message(self, chat_id: str, text: str) -> None:
        """
        Send a plain-text message, split if it exceeds Telegram's limit.

        Raises:
            NotificationDeliveryError: If sending fails after retries
        """
        chunks = self.split_message(text)
        try:
            async with self._bot:
                for chunk in chunks:
                    await self._send_chunk(chat_id, chunk)
        except (TelegramError, OSError) as e:
            logger.error(f"Telegram send message failed: {e}")
            raise NotificationDeliveryError(f"Telegram send failed: {e}") from e

        logger.debug(f"Telegram message sent successfully ({len(chunks)} chunk(s))")

    @get_telegram_retry()
    async def _send_chunk(self, chat_id: str, text: str) -> None:
        await self._bot.send_message(chat_id=chat_id, text=text, parse_mode=None)
