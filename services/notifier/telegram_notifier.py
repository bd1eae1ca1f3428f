# services/notifier/telegram_notifier.py - Telegram delivery of notifications
import asyncio
import logging
from datetime import timedelta

from telegram import Bot
from telegram.error import RetryAfter, TelegramError

from exceptions import DeleteError, SendError
from interfaces import INotifier
from models import MessageHandle

logger = logging.getLogger(__name__)


def _retry_after_seconds(error: RetryAfter) -> float:
    retry_after = error.retry_after
    if isinstance(retry_after, timedelta):
        return retry_after.total_seconds()
    return float(retry_after)


class TelegramNotifier(INotifier):
    """Sends and deletes HTML messages in Telegram chats."""

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send(self, subscriber_id: int, text: str) -> MessageHandle:
        try:
            try:
                message = await self.bot.send_message(chat_id=subscriber_id, text=text, parse_mode="HTML")
            except RetryAfter as e:
                # Flood control rejects the message outright, so a second attempt cannot duplicate it
                delay = _retry_after_seconds(e)
                logger.warning(f"Flood control for chat {subscriber_id}, waiting {delay} seconds")
                await asyncio.sleep(delay + 1)
                message = await self.bot.send_message(chat_id=subscriber_id, text=text, parse_mode="HTML")
        except TelegramError as e:
            raise SendError(subscriber_id, str(e))
        return MessageHandle(chat_id=subscriber_id, message_id=message.message_id)

    async def delete(self, handle: MessageHandle) -> None:
        try:
            deleted = await self.bot.delete_message(chat_id=handle.chat_id, message_id=handle.message_id)
        except TelegramError as e:
            raise DeleteError(handle.chat_id, handle.message_id, str(e))
        if not deleted:
            raise DeleteError(handle.chat_id, handle.message_id, "Telegram reported the message was not deleted")
