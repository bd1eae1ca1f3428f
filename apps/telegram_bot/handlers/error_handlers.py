# apps/telegram_bot/handlers/error_handlers.py - Error handler for command updates
import logging

from telegram import Update
from telegram.error import BadRequest, Forbidden, NetworkError
from telegram.ext import ContextTypes

logger = logging.getLogger(__name__)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log errors raised while handling commands. The update loop handles its own errors."""
    error = context.error
    chat_id = update.effective_chat.id if isinstance(update, Update) and update.effective_chat else None

    if isinstance(error, NetworkError) and not isinstance(error, BadRequest):
        logger.warning(f"Network error talking to Telegram: {error}")
    elif isinstance(error, BadRequest) and "Query is too old" in str(error):
        # Someone pressed the ping refresh button on an old message
        logger.debug("Ignoring outdated callback query")
    elif isinstance(error, Forbidden):
        logger.warning(f"Bot can no longer write to chat {chat_id}: {error}")
    else:
        logger.error(f"Error handling update for chat {chat_id}: {error}", exc_info=error)
