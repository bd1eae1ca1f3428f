# apps/telegram_bot/services/bot_service.py - Command handlers for subscribing chats to channels
import logging
import time
from datetime import timedelta
from typing import Callable, List, Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import ContextTypes

from exceptions import ChannelResolveError, DatabaseException, DuplicateSubscriptionError
from interfaces import IChannelResolver, ISubscriptionRepository
from models import ContentFilters

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Currently available commands:\n"
    "/subscribe <channel_url> - notify this chat about new videos from a YouTube channel\n"
    "/unsubscribe <channel_url> - stop those notifications\n"
    "/filters <channel_url> [live on|off] [vod on|off] [shorts on|off] - show or change what gets posted\n"
    "/howmany - how many channels are tracked and how often each is checked\n"
    "/ping - check that the bot is alive\n"
    "/help - this message\n"
    "/shutdown - stop the bot (admins only)"
)
FILTER_KEYS = {"live": "live_allowed", "vod": "vod_allowed", "shorts": "short_allowed"}
FLAG_VALUES = {"on": True, "yes": True, "true": True, "off": False, "no": False, "false": False}
REFRESH_PING = "refresh_ping"


def format_duration(seconds: float) -> str:
    return str(timedelta(seconds=round(seconds)))


def describe_filters(filters: ContentFilters) -> str:
    def flag(value: bool) -> str:
        return "on" if value else "off"

    return f"live {flag(filters.live_allowed)}, vod {flag(filters.vod_allowed)}, shorts {flag(filters.short_allowed)}"


def parse_filter_args(args: List[str], current: ContentFilters) -> ContentFilters:
    """Apply ``key value`` pairs such as ``live off shorts on`` on top of the current filters."""
    if len(args) % 2 != 0:
        raise ValueError("Filters come in pairs, e.g. `live off` or `shorts on`")
    values = {
        "live_allowed": current.live_allowed,
        "vod_allowed": current.vod_allowed,
        "short_allowed": current.short_allowed,
    }
    for key, value in zip(args[::2], args[1::2]):
        field = FILTER_KEYS.get(key.lower())
        if field is None:
            raise ValueError(f"Unknown filter '{key}'. Use live, vod or shorts")
        flag = FLAG_VALUES.get(value.lower())
        if flag is None:
            raise ValueError(f"Unknown value '{value}' for {key}. Use on or off")
        values[field] = flag
    return ContentFilters(**values)


def ping_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([[InlineKeyboardButton("🔄", callback_data=REFRESH_PING)]])


class BotService:
    """Telegram front end: every command replies in the chat it was sent from."""

    def __init__(self, subscription_repository: ISubscriptionRepository, channel_resolver: IChannelResolver,
                 request_interval: float, admins: List[int], on_shutdown: Optional[Callable[[], None]] = None):
        self.subscription_repository = subscription_repository
        self.channel_resolver = channel_resolver
        self.request_interval = request_interval
        self.admins = admins
        self.on_shutdown = on_shutdown

    async def help_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handler for /help command."""
        await update.effective_message.reply_text(HELP_TEXT)

    async def ping_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handler for /ping command."""
        start_time = time.monotonic()
        # Awaiting the reply is the round trip being measured
        message = await update.effective_message.reply_text("Pinging...")
        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        await message.edit_text(f"{elapsed_ms} ms", reply_markup=ping_keyboard())

    async def button_handler(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handler for callback buttons."""
        query = update.callback_query
        if query.data != REFRESH_PING:
            await query.answer("This button hasn't been implemented.")
            return
        start_time = time.monotonic()
        await query.answer()
        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        await query.edit_message_text(f"{elapsed_ms} ms", reply_markup=ping_keyboard())

    async def _resolve_playlist(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> Optional[str]:
        if not context.args:
            await update.effective_message.reply_text(f"Usage: /{self._command_name(update)} <channel_url>")
            return None
        try:
            return await self.channel_resolver.resolve_uploads_playlist(context.args[0])
        except ChannelResolveError as e:
            await update.effective_message.reply_text(e.message)
            return None

    @staticmethod
    def _command_name(update: Update) -> str:
        text = update.effective_message.text or ""
        return text.split()[0].lstrip("/").split("@")[0] if text else "command"

    async def subscribe_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handler for /subscribe command."""
        playlist_id = await self._resolve_playlist(update, context)
        if playlist_id is None:
            return
        chat_id = update.effective_chat.id

        try:
            await self.subscription_repository.add_subscription(playlist_id, chat_id)
        except DuplicateSubscriptionError:
            await update.effective_message.reply_text(
                f"Chat {chat_id} is already subscribed to uploads playlist {playlist_id}."
            )
            return
        except DatabaseException as e:
            logger.error(f"Error in /subscribe for chat {chat_id}: {e}")
            await update.effective_message.reply_text(f"Failed to add entry to database: {e.message}")
            return

        await update.effective_message.reply_text(
            f"Successfully subscribed chat {chat_id} to uploads playlist {playlist_id}."
        )

    async def unsubscribe_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handler for /unsubscribe command."""
        playlist_id = await self._resolve_playlist(update, context)
        if playlist_id is None:
            return
        chat_id = update.effective_chat.id

        try:
            removed = await self.subscription_repository.remove_subscription(playlist_id, chat_id)
        except DatabaseException as e:
            logger.error(f"Error in /unsubscribe for chat {chat_id}: {e}")
            await update.effective_message.reply_text(f"Failed to remove entry from database: {e.message}")
            return

        if removed:
            text = f"Successfully unsubscribed chat {chat_id} from uploads playlist {playlist_id}."
        else:
            text = f"Chat {chat_id} was not subscribed to uploads playlist {playlist_id}."
        await update.effective_message.reply_text(text)

    async def filters_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handler for /filters command."""
        playlist_id = await self._resolve_playlist(update, context)
        if playlist_id is None:
            return
        chat_id = update.effective_chat.id

        try:
            subscription = await self.subscription_repository.get_subscription(playlist_id, chat_id)
            if subscription is None:
                await update.effective_message.reply_text(
                    f"Chat {chat_id} is not subscribed to uploads playlist {playlist_id}."
                )
                return

            filter_args = context.args[1:]
            if not filter_args:
                await update.effective_message.reply_text(
                    f"Filters for {playlist_id}: {describe_filters(subscription.filters)}"
                )
                return

            try:
                filters = parse_filter_args(filter_args, subscription.filters)
            except ValueError as e:
                await update.effective_message.reply_text(str(e))
                return

            await self.subscription_repository.set_filters(playlist_id, chat_id, filters)
        except DatabaseException as e:
            logger.error(f"Error in /filters for chat {chat_id}: {e}")
            await update.effective_message.reply_text(f"Failed to update filters: {e.message}")
            return

        await update.effective_message.reply_text(f"Filters for {playlist_id} set to: {describe_filters(filters)}")

    async def howmany_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handler for /howmany command."""
        try:
            count = await self.subscription_repository.count_feeds()
        except Exception as e:
            logger.error(f"Error in /howmany: {e}")
            await update.effective_message.reply_text(f"Failed to get number of subscriptions: {e}")
            return

        full_cycle = self.request_interval * count
        await update.effective_message.reply_text(
            f"Checking {count} playlists every {format_duration(full_cycle)}."
        )

    async def shutdown_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handler for /shutdown command."""
        user = update.effective_user
        if self.admins and user.id not in self.admins:
            await update.effective_message.reply_text("You do not have permission.")
            return

        logger.info(f"Shutdown from user {user.full_name} with Id {user.id}")
        await update.effective_message.reply_text("Shutting down...")
        if self.on_shutdown is not None:
            self.on_shutdown()
        context.application.stop_running()
