# services/delivery/message_formatter.py - Notification text
import html
from datetime import timezone
from typing import Optional

from interfaces import ICategoryCache
from models import Item, ItemExtras, LiveState

LIVE_STATE_ICONS = {
    LiveState.UPCOMING: "⏱️ ",
    LiveState.LIVE: "🔴 ",
    LiveState.VOD: "⭕ ",
}
UNKNOWN_CATEGORY = "Unknown category"
VIDEO_URL = "https://youtu.be/{}"


def format_time_note(extras: ItemExtras) -> str:
    """Start time shown before the title of streams that have not started yet."""
    if extras.live_state is LiveState.UPCOMING and extras.scheduled_start is not None:
        starts = extras.scheduled_start.astimezone(timezone.utc)
        return f"<i>{starts:%Y-%m-%d %H:%M} UTC</i> "
    return ""


def format_notification(item: Item, extras: ItemExtras, category_title: str,
                        category_emoji: Optional[str] = None) -> str:
    header = " ".join(part for part in (
        f"<b>{html.escape(extras.channel_title)}</b>",
        category_emoji or "",
        html.escape(category_title),
    ) if part)
    link = f'<a href="{VIDEO_URL.format(item.id)}">{html.escape(extras.title)}</a>'
    return f"{header}\n{LIVE_STATE_ICONS.get(extras.live_state, '')}{format_time_note(extras)}{link}"


class MessageFormatter:
    """Builds notification text, looking category titles up in the cache."""

    def __init__(self, category_cache: ICategoryCache):
        self.category_cache = category_cache

    async def format(self, item: Item, extras: ItemExtras) -> str:
        category = await self.category_cache.get(extras.category_id)
        title, emoji = category if category else (UNKNOWN_CATEGORY, None)
        return format_notification(item, extras, title, emoji)
