# models/subscription.py - Subscription rows
from dataclasses import dataclass, field
from datetime import datetime, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class ContentFilters:
    """Content types a chat wants to hear about."""

    live_allowed: bool = True
    vod_allowed: bool = True
    short_allowed: bool = True


@dataclass(frozen=True)
class Subscription:
    """A (feed, chat) pair with its delivery cursor."""

    feed_id: str
    subscriber_id: int
    cursor: datetime = EPOCH
    filters: ContentFilters = field(default_factory=ContentFilters)

    def is_behind(self, published_at: datetime) -> bool:
        return self.cursor < published_at
