# models/item.py - Feed items and their auxiliary attributes
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class LiveState(Enum):
    """Broadcast lifecycle of an item."""

    UPLOADED = "uploaded"
    UPCOMING = "upcoming"
    LIVE = "live"
    VOD = "vod"
    # Neither a scheduled nor an actual start time is present.
    INDETERMINATE = "indeterminate"


def derive_live_state(scheduled_start: Optional[datetime], actual_start: Optional[datetime],
                      actual_end: Optional[datetime]) -> LiveState:
    """Maps the three optional stream timestamps of an item with live details to its LiveState.

    Items without any live streaming details are plain uploads and never reach this function.
    """
    if actual_start is not None:
        return LiveState.VOD if actual_end is not None else LiveState.LIVE
    if scheduled_start is not None and actual_end is None:
        return LiveState.UPCOMING
    return LiveState.INDETERMINATE


@dataclass(frozen=True)
class Item:
    """One piece of content observed in a feed."""

    id: str
    published_at: datetime


@dataclass(frozen=True)
class ItemExtras:
    """Attributes fetched only for items somebody is waiting for."""

    category_id: str
    title: str
    channel_title: str
    live_state: LiveState
    is_short: bool = False
    is_scheduled: bool = False
    scheduled_start: Optional[datetime] = None
    actual_start: Optional[datetime] = None
