# services/delivery/filter_gate.py - Per-workunit eligibility
from models import ContentFilters, ItemExtras, LiveState


def is_eligible(extras: ItemExtras, filters: ContentFilters) -> bool:
    """
    Decide whether a chat should be notified about an item.

    Items that were already scheduled escape the live and VOD filters: a chat that
    saw the upcoming notice keeps getting the stream even if it only wants VODs.
    """
    if extras.live_state is LiveState.INDETERMINATE:
        return False
    if extras.is_short and not filters.short_allowed:
        return False
    if extras.live_state is LiveState.LIVE and not filters.live_allowed and not extras.is_scheduled:
        return False
    if extras.live_state is LiveState.VOD and not filters.vod_allowed and not extras.is_scheduled:
        return False
    return True
