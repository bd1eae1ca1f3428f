# models/workunit.py - In-memory delivery units
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .item import Item, ItemExtras
from .subscription import Subscription


class WorkunitState(Enum):
    """States of one candidate delivery. Everything except PENDING and SENT is terminal."""

    PENDING = "pending"
    SENT = "sent"
    # Filtered out, cursor advanced (or the write was logged as failed), nothing sent.
    SUPPRESSED = "suppressed"
    # Send failed, cursor untouched; retried next cycle.
    SEND_FAILED = "send_failed"
    # Sent and cursor advanced.
    DELIVERED = "delivered"
    # Sent, cursor write failed, message deleted again.
    COMPENSATED = "compensated"
    # Sent, cursor write failed, delete failed; waiting in the resync queue.
    RESYNC_QUEUED = "resync_queued"
    # An earlier item for the same chat failed this pass; left for next cycle, cursor untouched.
    DEFERRED = "deferred"


TERMINAL_STATES = frozenset({
    WorkunitState.SUPPRESSED,
    WorkunitState.SEND_FAILED,
    WorkunitState.DELIVERED,
    WorkunitState.COMPENSATED,
    WorkunitState.RESYNC_QUEUED,
    WorkunitState.DEFERRED,
})


@dataclass(frozen=True)
class MessageHandle:
    """Enough information to delete a sent notification."""

    chat_id: int
    message_id: int


@dataclass
class Workunit:
    """One item to be delivered to one subscription."""

    item: Item
    extras: ItemExtras
    subscription: Subscription
    state: WorkunitState = WorkunitState.PENDING
    message: Optional[MessageHandle] = field(default=None, repr=False)

    @property
    def feed_id(self) -> str:
        return self.subscription.feed_id

    @property
    def subscriber_id(self) -> int:
        return self.subscription.subscriber_id

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES


@dataclass
class ResyncEntry:
    """A delivered workunit whose cursor still has to be written."""

    workunit: Workunit
    attempts: int = 0
