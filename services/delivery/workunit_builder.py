# services/delivery/workunit_builder.py - Join new items with the subscriptions waiting for them
import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from models import Item, ItemExtras, Subscription, Workunit

logger = logging.getLogger(__name__)


@dataclass
class WorkunitPlan:
    """Candidates for one feed before extras are known.

    ``candidates`` hold indexes into the full item list; ``items`` is the slice
    starting at ``first_index`` that extras are fetched for.
    """

    first_index: int
    items: List[Item]
    candidates: List[Tuple[int, Subscription]] = field(default_factory=list)

    def attach(self, extras: Sequence[ItemExtras]) -> List[Workunit]:
        if len(extras) != len(self.items):
            raise ValueError(f"Got {len(extras)} extras for {len(self.items)} items")
        workunits = []
        for index, subscription in self.candidates:
            offset = index - self.first_index
            workunits.append(Workunit(item=self.items[offset], extras=extras[offset], subscription=subscription))
        return workunits


def build_workunit_plan(items: Sequence[Item], subscriptions: Sequence[Subscription]) -> WorkunitPlan:
    """
    Walk items oldest first and pair each with every subscription whose cursor is behind it.

    Leading items nobody is waiting for are dropped by moving ``first_index`` past them.
    The pointer only moves while it sits on the current item, so once an item with
    candidates has been seen, later items without candidates stay in the slice.
    This relies on the feed returning items in publish order.
    """
    first_index = 0
    candidates: List[Tuple[int, Subscription]] = []

    for i, item in enumerate(items):
        waiting = [s for s in subscriptions if s.is_behind(item.published_at)]
        if not waiting:
            if first_index == i:
                first_index = i + 1
            continue
        candidates.extend((i, subscription) for subscription in waiting)

    plan = WorkunitPlan(first_index=first_index, items=list(items[first_index:]), candidates=candidates)
    logger.debug(f"[DISPATCH] {len(candidates)} candidates over {len(plan.items)} of {len(items)} items")
    return plan
