# services/delivery/dispatch_engine.py - Delivery of workunits and cursor reconciliation
import asyncio
import logging
from collections import deque
from typing import Any, Awaitable, Callable, Deque, List, Sequence, Set, Tuple

from exceptions import DatabaseException, NotifierError
from interfaces import INotifier, ISubscriptionRepository
from models import ResyncEntry, Workunit, WorkunitState
from .filter_gate import is_eligible
from .message_formatter import MessageFormatter

logger = logging.getLogger(__name__)

RESYNC_DELAY = 0.005
# Nothing stays in the chat and the cursor was not moved past the item
UNDELIVERED_STATES = frozenset({WorkunitState.SEND_FAILED, WorkunitState.COMPENSATED})


class DispatchEngine:
    """
    Drives each workunit to exactly one terminal state:

    - SUPPRESSED: filtered out, cursor advanced, nothing sent
    - SEND_FAILED: send raised, cursor untouched
    - DELIVERED: sent and cursor advanced
    - COMPENSATED: sent, cursor write failed, message deleted again
    - RESYNC_QUEUED: sent, cursor write failed, delete failed
    - DEFERRED: an earlier workunit for the same subscription ended SEND_FAILED
      or COMPENSATED in this dispatch, so nothing is sent and the cursor stays
      behind the failed item until the next cycle

    RESYNC_QUEUED workunits wait in the resync queue, which is drained before
    dispatch() returns.
    """

    def __init__(self, notifier: INotifier, subscription_repository: ISubscriptionRepository,
                 formatter: MessageFormatter, resync_delay: float = RESYNC_DELAY,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        self.notifier = notifier
        self.subscription_repository = subscription_repository
        self.formatter = formatter
        self.resync_delay = resync_delay
        self._sleep = sleep
        self.resync_queue: Deque[ResyncEntry] = deque()

    async def dispatch(self, workunits: Sequence[Workunit]) -> List[WorkunitState]:
        """Process workunits in order, then block until every resync entry is written."""
        outcomes = []
        failed: Set[Tuple[str, int]] = set()
        try:
            for workunit in workunits:
                key = (workunit.feed_id, workunit.subscriber_id)
                if key in failed:
                    workunit.state = WorkunitState.DEFERRED
                    outcomes.append(workunit.state)
                    continue
                state = await self.process(workunit)
                if state in UNDELIVERED_STATES:
                    failed.add(key)
                outcomes.append(state)
        finally:
            await self.drain_resync_queue()
        return outcomes

    async def process(self, workunit: Workunit) -> WorkunitState:
        if not is_eligible(workunit.extras, workunit.subscription.filters):
            return await self._suppress(workunit)

        text = await self.formatter.format(workunit.item, workunit.extras)
        try:
            workunit.message = await self.notifier.send(workunit.subscriber_id, text)
        except NotifierError as e:
            logger.error(f"{workunit.item.id}\tsend in dispatch for chat {workunit.subscriber_id}:\t{e}")
            workunit.state = WorkunitState.SEND_FAILED
            return workunit.state

        workunit.state = WorkunitState.SENT
        return await self._record_delivery(workunit)

    async def _suppress(self, workunit: Workunit) -> WorkunitState:
        workunit.state = WorkunitState.SUPPRESSED
        try:
            await self._advance(workunit)
        except DatabaseException as e:
            # Nothing was sent, so the item is simply evaluated again next cycle
            logger.error(f"{workunit.item.id}\tadvance_cursor for suppressed item:\t{e}")
        return workunit.state

    async def _record_delivery(self, workunit: Workunit) -> WorkunitState:
        try:
            await self._advance(workunit)
        except DatabaseException as e:
            logger.error(f"{workunit.item.id}\tadvance_cursor after send:\t{e}")
            return await self._compensate(workunit)

        workunit.state = WorkunitState.DELIVERED
        logger.info(f"[DISPATCH] Delivered {workunit.item.id} from {workunit.feed_id} to chat {workunit.subscriber_id}")
        return workunit.state

    async def _compensate(self, workunit: Workunit) -> WorkunitState:
        logger.warning("Attempting to delete message to restore consistency...")
        try:
            await self.notifier.delete(workunit.message)
        except NotifierError as e:
            logger.error(
                f"{workunit.item.id}\tdelete in compensation:\t{e}\n"
                f"Adding to queue to be reprocessed later."
            )
            workunit.state = WorkunitState.RESYNC_QUEUED
            self.resync_queue.append(ResyncEntry(workunit=workunit))
            return workunit.state

        workunit.state = WorkunitState.COMPENSATED
        return workunit.state

    async def _advance(self, workunit: Workunit) -> None:
        await self.subscription_repository.advance_cursor(
            workunit.feed_id, workunit.subscriber_id, workunit.item.published_at
        )

    async def drain_resync_queue(self) -> int:
        """
        Retry cursor writes FIFO until the queue is empty and return the number of
        extra failures. This blocks the whole update loop on purpose: a message is
        out in a chat with no cursor behind it, and the next cycle would send it again.
        """
        if not self.resync_queue:
            return 0

        logger.warning(f"[RESYNC] {len(self.resync_queue)} DB update failures to resolve")
        failure_count = 0
        while self.resync_queue:
            entry = self.resync_queue.popleft()
            entry.attempts += 1
            try:
                await self._advance(entry.workunit)
            except DatabaseException as e:
                failure_count += 1
                logger.debug(f"[RESYNC] {entry.workunit.item.id} attempt {entry.attempts} failed: {e}")
                self.resync_queue.append(entry)
            else:
                entry.workunit.state = WorkunitState.DELIVERED
            await self._sleep(self.resync_delay)

        logger.info(f"[RESYNC] All failures resolved after {failure_count} additional failures.")
        return failure_count
