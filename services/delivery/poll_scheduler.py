# services/delivery/poll_scheduler.py - The outer update loop
import asyncio
import logging
from typing import Dict, Iterable, List

from exceptions import YouTubeException
from interfaces import IFeedReader, IItemEnricher, ISubscriptionRepository
from models import WorkunitState
from .dispatch_engine import DispatchEngine
from .workunit_builder import build_workunit_plan

logger = logging.getLogger(__name__)


class PollScheduler:
    """
    Polls every watched feed, one at a time, forever.

    There is no timer between cycles: every feed costs at least one rate-gated API
    request, so the loop runs exactly as fast as the quota allows. The only sleep
    is the idle wait when nobody is subscribed to anything.
    """

    def __init__(self, subscription_repository: ISubscriptionRepository, feed_reader: IFeedReader,
                 item_enricher: IItemEnricher, dispatch_engine: DispatchEngine, idle_interval: float):
        self.subscription_repository = subscription_repository
        self.feed_reader = feed_reader
        self.item_enricher = item_enricher
        self.dispatch_engine = dispatch_engine
        self.idle_interval = idle_interval
        self._shutdown = asyncio.Event()

    def request_shutdown(self) -> None:
        """Stop at the next feed boundary."""
        logger.info("[POLL] Shutdown requested")
        self._shutdown.set()

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown.is_set()

    async def run_forever(self) -> None:
        logger.info("[POLL] Update loop started")
        while not self._shutdown.is_set():
            try:
                feeds = await self.subscription_repository.list_feeds()
            except Exception as e:
                logger.error(f"list_feeds in update loop:\t{e}")
                await self._idle()
                continue

            if not feeds:
                await self._idle()
                continue

            await self.run_cycle(feeds)
        logger.info("[POLL] Update loop stopped")

    async def run_cycle(self, feeds: Iterable[str]) -> Dict[str, List[WorkunitState]]:
        """One pass over the given feeds. Returns the workunit outcomes per processed feed."""
        results = {}
        for feed_id in sorted(feeds):
            if self._shutdown.is_set():
                logger.info("[POLL] Stopping between feeds")
                break
            try:
                results[feed_id] = await self.process_feed(feed_id)
            except Exception as e:
                logger.exception(f"{feed_id}\tunexpected error in process_feed:\t{e}")
                results[feed_id] = []
        return results

    async def process_feed(self, feed_id: str) -> List[WorkunitState]:
        try:
            items = await self.feed_reader.list_new_items(feed_id)
        except YouTubeException as e:
            logger.error(f"{feed_id}\tlist_new_items in process_feed:\t{e}")
            return []

        try:
            subscriptions = await self.subscription_repository.list_subscriptions(feed_id)
        except Exception as e:
            logger.error(f"{feed_id}\tlist_subscriptions in process_feed:\t{e}")
            return []

        plan = build_workunit_plan(items, subscriptions)
        if not plan.candidates:
            return []

        try:
            extras = await self.item_enricher.enrich(plan.items)
        except YouTubeException as e:
            ids = ",".join(item.id for item in plan.items)
            logger.error(f"[{ids}]\tenrich in process_feed:\t{e}")
            return []

        outcomes = await self.dispatch_engine.dispatch(plan.attach(extras))
        logger.debug(f"[POLL] {feed_id}: {len(outcomes)} workunits processed")
        return outcomes

    async def _idle(self) -> None:
        try:
            await asyncio.wait_for(self._shutdown.wait(), timeout=self.idle_interval)
        except asyncio.TimeoutError:
            pass
