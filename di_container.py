# di_container.py - Dependency Injection Container
import logging
from typing import Optional

import aiohttp
from telegram import Bot

from config.services_config import ServiceConfig
from interfaces import (
    ICategoryCache, IChannelResolver, IFeedReader, IItemEnricher, INotifier, ISubscriptionRepository
)
from repositories import SubscriptionRepository
from services.database_pool_adapter import DatabasePoolAdapter, create_database_pool
from services.delivery import DispatchEngine, MessageFormatter, PollScheduler
from services.notifier import TelegramNotifier
from services.youtube import CategoryCache, ChannelResolver, FeedReader, ItemEnricher, YouTubeAPIClient
from utils.rate_gate import RateGate

logger = logging.getLogger(__name__)


class DIContainer:
    """Owns every long-lived service. Built once at startup and handed to whoever needs it."""

    def __init__(self, config: ServiceConfig):
        self.config = config
        self._services = {}
        self._singletons = {}

        self._singletons['http_session'] = None
        self._singletons['db_pool'] = None

    async def initialize(self, bot: Bot, db_pool: Optional[DatabasePoolAdapter] = None):
        """Initialize the container and services."""
        logger.info("Initializing DI Container")

        await self._initialize_http_session()
        http_session = self._singletons['http_session']

        if db_pool is None:
            db_pool = await create_database_pool(self.config.database)
        self._singletons['db_pool'] = db_pool

        youtube_config = self.config.youtube
        api_client = YouTubeAPIClient(
            http_session=http_session,
            api_key=youtube_config.api_key,
            api_base_url=youtube_config.api_base_url,
            request_timeout=youtube_config.request_timeout
        )
        # Every quota-consuming request in the process goes through this one gate
        rate_gate = RateGate(youtube_config.request_interval, api_client)
        self._singletons['rate_gate'] = rate_gate

        self._services['subscription_repository'] = SubscriptionRepository(db_pool)
        self._services['feed_reader'] = FeedReader(rate_gate)
        self._services['item_enricher'] = ItemEnricher(rate_gate, http_session)
        self._services['category_cache'] = CategoryCache(
            rate_gate, region_code=youtube_config.region_code, language=youtube_config.language
        )
        self._services['channel_resolver'] = ChannelResolver(http_session, self.config.default_user_agent)
        self._services['notifier'] = TelegramNotifier(bot)
        self._services['dispatch_engine'] = DispatchEngine(
            notifier=self._services['notifier'],
            subscription_repository=self._services['subscription_repository'],
            formatter=MessageFormatter(self._services['category_cache'])
        )
        self._services['poll_scheduler'] = PollScheduler(
            subscription_repository=self._services['subscription_repository'],
            feed_reader=self._services['feed_reader'],
            item_enricher=self._services['item_enricher'],
            dispatch_engine=self._services['dispatch_engine'],
            idle_interval=youtube_config.request_interval
        )

        await self.subscription_repository.ensure_schema()
        logger.info("DI Container initialized")

    async def _initialize_http_session(self):
        """Initialize HTTP session."""
        if self._singletons['http_session'] is None:
            connector = aiohttp.TCPConnector(limit=10, keepalive_timeout=30, enable_cleanup_closed=True)
            timeout = aiohttp.ClientTimeout(total=self.config.youtube.request_timeout, connect=5)
            self._singletons['http_session'] = aiohttp.ClientSession(
                connector=connector, timeout=timeout, headers={"User-Agent": self.config.default_user_agent}
            )
            logger.info("HTTP session initialized")

    async def shutdown(self):
        """Shutdown the container and clean up resources."""
        logger.info("Shutting down DI Container")

        if self._singletons['http_session']:
            try:
                await self._singletons['http_session'].close()
                self._singletons['http_session'] = None
                logger.info("HTTP session closed")
            except Exception as e:
                logger.error(f"Error closing HTTP session: {e}")

        if self._singletons['db_pool']:
            try:
                await self._singletons['db_pool'].close()
                self._singletons['db_pool'] = None
            except Exception as e:
                logger.error(f"Error closing DB pool: {e}")

        logger.info("DI Container shut down")

    def get_service(self, service_name: str):
        """Get a service instance."""
        return self._services.get(service_name)

    def get_singleton(self, key: str):
        """Get a singleton value."""
        return self._singletons.get(key)

    # Convenience methods
    @property
    def subscription_repository(self) -> ISubscriptionRepository:
        return self._services['subscription_repository']

    @property
    def feed_reader(self) -> IFeedReader:
        return self._services['feed_reader']

    @property
    def item_enricher(self) -> IItemEnricher:
        return self._services['item_enricher']

    @property
    def category_cache(self) -> ICategoryCache:
        return self._services['category_cache']

    @property
    def channel_resolver(self) -> IChannelResolver:
        return self._services['channel_resolver']

    @property
    def notifier(self) -> INotifier:
        return self._services['notifier']

    @property
    def dispatch_engine(self) -> DispatchEngine:
        return self._services['dispatch_engine']

    @property
    def poll_scheduler(self) -> PollScheduler:
        return self._services['poll_scheduler']
