# interfaces/repository_interfaces.py - Repository interfaces
from abc import ABC, abstractmethod
from typing import List, Optional, Set
from datetime import datetime

from models import ContentFilters, Subscription


class ISubscriptionRepository(ABC):
    """Interface for the (feed, chat) subscription store"""

    @abstractmethod
    async def ensure_schema(self) -> None:
        """Create the subscriptions table if it does not exist"""
        pass

    @abstractmethod
    async def list_feeds(self) -> Set[str]:
        """Get the distinct set of feed ids with at least one subscriber"""
        pass

    @abstractmethod
    async def count_feeds(self) -> int:
        """Get the number of distinct feeds being watched"""
        pass

    @abstractmethod
    async def list_subscriptions(self, feed_id: str) -> List[Subscription]:
        """Get every subscription of a feed"""
        pass

    @abstractmethod
    async def get_subscription(self, feed_id: str, subscriber_id: int) -> Optional[Subscription]:
        """Get a single subscription"""
        pass

    @abstractmethod
    async def advance_cursor(self, feed_id: str, subscriber_id: int, published_at: datetime) -> None:
        """Move the delivery cursor forward; never moves it back"""
        pass

    @abstractmethod
    async def add_subscription(self, feed_id: str, subscriber_id: int) -> Subscription:
        """Subscribe a chat to a feed"""
        pass

    @abstractmethod
    async def remove_subscription(self, feed_id: str, subscriber_id: int) -> bool:
        """Unsubscribe a chat from a feed"""
        pass

    @abstractmethod
    async def set_filters(self, feed_id: str, subscriber_id: int, filters: ContentFilters) -> bool:
        """Replace the content-type filters of a subscription"""
        pass
