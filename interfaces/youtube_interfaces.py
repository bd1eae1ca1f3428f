# interfaces/youtube_interfaces.py - Content API interfaces
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from models import Item, ItemExtras


class IFeedReader(ABC):
    """Interface for listing the items of a feed"""

    @abstractmethod
    async def list_new_items(self, feed_id: str) -> List[Item]:
        """Get the latest page of items in a feed, oldest first"""
        pass


class IItemEnricher(ABC):
    """Interface for fetching auxiliary attributes of items"""

    @abstractmethod
    async def enrich(self, items: Sequence[Item]) -> List[ItemExtras]:
        """Get extras for each item, same order and length"""
        pass


class ICategoryCache(ABC):
    """Interface for video category title lookup"""

    @abstractmethod
    async def get(self, category_id: str) -> Optional[Tuple[str, Optional[str]]]:
        """Get (title, emoji) for a category id, or None if unknown"""
        pass


class IChannelResolver(ABC):
    """Interface for turning a public channel URL into its uploads playlist id"""

    @abstractmethod
    async def resolve_uploads_playlist(self, channel_url: str) -> str:
        """Get the uploads playlist id of the channel at the URL"""
        pass
