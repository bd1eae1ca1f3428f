# services/youtube/__init__.py - Content API services
from .api_client import YouTubeAPIClient
from .feed_reader import FeedReader
from .item_enricher import ItemEnricher
from .category_cache import CategoryCache
from .channel_resolver import ChannelResolver
