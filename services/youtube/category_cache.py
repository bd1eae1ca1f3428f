# services/youtube/category_cache.py - Video category titles
import asyncio
import logging
from typing import Dict, Optional, Set, Tuple

from pydantic import ValidationError

from exceptions import FetchError
from interfaces import ICategoryCache
from utils.rate_gate import RateGate
from .api_client import YouTubeAPIClient
from .schemas import VideoCategoryListResponse

logger = logging.getLogger(__name__)

CATEGORY_EMOJIS = {
    "1": "🎬",   # Film & Animation
    "2": "🚗",   # Autos & Vehicles
    "10": "🎵",  # Music
    "15": "🐾",  # Pets & Animals
    "17": "⚽",  # Sports
    "19": "✈️",  # Travel & Events
    "20": "🎮",  # Gaming
    "22": "👤",  # People & Blogs
    "23": "😂",  # Comedy
    "24": "🎭",  # Entertainment
    "25": "📰",  # News & Politics
    "26": "🛠️",  # Howto & Style
    "27": "🎓",  # Education
    "28": "🔬",  # Science & Technology
    "29": "🤝",  # Nonprofits & Activism
}


class CategoryCache(ICategoryCache):
    """Category id -> (title, emoji). Loaded once, refreshed when an unknown id shows up.

    An id still unknown after a refresh is remembered as missing until the next
    refresh, so it does not cost another request per lookup.
    """

    def __init__(self, rate_gate: RateGate[YouTubeAPIClient], region_code: str = "US", language: str = "en_US"):
        self.rate_gate = rate_gate
        self.region_code = region_code
        self.language = language
        self._titles: Dict[str, str] = {}
        # Ids the last successful refresh did not know about
        self._missing: Set[str] = set()
        self._lock = asyncio.Lock()

    async def refresh(self) -> None:
        params = {"part": "snippet", "regionCode": self.region_code, "hl": self.language}
        payload = await self.rate_gate.use_with(lambda api: api.api_get("/videoCategories", params))
        try:
            response = VideoCategoryListResponse.model_validate(payload)
        except ValidationError as e:
            raise FetchError("/videoCategories", reason=f"malformed response: {e.error_count()} errors")
        self._titles = {category.id: category.snippet.title for category in response.items}
        self._missing = set()
        logger.info(f"[YOUTUBE] Loaded {len(self._titles)} video categories for {self.region_code}/{self.language}")

    async def get(self, category_id: str) -> Optional[Tuple[str, Optional[str]]]:
        async with self._lock:
            if category_id in self._missing:
                return None
            if category_id not in self._titles:
                try:
                    await self.refresh()
                except FetchError as e:
                    logger.warning(f"[YOUTUBE] Category refresh for {category_id} failed: {e}")
                    return None
            title = self._titles.get(category_id)
            if title is None:
                self._missing.add(category_id)
        if title is None:
            return None
        return title, CATEGORY_EMOJIS.get(category_id)
