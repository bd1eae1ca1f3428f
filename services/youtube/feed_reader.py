# services/youtube/feed_reader.py - Latest items of an uploads playlist
import logging
from typing import List

from pydantic import ValidationError

from exceptions import FetchError, MissingFieldError
from interfaces import IFeedReader
from models import Item
from utils.rate_gate import RateGate
from .api_client import YouTubeAPIClient
from .schemas import PlaylistItemListResponse

logger = logging.getLogger(__name__)

PAGE_SIZE = 50


class FeedReader(IFeedReader):
    """Reads the first page of a playlist and returns it oldest first."""

    def __init__(self, rate_gate: RateGate[YouTubeAPIClient], page_size: int = PAGE_SIZE):
        self.rate_gate = rate_gate
        self.page_size = page_size

    async def list_new_items(self, feed_id: str) -> List[Item]:
        params = {"part": "snippet", "playlistId": feed_id, "maxResults": self.page_size}
        payload = await self.rate_gate.use_with(lambda api: api.api_get("/playlistItems", params))

        try:
            response = PlaylistItemListResponse.model_validate(payload)
        except ValidationError as e:
            raise FetchError("/playlistItems", reason=f"malformed response for {feed_id}: {e.error_count()} errors")

        items = []
        for entry in response.items:
            snippet = entry.snippet
            video_id = snippet.resourceId.videoId if snippet and snippet.resourceId else None
            if not video_id:
                raise MissingFieldError(feed_id, "videoId", {"playlist_item_id": entry.id})
            if snippet.publishedAt is None:
                raise MissingFieldError(feed_id, "publishedAt", {"video_id": video_id})
            items.append(Item(id=video_id, published_at=snippet.publishedAt))

        # The API lists newest first; everything downstream relies on oldest first.
        items.reverse()
        logger.debug(f"[YOUTUBE] {feed_id}: {len(items)} items")
        return items
