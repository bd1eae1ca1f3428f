# services/youtube/item_enricher.py - Category, title, live state and shorts flag for items
import asyncio
import logging
from typing import List, Sequence

import aiohttp
from pydantic import ValidationError

from exceptions import EmptyResponseError, FetchError, LengthMismatchError, ShortProbeError
from interfaces import IItemEnricher
from models import Item, ItemExtras, LiveState, derive_live_state
from utils.rate_gate import RateGate
from .api_client import YouTubeAPIClient
from .schemas import Video, VideoListResponse

logger = logging.getLogger(__name__)

MAX_IDS_PER_REQUEST = 50
SHORTS_URL = "https://www.youtube.com/shorts/{}"
# /shorts/<id> answers 200 for a short and redirects long-form videos to /watch
SHORT_STATUS = 200
LONG_FORM_STATUS = 303


def extras_from_video(video: Video, is_short: bool) -> ItemExtras:
    details = video.liveStreamingDetails
    if details is None:
        live_state = LiveState.UPLOADED
        scheduled_start = actual_start = None
    else:
        live_state = derive_live_state(details.scheduledStartTime, details.actualStartTime, details.actualEndTime)
        scheduled_start = details.scheduledStartTime
        actual_start = details.actualStartTime

    return ItemExtras(
        category_id=video.snippet.categoryId,
        title=video.snippet.title,
        channel_title=video.snippet.channelTitle,
        live_state=live_state,
        is_short=is_short,
        is_scheduled=scheduled_start is not None,
        scheduled_start=scheduled_start,
        actual_start=actual_start,
    )


class ItemEnricher(IItemEnricher):
    """Fetches ItemExtras for a batch of items. Any failure discards the whole batch."""

    def __init__(self, rate_gate: RateGate[YouTubeAPIClient], http_session: aiohttp.ClientSession,
                 probe_timeout: int = 10):
        self.rate_gate = rate_gate
        self.http_session = http_session
        self.probe_timeout = probe_timeout

    async def enrich(self, items: Sequence[Item]) -> List[ItemExtras]:
        extras: List[ItemExtras] = []
        for start in range(0, len(items), MAX_IDS_PER_REQUEST):
            batch = items[start:start + MAX_IDS_PER_REQUEST]
            videos = await self.fetch_videos(batch)
            for video in videos:
                is_short = await self.probe_short(video.id)
                extras.append(extras_from_video(video, is_short))
        return extras

    async def fetch_videos(self, items: Sequence[Item]) -> List[Video]:
        """One videos.list call; returns videos in the same order as items."""
        if not items:
            return []

        ids = [item.id for item in items]
        params = {"part": "snippet,liveStreamingDetails", "id": ",".join(ids)}
        payload = await self.rate_gate.use_with(lambda api: api.api_get("/videos", params))

        try:
            response = VideoListResponse.model_validate(payload)
        except ValidationError as e:
            raise FetchError("/videos", reason=f"malformed response: {e.error_count()} errors")

        if not response.items:
            raise EmptyResponseError(len(ids), {"ids": ids})
        if len(response.items) != len(ids):
            raise LengthMismatchError(len(ids), len(response.items), {"ids": ids})

        by_id = {video.id: video for video in response.items}
        missing = [video_id for video_id in ids if video_id not in by_id]
        if missing:
            raise LengthMismatchError(len(ids), len(ids) - len(missing), {"missing": missing})
        return [by_id[video_id] for video_id in ids]

    async def probe_short(self, item_id: str) -> bool:
        """HEAD the shorts URL without following redirects."""
        timeout = aiohttp.ClientTimeout(total=self.probe_timeout)
        try:
            async with self.http_session.head(SHORTS_URL.format(item_id), allow_redirects=False,
                                              timeout=timeout) as response:
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ShortProbeError(item_id, details={"error": str(e)})

        if status == SHORT_STATUS:
            return True
        if status == LONG_FORM_STATUS:
            return False
        raise ShortProbeError(item_id, status)
