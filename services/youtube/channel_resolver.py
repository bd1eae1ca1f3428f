# services/youtube/channel_resolver.py - Channel page URL -> uploads playlist id
import asyncio
import logging
import re
from urllib.parse import urlparse

import aiohttp

from exceptions import ChannelResolveError
from interfaces import IChannelResolver

logger = logging.getLogger(__name__)

CHANNEL_ID_PATTERNS = (
    re.compile(r'<meta itemprop="(?:identifier|channelId)" content="(UC[\w-]{22})"'),
    re.compile(r'"externalId":"(UC[\w-]{22})"'),
    re.compile(r'"channelId":"(UC[\w-]{22})"'),
)
ALLOWED_HOSTS = {"youtube.com", "www.youtube.com", "m.youtube.com"}


def uploads_playlist_id(channel_id: str) -> str:
    """Every channel's uploads playlist is its id with the UC prefix swapped for UU."""
    return "UU" + channel_id[2:]


def find_channel_id(html: str):
    for pattern in CHANNEL_ID_PATTERNS:
        match = pattern.search(html)
        if match:
            return match.group(1)
    return None


class ChannelResolver(IChannelResolver):
    """Scrapes the public channel page; costs no API quota."""

    def __init__(self, http_session: aiohttp.ClientSession, user_agent: str, request_timeout: int = 15):
        self.http_session = http_session
        self.user_agent = user_agent
        self.request_timeout = request_timeout

    def normalize_url(self, channel_url: str) -> str:
        channel_url = channel_url.strip()
        if "://" not in channel_url:
            channel_url = "https://" + channel_url
        parsed = urlparse(channel_url)
        if parsed.hostname not in ALLOWED_HOSTS or not parsed.path.strip("/"):
            raise ChannelResolveError(channel_url, "Invalid URL. Please make sure you typed it correctly")
        return f"https://www.youtube.com{parsed.path.rstrip('/')}"

    async def resolve_uploads_playlist(self, channel_url: str) -> str:
        url = self.normalize_url(channel_url)
        headers = {"User-Agent": self.user_agent, "Accept-Language": "en-US,en;q=0.8"}
        timeout = aiohttp.ClientTimeout(total=self.request_timeout)
        try:
            async with self.http_session.get(url, headers=headers, timeout=timeout,
                                             cookies={"CONSENT": "YES+1"}) as response:
                if response.status != 200:
                    raise ChannelResolveError(url, f"HTTP request returned bad status code: {response.status}")
                html = await response.text()
        except asyncio.TimeoutError:
            raise ChannelResolveError(url, "HTTP Error: timeout")
        except aiohttp.ClientError as e:
            raise ChannelResolveError(url, f"HTTP Error: {e}")

        channel_id = find_channel_id(html)
        if channel_id is None:
            raise ChannelResolveError(url, "could not find a channel ID on the page")
        playlist_id = uploads_playlist_id(channel_id)
        logger.info(f"[YOUTUBE] Resolved {url} to uploads playlist {playlist_id}")
        return playlist_id
