# services/youtube/api_client.py - YouTube Data API client
import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from exceptions import FetchError

logger = logging.getLogger(__name__)


class YouTubeAPIClient:
    """Thin GET wrapper around the YouTube Data API. Every call costs quota, so callers go through the RateGate."""

    def __init__(self, http_session: aiohttp.ClientSession, api_key: str,
                 api_base_url: str = "https://www.googleapis.com/youtube/v3", request_timeout: int = 15):
        self.http_session = http_session
        self.api_key = api_key
        self.api_base_url = api_base_url.rstrip("/")
        self.request_timeout = request_timeout

    async def api_get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Performs GET request to the API and returns the decoded JSON body."""
        if self.http_session is None:
            raise RuntimeError("HTTP session not initialized")

        url = f"{self.api_base_url}{endpoint}"
        query = dict(params or {})
        query["key"] = self.api_key

        timeout = aiohttp.ClientTimeout(total=self.request_timeout, connect=5)
        try:
            async with self.http_session.get(url, params=query, timeout=timeout) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logger.error(f"[YOUTUBE] {endpoint} returned status {response.status}: {error_text[:500]}")
                    raise FetchError(endpoint, status_code=response.status, reason=_error_reason(error_text))
                return await response.json()
        except asyncio.TimeoutError:
            raise FetchError(endpoint, reason="timeout")
        except aiohttp.ClientError as e:
            raise FetchError(endpoint, reason=str(e))


def _error_reason(body: str) -> Optional[str]:
    """Pull the short reason (e.g. quotaExceeded) out of an API error body, if there is one."""
    try:
        errors = json.loads(body).get("error", {}).get("errors", [])
    except (ValueError, AttributeError):
        return None
    if errors and isinstance(errors[0], dict):
        return errors[0].get("reason")
    return None
