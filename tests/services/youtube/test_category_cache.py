import pytest
from unittest.mock import AsyncMock, MagicMock

from exceptions import FetchError
from services.youtube import CategoryCache
from utils.rate_gate import RateGate

CATEGORIES = {"items": [
    {"id": "10", "snippet": {"title": "Music", "assignable": True}},
    {"id": "20", "snippet": {"title": "Gaming", "assignable": True}},
    {"id": "99", "snippet": {"title": "Something new"}},
]}


@pytest.fixture
def api():
    client = MagicMock()
    client.api_get = AsyncMock(return_value=CATEGORIES)
    return client


@pytest.fixture
def cache(api):
    return CategoryCache(RateGate(0, api), region_code="GB", language="en_GB")


class TestCategoryCache:
    @pytest.mark.asyncio
    async def test_loads_on_first_lookup(self, cache, api):
        assert await cache.get("20") == ("Gaming", "🎮")
        api.api_get.assert_awaited_once_with(
            "/videoCategories", {"part": "snippet", "regionCode": "GB", "hl": "en_GB"}
        )

    @pytest.mark.asyncio
    async def test_known_ids_do_not_refresh(self, cache, api):
        await cache.get("20")
        await cache.get("10")
        assert api.api_get.await_count == 1

    @pytest.mark.asyncio
    async def test_category_without_emoji(self, cache):
        assert await cache.get("99") == ("Something new", None)

    @pytest.mark.asyncio
    async def test_unknown_after_refresh(self, cache, api):
        assert await cache.get("12345") is None
        assert api.api_get.await_count == 1

    @pytest.mark.asyncio
    async def test_refresh_failure_returns_none(self, cache, api):
        api.api_get.side_effect = FetchError("/videoCategories", status_code=403, reason="quotaExceeded")

        assert await cache.get("20") is None

    @pytest.mark.asyncio
    async def test_malformed_response(self, cache, api):
        api.api_get.return_value = {"items": [{"id": "1"}]}

        with pytest.raises(FetchError):
            await cache.refresh()

    @pytest.mark.asyncio
    async def test_unknown_id_is_not_refetched(self, cache, api):
        for _ in range(5):
            assert await cache.get("") is None

        assert api.api_get.await_count == 1

    @pytest.mark.asyncio
    async def test_refresh_for_another_id_retries_missing(self, cache, api):
        assert await cache.get("30") is None
        api.api_get.return_value = {"items": CATEGORIES["items"] + [
            {"id": "30", "snippet": {"title": "Movies"}},
            {"id": "31", "snippet": {"title": "Anime/Animation"}},
        ]}

        assert await cache.get("31") == ("Anime/Animation", None)
        assert await cache.get("30") == ("Movies", None)
        assert api.api_get.await_count == 2
