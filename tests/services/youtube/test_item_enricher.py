import asyncio

import aiohttp
import pytest
from unittest.mock import AsyncMock, MagicMock

from exceptions import EmptyResponseError, LengthMismatchError, ShortProbeError
from models import LiveState
from services.youtube import ItemEnricher
from utils.rate_gate import RateGate
from tests.factories import make_item, mock_response


def video(video_id, live=None, category="20"):
    payload = {
        "id": video_id,
        "snippet": {"title": f"Title {video_id}", "channelTitle": "Channel", "categoryId": category},
    }
    if live is not None:
        payload["liveStreamingDetails"] = live
    return payload


@pytest.fixture
def api():
    client = MagicMock()
    client.api_get = AsyncMock()
    return client


@pytest.fixture
def http_session():
    session = MagicMock()
    session.head.return_value = mock_response(status=303)
    return session


@pytest.fixture
def enricher(api, http_session):
    return ItemEnricher(RateGate(0, api), http_session)


class TestItemEnricher:
    @pytest.mark.asyncio
    async def test_extras_in_request_order(self, enricher, api):
        api.api_get.return_value = {"items": [video("b"), video("a", category="10")]}

        extras = await enricher.enrich([make_item("a", 1), make_item("b", 2)])

        assert [e.title for e in extras] == ["Title a", "Title b"]
        assert extras[0].category_id == "10"
        assert extras[0].live_state is LiveState.UPLOADED
        assert not extras[0].is_short
        params = api.api_get.await_args.args[1]
        assert params["id"] == "a,b"
        assert params["part"] == "snippet,liveStreamingDetails"

    @pytest.mark.asyncio
    async def test_live_details(self, enricher, api):
        api.api_get.return_value = {"items": [
            video("up", live={"scheduledStartTime": "2024-05-01T18:00:00Z"}),
            video("live", live={"scheduledStartTime": "2024-05-01T18:00:00Z",
                                "actualStartTime": "2024-05-01T18:01:00Z"}),
            video("vod", live={"actualStartTime": "2024-05-01T18:01:00Z",
                               "actualEndTime": "2024-05-01T19:00:00Z"}),
            video("odd", live={}),
        ]}

        extras = await enricher.enrich([make_item(i) for i in ("up", "live", "vod", "odd")])

        assert [e.live_state for e in extras] == [
            LiveState.UPCOMING, LiveState.LIVE, LiveState.VOD, LiveState.INDETERMINATE,
        ]
        assert [e.is_scheduled for e in extras] == [True, True, False, False]

    @pytest.mark.asyncio
    async def test_short_detected(self, enricher, api, http_session):
        api.api_get.return_value = {"items": [video("s")]}
        http_session.head.return_value = mock_response(status=200)

        extras = await enricher.enrich([make_item("s")])

        assert extras[0].is_short
        args, kwargs = http_session.head.call_args
        assert args[0] == "https://www.youtube.com/shorts/s"
        assert kwargs["allow_redirects"] is False

    @pytest.mark.asyncio
    async def test_unexpected_probe_status(self, enricher, api, http_session):
        api.api_get.return_value = {"items": [video("s")]}
        http_session.head.return_value = mock_response(status=429)

        with pytest.raises(ShortProbeError):
            await enricher.enrich([make_item("s")])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [asyncio.TimeoutError(), aiohttp.ClientConnectionError("reset")])
    async def test_probe_network_error(self, enricher, api, http_session, error):
        api.api_get.return_value = {"items": [video("s")]}
        http_session.head.side_effect = error

        with pytest.raises(ShortProbeError):
            await enricher.enrich([make_item("s")])

    @pytest.mark.asyncio
    async def test_empty_response(self, enricher, api):
        api.api_get.return_value = {"items": []}

        with pytest.raises(EmptyResponseError):
            await enricher.enrich([make_item("a")])

    @pytest.mark.asyncio
    async def test_length_mismatch(self, enricher, api):
        api.api_get.return_value = {"items": [video("a")]}

        with pytest.raises(LengthMismatchError):
            await enricher.enrich([make_item("a"), make_item("b")])

    @pytest.mark.asyncio
    async def test_unknown_id_in_response(self, enricher, api):
        api.api_get.return_value = {"items": [video("a"), video("zzz")]}

        with pytest.raises(LengthMismatchError):
            await enricher.enrich([make_item("a"), make_item("b")])

    @pytest.mark.asyncio
    async def test_large_batches_are_split(self, enricher, api):
        items = [make_item(f"v{i}") for i in range(60)]

        async def api_get(endpoint, params):
            return {"items": [video(video_id) for video_id in params["id"].split(",")]}

        api.api_get.side_effect = api_get

        extras = await enricher.enrich(items)

        assert len(extras) == 60
        assert api.api_get.await_count == 2
        assert extras[-1].title == "Title v59"

    @pytest.mark.asyncio
    async def test_nothing_to_enrich(self, enricher, api):
        assert await enricher.enrich([]) == []
        api.api_get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_video_request_has_no_max_results(self, enricher, api):
        api.api_get.return_value = {"items": [video("a")]}

        await enricher.enrich([make_item("a")])

        params = api.api_get.await_args.args[1]
        assert params == {"part": "snippet,liveStreamingDetails", "id": "a"}
