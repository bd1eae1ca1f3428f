import pytest
from unittest.mock import AsyncMock

from exceptions import CursorUpdateError, DatabaseException, DuplicateSubscriptionError
from models import ContentFilters, EPOCH
from repositories import SubscriptionRepository
from tests.factories import at


@pytest.fixture
def repo(mock_db_pool):
    return SubscriptionRepository(mock_db_pool)


@pytest.fixture
def cur(mock_db_pool):
    conn = mock_db_pool.acquire.return_value.return_value
    cursor = conn.cursor_mock
    cursor.execute = AsyncMock()
    return cursor


class TestSubscriptionRepository:
    @pytest.mark.asyncio
    async def test_ensure_schema(self, repo, cur):
        await repo.ensure_schema()

        sql = cur.execute.call_args[0][0]
        assert "CREATE TABLE IF NOT EXISTS subscriptions" in sql

    @pytest.mark.asyncio
    async def test_list_feeds(self, repo, cur):
        cur.fetchall = AsyncMock(return_value=[("UUa",), ("UUb",)])

        assert await repo.list_feeds() == {"UUa", "UUb"}

    @pytest.mark.asyncio
    async def test_count_feeds(self, repo, cur):
        cur.fetchone = AsyncMock(return_value=(3,))

        assert await repo.count_feeds() == 3

    @pytest.mark.asyncio
    async def test_list_subscriptions(self, repo, cur):
        cur.fetchall = AsyncMock(return_value=[
            ("UUa", 1, at(1), True, False, True),
            ("UUa", 2, EPOCH, False, True, False),
        ])

        subscriptions = await repo.list_subscriptions("UUa")

        assert [s.subscriber_id for s in subscriptions] == [1, 2]
        assert subscriptions[0].cursor == at(1)
        assert subscriptions[0].filters == ContentFilters(live_allowed=True, vod_allowed=False, short_allowed=True)
        assert cur.execute.call_args[0][1] == ("UUa",)

    @pytest.mark.asyncio
    async def test_get_subscription_missing(self, repo, cur):
        cur.fetchone = AsyncMock(return_value=None)

        assert await repo.get_subscription("UUa", 1) is None

    @pytest.mark.asyncio
    async def test_advance_cursor_never_moves_back(self, repo, cur):
        cur.rowcount = 1

        await repo.advance_cursor("UUa", 1, at(5))

        sql, params = cur.execute.call_args[0]
        assert "GREATEST(most_recent, %s)" in sql
        assert params == (at(5), "UUa", 1)

    @pytest.mark.asyncio
    async def test_advance_cursor_failure(self, repo, cur):
        cur.execute.side_effect = Exception("connection lost")

        with pytest.raises(CursorUpdateError) as exc_info:
            await repo.advance_cursor("UUa", 1, at(5))
        assert isinstance(exc_info.value, DatabaseException)

    @pytest.mark.asyncio
    async def test_add_subscription(self, repo, cur):
        cur.fetchone = AsyncMock(return_value=("UUa", 1, EPOCH, True, True, True))

        subscription = await repo.add_subscription("UUa", 1)

        assert subscription.cursor == EPOCH
        assert cur.execute.call_args[0][1] == ("UUa", 1, EPOCH)

    @pytest.mark.asyncio
    async def test_add_duplicate_subscription(self, repo, cur):
        cur.fetchone = AsyncMock(return_value=None)

        with pytest.raises(DuplicateSubscriptionError):
            await repo.add_subscription("UUa", 1)

    @pytest.mark.asyncio
    async def test_remove_subscription(self, repo, cur):
        cur.rowcount = 1
        assert await repo.remove_subscription("UUa", 1) is True

        cur.rowcount = 0
        assert await repo.remove_subscription("UUa", 1) is False

    @pytest.mark.asyncio
    async def test_remove_subscription_error(self, repo, cur):
        cur.execute.side_effect = Exception("db error")

        with pytest.raises(DatabaseException):
            await repo.remove_subscription("UUa", 1)

    @pytest.mark.asyncio
    async def test_set_filters(self, repo, cur):
        cur.rowcount = 1

        result = await repo.set_filters("UUa", 1, ContentFilters(live_allowed=False))

        assert result is True
        assert cur.execute.call_args[0][1] == (False, True, True, "UUa", 1)
