import pytest
from unittest.mock import AsyncMock, MagicMock

from models import MessageHandle
from tests.factories import FakeClock


class AsyncContextManagerMock:
    """A mock that can be used both as a coroutine and as an async context manager"""
    def __init__(self, return_value):
        self.return_value = return_value
        self._coroutine = None

    def __await__(self):
        """Make this object awaitable"""
        if self._coroutine is None:
            async def _coroutine():
                return self.return_value
            self._coroutine = _coroutine()
        return self._coroutine.__await__()

    async def __aenter__(self):
        return self.return_value

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


class AsyncConnectionMock:
    """Mock connection that supports async context manager and cursor"""
    def __init__(self, cursor_mock=None):
        self.cursor_mock = cursor_mock or AsyncMock()

    def cursor(self):
        """Return cursor as async context manager"""
        return AsyncContextManagerMock(self.cursor_mock)


@pytest.fixture
def mock_db_pool():
    """Create a properly mocked database pool"""
    pool = AsyncMock()
    conn = AsyncConnectionMock()
    cur = AsyncMock()

    # Set up the connection's cursor to return our mock cursor
    conn.cursor_mock = cur

    # Make pool.acquire return an async context manager that yields the connection
    pool.acquire = MagicMock(return_value=AsyncContextManagerMock(conn))

    return pool


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def mock_notifier():
    """Notifier whose sends succeed with increasing message ids"""
    notifier = AsyncMock()
    message_ids = iter(range(1, 10000))
    notifier.send = AsyncMock(side_effect=lambda chat_id, text: MessageHandle(chat_id, next(message_ids)))
    notifier.delete = AsyncMock(return_value=None)
    return notifier


@pytest.fixture
def mock_repository():
    repository = AsyncMock()
    repository.advance_cursor = AsyncMock(return_value=None)
    return repository


@pytest.fixture
def mock_formatter():
    formatter = AsyncMock()
    formatter.format = AsyncMock(side_effect=lambda item, extras: f"new: {item.id}")
    return formatter
