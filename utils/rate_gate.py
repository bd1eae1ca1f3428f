# utils/rate_gate.py - Process-wide spacing of content API calls
import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


class RateGate(Generic[T]):
    """
    Serializes use of a shared resource behind a minimum interval.

    The interval is measured from the moment the previous holder released the gate,
    so a slow call pushes the next one back instead of letting it start early.
    The gate is the only place that mutates the last-release timestamp, and only
    while holding its lock.
    """

    def __init__(self, interval: float, resource: T, clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        self.interval = interval
        self._resource = resource
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_release: Optional[float] = None

    @property
    def last_release(self) -> Optional[float]:
        return self._last_release

    def seconds_until_ready(self) -> float:
        if self._last_release is None:
            return 0.0
        elapsed = self._clock() - self._last_release
        return max(0.0, self.interval - elapsed)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[T]:
        """Wait for the interval, then hold the resource for the duration of the block."""
        async with self._lock:
            wait = self.seconds_until_ready()
            if wait > 0:
                logger.debug(f"[RATE] Waiting {wait:.2f}s for the next request slot")
                await self._sleep(wait)
            try:
                yield self._resource
            finally:
                self._last_release = self._clock()

    async def use_with(self, func: Callable[[T], Awaitable[R]]) -> R:
        """Run ``await func(resource)`` under the gate and return its result."""
        async with self.acquire() as resource:
            return await func(resource)
