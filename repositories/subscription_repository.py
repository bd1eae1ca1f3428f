# repositories/subscription_repository.py - Subscription repository implementation
import logging
from typing import List, Optional, Set
from datetime import datetime

from exceptions import CursorUpdateError, DatabaseException, DuplicateSubscriptionError
from interfaces import ISubscriptionRepository
from models import ContentFilters, Subscription, EPOCH
from utils.retry import retry_db_operation

logger = logging.getLogger(__name__)

SUBSCRIPTION_COLUMNS = "playlist_id, chat_id, most_recent, live_allowed, vod_allowed, shorts_allowed"


def _row_to_subscription(row) -> Subscription:
    return Subscription(
        feed_id=row[0],
        subscriber_id=row[1],
        cursor=row[2],
        filters=ContentFilters(live_allowed=row[3], vod_allowed=row[4], short_allowed=row[5]),
    )


class SubscriptionRepository(ISubscriptionRepository):
    """PostgreSQL implementation of the subscription store"""

    def __init__(self, db_pool):
        self.db_pool = db_pool

    async def ensure_schema(self) -> None:
        async with self.db_pool.acquire() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    CREATE TABLE IF NOT EXISTS subscriptions (
                        playlist_id TEXT NOT NULL,
                        chat_id BIGINT NOT NULL,
                        most_recent TIMESTAMPTZ NOT NULL DEFAULT 'epoch',
                        live_allowed BOOLEAN NOT NULL DEFAULT TRUE,
                        vod_allowed BOOLEAN NOT NULL DEFAULT TRUE,
                        shorts_allowed BOOLEAN NOT NULL DEFAULT TRUE,
                        PRIMARY KEY (playlist_id, chat_id)
                    )
                    """
                )
        logger.info("[DB] Subscriptions table is ready")

    @retry_db_operation
    async def list_feeds(self) -> Set[str]:
        async with self.db_pool.acquire() as conn:
            async with conn.cursor() as cur:
                await cur.execute("SELECT DISTINCT playlist_id FROM subscriptions")
                rows = await cur.fetchall()
                return {row[0] for row in rows}

    async def count_feeds(self) -> int:
        async with self.db_pool.acquire() as conn:
            async with conn.cursor() as cur:
                await cur.execute("SELECT COUNT(DISTINCT playlist_id) FROM subscriptions")
                row = await cur.fetchone()
                return row[0] if row else 0

    @retry_db_operation
    async def list_subscriptions(self, feed_id: str) -> List[Subscription]:
        async with self.db_pool.acquire() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"SELECT {SUBSCRIPTION_COLUMNS} FROM subscriptions WHERE playlist_id = %s ORDER BY chat_id",
                    (feed_id,)
                )
                rows = await cur.fetchall()
                return [_row_to_subscription(row) for row in rows]

    async def get_subscription(self, feed_id: str, subscriber_id: int) -> Optional[Subscription]:
        async with self.db_pool.acquire() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"SELECT {SUBSCRIPTION_COLUMNS} FROM subscriptions WHERE playlist_id = %s AND chat_id = %s",
                    (feed_id, subscriber_id)
                )
                row = await cur.fetchone()
                return _row_to_subscription(row) if row else None

    async def advance_cursor(self, feed_id: str, subscriber_id: int, published_at: datetime) -> None:
        """Move most_recent forward to published_at. GREATEST keeps the cursor from ever moving back."""
        try:
            async with self.db_pool.acquire() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        UPDATE subscriptions
                        SET most_recent = GREATEST(most_recent, %s)
                        WHERE playlist_id = %s AND chat_id = %s
                        """,
                        (published_at, feed_id, subscriber_id)
                    )
                    if cur.rowcount == 0:
                        # Unsubscribed while the item was in flight; nothing left to keep in sync.
                        logger.debug(f"[DB] No subscription {feed_id}/{subscriber_id} to advance")
        except Exception as e:
            raise CursorUpdateError(feed_id, subscriber_id, str(e))

    async def add_subscription(self, feed_id: str, subscriber_id: int) -> Subscription:
        try:
            async with self.db_pool.acquire() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        f"""
                        INSERT INTO subscriptions (playlist_id, chat_id, most_recent)
                        VALUES (%s, %s, %s)
                        ON CONFLICT (playlist_id, chat_id) DO NOTHING
                        RETURNING {SUBSCRIPTION_COLUMNS}
                        """,
                        (feed_id, subscriber_id, EPOCH)
                    )
                    row = await cur.fetchone()
        except Exception as e:
            raise DatabaseException(f"Error adding subscription {feed_id}/{subscriber_id}: {str(e)}")
        if row is None:
            raise DuplicateSubscriptionError(feed_id, subscriber_id)
        logger.info(f"[DB] Chat {subscriber_id} subscribed to {feed_id}")
        return _row_to_subscription(row)

    async def remove_subscription(self, feed_id: str, subscriber_id: int) -> bool:
        try:
            async with self.db_pool.acquire() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        "DELETE FROM subscriptions WHERE playlist_id = %s AND chat_id = %s",
                        (feed_id, subscriber_id)
                    )
                    removed = cur.rowcount > 0
        except Exception as e:
            raise DatabaseException(f"Error removing subscription {feed_id}/{subscriber_id}: {str(e)}")
        if removed:
            logger.info(f"[DB] Chat {subscriber_id} unsubscribed from {feed_id}")
        return removed

    async def set_filters(self, feed_id: str, subscriber_id: int, filters: ContentFilters) -> bool:
        try:
            async with self.db_pool.acquire() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        UPDATE subscriptions
                        SET live_allowed = %s, vod_allowed = %s, shorts_allowed = %s
                        WHERE playlist_id = %s AND chat_id = %s
                        """,
                        (filters.live_allowed, filters.vod_allowed, filters.short_allowed, feed_id, subscriber_id)
                    )
                    return cur.rowcount > 0
        except Exception as e:
            raise DatabaseException(f"Error updating filters for {feed_id}/{subscriber_id}: {str(e)}")
