# exceptions/database_exceptions.py - Database exceptions
from typing import Optional, Dict, Any
from .base_exceptions import PlaylistNotifierException


class DatabaseException(PlaylistNotifierException):
    """Base exception for database operations"""
    pass


class DatabaseConnectionError(DatabaseException):
    """Exception raised when the connection pool cannot be created"""

    def __init__(self, error: str, details: Optional[Dict[str, Any]] = None):
        message = f"Database connection failed: {error}"
        super().__init__(message, details)
        self.error = error


class CursorUpdateError(DatabaseException):
    """Exception raised when a delivery cursor could not be written"""

    def __init__(self, feed_id: str, subscriber_id: int, error: str, details: Optional[Dict[str, Any]] = None):
        message = f"Failed to advance cursor for {feed_id}/{subscriber_id}: {error}"
        super().__init__(message, details)
        self.feed_id = feed_id
        self.subscriber_id = subscriber_id
        self.error = error


class DuplicateSubscriptionError(DatabaseException):
    """Exception raised when a chat is already subscribed to a feed"""

    def __init__(self, feed_id: str, subscriber_id: int, details: Optional[Dict[str, Any]] = None):
        message = f"Chat {subscriber_id} is already subscribed to {feed_id}"
        super().__init__(message, details)
        self.feed_id = feed_id
        self.subscriber_id = subscriber_id
