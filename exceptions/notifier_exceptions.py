# exceptions/notifier_exceptions.py - Notification delivery exceptions
from typing import Optional, Dict, Any
from .base_exceptions import PlaylistNotifierException


class NotifierError(PlaylistNotifierException):
    """Base exception for message delivery"""
    pass


class SendError(NotifierError):
    """Exception raised when a notification could not be sent"""

    def __init__(self, subscriber_id: int, error: str, details: Optional[Dict[str, Any]] = None):
        message = f"Failed to send message to {subscriber_id}: {error}"
        super().__init__(message, details)
        self.subscriber_id = subscriber_id
        self.error = error


class DeleteError(NotifierError):
    """Exception raised when a sent notification could not be deleted"""

    def __init__(self, subscriber_id: int, message_id: int, error: str, details: Optional[Dict[str, Any]] = None):
        message = f"Failed to delete message {message_id} in {subscriber_id}: {error}"
        super().__init__(message, details)
        self.subscriber_id = subscriber_id
        self.message_id = message_id
        self.error = error
