# interfaces/notifier_interfaces.py - Notification delivery interfaces
from abc import ABC, abstractmethod

from models import MessageHandle


class INotifier(ABC):
    """Interface for delivering notifications to a subscriber endpoint"""

    @abstractmethod
    async def send(self, subscriber_id: int, text: str) -> MessageHandle:
        """Send a message and return a handle that can delete it"""
        pass

    @abstractmethod
    async def delete(self, handle: MessageHandle) -> None:
        """Delete a previously sent message"""
        pass
