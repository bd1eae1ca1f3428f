# repositories/__init__.py - Repository imports
from .subscription_repository import SubscriptionRepository
