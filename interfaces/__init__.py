# interfaces/__init__.py - Interface imports
from .repository_interfaces import ISubscriptionRepository
from .youtube_interfaces import IFeedReader, IItemEnricher, ICategoryCache, IChannelResolver
from .notifier_interfaces import INotifier
