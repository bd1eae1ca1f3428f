# services/notifier/__init__.py - Notification services
from .telegram_notifier import TelegramNotifier
