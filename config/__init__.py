# config/__init__.py - Configuration imports
from .services_config import (
    DatabaseConfig, YouTubeConfig, TelegramBotConfig, ServiceConfig,
    get_service_config, reset_config
)
