# config/services_config.py - Service configuration via environment variables
import os
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field

from exceptions import ConfigurationException

SECONDS_PER_DAY = 24 * 60 * 60


def _parse_id_list(raw: str) -> List[int]:
    """Parse a comma separated list of numeric ids"""
    ids = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            raise ConfigurationException("BOT_ADMINS", f"'{part}' is not a numeric user id")
    return ids


@dataclass
class DatabaseConfig:
    """Configuration for database connection"""
    host: str = "localhost"
    user: str = "your_db_user"
    password: str = "your_db_password"
    name: str = "playlist_notifier"
    port: int = 5432
    minsize: int = 1
    maxsize: int = 5

    @classmethod
    def from_env(cls) -> 'DatabaseConfig':
        return cls(
            host=os.getenv('DB_HOST', 'localhost'),
            user=os.getenv('DB_USER', 'your_db_user'),
            password=os.getenv('DB_PASSWORD', 'your_db_password'),
            name=os.getenv('DB_NAME', 'playlist_notifier'),
            port=int(os.getenv('DB_PORT', '5432')),
            minsize=int(os.getenv('DB_MINSIZE', '1')),
            maxsize=int(os.getenv('DB_MAXSIZE', '5'))
        )

    def as_pool_kwargs(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "user": self.user,
            "password": self.password,
            "database": self.name,
            "port": self.port,
            "minsize": self.minsize,
            "maxsize": self.maxsize,
        }


@dataclass
class YouTubeConfig:
    """Configuration for the YouTube Data API"""
    api_key: Optional[str] = None
    daily_quota: int = 10000
    region_code: str = "US"
    language: str = "en_US"
    api_base_url: str = "https://www.googleapis.com/youtube/v3"
    request_timeout: int = 15

    @classmethod
    def from_env(cls) -> 'YouTubeConfig':
        return cls(
            api_key=os.getenv('YOUTUBE_KEY') or None,
            daily_quota=int(os.getenv('YOUTUBE_DAILY_QUOTA', '10000')),
            region_code=os.getenv('YOUTUBE_REGION_CODE', 'US'),
            language=os.getenv('YOUTUBE_LANGUAGE', 'en_US'),
            api_base_url=os.getenv('YOUTUBE_API_BASE_URL', 'https://www.googleapis.com/youtube/v3'),
            request_timeout=int(os.getenv('YOUTUBE_REQUEST_TIMEOUT', '15'))
        )

    @property
    def request_interval(self) -> float:
        """Seconds between API requests so that a full day spends exactly the daily quota"""
        if self.daily_quota <= 0:
            raise ConfigurationException("YOUTUBE_DAILY_QUOTA", "must be a positive number of requests")
        return SECONDS_PER_DAY / self.daily_quota


@dataclass
class TelegramBotConfig:
    """Configuration for the Telegram bot"""
    bot_token: Optional[str] = None
    admins: List[int] = field(default_factory=list)
    webhook_url: str = ""
    webhook_listen: str = "127.0.0.1"
    webhook_port: int = 5000
    webhook_url_path: str = "webhook"

    @classmethod
    def from_env(cls) -> 'TelegramBotConfig':
        return cls(
            bot_token=os.getenv('BOT_TOKEN') or None,
            admins=_parse_id_list(os.getenv('BOT_ADMINS', '')),
            webhook_url=os.getenv('WEBHOOK_URL', ''),
            webhook_listen=os.getenv('WEBHOOK_LISTEN', '127.0.0.1'),
            webhook_port=int(os.getenv('WEBHOOK_PORT', '5000')),
            webhook_url_path=os.getenv('WEBHOOK_URL_PATH', 'webhook')
        )

    @property
    def webhook_config(self) -> Dict[str, Any]:
        return {
            'listen': self.webhook_listen,
            'port': self.webhook_port,
            'webhook_url': self.webhook_url,
            'url_path': self.webhook_url_path
        }


@dataclass
class ServiceConfig:
    """Main service configuration"""
    database: DatabaseConfig
    youtube: YouTubeConfig
    telegram_bot: TelegramBotConfig
    log_level: str = "INFO"
    default_user_agent: str = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 PlaylistNotifier/1.0"

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        return cls(
            database=DatabaseConfig.from_env(),
            youtube=YouTubeConfig.from_env(),
            telegram_bot=TelegramBotConfig.from_env(),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            default_user_agent=os.getenv('DEFAULT_USER_AGENT', cls.default_user_agent)
        )

    def validate(self) -> None:
        """Raise ConfigurationException if a value the bot cannot run without is missing"""
        if not self.telegram_bot.bot_token:
            raise ConfigurationException(
                "BOT_TOKEN", "Telegram bot token not found. Set BOT_TOKEN in the environment or the .env file"
            )
        if not self.youtube.api_key:
            raise ConfigurationException(
                "YOUTUBE_KEY", "YouTube Data API key not found. Set YOUTUBE_KEY in the environment or the .env file"
            )
        # Raises on a non-positive quota
        self.youtube.request_interval


# Global configuration instance
_config: Optional[ServiceConfig] = None


def get_service_config() -> ServiceConfig:
    """Get global service configuration"""
    global _config
    if _config is None:
        _config = ServiceConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset configuration (for testing)"""
    global _config
    _config = None
