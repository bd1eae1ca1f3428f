import os

import pytest
from unittest.mock import patch

from config.services_config import (
    DatabaseConfig, ServiceConfig, TelegramBotConfig, YouTubeConfig, get_service_config, reset_config
)
from exceptions import ConfigurationException


@pytest.fixture(autouse=True)
def clean_config():
    reset_config()
    yield
    reset_config()


class TestServiceConfig:
    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        config = ServiceConfig.from_env()

        assert config.youtube.daily_quota == 10000
        assert config.youtube.request_interval == pytest.approx(8.64)
        assert config.telegram_bot.admins == []
        assert config.database.port == 5432
        assert config.log_level == "INFO"

    @patch.dict(os.environ, {
        "BOT_TOKEN": "123:abc",
        "YOUTUBE_KEY": "key",
        "YOUTUBE_DAILY_QUOTA": "86400",
        "BOT_ADMINS": "11, 22,",
        "DB_HOST": "db",
        "DB_NAME": "notifier",
    }, clear=True)
    def test_from_env(self):
        config = get_service_config()

        assert config.telegram_bot.bot_token == "123:abc"
        assert config.telegram_bot.admins == [11, 22]
        assert config.youtube.request_interval == 1.0
        assert config.database.as_pool_kwargs()["database"] == "notifier"
        assert config.database.as_pool_kwargs()["host"] == "db"
        config.validate()

    @patch.dict(os.environ, {}, clear=True)
    def test_get_service_config_is_cached(self):
        assert get_service_config() is get_service_config()

    @patch.dict(os.environ, {"BOT_ADMINS": "11,bob"}, clear=True)
    def test_invalid_admin_id(self):
        with pytest.raises(ConfigurationException) as exc_info:
            TelegramBotConfig.from_env()
        assert exc_info.value.config_key == "BOT_ADMINS"

    def test_non_positive_quota(self):
        with pytest.raises(ConfigurationException):
            YouTubeConfig(daily_quota=0).request_interval

    @pytest.mark.parametrize("token, key, missing", [
        (None, "key", "BOT_TOKEN"),
        ("123:abc", None, "YOUTUBE_KEY"),
    ])
    def test_validate_missing_values(self, token, key, missing):
        config = ServiceConfig(
            database=DatabaseConfig(),
            youtube=YouTubeConfig(api_key=key),
            telegram_bot=TelegramBotConfig(bot_token=token),
        )

        with pytest.raises(ConfigurationException) as exc_info:
            config.validate()
        assert exc_info.value.config_key == missing

    def test_webhook_config(self):
        config = TelegramBotConfig(webhook_url="https://bot.example.com/webhook", webhook_port=8443)

        assert config.webhook_config == {
            "listen": "127.0.0.1",
            "port": 8443,
            "webhook_url": "https://bot.example.com/webhook",
            "url_path": "webhook",
        }
