# apps/telegram_bot/__main__.py - Bot application entry point
#
# Required environment variables:
# - BOT_TOKEN: Telegram bot token from @BotFather
# - YOUTUBE_KEY: YouTube Data API key
#
# Optional environment variables:
# - BOT_ADMINS: comma separated Telegram user ids allowed to /shutdown
# - YOUTUBE_DAILY_QUOTA: requests per day to spread polling over (default: 10000)
# - WEBHOOK_URL: public webhook URL; long polling is used when unset
# - DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME: PostgreSQL connection
import asyncio
import logging
import os
import sys

import dotenv
from telegram import Update
from telegram.ext import Application, CallbackQueryHandler, CommandHandler

from apps.telegram_bot.handlers.error_handlers import error_handler
from apps.telegram_bot.services.bot_service import BotService
from config.services_config import ServiceConfig, get_service_config
from di_container import DIContainer
from exceptions import ConfigurationException
from logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_application(config: ServiceConfig) -> Application:
    container = DIContainer(config)

    async def post_init(application: Application) -> None:
        await container.initialize(application.bot)
        bot_service = BotService(
            subscription_repository=container.subscription_repository,
            channel_resolver=container.channel_resolver,
            request_interval=config.youtube.request_interval,
            admins=config.telegram_bot.admins,
            on_shutdown=container.poll_scheduler.request_shutdown,
        )
        application.add_handler(CommandHandler("help", bot_service.help_command))
        application.add_handler(CommandHandler("ping", bot_service.ping_command))
        application.add_handler(CommandHandler("subscribe", bot_service.subscribe_command))
        application.add_handler(CommandHandler("unsubscribe", bot_service.unsubscribe_command))
        application.add_handler(CommandHandler("filters", bot_service.filters_command))
        application.add_handler(CommandHandler("howmany", bot_service.howmany_command))
        application.add_handler(CommandHandler("shutdown", bot_service.shutdown_command))
        application.add_handler(CallbackQueryHandler(bot_service.button_handler))

        # The update loop lives exactly as long as the application
        application.bot_data["update_loop"] = asyncio.get_running_loop().create_task(
            container.poll_scheduler.run_forever(), name="update_loop"
        )
        logger.info("Registered update loop")

    async def post_stop(application: Application) -> None:
        logger.info("Stopping application and closing resources...")
        update_loop = application.bot_data.get("update_loop")
        if update_loop is not None:
            # Let the loop reach the next feed boundary so the resync queue is drained
            container.poll_scheduler.request_shutdown()
            try:
                await update_loop
            except Exception as e:
                logger.error(f"Update loop ended with error: {e}")
        await container.shutdown()
        logger.info("All resources freed")

    application = (
        Application.builder()
        .token(config.telegram_bot.bot_token)
        .post_init(post_init)
        .post_stop(post_stop)
        .build()
    )
    application.add_error_handler(error_handler)
    return application


def main():
    dotenv.load_dotenv()
    config = get_service_config()
    setup_logging(config.log_level)

    logger.info("=== BOT STARTUP BEGINNING ===")
    logger.info(f"Python version: {sys.version}")
    logger.info(f"Current working directory: {os.getcwd()}")

    try:
        config.validate()
    except ConfigurationException as e:
        logger.error(e.message)
        sys.exit(1)

    if not config.telegram_bot.admins:
        logger.warning(
            "No admin users specified in BOT_ADMINS! By default, any user will be able to shut down your bot."
        )

    application = build_application(config)
    try:
        if config.telegram_bot.webhook_url:
            logger.info("Bot started in Webhook mode")
            application.run_webhook(**config.telegram_bot.webhook_config, allowed_updates=Update.ALL_TYPES)
        else:
            logger.info("Bot started in polling mode")
            application.run_polling(allowed_updates=Update.ALL_TYPES)
    except (KeyboardInterrupt, SystemExit):
        logger.info("Interrupted by user or system...")
    except Exception as e:
        logger.error(f"Error: {e}")
        raise


if __name__ == "__main__":
    main()
