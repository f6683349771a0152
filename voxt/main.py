"""
Main entry point for the Telegram bot.
"""
import logging

from telegram import BotCommand, Update
from telegram.ext import Application

from config import settings
from voxt.handlers import register_all_handlers
from voxt.services.context import APP_CONTEXT_KEY, build_app_context

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
)
# httpx логирует URL запросов вместе с токеном бота
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


async def post_init(application: Application):
    """Инициализация после запуска приложения."""
    app = build_app_context(settings)
    application.bot_data[APP_CONTEXT_KEY] = app

    commands_uk = [
        BotCommand("summary", "🧠 Підсумок чату"),
        BotCommand("limit", "⏱ Ліміт транскрипції"),
        BotCommand("mode", "🔧 Режим"),
        BotCommand("help", "🆘 Допомога"),
    ]
    commands_en = [
        BotCommand("summary", "🧠 Chat summary"),
        BotCommand("limit", "⏱ Transcription limit"),
        BotCommand("mode", "🔧 Mode"),
        BotCommand("help", "🆘 Help"),
    ]

    await application.bot.set_my_commands(commands_uk, language_code="uk")
    await application.bot.set_my_commands(commands_en, language_code="en")
    # Default fallback
    await application.bot.set_my_commands(commands_uk if settings.BOT_LANGUAGE == "uk" else commands_en)

    logger.info(f"Bot @{application.bot.username} initialized in '{settings.BOT_MODE}' mode")


async def post_shutdown(application: Application):
    """Очистка при остановке приложения."""
    app = application.bot_data.get(APP_CONTEXT_KEY)
    if app is not None:
        app.close()

    logger.info("Bot shutdown complete")


async def error_handler(update: object, context):
    """Глобальный обработчик ошибок."""
    logger.error(f"Exception during update handling: {context.error}", exc_info=context.error)


def main():
    """Запуск бота."""
    logger.info("Starting bot...")

    if not settings.TELEGRAM_BOT_TOKEN:
        raise ValueError("TELEGRAM_BOT_TOKEN is not set")
    if not settings.OPENAI_API_KEY:
        raise ValueError("OPENAI_API_KEY is not set")

    application = (
        Application.builder()
        .token(settings.TELEGRAM_BOT_TOKEN)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    register_all_handlers(application)
    application.add_error_handler(error_handler)

    logger.info("Bot is ready, starting polling...")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
