"""
Start and mode command handlers.
"""
from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import ContextTypes, CommandHandler, filters

from voxt.handlers.transcription import MODE_AUTO
from voxt.services.context import get_app
from voxt.utils.texts import get_text


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обрабатывает команды /start и /help."""
    settings = get_app(context).settings
    lang = settings.BOT_LANGUAGE
    hint_key = "mode_hint_auto" if settings.BOT_MODE == MODE_AUTO else "mode_hint_mention"

    await update.message.reply_text(
        get_text("welcome", lang, mode=settings.BOT_MODE, mode_hint=get_text(hint_key, lang)),
        parse_mode=ParseMode.MARKDOWN
    )


async def mode_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обрабатывает команду /mode."""
    settings = get_app(context).settings
    await update.message.reply_text(
        get_text("mode", settings.BOT_LANGUAGE, mode=settings.BOT_MODE),
        parse_mode=ParseMode.MARKDOWN
    )


def register_start_handlers(application):
    """Регистрирует /start, /help, /mode."""
    application.add_handler(CommandHandler(["start", "help"], start_command, filters=filters.UpdateType.MESSAGE))
    application.add_handler(CommandHandler("mode", mode_command, filters=filters.UpdateType.MESSAGE))
