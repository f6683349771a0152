"""
Summary handlers - message capture and the /summary command.
"""
import logging
import re
from datetime import datetime, timezone

from telegram import Message, Update, User
from telegram.constants import ParseMode
from telegram.error import BadRequest
from telegram.ext import ContextTypes, CommandHandler, MessageHandler, filters

from voxt.models import StoredMessage
from voxt.services.context import get_app
from voxt.services.errors import ExternalServiceError, QuotaDenied
from voxt.services.summary_service import OUTCOME_CACHED, OUTCOME_FRESH
from voxt.utils.formatting import collapsed_quote
from voxt.utils.texts import get_text

logger = logging.getLogger(__name__)

# Захват сообщений идёт отдельной группой, до команд
TRACKING_GROUP = -1

SUMMARY_LIMIT_PATTERN = re.compile(r"\d+")


def format_user_name(user: User | None) -> str:
    """@username, иначе полное имя, иначе числовой id."""
    if user is None:
        return "unknown"
    if user.username:
        return f"@{user.username}"

    full_name = " ".join(part for part in [user.first_name, user.last_name] if part).strip()
    return full_name or str(user.id)


def extract_storable_text(message: Message) -> str | None:
    """Текст для буфера: текст, подпись или плейсхолдер голосового/кружка."""
    if message.text:
        text = message.text.strip()
        if not text or text.startswith("/"):
            return None
        return text

    if message.caption:
        caption = message.caption.strip()
        if not caption:
            return None
        return f"[caption] {caption}"

    if message.voice:
        return f"[voice {message.voice.duration}s]"

    if message.video_note:
        return f"[video_note {message.video_note.duration}s]"

    return None


def to_stored_message(message: Message) -> StoredMessage | None:
    sender = message.from_user
    if sender is None or sender.is_bot:
        return None

    text = extract_storable_text(message)
    if text is None:
        return None

    return StoredMessage(
        message_id=message.message_id,
        date=message.date or datetime.now(timezone.utc),
        user_id=sender.id,
        user_name=format_user_name(sender),
        text=text,
    )


def parse_summary_limit(args: list[str] | None) -> int | None:
    """Ведущие цифры аргумента /summary N; None значит по умолчанию."""
    if not args:
        return None

    match = SUMMARY_LIMIT_PATTERN.match(args[0])
    return int(match.group()) if match else None


async def track_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Сохраняет каждое подходящее сообщение чата в буфер."""
    message = update.message
    if message is None or update.effective_chat is None:
        return

    stored = to_stored_message(message)
    if stored is None:
        return

    get_app(context).buffer.append(update.effective_chat.id, stored)


async def reply_collapsed(message: Message, title: str, summary: str):
    try:
        return await message.reply_text(collapsed_quote(title, summary), parse_mode=ParseMode.HTML)
    except BadRequest as e:
        logger.warning(f"HTML summary rejected, sending plain text: {e}")
        return await message.reply_text(summary)


async def edit_collapsed(status: Message, title: str, summary: str):
    try:
        return await status.edit_text(collapsed_quote(title, summary), parse_mode=ParseMode.HTML)
    except BadRequest as e:
        logger.warning(f"HTML summary rejected, editing as plain text: {e}")
        return await status.edit_text(summary)


async def summary_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обрабатывает команду /summary [N]."""
    chat = update.effective_chat
    user = update.effective_user
    # Только новые сообщения: отредактированное /summary квоту не тратит
    if update.message is None or chat is None or user is None:
        return

    app = get_app(context)
    lang = app.settings.BOT_LANGUAGE
    title = get_text("summary_result_title", lang)
    status: Message | None = None

    async def post_status(count: int):
        nonlocal status
        status = await update.message.reply_text(get_text("summary_working", lang, count=count))

    try:
        outcome = await app.summaries.summarize(
            chat.id,
            user.id,
            parse_summary_limit(context.args),
            on_admitted=post_status,
        )
    except QuotaDenied as e:
        if e.reason == QuotaDenied.COOLDOWN:
            text = get_text("summary_cooldown", lang, seconds=e.retry_after_seconds or 1)
        else:
            text = get_text("summary_daily_limit", lang)
        await update.message.reply_text(text)
        return
    except ExternalServiceError as e:
        logger.error(f"Summary failed for chat {chat.id}: {e}")
        text = get_text("summary_error", lang, error=str(e))
        if status is not None:
            await status.edit_text(text)
        else:
            await update.message.reply_text(text)
        return

    if outcome.kind == OUTCOME_FRESH:
        if status is not None:
            await edit_collapsed(status, title, outcome.snapshot.summary)
        else:
            await reply_collapsed(update.message, title, outcome.snapshot.summary)
    elif outcome.kind == OUTCOME_CACHED:
        await update.message.reply_text(get_text("summary_no_new_messages", lang))
        await reply_collapsed(update.message, title, outcome.snapshot.summary)
    else:
        await update.message.reply_text(get_text("summary_no_messages", lang))


def register_summary_handlers(application):
    """Регистрирует захват сообщений и /summary."""
    application.add_handler(
        MessageHandler(filters.ALL & ~filters.UpdateType.EDITED, track_message),
        group=TRACKING_GROUP,
    )
    application.add_handler(CommandHandler("summary", summary_command, filters=filters.UpdateType.MESSAGE))
