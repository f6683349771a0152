"""
Transcription handlers - voice messages, video notes and the /limit card.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from telegram import Message, ReplyParameters, Update
from telegram.constants import ChatType, ParseMode
from telegram.error import BadRequest, TelegramError
from telegram.ext import ContextTypes, CommandHandler, MessageHandler, filters

from voxt.handlers.summary import format_user_name
from voxt.models import StoredMessage
from voxt.services.context import AppContext, get_app
from voxt.services.errors import ExternalServiceError
from voxt.services.runtime_options import DAILY_LIMIT_SECONDS
from voxt.utils.formatting import collapsed_quote, format_remaining, progress_bar
from voxt.utils.texts import get_text, pick_text

logger = logging.getLogger(__name__)

MODE_AUTO = "auto"


@dataclass(frozen=True)
class Clip:
    """Голосовое или кружок, которое нужно расшифровать."""

    file_id: str
    message_id: int
    duration: int
    mime_type: str
    user_id: int
    user_name: str


def clip_from_message(message: Message) -> Clip | None:
    if message.voice:
        media, mime_type = message.voice, message.voice.mime_type or "audio/ogg"
    elif message.video_note:
        media, mime_type = message.video_note, "video/mp4"
    else:
        return None

    sender = message.from_user
    return Clip(
        file_id=media.file_id,
        message_id=message.message_id,
        duration=media.duration,
        mime_type=mime_type,
        user_id=sender.id if sender else 0,
        user_name=format_user_name(sender),
    )


def mentions_bot(text: str | None, bot_username: str) -> bool:
    return bool(text) and f"@{bot_username.lower()}" in text.lower()


def should_process(message: Message, bot_username: str, mode: str) -> bool:
    """В режиме mention: только личка, ответ боту или упоминание в подписи."""
    if mode == MODE_AUTO:
        return True
    if message.chat.type == ChatType.PRIVATE:
        return True

    reply = message.reply_to_message
    if reply and reply.from_user and reply.from_user.username == bot_username:
        return True

    return mentions_bot(message.caption or message.text, bot_username)


async def transcribe_clip(update: Update, context: ContextTypes.DEFAULT_TYPE, clip: Clip):
    """Проверяет лимит, расшифровывает клип, списывает секунды и пишет в буфер."""
    app: AppContext = get_app(context)
    lang = app.settings.BOT_LANGUAGE
    chat_id = update.effective_chat.id
    reply_to = ReplyParameters(message_id=clip.message_id)

    check = app.transcription_usage.can_consume(chat_id)
    if not check.allowed:
        await context.bot.send_message(chat_id, pick_text("transcription_limit", lang), reply_parameters=reply_to)
        return

    if clip.duration > check.remaining_seconds:
        logger.warning(
            f"Clip of {clip.duration}s exceeds remaining {check.remaining_seconds}s in chat {chat_id}"
        )
        await context.bot.send_message(chat_id, pick_text("transcription_warning", lang), reply_parameters=reply_to)

    status = await context.bot.send_message(
        chat_id, pick_text("transcription_processing", lang), reply_parameters=reply_to
    )

    try:
        telegram_file = await context.bot.get_file(clip.file_id)
        audio = bytes(await telegram_file.download_as_bytearray())
        text = await app.transcriber.transcribe(audio, clip.mime_type)
    except (ExternalServiceError, TelegramError) as e:
        logger.error(f"Transcription failed in chat {chat_id}: {e}")
        await status.edit_text(pick_text("transcription_error", lang, error=str(e)))
        return

    app.transcription_usage.record(chat_id, clip.duration)
    app.buffer.upsert(chat_id, StoredMessage(
        message_id=clip.message_id,
        date=datetime.now(timezone.utc),
        user_id=clip.user_id,
        user_name=clip.user_name,
        text=text,
    ))

    prefix = pick_text("transcription_success_prefixes", lang)
    try:
        await status.edit_text(
            collapsed_quote(get_text("transcription_result_title", lang), text, prefix=prefix),
            parse_mode=ParseMode.HTML,
        )
    except BadRequest as e:
        logger.warning(f"HTML transcription rejected, editing as plain text: {e}")
        await status.edit_text(f"{prefix} {text}")


async def clip_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обрабатывает голосовые и кружки."""
    message = update.message
    app = get_app(context)
    if not should_process(message, context.bot.username, app.settings.BOT_MODE):
        return

    clip = clip_from_message(message)
    if clip is not None:
        await transcribe_clip(update, context, clip)


async def mention_reply_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """`@bot` в ответ на голосовое: расшифровать исходный клип."""
    message = update.message
    if not mentions_bot(message.text, context.bot.username):
        return

    reply = message.reply_to_message
    clip = clip_from_message(reply) if reply else None
    if clip is not None:
        await transcribe_clip(update, context, clip)


async def limit_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обрабатывает команду /limit, карточка использования за сегодня."""
    app = get_app(context)
    lang = app.settings.BOT_LANGUAGE
    chat_id = update.effective_chat.id

    check = app.transcription_usage.can_consume(chat_id)
    total = app.options.get(DAILY_LIMIT_SECONDS)
    # Перерасход последнего клипа показываем как 100%
    used = min(app.transcription_usage.usage(chat_id).used_seconds, total)
    percent = round(used / total * 100)
    bar = progress_bar(percent)

    if not check.allowed:
        await update.message.reply_text(get_text("limit_exhausted", lang, bar=bar), parse_mode=ParseMode.MARKDOWN)
        return

    if percent == 0:
        mood = "limit_mood_full"
    elif percent < 25:
        mood = "limit_mood_low"
    elif percent < 50:
        mood = "limit_mood_medium"
    elif percent < 75:
        mood = "limit_mood_high"
    else:
        mood = "limit_mood_near_end"

    text = (
        f"{get_text('limit_title', lang)}\n\n"
        f"{bar}\n"
        f"{get_text('limit_remaining', lang, remaining=format_remaining(check.remaining_seconds, lang))}\n\n"
        f"{get_text(mood, lang)}"
    )
    await update.message.reply_text(text, parse_mode=ParseMode.MARKDOWN)


def register_transcription_handlers(application):
    """Регистрирует транскрипцию и /limit."""
    application.add_handler(CommandHandler("limit", limit_command, filters=filters.UpdateType.MESSAGE))
    application.add_handler(
        MessageHandler(filters.UpdateType.MESSAGE & (filters.VOICE | filters.VIDEO_NOTE), clip_message)
    )
    application.add_handler(
        MessageHandler(
            filters.UpdateType.MESSAGE & filters.TEXT & filters.REPLY & ~filters.COMMAND,
            mention_reply_message,
        )
    )
