"""
Admin handlers for runtime options and state resets.
"""
import logging

from telegram import Update, User
from telegram.ext import ContextTypes, CommandHandler, filters

from voxt.services.context import AppContext, get_app
from voxt.services.errors import ValidationError
from voxt.utils.texts import get_text

logger = logging.getLogger(__name__)

RESET_ALL = "all"
RESET_SUMMARY_STATE = "summary_state"
RESET_SUMMARY_USAGE = "summary_usage"
RESET_VOICE_USAGE = "voice_usage"

PANEL_COMMANDS = [
    "/admin",
    "/admin_set <key> <value>",
    "/admin_reset <key>",
    "/admin_reset all",
    "/admin_reset summary_state",
    "/admin_reset summary_usage [userId]",
    "/admin_reset voice_usage",
]


def is_admin(user: User | None, settings) -> bool:
    """Проверяет, является ли пользователь админом (username или id из настроек)."""
    if user is None:
        return False

    admin_username = (settings.ADMIN_USERNAME or "").lstrip("@").lower()
    if admin_username and user.username and user.username.lower() == admin_username:
        return True

    admin_id = settings.ADMIN_USER_ID
    return bool(admin_id) and str(user.id) == admin_id


async def ensure_admin(update: Update, app: AppContext) -> bool:
    if is_admin(update.effective_user, app.settings):
        return True

    user = update.effective_user
    logger.warning(f"Refused admin command from {user.id if user else 'unknown'}")
    await update.message.reply_text(get_text("admin_only", app.settings.BOT_LANGUAGE))
    return False


def parse_set_args(args: list[str] | None) -> tuple[str | None, str | None]:
    """`/admin_set <key> <value>` → (key, value); иначе (None, None)."""
    if not args or len(args) != 2:
        return None, None
    return args[0], args[1]


def parse_reset_args(args: list[str] | None) -> tuple[str | None, int | None]:
    """`/admin_reset <target> [userId]` → (target, user_id)."""
    if not args or len(args) > 2:
        return None, None

    user_id = None
    if len(args) == 2:
        if not args[1].isdigit():
            return None, None
        user_id = int(args[1])

    return args[0], user_id


def render_panel(app: AppContext, chat_id: int) -> str:
    lang = app.settings.BOT_LANGUAGE

    options = "\n".join(
        f"{item.name}={item.value}{'*' if item.is_overridden else ''} ({item.default})"
        for item in app.options.list_options()
    )
    stats = app.buffer.stats(chat_id)

    return (
        f"{get_text('admin_panel_title', lang)}\n\n"
        f"{get_text('admin_panel_runtime_title', lang)}\n"
        f"{options}\n\n"
        + get_text(
            "admin_panel_stats",
            lang,
            recent=stats.recent_messages,
            cached=stats.cached_summaries,
            cursor=stats.last_summarized_message_id,
        )
        + f"\n\n{get_text('admin_panel_commands_title', lang)}\n"
        + "\n".join(PANEL_COMMANDS)
    )


async def admin_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Показывает панель: опции и статистику буфера текущего чата."""
    app = get_app(context)
    if not await ensure_admin(update, app):
        return

    await update.message.reply_text(render_panel(app, update.effective_chat.id))


async def admin_set_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """
    Устанавливает runtime-опцию.
    Использование: /admin_set <key> <value>
    """
    app = get_app(context)
    if not await ensure_admin(update, app):
        return

    lang = app.settings.BOT_LANGUAGE
    key, raw_value = parse_set_args(context.args)
    if key is None:
        await update.message.reply_text(get_text("admin_format_set", lang))
        return

    if not app.options.is_known(key):
        await update.message.reply_text(get_text("admin_unknown_key", lang))
        return

    try:
        value = app.options.set(key, raw_value)
    except ValidationError as e:
        await update.message.reply_text(get_text("admin_set_error", lang, error=str(e)))
        return

    await update.message.reply_text(get_text("admin_set_ok", lang, key=key, value=value))


async def admin_reset_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """
    Сбрасывает опцию или состояние чата.
    Использование: /admin_reset <key|all|summary_state|summary_usage [userId]|voice_usage>
    """
    app = get_app(context)
    if not await ensure_admin(update, app):
        return

    lang = app.settings.BOT_LANGUAGE
    chat_id = update.effective_chat.id
    target, user_id = parse_reset_args(context.args)

    if target is None:
        await update.message.reply_text(get_text("admin_format_reset", lang))
        return

    if target == RESET_ALL:
        app.options.reset_all()
        reply = get_text("admin_reset_all_ok", lang)
    elif target == RESET_SUMMARY_STATE:
        app.buffer.reset_chat(chat_id)
        reply = get_text("admin_reset_summary_state_ok", lang)
    elif target == RESET_SUMMARY_USAGE:
        if user_id is not None:
            app.summary_quota.reset_for_user(chat_id, user_id)
            reply = get_text("admin_reset_summary_usage_user_ok", lang, user_id=user_id)
        else:
            app.summary_quota.reset_for_chat(chat_id)
            reply = get_text("admin_reset_summary_usage_chat_ok", lang)
    elif target == RESET_VOICE_USAGE:
        app.transcription_usage.reset_for_chat(chat_id)
        reply = get_text("admin_reset_voice_usage_ok", lang)
    elif app.options.is_known(target):
        app.options.reset(target)
        reply = get_text("admin_reset_key_ok", lang, key=target)
    else:
        reply = get_text("admin_unknown_target", lang)

    await update.message.reply_text(reply)


def register_admin_handlers(application):
    """Регистрирует обработчики админа."""
    application.add_handler(CommandHandler("admin", admin_command, filters=filters.UpdateType.MESSAGE))
    application.add_handler(CommandHandler("admin_set", admin_set_command, filters=filters.UpdateType.MESSAGE))
    application.add_handler(CommandHandler("admin_reset", admin_reset_command, filters=filters.UpdateType.MESSAGE))
