"""
Text messages in multiple languages.
"""
import random

TEXTS = {
    "welcome": {
        "uk": (
            "👋 Йоу! Я *voxt* — перетворюю бурмотіння в текст і стискаю чат у підсумки.\n\n"
            "🔧 Режим: *{mode}*\n\n"
            "{mode_hint}\n\n"
            "Команди:\n"
            "/summary [N] — підсумок останніх N повідомлень\n"
            "/limit — скільки ще можна бубоніти сьогодні\n"
            "/mode — який зараз режим"
        ),
        "en": (
            "👋 Hi! I'm *voxt* — I turn mumbling into text and squeeze chats into summaries.\n\n"
            "🔧 Mode: *{mode}*\n\n"
            "{mode_hint}\n\n"
            "Commands:\n"
            "/summary [N] — summary of the last N messages\n"
            "/limit — how much voice time is left today\n"
            "/mode — current mode"
        ),
    },

    "mode_hint_mention": {
        "uk": "Тегни мене у відповідь на голосове — я розшифрую що там бубонів людина 🗣️",
        "en": "Mention me in a reply to a voice message and I'll transcribe it 🗣️",
    },

    "mode_hint_auto": {
        "uk": "Я на автоматі ловлю всі голосові та кружечки. Від мене не сховаєшся 👀",
        "en": "I transcribe every voice message and video note automatically 👀",
    },

    "mode": {
        "uk": "🔧 Режим: *{mode}*\n\nЯкщо що — я не обирав.",
        "en": "🔧 Mode: *{mode}*",
    },

    # ─── Transcription ───────────────────────────────────────────────────

    "transcription_processing": {
        "uk": [
            "⏳ Слухаю цю мудрість...",
            "🎧 Розшифровую бурмотіння...",
            "📝 Конвертую звукові хвилі в букви...",
            "🔮 Ворожу по голосу...",
        ],
        "en": [
            "⏳ Listening...",
            "🎧 Decoding the mumbling...",
            "📝 Turning sound waves into letters...",
        ],
    },

    "transcription_success_prefixes": {
        "uk": ["📝", "✍️", "🗣️", "💬", "🎤"],
        "en": ["📝", "✍️", "🗣️", "💬", "🎤"],
    },

    "transcription_result_title": {
        "uk": "Розшифровка",
        "en": "Transcription",
    },

    "transcription_limit": {
        "uk": [
            "🚫 Все, тиша! Ліміт на сьогодні закінчився. Пиши текстом 📱",
            "🛑 Стоп, машина! Денний ліміт вичерпано. Завтра спробуй знову 🫡",
            "📵 Голосовий бюджет закінчився. Економіка жорстока 💸",
        ],
        "en": [
            "🚫 That's it, the daily limit is used up. Text only until tomorrow 📱",
            "🛑 Daily voice budget exhausted. Try again tomorrow 🫡",
        ],
    },

    "transcription_warning": {
        "uk": [
            "⚠️ Це аудіо перевищує залишок ліміту. Ну ок, як останній бонус 🎁",
            "⚠️ Ого, це впритул! Ліміт майже з'їли. Розшифрую останнє... 🫣",
        ],
        "en": [
            "⚠️ This clip is longer than what's left of today's limit. Transcribing it as a last bonus 🎁",
        ],
    },

    "transcription_error": {
        "uk": [
            "💥 Щось зламалось: {error}",
            "🙈 Не вийшло розібрати: {error}",
        ],
        "en": [
            "💥 Something broke: {error}",
        ],
    },

    "limit_title": {
        "uk": "⏱ *Ліміт на сьогодні*",
        "en": "⏱ *Today's limit*",
    },

    "limit_remaining": {
        "uk": "Залишилось: *{remaining}*",
        "en": "Remaining: *{remaining}*",
    },

    "limit_exhausted": {
        "uk": (
            "🚫 *Всьо, фініта ля комедія!*\n\n{bar}\n\n"
            "Ліміт на сьогодні вичерпано. Завтра буде новий день 🫠"
        ),
        "en": "🚫 *That's all for today!*\n\n{bar}\n\nThe daily limit is used up. See you tomorrow 🫠",
    },

    "limit_mood_full": {
        "uk": "Повний бак! Можеш бубоніти скільки влізе 🚀",
        "en": "Full tank! 🚀",
    },
    "limit_mood_low": {
        "uk": "Ще купа часу, навіть не хвилюйся 😎",
        "en": "Plenty of time left 😎",
    },
    "limit_mood_medium": {
        "uk": "Половина ще є. Нормально спілкуєшся 👍",
        "en": "Half of it is still there 👍",
    },
    "limit_mood_high": {
        "uk": "Хм, хтось любить поговорити... 🤨",
        "en": "Someone likes to talk... 🤨",
    },
    "limit_mood_near_end": {
        "uk": "Тихіше! Ліміт скоро закінчиться! 🫣",
        "en": "Careful, the limit is almost gone! 🫣",
    },

    "duration_seconds": {"uk": "{s} сек", "en": "{s}s"},
    "duration_minutes": {"uk": "{m} хв", "en": "{m} min"},
    "duration_full": {"uk": "{m} хв {s} сек", "en": "{m} min {s}s"},

    # ─── Summary ─────────────────────────────────────────────────────────

    "summary_result_title": {
        "uk": "Підсумок чату",
        "en": "Chat summary",
    },
    "summary_no_new_messages": {
        "uk": "🆕 Нових повідомлень немає. Ось останній підсумок:",
        "en": "🆕 No new messages. Here is the latest summary:",
    },
    "summary_no_messages": {
        "uk": "🤷 Поки нема що підсумовувати.",
        "en": "🤷 Nothing to summarize yet.",
    },
    "summary_cooldown": {
        "uk": "⏳ Не так швидко! Спробуй ще раз через {seconds} сек.",
        "en": "⏳ Not so fast! Try again in {seconds}s.",
    },
    "summary_daily_limit": {
        "uk": "🚫 Ліміт /summary на сьогодні вичерпано.",
        "en": "🚫 You've used all your /summary requests for today.",
    },
    "summary_working": {
        "uk": "🧠 Читаю {count} повідомлень...",
        "en": "🧠 Reading {count} messages...",
    },
    "summary_error": {
        "uk": "💥 Не вдалося зробити підсумок: {error}",
        "en": "💥 Failed to summarize: {error}",
    },

    # ─── Admin ───────────────────────────────────────────────────────────

    "admin_only": {
        "uk": "⛔ Ця команда лише для адміна.",
        "en": "⛔ This command is for the admin only.",
    },
    "admin_panel_title": {"uk": "🛠 Адмін-панель", "en": "🛠 Admin panel"},
    "admin_panel_runtime_title": {
        "uk": "Налаштування (* — змінено, у дужках дефолт):",
        "en": "Settings (* — overridden, default in brackets):",
    },
    "admin_panel_stats": {
        "uk": (
            "Буфер підсумків: {recent}\n"
            "Збережених підсумків: {cached}\n"
            "Останній підсумований id: {cursor}"
        ),
        "en": (
            "Summary buffer: {recent}\n"
            "Cached summaries: {cached}\n"
            "Last summarized message id: {cursor}"
        ),
    },
    "admin_panel_commands_title": {"uk": "Команди:", "en": "Commands:"},
    "admin_format_set": {
        "uk": "Формат: /admin_set <key> <value>",
        "en": "Usage: /admin_set <key> <value>",
    },
    "admin_format_reset": {
        "uk": "Формат: /admin_reset <key|all|summary_state|summary_usage [userId]|voice_usage>",
        "en": "Usage: /admin_reset <key|all|summary_state|summary_usage [userId]|voice_usage>",
    },
    "admin_unknown_key": {"uk": "❌ Невідомий ключ.", "en": "❌ Unknown key."},
    "admin_unknown_target": {"uk": "❌ Невідома ціль скидання.", "en": "❌ Unknown reset target."},
    "admin_set_error": {"uk": "❌ Помилка: {error}", "en": "❌ Error: {error}"},
    "admin_set_ok": {"uk": "✅ {key} = {value}", "en": "✅ {key} = {value}"},
    "admin_reset_key_ok": {"uk": "✅ {key} скинуто до дефолту.", "en": "✅ {key} reset to default."},
    "admin_reset_all_ok": {"uk": "✅ Усі налаштування скинуто.", "en": "✅ All settings reset."},
    "admin_reset_summary_state_ok": {
        "uk": "✅ Буфер і підсумки цього чату очищено.",
        "en": "✅ Summary buffer and history of this chat cleared.",
    },
    "admin_reset_summary_usage_chat_ok": {
        "uk": "✅ Ліміти /summary цього чату скинуто.",
        "en": "✅ /summary quotas of this chat reset.",
    },
    "admin_reset_summary_usage_user_ok": {
        "uk": "✅ Ліміти /summary користувача {user_id} скинуто.",
        "en": "✅ /summary quota of user {user_id} reset.",
    },
    "admin_reset_voice_usage_ok": {
        "uk": "✅ Ліміт транскрипції цього чату скинуто.",
        "en": "✅ Transcription usage of this chat reset.",
    },
}


def _lookup(key: str, lang: str):
    text_dict = TEXTS.get(key, {})
    return text_dict.get(lang, text_dict.get("uk", f"[Missing text: {key}]"))


def get_text(key: str, lang: str = "uk", /, **kwargs) -> str:
    """Получает текст на нужном языке с подстановкой параметров."""
    text = _lookup(key, lang)

    try:
        return text.format(**kwargs)
    except KeyError:
        return text


def pick_text(key: str, lang: str = "uk", **kwargs) -> str:
    """Случайный вариант из списка фраз."""
    variants = _lookup(key, lang)
    if isinstance(variants, str):
        variants = [variants]
    text = random.choice(variants)

    try:
        return text.format(**kwargs)
    except KeyError:
        return text
