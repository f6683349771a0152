"""
Formatting helpers for Telegram replies.
"""
import html

from voxt.utils.texts import get_text


def escape_html(value: str) -> str:
    return html.escape(value, quote=False)


def collapsed_quote(title: str, body: str, prefix: str = "📌") -> str:
    """Заголовок и сворачиваемая цитата (HTML parse mode)."""
    return (
        f"{escape_html(prefix)} <b>{escape_html(title)}</b>\n"
        f"<blockquote expandable>{escape_html(body)}</blockquote>"
    )


def format_remaining(seconds: int, lang: str = "uk") -> str:
    """Форматирует остаток секунд как `N хв M сек`."""
    m, s = divmod(max(0, int(seconds)), 60)
    if m == 0:
        return get_text("duration_seconds", lang, s=s)
    if s == 0:
        return get_text("duration_minutes", lang, m=m)
    return get_text("duration_full", lang, m=m, s=s)


def progress_bar(percent: int, width: int = 20) -> str:
    filled = max(0, min(width, round(percent * width / 100)))
    return f"[{'█' * filled}{'░' * (width - filled)}] {percent}%"
