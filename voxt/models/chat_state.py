"""
Chat summary state: message buffer, cursor and cached summary snapshots.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime

from voxt.utils.clock import parse_iso, to_iso

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class StoredMessage:
    """Одна единица активности чата: текст, подпись или плейсхолдер голосового."""

    message_id: int
    date: datetime
    user_id: int
    user_name: str
    text: str

    def to_dict(self) -> dict:
        return {
            "messageId": self.message_id,
            "date": to_iso(self.date),
            "userId": self.user_id,
            "userName": self.user_name,
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, raw) -> "StoredMessage | None":
        if not isinstance(raw, dict):
            return None
        if not (
            _is_int(raw.get("messageId"))
            and isinstance(raw.get("date"), str)
            and _is_int(raw.get("userId"))
            and isinstance(raw.get("userName"), str)
            and isinstance(raw.get("text"), str)
        ):
            return None
        try:
            date = parse_iso(raw["date"])
        except ValueError:
            return None
        return cls(
            message_id=raw["messageId"],
            date=date,
            user_id=raw["userId"],
            user_name=raw["userName"],
            text=raw["text"],
        )


@dataclass(frozen=True)
class SummarySnapshot:
    """Накопительное саммари всех сообщений с id <= upto_message_id."""

    created_at: datetime
    upto_message_id: int
    message_count: int
    summary: str

    def to_dict(self) -> dict:
        return {
            "createdAt": to_iso(self.created_at),
            "uptoMessageId": self.upto_message_id,
            "messageCount": self.message_count,
            "summary": self.summary,
        }

    @classmethod
    def from_dict(cls, raw) -> "SummarySnapshot | None":
        if not isinstance(raw, dict):
            return None
        if not (
            isinstance(raw.get("createdAt"), str)
            and _is_int(raw.get("uptoMessageId"))
            and _is_int(raw.get("messageCount"))
            and isinstance(raw.get("summary"), str)
        ):
            return None
        try:
            created_at = parse_iso(raw["createdAt"])
        except ValueError:
            return None
        return cls(
            created_at=created_at,
            upto_message_id=raw["uptoMessageId"],
            message_count=raw["messageCount"],
            summary=raw["summary"],
        )


@dataclass
class ChatSummaryState:
    recent_messages: list[StoredMessage] = field(default_factory=list)
    summaries: list[SummarySnapshot] = field(default_factory=list)
    last_summarized_message_id: int = 0

    def unsummarized(self) -> list[StoredMessage]:
        return [m for m in self.recent_messages if m.message_id > self.last_summarized_message_id]

    def to_dict(self) -> dict:
        return {
            "recentMessages": [m.to_dict() for m in self.recent_messages],
            "summaries": [s.to_dict() for s in self.summaries],
            "lastSummarizedMessageId": self.last_summarized_message_id,
        }

    @classmethod
    def from_dict(cls, raw) -> "ChatSummaryState":
        """
        Нормализует сохранённое состояние чата.

        Старый формат (просто список сообщений) читается как буфер без
        саммари и с нулевым курсором. Битые элементы пропускаются.
        """
        if isinstance(raw, list):
            return cls(recent_messages=_parse_items(raw, StoredMessage))

        if not isinstance(raw, dict):
            return cls()

        cursor = raw.get("lastSummarizedMessageId")
        return cls(
            recent_messages=_parse_items(raw.get("recentMessages") or [], StoredMessage),
            summaries=_parse_items(raw.get("summaries") or [], SummarySnapshot),
            last_summarized_message_id=cursor if _is_int(cursor) else 0,
        )


def _parse_items(items, kind) -> list:
    if not isinstance(items, list):
        return []

    parsed = []
    for item in items:
        value = kind.from_dict(item)
        if value is None:
            logger.debug(f"Skipping malformed {kind.__name__}: {item!r}")
            continue
        parsed.append(value)
    return parsed
