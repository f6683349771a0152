"""
Transcription usage ledger - daily seconds budget per chat.
"""
import logging
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from voxt.models import ChatUsage
from voxt.services.runtime_options import DAILY_LIMIT_SECONDS, RuntimeOptionRegistry
from voxt.services.storage import USAGE_DOCUMENT, DocumentBackend, DocumentStore
from voxt.utils.clock import Clock, calendar_day, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageCheck:
    allowed: bool
    remaining_seconds: int


class TranscriptionUsageLedger(DocumentStore):
    """Сервис учёта секунд транскрипции на чат в день."""

    document_name = USAGE_DOCUMENT

    def __init__(
        self,
        backend: DocumentBackend,
        options: RuntimeOptionRegistry,
        tz: ZoneInfo,
        clock: Clock = utcnow
    ):
        super().__init__(backend)
        self.options = options
        self.tz = tz
        self.clock = clock
        self.entries: dict[str, ChatUsage] = {}

    def _restore(self, raw: dict) -> None:
        self.entries = {}
        for key, value in raw.items():
            entry = ChatUsage.from_dict(value)
            if entry is None:
                logger.warning(f"Dropping malformed usage entry for chat {key}")
                continue
            self.entries[key] = entry

    def _dump(self) -> dict:
        return {key: entry.to_dict() for key, entry in self.entries.items()}

    def _entry(self, chat_id: int) -> ChatUsage:
        """Возвращает запись за сегодня; запись прошлого дня сбрасывается."""
        key = str(chat_id)
        today = calendar_day(self.clock(), self.tz)

        entry = self.entries.get(key)
        if entry is None or entry.date != today:
            entry = ChatUsage(date=today)
            self.entries[key] = entry
        return entry

    def usage(self, chat_id: int) -> ChatUsage:
        return self._entry(chat_id)

    def can_consume(self, chat_id: int) -> UsageCheck:
        entry = self._entry(chat_id)
        daily_limit = self.options.get(DAILY_LIMIT_SECONDS)
        remaining = max(0, daily_limit - entry.used_seconds)
        return UsageCheck(allowed=remaining > 0, remaining_seconds=remaining)

    def record(self, chat_id: int, duration_seconds: int) -> None:
        """
        Списывает секунды без проверки лимита.

        Клип, который уже начали транскрибировать, списывается целиком,
        даже если он выходит за остаток дня.
        """
        entry = self._entry(chat_id)
        entry.used_seconds += duration_seconds
        self.flush()

        daily_limit = self.options.get(DAILY_LIMIT_SECONDS)
        if entry.used_seconds > daily_limit:
            logger.warning(
                f"Chat {chat_id} is over its daily transcription budget: "
                f"{entry.used_seconds}/{daily_limit}s"
            )
        else:
            logger.info(f"Recorded {duration_seconds}s for chat {chat_id} ({entry.used_seconds}/{daily_limit}s)")

    def reset_for_chat(self, chat_id: int) -> None:
        self.entries.pop(str(chat_id), None)
        self.flush()
        logger.info(f"Transcription usage reset for chat {chat_id}")
