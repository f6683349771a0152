"""
Summary request ledger - per-user /summary quota with cooldown.
"""
import logging
import math
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from voxt.models import SummaryUsageEntry
from voxt.services.errors import QuotaDenied
from voxt.services.runtime_options import (
    SUMMARY_COOLDOWN_SECONDS,
    SUMMARY_DAILY_LIMIT_PER_USER,
    RuntimeOptionRegistry,
)
from voxt.services.storage import SUMMARY_USAGE_DOCUMENT, DocumentBackend, DocumentStore
from voxt.utils.clock import Clock, calendar_day, epoch_ms, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    reason: str | None = None
    retry_after_seconds: int | None = None

    def raise_for_denial(self) -> None:
        if not self.allowed:
            raise QuotaDenied(self.reason, self.retry_after_seconds)


def usage_key(chat_id: int, user_id: int) -> str:
    return f"{chat_id}:{user_id}"


class SummaryRequestLedger(DocumentStore):
    """Сервис квот /summary: дневной счётчик и cooldown на пару (чат, пользователь)."""

    document_name = SUMMARY_USAGE_DOCUMENT

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
        self.entries: dict[str, SummaryUsageEntry] = {}

    def _restore(self, raw: dict) -> None:
        self.entries = {}
        for key, value in raw.items():
            entry = SummaryUsageEntry.from_dict(value)
            if entry is None:
                logger.warning(f"Dropping malformed summary usage entry {key}")
                continue
            self.entries[key] = entry

    def _dump(self) -> dict:
        return {key: entry.to_dict() for key, entry in self.entries.items()}

    def _entry(self, chat_id: int, user_id: int, today: str) -> SummaryUsageEntry:
        key = usage_key(chat_id, user_id)
        entry = self.entries.get(key)
        if entry is None or entry.date != today:
            entry = SummaryUsageEntry(date=today)
            self.entries[key] = entry
        return entry

    def check_and_consume(self, chat_id: int, user_id: int) -> QuotaDecision:
        """
        Проверяет квоту и сразу списывает одну единицу.

        allowed=True означает, что единица уже потрачена: отдельного
        шага подтверждения нет, и при ошибке саммаризации она не возвращается.
        """
        now = self.clock()
        entry = self._entry(chat_id, user_id, calendar_day(now, self.tz))
        now_ms = epoch_ms(now)

        cooldown_ms = self.options.get(SUMMARY_COOLDOWN_SECONDS) * 1000
        elapsed_ms = now_ms - entry.last_request_at
        if entry.last_request_at > 0 and elapsed_ms < cooldown_ms:
            retry_after = math.ceil((cooldown_ms - elapsed_ms) / 1000)
            return QuotaDecision(False, QuotaDenied.COOLDOWN, retry_after)

        if entry.count >= self.options.get(SUMMARY_DAILY_LIMIT_PER_USER):
            return QuotaDecision(False, QuotaDenied.DAILY_LIMIT)

        entry.count += 1
        entry.last_request_at = now_ms
        self.flush()
        return QuotaDecision(True)

    def reset_for_chat(self, chat_id: int) -> int:
        """Удаляет записи всех пользователей чата. Возвращает количество."""
        prefix = f"{chat_id}:"
        keys = [key for key in self.entries if key.startswith(prefix)]
        for key in keys:
            del self.entries[key]
        self.flush()
        logger.info(f"Summary usage reset for chat {chat_id} ({len(keys)} users)")
        return len(keys)

    def reset_for_user(self, chat_id: int, user_id: int) -> None:
        self.entries.pop(usage_key(chat_id, user_id), None)
        self.flush()
        logger.info(f"Summary usage reset for user {user_id} in chat {chat_id}")
