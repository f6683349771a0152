"""
Usage ledger records.
"""
from dataclasses import dataclass


@dataclass
class ChatUsage:
    """Секунды транскрипции, использованные чатом за день."""

    date: str
    used_seconds: int = 0

    def to_dict(self) -> dict:
        return {"date": self.date, "usedSeconds": self.used_seconds}

    @classmethod
    def from_dict(cls, raw) -> "ChatUsage | None":
        if not isinstance(raw, dict) or not isinstance(raw.get("date"), str):
            return None
        used = raw.get("usedSeconds", 0)
        if not isinstance(used, (int, float)) or isinstance(used, bool):
            return None
        return cls(date=raw["date"], used_seconds=used)


@dataclass
class SummaryUsageEntry:
    """Счётчик /summary пользователя в чате за день."""

    date: str
    count: int = 0
    # epoch ms; 0 если запросов сегодня не было
    last_request_at: int = 0

    def to_dict(self) -> dict:
        return {"date": self.date, "count": self.count, "lastRequestAt": self.last_request_at}

    @classmethod
    def from_dict(cls, raw) -> "SummaryUsageEntry | None":
        if not isinstance(raw, dict) or not isinstance(raw.get("date"), str):
            return None
        count = raw.get("count", 0)
        last = raw.get("lastRequestAt", 0)
        if not isinstance(count, int) or not isinstance(last, (int, float)):
            return None
        return cls(date=raw["date"], count=count, last_request_at=int(last))
