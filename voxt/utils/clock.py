"""
Time helpers: injectable clock, ISO timestamps and calendar days.
"""
from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """Сериализует момент в ISO-8601 с миллисекундами и суффиксом Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """Парсит ISO-строку; наивное время считается UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def calendar_day(moment: datetime, tz: ZoneInfo) -> str:
    """Календарный день (YYYY-MM-DD) в опорной зоне."""
    return moment.astimezone(tz).date().isoformat()
