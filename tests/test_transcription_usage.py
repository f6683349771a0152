"""Tests for the transcription usage ledger."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from tests.conftest import FakeClock, MemoryBackend
from voxt.services.runtime_options import DAILY_LIMIT_SECONDS
from voxt.services.storage import USAGE_DOCUMENT
from voxt.services.transcription_usage import TranscriptionUsageLedger


class TestTranscriptionUsageLedger:
    """Daily seconds budget per chat."""

    def test_fresh_chat_has_full_budget(self, transcription_usage) -> None:
        check = transcription_usage.can_consume(42)

        assert check.allowed
        assert check.remaining_seconds == 3600

    def test_records_sum_on_same_day(self, transcription_usage, backend) -> None:
        for duration in (10, 25, 100):
            transcription_usage.record(42, duration)

        assert transcription_usage.usage(42).used_seconds == 135
        assert transcription_usage.can_consume(42).remaining_seconds == 3600 - 135
        assert backend.document(USAGE_DOCUMENT)["42"] == {"date": "2026-03-01", "usedSeconds": 135}

    def test_overage_is_kept_and_blocks(self, transcription_usage) -> None:
        """The clip straddling the limit is charged in full."""
        transcription_usage.record(42, 3500)
        transcription_usage.record(42, 300)

        check = transcription_usage.can_consume(42)
        assert transcription_usage.usage(42).used_seconds == 3800
        assert not check.allowed
        assert check.remaining_seconds == 0

    def test_limit_is_read_on_every_call(self, transcription_usage, options) -> None:
        transcription_usage.record(42, 100)
        options.set(DAILY_LIMIT_SECONDS, 120)

        assert transcription_usage.can_consume(42).remaining_seconds == 20

    def test_day_rollover_resets_remaining(self, options) -> None:
        """Yesterday's usage is ignored on the next read."""
        clock = FakeClock(datetime(2026, 3, 2, 0, 5, tzinfo=timezone.utc))
        backend = MemoryBackend({USAGE_DOCUMENT: {"42": {"date": "2026-03-01", "usedSeconds": 5000}}})
        ledger = TranscriptionUsageLedger(backend, options, ZoneInfo("UTC"), clock)
        ledger.load()

        check = ledger.can_consume(42)

        assert check.allowed
        assert check.remaining_seconds == 3600

    def test_rollover_is_per_chat(self, transcription_usage, clock) -> None:
        transcription_usage.record(1, 100)
        clock.advance(days=1)
        transcription_usage.record(2, 50)

        assert transcription_usage.usage(1).used_seconds == 0
        assert transcription_usage.usage(2).used_seconds == 50

    def test_calendar_day_uses_reference_timezone(self, options) -> None:
        """23:30 UTC is already the next day in Kyiv."""
        clock = FakeClock(datetime(2026, 3, 1, 23, 30, tzinfo=timezone.utc))
        ledger = TranscriptionUsageLedger(MemoryBackend(), options, ZoneInfo("Europe/Kyiv"), clock)
        ledger.load()

        ledger.record(7, 10)

        assert ledger.usage(7).date == "2026-03-02"

    def test_reset_for_chat(self, transcription_usage, backend) -> None:
        transcription_usage.record(42, 3600)

        transcription_usage.reset_for_chat(42)

        assert transcription_usage.can_consume(42).allowed
        assert "42" not in backend.document(USAGE_DOCUMENT)
