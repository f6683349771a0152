"""Shared fixtures: controllable clock, in-memory storage and an app context."""

import json
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from zoneinfo import ZoneInfo

import pytest

from voxt.models import StoredMessage
from voxt.services.context import APP_CONTEXT_KEY, build_app_context
from voxt.services.message_buffer import ChatMessageBuffer
from voxt.services.runtime_options import RuntimeOptionRegistry, default_option_specs
from voxt.services.storage import DocumentBackend
from voxt.services.summary_quota import SummaryRequestLedger
from voxt.services.transcription_usage import TranscriptionUsageLedger


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class MemoryBackend(DocumentBackend):
    """Keeps documents as JSON strings so saves behave like a real rewrite."""

    def __init__(self, documents: dict | None = None):
        self.documents = {name: json.dumps(doc) for name, doc in (documents or {}).items()}
        self.saves: list[str] = []

    def load(self, name: str) -> dict | None:
        raw = self.documents.get(name)
        return json.loads(raw) if raw is not None else None

    def save(self, name: str, data: dict) -> None:
        self.documents[name] = json.dumps(data)
        self.saves.append(name)

    def document(self, name: str) -> dict | None:
        return self.load(name)


class FakeSummarizer:
    def __init__(self, reply: str = "Alice discussed X", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[list[StoredMessage], str | None]] = []

    async def summarize(self, messages, previous_summary=None):
        self.calls.append((list(messages), previous_summary))
        if self.error is not None:
            raise self.error
        return self.reply


class FakeTranscriber:
    def __init__(self, text: str = "hello from voice", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[tuple[bytes, str]] = []

    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        self.calls.append((audio, mime_type))
        if self.error is not None:
            raise self.error
        return self.text


def make_settings(**overrides) -> SimpleNamespace:
    values = dict(
        BOT_MODE="mention",
        BOT_LANGUAGE="en",
        USAGE_TIMEZONE="UTC",
        DAILY_LIMIT_SECONDS=3600,
        MESSAGE_BUFFER_MAX_PER_CHAT=500,
        SUMMARY_HISTORY_MAX_PER_CHAT=12,
        SUMMARY_REUSE_WINDOW_MINUTES=30,
        SUMMARY_COOLDOWN_SECONDS=20,
        SUMMARY_DAILY_LIMIT_PER_USER=30,
        ADMIN_USERNAME="boss",
        ADMIN_USER_ID="",
        OPENAI_API_KEY="test",
        TRANSCRIPTION_MODEL="whisper-1",
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def make_message(message_id: int, text: str = "hi", user_id: int = 1, user_name: str = "@alice",
                 date: datetime | None = None) -> StoredMessage:
    return StoredMessage(
        message_id=message_id,
        date=date or datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc),
        user_id=user_id,
        user_name=user_name,
        text=text,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def settings() -> SimpleNamespace:
    return make_settings()


@pytest.fixture
def options(backend, settings) -> RuntimeOptionRegistry:
    registry = RuntimeOptionRegistry(backend, default_option_specs(settings))
    registry.load()
    return registry


@pytest.fixture
def transcription_usage(backend, options, clock) -> TranscriptionUsageLedger:
    ledger = TranscriptionUsageLedger(backend, options, ZoneInfo("UTC"), clock)
    ledger.load()
    return ledger


@pytest.fixture
def summary_quota(backend, options, clock) -> SummaryRequestLedger:
    ledger = SummaryRequestLedger(backend, options, ZoneInfo("UTC"), clock)
    ledger.load()
    return ledger


@pytest.fixture
def buffer(backend, options, clock) -> ChatMessageBuffer:
    store = ChatMessageBuffer(backend, options, clock)
    store.load()
    return store


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def app(settings, backend, summarizer, transcriber, clock):
    return build_app_context(
        settings,
        backend=backend,
        summarizer=summarizer,
        transcriber=transcriber,
        clock=clock,
    )


@pytest.fixture
def context(app):
    ctx = MagicMock()
    ctx.bot_data = {APP_CONTEXT_KEY: app}
    ctx.args = []
    ctx.bot.username = "voxt_bot"
    ctx.bot.send_message = AsyncMock()
    return ctx

