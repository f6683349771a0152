"""
Application context - owns every store and external client of the bot.
"""
import logging
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from telegram.ext import ContextTypes

from voxt.services.ai_service import SummarizerClient, build_summarizer
from voxt.services.message_buffer import ChatMessageBuffer
from voxt.services.runtime_options import RuntimeOptionRegistry, default_option_specs
from voxt.services.storage import DocumentBackend, build_backend
from voxt.services.summary_quota import SummaryRequestLedger
from voxt.services.summary_service import SummaryOrchestrator
from voxt.services.transcriber import TranscriberClient
from voxt.services.transcription_usage import TranscriptionUsageLedger
from voxt.utils.clock import Clock, utcnow

logger = logging.getLogger(__name__)

APP_CONTEXT_KEY = "app"


@dataclass
class AppContext:
    settings: object
    backend: DocumentBackend
    options: RuntimeOptionRegistry
    transcription_usage: TranscriptionUsageLedger
    summary_quota: SummaryRequestLedger
    buffer: ChatMessageBuffer
    summaries: SummaryOrchestrator
    transcriber: TranscriberClient

    @property
    def stores(self) -> list:
        return [self.options, self.transcription_usage, self.summary_quota, self.buffer]

    def load(self) -> None:
        for store in self.stores:
            store.load()
        logger.info("State loaded")

    def flush(self) -> None:
        for store in self.stores:
            store.flush()

    def close(self) -> None:
        self.flush()
        self.backend.close()


def build_app_context(
    settings,
    backend: DocumentBackend | None = None,
    summarizer: SummarizerClient | None = None,
    transcriber: TranscriberClient | None = None,
    clock: Clock = utcnow
) -> AppContext:
    """Собирает сторы и клиентов. Состояние читается сразу (load)."""
    backend = backend or build_backend(settings)
    tz = ZoneInfo(settings.USAGE_TIMEZONE)

    options = RuntimeOptionRegistry(backend, default_option_specs(settings))
    transcription_usage = TranscriptionUsageLedger(backend, options, tz, clock)
    summary_quota = SummaryRequestLedger(backend, options, tz, clock)
    buffer = ChatMessageBuffer(backend, options, clock)

    if summarizer is None:
        summarizer = build_summarizer(settings)
    if transcriber is None:
        transcriber = TranscriberClient(settings.OPENAI_API_KEY, settings.TRANSCRIPTION_MODEL)

    app = AppContext(
        settings=settings,
        backend=backend,
        options=options,
        transcription_usage=transcription_usage,
        summary_quota=summary_quota,
        buffer=buffer,
        summaries=SummaryOrchestrator(buffer, summary_quota, options, summarizer),
        transcriber=transcriber,
    )
    app.load()
    return app


def get_app(context: ContextTypes.DEFAULT_TYPE) -> AppContext:
    """Возвращает AppContext из bot_data."""
    app = context.bot_data.get(APP_CONTEXT_KEY)
    if app is None:
        raise RuntimeError("Application context not initialized")
    return app
