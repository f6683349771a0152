"""
Summary service - incremental chat summarization.

Решает, что отправить в модель, можно ли вместо этого вернуть свежий
кэшированный снимок, и как вписать результат обратно в буфер.
"""
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from voxt.models import SummarySnapshot
from voxt.services.ai_service import SummarizerClient
from voxt.services.message_buffer import ChatMessageBuffer
from voxt.services.runtime_options import MAX_SUMMARY_MESSAGES, RuntimeOptionRegistry
from voxt.services.summary_quota import SummaryRequestLedger

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_MESSAGES = 25
MIN_SUMMARY_MESSAGES = 5

OUTCOME_FRESH = "fresh"
OUTCOME_CACHED = "cached"
OUTCOME_NOTHING = "nothing"


@dataclass(frozen=True)
class SummaryOutcome:
    kind: str
    snapshot: SummarySnapshot | None = None
    message_count: int = 0


class SummaryOrchestrator:
    """Оркестратор /summary: квота, выбор входа, вызов модели, commit."""

    def __init__(
        self,
        buffer: ChatMessageBuffer,
        ledger: SummaryRequestLedger,
        options: RuntimeOptionRegistry,
        summarizer: SummarizerClient
    ):
        self.buffer = buffer
        self.ledger = ledger
        self.options = options
        self.summarizer = summarizer

    def clamp_limit(self, requested: int | None) -> int:
        """Ограничивает запрошенное количество сообщений до [5, maxSummaryMessages]."""
        if requested is None:
            requested = DEFAULT_SUMMARY_MESSAGES
        maximum = self.options.get(MAX_SUMMARY_MESSAGES)
        return max(MIN_SUMMARY_MESSAGES, min(maximum, int(requested)))

    async def summarize(
        self,
        chat_id: int,
        user_id: int,
        requested_limit: int | None = None,
        on_admitted: Callable[[int], Awaitable[None]] | None = None
    ) -> SummaryOutcome:
        """
        Суммаризирует несуммаризированный хвост чата.

        Без новых сообщений возвращает свежий снимок (без вызова модели и
        без списания квоты) или OUTCOME_NOTHING. Отказ квоты: QuotaDenied.
        Ошибка модели: ExternalServiceError; буфер и курсор не меняются,
        списанная единица квоты не возвращается.
        """
        limit = self.clamp_limit(requested_limit)
        pending = self.buffer.pending_input(chat_id, limit)

        if not pending.messages:
            if pending.previous_summary:
                return SummaryOutcome(OUTCOME_CACHED, pending.previous_summary)
            return SummaryOutcome(OUTCOME_NOTHING)

        self.ledger.check_and_consume(chat_id, user_id).raise_for_denial()

        if on_admitted is not None:
            await on_admitted(len(pending.messages))

        previous_text = pending.previous_summary.summary if pending.previous_summary else None
        summary_text = await self.summarizer.summarize(pending.messages, previous_text)

        snapshot = self.buffer.commit(chat_id, summary_text, pending.messages)
        logger.info(f"Summarized {len(pending.messages)} messages for chat {chat_id} (user {user_id})")
        return SummaryOutcome(OUTCOME_FRESH, snapshot, len(pending.messages))
