"""
Message buffer service - rolling chat history for summaries.

Для каждого чата хранится ограниченный буфер последних сообщений,
курсор lastSummarizedMessageId (максимальный id, уже вошедший в саммари)
и короткая история снимков саммари. Курсор двигается только через commit().
"""
import logging
from dataclasses import dataclass, field
from datetime import timedelta

from voxt.models import ChatSummaryState, StoredMessage, SummarySnapshot
from voxt.services.runtime_options import (
    MESSAGE_BUFFER_MAX_PER_CHAT,
    SUMMARY_HISTORY_MAX_PER_CHAT,
    SUMMARY_REUSE_WINDOW_MINUTES,
    RuntimeOptionRegistry,
)
from voxt.services.storage import MESSAGE_HISTORY_DOCUMENT, DocumentBackend, DocumentStore
from voxt.utils.clock import Clock, utcnow

logger = logging.getLogger(__name__)


@dataclass
class PendingInput:
    messages: list[StoredMessage] = field(default_factory=list)
    previous_summary: SummarySnapshot | None = None


@dataclass(frozen=True)
class BufferStats:
    recent_messages: int
    cached_summaries: int
    last_summarized_message_id: int


class ChatMessageBuffer(DocumentStore):
    """Буфер сообщений и курсор саммари по чатам."""

    document_name = MESSAGE_HISTORY_DOCUMENT

    def __init__(self, backend: DocumentBackend, options: RuntimeOptionRegistry, clock: Clock = utcnow):
        super().__init__(backend)
        self.options = options
        self.clock = clock
        self.chats: dict[str, ChatSummaryState] = {}

    def _restore(self, raw: dict) -> None:
        self.chats = {key: ChatSummaryState.from_dict(value) for key, value in raw.items()}

    def _dump(self) -> dict:
        return {key: state.to_dict() for key, state in self.chats.items()}

    def _state(self, chat_id: int) -> ChatSummaryState:
        key = str(chat_id)
        state = self.chats.get(key)
        if state is None:
            state = ChatSummaryState()
            self.chats[key] = state
        return state

    def _peek(self, chat_id: int) -> ChatSummaryState:
        # Чтение не создаёт состояние чата
        return self.chats.get(str(chat_id)) or ChatSummaryState()

    def _trim_buffer(self, state: ChatSummaryState) -> None:
        limit = self.options.get(MESSAGE_BUFFER_MAX_PER_CHAT)
        if len(state.recent_messages) > limit:
            state.recent_messages = state.recent_messages[-limit:]

    def append(self, chat_id: int, message: StoredMessage) -> None:
        """Добавляет сообщение и обрезает буфер (старые уходят первыми)."""
        state = self._state(chat_id)
        state.recent_messages.append(message)
        self._trim_buffer(state)
        self.flush()

    def upsert(self, chat_id: int, message: StoredMessage) -> None:
        """Заменяет сообщение с тем же id (например, плейсхолдер голосового) или добавляет."""
        state = self._state(chat_id)
        for index, existing in enumerate(state.recent_messages):
            if existing.message_id == message.message_id:
                state.recent_messages[index] = message
                break
        else:
            state.recent_messages.append(message)

        self._trim_buffer(state)
        self.flush()

    def latest_fresh_snapshot(self, chat_id: int) -> SummarySnapshot | None:
        """Последний снимок, если он не старше окна переиспользования."""
        state = self._peek(chat_id)
        if not state.summaries:
            return None

        latest = state.summaries[-1]
        max_age = timedelta(minutes=self.options.get(SUMMARY_REUSE_WINDOW_MINUTES))
        if self.clock() - latest.created_at <= max_age:
            return latest
        return None

    def pending_input(self, chat_id: int, limit: int) -> PendingInput:
        """Последние `limit` несуммаризированных сообщений (от старых к новым)."""
        state = self._peek(chat_id)
        unsummarized = state.unsummarized()
        messages = unsummarized[-limit:] if limit > 0 else []

        return PendingInput(
            messages=messages,
            previous_summary=self.latest_fresh_snapshot(chat_id),
        )

    def commit(self, chat_id: int, summary_text: str, consumed_messages: list[StoredMessage]) -> SummarySnapshot:
        """
        Сохраняет новое саммари и двигает курсор.

        uptoMessageId = max(курсор, max id среди consumed_messages), поэтому
        курсор никогда не уменьшается. После этого в буфере остаются только
        сообщения новее курсора.
        """
        state = self._state(chat_id)

        upto_message_id = max(
            [state.last_summarized_message_id] + [m.message_id for m in consumed_messages]
        )

        snapshot = SummarySnapshot(
            created_at=self.clock(),
            upto_message_id=upto_message_id,
            message_count=len(consumed_messages),
            summary=summary_text,
        )
        state.summaries.append(snapshot)

        history_limit = self.options.get(SUMMARY_HISTORY_MAX_PER_CHAT)
        if len(state.summaries) > history_limit:
            state.summaries = state.summaries[-history_limit:]

        state.last_summarized_message_id = upto_message_id
        state.recent_messages = state.unsummarized()

        self.flush()
        logger.info(
            f"Committed summary for chat {chat_id}: "
            f"{len(consumed_messages)} msgs, cursor -> {upto_message_id}"
        )
        return snapshot

    def reset_chat(self, chat_id: int) -> None:
        self.chats.pop(str(chat_id), None)
        self.flush()
        logger.info(f"Summary state reset for chat {chat_id}")

    def stats(self, chat_id: int) -> BufferStats:
        state = self._peek(chat_id)
        return BufferStats(
            recent_messages=len(state.recent_messages),
            cached_summaries=len(state.summaries),
            last_summarized_message_id=state.last_summarized_message_id,
        )
