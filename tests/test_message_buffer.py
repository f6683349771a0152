"""Tests for the chat message buffer and summary cursor."""

from tests.conftest import MemoryBackend, make_message
from voxt.services.message_buffer import ChatMessageBuffer
from voxt.services.runtime_options import (
    MESSAGE_BUFFER_MAX_PER_CHAT,
    SUMMARY_HISTORY_MAX_PER_CHAT,
    SUMMARY_REUSE_WINDOW_MINUTES,
)
from voxt.services.storage import MESSAGE_HISTORY_DOCUMENT


def ids(messages) -> list[int]:
    return [m.message_id for m in messages]


class TestAppend:
    """Bounded append."""

    def test_buffer_drops_oldest_first(self, buffer, options) -> None:
        # The registry minimum is 20, so bypass set() the way a persisted overlay would
        options.overrides[MESSAGE_BUFFER_MAX_PER_CHAT] = 3

        for message_id in (1, 2, 3, 4):
            buffer.append(5, make_message(message_id))

        assert ids(buffer.chats["5"].recent_messages) == [2, 3, 4]

    def test_append_persists(self, buffer, backend) -> None:
        buffer.append(5, make_message(1, text="hello"))

        document = backend.document(MESSAGE_HISTORY_DOCUMENT)
        assert document["5"]["lastSummarizedMessageId"] == 0
        assert document["5"]["summaries"] == []
        assert document["5"]["recentMessages"][0]["text"] == "hello"
        assert document["5"]["recentMessages"][0]["date"] == "2026-03-01T12:00:00.000Z"

    def test_upsert_replaces_placeholder_in_place(self, buffer) -> None:
        buffer.append(5, make_message(1))
        buffer.append(5, make_message(2, text="[voice 7s]"))
        buffer.append(5, make_message(3))

        buffer.upsert(5, make_message(2, text="transcribed words"))

        messages = buffer.chats["5"].recent_messages
        assert ids(messages) == [1, 2, 3]
        assert messages[1].text == "transcribed words"

    def test_upsert_appends_unknown_id(self, buffer) -> None:
        buffer.append(5, make_message(1))
        buffer.upsert(5, make_message(9, text="late voice"))

        assert ids(buffer.chats["5"].recent_messages) == [1, 9]


class TestPendingInput:
    """Selecting the unsummarized backlog."""

    def test_returns_most_recent_oldest_first(self, buffer) -> None:
        for message_id in range(1, 11):
            buffer.append(5, make_message(message_id))

        pending = buffer.pending_input(5, 3)

        assert ids(pending.messages) == [8, 9, 10]
        assert pending.previous_summary is None

    def test_non_positive_limit_yields_nothing(self, buffer) -> None:
        buffer.append(5, make_message(1))

        assert buffer.pending_input(5, 0).messages == []

    def test_unknown_chat_is_empty_and_not_created(self, buffer) -> None:
        pending = buffer.pending_input(99, 10)

        assert pending.messages == []
        assert "99" not in buffer.chats

    def test_skips_messages_at_or_below_cursor(self, buffer) -> None:
        buffer.append(5, make_message(1))
        buffer.append(5, make_message(2))
        buffer.commit(5, "first", [make_message(1), make_message(2)])
        # A late upsert of an old id must not become pending again
        buffer.upsert(5, make_message(2, text="old voice"))
        buffer.append(5, make_message(3))

        assert ids(buffer.pending_input(5, 10).messages) == [3]


class TestCommit:
    """Cursor advance and snapshot history."""

    def test_end_to_end_scenario(self, buffer) -> None:
        for message_id in (101, 102, 103):
            buffer.append(5, make_message(message_id))

        pending = buffer.pending_input(5, 10)
        assert ids(pending.messages) == [101, 102, 103]
        assert pending.previous_summary is None

        snapshot = buffer.commit(5, "Alice discussed X", pending.messages)

        state = buffer.chats["5"]
        assert state.last_summarized_message_id == 103
        assert state.recent_messages == []
        assert len(state.summaries) == 1
        assert snapshot.upto_message_id == 103
        assert snapshot.message_count == 3
        assert snapshot.summary == "Alice discussed X"

    def test_cursor_never_decreases(self, buffer) -> None:
        buffer.append(5, make_message(10))
        buffer.commit(5, "a", [make_message(10)])

        snapshot = buffer.commit(5, "b", [make_message(4)])

        assert snapshot.upto_message_id == 10
        assert buffer.chats["5"].last_summarized_message_id == 10

    def test_empty_commit_keeps_cursor(self, buffer) -> None:
        buffer.append(5, make_message(10))
        buffer.commit(5, "a", [make_message(10)])

        snapshot = buffer.commit(5, "again", [])

        assert snapshot.upto_message_id == 10
        assert snapshot.message_count == 0

    def test_survivors_are_newer_than_cursor(self, buffer) -> None:
        for message_id in range(1, 8):
            buffer.append(5, make_message(message_id))

        for consumed in ([1, 2], [3, 4, 5], [6]):
            buffer.commit(5, "s", [make_message(i) for i in consumed])
            state = buffer.chats["5"]
            assert all(m.message_id > state.last_summarized_message_id for m in state.recent_messages)

        assert ids(buffer.chats["5"].recent_messages) == [7]
        uptos = [s.upto_message_id for s in buffer.chats["5"].summaries]
        assert uptos == sorted(uptos)

    def test_summary_history_is_bounded(self, buffer, options) -> None:
        options.set(SUMMARY_HISTORY_MAX_PER_CHAT, 2)

        for message_id in (1, 2, 3):
            buffer.append(5, make_message(message_id))
            buffer.commit(5, f"summary {message_id}", [make_message(message_id)])

        summaries = buffer.chats["5"].summaries
        assert [s.summary for s in summaries] == ["summary 2", "summary 3"]


class TestLatestFreshSnapshot:
    """Reuse window."""

    def test_reuse_window(self, buffer, options, clock) -> None:
        options.set(SUMMARY_REUSE_WINDOW_MINUTES, 30)
        buffer.append(5, make_message(1))
        buffer.commit(5, "cached", [make_message(1)])

        clock.advance(minutes=29)
        assert buffer.latest_fresh_snapshot(5).summary == "cached"

        clock.advance(minutes=2)
        assert buffer.latest_fresh_snapshot(5) is None
        assert len(buffer.chats["5"].summaries) == 1

    def test_pending_input_includes_fresh_snapshot(self, buffer) -> None:
        buffer.append(5, make_message(1))
        buffer.commit(5, "cached", [make_message(1)])
        buffer.append(5, make_message(2))

        pending = buffer.pending_input(5, 10)

        assert ids(pending.messages) == [2]
        assert pending.previous_summary.summary == "cached"


class TestPersistence:
    """Loading, legacy shapes and reset."""

    def test_round_trip_through_backend(self, buffer, backend, options, clock) -> None:
        buffer.append(5, make_message(1))
        buffer.commit(5, "cached", [make_message(1)])
        buffer.append(5, make_message(2))

        reloaded = ChatMessageBuffer(backend, options, clock)
        reloaded.load()

        assert reloaded.stats(5) == buffer.stats(5)
        assert reloaded.latest_fresh_snapshot(5) == buffer.latest_fresh_snapshot(5)

    def test_legacy_list_document(self, options, clock) -> None:
        legacy = {
            "5": [
                {"messageId": 1, "date": "2026-03-01T10:00:00.000Z", "userId": 1, "userName": "a", "text": "x"},
                {"messageId": "broken"},
            ]
        }
        store = ChatMessageBuffer(MemoryBackend({MESSAGE_HISTORY_DOCUMENT: legacy}), options, clock)
        store.load()

        stats = store.stats(5)
        assert stats.recent_messages == 1
        assert stats.cached_summaries == 0
        assert stats.last_summarized_message_id == 0

    def test_reset_chat(self, buffer, backend) -> None:
        buffer.append(5, make_message(1))
        buffer.append(6, make_message(1))

        buffer.reset_chat(5)

        assert set(backend.document(MESSAGE_HISTORY_DOCUMENT)) == {"6"}
        assert buffer.stats(5).recent_messages == 0
