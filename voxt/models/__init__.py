from .base import Base
from .document import StateDocument
from .chat_state import ChatSummaryState, StoredMessage, SummarySnapshot
from .usage import ChatUsage, SummaryUsageEntry

__all__ = [
    "Base",
    "StateDocument",
    "ChatSummaryState",
    "StoredMessage",
    "SummarySnapshot",
    "ChatUsage",
    "SummaryUsageEntry",
]
