"""
State document model for the SQL storage backend.
"""
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StateDocument(Base):
    """Один JSON-документ состояния (usage, summary usage, history, settings)."""

    __tablename__ = "state_documents"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Весь документ целиком, перезаписывается при каждой мутации
    payload: Mapped[str] = mapped_column(Text, nullable=False, default="{}")

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<StateDocument(name={self.name}, size={len(self.payload or '')})>"
