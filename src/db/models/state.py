"""
Key-value state table.

One row per persisted key (topic coverage per document, cached notes and
summary). The value column holds the JSON document written by the store.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class StoredState(Base):
    """A persisted JSON value addressed by a string key."""

    __tablename__ = "stored_state"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    value: Mapped[dict] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<StoredState(key={self.key!r})>"
