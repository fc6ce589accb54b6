# viibe/models.py
"""
Database models.

Tables:
- KeyValueEntry: string values addressed by a string key (backs the sql history store)
"""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, String, Text

from viibe.database import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class KeyValueEntry(Base):
    """One stored value, e.g. the JSON-encoded duplicate history."""

    __tablename__ = "kv_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<KeyValueEntry {self.key} ({len(self.value or '')} chars)>"
