# viibe/storage/memory_provider.py
"""
In-process storage provider.

Used by tests and single-process development. Contents are lost on restart.
"""

import logging

from viibe.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed key-value store."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    @property
    def name(self) -> str:
        return "memory"

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        logger.debug(f"Stored in memory: {key} ({len(value)} chars)")

    def remove(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def clear(self) -> None:
        """Remove all stored values (for testing)."""
        self._data.clear()
