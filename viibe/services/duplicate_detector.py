# viibe/services/duplicate_detector.py
"""
Duplicate detection for generated caption lines.

Keeps a bounded history of recently generated lines per category and
subcategory, and flags new lines that are near-copies of that history.

Dedupe rule:
    A new line is a duplicate when the Jaccard similarity of its normalized
    word set to any history entry in the same category/subcategory is
    strictly greater than the threshold (0.85).

The history is one JSON array stored under a fixed key in a KeyValueStore.
Storage and decoding failures are logged and never reach the caller.
"""

import json
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from viibe.constants import HistoryDefaults
from viibe.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

# Errors that mean "history unavailable", never fatal
STORAGE_ERRORS = (OSError, ValueError, TypeError, KeyError, SQLAlchemyError)


@dataclass
class HistoryEntry:
    """One previously generated line, already normalized."""

    normalized_text: str
    category: str
    subcategory: str
    timestamp: int  # epoch milliseconds

    def to_dict(self) -> dict:
        """Stored JSON shape (camelCase keys)."""
        return {
            "normalizedText": self.normalized_text,
            "category": self.category,
            "subcategory": self.subcategory,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HistoryEntry":
        return cls(
            normalized_text=str(data["normalizedText"]),
            category=str(data["category"]),
            subcategory=str(data["subcategory"]),
            timestamp=int(data["timestamp"]),
        )


@dataclass
class DuplicateCheckResult:
    """Indices of new lines that repeat recent history, in input order."""

    has_duplicates: bool = False
    duplicate_indices: list[int] = field(default_factory=list)


def _line_text(line: Any) -> str:
    """Accept plain strings, {"text": ...} mappings, or objects with .text."""
    if line is None:
        return ""
    if isinstance(line, str):
        return line
    if isinstance(line, Mapping):
        return str(line.get("text") or "")
    return str(getattr(line, "text", "") or "")


class DuplicateDetector:
    """Duplicate detection against a persisted, bounded history."""

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = HistoryDefaults.STORAGE_KEY,
        max_entries: int = HistoryDefaults.MAX_ENTRIES,
        threshold: float = HistoryDefaults.SIMILARITY_THRESHOLD,
    ):
        self.store = store
        self.storage_key = storage_key
        self.max_entries = max_entries
        self.threshold = threshold

    @staticmethod
    def normalize_text(text: Optional[str]) -> str:
        """Lowercase, turn non-word characters into spaces, collapse whitespace."""
        if not text:
            return ""
        text = text.lower()
        text = re.sub(r"[^\w\s]", " ", text)
        text = re.sub(r"\s+", " ", text).strip()
        return text

    @staticmethod
    def jaccard_similarity(text1: str, text2: str) -> float:
        """Jaccard similarity of the word sets of two normalized texts."""
        words1 = set(text1.split())
        words2 = set(text2.split())
        union = words1 | words2
        if not union:
            return 0.0
        return len(words1 & words2) / len(union)

    # -------------------------------------------------------------------------
    # History persistence
    # -------------------------------------------------------------------------

    def _read_history(self) -> list[HistoryEntry]:
        """Read and decode history. Raises on storage or decoding errors."""
        raw = self.store.get(self.storage_key)
        if not raw:
            return []
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"History under '{self.storage_key}' is not a JSON array")
        return [HistoryEntry.from_dict(item) for item in data]

    def load_history(self) -> list[HistoryEntry]:
        """History entries, or an empty list if missing or unreadable."""
        try:
            return self._read_history()
        except STORAGE_ERRORS as e:
            logger.warning(
                f"Error loading duplicate history: {e}",
                extra={"event": "history_load_failed", "key": self.storage_key},
            )
            return []

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def check_for_duplicates(
        self,
        new_lines: Iterable[Any],
        category: str,
        subcategory: str,
    ) -> DuplicateCheckResult:
        """
        Flag new lines that repeat history from the same category/subcategory.

        Args:
            new_lines: Strings, or objects/mappings with a text field

        Returns:
            DuplicateCheckResult with indices in input order
        """
        try:
            history = self._read_history()
        except STORAGE_ERRORS as e:
            logger.warning(
                f"Error checking duplicates: {e}",
                extra={"event": "duplicate_check_failed", "category": category, "subcategory": subcategory},
            )
            return DuplicateCheckResult()

        scoped = [e.normalized_text for e in history if e.category == category and e.subcategory == subcategory]

        duplicate_indices: list[int] = []
        for idx, line in enumerate(new_lines or []):
            normalized = self.normalize_text(_line_text(line))
            if any(self.jaccard_similarity(normalized, previous) > self.threshold for previous in scoped):
                duplicate_indices.append(idx)

        if duplicate_indices:
            logger.info(
                f"Found {len(duplicate_indices)} duplicate lines in {category}/{subcategory}",
                extra={
                    "event": "duplicates_found",
                    "category": category,
                    "subcategory": subcategory,
                    "duplicates": duplicate_indices,
                },
            )

        return DuplicateCheckResult(has_duplicates=bool(duplicate_indices), duplicate_indices=duplicate_indices)

    def add_to_history(self, lines: Iterable[Any], category: str, subcategory: str) -> int:
        """
        Append lines to history, keeping only the most recent entries.

        Returns:
            Number of entries stored after the write (0 if the write failed)
        """
        history = self.load_history()
        try:
            now = int(time.time() * 1000)
            new_entries = [
                HistoryEntry(
                    normalized_text=self.normalize_text(_line_text(line)),
                    category=category,
                    subcategory=subcategory,
                    timestamp=now,
                )
                for line in (lines or [])
            ]

            # Newest first; ties keep their existing relative order
            combined = sorted([*history, *new_entries], key=lambda e: e.timestamp, reverse=True)
            trimmed = combined[: self.max_entries]

            self.store.set(self.storage_key, json.dumps([e.to_dict() for e in trimmed]))
            logger.debug(
                f"History updated: {len(new_entries)} added, {len(trimmed)} retained",
                extra={"event": "history_updated", "category": category, "subcategory": subcategory, "entries": len(trimmed)},
            )
            return len(trimmed)
        except STORAGE_ERRORS as e:
            logger.warning(
                f"Error saving to history: {e}",
                extra={"event": "history_save_failed", "key": self.storage_key},
            )
            return 0

    def clear_history(self) -> bool:
        """Remove all history. Returns False if the store could not be cleared."""
        try:
            self.store.remove(self.storage_key)
            return True
        except STORAGE_ERRORS as e:
            logger.warning(
                f"Error clearing history: {e}",
                extra={"event": "history_clear_failed", "key": self.storage_key},
            )
            return False


def get_duplicate_detector(store: Optional[KeyValueStore] = None) -> DuplicateDetector:
    """Build a detector from settings, using the configured history store by default."""
    from viibe.config import get_settings
    from viibe.storage.factory import get_history_store

    settings = get_settings()
    return DuplicateDetector(
        store=store or get_history_store(),
        storage_key=settings.HISTORY_STORAGE_KEY,
        max_entries=settings.HISTORY_MAX_ENTRIES,
        threshold=settings.DUPLICATE_SIMILARITY_THRESHOLD,
    )
