# tests/test_duplicate_detector.py
"""
Unit tests for history-based duplicate detection.
"""

import json
from types import SimpleNamespace

import pytest

from viibe.constants import HistoryDefaults
from viibe.services.duplicate_detector import (
    DuplicateDetector,
    HistoryEntry,
    get_duplicate_detector,
)
from viibe.storage.base import KeyValueStore
from viibe.storage.memory_provider import InMemoryKeyValueStore

KEY = HistoryDefaults.STORAGE_KEY


class FailingStore(KeyValueStore):
    """Store whose every operation fails like an unavailable disk."""

    @property
    def name(self) -> str:
        return "failing"

    def get(self, key):
        raise OSError("disk unavailable")

    def set(self, key, value):
        raise OSError("disk unavailable")

    def remove(self, key):
        raise OSError("disk unavailable")


def stored(store: InMemoryKeyValueStore) -> list[dict]:
    return json.loads(store.get(KEY))


class TestNormalizeText:
    def test_lowercases_and_strips_punctuation(self):
        assert DuplicateDetector.normalize_text("  The CAT, sat!!  ") == "the cat sat"

    def test_collapses_whitespace(self):
        assert DuplicateDetector.normalize_text("a\t\tb\n c") == "a b c"

    def test_keeps_unicode_word_characters(self):
        assert DuplicateDetector.normalize_text("Café, NAÏVE!") == "café naïve"

    @pytest.mark.parametrize("text", [None, "", "!!!"])
    def test_empty(self, text):
        assert DuplicateDetector.normalize_text(text) == ""


class TestJaccardSimilarity:
    def test_half_overlap(self):
        assert DuplicateDetector.jaccard_similarity("the cat sat", "the cat ran") == pytest.approx(0.5)

    def test_symmetric(self):
        a, b = "alex trips on stairs", "alex falls down stairs"
        assert DuplicateDetector.jaccard_similarity(a, b) == DuplicateDetector.jaccard_similarity(b, a)

    def test_identical_is_one(self):
        assert DuplicateDetector.jaccard_similarity("a b c", "c b a") == 1.0

    def test_word_sets_ignore_repeats(self):
        assert DuplicateDetector.jaccard_similarity("go go go", "go") == 1.0

    def test_both_empty_is_zero(self):
        assert DuplicateDetector.jaccard_similarity("", "") == 0.0

    def test_disjoint_is_zero(self):
        assert DuplicateDetector.jaccard_similarity("a b", "c d") == 0.0


class TestCheckForDuplicates:
    """Tests for check_for_duplicates()."""

    def test_empty_history(self, detector):
        result = detector.check_for_duplicates(["anything"], "jokes", "dad")
        assert result.has_duplicates is False
        assert result.duplicate_indices == []

    def test_flags_near_copies_in_input_order(self, detector):
        detector.add_to_history(["Alex trips over nothing again"], "jokes", "dad")

        result = detector.check_for_duplicates(
            ["Something new entirely", "alex trips over NOTHING again!", "Alex trips over nothing again"],
            "jokes",
            "dad",
        )
        assert result.has_duplicates is True
        assert result.duplicate_indices == [1, 2]

    def test_threshold_is_strict(self, memory_store):
        detector = DuplicateDetector(store=memory_store, threshold=0.5)
        detector.add_to_history(["the cat sat"], "a", "b")
        assert detector.check_for_duplicates(["the cat ran"], "a", "b").has_duplicates is False

    def test_other_category_never_matches(self, detector):
        detector.add_to_history(["Alex trips over nothing again"], "jokes", "dad")

        assert detector.check_for_duplicates(["Alex trips over nothing again"], "jokes", "pun").has_duplicates is False
        assert detector.check_for_duplicates(["Alex trips over nothing again"], "roast", "dad").has_duplicates is False

    def test_accepts_mappings_and_objects(self, detector):
        detector.add_to_history([{"text": "same line here"}], "a", "b")

        result = detector.check_for_duplicates(
            [SimpleNamespace(text="same line here"), {"text": "different"}, None],
            "a",
            "b",
        )
        assert result.duplicate_indices == [0]

    def test_does_not_modify_history(self, detector, memory_store):
        detector.add_to_history(["one line"], "a", "b")
        before = memory_store.get(KEY)
        detector.check_for_duplicates(["one line"], "a", "b")
        assert memory_store.get(KEY) == before

    @pytest.mark.parametrize("raw", ["{not json", "{}", '[{"category": "a"}]'])
    def test_corrupt_history_means_no_duplicates(self, memory_store, raw):
        memory_store.set(KEY, raw)
        detector = DuplicateDetector(store=memory_store)
        result = detector.check_for_duplicates(["line"], "a", "b")
        assert result.has_duplicates is False
        assert result.duplicate_indices == []

    def test_failing_store_means_no_duplicates(self):
        detector = DuplicateDetector(store=FailingStore())
        assert detector.check_for_duplicates(["line"], "a", "b").has_duplicates is False


class TestAddToHistory:
    """Tests for add_to_history() and the bounded history."""

    def test_stores_normalized_entries(self, detector, memory_store, monkeypatch):
        monkeypatch.setattr("viibe.services.duplicate_detector.time.time", lambda: 1700000000.5)

        assert detector.add_to_history(["Hello, World!"], "jokes", "dad") == 1
        assert stored(memory_store) == [
            {"normalizedText": "hello world", "category": "jokes", "subcategory": "dad", "timestamp": 1700000000500}
        ]

    def test_keeps_most_recent_entries(self, detector, memory_store, monkeypatch):
        clock = {"now": 1000.0}
        monkeypatch.setattr("viibe.services.duplicate_detector.time.time", lambda: clock["now"])

        detector.add_to_history([f"old line {i}" for i in range(150)], "a", "b")
        clock["now"] = 2000.0
        retained = detector.add_to_history([f"new line {i}" for i in range(100)], "a", "b")

        entries = stored(memory_store)
        assert retained == HistoryDefaults.MAX_ENTRIES
        assert len(entries) == HistoryDefaults.MAX_ENTRIES
        assert all(e["timestamp"] == 2000000 for e in entries[:100])
        assert all(e["timestamp"] == 1000000 for e in entries[100:])
        assert sum(1 for e in entries if e["normalizedText"].startswith("new line")) == 100

    def test_custom_max_entries(self, memory_store):
        detector = DuplicateDetector(store=memory_store, max_entries=2)
        detector.add_to_history(["a", "b", "c"], "x", "y")
        assert len(stored(memory_store)) == 2

    def test_empty_lines(self, detector, memory_store):
        assert detector.add_to_history([], "a", "b") == 0
        assert stored(memory_store) == []

    def test_corrupt_history_is_replaced(self, memory_store):
        memory_store.set(KEY, "{not json")
        detector = DuplicateDetector(store=memory_store)
        assert detector.add_to_history(["fresh"], "a", "b") == 1
        assert stored(memory_store)[0]["normalizedText"] == "fresh"

    def test_failing_store_returns_zero(self):
        detector = DuplicateDetector(store=FailingStore())
        assert detector.add_to_history(["line"], "a", "b") == 0

    def test_custom_storage_key(self, memory_store):
        detector = DuplicateDetector(store=memory_store, storage_key="other")
        detector.add_to_history(["line"], "a", "b")
        assert memory_store.get(KEY) is None
        assert memory_store.get("other") is not None


class TestHistoryEntry:
    def test_round_trip_shape(self):
        entry = HistoryEntry(normalized_text="hi there", category="a", subcategory="b", timestamp=5)
        assert entry.to_dict() == {"normalizedText": "hi there", "category": "a", "subcategory": "b", "timestamp": 5}
        assert HistoryEntry.from_dict(entry.to_dict()) == entry


class TestClearHistory:
    def test_clear_removes_everything(self, detector):
        detector.add_to_history(["same line here"], "a", "b")
        assert detector.clear_history() is True
        assert detector.load_history() == []
        assert detector.check_for_duplicates(["same line here"], "a", "b").has_duplicates is False

    def test_clear_empty_history(self, detector):
        assert detector.clear_history() is True

    def test_clear_failure(self):
        assert DuplicateDetector(store=FailingStore()).clear_history() is False


class TestGetDuplicateDetector:
    def test_uses_settings_defaults(self, memory_store):
        detector = get_duplicate_detector(memory_store)
        assert detector.store is memory_store
        assert detector.storage_key == HistoryDefaults.STORAGE_KEY
        assert detector.max_entries == HistoryDefaults.MAX_ENTRIES
        assert detector.threshold == HistoryDefaults.SIMILARITY_THRESHOLD

    def test_default_store_from_factory(self):
        # conftest selects the in-memory provider
        assert get_duplicate_detector().store.name == "memory"
