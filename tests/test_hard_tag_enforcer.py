# tests/test_hard_tag_enforcer.py
"""
Unit tests for hard-tag enforcement on generated lines.
"""

import pytest

from viibe.services.hard_tag_enforcer import (
    count_hits,
    count_tag_coverage,
    enforce_hard_tags_post_generation,
    ensure_hard_tags,
    ensure_hard_tags_in_fallback,
    find_lines_needing_tags,
    inject_missing_tags,
    inject_tag_naturally,
    select_best_tag_for_line,
    strip_soft_echo,
)


class TestEnsureHardTags:
    """Tests for anchor-based ensure_hard_tags()."""

    def test_injects_after_first_anchor(self):
        lines = ["Bob was late again", "Traffic is wild", "Nothing happened"]
        result = ensure_hard_tags(lines, ["Alex"])

        assert result == ["Bob was Alex late again", "Traffic is Alex wild", "Nothing happened"]

    def test_line_without_anchor_is_left_alone(self):
        """'Nothing' contains 'in' but not as a word, so no anchor matches."""
        assert ensure_hard_tags(["Nothing happened"], ["Alex"]) == ["Nothing happened"]

    def test_conjunction_anchor_used_when_no_verb(self):
        assert ensure_hard_tags(["Tired and hungry"], ["Alex"]) == ["Tired and Alex hungry"]

    def test_preposition_anchor_used_last(self):
        assert ensure_hard_tags(["Lunch at noon"], ["Alex"]) == ["Lunch at Alex noon"]

    def test_returns_same_list_when_satisfied(self):
        lines = [
            "Alex and Reid fight",
            "Reid beats Alex",
            "alex hugs reid",
        ]
        result = ensure_hard_tags(lines, ["Alex", "Reid"])
        assert result is lines

    def test_output_length_matches_input(self):
        lines = ["Bob is here", "", "Nothing happened", "We went by car"]
        result = ensure_hard_tags(lines, ["Alex", "Reid"])
        assert len(result) == len(lines)

    def test_at_most_two_injections_per_line(self):
        result = ensure_hard_tags(["Dave is here"], ["Alex", "Bea", "Cy"])
        assert result == ["Dave is Bea Alex here"]
        assert "Cy" not in result[0]

    def test_only_first_three_tags_enforced(self):
        lines = ["Alex is here", "Bea is here", "Cy is here"]
        result = ensure_hard_tags(lines, ["Alex", "Bea", "Cy", "Dot"])
        assert not any("Dot" in line for line in result)

    def test_existing_tags_case_insensitive(self):
        assert count_hits("ALEX meets reid", ["Alex", "Reid"]) == 2

    def test_custom_required(self):
        lines = ["Alex and Reid fight", "Nobody is home"]
        assert ensure_hard_tags(lines, ["Alex", "Reid"], required=1) is lines

    def test_no_hard_tags(self):
        lines = ["Bob is here"]
        assert ensure_hard_tags(lines, []) == lines
        assert ensure_hard_tags(lines, None) == lines

    def test_none_lines(self):
        assert ensure_hard_tags(None, ["Alex"]) == []

    def test_none_entries_treated_as_empty(self):
        assert ensure_hard_tags([None, "Bob is here"], ["Alex"]) == ["", "Bob is Alex here"]


class TestInjectMissingTags:
    def test_nothing_missing(self):
        assert inject_missing_tags("Alex is here", ["Alex"]) == "Alex is here"

    def test_anchor_matching_is_case_insensitive(self):
        assert inject_missing_tags("He IS tall", ["Alex"]) == "He IS Alex tall"


class TestCoverageHelpers:
    def test_count_tag_coverage(self):
        assert count_tag_coverage(["Alex runs", "nobody", "with reid"], ["Alex", "Reid"]) == 2

    def test_find_lines_needing_tags(self):
        lines = ["Alex runs", "a", "b", "c"]
        assert find_lines_needing_tags(lines, ["Alex"], 3) == [1, 2]

    def test_find_lines_none_needed(self):
        assert find_lines_needing_tags(["Alex", "Alex"], ["Alex"], 2) == []

    def test_select_best_tag_prefers_shortest(self):
        assert select_best_tag_for_line("any line", ["Alexandra", "Bo", "Reid"]) == "Bo"

    def test_select_best_tag_empty(self):
        assert select_best_tag_for_line("any line", []) is None


class TestInjectTagNaturally:
    """Placement strategies, in order of preference."""

    def test_replaces_you(self):
        assert inject_tag_naturally("you are late", "Alex") == "Alex are late"

    def test_replaces_your_with_possessive(self):
        assert inject_tag_naturally("Your car broke", "Alex") == "Alex's car broke"

    def test_prefixes_action_verb_opener(self):
        assert inject_tag_naturally("Went to the store", "Alex") == "Alex went to the store"

    def test_splices_after_break_point(self):
        result = inject_tag_naturally("I tried my best, but everything went wrong", "Alex")
        assert result == "I tried my best, Alex but everything went wrong"

    def test_splice_keeps_rest_of_line(self):
        result = inject_tag_naturally("Sure, The meeting ran long, and nobody cared", "Alex")
        assert result == "Sure, Alex the meeting ran long, and nobody cared"

    def test_short_tail_falls_through_to_prefix(self):
        assert inject_tag_naturally("Well, ok", "Alex") == "Alex well, ok"

    def test_appends_to_medium_line(self):
        line = "x" * 94 + "."
        assert inject_tag_naturally(line, "Alex") == "x" * 94 + " with Alex."

    @pytest.mark.parametrize("tag", [r"\o/", r"\1", r"C:\new", r"\g<0>"])
    def test_backslash_tags_inserted_literally(self, tag):
        assert inject_tag_naturally("you trip on air", tag) == f"{tag} trip on air"
        assert inject_tag_naturally("your dog trips", tag) == f"{tag}'s dog trips"

    def test_long_line_unchanged(self):
        line = "x" * 120
        assert inject_tag_naturally(line, "Alex") == line


class TestEnforcePostGeneration:
    """Tests for enforce_hard_tags_post_generation()."""

    def test_tops_up_to_minimum(self):
        lines = ["you are late", "Your car broke", "went to the store", "Plain line here"]
        result = enforce_hard_tags_post_generation(lines, ["Alex", "Bo"], min_tagged_lines=3)

        assert result.enforced_lines == ["Bo are late", "Bo's car broke", "Bo went to the store", "Plain line here"]
        assert result.was_modified is True
        assert result.tag_coverage == pytest.approx(75.0)
        assert result.enforcement_log[0] == "Initial tag coverage: 0/3 lines"
        assert result.enforcement_log[-1] == "Final tag coverage: 3/3 lines"
        # Input untouched
        assert lines[0] == "you are late"

    def test_sufficient_coverage(self):
        lines = ["Alex runs", "Alex sits", "Alex naps"]
        result = enforce_hard_tags_post_generation(lines, ["Alex"])
        assert result.was_modified is False
        assert result.enforced_lines == lines
        assert result.tag_coverage == pytest.approx(100.0)

    def test_no_hard_tags(self):
        result = enforce_hard_tags_post_generation(["a", "b"], [])
        assert result.was_modified is False
        assert result.tag_coverage == 100.0
        assert result.enforcement_log == ["No hard tags to enforce"]

    def test_empty_lines(self):
        result = enforce_hard_tags_post_generation([], ["Alex"])
        assert result.enforced_lines == []
        assert result.was_modified is False
        assert result.tag_coverage == 0.0

    def test_none_lines(self):
        result = enforce_hard_tags_post_generation(None, ["Alex"])
        assert result.enforced_lines == []
        assert result.was_modified is False

    def test_none_entries_treated_as_empty(self):
        result = enforce_hard_tags_post_generation([None, "you win"], ["Alex"], min_tagged_lines=2)
        assert result.enforced_lines == ["Alex ", "Alex win"]

    def test_backslash_tag_does_not_raise(self):
        result = enforce_hard_tags_post_generation(["you trip on air"], [r"\o/"], min_tagged_lines=1)
        assert result.enforced_lines == [r"\o/ trip on air"]

    def test_unplaceable_line_reported_as_unmodified(self):
        result = enforce_hard_tags_post_generation(["x" * 120], ["Alex"], min_tagged_lines=1)
        assert result.was_modified is False
        assert result.enforced_lines == ["x" * 120]


class TestEnsureHardTagsInFallback:
    def test_no_tags_returns_input(self):
        lines = ["a", "b"]
        assert ensure_hard_tags_in_fallback(lines, []) is lines

    def test_none_lines(self):
        assert ensure_hard_tags_in_fallback(None, []) == []
        assert ensure_hard_tags_in_fallback(None, ["Alex"]) == []

    def test_injects_into_fallback(self):
        lines = ["went home", "ate lunch", "said hi", "slept"]
        result = ensure_hard_tags_in_fallback(lines, ["Alex"])
        assert result == ["Alex went home", "Alex ate lunch", "Alex said hi", "slept"]


class TestStripSoftEcho:
    def test_replaces_with_synonym_or_fallback(self):
        lines = ["I am so angry", "Traffic jam again"]
        result = strip_soft_echo(lines, ["angry", "traffic", "jam"])
        assert result == ["I am so heated", "gridlock that again"]

    def test_whole_words_only(self):
        assert strip_soft_echo(["Slate is late"], ["late"]) == ["Slate is behind schedule"]

    def test_no_soft_tags_returns_input(self):
        lines = ["keep me"]
        assert strip_soft_echo(lines, []) is lines
        assert strip_soft_echo(lines, None) is lines

    def test_none_lines(self):
        assert strip_soft_echo(None, ["late"]) == []

    def test_none_entries_treated_as_empty(self):
        assert strip_soft_echo([None, "late again"], ["late"]) == ["", "behind schedule again"]
