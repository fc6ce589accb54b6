# viibe/services/tag_sanitizer.py
"""
Tag Sanitizer: rule-table screening of user tags before generation.

Tags are checked against a phrase table first, then an ordered list of
regex patterns. A flagged tag comes back as a TagSuggestion with ranked
safe alternatives; a safe tag comes back as None. Nothing here blocks or
rewrites on its own: the caller decides whether to accept an alternative,
keep the original, or cancel.

Key features:
- First match wins: phrase table, then patterns, in table order
- Pattern caching: regexes compile once per sanitizer instance
- Extensible: extra mappings/patterns append after the built-in rules
"""

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, Optional

from viibe.rules import (
    GENERIC_ALTERNATIVES,
    GENERIC_REASON,
    PROBLEMATIC_PATTERNS,
    PROBLEMATIC_TAG_MAPPINGS,
    PatternRule,
    load_rule_file,
    phrase_reason,
)
from viibe.services.tag_parser import TagArrays, parse_tags

logger = logging.getLogger(__name__)

RULE_TYPE_PHRASE = "phrase"
RULE_TYPE_PATTERN = "pattern"


@dataclass
class TagSuggestion:
    """
    A flagged tag with safer alternatives.

    Attributes:
        original_tag: The tag exactly as supplied
        suggested_alternatives: Ranked alternatives, first is preferred
        reason: Why the tag was flagged
        matched_rule: The phrase or pattern rule_id that fired
        rule_type: "phrase" or "pattern"
    """

    original_tag: str
    suggested_alternatives: list[str]
    reason: str
    matched_rule: str = ""
    rule_type: str = RULE_TYPE_PHRASE


@dataclass
class SanitizeResult:
    """Exact partition of a tag list into safe tags and suggestions."""

    safe_tags: list[str] = field(default_factory=list)
    suggestions: list[TagSuggestion] = field(default_factory=list)

    @property
    def has_suggestions(self) -> bool:
        return len(self.suggestions) > 0


@dataclass
class RawTagScreening:
    """Parsed raw tags after screening: safe tags keep their hard/soft split."""

    safe: TagArrays
    suggestions: list[TagSuggestion] = field(default_factory=list)


@dataclass
class TagValidation:
    """Result of as-you-type validation of a single tag field."""

    is_valid: bool
    warning: Optional[str] = None
    suggestions: Optional[list[str]] = None


class TagSanitizer:
    """
    Screens tags against the phrase table and pattern rules.

    Built-in rules always come first; extra rules passed to the constructor
    are appended after them.
    """

    def __init__(
        self,
        extra_mappings: Optional[dict[str, list[str]]] = None,
        extra_patterns: Optional[Iterable[PatternRule]] = None,
    ):
        self._mappings: dict[str, list[str]] = {p.lower(): list(a) for p, a in PROBLEMATIC_TAG_MAPPINGS.items()}
        for phrase, alternatives in (extra_mappings or {}).items():
            self._mappings.setdefault(phrase.lower().strip(), list(alternatives))

        self._compiled_patterns: list[tuple[re.Pattern, PatternRule]] = []
        self._compile_patterns([*PROBLEMATIC_PATTERNS, *(extra_patterns or [])])

    def _compile_patterns(self, rules: Iterable[PatternRule]) -> None:
        """Compile pattern rules, skipping any that are not valid regexes."""
        for rule in rules:
            try:
                self._compiled_patterns.append((re.compile(rule.pattern, re.IGNORECASE), rule))
            except re.error as e:
                logger.warning(f"Invalid pattern for {rule.rule_id}: {rule.pattern} - {e}")

    def sanitize_tag(self, tag: Optional[str]) -> Optional[TagSuggestion]:
        """
        Screen a single tag.

        Returns:
            TagSuggestion if the tag matched a rule, None if it is safe
        """
        if not tag:
            return None

        normalized = tag.lower().strip()
        if not normalized:
            return None

        for phrase, alternatives in self._mappings.items():
            if phrase in normalized:
                logger.info(
                    f"Tag flagged by phrase rule: {phrase!r}",
                    extra={"event": "tag_flagged", "rule": phrase},
                )
                return TagSuggestion(
                    original_tag=tag,
                    suggested_alternatives=list(alternatives),
                    reason=phrase_reason(phrase),
                    matched_rule=phrase,
                    rule_type=RULE_TYPE_PHRASE,
                )

        for compiled, rule in self._compiled_patterns:
            if compiled.search(normalized):
                logger.info(
                    f"Tag flagged by pattern rule: {rule.label}",
                    extra={"event": "tag_flagged", "rule": rule.rule_id},
                )
                return TagSuggestion(
                    original_tag=tag,
                    suggested_alternatives=list(GENERIC_ALTERNATIVES),
                    reason=GENERIC_REASON,
                    matched_rule=rule.rule_id,
                    rule_type=RULE_TYPE_PATTERN,
                )

        return None

    def sanitize_tag_list(self, tags: Optional[Iterable[Optional[str]]]) -> SanitizeResult:
        """Split tags into safe tags and suggestions, preserving input order."""
        result = SanitizeResult()
        for tag in tags or []:
            if tag is None:
                continue
            suggestion = self.sanitize_tag(tag)
            if suggestion:
                result.suggestions.append(suggestion)
            else:
                result.safe_tags.append(tag)
        return result

    def sanitize_raw_tags(self, raw: Optional[str]) -> RawTagScreening:
        """Parse a raw tag string and screen each tag's text."""
        screening = RawTagScreening(safe=TagArrays())
        for tag in parse_tags(raw):
            suggestion = self.sanitize_tag(tag.text)
            if suggestion:
                screening.suggestions.append(suggestion)
            elif tag.hard:
                screening.safe.hard.append(tag.text)
            else:
                screening.safe.soft.append(tag.text)
        return screening

    def validate_tag_input(self, text: Optional[str]) -> TagValidation:
        """Validation shape for interactive tag fields."""
        suggestion = self.sanitize_tag(text)
        if suggestion:
            return TagValidation(
                is_valid=False,
                warning=suggestion.reason,
                suggestions=suggestion.suggested_alternatives,
            )
        return TagValidation(is_valid=True)

    @property
    def mapping_count(self) -> int:
        return len(self._mappings)

    @property
    def pattern_count(self) -> int:
        return len(self._compiled_patterns)


@lru_cache(maxsize=1)
def get_tag_sanitizer() -> TagSanitizer:
    """Get or create the process-wide sanitizer, including RULES_FILE rules if configured."""
    from viibe.config import get_settings

    rules_file = get_settings().RULES_FILE
    if not rules_file:
        return TagSanitizer()

    extra = load_rule_file(rules_file)
    return TagSanitizer(extra_mappings=extra.mappings, extra_patterns=extra.patterns)


# Module-level shortcuts over the shared sanitizer


def sanitize_tag(tag: Optional[str]) -> Optional[TagSuggestion]:
    return get_tag_sanitizer().sanitize_tag(tag)


def sanitize_tag_list(tags: Optional[Iterable[Optional[str]]]) -> SanitizeResult:
    return get_tag_sanitizer().sanitize_tag_list(tags)


def validate_tag_input(text: Optional[str]) -> TagValidation:
    return get_tag_sanitizer().validate_tag_input(text)
