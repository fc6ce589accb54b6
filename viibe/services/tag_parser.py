# viibe/services/tag_parser.py
"""
Tag parsing: split raw user tags and classify them as hard or soft.

Hard tags ("Reid" or @Reid) must appear verbatim in generated captions.
Soft tags (strong, awkward) only steer tone and may be paraphrased.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

# Curly quotes are folded to ASCII before classification
_CURLY_DOUBLE = re.compile("[“”]")
_CURLY_SINGLE = re.compile("[‘’]")

HARD_TAG_PATTERN = re.compile(r'^".+"$|^@.+')
_LEADING_AT = re.compile(r"^@+")
_WRAPPING_QUOTES = re.compile(r"^[\"']+|[\"']+$")


@dataclass(frozen=True)
class Tag:
    """A single parsed tag. text has @ and wrapping quotes removed."""

    text: str
    hard: bool


@dataclass
class TagArrays:
    """Tags partitioned by kind, in original order."""

    hard: list[str] = field(default_factory=list)
    soft: list[str] = field(default_factory=list)


@dataclass
class TagUsage:
    """Which required tags a generated text contains."""

    valid: bool
    found_tags: list[str] = field(default_factory=list)
    missing_tags: list[str] = field(default_factory=list)


def sanitize_input(text: str | None) -> str:
    """Replace curly quotes with their ASCII equivalents."""
    if not text:
        return ""
    return _CURLY_SINGLE.sub("'", _CURLY_DOUBLE.sub('"', text))


def _classify(token: str) -> Tag:
    normalized = sanitize_input(token)
    hard = bool(HARD_TAG_PATTERN.match(normalized))
    text = normalized
    # "@Reid" style nesting: strip until neither marker remains
    while True:
        stripped = _WRAPPING_QUOTES.sub("", _LEADING_AT.sub("", text))
        if stripped == text:
            break
        text = stripped
    return Tag(text=text, hard=hard)


def parse_tags(raw: str | None) -> list[Tag]:
    """
    Split a comma-separated tag string into classified tags.

    Empty tokens, and tokens that are nothing but markers ("" or @), are
    dropped; duplicates are kept.

    >>> parse_tags('"Reid", strong')
    [Tag(text='Reid', hard=True), Tag(text='strong', hard=False)]
    """
    if not raw:
        return []
    tags = (_classify(t.strip()) for t in raw.split(","))
    return [tag for tag in tags if tag.text]


def get_tag_arrays(raw: str | None) -> TagArrays:
    """Partition parsed tags into hard and soft lists."""
    parsed = parse_tags(raw)
    return TagArrays(
        hard=[t.text for t in parsed if t.hard],
        soft=[t.text for t in parsed if not t.hard],
    )


def _dedupe(items: Iterable[Any]) -> list[str]:
    return list(dict.fromkeys(str(x).strip() for x in items if x is not None and str(x).strip()))


def _as_list(value: Any) -> list:
    """Wrap a lone scalar so structured input always yields a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def normalize_tags(raw: Any) -> TagArrays:
    """
    Coerce any supported tag input into hard/soft arrays.

    Accepts a comma-separated string, a list of raw tokens, or an already
    structured mapping with "hard" and "soft" lists. Order is preserved and
    repeats are removed. Unsupported input yields empty arrays.
    """
    if not raw:
        return TagArrays()

    if isinstance(raw, str):
        parsed = parse_tags(raw)
        return TagArrays(
            hard=_dedupe(t.text for t in parsed if t.hard),
            soft=_dedupe(t.text for t in parsed if not t.hard),
        )

    if isinstance(raw, (list, tuple)):
        parsed = [_classify(str(x).strip()) for x in raw if x is not None]
        return TagArrays(
            hard=_dedupe(t.text for t in parsed if t.hard),
            soft=_dedupe(t.text for t in parsed if not t.hard),
        )

    if isinstance(raw, Mapping):
        return TagArrays(hard=_dedupe(_as_list(raw.get("hard"))), soft=_dedupe(_as_list(raw.get("soft"))))

    return TagArrays()


def validate_tag_usage(text: str | None, required_tags: list[str]) -> TagUsage:
    """Check a generated text for required tags (case-insensitive substring)."""
    if not required_tags:
        return TagUsage(valid=True)

    lower_text = (text or "").lower()
    found = [tag for tag in required_tags if tag.lower() in lower_text]
    missing = [tag for tag in required_tags if tag.lower() not in lower_text]

    return TagUsage(valid=len(found) > 0, found_tags=found, missing_tags=missing)
