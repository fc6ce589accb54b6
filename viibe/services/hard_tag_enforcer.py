# viibe/services/hard_tag_enforcer.py
"""
Hard-tag enforcement for generated caption lines.

Generation can drop hard tags (names, quoted phrases), especially on
fallback paths. Two best-effort strategies put them back:

- ensure_hard_tags: if too few lines carry at least two hard tags, every
  line gets its missing tags inserted after the first verb, conjunction or
  preposition anchor. A tag with no anchor is skipped for that line.
- enforce_hard_tags_post_generation: tops up only as many untagged lines as
  needed to reach the minimum, placing one tag per line where it reads
  naturally, and reports what it did.

Neither raises, and both always return one output line per input line.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from viibe.constants import InjectionLimits, TagLimits
from viibe.rules import (
    ACTION_VERBS,
    INJECTION_BREAK_POINTS,
    INSERTION_ANCHOR_PATTERNS,
    SOFT_ECHO_FALLBACK,
    SOFT_ECHO_SYNONYMS,
)

logger = logging.getLogger(__name__)

_ANCHORS = [re.compile(p, re.IGNORECASE) for p in INSERTION_ANCHOR_PATTERNS]

_YOU = re.compile(r"\byou\b", re.IGNORECASE)
_YOUR = re.compile(r"\byour\b", re.IGNORECASE)
_STARTS_WITH_ACTION = re.compile(rf"^(?:{'|'.join(ACTION_VERBS)})", re.IGNORECASE)
_TRAILING_PERIOD = re.compile(r"\.$")


@dataclass
class TagEnforcementResult:
    """
    Outcome of post-generation enforcement.

    Attributes:
        enforced_lines: Lines after injection (same length as input)
        was_modified: True if any line changed
        tag_coverage: Percentage of lines containing at least one hard tag
        enforcement_log: Human-readable trace of the decisions taken
    """

    enforced_lines: list[str]
    was_modified: bool
    tag_coverage: float
    enforcement_log: list[str] = field(default_factory=list)


def _contains(line: str, tag: str) -> bool:
    return tag.lower() in line.lower()


def _capped(hard: Optional[list[str]]) -> list[str]:
    # Cap first, then drop repeats within the cap
    return list(dict.fromkeys(t for t in (hard or [])[: TagLimits.MAX_HARD_TAGS] if t))


# -----------------------------------------------------------------------------
# Anchor-based enforcement
# -----------------------------------------------------------------------------


def count_hits(line: str, hard_tags: list[str]) -> int:
    """Number of hard tags present in line (case-insensitive)."""
    return sum(1 for tag in hard_tags if _contains(line, tag))


def inject_missing_tags(line: str, hard_tags: list[str]) -> str:
    """
    Insert up to two missing hard tags after the first matching anchor.

    Anchors are tried in order (verbs, conjunctions, prepositions) against
    the line as modified so far. A tag with no anchor is skipped.
    """
    missing = [tag for tag in hard_tags if not _contains(line, tag)]
    if not missing:
        return line

    modified = line
    for tag in missing[: TagLimits.MAX_INJECTIONS_PER_LINE]:
        for anchor in _ANCHORS:
            match = anchor.search(modified)
            if match:
                pos = match.end()
                modified = f"{modified[:pos]} {tag}{modified[pos:]}"
                break
        else:
            logger.debug(f"No insertion anchor for tag {tag!r}", extra={"event": "tag_skipped", "tag": tag})

    return modified


def ensure_hard_tags(
    lines: Optional[list[str]],
    hard: Optional[list[str]],
    required: int = TagLimits.REQUIRED_TAGGED_LINES,
) -> list[str]:
    """
    Make sure hard tags are well represented across generated lines.

    Args:
        lines: Generated caption lines
        hard: Hard tags; only the first three are enforced
        required: Lines that must contain at least two hard tags

    Returns:
        lines itself when already satisfied, otherwise a new list with
        missing tags injected into every line
    """
    if lines is None:
        return []

    need = _capped(hard)
    tagged = sum(1 for line in lines if count_hits(line or "", need) >= TagLimits.MIN_HITS_PER_LINE)
    if tagged >= required:
        return lines

    enforced = [inject_missing_tags(line or "", need) for line in lines]
    changed = sum(1 for before, after in zip(lines, enforced) if before != after)
    logger.info(
        f"Hard tags injected into {changed}/{len(lines)} lines",
        extra={"event": "hard_tags_injected", "lines": changed},
    )
    return enforced


# -----------------------------------------------------------------------------
# Post-generation enforcement (fallback path)
# -----------------------------------------------------------------------------


def _has_any_tag(line: str, hard_tags: list[str]) -> bool:
    return any(_contains(line, tag) for tag in hard_tags)


def count_tag_coverage(lines: list[str], hard_tags: list[str]) -> int:
    """Number of lines containing at least one hard tag."""
    return sum(1 for line in lines if _has_any_tag(line, hard_tags))


def find_lines_needing_tags(lines: list[str], hard_tags: list[str], min_tagged_lines: int) -> list[int]:
    """Indices of the first untagged lines needed to reach min_tagged_lines."""
    untagged = [i for i, line in enumerate(lines) if not _has_any_tag(line, hard_tags)]
    need = max(0, min_tagged_lines - (len(lines) - len(untagged)))
    return untagged[:need]


def select_best_tag_for_line(line: str, hard_tags: list[str]) -> Optional[str]:
    """Pick the shortest hard tag; short names fit into any line."""
    ordered = sorted(hard_tags, key=len)
    return ordered[0] if ordered else None


def inject_tag_naturally(line: str, tag: str) -> str:
    """
    Place tag where it reads most naturally.

    Strategies in order: replace "you", replace "your" with a possessive,
    prefix an action-verb opener, splice after a break point, prefix a short
    line, append to a medium line. Long lines are returned unchanged.
    """
    if _YOU.search(line):
        # Callable replacement: tags are literal text, never templates
        return _YOU.sub(lambda _: tag, line, count=1)

    if _YOUR.search(line):
        return _YOUR.sub(lambda _: f"{tag}'s", line, count=1)

    if _STARTS_WITH_ACTION.match(line):
        return f"{tag} {line.lower()}"

    for break_point in INJECTION_BREAK_POINTS:
        if break_point in line:
            head, tail = line.split(break_point, 1)
            # Length is judged on the clause right after the break
            if len(tail.split(break_point, 1)[0]) > InjectionLimits.MIN_TAIL_CHARS:
                return f"{head}{break_point}{tag} {tail.lower()}"

    if len(line) < InjectionLimits.PREPEND_MAX_CHARS:
        return f"{tag} {line.lower()}"

    if len(line) < InjectionLimits.APPEND_MAX_CHARS:
        return f"{_TRAILING_PERIOD.sub('', line)} with {tag}."

    return line


def enforce_hard_tags_post_generation(
    lines: Optional[list[str]],
    hard_tags: Optional[list[str]],
    min_tagged_lines: int = TagLimits.REQUIRED_TAGGED_LINES,
) -> TagEnforcementResult:
    """Top up hard-tag coverage to min_tagged_lines, one tag per line."""
    lines = [line or "" for line in (lines or [])]
    hard_tags = [t for t in (hard_tags or []) if t]
    if not hard_tags:
        return TagEnforcementResult(
            enforced_lines=list(lines),
            was_modified=False,
            tag_coverage=100.0,
            enforcement_log=["No hard tags to enforce"],
        )

    def coverage_pct(count: int) -> float:
        return (count / len(lines)) * 100 if lines else 0.0

    initial = count_tag_coverage(lines, hard_tags)
    if initial >= min_tagged_lines:
        return TagEnforcementResult(
            enforced_lines=list(lines),
            was_modified=False,
            tag_coverage=coverage_pct(initial),
            enforcement_log=[f"Sufficient tag coverage: {initial}/{min_tagged_lines}"],
        )

    log = [f"Initial tag coverage: {initial}/{min_tagged_lines} lines"]
    modified = list(lines)
    targets = find_lines_needing_tags(modified, hard_tags, min_tagged_lines)
    log.append(f"Found {len(targets)} lines needing tag injection")

    for index in targets:
        if count_tag_coverage(modified, hard_tags) >= min_tagged_lines:
            break
        tag = select_best_tag_for_line(modified[index], hard_tags)
        if not tag:
            continue
        injected = inject_tag_naturally(modified[index], tag)
        if injected != modified[index]:
            log.append(f'Injected "{tag}" into line {index + 1}')
            modified[index] = injected

    final = count_tag_coverage(modified, hard_tags)
    log.append(f"Final tag coverage: {final}/{min_tagged_lines} lines")

    was_modified = modified != list(lines)
    if was_modified:
        logger.info(
            f"Post-generation enforcement raised coverage {initial} -> {final}",
            extra={"event": "hard_tags_enforced", "lines": final},
        )

    return TagEnforcementResult(
        enforced_lines=modified,
        was_modified=was_modified,
        tag_coverage=coverage_pct(final),
        enforcement_log=log,
    )


def ensure_hard_tags_in_fallback(fallback_lines: Optional[list[str]], hard_tags: Optional[list[str]]) -> list[str]:
    """Enforcement for fallback lines, which must still carry hard tags."""
    if not hard_tags:
        return fallback_lines or []
    return enforce_hard_tags_post_generation(fallback_lines, hard_tags, TagLimits.REQUIRED_TAGGED_LINES).enforced_lines


# -----------------------------------------------------------------------------
# Soft-tag echo stripping
# -----------------------------------------------------------------------------


def strip_soft_echo(lines: Optional[list[str]], soft: Optional[list[str]]) -> list[str]:
    """Swap verbatim soft-tag echoes for a synonym (or "that")."""
    if lines is None:
        return []

    soft = [s for s in (soft or []) if s]
    if not soft:
        return lines

    pattern = re.compile(rf"\b({'|'.join(re.escape(s) for s in soft)})\b", re.IGNORECASE)

    def replace(match: re.Match) -> str:
        return SOFT_ECHO_SYNONYMS.get(match.group(0).lower(), SOFT_ECHO_FALLBACK)

    return [pattern.sub(replace, line or "") for line in lines]
