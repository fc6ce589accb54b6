# viibe/rules.py
"""
Viibe tag safety rule tables (v1)

Plain data consumed by the tag sanitizer and the hard-tag enforcer. Control
flow never inspects individual entries, so rules can be added here, or in a
JSON rule file (see load_rule_file), without touching the services.

Tables:
    PROBLEMATIC_TAG_MAPPINGS - phrase -> ranked safe alternatives (first = preferred)
    PROBLEMATIC_PATTERNS     - ordered regex rules; first match wins
    GENERIC_ALTERNATIVES     - alternatives offered for any pattern match
    INSERTION_ANCHOR_PATTERNS - where missing hard tags get injected
    SOFT_ECHO_SYNONYMS       - replacements for soft tags echoed verbatim
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Data Classes
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class PatternRule:
    """
    A regex rule flagging a class of unsafe phrasing.

    Attributes:
        rule_id: Stable identifier (e.g., "hate_speech")
        label: Human-friendly name used in logs
        pattern: Regex source, matched case-insensitively
    """

    rule_id: str
    label: str
    pattern: str


@dataclass(frozen=True)
class RuleFile:
    """Extra rules loaded from a JSON file."""

    mappings: dict[str, list[str]]
    patterns: list[PatternRule]


# -----------------------------------------------------------------------------
# Phrase mappings
# -----------------------------------------------------------------------------

PROBLEMATIC_TAG_MAPPINGS: dict[str, list[str]] = {
    # Gender stereotypes
    "punches like a girl": ["weak punches", "sloppy swing", "awkward jabs", "tentative strikes"],
    "throws like a girl": ["awkward throws", "weak throws", "clumsy tosses", "poor form"],
    "runs like a girl": ["awkward running", "clumsy sprint", "poor form", "unsteady pace"],
    "fights like a girl": ["weak fighting", "poor technique", "awkward combat", "tentative strikes"],
    # Offensive group labels
    "dumb blonde": ["airhead", "ditzy", "absent-minded", "scatterbrained"],
    "crazy woman": ["dramatic person", "over-reactive", "emotional", "intense personality"],
    "lazy black": ["unmotivated", "sluggish", "inactive", "low energy"],
    "cheap jew": ["frugal", "penny-pinching", "cost-conscious", "budget-minded"],
    # Self-harm
    "kill yourself": ["give up", "quit trying", "stop bothering", "move on"],
    "want to die": ["exhausted", "overwhelmed", "fed up", "at wit's end"],
    "suicide": ["giving up", "quitting", "surrendering", "throwing in towel"],
    # Sexual labels
    "sluts": ["party people", "social butterflies", "outgoing types", "free spirits"],
    "whores": ["expensive tastes", "high maintenance", "demanding", "picky"],
    # Class and ethnic stereotypes
    "ghetto": ["low-budget", "cheap", "rough around edges", "unrefined"],
    "redneck": ["rural", "country", "down-to-earth", "simple"],
    "trailer trash": ["low-class", "rough", "unrefined", "basic"],
}


# -----------------------------------------------------------------------------
# Pattern rules (ordered)
# -----------------------------------------------------------------------------

PROBLEMATIC_PATTERNS: list[PatternRule] = [
    PatternRule(
        rule_id="hate_speech",
        label="Hate speech against a group",
        pattern=r"\b(hate|kill|murder|destroy)\s+(all\s+)?(women|men|blacks|whites|jews|muslims|christians|gays|trans)\b",
    ),
    PatternRule(
        rule_id="self_harm",
        label="Self-harm imperative",
        pattern=r"\b(kill|hurt|harm)\s+(myself|yourself|themselves)\b",
    ),
    PatternRule(
        rule_id="extreme_violence",
        label="Extreme violence",
        pattern=r"\b(torture|mutilate|dismember|decapitate)\b",
    ),
    PatternRule(
        rule_id="sexual_violence",
        label="Sexual violence",
        pattern=r"\b(rape|sexual assault|molest)\b",
    ),
    PatternRule(
        rule_id="drug_use",
        label="Drug use",
        pattern=r"\b(meth|heroin|cocaine|crack)\s+(addict|user|dealer)\b",
    ),
]

GENERIC_ALTERNATIVES: list[str] = ["inappropriate content", "safe alternative", "family-friendly option"]

GENERIC_REASON = "Contains language that may violate content safety policies"


def phrase_reason(phrase: str) -> str:
    """Reason string for a phrase-table match."""
    return f'"{phrase}" may violate content policies due to stereotypes or offensive language'


# -----------------------------------------------------------------------------
# Hard-tag injection anchors (ordered: verbs, conjunctions, prepositions)
# -----------------------------------------------------------------------------

INSERTION_ANCHOR_PATTERNS: list[str] = [
    r"\b(?:is|are|was|were|has|have|does|do|gets|got|makes|made)\b",
    r"\b(?:and|but|while|when|if|because|since)\b",
    r"\b(?:with|for|by|at|on|in)\b",
]

# Natural break points for post-generation injection, in preference order
INJECTION_BREAK_POINTS: list[str] = [", ", " but ", " and ", " so ", " then "]

# Lines opening with one of these read well with a name in front
ACTION_VERBS: list[str] = ["went", "came", "said", "ate", "drank", "bought", "did", "does"]


# -----------------------------------------------------------------------------
# Soft-tag echo synonyms
# -----------------------------------------------------------------------------

SOFT_ECHO_SYNONYMS: dict[str, str] = {
    "angry": "heated",
    "traffic": "gridlock",
    "late": "behind schedule",
    "gets": "becomes",
    "so": "really",
    "very": "super",
    "really": "totally",
}

SOFT_ECHO_FALLBACK = "that"


# -----------------------------------------------------------------------------
# Rule files
# -----------------------------------------------------------------------------


def load_rule_file(path: str | Path) -> RuleFile:
    """
    Load extra sanitizer rules from a JSON file.

    Format:
        {
          "mappings": {"phrase": ["alt 1", "alt 2", ...]},
          "patterns": [{"rule_id": "...", "label": "...", "pattern": "..."}]
        }

    Malformed individual entries are logged and skipped. An unreadable file
    or invalid JSON raises, since a configured rule file must load.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Rule file {path} must contain a JSON object")

    mappings: dict[str, list[str]] = {}
    for phrase, alternatives in (data.get("mappings") or {}).items():
        if not isinstance(alternatives, list) or not all(isinstance(a, str) for a in alternatives):
            logger.warning(f"Skipping mapping '{phrase}' in {path}: alternatives must be a list of strings")
            continue
        mappings[phrase.lower().strip()] = alternatives

    patterns: list[PatternRule] = []
    for raw in data.get("patterns") or []:
        try:
            patterns.append(PatternRule(rule_id=raw["rule_id"], label=raw.get("label", raw["rule_id"]), pattern=raw["pattern"]))
        except (KeyError, TypeError) as e:
            logger.warning(f"Skipping pattern entry in {path}: {e}")

    logger.info(f"Loaded rule file {path}: {len(mappings)} mappings, {len(patterns)} patterns")
    return RuleFile(mappings=mappings, patterns=patterns)
