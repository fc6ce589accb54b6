# viibe/constants.py
"""
Centralized magic constants organized by domain.

Numbers the tag pipeline depends on are defined here with a note on what
they control. Values that operators may tune live in config.py instead.
"""


class TagLimits:
    """Limits applied while enforcing hard tags on generated lines."""

    MAX_HARD_TAGS = 3                   # Only the first N hard tags are enforced
    MAX_INJECTIONS_PER_LINE = 2         # Missing tags inserted per line, at most
    REQUIRED_TAGGED_LINES = 3           # Lines that must carry hard tags
    MIN_HITS_PER_LINE = 2               # Hard tags a line needs to count as tagged


class InjectionLimits:
    """Character thresholds for natural tag injection."""

    MIN_TAIL_CHARS = 10                 # Text after a break point must exceed this
    PREPEND_MAX_CHARS = 90              # Prefix tag only on lines shorter than this
    APPEND_MAX_CHARS = 100              # Append "with <tag>." only below this


class HistoryDefaults:
    """Duplicate-history defaults."""

    STORAGE_KEY = "comedian_history"
    MAX_ENTRIES = 200                   # Oldest entries evicted past this
    SIMILARITY_THRESHOLD = 0.85         # Strictly greater counts as duplicate


class CacheConfig:
    """Cache TTL and size constants."""

    VALIDATE_TTL_SECONDS = 300          # As-you-type validation responses
    VALIDATE_MAX_ENTRIES = 1000
