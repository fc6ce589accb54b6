# viibe/services/comedian_styles.py
"""
Comedian voice banks and length buckets for caption options.

Each generated option is paired with a comedian voice and a target length.
Assignment is a pure index lookup: the same option number always gets the
same voice and bucket.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ComedianStyle:
    """A comedian voice with its delivery pattern and preferred line length."""

    key: str
    name: str
    length_range: tuple[int, int]  # inclusive (min, max) characters
    delivery_pattern: str
    examples: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class StylePattern:
    structure: str
    max_length: int
    pattern: str


@dataclass(frozen=True)
class ComedianAssignment:
    comedian: ComedianStyle
    length_bucket: tuple[int, int]


# Fixed order: assignment rotates through this list
COMEDIAN_STYLES: list[ComedianStyle] = [
    # Short, aggressive roasts
    ComedianStyle(
        key="billBurr",
        name="Bill Burr",
        length_range=(40, 70),
        delivery_pattern="Confrontational roast with working-class edge",
        examples=(
            "This guy throws like he's mad at the ball",
            "She drives like the GPS personally offended her",
        ),
    ),
    # High-energy panic reactions
    ComedianStyle(
        key="kevinHart",
        name="Kevin Hart",
        length_range=(50, 85),
        delivery_pattern="Animated panic with self-deprecating energy",
        examples=(
            "Zero points first, then celebrates like he just won the championship",
            "Last time I saw moves that bad, the Titanic was still floating",
        ),
    ),
    # Absurd imagery comparisons
    ComedianStyle(
        key="aliWong",
        name="Ali Wong",
        length_range=(55, 90),
        delivery_pattern="Brutal honest observations with vivid imagery",
        examples=(
            "Watching him cook is like watching a toddler perform surgery",
            "Her dance moves look like a drunk flamingo having an existential crisis",
        ),
    ),
    # Deadpan one-liners
    ComedianStyle(
        key="mitchHedberg",
        name="Mitch Hedberg",
        length_range=(35, 75),
        delivery_pattern="Surreal one-liners with unexpected twists",
        examples=(
            "I used to hate mornings. I still do, but I used to too",
            "His cooking is so bad, the smoke alarm cheers him on",
        ),
    ),
    # Sharp, brutal precision
    ComedianStyle(
        key="anthonyJeselnik",
        name="Anthony Jeselnik",
        length_range=(30, 65),
        delivery_pattern="Dark deadpan with shocking twists",
        examples=(
            "His jokes are like his hairline. Slowly disappearing",
            "She texts back so slow, archaeologists find her messages",
        ),
    ),
    # Storytelling with narrative beats
    ComedianStyle(
        key="johnMulaney",
        name="John Mulaney",
        length_range=(60, 100),
        delivery_pattern="Precise storytelling with childlike wonder",
        examples=(
            "Last weekend he tried to parallel park for so long, seasons changed",
            "His cooking skills are like a magic trick where the food just disappears",
        ),
    ),
]

LENGTH_BUCKETS: list[tuple[int, int]] = [
    (40, 60),   # Short punchy
    (61, 80),   # Medium build
    (81, 100),  # Longer setup-payoff
]

STYLE_PATTERNS: dict[str, StylePattern] = {
    "roast": StylePattern(
        structure="Direct insult with specific comparison",
        max_length=70,
        pattern="[Subject] [action] like [vivid comparison]",
    ),
    "absurd": StylePattern(
        structure="Weird comparison with unexpected imagery",
        max_length=90,
        pattern="[Action description] is like [absurd animal/object comparison]",
    ),
    "punchlineFirst": StylePattern(
        structure="Gag first, then setup reveal",
        max_length=85,
        pattern="[Punchline result] first, then [setup explanation]",
    ),
    "shortStory": StylePattern(
        structure="Tiny scene with flip ending",
        max_length=100,
        pattern="[Time marker] [subject] [action], then [unexpected consequence]",
    ),
}

_STYLE_ALIASES = {
    "punchline-first": "punchlineFirst",
    "short-story": "shortStory",
}


def get_comedian(key: str) -> Optional[ComedianStyle]:
    return next((c for c in COMEDIAN_STYLES if c.key == key), None)


def get_style_pattern(style: str) -> Optional[StylePattern]:
    """Look up a delivery pattern by name; kebab-case aliases are accepted."""
    return STYLE_PATTERNS.get(_STYLE_ALIASES.get(style, style))


def assign_comedian_to_option(option_number: int) -> ComedianAssignment:
    """
    Pair an option with a comedian and a length bucket.

    The bucket rotates independently of the comedian and is then narrowed
    to the comedian's own range.
    """
    comedian = COMEDIAN_STYLES[option_number % len(COMEDIAN_STYLES)]
    bucket = LENGTH_BUCKETS[option_number % len(LENGTH_BUCKETS)]

    final_bucket = (
        max(bucket[0], comedian.length_range[0]),
        min(bucket[1], comedian.length_range[1]),
    )
    return ComedianAssignment(comedian=comedian, length_bucket=final_bucket)
