"""
Mood vocabulary shared by the mood classifier and the content filter.

Each mood carries three static tables: the text patterns used to detect it in
free text, and the genres and description keywords used to match media to it.
"""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Tuple, Union


@dataclass(frozen=True)
class MoodProfile:
    text_patterns: Tuple[str, ...]
    genres: FrozenSet[str]
    keywords: Tuple[str, ...]


class Mood(str, Enum):
    """Discrete mood labels, in tie-break order."""
    HAPPY = "happy"
    RELAXED = "relaxed"
    ADVENTUROUS = "adventurous"
    ROMANTIC = "romantic"
    THOUGHTFUL = "thoughtful"
    NOSTALGIC = "nostalgic"

    @property
    def profile(self) -> MoodProfile:
        return MOOD_PROFILES[self]

    @classmethod
    def parse(cls, value: Union['Mood', str, None]) -> 'Mood':
        """Resolve a mood label, falling back to HAPPY for anything unrecognised.

        Labels are matched exactly, so "Romantic" or " romantic" resolve to HAPPY.
        """
        if isinstance(value, Mood):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.HAPPY


MOOD_PROFILES = {
    Mood.HAPPY: MoodProfile(
        text_patterns=('happy', 'joy', 'excited', 'fun', 'cheerful'),
        genres=frozenset({'Comedy', 'Animation', 'Family'}),
        keywords=('fun', 'uplifting', 'heartwarming'),
    ),
    Mood.RELAXED: MoodProfile(
        text_patterns=('calm', 'peaceful', 'gentle', 'soothing'),
        genres=frozenset({'Documentary', 'Nature', 'Slice of Life'}),
        keywords=('peaceful', 'gentle', 'calm'),
    ),
    Mood.ADVENTUROUS: MoodProfile(
        text_patterns=('adventure', 'action', 'thrill', 'exciting'),
        genres=frozenset({'Action', 'Adventure', 'Sci-Fi'}),
        keywords=('exciting', 'thrilling', 'epic'),
    ),
    Mood.ROMANTIC: MoodProfile(
        text_patterns=('love', 'romance', 'sweet', 'emotional'),
        genres=frozenset({'Romance', 'Drama'}),
        keywords=('love', 'relationship', 'emotional'),
    ),
    Mood.THOUGHTFUL: MoodProfile(
        text_patterns=('deep', 'meaningful', 'philosophical', 'thought-provoking'),
        genres=frozenset({'Drama', 'Documentary', 'Mystery'}),
        keywords=('deep', 'meaningful', 'thought-provoking'),
    ),
    Mood.NOSTALGIC: MoodProfile(
        text_patterns=('classic', 'nostalgic', 'memory', 'reminisce'),
        genres=frozenset({'Classic', 'Period Drama', 'Historical'}),
        keywords=('classic', 'timeless', 'memorable'),
    ),
}

if set(MOOD_PROFILES) != set(Mood):
    raise RuntimeError("Every Mood member needs a MoodProfile")
