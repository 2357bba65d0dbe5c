"""
Data schemas for the Cinemood analytics system.

This module contains dataclasses that define the media, preference and
text-analysis records passed between the mood, filtering and similarity
components.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List, Sequence, Union, Tuple

from .moods import Mood


@dataclass(frozen=True)
class MediaItem:
    """A candidate movie or show as supplied by the catalogue layer."""
    id: Any
    title: Optional[str] = None
    year: Optional[Union[int, str]] = None
    genre: Optional[Union[str, List[str]]] = None
    description: Optional[str] = None
    rating: Optional[float] = None
    poster: Optional[str] = None
    rating_count: Optional[int] = None

    def genres(self) -> List[str]:
        """Genres as a trimmed list, whether stored as a list or a comma-separated string."""
        if not self.genre:
            return []
        if isinstance(self.genre, str):
            return [g.strip() for g in self.genre.split(',')]
        return [str(g).strip() for g in self.genre]

    def decade(self) -> Optional[int]:
        """Start year of the item's decade, e.g. 1994 -> 1990."""
        if not self.year:
            return None
        return (int(self.year) // 10) * 10

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MediaItem':
        """
        Create a MediaItem from a service-layer dictionary.

        Accepts both ``media_id``/``mediaId`` and ``id`` as identifier keys.

        Raises:
            KeyError: If no identifier key is present
        """
        for id_key in ('id', 'media_id', 'mediaId'):
            if id_key in data:
                item_id = data[id_key]
                break
        else:
            raise KeyError("Media item requires one of: id, media_id, mediaId")
        return cls(
            id=item_id,
            title=data.get('title'),
            year=data.get('year'),
            genre=data.get('genre', data.get('genres')),
            description=data.get('description'),
            rating=data.get('rating'),
            poster=data.get('poster'),
            rating_count=data.get('rating_count', data.get('ratingCount')),
        )


@dataclass(frozen=True)
class RatingStyle:
    """How a user tends to rate; only the average is used for scoring."""
    average: float


@dataclass
class PreferenceProfile:
    """Caller supplied user preferences used for preference scoring."""
    genres: Optional[Dict[str, float]] = None
    eras: Optional[Dict[str, float]] = None
    rating_style: Optional[RatingStyle] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PreferenceProfile':
        style = data.get('rating_style', data.get('ratingStyle'))
        if isinstance(style, dict):
            style = RatingStyle(average=float(style['average'])) if 'average' in style else None
        return cls(
            genres=data.get('genres'),
            eras=data.get('eras'),
            rating_style=style,
        )


@dataclass(frozen=True)
class RatingEntry:
    """One (media id, value) component of a rating vector."""
    media_id: Any
    value: float


RatingVector = Sequence[RatingEntry]


def as_rating_vector(pairs: Sequence[Tuple[Any, float]]) -> List[RatingEntry]:
    """Build a rating vector from ``(media_id, value)`` pairs."""
    return [RatingEntry(media_id=media_id, value=float(value)) for media_id, value in pairs]


@dataclass
class TextAnalysis:
    """Output of the external text analyzer."""
    sentiment: float
    tokens: List[str] = field(default_factory=list)


@dataclass
class MoodAnalysis:
    """Mood inferred from free text"""
    sentiment: float
    mood: Mood
    intensity: float

    def __post_init__(self):
        if not (0.0 <= self.intensity <= 1.0):
            raise ValueError("Intensity must be between 0.0 and 1.0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sentiment': self.sentiment,
            'mood': self.mood.value,
            'intensity': self.intensity,
        }
