"""
Recommendation schemas for the Cinemood analytics system.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List
from ..data.schemas import MediaItem, MoodAnalysis


@dataclass
class ScoredItem:
    """A media item with the ranking score attached to it."""
    item: MediaItem
    score: float

    @property
    def id(self) -> Any:
        return self.item.id


@dataclass
class SimilarUser:
    """Another user and how closely their ratings align with the target user."""
    user_id: Any
    similarity: float


@dataclass
class CollaborativeCandidate:
    """An item rated by a similar user."""
    item: MediaItem
    rating: float
    user_id: Any


@dataclass
class MoodRecommendation:
    """Mood detected in the user's text and the items matching it."""
    mood: MoodAnalysis
    recommendations: List[ScoredItem] = field(default_factory=list)
    total_candidates: int = 0

    def __post_init__(self):
        if self.total_candidates < 0:
            raise ValueError("Total candidates cannot be negative")
        if len(self.recommendations) > self.total_candidates:
            raise ValueError("Number of recommendations cannot exceed total candidates")


INTERACTION_KINDS = ('rating', 'wishlist')


@dataclass
class Interaction:
    """A rating or wishlist entry used to learn a user's preferences."""
    item: MediaItem
    value: float = 1.0
    kind: str = 'rating'

    def __post_init__(self):
        if self.kind not in INTERACTION_KINDS:
            raise ValueError(f"Interaction kind must be one of {INTERACTION_KINDS}, got {self.kind!r}")


@dataclass
class LearnedPreference:
    """Average interaction value for a genre or era, with a confidence weight in [0, 1]."""
    value: float
    weight: float
    count: int


@dataclass
class ExplanationFactor:
    type: str
    description: str


@dataclass
class Explanation:
    """A group of factors of one kind: content, collaborative or popularity."""
    type: str
    factors: List[ExplanationFactor] = field(default_factory=list)


@dataclass
class RecommendationExplanation:
    """Why an item was recommended, with the most relevant reason first."""
    primary: str
    details: List[Explanation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
