"""
Mood and preference based filtering of media candidates.
"""
import logging
from typing import List, Optional, Sequence, Union

from ..config.settings import RecommendationConfig
from ..data.moods import Mood
from ..data.schemas import MediaItem, PreferenceProfile
from .schemas import ScoredItem


class ContentFilter:
    """Filters candidates by mood and ranks them against a user's preferences."""

    def __init__(self, config: Optional[RecommendationConfig] = None):
        self.config = config or RecommendationConfig()
        self.logger = logging.getLogger(__name__)

    def matches_mood(self, item: MediaItem, mood: Mood) -> bool:
        """True if any genre is mapped to the mood or the description mentions a mood keyword."""
        profile = mood.profile
        if any(genre in profile.genres for genre in item.genres()):
            return True
        description = (item.description or '').lower()
        return any(keyword in description for keyword in profile.keywords)

    def filter_by_mood(self, items: Sequence[MediaItem], mood: Union[Mood, str]) -> List[MediaItem]:
        """Keep items that fit the mood; unknown mood labels are treated as happy.

        Args:
            items: Candidate media items
            mood: Mood enum member or label

        Returns:
            Matching items in their original order
        """
        resolved = Mood.parse(mood)
        if not isinstance(mood, Mood) and resolved.value != mood:
            self.logger.debug(f"Unknown mood {mood!r}, using {resolved.value}")
        filtered = [item for item in items if self.matches_mood(item, resolved)]
        self.logger.debug(f"Mood filter {resolved.value}: {len(items)} -> {len(filtered)} candidates")
        return filtered

    def apply_user_preferences(self, items: Sequence[MediaItem],
                               preferences: PreferenceProfile) -> List[ScoredItem]:
        """Score every item against the preferences and sort by score, highest first.

        The sort is stable, so equally scored items keep their input order.
        """
        scored = [
            ScoredItem(item=item, score=self.calculate_preference_score(item, preferences))
            for item in items
        ]
        scored.sort(key=lambda x: x.score, reverse=True)
        return scored

    def calculate_preference_score(self, item: MediaItem, preferences: PreferenceProfile) -> float:
        """Weighted sum of genre, era and rating affinity.

        Each term is skipped when either side lacks the data for it; skipped
        terms are not renormalized away, so an item with no usable data scores 0.
        """
        score = 0.0

        if item.genre and preferences.genres:
            genres = item.genres()
            genre_score = sum(
                preferences.genres.get(genre.lower(), 0) for genre in genres
            ) / len(genres)
            score += genre_score * self.config.genre_weight

        decade = item.decade()
        if decade is not None and preferences.eras:
            era_score = preferences.eras.get(f"{decade}s", 0)
            score += era_score * self.config.era_weight

        style = preferences.rating_style
        if item.rating and style is not None and style.average is not None:
            rating_gap = abs(item.rating - style.average)
            score += (1 - rating_gap / self.config.rating_scale) * self.config.rating_weight

        return score
