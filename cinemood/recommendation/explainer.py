"""
Human readable explanations for recommended items.
"""
from typing import Any, List, Mapping, Optional
import logging

from ..config.settings import RecommendationConfig
from ..data.schemas import MediaItem, PreferenceProfile, RatingVector
from .schemas import Explanation, ExplanationFactor, RecommendationExplanation

POPULARITY_MIN_RATINGS = 10
DEFAULT_EXPLANATION = "Based on your interests"


class RecommendationExplainer:
    """Explains recommendations from genre, era, similar-user and popularity signals."""

    def __init__(self, config: Optional[RecommendationConfig] = None):
        self.config = config or RecommendationConfig()
        self.logger = logging.getLogger(__name__)

    def explain_recommendation(self, item: MediaItem,
                               preferences: Optional[PreferenceProfile] = None,
                               similar_users: Optional[Mapping[Any, RatingVector]] = None
                               ) -> RecommendationExplanation:
        """Collect the reasons an item fits the user.

        Args:
            item: The recommended item
            preferences: The user's preference profile (optional)
            similar_users: Rating vectors of similar users keyed by user id (optional)

        Returns:
            Explanation whose primary reason prefers content, then
            collaborative, then popularity factors
        """
        details: List[Explanation] = []

        content = self.explain_content_factors(item, preferences)
        if content:
            details.append(Explanation(type='content', factors=content))

        collaborative = self.explain_collaborative_factors(item, similar_users)
        if collaborative:
            details.append(Explanation(type='collaborative', factors=collaborative))

        popularity = self.explain_popularity(item)
        if popularity is not None:
            details.append(Explanation(type='popularity', factors=[popularity]))

        return RecommendationExplanation(
            primary=self.select_primary_explanation(details),
            details=details,
        )

    def explain_content_factors(self, item: MediaItem,
                                preferences: Optional[PreferenceProfile]) -> List[ExplanationFactor]:
        factors = []
        if preferences is None:
            return factors

        if item.genre and preferences.genres:
            matching = [g for g in item.genres() if preferences.genres.get(g.lower())]
            if matching:
                factors.append(ExplanationFactor(
                    type='genre',
                    description=f"Similar to genres you enjoy: {', '.join(matching)}"
                ))

        decade = item.decade()
        if decade is not None and preferences.eras and preferences.eras.get(f"{decade}s"):
            factors.append(ExplanationFactor(
                type='era',
                description=f"From the {decade}s, a period you enjoy"
            ))

        return factors

    def explain_collaborative_factors(self, item: MediaItem,
                                      similar_users: Optional[Mapping[Any, RatingVector]]
                                      ) -> List[ExplanationFactor]:
        if not similar_users:
            return []
        rating_users = [
            user_id for user_id, ratings in similar_users.items()
            if any(entry.media_id == item.id for entry in ratings)
        ]
        if not rating_users:
            return []
        return [ExplanationFactor(
            type='similar_users',
            description=f"Enjoyed by {len(rating_users)} users with similar taste"
        )]

    def explain_popularity(self, item: MediaItem) -> Optional[ExplanationFactor]:
        """Popularity counts only once more than ten users have rated the item."""
        if item.rating is None or item.rating_count is None:
            return None
        if item.rating_count <= POPULARITY_MIN_RATINGS:
            return None
        return ExplanationFactor(
            type='popularity',
            description=(
                f"Rated {item.rating:.1f}/{self.config.rating_scale:g} "
                f"by {item.rating_count} users"
            )
        )

    @staticmethod
    def select_primary_explanation(details: List[Explanation]) -> str:
        for kind in ('content', 'collaborative', 'popularity'):
            for explanation in details:
                if explanation.type == kind and explanation.factors:
                    return explanation.factors[0].description
        return DEFAULT_EXPLANATION
