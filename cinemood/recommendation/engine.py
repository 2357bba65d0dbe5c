"""
Recommendation engine for Cinemood analytics.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence
import logging
from ..config.settings import RecommendationConfig
from ..data.schemas import MediaItem, PreferenceProfile
from ..models.mood_classifier import MoodClassifier
from .content_filter import ContentFilter
from .features import extract_features
from .schemas import CollaborativeCandidate, MoodRecommendation, ScoredItem, SimilarUser


class RecommendationEngine:
    """Combines content, collaborative and mood signals into ranked recommendations."""

    def __init__(self, mood_classifier: Optional[MoodClassifier] = None,
                 content_filter: Optional[ContentFilter] = None,
                 config: Optional[RecommendationConfig] = None):
        """Initialize the recommendation engine.

        Args:
            mood_classifier: Classifier used by recommend_for_mood (optional)
            content_filter: Mood/preference filter (optional)
            config: Ranking weights and limits (optional)
        """
        self.config = config or RecommendationConfig()
        self.mood_classifier = mood_classifier
        self.content_filter = content_filter or ContentFilter(self.config)
        self.logger = logging.getLogger(__name__)

    def _resolve_limit(self, limit: Optional[int]) -> int:
        """An explicit limit of 0 yields no results; None means the configured default."""
        if limit is None:
            return self.config.default_limit
        if limit < 0:
            raise ValueError("Limit cannot be negative")
        return limit

    def calculate_content_score(self, item: MediaItem, user_profile: Dict[str, float],
                                avg_rating: Optional[float] = None) -> float:
        """Sum the profile weights of the item's features, scaled by its average rating."""
        score = sum(user_profile.get(feature, 0) for feature in extract_features(item))
        return score * (avg_rating or 1)

    def rank_by_content(self, candidates: Sequence[MediaItem], user_profile: Dict[str, float],
                        limit: Optional[int] = None) -> List[ScoredItem]:
        """Rank candidates by content score, using each item's rating as its average rating."""
        limit = self._resolve_limit(limit)
        scored = [
            ScoredItem(item=item, score=self.calculate_content_score(item, user_profile, item.rating))
            for item in candidates
        ]
        scored.sort(key=lambda x: x.score, reverse=True)
        return scored[:limit]

    def recommend_from_similar_users(self, similar_users: Sequence[SimilarUser],
                                     candidates: Iterable[CollaborativeCandidate],
                                     exclude: Iterable[Any] = (),
                                     limit: Optional[int] = None) -> List[ScoredItem]:
        """Score items rated by similar users as ``rating * similarity``.

        Args:
            similar_users: Output of SimilarityCalculator.find_similar_users
            candidates: Items rated by other users
            exclude: Media ids the target user already has
            limit: Maximum number of results

        Returns:
            Scored items, highest first
        """
        limit = self._resolve_limit(limit)
        similarity_by_user = {u.user_id: u.similarity for u in similar_users}
        excluded = set(exclude)
        scored = [
            ScoredItem(item=c.item, score=c.rating * similarity_by_user[c.user_id])
            for c in candidates
            if c.user_id in similarity_by_user and c.item.id not in excluded
        ]
        scored.sort(key=lambda x: x.score, reverse=True)
        return scored[:limit]

    def hybrid_merge(self, content_based: Sequence[ScoredItem],
                     collaborative: Sequence[ScoredItem],
                     limit: Optional[int] = None) -> List[ScoredItem]:
        """Blend content and collaborative scores per media id.

        Items present in both lists get the sum of their weighted scores.
        """
        limit = self._resolve_limit(limit)
        merged: Dict[Any, ScoredItem] = {}
        for entry in content_based:
            merged[entry.id] = ScoredItem(item=entry.item, score=entry.score * self.config.content_weight)
        for entry in collaborative:
            weighted = entry.score * self.config.collaborative_weight
            if entry.id in merged:
                merged[entry.id].score += weighted
            else:
                merged[entry.id] = ScoredItem(item=entry.item, score=weighted)
        ranked = sorted(merged.values(), key=lambda x: x.score, reverse=True)
        return ranked[:limit]

    def recommend_for_mood(self, text: str, items: Sequence[MediaItem],
                           preferences: Optional[PreferenceProfile] = None,
                           limit: Optional[int] = None) -> MoodRecommendation:
        """Detect the mood of ``text`` and return the candidates that match it.

        When preferences are given the matches are ranked by preference score,
        otherwise they keep their input order with a score of 0.

        Raises:
            RuntimeError: If the engine was built without a mood classifier
        """
        if self.mood_classifier is None:
            raise RuntimeError("Mood recommendations require a MoodClassifier")
        limit = self._resolve_limit(limit)

        mood = self.mood_classifier.analyze_mood(text)
        matches = self.content_filter.filter_by_mood(items, mood.mood)
        if preferences is not None:
            ranked = self.content_filter.apply_user_preferences(matches, preferences)
        else:
            ranked = [ScoredItem(item=item, score=0.0) for item in matches]

        if not ranked:
            self.logger.info(f"No candidates match mood {mood.mood.value}")
        return MoodRecommendation(
            mood=mood,
            recommendations=ranked[:limit],
            total_candidates=len(matches)
        )
