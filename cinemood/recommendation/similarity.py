"""
Similarity calculation module for Cinemood analytics.
"""
import math
import numpy as np
from typing import Any, List, Mapping, Optional
import logging

from ..config.settings import RecommendationConfig
from ..data.schemas import RatingVector
from .schemas import SimilarUser


class SimilarityCalculator:
    """Calculates similarity scores between sparse rating vectors."""

    def __init__(self, config: Optional[RecommendationConfig] = None):
        self.config = config or RecommendationConfig()
        self.logger = logging.getLogger(__name__)

    def cosine_similarity(self, a: RatingVector, b: RatingVector) -> float:
        """Calculate cosine similarity between two rating vectors.

        The dot product only covers media ids rated in both vectors, while
        each norm is taken over the full vector.

        Args:
            a: First rating vector
            b: Second rating vector

        Returns:
            Similarity score, or 0.0 when either vector has zero norm
        """
        norm_a = float(np.linalg.norm(np.array([entry.value for entry in a], dtype=float)))
        norm_b = float(np.linalg.norm(np.array([entry.value for entry in b], dtype=float)))
        if norm_a == 0 or norm_b == 0:
            return 0.0

        a_lookup = {entry.media_id: float(entry.value) for entry in a}
        b_lookup = {entry.media_id: float(entry.value) for entry in b}
        shared = [media_id for media_id in a_lookup if media_id in b_lookup]
        if not shared:
            return 0.0

        products = np.array([a_lookup[m] for m in shared]) * np.array([b_lookup[m] for m in shared])
        # fsum is exactly rounded, so the result does not depend on argument order
        dot_product = math.fsum(products.tolist())

        return dot_product / (norm_a * norm_b)

    def find_similar_users(self, user_ratings: RatingVector,
                           other_users: Mapping[Any, RatingVector],
                           limit: Optional[int] = None) -> List[SimilarUser]:
        """Rank other users by cosine similarity to ``user_ratings``.

        Args:
            user_ratings: The target user's rating vector
            other_users: Mapping of user id to rating vector
            limit: Maximum number of users returned, defaults to the
                configured ``similar_users_limit``

        Returns:
            SimilarUser entries sorted by similarity (descending)
        """
        if limit is None:
            limit = self.config.similar_users_limit
        if limit <= 0:
            raise ValueError("Limit must be positive")
        ranked = [
            SimilarUser(user_id=user_id, similarity=self.cosine_similarity(user_ratings, ratings))
            for user_id, ratings in other_users.items()
        ]
        ranked.sort(key=lambda x: x.similarity, reverse=True)
        self.logger.debug(f"Ranked {len(ranked)} users by rating similarity")
        return ranked[:limit]
