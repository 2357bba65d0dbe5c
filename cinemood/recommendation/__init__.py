"""
Recommendation module for Cinemood analytics.

This module provides feature extraction, rating similarity, mood filtering,
preference scoring and learning, hybrid ranking and explanations.
"""

from .content_filter import ContentFilter
from .engine import RecommendationEngine
from .explainer import RecommendationExplainer
from .features import build_user_profile, extract_features
from .preferences import analyze_interactions, learn_preferences
from .similarity import SimilarityCalculator
from .schemas import (
    CollaborativeCandidate,
    Explanation,
    ExplanationFactor,
    Interaction,
    LearnedPreference,
    MoodRecommendation,
    RecommendationExplanation,
    ScoredItem,
    SimilarUser,
)

__all__ = [
    'ContentFilter',
    'RecommendationEngine',
    'RecommendationExplainer',
    'SimilarityCalculator',
    'analyze_interactions',
    'build_user_profile',
    'extract_features',
    'learn_preferences',
    'CollaborativeCandidate',
    'Explanation',
    'ExplanationFactor',
    'Interaction',
    'LearnedPreference',
    'MoodRecommendation',
    'RecommendationExplanation',
    'ScoredItem',
    'SimilarUser',
]
