"""
Data module for Cinemood analytics.

Media, preference and mood records shared across the recommendation components.
"""

from .moods import Mood, MoodProfile, MOOD_PROFILES
from .schemas import (
    MediaItem,
    MoodAnalysis,
    PreferenceProfile,
    RatingEntry,
    RatingStyle,
    RatingVector,
    TextAnalysis,
    as_rating_vector,
)

__all__ = [
    'Mood',
    'MoodProfile',
    'MOOD_PROFILES',
    'MediaItem',
    'MoodAnalysis',
    'PreferenceProfile',
    'RatingEntry',
    'RatingStyle',
    'RatingVector',
    'TextAnalysis',
    'as_rating_vector',
]
