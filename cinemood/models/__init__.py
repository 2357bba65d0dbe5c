"""
Models module for Cinemood analytics.

Handles text mood classification.
"""

from .mood_classifier import MoodClassifier, TextAnalyzer

__all__ = [
    'MoodClassifier',
    'TextAnalyzer',
]
