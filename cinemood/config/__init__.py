"""
Configuration module for Cinemood analytics.
"""

from .settings import (
    AppConfig,
    ConfigManager,
    ConfigValidationError,
    ExperimentConfig,
    LoggingConfig,
    MoodConfig,
    RecommendationConfig,
)

__all__ = [
    'AppConfig',
    'ConfigManager',
    'ConfigValidationError',
    'ExperimentConfig',
    'LoggingConfig',
    'MoodConfig',
    'RecommendationConfig',
]
