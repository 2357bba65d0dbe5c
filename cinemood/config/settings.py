"""
Configuration management for Cinemood analytics.

Provides centralized configuration loading, validation, and environment variable overrides.
"""

import os
import yaml
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, List, Optional
from pathlib import Path

DEFAULT_CONFIG_PATH = Path(__file__).with_name("default_config.yaml")


@dataclass
class ExperimentConfig:
    """Configuration for experiment assignment and significance testing."""
    significance_level: float = 0.05
    conversion_event: str = "conversion"
    time_spent_event: str = "time_spent"
    interactions_event: str = "interactions"
    weight_tolerance: float = 1e-6
    max_reliable_degrees_of_freedom: int = 10


@dataclass
class MoodConfig:
    """Configuration for the text mood classifier."""
    intensifier_step: float = 0.2
    intensifiers: List[str] = field(default_factory=lambda: [
        "very", "extremely", "really", "totally", "absolutely"
    ])


@dataclass
class RecommendationConfig:
    """Configuration for preference scoring and hybrid ranking."""
    genre_weight: float = 0.4
    era_weight: float = 0.3
    rating_weight: float = 0.3
    rating_scale: float = 5.0
    content_weight: float = 0.6
    collaborative_weight: float = 0.4
    default_limit: int = 10
    similar_users_limit: int = 5


@dataclass
class LoggingConfig:
    """Configuration for logging parameters."""
    level: str = "INFO"
    format: str = "json"


@dataclass
class AppConfig:
    """Main application configuration containing all sub-configurations."""
    experiments: ExperimentConfig = field(default_factory=ExperimentConfig)
    mood: MoodConfig = field(default_factory=MoodConfig)
    recommendation: RecommendationConfig = field(default_factory=RecommendationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


# environment variable -> (section, key, type)
ENV_MAPPINGS = {
    'CINEMOOD_LOG_LEVEL': ('logging', 'level', str),
    'CINEMOOD_LOG_FORMAT': ('logging', 'format', str),
    'CINEMOOD_SIGNIFICANCE_LEVEL': ('experiments', 'significance_level', float),
    'CINEMOOD_CONVERSION_EVENT': ('experiments', 'conversion_event', str),
    'CINEMOOD_DEFAULT_LIMIT': ('recommendation', 'default_limit', int),
    'CINEMOOD_INTENSIFIER_STEP': ('mood', 'intensifier_step', float),
}


class ConfigManager:
    """Manages application configuration loading, validation, and environment overrides."""

    def __init__(self):
        self._config: Optional[AppConfig] = None

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._config

    def load(self, config_path: Optional[str] = None) -> AppConfig:
        """
        Load configuration from YAML file with environment variable overrides.

        Args:
            config_path: Path to the YAML configuration file; the packaged
                default configuration is used when omitted

        Returns:
            AppConfig: Loaded and validated configuration

        Raises:
            ConfigValidationError: If configuration is invalid
            FileNotFoundError: If config file doesn't exist
        """
        config_file = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ConfigValidationError(f"Configuration root must be a mapping: {config_file}")

        config_data = self._apply_env_overrides(config_data)
        config = self.from_dict(config_data)
        self.validate(config)

        self._config = config
        return config

    def from_dict(self, config_data: Dict[str, Any]) -> AppConfig:
        """Create AppConfig from dictionary data, falling back to dataclass defaults."""
        sections = {
            'experiments': ExperimentConfig,
            'mood': MoodConfig,
            'recommendation': RecommendationConfig,
            'logging': LoggingConfig,
        }
        built = {}
        for section, section_cls in sections.items():
            section_data = config_data.get(section) or {}
            known = set(section_cls.__dataclass_fields__)
            unknown = set(section_data) - known
            if unknown:
                raise ConfigValidationError(
                    f"Unknown keys in '{section}' section: {sorted(unknown)}"
                )
            built[section] = section_cls(**section_data)
        return AppConfig(**built)

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration data."""
        for env_var, (section, key, cast) in ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue
            try:
                value = cast(env_value)
            except ValueError as e:
                raise ConfigValidationError(f"Invalid value for {env_var}: {env_value!r}") from e
            config_data.setdefault(section, {})
            if config_data[section] is None:
                config_data[section] = {}
            config_data[section][key] = value
        return config_data

    def validate(self, config: AppConfig) -> bool:
        """
        Validate configuration values.

        Raises:
            ConfigValidationError: If validation fails
        """
        errors = []

        experiments = config.experiments
        if not (0.0 < experiments.significance_level < 1.0):
            errors.append("Experiments significance_level must be between 0.0 and 1.0")
        if not experiments.conversion_event:
            errors.append("Experiments conversion_event cannot be empty")
        if experiments.weight_tolerance < 0:
            errors.append("Experiments weight_tolerance cannot be negative")
        if experiments.max_reliable_degrees_of_freedom <= 0:
            errors.append("Experiments max_reliable_degrees_of_freedom must be positive")

        if config.mood.intensifier_step < 0:
            errors.append("Mood intensifier_step cannot be negative")
        if not config.mood.intensifiers:
            errors.append("Mood intensifiers cannot be empty")

        rec = config.recommendation
        for name in ('genre_weight', 'era_weight', 'rating_weight',
                     'content_weight', 'collaborative_weight'):
            if getattr(rec, name) < 0:
                errors.append(f"Recommendation {name} cannot be negative")
        if rec.rating_scale <= 0:
            errors.append("Recommendation rating_scale must be positive")
        if rec.default_limit <= 0:
            errors.append("Recommendation default_limit must be positive")
        if rec.similar_users_limit <= 0:
            errors.append("Recommendation similar_users_limit must be positive")

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if config.logging.level.upper() not in valid_log_levels:
            errors.append(f"Logging level must be one of: {valid_log_levels}")
        if config.logging.format not in ['json', 'text']:
            errors.append("Logging format must be 'json' or 'text'")

        if errors:
            raise ConfigValidationError(f"Configuration validation failed: {'; '.join(errors)}")

        return True

    def get(self, key: str) -> Any:
        """
        Get a configuration value by dotted key (e.g. 'experiments.significance_level').

        Raises:
            KeyError: If the key does not exist
        """
        current: Any = self.config
        for k in key.split('.'):
            if hasattr(current, k):
                current = getattr(current, k)
            else:
                raise KeyError(f"Configuration key not found: {key}")
        return current
