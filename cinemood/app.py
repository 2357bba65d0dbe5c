"""
Application wiring for Cinemood analytics.

Loads the configuration once and builds every component with the configured
settings, event names and loggers.
"""
import logging
from typing import Optional

from .config.settings import AppConfig, ConfigManager
from .experiments.manager import ExperimentManager
from .experiments.metrics import ExperimentMetrics
from .experiments.stores import PandasEventStore
from .models.mood_classifier import MoodClassifier, TextAnalyzer
from .recommendation.content_filter import ContentFilter
from .recommendation.engine import RecommendationEngine
from .recommendation.explainer import RecommendationExplainer
from .recommendation.similarity import SimilarityCalculator
from .utils.logging import StructuredLogger, get_logger


class CinemoodApp:
    """Owns the loaded configuration and the components built from it."""

    def __init__(self, config_path: Optional[str] = None,
                 text_analyzer: Optional[TextAnalyzer] = None):
        """
        Args:
            config_path: YAML configuration file; the packaged defaults are used when omitted
            text_analyzer: Sentiment/token provider; mood recommendations are
                unavailable without one
        """
        self.config_manager = ConfigManager()
        self.config_path = config_path
        self.text_analyzer = text_analyzer
        self.config: Optional[AppConfig] = None
        self.logger: Optional[StructuredLogger] = None
        self.event_store: Optional[PandasEventStore] = None
        self.experiment_manager: Optional[ExperimentManager] = None
        self.experiment_metrics: Optional[ExperimentMetrics] = None
        self.similarity_calculator: Optional[SimilarityCalculator] = None
        self.recommendation_engine: Optional[RecommendationEngine] = None
        self.explainer: Optional[RecommendationExplainer] = None

    def create_logger(self, name: str) -> StructuredLogger:
        """Create a structured logger using the configured level and format."""
        return get_logger(name, self.config.logging.level, self.config.logging.format)

    def initialize(self) -> 'CinemoodApp':
        """Load configuration and build the components. Calling it again is a no-op.

        Raises:
            ConfigValidationError: If the configuration is invalid
            FileNotFoundError: If the configuration file doesn't exist
        """
        if self.config is not None:
            return self

        self.config = self.config_manager.load(self.config_path)
        # module loggers under the package follow the configured level too
        logging.getLogger("cinemood").setLevel(self.config.logging.level.upper())
        self.logger = self.create_logger("cinemood.app")
        self.logger.log_config(self.config.to_dict())

        experiments = self.config.experiments
        self.event_store = PandasEventStore.from_config(experiments)
        self.experiment_manager = ExperimentManager(
            assignment_store=self.event_store,
            event_sink=self.event_store,
            config=experiments,
            logger=self.create_logger("cinemood.experiments.manager"),
        )
        self.experiment_metrics = ExperimentMetrics(
            self.event_store,
            config=experiments,
            logger=self.create_logger("cinemood.experiments.metrics"),
        )

        recommendation = self.config.recommendation
        mood_classifier = None
        if self.text_analyzer is not None:
            mood_classifier = MoodClassifier(self.text_analyzer, self.config.mood)
        self.similarity_calculator = SimilarityCalculator(recommendation)
        self.recommendation_engine = RecommendationEngine(
            mood_classifier=mood_classifier,
            content_filter=ContentFilter(recommendation),
            config=recommendation,
        )
        self.explainer = RecommendationExplainer(recommendation)

        self.logger.info(
            "Cinemood initialized",
            mood_recommendations=mood_classifier is not None,
        )
        return self
