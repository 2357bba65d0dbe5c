"""
Experiment registration and sticky variant assignment.
"""
import random
from typing import Any, Dict, List, Optional, Sequence

from ..config.settings import ExperimentConfig
from ..utils.logging import StructuredLogger, get_logger
from .errors import ExperimentNotFound, InvalidExperiment
from .schemas import Experiment
from .stores import AssignmentStore, EventSink, InMemoryAssignmentStore


class ExperimentManager:
    """
    Registry of experiments and the variant each user is assigned to.

    Assignments live in the injected AssignmentStore. With the default
    in-memory store they are sticky only within the current process, so
    several server instances may assign the same user differently unless a
    shared store is supplied.
    """

    def __init__(self, assignment_store: Optional[AssignmentStore] = None,
                 event_sink: Optional[EventSink] = None,
                 rng: Optional[random.Random] = None,
                 config: Optional[ExperimentConfig] = None,
                 logger: Optional[StructuredLogger] = None):
        """
        Args:
            assignment_store: Where assignments are kept (in-memory by default)
            event_sink: Receiver for tracked events (events are only logged when omitted)
            rng: Random source for assignment; pass a seeded Random for reproducible draws
            config: Experiment settings
            logger: Structured logger (one is created when omitted)
        """
        self.assignment_store = assignment_store if assignment_store is not None else InMemoryAssignmentStore()
        self.event_sink = event_sink
        self.rng = rng or random.Random()
        self.config = config or ExperimentConfig()
        self.logger = logger or get_logger(__name__)
        self._experiments: Dict[str, Experiment] = {}

    def register_experiment(self, name: str, variants: Sequence[str],
                            weights: Optional[Sequence[float]] = None) -> Experiment:
        """
        Register an experiment. Weights default to a uniform split.

        Weights that do not sum to 1 are accepted with a warning; assignment
        then falls back to the last variant for draws past the cumulative total.

        Raises:
            InvalidExperiment: If the name is taken, variants is empty, or the
                weights do not line up with the variants
        """
        if name in self._experiments:
            raise InvalidExperiment(f"Experiment {name} is already registered")
        variants = tuple(variants)
        if not variants:
            raise InvalidExperiment(f"Experiment {name} must define at least one variant")
        if weights is None:
            weights = tuple(1 / len(variants) for _ in variants)
        else:
            weights = tuple(float(w) for w in weights)
        if len(weights) != len(variants):
            raise InvalidExperiment(
                f"Experiment {name} has {len(variants)} variants but {len(weights)} weights"
            )
        if any(w < 0 or w > 1 for w in weights):
            raise InvalidExperiment(f"Experiment {name} weights must each be within [0, 1]")

        experiment = Experiment(name=name, variants=variants, weights=weights)
        if abs(experiment.total_weight - 1) > self.config.weight_tolerance:
            self.logger.warning(
                "Experiment weights do not sum to 1; the last variant absorbs the remainder",
                experiment=name,
                total_weight=experiment.total_weight
            )
        self._experiments[name] = experiment
        self.logger.info(
            "Registered experiment",
            experiment=name,
            variants=list(variants),
            weights=list(weights)
        )
        return experiment

    def get_experiment(self, name: str) -> Experiment:
        """
        Raises:
            ExperimentNotFound: If no experiment with that name is registered
        """
        experiment = self._experiments.get(name)
        if experiment is None:
            raise ExperimentNotFound(name)
        return experiment

    def list_experiments(self) -> List[Experiment]:
        return list(self._experiments.values())

    @staticmethod
    def select_variant(variants: Sequence[str], weights: Sequence[float], r: float) -> str:
        """Return the first variant whose cumulative weight exceeds ``r``, else the last one."""
        cumulative = 0.0
        for variant, weight in zip(variants, weights):
            cumulative += weight
            if r < cumulative:
                return variant
        return variants[-1]

    def assign_user_to_variant(self, user_id: Any, experiment_name: str,
                               rng: Optional[random.Random] = None) -> str:
        """
        Return the user's variant, drawing and storing one on first request.

        Args:
            user_id: User identifier
            experiment_name: Registered experiment name
            rng: Random source for this draw, overriding the manager's

        Raises:
            ExperimentNotFound: If the experiment is not registered
        """
        existing = self.assignment_store.get(user_id, experiment_name)
        if existing is not None:
            return existing

        experiment = self.get_experiment(experiment_name)
        r = (rng or self.rng).random()
        variant = self.select_variant(experiment.variants, experiment.weights, r)
        self.assignment_store.put(user_id, experiment_name, variant)
        self.logger.debug(
            "Assigned user to variant",
            experiment=experiment_name,
            user_id=user_id,
            variant=variant
        )
        return variant

    def track_event(self, user_id: Any, experiment_name: str, event_name: str,
                    value: float = 1) -> str:
        """
        Forward an experiment event to the event sink.

        Sink failures are logged and never raised, so tracking cannot break
        the caller or disturb assignments.

        Returns:
            The variant the event was attributed to

        Raises:
            ExperimentNotFound: If the experiment is not registered
        """
        self.get_experiment(experiment_name)
        variant = self.assign_user_to_variant(user_id, experiment_name)

        if self.event_sink is None:
            self.logger.info(
                "Tracked event",
                experiment=experiment_name,
                user_id=user_id,
                variant=variant,
                event_name=event_name,
                value=value
            )
            return variant

        try:
            self.event_sink.record_event(user_id, experiment_name, variant, event_name, value)
        except Exception as e:
            self.logger.error(
                "Failed to record experiment event",
                exc_info=True,
                experiment=experiment_name,
                user_id=user_id,
                event_name=event_name,
                error_type=type(e).__name__
            )
        return variant
