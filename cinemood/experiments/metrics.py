"""
Conversion, engagement and significance metrics for experiments.

The significance test compares unique users per variant against their mean
with a chi-square statistic and converts it to a p-value through the
closed-form Erlang CDF ``1 - e^(-x/2) * sum_{i<k} (x/2)^i / i!``. That form is
exact only for even degrees of freedom; here it is applied to
``k = variants - 1`` directly, so p-values are approximate and degrade for
small or large k. Results carry a ``reliable`` flag for that reason.
"""
import asyncio
import math
from typing import Dict, List, Optional, Sequence

from ..config.settings import ExperimentConfig
from ..utils.logging import StructuredLogger, get_logger
from .schemas import EngagementMetrics, SignificanceResult, VariantMetrics
from .stores import EventStore


class ExperimentMetrics:
    """Aggregates experiment outcomes read from an EventStore."""

    def __init__(self, store: EventStore, config: Optional[ExperimentConfig] = None,
                 logger: Optional[StructuredLogger] = None):
        self.store = store
        self.config = config or ExperimentConfig()
        self.logger = logger or get_logger(__name__)

    async def calculate_conversion_rate(self, experiment_name: str, variant: str) -> float:
        """Share of the variant's users with a conversion event; 0.0 when it has no users."""
        total_users, converted_users = await self.store.count_assignments_and_conversions(
            experiment_name, variant
        )
        if not total_users:
            return 0.0
        return converted_users / total_users

    async def calculate_engagement_metrics(self, experiment_name: str, variant: str) -> EngagementMetrics:
        avg_time_spent, avg_interactions, unique_users = await self.store.average_event_values(
            experiment_name, variant
        )
        return EngagementMetrics(
            avg_time_spent=avg_time_spent,
            avg_interactions=avg_interactions,
            unique_users=unique_users
        )

    async def calculate_all_metrics(self, experiment_name: str, variant: str) -> VariantMetrics:
        """Conversion rate and engagement for one variant, queried concurrently."""
        conversion_rate, engagement = await asyncio.gather(
            self.calculate_conversion_rate(experiment_name, variant),
            self.calculate_engagement_metrics(experiment_name, variant)
        )
        return VariantMetrics(
            conversion_rate=conversion_rate,
            avg_time_spent=engagement.avg_time_spent,
            avg_interactions=engagement.avg_interactions,
            unique_users=engagement.unique_users
        )

    async def get_experiment_variants(self, experiment_name: str) -> List[str]:
        return list(await self.store.distinct_variants(experiment_name))

    async def get_statistical_significance(self, experiment_name: str) -> SignificanceResult:
        """Run the approximate chi-square test over every variant seen in the store.

        Args:
            experiment_name: Experiment to evaluate

        Returns:
            SignificanceResult with the statistic, p-value and per-variant metrics
        """
        with self.logger.operation_context(
            "ExperimentMetrics", "statistical_significance", experiment=experiment_name
        ) as log:
            variants = await self.get_experiment_variants(experiment_name)
            metrics = await asyncio.gather(
                *(self.calculate_all_metrics(experiment_name, variant) for variant in variants)
            )
            by_variant: Dict[str, VariantMetrics] = dict(zip(variants, metrics))

            chi_square = self.calculate_chi_square([m.unique_users for m in metrics])
            degrees_of_freedom = len(variants) - 1
            p_value = self.calculate_p_value(chi_square, degrees_of_freedom)
            reliable = 0 < degrees_of_freedom <= self.config.max_reliable_degrees_of_freedom

            result = SignificanceResult(
                chi_square=chi_square,
                p_value=p_value,
                degrees_of_freedom=degrees_of_freedom,
                is_significant=p_value < self.config.significance_level,
                reliable=reliable,
                variants=by_variant
            )

            log.metric("experiment.chi_square", chi_square, tags={"experiment": experiment_name})
            log.metric("experiment.p_value", p_value, tags={"experiment": experiment_name})
            if not reliable:
                log.warning(
                    "p-value uses the approximate chi-square CDF outside its reliable range",
                    degrees_of_freedom=degrees_of_freedom,
                    variant_count=len(variants)
                )
            return result

    @staticmethod
    def calculate_chi_square(observed: Sequence[float]) -> float:
        """Sum of (observed - expected)^2 / expected, with expected the mean count.

        Returns 0.0 for no observations or a zero expected count.
        """
        if not observed:
            return 0.0
        expected = sum(observed) / len(observed)
        if expected == 0:
            return 0.0
        return sum((o - expected) ** 2 / expected for o in observed)

    @staticmethod
    def chi_square_cdf(x: float, k: int) -> float:
        """Closed-form CDF approximation ``1 - e^(-x/2) * sum_{i=0}^{k-1} (x/2)^i / i!``.

        The i = 0 term is always included, so k <= 0 gives ``1 - e^(-x/2)``.
        Terms are built incrementally, avoiding explicit factorials.
        """
        t = x / 2
        term = 1.0
        total = 1.0
        for i in range(1, k):
            term *= t / i
            total += term
        return max(0.0, 1 - math.exp(-t) * total)

    @classmethod
    def calculate_p_value(cls, chi_square: float, degrees_of_freedom: int) -> float:
        return 1 - cls.chi_square_cdf(chi_square, degrees_of_freedom)
