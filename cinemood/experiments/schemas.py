"""
Experiment schemas for the Cinemood analytics system.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Experiment:
    """A registered experiment: ordered variants and their assignment weights."""
    name: str
    variants: Tuple[str, ...]
    weights: Tuple[float, ...]

    @property
    def total_weight(self) -> float:
        return sum(self.weights)


@dataclass(frozen=True)
class ExperimentEvent:
    """One tracked outcome for a user in an experiment variant."""
    experiment_name: str
    variant: str
    user_id: Any
    event_name: str
    value: float = 1.0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class EngagementMetrics:
    """Engagement aggregates for one variant.

    Averages are None when no matching events exist, which is distinct from a
    genuine average of zero.
    """
    avg_time_spent: Optional[float]
    avg_interactions: Optional[float]
    unique_users: int


@dataclass
class VariantMetrics:
    """Conversion and engagement metrics for one variant."""
    conversion_rate: float
    avg_time_spent: Optional[float]
    avg_interactions: Optional[float]
    unique_users: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'conversion_rate': self.conversion_rate,
            'avg_time_spent': self.avg_time_spent,
            'avg_interactions': self.avg_interactions,
            'unique_users': self.unique_users,
        }


@dataclass
class SignificanceResult:
    """Outcome of the approximate chi-square test across an experiment's variants.

    ``reliable`` is False when the degrees of freedom fall outside the range
    where the closed-form CDF is a reasonable approximation.
    """
    chi_square: float
    p_value: float
    degrees_of_freedom: int
    is_significant: bool
    reliable: bool
    variants: Dict[str, VariantMetrics] = field(default_factory=dict)

    def __post_init__(self):
        if self.chi_square < 0:
            raise ValueError("Chi-square statistic cannot be negative")
