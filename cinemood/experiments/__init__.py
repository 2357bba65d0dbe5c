"""
Experiment module for Cinemood analytics.

Weighted sticky variant assignment, event tracking and significance metrics.
"""

from .errors import ExperimentError, ExperimentNotFound, InvalidExperiment
from .manager import ExperimentManager
from .metrics import ExperimentMetrics
from .schemas import (
    EngagementMetrics,
    Experiment,
    ExperimentEvent,
    SignificanceResult,
    VariantMetrics,
)
from .stores import (
    AssignmentStore,
    EventSink,
    EventStore,
    InMemoryAssignmentStore,
    JsonAssignmentStore,
    PandasEventStore,
)

__all__ = [
    'ExperimentError',
    'ExperimentNotFound',
    'InvalidExperiment',
    'ExperimentManager',
    'ExperimentMetrics',
    'EngagementMetrics',
    'Experiment',
    'ExperimentEvent',
    'SignificanceResult',
    'VariantMetrics',
    'AssignmentStore',
    'EventSink',
    'EventStore',
    'InMemoryAssignmentStore',
    'JsonAssignmentStore',
    'PandasEventStore',
]
