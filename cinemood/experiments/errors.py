"""
Exceptions raised by the experiment layer.
"""


class ExperimentError(Exception):
    """Base class for experiment registration and assignment errors."""
    pass


class ExperimentNotFound(ExperimentError, LookupError):
    """Raised when assigning or tracking against an unregistered experiment."""

    def __init__(self, experiment_name: str):
        self.experiment_name = experiment_name
        super().__init__(f"Experiment {experiment_name} not found")


class InvalidExperiment(ExperimentError, ValueError):
    """Raised when an experiment definition cannot be registered."""
    pass
