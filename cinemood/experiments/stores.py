"""
Assignment and event stores for the experiment layer.

The experiment manager and metrics only depend on the protocols defined here.
``InMemoryAssignmentStore`` is the process-local default; ``JsonAssignmentStore``
persists assignments to a JSON file; ``PandasEventStore`` keeps events and
assignments in memory and answers the metrics queries with pandas.
"""
import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol, Tuple

import pandas as pd

from ..config.settings import ExperimentConfig
from .schemas import ExperimentEvent

EVENT_COLUMNS = ['experiment_name', 'variant', 'user_id', 'event_name', 'value', 'timestamp']
ASSIGNMENT_COLUMNS = ['experiment_name', 'variant', 'user_id']


class AssignmentStore(Protocol):
    """Keyed storage for sticky (user, experiment) -> variant assignments."""

    def get(self, user_id: Any, experiment_name: str) -> Optional[str]:
        ...

    def put(self, user_id: Any, experiment_name: str, variant: str) -> None:
        ...


class EventSink(Protocol):
    """Write side of the external event store."""

    def record_event(self, user_id: Any, experiment_name: str, variant: str,
                     event_name: str, value: float) -> None:
        ...


class EventStore(Protocol):
    """Read side of the external event/assignment store."""

    async def count_assignments_and_conversions(self, experiment_name: str,
                                                variant: str) -> Tuple[int, int]:
        ...

    async def average_event_values(self, experiment_name: str,
                                   variant: str) -> Tuple[Optional[float], Optional[float], int]:
        ...

    async def distinct_variants(self, experiment_name: str) -> List[str]:
        ...


def _check_not_reassigned(existing: Optional[str], variant: str,
                          user_id: Any, experiment_name: str) -> None:
    if existing is not None and existing != variant:
        raise ValueError(
            f"User {user_id} is already assigned to {existing!r} in {experiment_name}"
        )


class InMemoryAssignmentStore:
    """Process-local assignment store; not shared between server instances."""

    def __init__(self):
        self._assignments: Dict[Tuple[Any, str], str] = {}

    def get(self, user_id: Any, experiment_name: str) -> Optional[str]:
        return self._assignments.get((user_id, experiment_name))

    def put(self, user_id: Any, experiment_name: str, variant: str) -> None:
        key = (user_id, experiment_name)
        _check_not_reassigned(self._assignments.get(key), variant, user_id, experiment_name)
        self._assignments[key] = variant

    def __len__(self) -> int:
        return len(self._assignments)


class JsonAssignmentStore:
    """
    Assignment store persisted to a JSON file.

    The file holds ``{experiment_name: {user_key: variant}}`` where the key is
    the JSON encoding of the user id, so ``17`` is stored as ``"17"`` and
    ``"17"`` as ``"\\"17\\""`` and the two never share an assignment. User ids
    must therefore be JSON serializable. Every put rewrites the file
    atomically. Concurrent writers from several processes are not coordinated.
    """

    def __init__(self, storage_path: str):
        """
        Args:
            storage_path: Path to the JSON file holding assignments
        """
        self.storage_path = storage_path
        self.logger = logging.getLogger(__name__)
        self._cache: Optional[Dict[str, Dict[str, str]]] = None

    def _load(self) -> Dict[str, Dict[str, str]]:
        """
        Raises:
            ValueError: If the file exists but is not a JSON object
        """
        if self._cache is not None:
            return self._cache
        if not os.path.exists(self.storage_path):
            self._cache = {}
            return self._cache
        with open(self.storage_path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Corrupt assignment file {self.storage_path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("Assignment file must contain a JSON object")
        self._cache = data
        self.logger.info(
            f"Loaded {sum(len(users) for users in data.values())} assignments from {self.storage_path}"
        )
        return self._cache

    @staticmethod
    def user_key(user_id: Any) -> str:
        """
        Raises:
            TypeError: If the user id is not JSON serializable
        """
        return json.dumps(user_id)

    def get(self, user_id: Any, experiment_name: str) -> Optional[str]:
        return self._load().get(experiment_name, {}).get(self.user_key(user_id))

    def put(self, user_id: Any, experiment_name: str, variant: str) -> None:
        key = self.user_key(user_id)
        data = self._load()
        users = data.setdefault(experiment_name, {})
        _check_not_reassigned(users.get(key), variant, user_id, experiment_name)
        users[key] = variant
        self.save_atomic(data)

    def save_atomic(self, data: Dict[str, Dict[str, str]]) -> None:
        """
        Write assignments to a temporary file and rename it over the target.

        Raises:
            IOError: If saving fails
        """
        directory = os.path.dirname(os.path.abspath(self.storage_path))
        os.makedirs(directory, exist_ok=True)

        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                mode='w',
                dir=directory,
                delete=False,
                suffix='.tmp',
                encoding='utf-8'
            ) as temp_file:
                temp_path = temp_file.name
                json.dump(data, temp_file, indent=2, ensure_ascii=False)
            os.replace(temp_path, self.storage_path)
            temp_path = None
        except OSError as e:
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)
            error_msg = f"Failed to save assignments atomically: {e}"
            self.logger.error(error_msg)
            raise IOError(error_msg) from e


class PandasEventStore:
    """
    In-memory experiment event and assignment store.

    Implements AssignmentStore, EventSink and EventStore so a single instance
    can back both the ExperimentManager and ExperimentMetrics. Records are
    buffered as rows and turned into DataFrames on read.
    """

    def __init__(self, conversion_event: str = "conversion",
                 time_spent_event: str = "time_spent",
                 interactions_event: str = "interactions"):
        self.conversion_event = conversion_event
        self.time_spent_event = time_spent_event
        self.interactions_event = interactions_event
        self._events: List[Dict[str, Any]] = []
        self._assignments: Dict[Tuple[Any, str], str] = {}

    @classmethod
    def from_config(cls, config: ExperimentConfig) -> 'PandasEventStore':
        """Build a store that uses the configured conversion and engagement event names."""
        return cls(
            conversion_event=config.conversion_event,
            time_spent_event=config.time_spent_event,
            interactions_event=config.interactions_event,
        )

    @classmethod
    def from_records(cls, events: List[ExperimentEvent],
                     assignments: Optional[List[Tuple[Any, str, str]]] = None,
                     **kwargs) -> 'PandasEventStore':
        """Build a store from existing events and ``(user_id, experiment, variant)`` assignments.

        Users seen in events are treated as assigned to the event's variant.
        """
        store = cls(**kwargs)
        for user_id, experiment_name, variant in assignments or []:
            store.put(user_id, experiment_name, variant)
        for event in events:
            store.append_event(event)
        return store

    # AssignmentStore

    def get(self, user_id: Any, experiment_name: str) -> Optional[str]:
        return self._assignments.get((user_id, experiment_name))

    def put(self, user_id: Any, experiment_name: str, variant: str) -> None:
        key = (user_id, experiment_name)
        _check_not_reassigned(self._assignments.get(key), variant, user_id, experiment_name)
        self._assignments[key] = variant

    # EventSink

    def record_event(self, user_id: Any, experiment_name: str, variant: str,
                     event_name: str, value: float = 1) -> None:
        self.append_event(ExperimentEvent(
            experiment_name=experiment_name,
            variant=variant,
            user_id=user_id,
            event_name=event_name,
            value=float(value),
            timestamp=datetime.now(timezone.utc),
        ))

    def append_event(self, event: ExperimentEvent) -> None:
        self._events.append({
            'experiment_name': event.experiment_name,
            'variant': event.variant,
            'user_id': event.user_id,
            'event_name': event.event_name,
            'value': event.value,
            'timestamp': event.timestamp,
        })
        self._assignments.setdefault((event.user_id, event.experiment_name), event.variant)

    # Frames

    def events_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self._events, columns=EVENT_COLUMNS)

    def assignments_frame(self) -> pd.DataFrame:
        rows = [
            {'experiment_name': experiment_name, 'variant': variant, 'user_id': user_id}
            for (user_id, experiment_name), variant in self._assignments.items()
        ]
        return pd.DataFrame(rows, columns=ASSIGNMENT_COLUMNS)

    def _variant_events(self, experiment_name: str, variant: str) -> pd.DataFrame:
        df = self.events_frame()
        return df[(df['experiment_name'] == experiment_name) & (df['variant'] == variant)]

    # EventStore

    async def count_assignments_and_conversions(self, experiment_name: str,
                                                variant: str) -> Tuple[int, int]:
        df = self._variant_events(experiment_name, variant)
        total_users = int(df['user_id'].nunique())
        converted = df.loc[df['event_name'] == self.conversion_event, 'user_id']
        return total_users, int(converted.nunique())

    async def average_event_values(self, experiment_name: str,
                                   variant: str) -> Tuple[Optional[float], Optional[float], int]:
        df = self._variant_events(experiment_name, variant)

        def _mean(event_name: str) -> Optional[float]:
            values = df.loc[df['event_name'] == event_name, 'value'].dropna()
            if values.empty:
                return None
            return float(values.mean())

        return (
            _mean(self.time_spent_event),
            _mean(self.interactions_event),
            int(df['user_id'].nunique()),
        )

    async def distinct_variants(self, experiment_name: str) -> List[str]:
        df = self.assignments_frame()
        variants = df.loc[df['experiment_name'] == experiment_name, 'variant']
        return [str(v) for v in variants.unique()]
