from typing import Any, Dict, List, Optional, Tuple

from cinemood.data.schemas import TextAnalysis


class FakeTextAnalyzer:
    """Returns canned analyses, or whitespace tokens with neutral sentiment."""

    def __init__(self, canned: Optional[Dict[str, TextAnalysis]] = None):
        self.canned = canned or {}
        self.calls: List[str] = []

    def analyze_text(self, text: str) -> TextAnalysis:
        self.calls.append(text)
        if text in self.canned:
            return self.canned[text]
        return TextAnalysis(sentiment=0.0, tokens=text.lower().split())

class FakeEventStore:
    """Async event store answering from fixed per-variant tables."""

    def __init__(self, counts: Optional[Dict[Tuple[str, str], Tuple[int, int]]] = None,
                 averages: Optional[Dict[Tuple[str, str], tuple]] = None,
                 variants: Optional[Dict[str, List[str]]] = None):
        self.counts = counts or {}
        self.averages = averages or {}
        self.variants = variants or {}

    async def count_assignments_and_conversions(self, experiment_name, variant):
        return self.counts.get((experiment_name, variant), (0, 0))

    async def average_event_values(self, experiment_name, variant):
        return self.averages.get((experiment_name, variant), (None, None, 0))

    async def distinct_variants(self, experiment_name):
        return self.variants.get(experiment_name, [])

class RecordingSink:
    def __init__(self):
        self.events: List[tuple] = []

    def record_event(self, user_id: Any, experiment_name: str, variant: str,
                     event_name: str, value: float) -> None:
        self.events.append((user_id, experiment_name, variant, event_name, value))

class FailingSink:
    def record_event(self, *args, **kwargs):
        raise ConnectionError("analytics backend unavailable")

