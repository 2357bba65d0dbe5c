"""
Mood classification module for Cinemood analytics.
Provides MoodClassifier for deriving a mood label and intensity from free text.
"""
from typing import Dict, Optional, Protocol
import logging
from ..config.settings import MoodConfig
from ..data.moods import Mood
from ..data.schemas import MoodAnalysis, TextAnalysis


class TextAnalyzer(Protocol):
    """External sentiment/tokenization engine."""

    def analyze_text(self, text: str) -> TextAnalysis:
        ...


class MoodClassifier:
    """Classifies free text into one of the fixed mood categories."""

    def __init__(self, text_analyzer: TextAnalyzer, config: Optional[MoodConfig] = None):
        """Initialize the mood classifier.

        Args:
            text_analyzer: Collaborator producing sentiment and lowercase tokens
            config: Intensifier settings (defaults used when omitted)
        """
        self.logger = logging.getLogger(__name__)
        self.text_analyzer = text_analyzer
        self.config = config or MoodConfig()
        self.intensifiers = frozenset(self.config.intensifiers)

    def analyze_mood(self, text: str) -> MoodAnalysis:
        """Analyze text and return its sentiment, mood and intensity.

        Errors raised by the text analyzer propagate to the caller.
        """
        analysis = self.text_analyzer.analyze_text(text)
        mood = self.infer_mood(analysis)
        intensity = self.calculate_intensity(analysis)
        self.logger.debug(
            f"Classified text as {mood.value} (sentiment={analysis.sentiment}, "
            f"intensity={intensity:.2f}, tokens={len(analysis.tokens)})"
        )
        return MoodAnalysis(
            sentiment=analysis.sentiment,
            mood=mood,
            intensity=intensity
        )

    def score_moods(self, analysis: TextAnalysis) -> Dict[Mood, float]:
        """Score every mood by keyword hits weighted with shifted sentiment.

        A token counts once per mood if it contains any of the mood's
        patterns as a substring.

        Returns:
            Mapping of mood to score, in declaration order
        """
        sentiment_weight = analysis.sentiment + 1
        scores = {}
        for mood in Mood:
            patterns = mood.profile.text_patterns
            match_count = sum(
                1 for token in analysis.tokens
                if any(pattern in token for pattern in patterns)
            )
            scores[mood] = match_count * sentiment_weight
        return scores

    def infer_mood(self, analysis: TextAnalysis) -> Mood:
        """Return the highest scoring mood; ties go to the first declared mood."""
        scores = self.score_moods(analysis)
        # sorted() is stable, so equal scores keep declaration order
        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
        return ranked[0][0]

    def calculate_intensity(self, analysis: TextAnalysis) -> float:
        """Compute intensity from sentiment strength plus intensifier tokens, capped at 1."""
        intensifier_count = sum(1 for token in analysis.tokens if token in self.intensifiers)
        return min(
            1.0,
            abs(analysis.sentiment) + intensifier_count * self.config.intensifier_step
        )
