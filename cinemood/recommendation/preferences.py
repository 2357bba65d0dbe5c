"""
Preference learning from ratings and wishlist entries.

Interactions are grouped under ``genre_<name>`` and ``era_<decade>s`` keys.
Each group keeps the mean interaction value and a confidence weight that grows
linearly with the number of interactions and saturates at 1.0.
"""
from collections import defaultdict
from typing import Dict, Iterable, List

from ..data.schemas import PreferenceProfile, RatingStyle
from .schemas import Interaction, LearnedPreference

GENRE_PREFIX = "genre_"
ERA_PREFIX = "era_"
WEIGHT_SATURATION = 10


def preference_keys(interaction: Interaction) -> List[str]:
    item = interaction.item
    keys = [f"{GENRE_PREFIX}{genre.lower()}" for genre in item.genres()]
    decade = item.decade()
    if decade is not None:
        keys.append(f"{ERA_PREFIX}{decade}s")
    return keys


def analyze_interactions(interactions: Iterable[Interaction]) -> Dict[str, LearnedPreference]:
    """Aggregate interactions into learned preferences keyed by genre and era.

    Returns:
        Mapping of preference key to its mean value, weight ``min(count / 10, 1)``
        and interaction count, in first-seen order
    """
    counts: Dict[str, int] = defaultdict(int)
    totals: Dict[str, float] = defaultdict(float)
    for interaction in interactions:
        for key in preference_keys(interaction):
            counts[key] += 1
            totals[key] += interaction.value

    return {
        key: LearnedPreference(
            value=totals[key] / count,
            weight=min(count / WEIGHT_SATURATION, 1.0),
            count=count,
        )
        for key, count in counts.items()
    }


def learn_preferences(interactions: Iterable[Interaction]) -> PreferenceProfile:
    """Build a PreferenceProfile from a user's interactions.

    Genre and era entries carry the learned confidence weights. The rating
    style average is the mean of explicit ratings; wishlist entries do not
    count towards it and no rating style is set when there are no ratings.
    """
    interactions = list(interactions)
    learned = analyze_interactions(interactions)

    genres = {
        key[len(GENRE_PREFIX):]: preference.weight
        for key, preference in learned.items() if key.startswith(GENRE_PREFIX)
    }
    eras = {
        key[len(ERA_PREFIX):]: preference.weight
        for key, preference in learned.items() if key.startswith(ERA_PREFIX)
    }

    ratings = [i.value for i in interactions if i.kind == 'rating']
    rating_style = RatingStyle(average=sum(ratings) / len(ratings)) if ratings else None

    return PreferenceProfile(genres=genres, eras=eras, rating_style=rating_style)
