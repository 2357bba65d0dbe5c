"""
Feature extraction for media items.

Tags are plain strings such as ``decade_1990s``, ``genre_drama`` and
``keyword_redemption`` so they can be matched against user profiles.
"""
import re
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..data.schemas import MediaItem

STOP_WORDS = frozenset({
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by'
})
MIN_KEYWORD_LENGTH = 3

_PUNCTUATION = re.compile(r'[^\w\s]')


def extract_title_keywords(title: str) -> List[str]:
    """Lowercase the title, strip punctuation and drop stop words and short words."""
    cleaned = _PUNCTUATION.sub('', title.lower())
    return [
        word for word in cleaned.split()
        if word not in STOP_WORDS and len(word) >= MIN_KEYWORD_LENGTH
    ]


def extract_features(item: MediaItem) -> Set[str]:
    """Derive the deduplicated feature tag set for a media item."""
    features = set()

    decade = item.decade()
    if decade is not None:
        features.add(f"decade_{decade}s")

    for genre in item.genres():
        features.add(f"genre_{genre.lower()}")

    if item.title:
        for keyword in extract_title_keywords(item.title):
            features.add(f"keyword_{keyword}")

    return features


def build_user_profile(rated_items: Iterable[Tuple[MediaItem, Optional[float]]]) -> Dict[str, float]:
    """Accumulate a feature -> weight profile from a user's rated items.

    Every feature of an item gains the item's rating, or 1 when the item is unrated.
    """
    profile: Dict[str, float] = defaultdict(float)
    for item, rating in rated_items:
        weight = rating or 1
        for feature in extract_features(item):
            profile[feature] += weight
    return dict(profile)
