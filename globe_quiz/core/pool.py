from __future__ import annotations

import random
from typing import Iterable, List, Sequence, Tuple

from .models import ALL, CountryFeature, QuestionCount


def filter_pool(features: Iterable[CountryFeature], regions: Iterable[str]) -> List[CountryFeature]:
    """Return the features whose continent is selected, keeping input order."""
    selected = {str(getattr(r, "value", r)) for r in regions}
    if not selected:
        return []
    return [feature for feature in features if feature.continent in selected]


def take_count(pool_size: int, max_count: QuestionCount) -> int:
    if max_count == ALL:
        return pool_size
    return min(pool_size, int(max_count))


def build_quiz(
    pool: Sequence[CountryFeature],
    max_count: QuestionCount,
    rng: random.Random | None = None,
) -> Tuple[CountryFeature, ...]:
    """Shuffle the pool into a fresh question order and cut it to size."""
    if not pool:
        return ()

    rng = rng or random.Random()
    seen: set[str] = set()
    shuffled: List[CountryFeature] = []
    for feature in pool:
        if feature.id in seen:
            continue
        seen.add(feature.id)
        shuffled.append(feature)
    rng.shuffle(shuffled)
    return tuple(shuffled[: take_count(len(shuffled), max_count)])
