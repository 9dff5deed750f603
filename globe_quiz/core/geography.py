"""Mapping between achievement geographies and the continents they cover."""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from .models import Continent, Geography, QuizMode

CONTINENTS: Tuple[Continent, ...] = tuple(Continent)
GEOGRAPHIES: Tuple[Geography, ...] = tuple(Geography)

TOTAL_ACHIEVEMENTS = len(QuizMode) * len(GEOGRAPHIES)  # 27

_COMPOUND: Dict[Geography, FrozenSet[Continent]] = {
    Geography.WORLD: frozenset(CONTINENTS),
    Geography.AMERICAS: frozenset({Continent.NORTH_AMERICA, Continent.SOUTH_AMERICA}),
    Geography.EURASIA: frozenset({Continent.EUROPE, Continent.ASIA}),
}


def is_continent(label: str) -> bool:
    return label in {c.value for c in CONTINENTS}


def expand(geo: Geography) -> FrozenSet[Continent]:
    """Return the continents a geography stands for."""
    geo = Geography(geo)
    if geo in _COMPOUND:
        return _COMPOUND[geo]
    return frozenset({Continent(geo.value)})


def infer(regions: Iterable[str]) -> Optional[Geography]:
    """
    Return the geography that ``regions`` represents exactly, if any.

    Order and duplicates are ignored. A selection that is neither a single
    continent nor one of the compound groupings infers to None, as does any
    selection holding a label that is not a continent.
    """
    labels = {str(getattr(r, "value", r)) for r in regions}
    if not labels or not all(is_continent(label) for label in labels):
        return None

    selected = frozenset(Continent(label) for label in labels)
    for geo, continents in _COMPOUND.items():
        if selected == continents:
            return geo
    if len(selected) == 1:
        (only,) = selected
        return Geography(only.value)
    return None
