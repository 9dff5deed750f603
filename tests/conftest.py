from __future__ import annotations

import random
import sys
from pathlib import Path
from typing import List

import pytest

ROOT = Path(__file__).resolve().parents[1]
APP_DIR = ROOT / "globe_quiz"
if str(APP_DIR) not in sys.path:
    sys.path.insert(0, str(APP_DIR))

from core.models import CountryFeature  # noqa: E402


def make_feature(feature_id: str, continent: str, name: str | None = None, iso_a2: str | None = None) -> CountryFeature:
    return CountryFeature(id=feature_id, name=name or feature_id, continent=continent, iso_a2=iso_a2, lat=10.0, lng=20.0)


@pytest.fixture
def six_continents() -> List[CountryFeature]:
    """One country per continent."""
    return [
        make_feature("EGY", "Africa", "Egypt", "EG"),
        make_feature("JPN", "Asia", "Japan", "JP"),
        make_feature("FRA", "Europe", "France", "FR"),
        make_feature("CAN", "North America", "Canada", "CA"),
        make_feature("AUS", "Oceania", "Australia", "AU"),
        make_feature("BRA", "South America", "Brazil", "BR"),
    ]


@pytest.fixture
def world_features() -> List[CountryFeature]:
    """Four European, four Asian, plus a few elsewhere and one open-ocean entry."""
    return [
        make_feature("FRA", "Europe"),
        make_feature("KEN", "Africa"),
        make_feature("DEU", "Europe"),
        make_feature("JPN", "Asia"),
        make_feature("ITA", "Europe"),
        make_feature("IND", "Asia"),
        make_feature("USA", "North America"),
        make_feature("ESP", "Europe"),
        make_feature("CHN", "Asia"),
        make_feature("ARG", "South America"),
        make_feature("VNM", "Asia"),
        make_feature("MDV", "Seven seas (open ocean)"),
    ]


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
