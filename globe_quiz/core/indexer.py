from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import CountryFeature
from .parser import parse_feature

LOGGER = logging.getLogger(__name__)

COUNTRIES_FILENAME = "countries.geojson"
CAPITALS_FILENAME = "capitals.json"
FLAG_SIZES = ("24x18", "48x36", "96x72", "160x120", "256x192")


def flag_url(iso_a2: Optional[str], size: str = "256x192") -> Optional[str]:
    if not iso_a2:
        return None
    if size not in FLAG_SIZES:
        raise ValueError(f"Unsupported flag size {size!r}")
    return f"https://flagcdn.com/{size}/{iso_a2.lower()}.png"


@dataclass
class CountryIndex:
    """In-memory feature set with the capital lookup and map geometries."""

    records: List[CountryFeature]
    capitals: Dict[str, str]
    geometries: Dict[str, Dict[str, Any]]

    def capital_for(self, feature: CountryFeature) -> Optional[str]:
        return self.capitals.get(feature.id) or self.capitals.get(feature.name)

    def geojson(self) -> Dict[str, Any]:
        """FeatureCollection of the kept records, with ``id`` set for map lookups."""
        return {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "id": record.id,
                    "properties": {"name": record.name},
                    "geometry": self.geometries[record.id],
                }
                for record in self.records
                if record.id in self.geometries
            ],
        }


def load_capitals(path: Path) -> Dict[str, str]:
    """Read ``{"FRA": {"capital": "Paris"}}`` into ``{"FRA": "Paris"}``."""
    if not path.exists():
        LOGGER.warning("Capital lookup %s not found; capital mode will show no prompts.", path)
        return {}

    try:
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, ValueError) as exc:
        LOGGER.warning("Failed to read capitals from %s: %s", path, exc)
        return {}

    capitals: Dict[str, str] = {}
    if not isinstance(payload, dict):
        LOGGER.warning("Ignoring capitals file %s: expected an object", path)
        return capitals
    for key, entry in payload.items():
        capital = entry.get("capital") if isinstance(entry, dict) else entry
        if isinstance(capital, str) and capital:
            capitals[str(key)] = capital
    return capitals


def load_index(data_dir: Path) -> CountryIndex:
    """Load the country features and capital lookup from ``data_dir``."""
    countries_file = data_dir / COUNTRIES_FILENAME
    if not countries_file.exists():
        raise FileNotFoundError(f"No country data found at {countries_file}")

    with countries_file.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)

    raw_features = payload.get("features") or []
    records: List[CountryFeature] = []
    geometries: Dict[str, Dict[str, Any]] = {}
    for raw in raw_features:
        feature = parse_feature(raw)
        if feature is None or feature.id in geometries:
            continue
        records.append(feature)
        geometries[feature.id] = raw.get("geometry") or {}

    if not records:
        raise RuntimeError(f"No valid country features in {countries_file}")

    capitals = load_capitals(data_dir / CAPITALS_FILENAME)
    LOGGER.info("Country index loaded with %s features and %s capitals.", len(records), len(capitals))
    return CountryIndex(records=records, capitals=capitals, geometries=geometries)
