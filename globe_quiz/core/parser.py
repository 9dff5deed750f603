from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from .models import CountryFeature

LOGGER = logging.getLogger(__name__)

ID_KEYS = ("ADM0_A3", "ISO_A3")
LAT_KEYS = ("LABEL_Y", "LATITUDE")
LNG_KEYS = ("LABEL_X", "LONGITUDE")
EXCLUDED_ISO_A2 = {"AQ"}  # Antarctica
MISSING_CODE = "-99"


def _first(props: Mapping[str, Any], keys) -> Optional[Any]:
    for key in keys:
        value = props.get(key)
        if value not in (None, "", MISSING_CODE):
            return value
    return None


def _as_float(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def parse_feature(raw: Dict[str, Any]) -> Optional[CountryFeature]:
    """
    Parse one GeoJSON feature into a CountryFeature.

    Returns None if the feature has no usable id or name, or is excluded.
    """
    props = raw.get("properties") or {}
    if not isinstance(props, Mapping):
        LOGGER.debug("Skipping feature with non-mapping properties: %r", props)
        return None

    feature_id = _first(props, ID_KEYS)
    name = props.get("ADMIN") or props.get("NAME")
    if feature_id is None or not name:
        LOGGER.debug("Skipping feature without id/name: %s", name or feature_id)
        return None

    iso_a2 = _first(props, ("ISO_A2", "ISO_A2_EH"))
    if iso_a2 in EXCLUDED_ISO_A2:
        return None

    return CountryFeature(
        id=str(feature_id),
        name=str(name),
        continent=str(props.get("CONTINENT") or ""),
        iso_a2=str(iso_a2) if iso_a2 is not None else None,
        lat=_as_float(_first(props, LAT_KEYS)),
        lng=_as_float(_first(props, LNG_KEYS)),
    )
