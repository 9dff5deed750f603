"""Remembering the player's selections between runs."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from . import engine
from .geography import is_continent
from .models import ALL, QuestionCount, QuizMode, QuizState

LOGGER = logging.getLogger(__name__)

PREFS_VERSION = 1


def dump_preferences(state: QuizState) -> Dict[str, Any]:
    """Only the selections are persisted; run state never is."""
    return {
        "version": PREFS_VERSION,
        "mode": state.mode.value,
        "regions": list(state.regions),
        "max_count": state.max_count,
    }


def normalize_preferences(payload: Any) -> Dict[str, Any]:
    """Coerce untrusted stored preferences into valid values, dropping the rest."""
    prefs: Dict[str, Any] = {
        "mode": engine.DEFAULT_MODE,
        "regions": [],
        "max_count": engine.DEFAULT_MAX_COUNT,
    }
    if not isinstance(payload, dict):
        if payload is not None:
            LOGGER.warning("Ignoring malformed preferences: %r", payload)
        return prefs

    try:
        prefs["mode"] = QuizMode(payload.get("mode", engine.DEFAULT_MODE))
    except ValueError:
        LOGGER.warning("Ignoring unknown mode %r", payload.get("mode"))

    prefs["regions"] = _as_regions(payload.get("regions"))
    prefs["max_count"] = _as_count(payload.get("max_count"))
    return prefs


def _as_regions(raw: Any) -> List[str]:
    if not isinstance(raw, (list, tuple, set, frozenset)):
        return []
    regions: List[str] = []
    for item in raw:
        if isinstance(item, str) and is_continent(item) and item not in regions:
            regions.append(item)
    return regions


def _as_count(raw: Any) -> QuestionCount:
    if raw == ALL:
        return ALL
    if isinstance(raw, int) and not isinstance(raw, bool) and raw > 0:
        return raw
    return engine.DEFAULT_MAX_COUNT


def _as_id_set(raw: Any) -> set[str]:
    if isinstance(raw, (set, frozenset, list, tuple)):
        return {str(item) for item in raw}
    return set()


def ensure_sets(state: QuizState) -> QuizState:
    """Rebuild set-typed fields that may have come back as lists or junk."""
    if not isinstance(state.correct, set):
        LOGGER.debug("Rebuilding correct set from %s", type(state.correct).__name__)
        state.correct = _as_id_set(state.correct)
    if not isinstance(state.wrong, set):
        LOGGER.debug("Rebuilding wrong set from %s", type(state.wrong).__name__)
        state.wrong = _as_id_set(state.wrong)
    return state


def apply_preferences(state: QuizState, prefs: Dict[str, Any]) -> None:
    engine.set_mode(state, prefs["mode"])
    engine.set_max_count(state, prefs["max_count"])
    engine.set_regions(state, prefs["regions"])


def load_preferences(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return normalize_preferences(None)
    try:
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, ValueError) as exc:
        LOGGER.warning("Failed to read preferences from %s: %s", path, exc)
        payload = None
    return normalize_preferences(payload)


def save_preferences(state: QuizState, path: Path) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(dump_preferences(state), fh, indent=2)
    except OSError as exc:
        LOGGER.warning("Failed to save preferences to %s: %s", path, exc)
        return False
    return True
