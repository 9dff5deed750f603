"""JSON-file profile store: finished-session log and unlocked achievements."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, FrozenSet, List

from .models import AchievementKey, SessionSummary

LOGGER = logging.getLogger(__name__)

PROFILE_VERSION = 1


def _normalize_achievements(raw: Any) -> set[str]:
    """Rebuild the unlocked-key set from whatever was stored."""
    if not isinstance(raw, (list, tuple, set, frozenset)):
        if raw is not None:
            LOGGER.warning("Discarding malformed achievements field: %r", raw)
        return set()

    keys: set[str] = set()
    for item in raw:
        try:
            keys.add(str(AchievementKey.parse(item)))
        except ValueError:
            LOGGER.warning("Discarding unknown achievement key %r", item)
    return keys


class ProfileStore:
    """Persists one player's history; never raises on I/O failure."""

    def __init__(self, path: Path, display_name: str | None = None) -> None:
        self.path = Path(path)
        self.display_name = display_name
        self._sessions: List[Dict[str, Any]] = []
        self._achievements: set[str] = set()
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                payload = json.load(fh)
        except (OSError, ValueError) as exc:
            LOGGER.warning("Failed to read profile %s, starting empty: %s", self.path, exc)
            return

        if not isinstance(payload, dict):
            LOGGER.warning("Ignoring profile %s: expected an object", self.path)
            return

        sessions = payload.get("sessions")
        self._sessions = [s for s in sessions if isinstance(s, dict)] if isinstance(sessions, list) else []
        self._achievements = _normalize_achievements(payload.get("achievements"))
        if self.display_name is None and isinstance(payload.get("display_name"), str):
            self.display_name = payload["display_name"]

    def _save(self) -> bool:
        payload = {
            "version": PROFILE_VERSION,
            "display_name": self.display_name,
            "achievements": sorted(self._achievements),
            "sessions": self._sessions,
        }
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            LOGGER.warning("Failed to write profile %s: %s", self.path, exc)
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    LOGGER.debug("Could not remove temporary profile %s", tmp_name)
            return False
        return True

    def record_session(self, summary: SessionSummary) -> bool:
        self._sessions.append(summary.to_dict())
        return self._save()

    def unlock(self, key: AchievementKey) -> bool:
        """Add ``key`` to the unlocked set. Unlocking twice is a no-op."""
        text = str(key)
        if text in self._achievements:
            return True
        self._achievements.add(text)
        return self._save()

    def unlocked(self) -> FrozenSet[AchievementKey]:
        return frozenset(AchievementKey.parse(key) for key in self._achievements)

    def sessions(self) -> List[Dict[str, Any]]:
        return list(self._sessions)
