"""Perfect-run detection and achievement hand-off for finished quizzes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Protocol, Tuple

from . import engine
from .geography import GEOGRAPHIES, infer
from .models import ALL, AchievementKey, Geography, QuizMode, QuizState, QuizStatus, SessionSummary

LOGGER = logging.getLogger(__name__)


class AchievementStore(Protocol):
    def record_session(self, summary: SessionSummary) -> bool: ...

    def unlock(self, key: AchievementKey) -> bool: ...

    def unlocked(self) -> FrozenSet[AchievementKey]: ...


@dataclass(frozen=True)
class AchievementResult:
    """Outcome of settling one finished session."""

    key: Optional[AchievementKey]
    summary: SessionSummary
    is_new: bool = False
    persisted: bool = False

    @property
    def unlocked(self) -> bool:
        return self.key is not None

    def label(self, logged_in: bool) -> str:
        if not logged_in:
            return "Log in to unlock achievements"
        if self.key is None:
            return "No achievement unlocked"
        if not self.is_new:
            return f"Already unlocked: {self.key.geography.value} • {self.key.mode.value}"
        return f"Unlocked: {self.key.geography.value} • {self.key.mode.value}"


def _perfect_run(state: QuizState) -> bool:
    return (
        state.status == QuizStatus.FINISHED
        and state.run_max_count == ALL
        and state.errors == 0
        and state.skipped == 0
        and len(state.correct) == len(state.quiz)
    )


def evaluate(state: QuizState) -> Optional[AchievementKey]:
    """Return the key a finished session earns, or None.

    Judged on the selection the run was started with, not the live one.
    """
    if not _perfect_run(state):
        return None
    geography = infer(state.run_regions)
    if geography is None or state.run_mode is None:
        return None
    return AchievementKey(mode=state.run_mode, geography=geography)


def is_eligible(state: QuizState) -> bool:
    return evaluate(state) is not None


def settle(
    state: QuizState,
    store: Optional[AchievementStore] = None,
    now: Optional[float] = None,
) -> Optional[AchievementResult]:
    """
    Evaluate a finished session exactly once.

    Returns None if the session is not finished or has already been settled.
    With a store, the session summary is logged and an earned key unlocked;
    store failures are logged and leave the returned result intact.
    """
    if state.status != QuizStatus.FINISHED or state.settled:
        return None
    state.settled = True

    summary = engine.session_summary(state, now=now)
    if summary is None:
        return None
    key = evaluate(state)

    if store is None:
        return AchievementResult(key=key, summary=summary, is_new=key is not None)

    try:
        already = key in store.unlocked() if key is not None else False
        persisted = store.record_session(summary)
        if key is not None:
            persisted = store.unlock(key) and persisted
    except Exception as exc:
        LOGGER.warning("Failed to persist finished session: %s", exc)
        return AchievementResult(key=key, summary=summary, is_new=key is not None, persisted=False)

    if key is not None:
        LOGGER.info("Achievement earned: %s (new=%s)", key, not already)
    return AchievementResult(key=key, summary=summary, is_new=key is not None and not already, persisted=persisted)


def achievement_grid(unlocked: Iterable[AchievementKey]) -> List[Tuple[Geography, Dict[QuizMode, bool]]]:
    """Rows of the trophy table: one per geography, one flag per mode."""
    have = set(unlocked)
    return [
        (geo, {mode: AchievementKey(mode=mode, geography=geo) in have for mode in QuizMode})
        for geo in GEOGRAPHIES
    ]
