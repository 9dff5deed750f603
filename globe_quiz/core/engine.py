from __future__ import annotations

import logging
import random
import time
from typing import Iterable, List, Optional

from .geography import is_continent
from .models import (
    ALL,
    CountryFeature,
    Outcome,
    QuestionCount,
    QuizMode,
    QuizState,
    QuizStatus,
    SessionSummary,
    VisualState,
)
from .pool import build_quiz, filter_pool
from .timer import elapsed_seconds

LOGGER = logging.getLogger(__name__)

DEFAULT_MODE = QuizMode.COUNTRY
DEFAULT_MAX_COUNT = 10


def create_quiz_state(
    mode: QuizMode = DEFAULT_MODE,
    regions: Iterable[str] = (),
    max_count: QuestionCount = DEFAULT_MAX_COUNT,
    features: Iterable[CountryFeature] = (),
) -> QuizState:
    state = QuizState(mode=QuizMode(mode))
    set_max_count(state, max_count)
    state.features = list(features)
    set_regions(state, regions)
    return state


# Selection ---------------------------------------------------------------


def set_mode(state: QuizState, mode: QuizMode) -> None:
    state.mode = QuizMode(mode)


def toggle_region(state: QuizState, region: str) -> None:
    region = str(getattr(region, "value", region))
    if region in state.regions:
        regions = [r for r in state.regions if r != region]
    else:
        regions = [*state.regions, region]
    set_regions(state, regions)


def set_regions(state: QuizState, regions: Iterable[str]) -> None:
    cleaned: List[str] = []
    for region in regions:
        label = str(getattr(region, "value", region))
        if not is_continent(label):
            LOGGER.warning("Ignoring unknown region %r", label)
            continue
        if label not in cleaned:
            cleaned.append(label)
    state.regions = cleaned
    _refilter(state)


def set_max_count(state: QuizState, max_count: QuestionCount) -> None:
    if max_count != ALL:
        if isinstance(max_count, bool) or not isinstance(max_count, int) or max_count < 1:
            raise ValueError(f"Question count must be a positive integer or {ALL!r}, got {max_count!r}")
    state.max_count = max_count


def set_countries(state: QuizState, features: Iterable[CountryFeature]) -> None:
    """Install a (possibly late-arriving) feature set without touching the running quiz."""
    state.features = list(features)
    _refilter(state)
    LOGGER.info("Loaded %s features, %s in current pool.", len(state.features), len(state.filtered))


def set_hovered(state: QuizState, feature_id: Optional[str]) -> None:
    state.hovered = feature_id


def _refilter(state: QuizState) -> None:
    state.filtered = filter_pool(state.features, state.regions)


# Transitions -------------------------------------------------------------


def can_start(state: QuizState) -> bool:
    return bool(state.filtered)


def start_quiz(state: QuizState, rng: random.Random | None = None, now: Optional[float] = None) -> bool:
    if not state.filtered:
        LOGGER.debug("start ignored: empty pool for regions %s", state.regions)
        return False

    state.quiz = build_quiz(state.filtered, state.max_count, rng=rng)
    state.status = QuizStatus.RUNNING
    state.index = 0
    state.correct = set()
    state.wrong = set()
    state.errors = 0
    state.skipped = 0
    state.started_at = time.time() if now is None else now
    state.finished_at = None
    state.settled = False
    state.run_mode = state.mode
    state.run_regions = tuple(state.regions)
    state.run_max_count = state.max_count
    LOGGER.info("Quiz started: mode=%s regions=%s questions=%s", state.mode.value, state.regions, len(state.quiz))
    return True


def answer(state: QuizState, feature_id: str, now: Optional[float] = None) -> Outcome:
    if state.status != QuizStatus.RUNNING:
        LOGGER.debug("answer ignored in status %s", state.status.value)
        return Outcome.IGNORED

    if feature_id in state.correct:
        return Outcome.IGNORED

    target = state.quiz[state.index]
    if feature_id == target.id:
        state.correct = state.correct | {feature_id}
        _advance(state, now)
        return Outcome.CORRECT

    state.wrong = state.wrong | {feature_id}
    state.errors += 1
    return Outcome.INCORRECT


def skip(state: QuizState, now: Optional[float] = None) -> Outcome:
    if state.status != QuizStatus.RUNNING:
        LOGGER.debug("skip ignored in status %s", state.status.value)
        return Outcome.IGNORED

    state.skipped += 1
    _advance(state, now)
    return Outcome.SKIPPED


def _advance(state: QuizState, now: Optional[float]) -> None:
    state.wrong = set()
    state.index += 1
    if state.index >= len(state.quiz):
        state.status = QuizStatus.FINISHED
        state.finished_at = time.time() if now is None else now
        LOGGER.info(
            "Quiz finished: correct=%s errors=%s skipped=%s",
            len(state.correct),
            state.errors,
            state.skipped,
        )


def reset_quiz_state(state: QuizState) -> None:
    """Abort or clear a run; mode, regions and count are kept."""
    state.status = QuizStatus.IDLE
    state.index = 0
    state.correct = set()
    state.wrong = set()
    state.errors = 0
    state.skipped = 0
    state.started_at = None
    state.finished_at = None
    state.settled = False
    state.run_mode = None
    state.run_regions = ()
    state.run_max_count = None


# Derived views -----------------------------------------------------------


def current_target(state: QuizState) -> Optional[CountryFeature]:
    if state.status != QuizStatus.RUNNING or state.index >= len(state.quiz):
        return None
    return state.quiz[state.index]


def progress_percent(state: QuizState) -> float:
    if not state.quiz:
        return 0.0
    return state.index / len(state.quiz) * 100


def visual_state(state: QuizState, feature_id: str) -> VisualState:
    if feature_id in state.correct:
        return VisualState.CORRECT
    if feature_id in state.wrong:
        return VisualState.WRONG
    if feature_id == state.hovered:
        return VisualState.HOVERED
    return VisualState.DEFAULT


def session_summary(state: QuizState, now: Optional[float] = None) -> Optional[SessionSummary]:
    if state.status != QuizStatus.FINISHED:
        return None
    return SessionSummary(
        created_at=time.time() if now is None else now,
        mode=state.run_mode or state.mode,
        regions=state.run_regions,
        count=len(state.quiz),
        correct=len(state.correct),
        errors=state.errors,
        skipped=state.skipped,
        duration_ms=int(round(elapsed_seconds(state) * 1000)),
    )
