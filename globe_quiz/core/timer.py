from __future__ import annotations

import time
from typing import Optional

from .models import QuizState, QuizStatus


def elapsed_seconds(state: QuizState, now: Optional[float] = None) -> float:
    """Seconds since start; stops moving once the quiz has finished."""
    if state.started_at is None:
        return 0.0
    if state.status == QuizStatus.FINISHED and state.finished_at is not None:
        end = state.finished_at
    else:
        end = time.time() if now is None else now
    return max(0.0, end - state.started_at)


def format_duration(seconds: float) -> str:
    total = int(max(0.0, seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
