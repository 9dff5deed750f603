from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .models import Outcome

LOGGER = logging.getLogger(__name__)


class SoundCue(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    SKIP = "skip"
    COMPLETE = "complete"


SOUND_FILES: Dict[SoundCue, str] = {
    SoundCue.CORRECT: "correct-answer.mp3",
    SoundCue.INCORRECT: "incorrect-answer.mp3",
    SoundCue.SKIP: "incorrect-answer.mp3",
    SoundCue.COMPLETE: "game-complete.mp3",
}


def cues_for(outcome: Outcome, finished: bool = False) -> List[SoundCue]:
    cues: List[SoundCue] = []
    if outcome == Outcome.CORRECT:
        cues.append(SoundCue.CORRECT)
    elif outcome == Outcome.INCORRECT:
        cues.append(SoundCue.INCORRECT)
    elif outcome == Outcome.SKIPPED:
        cues.append(SoundCue.SKIP)
    if finished and outcome != Outcome.IGNORED:
        cues.append(SoundCue.COMPLETE)
    return cues


class SoundBoard:
    """Fire-and-forget playback; a failing player never reaches the caller."""

    def __init__(self, sound_dir: Path, player: Callable[[Path], None]) -> None:
        self.sound_dir = sound_dir
        self._player = player

    def path_for(self, cue: SoundCue) -> Optional[Path]:
        path = self.sound_dir / SOUND_FILES[cue]
        return path if path.exists() else None

    def play(self, cue: SoundCue) -> None:
        path = self.path_for(cue)
        if path is None:
            LOGGER.debug("No sound file for %s", cue.value)
            return
        try:
            self._player(path)
        except Exception as exc:
            LOGGER.warning("Failed to play %s: %s", path.name, exc)
