from __future__ import annotations

from typing import Callable, Optional


class HoverThrottle:
    """
    Coalesce pointer hover events to one state update per frame.

    ``push`` only remembers the latest target; ``flush`` (called once per
    frame) applies it if it differs from what was last applied.
    """

    def __init__(self, apply: Callable[[Optional[str]], None]) -> None:
        self._apply = apply
        self._pending: Optional[str] = None
        self._has_pending = False
        self._applied: Optional[str] = None

    @property
    def pending(self) -> bool:
        return self._has_pending

    def push(self, feature_id: Optional[str]) -> None:
        self._pending = feature_id
        self._has_pending = True

    def flush(self) -> bool:
        if not self._has_pending:
            return False
        target = self._pending
        self._pending = None
        self._has_pending = False
        if target == self._applied:
            return False
        self._applied = target
        self._apply(target)
        return True
