from __future__ import annotations

import logging
import math
from typing import Callable, Optional

from typestorm.core.config import CHARS_PER_WORD, TICK_INTERVAL_MS
from typestorm.core.scheduling import Scheduler, TimerHandle
from typestorm.core.session import SessionState

logger = logging.getLogger(__name__)


def compute_wpm(
    typed_len: int,
    start_time: Optional[float],
    now: float,
    chars_per_word: int = CHARS_PER_WORD,
) -> int:
    """Words per minute since *start_time*: (chars / 5) / elapsed minutes.

    Returns 0 when the timer has not started, no time has elapsed, or the
    result is not a finite number.
    """
    if start_time is None:
        return 0
    elapsed_minutes = (now - start_time) / 60.0
    if elapsed_minutes <= 0:
        return 0
    wpm = (typed_len / chars_per_word) / elapsed_minutes
    if not math.isfinite(wpm):
        return 0
    return max(0, round(wpm))


class MetricsClock:
    """Periodically recomputes the live WPM of one session."""

    def __init__(
        self,
        state: SessionState,
        scheduler: Scheduler,
        clock: Callable[[], float],
        interval_ms: int = TICK_INTERVAL_MS,
        chars_per_word: int = CHARS_PER_WORD,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self._state = state
        self._scheduler = scheduler
        self._clock = clock
        self._interval_ms = interval_ms
        self._chars_per_word = chars_per_word
        self._on_change = on_change
        self._generation = state.generation
        self._timer: Optional[TimerHandle] = None

    @property
    def running(self) -> bool:
        return self._timer is not None and self._timer.active

    def start(self) -> None:
        if self.running or self._state.completed:
            return
        self._timer = self._scheduler.call_every(self._interval_ms, self.tick)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def tick(self) -> None:
        state = self._state
        if state.generation != self._generation or state.completed:
            # speed stays frozen at its last value
            self.stop()
            return
        if state.start_time is None:
            return
        speed = compute_wpm(len(state.typed), state.start_time, self._clock(), self._chars_per_word)
        if speed != state.speed:
            state.speed = speed
            if self._on_change is not None:
                self._on_change()
