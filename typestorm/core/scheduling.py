"""Timer abstraction shared by the session core and its hosts.

The core never sleeps or spawns threads. It asks a :class:`Scheduler` for
one-shot and repeating callbacks; the Qt window provides one backed by
``QTimer`` and tests drive :class:`ManualScheduler` in virtual time.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class ManualTimer:
    """Handle returned by :class:`ManualScheduler`."""

    def __init__(self, callback: Callable[[], None], interval_ms: Optional[int]) -> None:
        self._callback = callback
        self._interval_ms = interval_ms
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    @property
    def repeating(self) -> bool:
        return self._interval_ms is not None

    def cancel(self) -> None:
        self._active = False


class ManualScheduler:
    """Deterministic scheduler with a virtual millisecond clock.

    ``now()`` returns seconds so it can stand in for ``time.monotonic``.
    """

    def __init__(self, start_ms: int = 0) -> None:
        self._now_ms = start_ms
        self._seq = itertools.count()
        self._queue: List[Tuple[int, int, ManualTimer]] = []

    @property
    def now_ms(self) -> int:
        return self._now_ms

    def now(self) -> float:
        return self._now_ms / 1000.0

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(callback, None)
        self._push(self._now_ms + max(0, int(delay_ms)), timer)
        return timer

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> ManualTimer:
        interval = max(1, int(interval_ms))
        timer = ManualTimer(callback, interval)
        self._push(self._now_ms + interval, timer)
        return timer

    def pending(self) -> int:
        """Number of armed timers."""
        return sum(1 for _, _, t in self._queue if t.active)

    def advance(self, ms: int) -> None:
        """Move the clock forward, firing due callbacks in deadline order."""
        target = self._now_ms + max(0, int(ms))
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if not timer.active:
                continue
            self._now_ms = due
            if timer.repeating:
                self._push(due + timer._interval_ms, timer)
            else:
                timer.cancel()
            timer._callback()
        self._now_ms = target

    def _push(self, due_ms: int, timer: ManualTimer) -> None:
        heapq.heappush(self._queue, (due_ms, next(self._seq), timer))
