from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from typestorm.core.config import ERROR_WINDOW_MS
from typestorm.core.scheduling import Scheduler, TimerHandle
from typestorm.core.session import SessionState

logger = logging.getLogger(__name__)

KEY_BACKSPACE = "Backspace"
KEY_DELETE = "Delete"
KEY_SPACE = " "

# Hard mode: nothing already typed can be taken back.
CORRECTION_KEYS = frozenset({KEY_BACKSPACE, KEY_DELETE})


@dataclass(frozen=True)
class KeyEvent:
    """A raw key press: a single character or a named key such as ``Backspace``."""

    key: Optional[str]
    is_space: bool = False

    @classmethod
    def from_text(cls, text: Optional[str]) -> "KeyEvent":
        return cls(key=text, is_space=text == KEY_SPACE)

    @property
    def is_character(self) -> bool:
        return isinstance(self.key, str) and len(self.key) == 1

    @property
    def is_correction(self) -> bool:
        return self.key in CORRECTION_KEYS

    @property
    def suppress_default(self) -> bool:
        """Whether the host must not run its default action (Space scrolls, Backspace navigates)."""
        return self.is_space or self.is_correction


class InputProcessor:
    """Validates keystrokes for one session and applies them to its state."""

    def __init__(
        self,
        state: SessionState,
        scheduler: Scheduler,
        clock: Callable[[], float],
        error_window_ms: int = ERROR_WINDOW_MS,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self._state = state
        self._scheduler = scheduler
        self._clock = clock
        self._error_window_ms = error_window_ms
        self._on_change = on_change
        self._generation = state.generation
        self._error_timers: List[TimerHandle] = []

    def handle_key(self, event: Optional[KeyEvent]) -> bool:
        """Apply one key press. Returns True when a character was accepted."""
        state = self._state
        if event is None or not state.engaged or state.completed:
            return False
        if len(state.typed) >= len(state.phrase):
            return False
        if event.is_correction:
            logger.debug("Ignoring correction key %r", event.key)
            return False
        if not event.is_character:
            return False

        if not state.typed and state.start_time is None:
            state.start_time = self._clock()

        expected = state.phrase[len(state.typed)]
        if event.key == expected:
            state.typed += event.key
            state.completed = len(state.typed) == len(state.phrase)
            if state.completed:
                logger.info("Session %d completed", state.generation)
            return True

        state.error_signal = True
        state.mistakes += 1
        logger.debug("Rejected %r, expected %r", event.key, expected)
        self._arm_error_clear()
        return False

    def cancel(self) -> None:
        """Disarm every pending error-clear timer."""
        for timer in self._error_timers:
            timer.cancel()
        self._error_timers = []

    def _arm_error_clear(self) -> None:
        # one timer per rejection; a later rejection never postpones an earlier clear
        self._error_timers = [t for t in self._error_timers if t.active]
        self._error_timers.append(self._scheduler.call_later(self._error_window_ms, self._clear_error))

    def _clear_error(self) -> None:
        if self._state.generation != self._generation:
            return
        self._state.error_signal = False
        if self._on_change is not None:
            self._on_change()
