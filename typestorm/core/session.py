from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from typestorm.core.phrases import PhraseSource

logger = logging.getLogger(__name__)

CHAR_TYPED = "typed"
CHAR_CURRENT = "current"
CHAR_PENDING = "pending"


@dataclass
class SessionState:
    """Mutable state of one typing session.

    Owned by :class:`~typestorm.core.controller.SessionController`; only the
    input processor and the metrics clock bound to this instance write to it.
    """

    phrase: str
    typed: str = ""
    start_time: Optional[float] = None
    speed: int = 0
    engaged: bool = False
    completed: bool = False
    error_signal: bool = False
    mistakes: int = 0
    generation: int = 0

    @property
    def position(self) -> int:
        """Index of the next expected character."""
        return len(self.typed)

    def expected_char(self) -> Optional[str]:
        if self.position >= len(self.phrase):
            return None
        return self.phrase[self.position]

    def snapshot(self) -> "SessionSnapshot":
        return SessionSnapshot(
            phrase=self.phrase,
            typed=self.typed,
            start_time=self.start_time,
            speed=self.speed,
            engaged=self.engaged,
            completed=self.completed,
            error_signal=self.error_signal,
            mistakes=self.mistakes,
            generation=self.generation,
        )


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session handed to the presentation layer."""

    phrase: str
    typed: str
    start_time: Optional[float]
    speed: int
    engaged: bool
    completed: bool
    error_signal: bool
    mistakes: int
    generation: int

    @property
    def started(self) -> bool:
        return self.start_time is not None

    @property
    def expected_char(self) -> Optional[str]:
        if len(self.typed) >= len(self.phrase):
            return None
        return self.phrase[len(self.typed)]

    @property
    def remaining(self) -> str:
        return self.phrase[len(self.typed):]

    @property
    def progress(self) -> float:
        """Fraction of the phrase typed, 0.0 to 1.0."""
        if not self.phrase:
            return 0.0
        return len(self.typed) / len(self.phrase)

    def char_states(self) -> List[str]:
        """Per-index render state: typed, current or pending."""
        pos = len(self.typed)
        states = []
        for i in range(len(self.phrase)):
            if i < pos:
                states.append(CHAR_TYPED)
            elif i == pos:
                states.append(CHAR_CURRENT)
            else:
                states.append(CHAR_PENDING)
        return states


def new_session(source: PhraseSource, engaged: bool, generation: int = 0) -> SessionState:
    """Create a fresh session with a randomly selected phrase."""
    state = SessionState(phrase=source.select_phrase(), engaged=engaged, generation=generation)
    logger.info("New session %d (%d chars, engaged=%s)", generation, len(state.phrase), engaged)
    return state
