from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from typestorm.core.config import Settings
from typestorm.core.input_processor import InputProcessor, KeyEvent
from typestorm.core.metrics import MetricsClock
from typestorm.core.phrases import PhraseSource
from typestorm.core.scheduling import Scheduler
from typestorm.core.session import SessionSnapshot, SessionState, new_session

logger = logging.getLogger(__name__)

Listener = Callable[[SessionSnapshot], None]


class SessionController:
    """Owns the current session and exposes the only ways to change it.

    Lifecycle::

        NotEngaged -> Engaged(Typing) -> Engaged(Completed)
        Engaged(Typing) -> NotEngaged            (pause)
        any -> Engaged(Typing) with fresh state  (reset_or_advance)

    Timers belong to the session that armed them and are cancelled when
    that session is replaced or the controller shuts down.
    """

    def __init__(
        self,
        phrase_source: PhraseSource,
        scheduler: Scheduler,
        clock: Callable[[], float] = time.monotonic,
        settings: Optional[Settings] = None,
        engaged: bool = False,
    ) -> None:
        self._phrases = phrase_source
        self._scheduler = scheduler
        self._clock = clock
        self._settings = settings or Settings()
        self._listeners: List[Listener] = []
        self._generation = 0
        self._closed = False

        self._state: SessionState
        self._processor: InputProcessor
        self._metrics: MetricsClock
        self._install(new_session(self._phrases, engaged=engaged, generation=self._generation))

    # ------------------------------------------------------------------
    # control boundary
    # ------------------------------------------------------------------

    def engage(self) -> None:
        """Start accepting keystrokes; progress is kept."""
        if self._closed or self._state.engaged:
            return
        self._state.engaged = True
        self._notify()

    def pause(self) -> None:
        """Stop accepting keystrokes without discarding progress."""
        if self._closed or not self._state.engaged:
            return
        self._state.engaged = False
        self._notify()

    def reset_or_advance(self) -> None:
        """Discard the current session and start a fresh one with a new phrase."""
        if self._closed:
            return
        self._teardown()
        self._generation += 1
        self._install(new_session(self._phrases, engaged=True, generation=self._generation))
        self._notify()

    def shutdown(self) -> None:
        """Cancel all timers; the controller ignores further input."""
        if self._closed:
            return
        self._teardown()
        self._closed = True
        self._state.engaged = False
        logger.debug("Controller shut down at session %d", self._generation)

    # ------------------------------------------------------------------
    # input boundary
    # ------------------------------------------------------------------

    def handle_key(self, event: Optional[KeyEvent]) -> bool:
        if self._closed:
            return False
        before = self._state.snapshot()
        accepted = self._processor.handle_key(event)
        if self._state.completed:
            self._metrics.stop()
        if self._state.snapshot() != before:
            self._notify()
        return accepted

    # ------------------------------------------------------------------
    # output boundary
    # ------------------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        return self._state.snapshot()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def metrics_running(self) -> bool:
        return self._metrics.running

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with a fresh snapshot after every committed change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _install(self, state: SessionState) -> None:
        self._state = state
        self._processor = InputProcessor(
            state,
            self._scheduler,
            self._clock,
            error_window_ms=self._settings.error_window_ms,
            on_change=self._notify,
        )
        self._metrics = MetricsClock(
            state,
            self._scheduler,
            self._clock,
            interval_ms=self._settings.tick_interval_ms,
            chars_per_word=self._settings.chars_per_word,
            on_change=self._notify,
        )
        self._metrics.start()

    def _teardown(self) -> None:
        self._processor.cancel()
        self._metrics.stop()

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self._state.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("Session listener %r failed", listener)
