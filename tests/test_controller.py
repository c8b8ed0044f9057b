"""Tests for typestorm.core.controller – session lifecycle and snapshots."""

from __future__ import annotations

import logging
import random

import pytest

from typestorm.core.config import Settings
from typestorm.core.controller import SessionController
from typestorm.core.input_processor import KEY_BACKSPACE, KeyEvent
from typestorm.core.phrases import PhraseSource
from typestorm.core.scheduling import ManualScheduler
from typestorm.core.session import SessionSnapshot


def _controller(source: PhraseSource, scheduler: ManualScheduler, **kwargs) -> SessionController:
    return SessionController(source, scheduler, clock=scheduler.now, **kwargs)


def _type(ctrl: SessionController, text: str) -> None:
    for ch in text:
        ctrl.handle_key(KeyEvent.from_text(ch))


@pytest.fixture()
def ctrl(abc_source: PhraseSource, scheduler: ManualScheduler) -> SessionController:
    return _controller(abc_source, scheduler)


# ===========================================================================
# Initial state
# ===========================================================================

class TestInitial:
    def test_not_engaged_by_default(self, ctrl: SessionController):
        snap = ctrl.snapshot()
        assert snap.phrase == "abc"
        assert snap.engaged is False
        assert snap.typed == ""
        assert snap.generation == 0

    def test_engaged_at_construction(self, abc_source, scheduler):
        c = _controller(abc_source, scheduler, engaged=True)
        assert c.snapshot().engaged is True

    def test_metrics_running(self, ctrl: SessionController):
        assert ctrl.metrics_running is True

    def test_keys_ignored_before_engage(self, ctrl: SessionController):
        assert ctrl.handle_key(KeyEvent.from_text("a")) is False
        snap = ctrl.snapshot()
        assert snap.typed == ""
        assert snap.start_time is None

    def test_default_settings(self, ctrl: SessionController):
        assert ctrl.settings == Settings()


# ===========================================================================
# engage / pause
# ===========================================================================

class TestEngagePause:
    def test_engage_keeps_progress(self, ctrl: SessionController):
        ctrl.engage()
        _type(ctrl, "a")
        ctrl.pause()
        ctrl.engage()
        snap = ctrl.snapshot()
        assert snap.engaged is True
        assert snap.typed == "a"
        assert snap.phrase == "abc"

    def test_paused_ignores_keys(self, ctrl: SessionController):
        ctrl.engage()
        _type(ctrl, "a")
        ctrl.pause()
        _type(ctrl, "b")
        assert ctrl.snapshot().typed == "a"

    def test_engage_does_not_reset_start_time(self, ctrl: SessionController, scheduler):
        ctrl.engage()
        _type(ctrl, "a")
        start = ctrl.snapshot().start_time
        ctrl.pause()
        scheduler.advance(5_000)
        ctrl.engage()
        assert ctrl.snapshot().start_time == start


# ===========================================================================
# Typing through the controller
# ===========================================================================

class TestTyping:
    def test_full_session(self, ctrl: SessionController, scheduler: ManualScheduler):
        ctrl.engage()
        _type(ctrl, "a")
        assert ctrl.snapshot().start_time is not None
        scheduler.advance(200)
        _type(ctrl, "bc")
        snap = ctrl.snapshot()
        assert snap.completed is True
        assert snap.typed == "abc"
        assert ctrl.metrics_running is False

    def test_nothing_changes_after_completion(self, ctrl: SessionController):
        ctrl.engage()
        _type(ctrl, "abc")
        before = ctrl.snapshot()
        _type(ctrl, "abcx")
        ctrl.handle_key(KeyEvent(KEY_BACKSPACE))
        assert ctrl.snapshot() == before

    def test_error_signal_round_trip(self, ctrl: SessionController, scheduler: ManualScheduler):
        ctrl.engage()
        _type(ctrl, "ax")
        snap = ctrl.snapshot()
        assert snap.typed == "a"
        assert snap.error_signal is True
        scheduler.advance(300)
        assert ctrl.snapshot().error_signal is False

    def test_backspace_ignored(self, ctrl: SessionController):
        ctrl.engage()
        _type(ctrl, "a")
        ctrl.handle_key(KeyEvent(KEY_BACKSPACE))
        assert ctrl.snapshot().typed == "a"

    def test_speed_updates_live(self, scheduler: ManualScheduler):
        src = PhraseSource(["abcdefghij"])
        c = _controller(src, scheduler)
        c.engage()
        _type(c, "abcde")
        scheduler.advance(30_000)
        assert c.snapshot().speed == 2

    def test_speed_frozen_after_completion(self, scheduler: ManualScheduler):
        src = PhraseSource(["abcdefghij"])
        c = _controller(src, scheduler)
        c.engage()
        _type(c, "abcde")
        scheduler.advance(30_000)
        _type(c, "fghij")
        scheduler.advance(60_000)
        assert c.snapshot().speed == 2


# ===========================================================================
# reset_or_advance
# ===========================================================================

class TestResetOrAdvance:
    def test_fresh_state(self, ctrl: SessionController, scheduler: ManualScheduler):
        ctrl.engage()
        _type(ctrl, "ax")
        ctrl.reset_or_advance()
        snap = ctrl.snapshot()
        assert snap.typed == ""
        assert snap.completed is False
        assert snap.error_signal is False
        assert snap.engaged is True
        assert snap.start_time is None
        assert snap.speed == 0
        assert snap.mistakes == 0
        assert snap.generation == 1

    def test_from_not_engaged(self, ctrl: SessionController):
        ctrl.reset_or_advance()
        assert ctrl.snapshot().engaged is True

    def test_after_completion(self, ctrl: SessionController):
        ctrl.engage()
        _type(ctrl, "abc")
        ctrl.reset_or_advance()
        snap = ctrl.snapshot()
        assert snap.completed is False
        assert ctrl.metrics_running is True

    def test_phrase_from_pool(self, scheduler: ManualScheduler):
        pool = ["one", "two", "three"]
        c = _controller(PhraseSource(pool, rng=random.Random(5)), scheduler)
        for _ in range(20):
            c.reset_or_advance()
            assert c.snapshot().phrase in pool

    def test_stale_error_timer_does_not_touch_new_session(self, ctrl, scheduler):
        ctrl.engage()
        _type(ctrl, "ax")
        scheduler.advance(150)
        ctrl.reset_or_advance()
        _type(ctrl, "z")
        assert ctrl.snapshot().error_signal is True
        # the first session's timer was due here
        scheduler.advance(150)
        assert ctrl.snapshot().error_signal is True
        scheduler.advance(150)
        assert ctrl.snapshot().error_signal is False

    def test_old_timers_cancelled(self, ctrl: SessionController, scheduler: ManualScheduler):
        ctrl.engage()
        _type(ctrl, "ax")
        assert scheduler.pending() == 2
        ctrl.reset_or_advance()
        # only the new session's metrics tick remains
        assert scheduler.pending() == 1

    def test_old_progress_never_leaks(self, scheduler: ManualScheduler):
        src = PhraseSource(["abcdefghij"])
        c = _controller(src, scheduler)
        c.engage()
        _type(c, "abcde")
        scheduler.advance(1_000)
        c.reset_or_advance()
        scheduler.advance(10_000)
        snap = c.snapshot()
        assert snap.speed == 0
        assert snap.typed == ""


# ===========================================================================
# subscribe
# ===========================================================================

class TestSubscribe:
    def test_receives_snapshots(self, ctrl: SessionController):
        seen: list[SessionSnapshot] = []
        ctrl.subscribe(seen.append)
        ctrl.engage()
        _type(ctrl, "a")
        assert [s.engaged for s in seen] == [True, True]
        assert seen[-1].typed == "a"

    def test_error_clear_notifies(self, ctrl: SessionController, scheduler: ManualScheduler):
        seen: list[SessionSnapshot] = []
        ctrl.engage()
        ctrl.subscribe(seen.append)
        _type(ctrl, "x")
        scheduler.advance(300)
        assert [s.error_signal for s in seen] == [True, False]

    def test_ignored_key_does_not_notify(self, ctrl: SessionController):
        seen = []
        ctrl.subscribe(seen.append)
        _type(ctrl, "a")
        assert seen == []

    def test_unsubscribe(self, ctrl: SessionController):
        seen = []
        unsubscribe = ctrl.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        ctrl.engage()
        assert seen == []

    def test_failing_listener_is_logged(self, ctrl: SessionController, caplog: pytest.LogCaptureFixture):
        seen = []

        def boom(_snap):
            raise RuntimeError("render failed")

        ctrl.subscribe(boom)
        ctrl.subscribe(seen.append)
        with caplog.at_level(logging.ERROR, logger="typestorm.core.controller"):
            ctrl.engage()
        assert len(seen) == 1
        assert "listener" in caplog.text

    def test_reset_notifies_with_new_generation(self, ctrl: SessionController):
        seen: list[SessionSnapshot] = []
        ctrl.subscribe(seen.append)
        ctrl.reset_or_advance()
        assert seen[-1].generation == 1


# ===========================================================================
# shutdown
# ===========================================================================

class TestShutdown:
    def test_cancels_timers(self, ctrl: SessionController, scheduler: ManualScheduler):
        ctrl.engage()
        _type(ctrl, "x")
        ctrl.shutdown()
        assert scheduler.pending() == 0
        assert ctrl.metrics_running is False

    def test_ignores_input_and_controls(self, ctrl: SessionController):
        ctrl.engage()
        ctrl.shutdown()
        assert ctrl.handle_key(KeyEvent.from_text("a")) is False
        ctrl.engage()
        ctrl.reset_or_advance()
        snap = ctrl.snapshot()
        assert snap.engaged is False
        assert snap.typed == ""
        assert snap.generation == 0

    def test_idempotent(self, ctrl: SessionController):
        ctrl.shutdown()
        ctrl.shutdown()
