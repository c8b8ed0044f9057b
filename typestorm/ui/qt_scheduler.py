from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer


class QtTimerHandle:
    """Cancellable wrapper around a single ``QTimer``."""

    def __init__(self, timer: QTimer) -> None:
        self._timer: Optional[QTimer] = timer

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None


class QtScheduler:
    """Scheduler running callbacks on the Qt event loop."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        return self._make(delay_ms, callback, single_shot=True)

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        return self._make(interval_ms, callback, single_shot=False)

    def _make(self, ms: int, callback: Callable[[], None], single_shot: bool) -> QtTimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(single_shot)
        timer.setInterval(max(0, int(ms)))
        timer.timeout.connect(callback)
        timer.start()
        return QtTimerHandle(timer)
