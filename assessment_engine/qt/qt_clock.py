"""QTimer-backed countdown clock."""

from __future__ import annotations

from PySide6.QtCore import QObject, Qt, QTimer

from assessment_engine.constants.session_constants import TICK_INTERVAL_MS
from assessment_engine.core.services.clock import Clock


class QtClock(Clock):
    """Clock whose ticks are delivered by the Qt event loop.

    Ticks run on the thread owning the timer, so they are serialised with
    every other event handled there.
    """

    def __init__(self, interval_ms: int = TICK_INTERVAL_MS, parent: QObject | None = None) -> None:
        super().__init__()
        self._timer = QTimer(parent)
        self._timer.setInterval(interval_ms)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._emit_tick)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    def is_timer_active(self) -> bool:
        return self._timer.isActive()

    def _start_timer(self) -> None:
        if not self._timer.isActive():
            self._timer.start()

    def _stop_timer(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
