"""Countdown clock contract shared by every tick source."""

from __future__ import annotations

from collections.abc import Callable

from assessment_engine.core.errors import AlreadyArmedError


class Clock:
    """Emits one payload-free tick per elapsed second while armed.

    Subclasses provide the actual timer by implementing ``_start_timer`` and
    ``_stop_timer`` and call ``_emit_tick`` from their timer callback.
    """

    def __init__(self) -> None:
        self._armed: bool = False
        self._armed_for: int | None = None
        self._tick_handler: Callable[[], None] | None = None

    def set_tick_handler(self, handler: Callable[[], None] | None) -> None:
        self._tick_handler = handler

    def arm(self, total_seconds: int) -> None:
        if self._armed:
            raise AlreadyArmedError("Clock is already armed.")
        if total_seconds <= 0:
            raise ValueError("A clock must be armed for a positive number of seconds.")
        self._armed = True
        self._armed_for = total_seconds
        self._start_timer()

    def disarm(self) -> None:
        if not self._armed:
            return
        self._armed = False
        self._stop_timer()

    def is_armed(self) -> bool:
        return self._armed

    @property
    def armed_for(self) -> int | None:
        """Total seconds the clock was last armed for."""
        return self._armed_for

    def _emit_tick(self) -> None:
        # A timer event may already be queued when disarm() runs.
        if not self._armed or self._tick_handler is None:
            return
        self._tick_handler()

    def _start_timer(self) -> None:
        raise NotImplementedError

    def _stop_timer(self) -> None:
        raise NotImplementedError
