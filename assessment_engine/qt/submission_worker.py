"""Runs the grading backend call off the event-loop thread."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot


class _SubmissionRelay(QObject):
    """Lives on the caller's thread; worker emissions arrive as queued calls."""

    finished = Signal(object)
    failed = Signal(object)

    def __init__(
        self,
        on_result: Callable[[Any], None],
        on_error: Callable[[BaseException], None],
        on_done: Callable[[_SubmissionRelay], None],
    ) -> None:
        super().__init__()
        self._on_result = on_result
        self._on_error = on_error
        self._on_done = on_done
        self.finished.connect(self._deliver_result)
        self.failed.connect(self._deliver_error)

    @Slot(object)
    def _deliver_result(self, result: Any) -> None:
        self._on_done(self)
        self._on_result(result)

    @Slot(object)
    def _deliver_error(self, error: BaseException) -> None:
        self._on_done(self)
        self._on_error(error)


class _SubmissionTask(QRunnable):
    def __init__(self, job: Callable[[], Any], relay: _SubmissionRelay) -> None:
        super().__init__()
        self._job = job
        self._relay = relay

    def run(self) -> None:
        try:
            result = self._job()
        except Exception as exc:
            self._relay.failed.emit(exc)
            return
        self._relay.finished.emit(result)


class QtSubmissionRunner:
    """Submission runner backed by a ``QThreadPool``.

    The job runs on a pool thread; its outcome is delivered back on the
    thread that called ``run`` once that thread's event loop processes it.
    """

    def __init__(self, pool: QThreadPool | None = None) -> None:
        self._pool = pool or QThreadPool.globalInstance()
        self._pending: set[_SubmissionRelay] = set()

    def run(
        self,
        job: Callable[[], Any],
        on_result: Callable[[Any], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        relay = _SubmissionRelay(on_result, on_error, self._pending.discard)
        self._pending.add(relay)
        self._pool.start(_SubmissionTask(job, relay))

    def pending_count(self) -> int:
        return len(self._pending)

    def wait_for_done(self, timeout_ms: int = -1) -> bool:
        return self._pool.waitForDone(timeout_ms)
