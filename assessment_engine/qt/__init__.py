"""PySide6 adapters driving the assessment engine from a Qt event loop."""

from .qt_clock import QtClock
from .submission_worker import QtSubmissionRunner

__all__ = ["QtClock", "QtSubmissionRunner"]
