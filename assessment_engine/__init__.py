"""Timed assessment attempt engine."""

from assessment_engine.core.session_controller import SessionController

__all__ = ["SessionController"]
