"""Shared pytest fixtures for assessment engine tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from assessment_engine.core.errors import GradingBackendError
from assessment_engine.core.models import (
    Assessment,
    GradingResult,
    Option,
    Question,
    QuestionType,
    SubmissionPayload,
)
from assessment_engine.core.services.clock import Clock
from assessment_engine.core.session_controller import SessionController


class FakeClock(Clock):
    """Clock driven by the test instead of a real timer."""

    def __init__(self) -> None:
        super().__init__()
        self.start_calls = 0
        self.stop_calls = 0

    def _start_timer(self) -> None:
        self.start_calls += 1

    def _stop_timer(self) -> None:
        self.stop_calls += 1

    def advance(self, ticks: int = 1) -> None:
        for _ in range(ticks):
            self._emit_tick()


class FakeGradingBackend:
    """Records submissions; replays queued outcomes, defaulting to ``result``."""

    def __init__(self, result: GradingResult | None = None) -> None:
        self.result = result or GradingResult(
            score=7, total_points=10, percentage=70, passed=True, grade="B"
        )
        self.outcomes: list[GradingResult | Exception] = []
        self.calls: list[tuple[str, SubmissionPayload]] = []

    def fail_next(self, message: str = "Network request failed") -> None:
        self.outcomes.append(GradingBackendError(message))

    def submit_attempt(self, assessment_id: str, payload: SubmissionPayload) -> GradingResult:
        self.calls.append((assessment_id, payload))
        if self.outcomes:
            outcome = self.outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        return self.result


class DeferredRunner:
    """Holds submission jobs until the test completes them."""

    def __init__(self) -> None:
        self.jobs: list[tuple] = []

    def run(self, job, on_result, on_error) -> None:
        self.jobs.append((job, on_result, on_error))

    def complete_next(self) -> None:
        job, on_result, on_error = self.jobs.pop(0)
        try:
            result = job()
        except Exception as exc:
            on_error(exc)
            return
        on_result(result)


class FakeNow:
    def __init__(self) -> None:
        self.current = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: int) -> None:
        self.current += timedelta(seconds=seconds)


def _options(question_id: str, *letters: str) -> tuple[Option, ...]:
    return tuple(Option(id=f"{question_id}-{letter}", text=f"Option {letter.upper()}") for letter in letters)


@pytest.fixture
def questions() -> list[Question]:
    return [
        Question(
            id="q1",
            order=1,
            text="What is the value of x in 2x + 5 = 13?",
            points=3,
            question_type=QuestionType.SINGLE_SELECT,
            options=_options("q1", "a", "b", "c", "d"),
        ),
        Question(
            id="q2",
            order=2,
            text="Which of these are prime numbers?",
            points=4,
            question_type=QuestionType.MULTI_SELECT,
            options=_options("q2", "a", "b", "c", "d"),
        ),
        Question(
            id="q3",
            order=3,
            text="A linear equation has degree one.",
            points=3,
            question_type=QuestionType.SINGLE_SELECT,
            options=_options("q3", "a", "b"),
        ),
    ]


@pytest.fixture
def assessment(questions: list[Question]) -> Assessment:
    return Assessment(
        id="assessment-1",
        title="Mathematics Quiz - Algebra Basics",
        duration_minutes=1,
        total_points=10,
        question_ids=tuple(q.id for q in questions),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> FakeGradingBackend:
    return FakeGradingBackend()


@pytest.fixture
def now() -> FakeNow:
    return FakeNow()


@pytest.fixture
def events():
    return []


@pytest.fixture
def controller(backend, clock, now, assessment, questions, events) -> SessionController:
    session = SessionController(backend=backend, clock=clock, now=now)
    session.add_listener(events.append)
    session.start(assessment, questions)
    yield session
    session.dispose()


@pytest.fixture
def deferred_runner() -> DeferredRunner:
    return DeferredRunner()


@pytest.fixture(scope="session")
def qt_app():
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
