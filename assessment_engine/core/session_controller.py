"""Facade composing the clock, answers, navigation and submission of one attempt."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Protocol

from assessment_engine.constants.session_constants import SECONDS_PER_MINUTE
from assessment_engine.core.errors import (
    EmptyAssessmentError,
    InvalidDurationError,
    PolicyRejection,
    UnknownOptionError,
    UnknownQuestionError,
)
from assessment_engine.core.models import (
    Assessment,
    AttemptStatus,
    GradingResult,
    LoadedAssessment,
    Question,
    SessionEvent,
    SessionEventKind,
)
from assessment_engine.core.services.answer_store import AnswerStore
from assessment_engine.core.services.clock import Clock
from assessment_engine.core.services.navigation_cursor import NavigationCursor
from assessment_engine.core.services.submission_coordinator import (
    GradingBackend,
    SubmissionCoordinator,
    SubmissionRunner,
)
from assessment_engine.core.time_format import is_low_on_time

SessionListener = Callable[[SessionEvent], None]


class ContentProvider(Protocol):
    def fetch_assessment(self, assessment_id: str) -> LoadedAssessment:
        ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionController:
    """Owns one assessment attempt from start to a terminal outcome.

    Every state transition, tick and rejected command is reported to the
    registered listeners. The controller never formats or displays messages.
    """

    def __init__(
        self,
        backend: GradingBackend,
        clock: Clock,
        runner: SubmissionRunner | None = None,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._backend = backend
        self._clock = clock
        self._runner = runner
        self._now = now
        self._listeners: list[SessionListener] = []

        self._assessment: Assessment | None = None
        self._questions: list[Question] = []
        self._questions_by_id: dict[str, Question] = {}
        self._answers = AnswerStore()
        self._cursor: NavigationCursor | None = None
        self._coordinator: SubmissionCoordinator | None = None
        self._remaining_seconds: int = 0
        self._started_at: datetime | None = None
        self._previous_status: AttemptStatus | None = None
        self._disposed: bool = False
        self._owns_clock: bool = False

    # --- Lifecycle ---

    def start(self, assessment: Assessment, questions: list[Question]) -> None:
        if self._coordinator is not None or self._disposed:
            raise RuntimeError("An attempt controller can only be started once.")
        if not questions:
            raise EmptyAssessmentError(f"Assessment '{assessment.id}' has no questions.")
        if assessment.duration_minutes <= 0:
            raise InvalidDurationError(
                f"Assessment '{assessment.id}' has a non-positive duration."
            )

        total_seconds = assessment.duration_minutes * SECONDS_PER_MINUTE
        # Fails before any state changes while another attempt owns the clock.
        self._clock.arm(total_seconds)

        self._assessment = assessment
        self._questions = list(questions)
        self._questions_by_id = {question.id: question for question in self._questions}
        self._cursor = NavigationCursor(len(self._questions))
        self._coordinator = SubmissionCoordinator(
            assessment_id=assessment.id,
            backend=self._backend,
            answer_store=self._answers,
            runner=self._runner,
            on_transition=self._on_status_changed,
        )
        self._remaining_seconds = total_seconds
        self._started_at = self._now()
        self._clock.set_tick_handler(self.on_tick)
        self._owns_clock = True
        self._previous_status = AttemptStatus.IN_PROGRESS
        self._emit(SessionEventKind.STATUS_CHANGED)

    def start_from(self, provider: ContentProvider, assessment_id: str) -> LoadedAssessment:
        """Fetch content once and start the attempt with it."""
        loaded = provider.fetch_assessment(assessment_id)
        self.start(loaded.assessment, loaded.questions)
        return loaded

    def dispose(self) -> None:
        """Stop the countdown, drop late submission outcomes and reject any later command."""
        if self._disposed:
            return
        self._disposed = True
        self._answers.freeze()
        if self._coordinator is None:
            return
        self._coordinator.detach()
        self._release_clock()

    def on_tick(self) -> None:
        if self._disposed or self._coordinator is None or self._remaining_seconds <= 0:
            return
        self._remaining_seconds -= 1
        self._emit(SessionEventKind.TICK, remaining_seconds=self._remaining_seconds)
        if self._remaining_seconds == 0:
            self._expire()

    # --- Read accessors ---

    @property
    def assessment(self) -> Assessment | None:
        return self._assessment

    @property
    def questions(self) -> list[Question]:
        return list(self._questions)

    @property
    def question_count(self) -> int:
        return len(self._questions)

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def current_index(self) -> int:
        return self._require_cursor().current_index

    @property
    def current_question(self) -> Question:
        return self._questions[self.current_index]

    @property
    def status(self) -> AttemptStatus:
        return self._require_coordinator().status

    @property
    def result(self) -> GradingResult | None:
        return self._require_coordinator().result

    @property
    def failure_reason(self) -> str | None:
        return self._require_coordinator().failure_reason

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    @property
    def is_terminal(self) -> bool:
        return self._require_coordinator().is_terminal()

    @property
    def is_low_on_time(self) -> bool:
        if self._coordinator is None:
            return False
        return is_low_on_time(self._remaining_seconds)

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def answered_count(self) -> int:
        return self._answers.answered_count()

    def is_answered(self, question_id: str) -> bool:
        return self._answers.is_answered(question_id)

    def selected_options(self, question_id: str) -> frozenset[str]:
        return self._answers.selected(question_id)

    def elapsed_seconds(self) -> int:
        if self._started_at is None:
            return 0
        return max(0, int((self._now() - self._started_at).total_seconds()))

    # --- Listeners ---

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # --- Answer commands ---

    def select_answer(self, question_id: str, option_id: str) -> bool:
        question = self._questions_by_id.get(question_id)
        if question is None:
            raise UnknownQuestionError(question_id)
        if not question.has_option(option_id):
            raise UnknownOptionError(f"{option_id} is not an option of question {question_id}")
        if not self._accepts_commands("select_answer"):
            return False
        try:
            self._answers.select(question_id, option_id, question.question_type)
        except PolicyRejection as exc:
            self._reject("select_answer", exc)
            return False
        return True

    # --- Navigation commands ---

    def go_next(self) -> int:
        if not self._accepts_commands("go_next"):
            return self.current_index
        return self._require_cursor().next()

    def go_previous(self) -> int:
        if not self._accepts_commands("go_previous"):
            return self.current_index
        return self._require_cursor().previous()

    def jump_to_question(self, index: int) -> int:
        cursor = self._require_cursor()
        if not self._accepts_commands("jump_to_question"):
            return cursor.current_index
        return cursor.jump_to(index)

    # --- Submission commands ---

    def request_submit(self) -> bool:
        coordinator = self._require_coordinator()
        return self._submission_command("request_submit", coordinator.request_manual_submit)

    def confirm_submit(self) -> bool:
        coordinator = self._require_coordinator()
        accepted = self._submission_command(
            "confirm_submit", lambda: coordinator.confirm_submit(self.elapsed_seconds())
        )
        if coordinator.is_terminal():
            self._release_clock()
        return accepted

    def cancel_submit(self) -> bool:
        coordinator = self._require_coordinator()
        return self._submission_command("cancel_submit", coordinator.cancel_confirm)

    # --- Internals ---

    def _submission_command(self, action: str, command: Callable[[], None]) -> bool:
        if not self._accepts_commands(action):
            return False
        try:
            command()
        except PolicyRejection as exc:
            self._reject(action, exc)
            return False
        return True

    def _expire(self) -> None:
        coordinator = self._require_coordinator()
        if coordinator.status is AttemptStatus.CONFIRM_PENDING:
            coordinator.cancel_confirm()
        if coordinator.status is AttemptStatus.IN_PROGRESS:
            coordinator.auto_submit(self.elapsed_seconds())
        self._release_clock()

    def _on_status_changed(self, status: AttemptStatus) -> None:
        if self._disposed:
            return
        previous = self._previous_status
        self._previous_status = status
        self._emit(SessionEventKind.STATUS_CHANGED)

        coordinator = self._require_coordinator()
        if coordinator.is_terminal():
            self._release_clock()
        elif (
            previous is AttemptStatus.FAILED
            and status is AttemptStatus.IN_PROGRESS
            and self._remaining_seconds == 0
        ):
            # Manual submission failed after the countdown ran out.
            coordinator.auto_submit(self.elapsed_seconds())

    def _release_clock(self) -> None:
        # Once released the clock may already be armed by another attempt.
        if not self._owns_clock:
            return
        self._owns_clock = False
        self._clock.disarm()
        self._clock.set_tick_handler(None)

    def _accepts_commands(self, action: str) -> bool:
        if self._disposed:
            self._emit(
                SessionEventKind.ACTION_REJECTED,
                reason="Attempt has been disposed.",
                action=action,
            )
            return False
        return True

    def _reject(self, action: str, error: PolicyRejection) -> None:
        self._emit(SessionEventKind.ACTION_REJECTED, reason=str(error), action=action)

    def _emit(self, kind: SessionEventKind, reason: str | None = None, **details: object) -> None:
        coordinator = self._require_coordinator()
        status = coordinator.status
        event = SessionEvent(
            kind=kind,
            status=status,
            trigger=coordinator.trigger,
            result=coordinator.result if status is AttemptStatus.SUBMITTED else None,
            reason=reason if reason is not None else (
                coordinator.failure_reason if status is AttemptStatus.FAILED else None
            ),
            details=dict(details),
        )
        for listener in list(self._listeners):
            listener(event)

    def _require_coordinator(self) -> SubmissionCoordinator:
        if self._coordinator is None:
            raise RuntimeError("Attempt has not been started.")
        return self._coordinator

    def _require_cursor(self) -> NavigationCursor:
        if self._cursor is None:
            raise RuntimeError("Attempt has not been started.")
        return self._cursor
