"""State machine gating the single submission of an attempt.

Manual path::

    IN_PROGRESS -> CONFIRM_PENDING -> SUBMITTING -> SUBMITTED
                        |                  |
                        +-> IN_PROGRESS    +-> FAILED -> IN_PROGRESS

Auto path (countdown expiry)::

    IN_PROGRESS -> SUBMITTING -> SUBMITTED
                        |
                        +-> FAILED (terminal)

The coordinator is the only component that talks to the grading backend.
The ``_in_flight`` flag, not the UI, decides whether a submission may start.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

from assessment_engine.core.errors import (
    DuplicateSubmissionError,
    GradingBackendError,
    IllegalTransitionError,
)
from assessment_engine.core.models import (
    AttemptStatus,
    GradingResult,
    SubmissionPayload,
    SubmissionTrigger,
)
from assessment_engine.core.services.answer_store import AnswerStore

logger = logging.getLogger(__name__)

_CLOSED_STATUSES = (AttemptStatus.SUBMITTING, AttemptStatus.SUBMITTED, AttemptStatus.FAILED)


class GradingBackend(Protocol):
    def submit_attempt(self, assessment_id: str, payload: SubmissionPayload) -> GradingResult:
        ...


class SubmissionRunner(Protocol):
    def run(
        self,
        job: Callable[[], Any],
        on_result: Callable[[Any], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        ...


class InlineSubmissionRunner:
    """Runs the backend call on the caller's stack and reports synchronously."""

    def run(
        self,
        job: Callable[[], Any],
        on_result: Callable[[Any], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        try:
            result = job()
        except Exception as exc:
            on_error(exc)
            return
        on_result(result)


class SubmissionCoordinator:
    """Owns the attempt status and the exactly-once submission guarantee."""

    def __init__(
        self,
        assessment_id: str,
        backend: GradingBackend,
        answer_store: AnswerStore,
        runner: SubmissionRunner | None = None,
        on_transition: Callable[[AttemptStatus], None] | None = None,
    ) -> None:
        self._assessment_id = assessment_id
        self._backend = backend
        self._answer_store = answer_store
        self._runner: SubmissionRunner = runner or InlineSubmissionRunner()
        self._on_transition = on_transition

        self._status: AttemptStatus = AttemptStatus.IN_PROGRESS
        self._in_flight: bool = False
        self._trigger: SubmissionTrigger | None = None
        self._result: GradingResult | None = None
        self._failure_reason: str | None = None
        self._submission_count: int = 0
        self._detached: bool = False

    # --- Read accessors ---

    @property
    def status(self) -> AttemptStatus:
        return self._status

    @property
    def trigger(self) -> SubmissionTrigger | None:
        """Trigger of the most recent submission, if any."""
        return self._trigger

    @property
    def result(self) -> GradingResult | None:
        return self._result

    @property
    def failure_reason(self) -> str | None:
        return self._failure_reason

    @property
    def submission_count(self) -> int:
        """Number of backend calls started over the attempt's lifetime."""
        return self._submission_count

    def is_in_flight(self) -> bool:
        return self._in_flight

    def is_terminal(self) -> bool:
        return self._status is AttemptStatus.SUBMITTED or (
            self._status is AttemptStatus.FAILED and self._trigger is SubmissionTrigger.AUTO
        )

    # --- Transitions ---

    def request_manual_submit(self) -> None:
        if self._status is not AttemptStatus.IN_PROGRESS:
            raise IllegalTransitionError(
                f"Cannot request submission while {self._status.name}."
            )
        self._answer_store.freeze()
        self._set_status(AttemptStatus.CONFIRM_PENDING)

    def cancel_confirm(self) -> None:
        if self._status is not AttemptStatus.CONFIRM_PENDING:
            raise IllegalTransitionError(
                f"Nothing to cancel while {self._status.name}."
            )
        self._answer_store.unfreeze()
        self._set_status(AttemptStatus.IN_PROGRESS)

    def confirm_submit(self, time_spent_seconds: int) -> None:
        self._guard_against_duplicate()
        if self._status is not AttemptStatus.CONFIRM_PENDING:
            raise IllegalTransitionError(
                f"Submission must be requested before it is confirmed (status {self._status.name})."
            )
        self._dispatch(SubmissionTrigger.MANUAL, time_spent_seconds)

    def auto_submit(self, time_spent_seconds: int) -> None:
        self._guard_against_duplicate()
        if self._status is not AttemptStatus.IN_PROGRESS:
            raise IllegalTransitionError(
                f"Auto-submit only applies to an attempt in progress (status {self._status.name})."
            )
        self._dispatch(SubmissionTrigger.AUTO, time_spent_seconds)

    def detach(self) -> None:
        """Stop reporting transitions; an outcome arriving later is logged and dropped."""
        self._detached = True
        self._on_transition = None

    # --- Internals ---

    def _guard_against_duplicate(self) -> None:
        if self._in_flight or self._status in _CLOSED_STATUSES:
            logger.debug("Rejected duplicate submission while %s", self._status.name)
            raise DuplicateSubmissionError(
                f"A submission is already {self._status.name.lower()}."
            )

    def _dispatch(self, trigger: SubmissionTrigger, time_spent_seconds: int) -> None:
        self._in_flight = True
        self._trigger = trigger
        self._failure_reason = None
        self._submission_count += 1
        self._answer_store.freeze()
        payload = SubmissionPayload(
            answers=self._answer_store.snapshot(),
            time_spent_seconds=max(0, time_spent_seconds),
        )
        logger.info(
            "Submitting attempt for assessment %s (%s, %d answered)",
            self._assessment_id,
            trigger.name.lower(),
            len(payload.answers),
        )
        try:
            self._set_status(AttemptStatus.SUBMITTING)
        finally:
            # The job is handed off even when a transition listener raises.
            self._runner.run(
                lambda: self._backend.submit_attempt(self._assessment_id, payload),
                self._handle_result,
                self._handle_error,
            )

    def _handle_result(self, result: GradingResult) -> None:
        self._in_flight = False
        if self._detached:
            logger.info("Dropped grading result for detached attempt %s", self._assessment_id)
            return
        self._result = result
        logger.info(
            "Assessment %s graded: %s/%s (%s)",
            self._assessment_id,
            result.score,
            result.total_points,
            result.grade,
        )
        self._set_status(AttemptStatus.SUBMITTED)

    def _handle_error(self, error: BaseException) -> None:
        self._in_flight = False
        if self._detached:
            logger.info(
                "Dropped submission failure for detached attempt %s: %s", self._assessment_id, error
            )
            return
        self._failure_reason = str(error) or type(error).__name__
        if isinstance(error, GradingBackendError):
            logger.warning("Submission for %s failed: %s", self._assessment_id, self._failure_reason)
        else:
            logger.error(
                "Unexpected error while submitting %s", self._assessment_id, exc_info=error
            )
        self._set_status(AttemptStatus.FAILED)

        if self._trigger is SubmissionTrigger.MANUAL:
            self._answer_store.unfreeze()
            self._set_status(AttemptStatus.IN_PROGRESS)

    def _set_status(self, status: AttemptStatus) -> None:
        self._status = status
        if self._on_transition is not None:
            self._on_transition(status)
