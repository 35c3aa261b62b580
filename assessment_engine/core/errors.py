"""Exception types raised by the assessment engine."""

from __future__ import annotations


class AssessmentEngineError(Exception):
    """Base class for every error raised by this package."""


# --- Validation errors: caller misuse, fail fast ---


class ValidationError(AssessmentEngineError):
    pass


class EmptyAssessmentError(ValidationError):
    """Raised when an attempt is started without any questions."""


class InvalidDurationError(ValidationError):
    """Raised when an attempt is started with a non-positive duration."""


class OutOfRangeError(ValidationError, IndexError):
    """Raised when jumping to a question index outside the assessment."""


class AlreadyArmedError(ValidationError):
    """Raised when arming a clock that is already ticking."""


class UnknownQuestionError(ValidationError, KeyError):
    pass


class UnknownOptionError(ValidationError, KeyError):
    pass


# --- Policy rejections: expected races, swallowed at the controller ---


class PolicyRejection(AssessmentEngineError):
    pass


class MutationAfterSubmitError(PolicyRejection):
    """Raised when answers are changed after the snapshot was frozen."""


class DuplicateSubmissionError(PolicyRejection):
    """Raised when a submission is requested while one is in flight or done."""


class IllegalTransitionError(PolicyRejection):
    """Raised when a submission command does not apply to the current status."""


# --- External collaborator failures ---


class GradingBackendError(AssessmentEngineError):
    """Raised when the grading backend is unreachable or rejects a submission."""


class ContentUnavailableError(AssessmentEngineError):
    """Raised when assessment content cannot be fetched or parsed."""


class AssessmentImportError(AssessmentEngineError):
    """Raised when an assessment definition file cannot be parsed."""
