"""Domain models for a timed assessment attempt."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class QuestionType(Enum):
    """How selecting an option mutates a question's answer set."""

    SINGLE_SELECT = "single-select"
    MULTI_SELECT = "multi-select"

    @classmethod
    def from_wire(cls, value: str) -> QuestionType:
        """Map the REST ``question_type`` value onto a selection rule."""
        if value.upper() == "MULTIPLE_CHOICE":
            return cls.MULTI_SELECT
        return cls.SINGLE_SELECT


class AttemptStatus(Enum):
    IN_PROGRESS = auto()
    CONFIRM_PENDING = auto()
    SUBMITTING = auto()
    SUBMITTED = auto()
    FAILED = auto()


class SubmissionTrigger(Enum):
    MANUAL = auto()
    AUTO = auto()


class SessionEventKind(Enum):
    STATUS_CHANGED = auto()
    ACTION_REJECTED = auto()
    TICK = auto()


@dataclass(frozen=True, slots=True)
class Option:
    id: str
    text: str


@dataclass(frozen=True, slots=True)
class Question:
    """A question as presented during an attempt. ``order`` is 1-based."""

    id: str
    order: int
    text: str
    points: int
    question_type: QuestionType
    options: tuple[Option, ...]
    image_url: str | None = None

    def has_option(self, option_id: str) -> bool:
        return any(option.id == option_id for option in self.options)


@dataclass(frozen=True, slots=True)
class Assessment:
    """Assessment metadata; ``duration_minutes`` bounds the attempt."""

    id: str
    title: str
    duration_minutes: int
    total_points: int
    question_ids: tuple[str, ...] = ()
    passing_score: float | None = None
    instructions: str | None = None


@dataclass(frozen=True, slots=True)
class LoadedAssessment:
    """Content provider result: the assessment plus its ordered questions."""

    assessment: Assessment
    questions: list[Question]


@dataclass(frozen=True, slots=True)
class GradingResult:
    """Outcome reported by the grading backend. Never computed locally."""

    score: float
    total_points: float
    percentage: float
    passed: bool
    grade: str


@dataclass(frozen=True, slots=True)
class SubmissionPayload:
    """Frozen answer snapshot handed to the grading backend."""

    answers: dict[str, list[str]]
    time_spent_seconds: int


@dataclass(frozen=True, slots=True)
class SessionEvent:
    """Notification emitted by the session controller to its listeners."""

    kind: SessionEventKind
    status: AttemptStatus
    trigger: SubmissionTrigger | None = None
    result: GradingResult | None = None
    reason: str | None = None
    details: dict[str, object] = field(default_factory=dict)
