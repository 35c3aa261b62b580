"""Parsing of plain-text practice assessments."""

from pathlib import Path

import pytest

from assessment_engine.core.assessment_importer import (
    FileAssessmentProvider,
    load_assessment_from_file,
    parse_assessment_text,
)
from assessment_engine.core.errors import AssessmentImportError, ContentUnavailableError
from assessment_engine.core.models import AttemptStatus, QuestionType
from assessment_engine.core.session_controller import SessionController

SAMPLE = """\
TITLE: Algebra basics
DURATION: 30

Q: What is the value of x in 2x + 5 = 13?
A: 3
B: 4
C: 5
POINTS: 2

---

Q: Which of these are prime?
Pick every prime number.
A: 2
B: 4
C: 7
TYPE: MULTI
POINTS: 3
IMAGE: https://example.com/primes.png
"""


def test_parse_sample_assessment():
    loaded = parse_assessment_text(SAMPLE, "algebra")

    assert loaded.assessment.id == "algebra"
    assert loaded.assessment.title == "Algebra basics"
    assert loaded.assessment.duration_minutes == 30
    assert loaded.assessment.total_points == 5
    assert loaded.assessment.question_ids == ("q1", "q2")

    first, second = loaded.questions
    assert first.question_type is QuestionType.SINGLE_SELECT
    assert [o.id for o in first.options] == ["q1-a", "q1-b", "q1-c"]
    assert second.text == "Which of these are prime?\nPick every prime number."
    assert second.question_type is QuestionType.MULTI_SELECT
    assert second.order == 2
    assert second.image_url == "https://example.com/primes.png"


def test_missing_header_is_rejected():
    with pytest.raises(AssessmentImportError, match="header"):
        parse_assessment_text("Q: Question?\nA: yes\nB: no\n", "x")


def test_missing_duration_is_rejected():
    with pytest.raises(AssessmentImportError, match="DURATION"):
        parse_assessment_text("TITLE: No duration\n\nQ: Q?\nA: a\nB: b\n", "x")


def test_header_without_questions_is_rejected():
    with pytest.raises(AssessmentImportError, match="any questions"):
        parse_assessment_text("TITLE: Empty\nDURATION: 5\n", "x")


@pytest.mark.parametrize(
    "block, message",
    [
        ("Q: Only one option\nA: lonely", "two options"),
        ("Q: Gap\nA: first\nC: third", "consecutively"),
        ("Q: Bad type\nA: a\nB: b\nTYPE: ESSAY", "SINGLE or MULTI"),
        ("Q: Bad points\nA: a\nB: b\nPOINTS: 0", "positive"),
        ("A: a\nB: b", "text missing"),
        ("stray text", "outside of a known section"),
    ],
)
def test_invalid_question_blocks(block, message):
    with pytest.raises(AssessmentImportError, match=message):
        parse_assessment_text(f"TITLE: T\nDURATION: 5\n\n{block}\n", "x")


def test_file_provider_loads_by_id(tmp_path: Path):
    (tmp_path / "algebra.txt").write_text(SAMPLE, encoding="utf-8")
    provider = FileAssessmentProvider(tmp_path)

    loaded = provider.fetch_assessment("algebra")
    assert loaded.assessment.id == "algebra"
    assert len(loaded.questions) == 2

    with pytest.raises(ContentUnavailableError):
        provider.fetch_assessment("missing")


def test_load_from_file_uses_stem_as_id(tmp_path: Path):
    path = tmp_path / "practice-1.txt"
    path.write_text(SAMPLE, encoding="utf-8")

    assert load_assessment_from_file(path).assessment.id == "practice-1"


def test_controller_starts_from_file_provider(tmp_path: Path, backend, clock):
    (tmp_path / "algebra.txt").write_text(SAMPLE, encoding="utf-8")
    session = SessionController(backend=backend, clock=clock)

    session.start_from(FileAssessmentProvider(tmp_path), "algebra")

    assert session.status is AttemptStatus.IN_PROGRESS
    assert session.remaining_seconds == 30 * 60
    assert session.question_count == 2
    session.dispose()
