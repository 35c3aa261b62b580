"""Load practice assessments from a human-friendly text file.

File format: a header block followed by question blocks, separated by blank
lines or '---'.

    TITLE: Algebra basics
    DURATION: 30            (minutes)

    Q: Question text. Additional lines until the next marker are treated as
       part of the question.
    A: First option text
    B: Second option text
    ...                     (two to eight options, lettered A-H)
    TYPE: SINGLE|MULTI      (optional, default SINGLE)
    POINTS: 2               (optional, default 1)
    IMAGE: https://...      (optional)

Question ids are ``q1``, ``q2``, ... in file order; option ids are the
question id plus the lower-case letter, e.g. ``q1-b``.
"""

from __future__ import annotations

from pathlib import Path

from assessment_engine.core.errors import AssessmentImportError, ContentUnavailableError
from assessment_engine.core.models import Assessment, LoadedAssessment, Option, Question, QuestionType

_OPTION_LETTERS = ("A", "B", "C", "D", "E", "F", "G", "H")
_HEADER_KEYS = ("TITLE:", "DURATION:")
_TYPE_VALUES = {"SINGLE": QuestionType.SINGLE_SELECT, "MULTI": QuestionType.MULTI_SELECT}


def load_assessment_from_file(file_path: Path, assessment_id: str | None = None) -> LoadedAssessment:
    text = file_path.read_text(encoding="utf-8")
    return parse_assessment_text(text, assessment_id or file_path.stem)


def parse_assessment_text(text: str, assessment_id: str) -> LoadedAssessment:
    blocks = _split_blocks(text)
    if not blocks or not _is_header(blocks[0]):
        raise AssessmentImportError("Assessment file must start with a TITLE/DURATION header.")

    title, duration = _parse_header(blocks[0])
    questions = [
        _parse_block(block, order) for order, block in enumerate(blocks[1:], start=1)
    ]
    if not questions:
        raise AssessmentImportError("Assessment file did not contain any questions.")

    assessment = Assessment(
        id=assessment_id,
        title=title,
        duration_minutes=duration,
        total_points=sum(q.points for q in questions),
        question_ids=tuple(q.id for q in questions),
    )
    return LoadedAssessment(assessment=assessment, questions=questions)


class FileAssessmentProvider:
    """Content provider serving ``<assessment_id>.txt`` files from a directory."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    def fetch_assessment(self, assessment_id: str) -> LoadedAssessment:
        path = self._directory / f"{assessment_id}.txt"
        if not path.is_file():
            raise ContentUnavailableError(f"No practice assessment named '{assessment_id}'.")
        return load_assessment_from_file(path, assessment_id)


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return blocks


def _is_header(block: str) -> bool:
    return any(line.strip().upper().startswith(_HEADER_KEYS) for line in block.splitlines())


def _parse_header(block: str) -> tuple[str, int]:
    title = ""
    duration: int | None = None
    for raw_line in block.splitlines():
        line = raw_line.strip()
        upper = line.upper()
        if upper.startswith("TITLE:"):
            title = line.split(":", 1)[1].strip()
        elif upper.startswith("DURATION:"):
            duration = _parse_positive_int(line, "DURATION")
        else:
            raise AssessmentImportError(f"Unknown header line: '{line}'.")
    if duration is None:
        raise AssessmentImportError("Header must define DURATION in minutes.")
    return title, duration


def _parse_block(block: str, order: int) -> Question:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    question_type = QuestionType.SINGLE_SELECT
    points = 1
    image_url: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("TYPE:"):
            raw_type = line.split(":", 1)[1].strip().upper()
            if raw_type not in _TYPE_VALUES:
                raise AssessmentImportError("TYPE must be SINGLE or MULTI.")
            question_type = _TYPE_VALUES[raw_type]
            current_section = None
            continue

        if upper.startswith("POINTS:"):
            points = _parse_positive_int(line, "POINTS")
            current_section = None
            continue

        if upper.startswith("IMAGE:"):
            image_url = line.split(":", 1)[1].strip() or None
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in _OPTION_LETTERS:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise AssessmentImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise AssessmentImportError(f"Question {order}: text missing (Q: ...)")

    letters = [letter for letter in _OPTION_LETTERS if letter in options]
    if len(letters) < 2:
        raise AssessmentImportError(f"Question {order}: at least two options are required.")
    if letters != list(_OPTION_LETTERS[: len(letters)]):
        raise AssessmentImportError(f"Question {order}: options must be lettered consecutively from A.")

    question_id = f"q{order}"
    option_list = []
    for letter in letters:
        option_text = options[letter].strip()
        if not option_text:
            raise AssessmentImportError(f"Question {order}: option {letter} text cannot be empty.")
        option_list.append(Option(id=f"{question_id}-{letter.lower()}", text=option_text))

    return Question(
        id=question_id,
        order=order,
        text=question_text,
        points=points,
        question_type=question_type,
        options=tuple(option_list),
        image_url=image_url,
    )


def _parse_positive_int(line: str, key: str) -> int:
    raw_value = line.split(":", 1)[1].strip()
    try:
        parsed_value = int(raw_value)
    except ValueError as exc:
        raise AssessmentImportError(f"{key} must be an integer.") from exc
    if parsed_value <= 0:
        raise AssessmentImportError(f"{key} must be a positive integer.")
    return parsed_value
