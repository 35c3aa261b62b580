"""HTTP client for the assessment content and grading endpoints."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from assessment_engine.constants.network_constants import (
    ASSESSMENT_QUESTIONS_PATH,
    ASSESSMENT_SUBMIT_PATH,
    DEFAULT_API_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
)
from assessment_engine.core.errors import ContentUnavailableError, GradingBackendError
from assessment_engine.core.models import (
    Assessment,
    GradingResult,
    LoadedAssessment,
    Option,
    Question,
    QuestionType,
    SubmissionPayload,
)

logger = logging.getLogger(__name__)


class AssessmentApiClient:
    """Thin wrapper around the student assessment REST API.

    Serves both as the content provider (``fetch_assessment``) and as the
    grading backend (``submit_attempt``) of a session controller.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> AssessmentApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ── content ───────────────────────────────────────────────────────────

    def fetch_assessment(self, assessment_id: str) -> LoadedAssessment:
        path = ASSESSMENT_QUESTIONS_PATH.format(assessment_id=assessment_id)
        try:
            r = self._http.get(path)
            r.raise_for_status()
            body = r.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ContentUnavailableError(
                f"Could not load assessment {assessment_id}: {exc}"
            ) from exc

        data = _unwrap(body, ContentUnavailableError)
        try:
            loaded = _parse_loaded_assessment(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise ContentUnavailableError(
                f"Malformed assessment payload for {assessment_id}: {exc}"
            ) from exc
        logger.info("Loaded assessment %s with %d questions", assessment_id, len(loaded.questions))
        return loaded

    # ── grading ───────────────────────────────────────────────────────────

    def submit_attempt(self, assessment_id: str, payload: SubmissionPayload) -> GradingResult:
        path = ASSESSMENT_SUBMIT_PATH.format(assessment_id=assessment_id)
        try:
            r = self._http.post(path, json=_serialize_payload(payload))
            r.raise_for_status()
            body = r.json()
        except httpx.HTTPStatusError as exc:
            raise GradingBackendError(
                f"Grading service responded with {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise GradingBackendError(f"Grading service unreachable: {exc}") from exc

        data = _unwrap(body, GradingBackendError)
        try:
            return _parse_grading_result(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise GradingBackendError(f"Malformed grading response: {exc}") from exc


def _unwrap(body: Any, error_type: type[Exception]) -> dict[str, Any]:
    """Return the ``data`` member of a ``{success, message, data}`` envelope."""
    if not isinstance(body, dict):
        raise error_type("Unexpected response body")
    if not body.get("success", False):
        raise error_type(body.get("message") or "Request was not successful")
    data = body.get("data")
    if data is None:
        # Some endpoints return the payload at the top level.
        data = {k: v for k, v in body.items() if k not in ("success", "message", "statusCode")}
    if not isinstance(data, dict):
        raise error_type("Unexpected response data")
    return data


def _parse_loaded_assessment(data: dict[str, Any]) -> LoadedAssessment:
    raw_questions = sorted(_records(data.get("questions"), "questions"), key=lambda q: q.get("order", 0))
    questions = [_parse_question(raw, position) for position, raw in enumerate(raw_questions, start=1)]

    raw_assessment = data["assessment"]
    if not isinstance(raw_assessment, dict):
        raise TypeError("assessment must be an object")
    total_points = raw_assessment.get("total_points")
    if total_points is None:
        total_points = data.get("total_points", sum(q.points for q in questions))

    assessment = Assessment(
        id=str(raw_assessment["id"]),
        title=raw_assessment.get("title", ""),
        duration_minutes=int(raw_assessment["duration"]),
        total_points=int(total_points),
        question_ids=tuple(q.id for q in questions),
        passing_score=raw_assessment.get("passing_score"),
        instructions=raw_assessment.get("instructions"),
    )
    return LoadedAssessment(assessment=assessment, questions=questions)


def _parse_question(raw: dict[str, Any], position: int) -> Question:
    options = tuple(
        Option(id=str(option["id"]), text=option.get("option_text") or option.get("text", ""))
        for option in sorted(_records(raw.get("options"), "options"), key=lambda o: o.get("order", 0))
    )
    points = int(raw.get("points", 1))
    if points <= 0:
        raise ValueError(f"question {raw.get('id')} has non-positive points")
    return Question(
        id=str(raw["id"]),
        order=int(raw.get("order", position)),
        text=raw["question_text"],
        points=points,
        question_type=QuestionType.from_wire(raw.get("question_type", "")),
        options=options,
        image_url=raw.get("question_image") or raw.get("image_url"),
    )


def _records(value: Any, field: str) -> list[dict[str, Any]]:
    """Return a JSON array of objects, rejecting any other shape."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise TypeError(f"{field} must be a list of objects")
    return value


def _serialize_payload(payload: SubmissionPayload) -> dict[str, Any]:
    return {
        "answers": [
            {"question_id": question_id, "selected_options": options}
            for question_id, options in payload.answers.items()
        ],
        "time_spent_seconds": payload.time_spent_seconds,
    }


def _parse_grading_result(data: dict[str, Any]) -> GradingResult:
    score = data["score"] if "score" in data else data["total_score"]
    grade = data["grade"] if "grade" in data else data.get("grade_letter", "")
    return GradingResult(
        score=score,
        total_points=data["total_points"],
        percentage=data["percentage"],
        passed=bool(data["passed"]),
        grade=grade,
    )
