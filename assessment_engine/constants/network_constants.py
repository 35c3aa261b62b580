"""Network configuration constants for the assessment API."""

import os

DEFAULT_API_BASE_URL: str = os.getenv("ASSESSMENT_API_BASE_URL", "http://localhost:1000/api/v1")
DEFAULT_TIMEOUT_SECONDS: float = 10.0
ASSESSMENT_QUESTIONS_PATH: str = "/students/assessments/{assessment_id}/questions"
ASSESSMENT_SUBMIT_PATH: str = "/students/assessments/{assessment_id}/submit"
