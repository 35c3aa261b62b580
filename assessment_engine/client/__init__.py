from .assessment_api import AssessmentApiClient

__all__ = ["AssessmentApiClient"]
