"""REST API for Courseboard."""

from courseboard.api.app import app, create_app
from courseboard.api.models import (
    APIResponse,
    CourseResponse,
    EnrollmentResponse,
    RecommendationResponse,
    SubmitTestResponse,
)

__all__ = [
    "APIResponse",
    "CourseResponse",
    "EnrollmentResponse",
    "RecommendationResponse",
    "SubmitTestResponse",
    "app",
    "create_app",
]
