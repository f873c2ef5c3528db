"""Recommendations package - Course ranking for a learner."""

from courseboard.recommendations.exceptions import InvalidLimitError, RecommendationError
from courseboard.recommendations.models import ScoredCourse, UserProfile
from courseboard.recommendations.scorer import DEFAULT_LIMIT, recommend
from courseboard.recommendations.service import RecommendationService

__all__ = [
    "DEFAULT_LIMIT",
    "InvalidLimitError",
    "RecommendationError",
    "RecommendationService",
    "ScoredCourse",
    "UserProfile",
    "recommend",
]
