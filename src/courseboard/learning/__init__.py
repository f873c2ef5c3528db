"""Learning package - Enrollment lifecycle and point awards."""

from courseboard.learning.exceptions import InvalidInputError, LearningError
from courseboard.learning.lifecycle import (
    PASS_THRESHOLD,
    PERFECT_SCORE_BONUS,
    VIDEO_POINTS,
    EnrollmentLifecycle,
)
from courseboard.learning.models import TestSubmissionResult

__all__ = [
    "PASS_THRESHOLD",
    "PERFECT_SCORE_BONUS",
    "VIDEO_POINTS",
    "EnrollmentLifecycle",
    "InvalidInputError",
    "LearningError",
    "TestSubmissionResult",
]
