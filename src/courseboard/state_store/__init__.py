"""State Store - Persistent storage for users, courses, enrollments and points."""

from courseboard.state_store.exceptions import (
    ConcurrencyConflictError,
    CourseNotFoundError,
    EnrollmentNotFoundError,
    NotFoundError,
    StateStoreError,
    StoreFailureError,
    UserExistsError,
    UserNotFoundError,
)
from courseboard.state_store.models import (
    AwardReason,
    Course,
    Enrollment,
    EnrollmentStatus,
    LeaderboardEntry,
    PointsAward,
    PointsLedgerEntry,
    SkillLevel,
    TestOutcome,
    User,
    UserAnalytics,
    UserInteraction,
)
from courseboard.state_store.store import StateStore

__all__ = [
    "AwardReason",
    "ConcurrencyConflictError",
    "Course",
    "CourseNotFoundError",
    "Enrollment",
    "EnrollmentNotFoundError",
    "EnrollmentStatus",
    "LeaderboardEntry",
    "NotFoundError",
    "PointsAward",
    "PointsLedgerEntry",
    "SkillLevel",
    "StateStore",
    "StateStoreError",
    "StoreFailureError",
    "TestOutcome",
    "User",
    "UserAnalytics",
    "UserExistsError",
    "UserInteraction",
    "UserNotFoundError",
]
