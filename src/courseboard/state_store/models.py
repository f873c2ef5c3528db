"""SQLAlchemy models for State Store."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


class SkillLevel(StrEnum):
    """Learner skill level, also used as course difficulty."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class EnrollmentStatus(StrEnum):
    """Enrollment status enum (derived from TestOutcome)."""

    ACTIVE = "active"
    COMPLETED = "completed"


class TestOutcome(StrEnum):
    """Outcome of the course test - source of truth for progress and status."""

    __test__ = False

    NOT_ATTEMPTED = "not_attempted"
    FAILED = "failed"
    PASSED = "passed"


class AwardReason(StrEnum):
    """Why points were added to a user's total."""

    VIDEO_COMPLETED = "video_completed"
    COURSE_COMPLETED = "course_completed"


# progress, status and test_completed for each test outcome
_OUTCOME_VIEW: dict[TestOutcome, tuple[float, EnrollmentStatus, bool]] = {
    TestOutcome.NOT_ATTEMPTED: (0.0, EnrollmentStatus.ACTIVE, False),
    TestOutcome.FAILED: (75.0, EnrollmentStatus.ACTIVE, True),
    TestOutcome.PASSED: (100.0, EnrollmentStatus.COMPLETED, True),
}


def outcomes_for_status(status: EnrollmentStatus) -> list[str]:
    """Return the test outcomes that map to the given status."""
    return [outcome.value for outcome, view in _OUTCOME_VIEW.items() if view[1] == status]


DEFAULT_POINTS_VALUE = 100


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (SQLite drops tzinfo)."""
    return datetime.now(UTC).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class User(Base):
    """User model - learner profile and leaderboard counters."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    skill_level: Mapped[str] = mapped_column(String(20), nullable=False)
    preferred_topics: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    total_points: Mapped[int] = mapped_column(Integer, nullable=False)
    courses_completed: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    enrollments: Mapped[list[Enrollment]] = relationship("Enrollment", back_populates="user")

    def __init__(
        self,
        email: str,
        id: str | None = None,
        display_name: str | None = None,
        skill_level: str = SkillLevel.BEGINNER.value,
        preferred_topics: list[str] | None = None,
        total_points: int = 0,
        courses_completed: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.email = email
        self.display_name = display_name
        self.skill_level = skill_level
        self.preferred_topics = list(dict.fromkeys(preferred_topics or []))
        self.total_points = total_points
        self.courses_completed = courses_completed

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, email={self.email!r}, total_points={self.total_points!r})>"


class Course(Base):
    """Course model - catalog entry. Read-only for the lifecycle."""

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    difficulty: Mapped[str] = mapped_column(String(20), nullable=False)
    duration_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False)
    total_ratings: Mapped[int] = mapped_column(Integer, nullable=False)
    instructor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    topics: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    videos: Mapped[list[dict[str, str]]] = mapped_column(JSON, nullable=False)
    total_enrollments: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False)
    points_value: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    def __init__(
        self,
        title: str,
        category: str,
        difficulty: str,
        id: str | None = None,
        description: str | None = None,
        duration_hours: int | None = None,
        rating: float = 0.0,
        total_ratings: int = 0,
        instructor_name: str | None = None,
        topics: list[str] | None = None,
        videos: list[dict[str, str]] | None = None,
        total_enrollments: int = 0,
        is_active: bool = True,
        points_value: int = DEFAULT_POINTS_VALUE,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.title = title
        self.category = category
        self.difficulty = difficulty
        self.description = description
        self.duration_hours = duration_hours
        self.rating = rating
        self.total_ratings = total_ratings
        self.instructor_name = instructor_name
        self.topics = list(dict.fromkeys(topics or []))
        self.videos = [dict(v) for v in videos or []]
        self.total_enrollments = total_enrollments
        self.is_active = is_active
        self.points_value = points_value

    @property
    def video_ids(self) -> list[str]:
        """Ids of the course videos, in playback order."""
        return [v["id"] for v in self.videos if "id" in v]

    def __repr__(self) -> str:
        return f"<Course(id={self.id!r}, title={self.title!r}, difficulty={self.difficulty!r})>"


class Enrollment(Base):
    """Enrollment model - a user's progress through one course.

    ``test_outcome`` is the only stored completion state; ``progress``,
    ``status`` and ``test_completed`` are derived from it so they can never
    drift apart. ``version`` is checked and bumped by the ORM on every
    UPDATE (optimistic concurrency).
    """

    __tablename__ = "enrollments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    course_id: Mapped[str] = mapped_column(String(36), ForeignKey("courses.id"), nullable=False)
    test_outcome: Mapped[str] = mapped_column(String(20), nullable=False)
    test_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    videos_completed: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    enrolled_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    last_accessed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    user: Mapped[User] = relationship("User", back_populates="enrollments")

    def __init__(
        self,
        user_id: str,
        course_id: str,
        id: str | None = None,
        test_outcome: str | None = None,
        test_score: float | None = None,
        videos_completed: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        now = utcnow()
        self.id = id if id is not None else generate_uuid()
        self.user_id = user_id
        self.course_id = course_id
        self.test_outcome = (
            test_outcome if test_outcome is not None else TestOutcome.NOT_ATTEMPTED.value
        )
        self.test_score = test_score
        self.videos_completed = list(videos_completed or [])
        self.enrolled_at = now
        self.last_accessed_at = now

    @property
    def outcome(self) -> TestOutcome:
        """Get test_outcome as TestOutcome enum."""
        return TestOutcome(self.test_outcome)

    @property
    def progress(self) -> float:
        """Completion percentage: 0, 75 after a failed test, 100 once passed."""
        return _OUTCOME_VIEW[self.outcome][0]

    @property
    def status(self) -> str:
        """Enrollment status string, ``completed`` only when the test is passed."""
        return _OUTCOME_VIEW[self.outcome][1].value

    @property
    def enrollment_status(self) -> EnrollmentStatus:
        """Get status as EnrollmentStatus enum."""
        return _OUTCOME_VIEW[self.outcome][1]

    @property
    def test_completed(self) -> bool:
        """Whether a test score has been submitted."""
        return _OUTCOME_VIEW[self.outcome][2]

    def __repr__(self) -> str:
        return (
            f"<Enrollment(id={self.id!r}, user_id={self.user_id!r}, "
            f"course_id={self.course_id!r}, test_outcome={self.test_outcome!r})>"
        )


class UserInteraction(Base):
    """User interaction model - append-only signal log for recommendations."""

    __tablename__ = "user_interactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    course_id: Mapped[str] = mapped_column(String(36), ForeignKey("courses.id"), nullable=False)
    interaction_type: Mapped[str] = mapped_column(String(50), nullable=False)
    time_spent: Mapped[int | None] = mapped_column(Integer, nullable=True)
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __init__(
        self,
        user_id: str,
        course_id: str,
        interaction_type: str,
        id: str | None = None,
        time_spent: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.user_id = user_id
        self.course_id = course_id
        self.interaction_type = interaction_type
        self.time_spent = time_spent

    def __repr__(self) -> str:
        return (
            f"<UserInteraction(user_id={self.user_id!r}, course_id={self.course_id!r}, "
            f"interaction_type={self.interaction_type!r})>"
        )


class PointsLedgerEntry(Base):
    """Points ledger model - one row per point award.

    The unique constraint makes each award (a video, or the course itself)
    claimable once per enrollment.
    """

    __tablename__ = "points_ledger"
    __table_args__ = (
        UniqueConstraint("enrollment_id", "reason", "reference", name="uq_points_award"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    enrollment_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("enrollments.id"), nullable=False
    )
    reason: Mapped[str] = mapped_column(String(30), nullable=False)
    reference: Mapped[str] = mapped_column(String(255), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __init__(
        self,
        user_id: str,
        enrollment_id: str,
        reason: str,
        reference: str,
        points: int,
        id: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.user_id = user_id
        self.enrollment_id = enrollment_id
        self.reason = reason
        self.reference = reference
        self.points = points

    def __repr__(self) -> str:
        return (
            f"<PointsLedgerEntry(enrollment_id={self.enrollment_id!r}, "
            f"reason={self.reason!r}, points={self.points!r})>"
        )


@dataclass
class PointsAward:
    """Points to add to a user together with an enrollment change.

    Attributes:
        user_id: User receiving the points.
        reason: Why the points are awarded.
        reference: What was completed (video id, or ``"course"``).
        points: Points to add (non-negative).
        completes_course: Whether to also increment ``courses_completed``.
    """

    user_id: str
    reason: AwardReason
    reference: str
    points: int
    completes_course: bool = False


@dataclass
class LeaderboardEntry:
    """One row of the points leaderboard."""

    rank: int
    user_id: str
    display_name: str | None
    total_points: int
    courses_completed: int
    skill_level: str


@dataclass
class UserAnalytics:
    """Aggregated learning statistics for one user."""

    total_courses: int
    completed_courses: int
    total_learning_hours: float
    average_score: int
    overall_progress: float
    achievements: int
    total_points: int
