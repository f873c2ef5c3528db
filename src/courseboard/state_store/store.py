"""StateStore - Main API for State Store operations."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Final

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from courseboard.state_store.database import Database
from courseboard.state_store.exceptions import (
    ConcurrencyConflictError,
    CourseNotFoundError,
    EnrollmentNotFoundError,
    StoreFailureError,
    UserExistsError,
    UserNotFoundError,
)
from courseboard.state_store.models import (
    DEFAULT_POINTS_VALUE,
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
    outcomes_for_status,
    utcnow,
)

logger = logging.getLogger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()


class StateStore:
    """Main API for State Store operations.

    Provides CRUD operations for Users, Courses, Enrollments and
    Interactions, plus the points ledger and leaderboard queries.
    """

    def __init__(self, db_path: str = "courseboard.db") -> None:
        """Initialize State Store with SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file
        """
        self._db = Database(db_path)
        self._db.create_tables()

    @property
    def database(self) -> Database:
        """The underlying Database connection manager."""
        return self._db

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    # --- User Operations ---

    def create_user(
        self,
        email: str,
        display_name: str | None = None,
        skill_level: SkillLevel | str = SkillLevel.BEGINNER,
        preferred_topics: Iterable[str] = (),
    ) -> User:
        """Create a new user.

        Args:
            email: Unique email address
            display_name: Name shown on the leaderboard
            skill_level: beginner, intermediate or advanced
            preferred_topics: Topics the user is interested in

        Returns:
            Created User object with generated ID and zero points

        Raises:
            UserExistsError: If a user with the same email already exists
        """
        with self._db.session_scope() as session:
            user = User(
                email=email,
                display_name=display_name,
                skill_level=SkillLevel(skill_level).value,
                preferred_topics=list(preferred_topics),
            )
            session.add(user)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise UserExistsError(f"User with email '{email}' already exists") from e
            session.refresh(user)
            return user

    def get_user(self, user_id: str) -> User:
        """Get user by ID.

        Raises:
            UserNotFoundError: If user doesn't exist
        """
        with self._db.session_scope() as session:
            return self._require_user(session, user_id)

    def add_user_points(
        self,
        user_id: str,
        delta: int,
        increment_courses_completed: bool = False,
    ) -> None:
        """Atomically add points to a user's total.

        Lifecycle awards go through update_enrollment() so they commit
        together with the enrollment change; this is the standalone form.

        Args:
            user_id: The user's unique ID
            delta: Points to add (must not be negative)
            increment_courses_completed: Also add one to courses_completed

        Raises:
            ValueError: If delta is negative
            UserNotFoundError: If user doesn't exist
        """
        with self._db.session_scope() as session:
            self._increment_user(session, user_id, delta, increment_courses_completed)
            session.commit()

    # --- Course Operations ---

    def create_course(
        self,
        title: str,
        category: str,
        difficulty: SkillLevel | str,
        description: str | None = None,
        topics: Iterable[str] = (),
        videos: Iterable[dict[str, str]] = (),
        rating: float = 0.0,
        total_enrollments: int = 0,
        points_value: int = DEFAULT_POINTS_VALUE,
        duration_hours: int | None = None,
        instructor_name: str | None = None,
        is_active: bool = True,
    ) -> Course:
        """Create a catalog course.

        Args:
            title: Course title
            category: Catalog category (e.g. "Technology")
            difficulty: beginner, intermediate or advanced
            description: Longer description (optional)
            topics: Topic tags used by the recommender
            videos: Ordered list of {"id", "title", "url"} mappings
            rating: Average rating, 0-5
            total_enrollments: Enrollment count shown in the catalog
            points_value: Base points awarded on completion
            duration_hours: Estimated length (optional)
            instructor_name: Instructor shown in the catalog (optional)
            is_active: Whether the course is listed

        Returns:
            Created Course object with generated ID
        """
        with self._db.session_scope() as session:
            course = Course(
                title=title,
                category=category,
                difficulty=SkillLevel(difficulty).value,
                description=description,
                topics=list(topics),
                videos=list(videos),
                rating=rating,
                total_enrollments=total_enrollments,
                points_value=points_value,
                duration_hours=duration_hours,
                instructor_name=instructor_name,
                is_active=is_active,
            )
            session.add(course)
            session.commit()
            session.refresh(course)
            return course

    def get_course(self, course_id: str) -> Course:
        """Get course by ID.

        Raises:
            CourseNotFoundError: If course doesn't exist
        """
        with self._db.session_scope() as session:
            course = session.get(Course, course_id)
            if course is None:
                raise CourseNotFoundError(f"Course with id '{course_id}' not found")
            return course

    def list_courses(
        self,
        category: str | None = None,
        difficulty: str | None = None,
        search: str | None = None,
        limit: int | None = None,
        offset: int = 0,
        include_inactive: bool = False,
    ) -> list[Course]:
        """List catalog courses with optional filters.

        Args:
            category: Filter by category (optional)
            difficulty: Filter by difficulty (optional)
            search: Case-insensitive substring of title or description (optional)
            limit: Max results (None = all)
            offset: Offset for pagination
            include_inactive: Also list courses that are not active

        Returns:
            List of courses, ordered by rating desc, then title and id
        """
        with self._db.session_scope() as session:
            stmt = select(Course)

            if not include_inactive:
                stmt = stmt.where(Course.is_active.is_(True))
            if category is not None:
                stmt = stmt.where(Course.category == category)
            if difficulty is not None:
                stmt = stmt.where(Course.difficulty == difficulty)
            if search:
                pattern = f"%{search.lower()}%"
                stmt = stmt.where(
                    or_(
                        Course.title.ilike(pattern),
                        Course.description.ilike(pattern),
                    )
                )

            stmt = stmt.order_by(Course.rating.desc(), Course.title, Course.id)
            if offset:
                stmt = stmt.offset(offset)
            if limit is not None:
                stmt = stmt.limit(limit)

            return list(session.execute(stmt).scalars().all())

    # --- Enrollment Operations ---

    def create_enrollment(self, user_id: str, course_id: str) -> Enrollment:
        """Create a new enrollment with no progress.

        Duplicate enrollments for the same user and course are not rejected.

        Args:
            user_id: The user's unique ID
            course_id: The course's unique ID

        Returns:
            Created Enrollment (not attempted, no videos completed)

        Raises:
            UserNotFoundError: If user doesn't exist
            CourseNotFoundError: If course doesn't exist
        """
        with self._db.session_scope() as session:
            self._require_user(session, user_id)
            if session.get(Course, course_id) is None:
                raise CourseNotFoundError(f"Course with id '{course_id}' not found")

            enrollment = Enrollment(user_id=user_id, course_id=course_id)
            session.add(enrollment)
            session.commit()
            session.refresh(enrollment)
            return enrollment

    def get_enrollment(self, enrollment_id: str) -> Enrollment:
        """Get enrollment by ID.

        Raises:
            EnrollmentNotFoundError: If enrollment doesn't exist
        """
        with self._db.session_scope() as session:
            return self._require_enrollment(session, enrollment_id)

    def list_user_enrollments(
        self,
        user_id: str,
        status: EnrollmentStatus | None = None,
    ) -> list[Enrollment]:
        """List a user's enrollments.

        Args:
            user_id: The user's unique ID
            status: Filter by derived status (optional)

        Returns:
            List of enrollments, most recently accessed first
        """
        with self._db.session_scope() as session:
            stmt = select(Enrollment).where(Enrollment.user_id == user_id)
            if status is not None:
                stmt = stmt.where(Enrollment.test_outcome.in_(outcomes_for_status(status)))
            stmt = stmt.order_by(Enrollment.last_accessed_at.desc(), Enrollment.id)
            return list(session.execute(stmt).scalars().all())

    def list_enrolled_course_ids(self, user_id: str) -> set[str]:
        """Return the ids of every course the user is enrolled in."""
        with self._db.session_scope() as session:
            stmt = select(Enrollment.course_id).where(Enrollment.user_id == user_id).distinct()
            return set(session.execute(stmt).scalars().all())

    def update_enrollment(
        self,
        enrollment_id: str,
        expected_version: int | None = None,
        videos_completed: list[str] | None = None,
        test_outcome: TestOutcome | None = None,
        test_score: float | None = None,
        completed_at: datetime | None | _Unset = UNSET,
        award: PointsAward | None = None,
    ) -> Enrollment:
        """Update enrollment fields. Only provided fields are updated.

        last_accessed_at is always bumped. The enrollment change, the points
        ledger entry and the user counters commit as one transaction.

        Args:
            enrollment_id: The enrollment's unique ID
            expected_version: Version the caller read; a mismatch is a conflict
            videos_completed: Full new list of completed video ids (optional)
            test_outcome: New test outcome (optional)
            test_score: New test score (optional)
            completed_at: New completion timestamp, None clears it (optional)
            award: Points to award with this change (optional)

        Returns:
            The updated Enrollment object

        Raises:
            EnrollmentNotFoundError: If enrollment doesn't exist
            ConcurrencyConflictError: If the enrollment changed since it was
                read, or the award was already claimed
            UserNotFoundError: If the award's user doesn't exist
        """
        with self._db.session_scope() as session:
            enrollment = self._require_enrollment(session, enrollment_id)

            if expected_version is not None and enrollment.version != expected_version:
                raise ConcurrencyConflictError(
                    f"Enrollment '{enrollment_id}' is at version {enrollment.version}, "
                    f"expected {expected_version}"
                )

            if videos_completed is not None:
                enrollment.videos_completed = list(videos_completed)
            if test_outcome is not None:
                enrollment.test_outcome = test_outcome.value
            if test_score is not None:
                enrollment.test_score = test_score
            if not isinstance(completed_at, _Unset):
                enrollment.completed_at = completed_at
            enrollment.last_accessed_at = utcnow()

            try:
                if award is not None:
                    self._record_award(session, enrollment_id, award)
                session.commit()
            except StaleDataError as e:
                session.rollback()
                raise ConcurrencyConflictError(
                    f"Enrollment '{enrollment_id}' was modified concurrently"
                ) from e
            except IntegrityError as e:
                session.rollback()
                if "UNIQUE constraint failed: points_ledger" in str(e.orig):
                    raise ConcurrencyConflictError(
                        f"Award {award!r} was already claimed for enrollment '{enrollment_id}'"
                    ) from e
                raise StoreFailureError(
                    f"Constraint violation updating enrollment '{enrollment_id}': {e.orig}"
                ) from e

            session.refresh(enrollment)
            return enrollment

    def list_awards(self, enrollment_id: str) -> list[PointsLedgerEntry]:
        """List the points ledger entries for an enrollment, oldest first."""
        with self._db.session_scope() as session:
            stmt = (
                select(PointsLedgerEntry)
                .where(PointsLedgerEntry.enrollment_id == enrollment_id)
                .order_by(PointsLedgerEntry.created_at, PointsLedgerEntry.id)
            )
            return list(session.execute(stmt).scalars().all())

    def has_award(self, enrollment_id: str, reason: str, reference: str) -> bool:
        """Check whether an award was already claimed for an enrollment."""
        with self._db.session_scope() as session:
            stmt = select(PointsLedgerEntry.id).where(
                PointsLedgerEntry.enrollment_id == enrollment_id,
                PointsLedgerEntry.reason == reason,
                PointsLedgerEntry.reference == reference,
            )
            return session.execute(stmt).first() is not None

    # --- Interaction Operations ---

    def record_interaction(
        self,
        user_id: str,
        course_id: str,
        interaction_type: str,
        time_spent: int | None = None,
    ) -> UserInteraction:
        """Append an interaction to the user's log.

        Args:
            user_id: The user's unique ID
            course_id: The course's unique ID
            interaction_type: view, enroll, like, complete, rate, share, ...
            time_spent: Dwell time in seconds (optional)

        Returns:
            Created UserInteraction

        Raises:
            UserNotFoundError: If user doesn't exist
            CourseNotFoundError: If course doesn't exist
        """
        with self._db.session_scope() as session:
            self._require_user(session, user_id)
            if session.get(Course, course_id) is None:
                raise CourseNotFoundError(f"Course with id '{course_id}' not found")

            interaction = UserInteraction(
                user_id=user_id,
                course_id=course_id,
                interaction_type=interaction_type,
                time_spent=time_spent,
            )
            session.add(interaction)
            session.commit()
            session.refresh(interaction)
            return interaction

    def list_interactions(self, user_id: str) -> list[UserInteraction]:
        """List a user's interactions, oldest first."""
        with self._db.session_scope() as session:
            stmt = (
                select(UserInteraction)
                .where(UserInteraction.user_id == user_id)
                .order_by(UserInteraction.occurred_at, UserInteraction.id)
            )
            return list(session.execute(stmt).scalars().all())

    # --- Leaderboard & Analytics ---

    def get_leaderboard(self, limit: int = 50) -> list[LeaderboardEntry]:
        """Get the top users by points.

        Args:
            limit: Max entries to return

        Returns:
            Entries ordered by total_points desc, then courses_completed desc
        """
        with self._db.session_scope() as session:
            stmt = (
                select(User)
                .order_by(
                    User.total_points.desc(),
                    User.courses_completed.desc(),
                    User.created_at,
                    User.id,
                )
                .limit(limit)
            )
            users = session.execute(stmt).scalars().all()
            return [
                LeaderboardEntry(
                    rank=rank,
                    user_id=user.id,
                    display_name=user.display_name,
                    total_points=user.total_points,
                    courses_completed=user.courses_completed,
                    skill_level=user.skill_level,
                )
                for rank, user in enumerate(users, start=1)
            ]

    def get_user_analytics(self, user_id: str) -> UserAnalytics:
        """Get aggregated learning stats for a user.

        Learning hours count one hour per completed video and half an hour
        per attempted test.

        Raises:
            UserNotFoundError: If user doesn't exist
        """
        user = self.get_user(user_id)
        enrollments = self.list_user_enrollments(user_id)

        total = len(enrollments)
        completed = sum(
            1 for e in enrollments if e.enrollment_status == EnrollmentStatus.COMPLETED
        )
        hours = sum(
            len(e.videos_completed) + (0.5 if e.test_completed else 0.0) for e in enrollments
        )
        scores = [
            e.test_score for e in enrollments if e.test_completed and e.test_score is not None
        ]
        average = int(sum(scores) / len(scores) + 0.5) if scores else 0

        return UserAnalytics(
            total_courses=total,
            completed_courses=completed,
            total_learning_hours=round(hours, 1),
            average_score=average,
            overall_progress=(completed / total) * 100 if total else 0.0,
            achievements=completed,
            total_points=user.total_points,
        )

    # --- Helpers ---

    def _require_user(self, session: Session, user_id: str) -> User:
        user = session.get(User, user_id)
        if user is None:
            raise UserNotFoundError(f"User with id '{user_id}' not found")
        return user

    def _require_enrollment(self, session: Session, enrollment_id: str) -> Enrollment:
        enrollment = session.get(Enrollment, enrollment_id)
        if enrollment is None:
            raise EnrollmentNotFoundError(f"Enrollment with id '{enrollment_id}' not found")
        return enrollment

    def _record_award(self, session: Session, enrollment_id: str, award: PointsAward) -> None:
        self._require_user(session, award.user_id)
        session.add(
            PointsLedgerEntry(
                user_id=award.user_id,
                enrollment_id=enrollment_id,
                reason=award.reason.value,
                reference=award.reference,
                points=award.points,
            )
        )
        self._increment_user(session, award.user_id, award.points, award.completes_course)
        logger.debug(
            "Awarded %d points to user %s (%s:%s)",
            award.points,
            award.user_id,
            award.reason.value,
            award.reference,
        )

    def _increment_user(
        self,
        session: Session,
        user_id: str,
        delta: int,
        increment_courses_completed: bool,
    ) -> None:
        if delta < 0:
            raise ValueError(f"Points delta must not be negative, got {delta}")

        # Executing the UPDATE autoflushes pending enrollment/ledger changes first
        result = session.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                total_points=User.total_points + delta,
                courses_completed=User.courses_completed
                + (1 if increment_courses_completed else 0),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise UserNotFoundError(f"User with id '{user_id}' not found")
