"""EnrollmentLifecycle - Enrollment state transitions and point awards."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from courseboard.learning.exceptions import InvalidInputError
from courseboard.learning.models import TestSubmissionResult
from courseboard.state_store import AwardReason, PointsAward, TestOutcome
from courseboard.state_store.models import utcnow

if TYPE_CHECKING:
    from courseboard.state_store import Enrollment, StateStore

logger = logging.getLogger(__name__)

PASS_THRESHOLD = 70.0
VIDEO_POINTS = 25
PERFECT_SCORE_BONUS = 20
PERFECT_SCORE = 100.0

COURSE_AWARD_REFERENCE = "course"
MAX_VIDEO_ID_LENGTH = 255


class EnrollmentLifecycle:
    """Drives enrollments through their lifecycle and awards points.

    Every mutation reads the enrollment, computes the transition and
    commits it with the version it read, so a concurrent writer on the
    same enrollment surfaces as ConcurrencyConflictError rather than a
    lost update. Point awards commit in the same transaction as the
    enrollment change that earns them.

    State machine::

        active    --mark_video_complete-->   active     (progress unchanged)
        active    --submit_test(>=70)-->     completed  (points awarded once)
        active    --submit_test(<70)-->      active     (progress 75)
        completed --submit_test(any)-->      re-evaluated (retake)
    """

    def __init__(self, state_store: StateStore) -> None:
        """Initialize the lifecycle manager.

        Args:
            state_store: StateStore instance for enrollment persistence.
        """
        self.state_store = state_store

    def enroll(self, user_id: str, course_id: str) -> Enrollment:
        """Enroll a user in a course.

        Duplicate enrollments are not rejected.

        Args:
            user_id: The user's unique ID.
            course_id: The course's unique ID.

        Returns:
            The new Enrollment (progress 0, active, no videos, no test).

        Raises:
            InvalidInputError: If an id is empty.
            UserNotFoundError: If the user doesn't exist.
            CourseNotFoundError: If the course doesn't exist.
        """
        _require_id("user_id", user_id)
        _require_id("course_id", course_id)

        enrollment = self.state_store.create_enrollment(user_id, course_id)
        logger.info(
            "User %s enrolled in course %s (enrollment %s)", user_id, course_id, enrollment.id
        )
        return enrollment

    def mark_video_complete(self, enrollment_id: str, video_id: str) -> Enrollment:
        """Record that a video was watched.

        The first completion of a video awards VIDEO_POINTS to the enrolled
        user; marking it again only touches last_accessed_at. Progress and
        status are never changed here.

        Args:
            enrollment_id: The enrollment's unique ID.
            video_id: Opaque video id (not checked against the catalog).

        Returns:
            The updated Enrollment.

        Raises:
            InvalidInputError: If the video id is blank or too long.
            EnrollmentNotFoundError: If the enrollment doesn't exist.
            ConcurrencyConflictError: If the enrollment changed concurrently.
        """
        _require_id("enrollment_id", enrollment_id)
        _validate_video_id(video_id)

        enrollment = self.state_store.get_enrollment(enrollment_id)

        if video_id in enrollment.videos_completed:
            logger.debug("Video %s already completed on enrollment %s", video_id, enrollment_id)
            return self.state_store.update_enrollment(
                enrollment_id, expected_version=enrollment.version
            )

        award = PointsAward(
            user_id=enrollment.user_id,
            reason=AwardReason.VIDEO_COMPLETED,
            reference=video_id,
            points=VIDEO_POINTS,
        )
        updated = self.state_store.update_enrollment(
            enrollment_id,
            expected_version=enrollment.version,
            videos_completed=[*enrollment.videos_completed, video_id],
            award=award,
        )
        logger.info(
            "Video %s completed on enrollment %s (+%d points to user %s)",
            video_id,
            enrollment_id,
            VIDEO_POINTS,
            enrollment.user_id,
        )
        return updated

    def submit_test(self, enrollment_id: str, score: float) -> TestSubmissionResult:
        """Submit the course test score.

        A score of PASS_THRESHOLD or more completes the course; anything
        lower leaves it active at 75% progress. Resubmission is a retake and
        overwrites the previous outcome. Completion points (the course's
        points_value, plus PERFECT_SCORE_BONUS for a perfect score) are
        awarded only on the first transition to completed.

        Args:
            enrollment_id: The enrollment's unique ID.
            score: Percentage correct, 0-100.

        Returns:
            TestSubmissionResult with the enrollment, pass flag and points.

        Raises:
            InvalidInputError: If the score is not a number in [0, 100].
            EnrollmentNotFoundError: If the enrollment doesn't exist.
            CourseNotFoundError: If the enrollment's course doesn't exist.
            ConcurrencyConflictError: If the enrollment changed concurrently.
        """
        _require_id("enrollment_id", enrollment_id)
        score = _validate_score(score)

        enrollment = self.state_store.get_enrollment(enrollment_id)
        passed = score >= PASS_THRESHOLD
        was_passed = enrollment.outcome == TestOutcome.PASSED

        award: PointsAward | None = None
        if passed:
            outcome = TestOutcome.PASSED
            completed_at = (
                enrollment.completed_at
                if was_passed and enrollment.completed_at is not None
                else utcnow()
            )
            if not was_passed and not self.state_store.has_award(
                enrollment_id, AwardReason.COURSE_COMPLETED.value, COURSE_AWARD_REFERENCE
            ):
                award = self._completion_award(enrollment, score)
        else:
            outcome = TestOutcome.FAILED
            completed_at = None

        updated = self.state_store.update_enrollment(
            enrollment_id,
            expected_version=enrollment.version,
            test_outcome=outcome,
            test_score=score,
            completed_at=completed_at,
            award=award,
        )
        points_awarded = award.points if award is not None else 0

        logger.info(
            "Test submitted on enrollment %s: score=%.1f passed=%s points=%d",
            enrollment_id,
            score,
            passed,
            points_awarded,
        )
        return TestSubmissionResult(
            enrollment=updated, passed=passed, points_awarded=points_awarded
        )

    def _completion_award(self, enrollment: Enrollment, score: float) -> PointsAward:
        course = self.state_store.get_course(enrollment.course_id)
        bonus = PERFECT_SCORE_BONUS if score == PERFECT_SCORE else 0
        return PointsAward(
            user_id=enrollment.user_id,
            reason=AwardReason.COURSE_COMPLETED,
            reference=COURSE_AWARD_REFERENCE,
            points=course.points_value + bonus,
            completes_course=True,
        )


def _require_id(name: str, value: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{name} must be a non-empty string")


def _validate_video_id(video_id: str) -> None:
    _require_id("video_id", video_id)
    if len(video_id) > MAX_VIDEO_ID_LENGTH:
        raise InvalidInputError(f"video_id must be at most {MAX_VIDEO_ID_LENGTH} characters")


def _validate_score(score: float) -> float:
    # bool is an int subclass
    if isinstance(score, bool) or not isinstance(score, int | float):
        raise InvalidInputError(f"score must be a number, got {type(score).__name__}")
    value = float(score)
    if not math.isfinite(value) or not 0.0 <= value <= 100.0:
        raise InvalidInputError(f"score must be between 0 and 100, got {score}")
    return value
