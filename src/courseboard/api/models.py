"""Pydantic models for REST API."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Course models


class CourseResponse(BaseModel):
    """Response model for a catalog course."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None
    category: str
    difficulty: str
    duration_hours: int | None
    rating: float
    total_ratings: int
    instructor_name: str | None
    topics: list[str]
    videos: list[dict[str, str]]
    total_enrollments: int
    is_active: bool
    points_value: int
    created_at: datetime
    updated_at: datetime


def course_to_response(course: Any) -> CourseResponse:
    """Convert a Course model to CourseResponse."""
    return CourseResponse.model_validate(course)


# Enrollment models


class EnrollmentCreate(BaseModel):
    """Request model for enrolling a user in a course."""

    user_id: str = Field(..., min_length=1, max_length=36)
    course_id: str = Field(..., min_length=1, max_length=36)


class VideoCompleteRequest(BaseModel):
    """Request model for marking a video as watched."""

    video_id: str = Field(..., min_length=1, max_length=255)


class SubmitTestRequest(BaseModel):
    """Request model for submitting a test score."""

    score: float = Field(..., ge=0, le=100, allow_inf_nan=False)


class EnrollmentResponse(BaseModel):
    """Response model for an enrollment."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    course_id: str
    progress: float
    status: str
    test_outcome: str
    test_completed: bool
    test_score: float | None
    videos_completed: list[str]
    enrolled_at: datetime
    completed_at: datetime | None
    last_accessed_at: datetime
    version: int


def enrollment_to_response(enrollment: Any) -> EnrollmentResponse:
    """Convert an Enrollment model to EnrollmentResponse."""
    return EnrollmentResponse.model_validate(enrollment)


class SubmitTestResponse(BaseModel):
    """Response model for a test submission."""

    enrollment: EnrollmentResponse
    passed: bool
    points_awarded: int


def submit_test_to_response(result: Any) -> SubmitTestResponse:
    """Convert a TestSubmissionResult to SubmitTestResponse."""
    return SubmitTestResponse(
        enrollment=enrollment_to_response(result.enrollment),
        passed=result.passed,
        points_awarded=result.points_awarded,
    )


# Interaction models


class InteractionCreate(BaseModel):
    """Request model for recording a user interaction."""

    user_id: str = Field(..., min_length=1, max_length=36)
    course_id: str = Field(..., min_length=1, max_length=36)
    interaction_type: str = Field(..., min_length=1, max_length=50)
    time_spent: int | None = Field(default=None, ge=0)


class InteractionResponse(BaseModel):
    """Response model for a recorded interaction."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    course_id: str
    interaction_type: str
    time_spent: int | None
    occurred_at: datetime


def interaction_to_response(interaction: Any) -> InteractionResponse:
    """Convert a UserInteraction model to InteractionResponse."""
    return InteractionResponse.model_validate(interaction)


# Recommendation models


class RecommendationResponse(BaseModel):
    """Response model for one recommended course."""

    model_config = ConfigDict(from_attributes=True)

    course: CourseResponse
    match_score: float


def recommendation_to_response(scored: Any) -> RecommendationResponse:
    """Convert a ScoredCourse to RecommendationResponse."""
    return RecommendationResponse(
        course=course_to_response(scored.course),
        match_score=scored.match_score,
    )


# Leaderboard & analytics models


class LeaderboardEntryResponse(BaseModel):
    """Response model for a leaderboard row."""

    model_config = ConfigDict(from_attributes=True)

    rank: int
    user_id: str
    display_name: str | None
    total_points: int
    courses_completed: int
    skill_level: str


def leaderboard_entry_to_response(entry: Any) -> LeaderboardEntryResponse:
    """Convert a LeaderboardEntry to LeaderboardEntryResponse."""
    return LeaderboardEntryResponse.model_validate(entry)


class UserAnalyticsResponse(BaseModel):
    """Response model for a user's learning statistics."""

    model_config = ConfigDict(from_attributes=True)

    total_courses: int
    completed_courses: int
    total_learning_hours: float
    average_score: int
    overall_progress: float
    achievements: int
    total_points: int


def user_analytics_to_response(analytics: Any) -> UserAnalyticsResponse:
    """Convert a UserAnalytics to UserAnalyticsResponse."""
    return UserAnalyticsResponse.model_validate(analytics)


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str
    version: str
