"""Enrollment lifecycle endpoints."""

from fastapi import APIRouter, status

from courseboard.api.dependencies import LifecycleDep, StateStoreDep
from courseboard.api.models import (
    APIResponse,
    EnrollmentCreate,
    EnrollmentResponse,
    SubmitTestRequest,
    SubmitTestResponse,
    VideoCompleteRequest,
    enrollment_to_response,
    submit_test_to_response,
)

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.post(
    "",
    response_model=APIResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
)
def enroll(request: EnrollmentCreate, lifecycle: LifecycleDep) -> APIResponse[EnrollmentResponse]:
    """Enroll a user in a course."""
    enrollment = lifecycle.enroll(request.user_id, request.course_id)
    return APIResponse(data=enrollment_to_response(enrollment))


@router.get("/{enrollment_id}", response_model=APIResponse[EnrollmentResponse])
def get_enrollment(enrollment_id: str, store: StateStoreDep) -> APIResponse[EnrollmentResponse]:
    """Get an enrollment by ID."""
    enrollment = store.get_enrollment(enrollment_id)
    return APIResponse(data=enrollment_to_response(enrollment))


@router.post("/{enrollment_id}/videos", response_model=APIResponse[EnrollmentResponse])
def mark_video_complete(
    enrollment_id: str, request: VideoCompleteRequest, lifecycle: LifecycleDep
) -> APIResponse[EnrollmentResponse]:
    """Mark a course video as watched."""
    enrollment = lifecycle.mark_video_complete(enrollment_id, request.video_id)
    return APIResponse(data=enrollment_to_response(enrollment))


@router.post("/{enrollment_id}/test", response_model=APIResponse[SubmitTestResponse])
def submit_test(
    enrollment_id: str, request: SubmitTestRequest, lifecycle: LifecycleDep
) -> APIResponse[SubmitTestResponse]:
    """Submit the course test score (retakes allowed)."""
    result = lifecycle.submit_test(enrollment_id, request.score)
    return APIResponse(data=submit_test_to_response(result))
