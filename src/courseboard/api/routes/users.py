"""Per-user endpoints: enrollments, recommendations and analytics."""

from fastapi import APIRouter, Query

from courseboard.api.dependencies import RecommendationServiceDep, StateStoreDep
from courseboard.api.models import (
    APIResponse,
    EnrollmentResponse,
    RecommendationResponse,
    UserAnalyticsResponse,
    enrollment_to_response,
    recommendation_to_response,
    user_analytics_to_response,
)
from courseboard.recommendations import DEFAULT_LIMIT
from courseboard.state_store import EnrollmentStatus

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}/enrollments", response_model=APIResponse[list[EnrollmentResponse]])
def list_user_enrollments(
    user_id: str,
    store: StateStoreDep,
    status: EnrollmentStatus | None = Query(default=None, description="Filter by status"),
) -> APIResponse[list[EnrollmentResponse]]:
    """List a user's enrollments, most recently accessed first."""
    # Verify user exists (will raise UserNotFoundError if not)
    store.get_user(user_id)

    enrollments = store.list_user_enrollments(user_id, status=status)
    return APIResponse(data=[enrollment_to_response(e) for e in enrollments])


@router.get(
    "/{user_id}/recommendations",
    response_model=APIResponse[list[RecommendationResponse]],
)
def get_recommendations(
    user_id: str,
    service: RecommendationServiceDep,
    limit: int = Query(default=DEFAULT_LIMIT, ge=0, le=50, description="Max results"),
) -> APIResponse[list[RecommendationResponse]]:
    """Recommend courses the user is not enrolled in."""
    recommendations = service.recommend_for_user(user_id, limit=limit)
    return APIResponse(data=[recommendation_to_response(r) for r in recommendations])


@router.get("/{user_id}/analytics", response_model=APIResponse[UserAnalyticsResponse])
def get_user_analytics(user_id: str, store: StateStoreDep) -> APIResponse[UserAnalyticsResponse]:
    """Get a user's learning statistics."""
    analytics = store.get_user_analytics(user_id)
    return APIResponse(data=user_analytics_to_response(analytics))
