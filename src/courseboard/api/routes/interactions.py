"""Interaction tracking endpoint."""

from fastapi import APIRouter, status

from courseboard.api.dependencies import StateStoreDep
from courseboard.api.models import (
    APIResponse,
    InteractionCreate,
    InteractionResponse,
    interaction_to_response,
)

router = APIRouter(prefix="/interactions", tags=["interactions"])


@router.post(
    "",
    response_model=APIResponse[InteractionResponse],
    status_code=status.HTTP_201_CREATED,
)
def record_interaction(
    interaction: InteractionCreate, store: StateStoreDep
) -> APIResponse[InteractionResponse]:
    """Record a view, like, completion or other interaction."""
    created = store.record_interaction(
        user_id=interaction.user_id,
        course_id=interaction.course_id,
        interaction_type=interaction.interaction_type,
        time_spent=interaction.time_spent,
    )
    return APIResponse(data=interaction_to_response(created))
