"""Leaderboard endpoint."""

from fastapi import APIRouter, Query

from courseboard.api.dependencies import StateStoreDep
from courseboard.api.models import (
    APIResponse,
    LeaderboardEntryResponse,
    leaderboard_entry_to_response,
)

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=APIResponse[list[LeaderboardEntryResponse]])
def get_leaderboard(
    store: StateStoreDep,
    limit: int = Query(default=50, ge=1, le=100, description="Max entries"),
) -> APIResponse[list[LeaderboardEntryResponse]]:
    """Top users by points, then by courses completed."""
    entries = store.get_leaderboard(limit=limit)
    return APIResponse(data=[leaderboard_entry_to_response(e) for e in entries])
