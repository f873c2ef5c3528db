"""Health check endpoint."""

from fastapi import APIRouter

from courseboard import __version__
from courseboard.api.models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(status="ok", version=__version__)
