"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from courseboard import __version__
from courseboard.api.models import APIResponse
from courseboard.api.routes import (
    courses,
    enrollments,
    health,
    interactions,
    leaderboard,
    users,
)
from courseboard.config import Settings, load_settings
from courseboard.learning import InvalidInputError
from courseboard.recommendations import InvalidLimitError
from courseboard.state_store import (
    ConcurrencyConflictError,
    CourseNotFoundError,
    EnrollmentNotFoundError,
    NotFoundError,
    StateStore,
    StateStoreError,
    StoreFailureError,
    UserNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

_NOT_FOUND_MESSAGES: dict[type[NotFoundError], str] = {
    UserNotFoundError: "User not found",
    CourseNotFoundError: "Course not found",
    EnrollmentNotFoundError: "Enrollment not found",
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain exceptions to HTTP responses in the APIResponse envelope."""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(
            status.HTTP_404_NOT_FOUND, _NOT_FOUND_MESSAGES.get(type(exc), "Not found")
        )

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(_request: Request, exc: InvalidInputError) -> JSONResponse:
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))

    @app.exception_handler(InvalidLimitError)
    async def invalid_limit_handler(_request: Request, exc: InvalidLimitError) -> JSONResponse:
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))

    @app.exception_handler(ConcurrencyConflictError)
    async def conflict_handler(_request: Request, exc: ConcurrencyConflictError) -> JSONResponse:
        logger.warning("Concurrency conflict: %s", exc)
        return _error(
            status.HTTP_409_CONFLICT, "Enrollment was modified concurrently, please retry"
        )

    @app.exception_handler(StoreFailureError)
    async def store_failure_handler(_request: Request, exc: StoreFailureError) -> JSONResponse:
        logger.error("Store failure: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Store failure")

    @app.exception_handler(StateStoreError)
    async def state_store_error_handler(_request: Request, exc: StateStoreError) -> JSONResponse:
        logger.error("State store error: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the StateStore for the lifetime of the application."""
    settings: Settings = app.state.settings
    app.state.state_store = StateStore(settings.db_path)
    logger.info("State store opened at %s", settings.db_path)

    try:
        yield
    finally:
        app.state.state_store.close()
        app.state.state_store = None
        logger.info("State store closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings if settings is not None else load_settings()

    app = FastAPI(
        title="Courseboard API",
        description="Course enrollment, completion points and recommendations",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(enrollments.router, prefix="/api/v1")
    app.include_router(users.router, prefix="/api/v1")
    app.include_router(interactions.router, prefix="/api/v1")
    app.include_router(leaderboard.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
