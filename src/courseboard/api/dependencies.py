"""FastAPI dependencies for dependency injection.

The StateStore is owned by the application: the lifespan opens it on
startup and stores it on ``app.state``; request handlers reach it through
these dependencies. Tests swap it out with ``dependency_overrides``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from courseboard.learning import EnrollmentLifecycle
from courseboard.recommendations import RecommendationService
from courseboard.state_store import StateStore


def get_state_store(request: Request) -> StateStore:
    """Dependency that provides the application's StateStore."""
    store: StateStore | None = getattr(request.app.state, "state_store", None)
    if store is None:
        raise RuntimeError("StateStore not initialized; is the app lifespan running?")
    return store


StateStoreDep = Annotated[StateStore, Depends(get_state_store)]


def get_lifecycle(store: StateStoreDep) -> EnrollmentLifecycle:
    """Dependency that provides an EnrollmentLifecycle bound to the store."""
    return EnrollmentLifecycle(store)


LifecycleDep = Annotated[EnrollmentLifecycle, Depends(get_lifecycle)]


def get_recommendation_service(store: StateStoreDep) -> RecommendationService:
    """Dependency that provides a RecommendationService bound to the store."""
    return RecommendationService(store)


RecommendationServiceDep = Annotated[RecommendationService, Depends(get_recommendation_service)]
