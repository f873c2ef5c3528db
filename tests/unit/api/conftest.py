"""Fixtures for API route tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from courseboard.api.app import register_exception_handlers
from courseboard.api.dependencies import get_state_store
from courseboard.api.routes import courses, enrollments, health, interactions, leaderboard, users
from courseboard.state_store import StateStore


@pytest.fixture
def app(store: StateStore):
    """Create a test FastAPI app over the in-memory store."""
    app = FastAPI()

    # Override state store dependency
    def override_get_state_store():
        yield store

    app.dependency_overrides[get_state_store] = override_get_state_store
    register_exception_handlers(app)

    app.include_router(health.router)
    for module in (courses, enrollments, users, interactions, leaderboard):
        app.include_router(module.router, prefix="/api/v1")

    return app


@pytest.fixture
def client(app: FastAPI):
    """Create a test client."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
