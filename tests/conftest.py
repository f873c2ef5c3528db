"""Shared pytest fixtures and configuration."""

import pytest

from courseboard.state_store import Course, StateStore, User


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def store():
    """Create an in-memory StateStore."""
    s = StateStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def user(store: StateStore) -> User:
    """A beginner learner interested in python."""
    return store.create_user(
        email="ada@example.com",
        display_name="Ada",
        skill_level="beginner",
        preferred_topics=["python"],
    )


@pytest.fixture
def course(store: StateStore) -> Course:
    """A three-video beginner course worth 100 points."""
    return store.create_course(
        title="Python Basics",
        category="Technology",
        difficulty="beginner",
        topics=["python", "programming"],
        videos=[
            {"id": "v1", "title": "Intro", "url": "https://videos.example.com/v1"},
            {"id": "v2", "title": "Types", "url": "https://videos.example.com/v2"},
            {"id": "v3", "title": "Loops", "url": "https://videos.example.com/v3"},
        ],
        rating=4.5,
        total_enrollments=120,
        points_value=100,
    )
