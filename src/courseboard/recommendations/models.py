"""Data models for the recommendations module.

The scorer works on anything shaped like these protocols, so ORM rows
from the state store and plain dataclasses in tests are both accepted.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from courseboard.state_store import User


class CourseLike(Protocol):
    """Catalog fields the scorer reads."""

    id: str
    category: str
    difficulty: str
    topics: Collection[str]
    rating: float
    total_enrollments: int


class InteractionLike(Protocol):
    """Interaction fields the scorer reads."""

    course_id: str
    interaction_type: str
    time_spent: int | None


@dataclass(frozen=True)
class UserProfile:
    """Learner preferences used for content-based scoring.

    Attributes:
        skill_level: beginner, intermediate or advanced.
        preferred_topics: Topics the learner is interested in.
    """

    skill_level: str
    preferred_topics: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_user(cls, user: User) -> UserProfile:
        """Build a profile from a User record."""
        return cls(
            skill_level=user.skill_level,
            preferred_topics=frozenset(user.preferred_topics),
        )


@dataclass(frozen=True)
class ScoredCourse:
    """A recommended course with its 0-100 match score."""

    course: CourseLike
    match_score: float
