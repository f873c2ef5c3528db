"""RecommendationService - Loads scorer inputs from the State Store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from courseboard.recommendations.exceptions import InvalidLimitError
from courseboard.recommendations.models import ScoredCourse, UserProfile
from courseboard.recommendations.scorer import DEFAULT_LIMIT, recommend

if TYPE_CHECKING:
    from courseboard.state_store import StateStore

logger = logging.getLogger(__name__)


class RecommendationService:
    """Builds a learner's recommendations from stored data.

    Read-only: fetches the profile, active catalog, interaction history
    and enrolled course ids, then delegates to the pure scorer.
    """

    def __init__(self, state_store: StateStore) -> None:
        """Initialize the service.

        Args:
            state_store: StateStore instance to read from.
        """
        self.state_store = state_store

    def recommend_for_user(self, user_id: str, limit: int = DEFAULT_LIMIT) -> list[ScoredCourse]:
        """Recommend courses for a user.

        Args:
            user_id: The user's unique ID.
            limit: Maximum number of recommendations.

        Returns:
            Ranked ScoredCourse list (empty when the catalog is empty).

        Raises:
            UserNotFoundError: If the user doesn't exist.
            InvalidLimitError: If limit is negative.
        """
        if limit < 0:
            raise InvalidLimitError(f"limit must not be negative, got {limit}")

        user = self.state_store.get_user(user_id)
        catalog = self.state_store.list_courses()
        interactions = self.state_store.list_interactions(user_id)
        enrolled = self.state_store.list_enrolled_course_ids(user_id)

        results = recommend(
            UserProfile.from_user(user),
            catalog,
            interactions,
            enrolled,
            limit=limit,
        )
        logger.info(
            "Recommended %d of %d courses for user %s", len(results), len(catalog), user_id
        )
        return results
