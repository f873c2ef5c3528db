"""Recommendation scorer - ranks unseen courses for a learner.

The score of a course is the sum of four signals:

- content: 2 per preferred topic on the course, plus a skill affinity of
  3 for the learner's own level and 1 for an adjacent level
- collaborative: for every positive interaction (like, complete, or more
  than five minutes of dwell time) on another course, 1 when that course
  shares the category and 0.5 per shared topic
- popularity: 0.1 * ln(total_enrollments + 1)
- quality: 0.2 * rating

and is scaled by 10 and clamped to 0-100. Ranking is a stable sort on the
match score, so ties keep catalog order.
"""

from __future__ import annotations

import math
from collections.abc import Collection, Iterable

from courseboard.recommendations.exceptions import InvalidLimitError
from courseboard.recommendations.models import (
    CourseLike,
    InteractionLike,
    ScoredCourse,
    UserProfile,
)

DEFAULT_LIMIT = 6

SKILL_ORDER = ("beginner", "intermediate", "advanced")
POSITIVE_INTERACTION_TYPES = frozenset({"like", "complete"})
LONG_DWELL_SECONDS = 300

TOPIC_MATCH_WEIGHT = 2.0
SKILL_EXACT_BONUS = 3.0
SKILL_ADJACENT_BONUS = 1.0
SAME_CATEGORY_WEIGHT = 1.0
SHARED_TOPIC_WEIGHT = 0.5
POPULARITY_WEIGHT = 0.1
RATING_WEIGHT = 0.2
SCORE_SCALE = 10.0
MAX_MATCH_SCORE = 100.0


def recommend(
    profile: UserProfile,
    catalog: Iterable[CourseLike],
    interactions: Iterable[InteractionLike],
    enrolled_course_ids: Collection[str],
    limit: int = DEFAULT_LIMIT,
) -> list[ScoredCourse]:
    """Rank catalog courses the learner is not enrolled in.

    Pure function: identical inputs always give the same ordered output.

    Args:
        profile: The learner's skill level and preferred topics.
        catalog: Candidate courses, in catalog order. Also used to look up
            the courses referenced by interactions.
        interactions: The learner's interaction history.
        enrolled_course_ids: Courses to exclude from the result.
        limit: Maximum number of recommendations.

    Returns:
        Up to ``limit`` ScoredCourse entries, best match first.

    Raises:
        InvalidLimitError: If limit is negative.
    """
    if limit < 0:
        raise InvalidLimitError(f"limit must not be negative, got {limit}")

    courses = list(catalog)
    if not courses or limit == 0:
        return []

    by_id: dict[str, CourseLike] = {}
    for course in courses:
        by_id.setdefault(course.id, course)

    liked = [
        by_id[i.course_id]
        for i in interactions
        if is_positive_interaction(i) and i.course_id in by_id
    ]
    excluded = set(enrolled_course_ids)

    scored = [
        ScoredCourse(course=course, match_score=match_score(course, profile, liked))
        for course in courses
        if course.id not in excluded
    ]
    scored.sort(key=lambda s: s.match_score, reverse=True)
    return scored[:limit]


def match_score(
    course: CourseLike,
    profile: UserProfile,
    liked_courses: Iterable[CourseLike] = (),
) -> float:
    """Compute the 0-100 match score of one course."""
    raw = (
        content_score(course, profile)
        + collaborative_score(course, liked_courses)
        + POPULARITY_WEIGHT * math.log(max(course.total_enrollments, 0) + 1)
        + RATING_WEIGHT * course.rating
    )
    return min(MAX_MATCH_SCORE, max(0.0, raw * SCORE_SCALE))


def content_score(course: CourseLike, profile: UserProfile) -> float:
    """Topic overlap with the learner's preferences plus skill affinity."""
    matches = len(set(course.topics) & profile.preferred_topics)
    return TOPIC_MATCH_WEIGHT * matches + skill_affinity(profile.skill_level, course.difficulty)


def skill_affinity(skill_level: str, difficulty: str) -> float:
    """Return 3 for the same level, 1 for an adjacent one, else 0.

    Labels outside beginner/intermediate/advanced have no affinity.
    """
    if skill_level not in SKILL_ORDER or difficulty not in SKILL_ORDER:
        return 0.0
    distance = abs(SKILL_ORDER.index(skill_level) - SKILL_ORDER.index(difficulty))
    if distance == 0:
        return SKILL_EXACT_BONUS
    if distance == 1:
        return SKILL_ADJACENT_BONUS
    return 0.0


def collaborative_score(course: CourseLike, liked_courses: Iterable[CourseLike]) -> float:
    """Similarity of a course to the courses the learner engaged with."""
    score = 0.0
    topics = set(course.topics)
    for other in liked_courses:
        if other.id == course.id:
            continue
        if other.category == course.category:
            score += SAME_CATEGORY_WEIGHT
        score += SHARED_TOPIC_WEIGHT * len(set(other.topics) & topics)
    return score


def is_positive_interaction(interaction: InteractionLike) -> bool:
    """Like, complete, or more than LONG_DWELL_SECONDS of dwell time."""
    if interaction.interaction_type in POSITIVE_INTERACTION_TYPES:
        return True
    return interaction.time_spent is not None and interaction.time_spent > LONG_DWELL_SECONDS
