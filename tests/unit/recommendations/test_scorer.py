"""Unit tests for the recommendation scorer."""

import math
from dataclasses import dataclass, field

import pytest

from courseboard.recommendations import InvalidLimitError, UserProfile, recommend
from courseboard.recommendations.scorer import (
    collaborative_score,
    content_score,
    is_positive_interaction,
    match_score,
    skill_affinity,
)


@dataclass
class FakeCourse:
    id: str
    category: str = "Technology"
    difficulty: str = "beginner"
    topics: list[str] = field(default_factory=list)
    rating: float = 0.0
    total_enrollments: int = 0


@dataclass
class FakeInteraction:
    course_id: str
    interaction_type: str = "view"
    time_spent: int | None = None


@pytest.fixture
def profile() -> UserProfile:
    """A beginner interested in AI and Python."""
    return UserProfile(skill_level="beginner", preferred_topics=frozenset({"AI", "Python"}))


@pytest.mark.unit
class TestRecommend:
    """Tests for recommend."""

    def test_relevant_course_ranks_first(self, profile: UserProfile) -> None:
        x = FakeCourse(id="x", difficulty="beginner", topics=["AI", "Python", "Stats"])
        y = FakeCourse(id="y", difficulty="advanced", topics=["Design"])

        results = recommend(profile, [y, x], [], set())

        assert [r.course.id for r in results] == ["x", "y"]
        assert results[0].match_score > results[1].match_score

    def test_enrolled_courses_excluded(self, profile: UserProfile) -> None:
        catalog = [FakeCourse(id=f"c{i}", topics=["AI"]) for i in range(5)]

        results = recommend(profile, catalog, [], {"c1", "c3"})

        assert {r.course.id for r in results} == {"c0", "c2", "c4"}

    def test_deterministic(self, profile: UserProfile) -> None:
        catalog = [
            FakeCourse(id=f"c{i}", topics=["AI"] if i % 2 else [], rating=i % 3)
            for i in range(10)
        ]
        interactions = [FakeInteraction(course_id="c1", interaction_type="like")]

        first = recommend(profile, catalog, interactions, {"c2"}, limit=10)
        second = recommend(profile, catalog, interactions, {"c2"}, limit=10)

        assert first == second

    def test_ties_keep_catalog_order(self, profile: UserProfile) -> None:
        catalog = [FakeCourse(id=name) for name in ["b", "a", "c"]]

        results = recommend(profile, catalog, [], set())

        assert [r.course.id for r in results] == ["b", "a", "c"]

    def test_scores_within_bounds(self, profile: UserProfile) -> None:
        catalog = [
            FakeCourse(
                id="max",
                topics=["AI", "Python"] * 10,
                rating=5.0,
                total_enrollments=10**9,
            ),
            FakeCourse(id="min", difficulty="advanced"),
            FakeCourse(id="odd", difficulty="expert", total_enrollments=-5),
        ]

        results = recommend(profile, catalog, [], set())

        assert all(0 <= r.match_score <= 100 for r in results)
        assert results[0].match_score == 100

    def test_default_limit(self, profile: UserProfile) -> None:
        catalog = [FakeCourse(id=f"c{i}") for i in range(10)]

        assert len(recommend(profile, catalog, [], set())) == 6

    def test_limit_zero(self, profile: UserProfile) -> None:
        assert recommend(profile, [FakeCourse(id="a")], [], set(), limit=0) == []

    def test_negative_limit_raises(self, profile: UserProfile) -> None:
        with pytest.raises(InvalidLimitError):
            recommend(profile, [FakeCourse(id="a")], [], set(), limit=-1)

    def test_empty_catalog(self, profile: UserProfile) -> None:
        assert recommend(profile, [], [], set()) == []

    def test_everything_enrolled(self, profile: UserProfile) -> None:
        assert recommend(profile, [FakeCourse(id="a")], [], {"a"}) == []

    def test_liked_enrolled_course_still_informs_scores(self, profile: UserProfile) -> None:
        """Interactions on an enrolled course count toward similar courses."""
        liked = FakeCourse(id="liked", category="Business", topics=["sales"])
        similar = FakeCourse(id="similar", category="Business", topics=["sales"])
        other = FakeCourse(id="other", category="Design")
        interactions = [FakeInteraction(course_id="liked", interaction_type="like")]

        results = recommend(profile, [other, liked, similar], interactions, {"liked"})

        assert [r.course.id for r in results] == ["similar", "other"]

    def test_unknown_interaction_course_ignored(self, profile: UserProfile) -> None:
        catalog = [FakeCourse(id="a")]
        interactions = [FakeInteraction(course_id="gone", interaction_type="like")]

        results = recommend(profile, catalog, interactions, set())

        assert results[0].match_score == match_score(catalog[0], profile)


@pytest.mark.unit
class TestScoreComponents:
    """Tests for the individual scoring signals."""

    @pytest.mark.parametrize(
        ("skill", "difficulty", "expected"),
        [
            ("beginner", "beginner", 3.0),
            ("beginner", "intermediate", 1.0),
            ("beginner", "advanced", 0.0),
            ("advanced", "intermediate", 1.0),
            ("beginner", "expert", 0.0),
            ("", "beginner", 0.0),
        ],
    )
    def test_skill_affinity(self, skill: str, difficulty: str, expected: float) -> None:
        assert skill_affinity(skill, difficulty) == expected

    def test_content_score(self, profile: UserProfile) -> None:
        course = FakeCourse(id="a", difficulty="intermediate", topics=["AI", "Python", "Stats"])

        assert content_score(course, profile) == 2 * 2 + 1

    def test_collaborative_score(self) -> None:
        course = FakeCourse(id="a", category="Technology", topics=["AI", "Python"])
        liked = [
            FakeCourse(id="b", category="Technology", topics=["AI"]),
            FakeCourse(id="c", category="Design", topics=["AI", "Python"]),
        ]

        assert collaborative_score(course, liked) == (1 + 0.5) + (0 + 1.0)

    def test_collaborative_skips_same_course(self) -> None:
        course = FakeCourse(id="a", topics=["AI"])

        assert collaborative_score(course, [course]) == 0

    def test_repeated_topics_count_once(self, profile: UserProfile) -> None:
        course = FakeCourse(id="a", difficulty="advanced", topics=["AI", "AI", "AI"])

        assert content_score(course, profile) == 2.0

    def test_collaborative_repeated_topics_count_once(self) -> None:
        course = FakeCourse(id="a", category="Technology", topics=["AI"])
        liked = [FakeCourse(id="b", category="Design", topics=["AI", "AI"])]

        assert collaborative_score(course, liked) == 0.5

    def test_match_score_formula(self, profile: UserProfile) -> None:
        course = FakeCourse(
            id="a", difficulty="beginner", topics=["AI"], rating=4.0, total_enrollments=99
        )
        raw = 2 + 3 + 0.1 * math.log(100) + 0.2 * 4.0

        assert match_score(course, profile) == pytest.approx(min(100.0, raw * 10))

    @pytest.mark.parametrize(
        ("interaction", "expected"),
        [
            (FakeInteraction("a", "like"), True),
            (FakeInteraction("a", "complete"), True),
            (FakeInteraction("a", "view", 301), True),
            (FakeInteraction("a", "view", 300), False),
            (FakeInteraction("a", "view"), False),
            (FakeInteraction("a", "share", 10), False),
        ],
    )
    def test_positive_interaction(self, interaction: FakeInteraction, expected: bool) -> None:
        assert is_positive_interaction(interaction) is expected
