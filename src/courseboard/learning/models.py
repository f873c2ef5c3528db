"""Data models for the learning module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from courseboard.state_store import Enrollment


@dataclass
class TestSubmissionResult:
    """Result of submitting a course test.

    Attributes:
        enrollment: The enrollment after the submission.
        passed: Whether the score reached the pass threshold.
        points_awarded: Points added to the user by this submission.
    """

    __test__ = False

    enrollment: Enrollment
    passed: bool
    points_awarded: int
