"""Exceptions for the learning module."""


class LearningError(Exception):
    """Base exception for enrollment lifecycle errors."""

    pass


class InvalidInputError(LearningError, ValueError):
    """Input rejected before any store mutation."""

    pass
