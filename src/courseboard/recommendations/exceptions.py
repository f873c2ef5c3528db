"""Exceptions for the recommendations module."""


class RecommendationError(Exception):
    """Base exception for recommendation errors."""

    pass


class InvalidLimitError(RecommendationError, ValueError):
    """Requested number of recommendations is negative."""

    pass
