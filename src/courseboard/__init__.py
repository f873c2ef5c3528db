"""Courseboard - course enrollment lifecycle, points and recommendations."""

__version__ = "0.1.0"
