"""
Quadkey Error Taxonomy

Typed errors raised by the quadkey primitives. Every failure is scoped to a
single call and surfaces as one of these; no primitive returns a partial
result.
"""

from typing import Any, Optional


class QuadKeyError(ValueError):
    """Base class for all quadkey validation errors."""

    def __init__(self, message: str, value: Optional[Any] = None):
        super().__init__(message)
        self.value = value


class InvalidLevelError(QuadKeyError):
    """Level is not an integer. Out-of-range levels are clamped instead."""


class InvalidDirectionError(QuadKeyError):
    """Direction is not one of TOP, RIGHT, BOTTOM, LEFT."""


class InvalidQuadKeyLengthError(QuadKeyError):
    """Quadkey is empty, longer than the maximum level, or too deep for a border query."""


class InvalidDigitError(QuadKeyError):
    """Quadkey contains a character outside {0, 1, 2, 3}."""


class InvalidLatitudeError(QuadKeyError):
    """Latitude is at or beyond a pole, or not a number."""


class InvalidLongitudeError(QuadKeyError):
    """Longitude is outside [-180, 180], or not a number."""


class InvalidDepthError(QuadKeyError):
    """Border subdivision depth is outside the supported range."""
