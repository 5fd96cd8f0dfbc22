"""
caliper.core.errors
===================

Error types raised by the unit-algebra and conversion engine.

Every failure carries a stable message ``key`` (e.g. ``"no.factor"``) next to
the human readable text, so callers can branch on the condition or map it to
their own localized messages.
"""

from __future__ import annotations


class UnitError(ValueError):
    """Base class for all recoverable unit-of-measure errors."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        self.message = message
        super().__init__(message)


class InvalidDefinition(UnitError):
    """A unit (or amount) was defined with missing or conflicting data."""


class UnsupportedOffset(UnitError):
    """A unit with a non-zero offset was used where only linear units are allowed."""

    def __init__(self, unit: object) -> None:
        super().__init__(
            "offset.not.supported",
            f"A unit with a non-zero offset cannot be multiplied or divided: {unit}",
        )


class DimensionMismatch(UnitError):
    """Two units do not reduce to compatible fundamental terms."""


class NoConversionPath(UnitError):
    """No conversion (or bridge) connects the fundamental units of two units."""

    def __init__(self, from_unit: object, to_unit: object) -> None:
        super().__init__(
            "no.factor",
            f"No conversion factor found from {from_unit} to {to_unit}",
        )


class RecursionLimitExceeded(UnitError):
    """A reduction or conversion path walk exceeded its hop bound."""

    def __init__(self, unit: object, limit: int) -> None:
        super().__init__(
            "conversion.depth.exceeded",
            f"Conversion depth of {limit} exceeded for unit {unit}",
        )


__all__ = [
    "UnitError",
    "InvalidDefinition",
    "UnsupportedOffset",
    "DimensionMismatch",
    "NoConversionPath",
    "RecursionLimitExceeded",
]
