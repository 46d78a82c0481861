"""Exception types raised by the quantile engine.

Every error derives from :class:`QuantileError` and also from the closest
builtin (``ValueError`` / ``TypeError``) so callers that already catch those
keep working.
"""
from __future__ import annotations

from typing import Any, Iterable, List


class QuantileError(Exception):
    """Base class for all quantrank errors."""


class ValidationError(QuantileError, ValueError):
    """One or more requested fractions lie outside [0.0, 1.0]."""

    def __init__(self, invalid: Iterable[Any]) -> None:
        self.invalid: List[Any] = list(invalid)
        shown = ", ".join(repr(q) for q in self.invalid)
        super().__init__(f"Quantiles must be within [0.0, 1.0]. It was: {shown}")


class UnsupportedInterpolationError(QuantileError, ValueError):
    """The interpolation mode needs arithmetic the element tier does not have."""

    def __init__(self, interpolation: Any, tier: Any) -> None:
        self.interpolation = interpolation
        self.tier = tier
        name = getattr(interpolation, "name", interpolation)
        super().__init__(f"{name} is not available for this type: {tier}")


class UnsupportedTypeError(QuantileError, TypeError):
    """The element type cannot be classified or has no total order."""

    def __init__(self, type_tag: Any, reason: str = "no total order") -> None:
        self.type_tag = type_tag
        super().__init__(f"Type not supported: {type_tag!r} ({reason})")


__all__ = [
    "QuantileError",
    "ValidationError",
    "UnsupportedInterpolationError",
    "UnsupportedTypeError",
]
