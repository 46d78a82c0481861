"""Interpolation policies for fractional rank positions.

Given the two order statistics bracketing a rank position (or a single one
when the position is integral), each policy produces the final quantile value.
The arithmetic itself lives on the element tier, so the same policy code serves
fixed-width floats, exact decimals and plain ordered values alike.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, List

from .errors import UnsupportedInterpolationError
from .ranks import RankPosition


class Interpolation(Enum):
    # i + (j - i) * fraction, where i and j bracket the rank position.
    # 64-bit integers wider than the float mantissa may lose precision here.
    LINEAR = "linear"
    # i
    LOWER = "lower"
    # j
    HIGHER = "higher"
    # i or j, whichever is nearest (ties go up)
    NEAREST = "nearest"
    # (i + j) / 2
    MIDPOINT = "midpoint"

    @classmethod
    def parse(cls, value: Any) -> "Interpolation":
        """Accept an ``Interpolation`` member or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown interpolation {value!r}; expected one of: {choices}") from None

    @classmethod
    def names(cls) -> List[str]:
        return [m.value for m in cls]


def interpolate(mode: Interpolation, tier: Any, rank: RankPosition, at: Callable[[int], Any]) -> Any:
    """Combine the order statistics around ``rank`` according to ``mode``.

    ``at(index)`` returns the element that would sit at ``index`` in sorted
    order. It is called once for LOWER/HIGHER/NEAREST and up to twice for
    LINEAR/MIDPOINT.
    """
    if not tier.supports(mode):
        raise UnsupportedInterpolationError(mode, tier)
    if mode is Interpolation.LOWER:
        return tier.value(at(rank.lower_index))
    if mode is Interpolation.HIGHER:
        return tier.value(at(rank.higher_index))
    if mode is Interpolation.NEAREST:
        return tier.value(at(rank.nearest_index))

    if rank.lower_index == rank.higher_index:
        return tier.value(at(rank.lower_index))
    lower = at(rank.lower_index)
    higher = at(rank.higher_index)
    if mode is Interpolation.LINEAR:
        return tier.linear(lower, higher, rank.fraction)
    return tier.midpoint(lower, higher)


__all__ = ["Interpolation", "interpolate"]
