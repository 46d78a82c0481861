"""Rank positions for a fraction q over n sorted elements."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class RankPosition:
    position: float  # (n - 1) * q
    lower_index: int
    higher_index: int

    @property
    def fraction(self) -> float:
        return self.position - self.lower_index

    @property
    def nearest_index(self) -> int:
        # round-half-up, so 1.5 -> 2 and 2.5 -> 3
        return int(math.floor(self.position + 0.5))


def rank_position(n: int, q: float) -> RankPosition:
    """Return the continuous rank of ``q`` and the indices bracketing it.

    ``n`` must be positive; empty inputs never reach the rank calculator.
    """
    if n <= 0:
        raise ValueError("n must be positive")
    position = (n - 1) * q
    lower = int(math.floor(position))
    higher = min(max(int(math.ceil(position)), 0), n - 1)
    return RankPosition(position=position, lower_index=lower, higher_index=higher)


__all__ = ["RankPosition", "rank_position"]
