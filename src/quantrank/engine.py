"""Quantile computation over a finite collection of ordered values.

The entry point is :func:`compute`: validate the requested fractions, resolve
the element tier, then for every fraction locate the rank position, fetch the
bracketing order statistics and interpolate. An empty input yields ``None``
for every fraction.

Missing values (``None``, NaN) are not filtered here; callers drop them first.
"""
from __future__ import annotations

import math
import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Iterable, List, Optional, Tuple, Union

import numpy as np

from .config import QuantileConfig
from .errors import UnsupportedInterpolationError, ValidationError
from .interpolate import Interpolation, interpolate
from .logutil import get_logger
from .ranks import rank_position
from .select import prepare
from .tiers import ElementTier, classify, infer_tier

_DEFAULTS = QuantileConfig()

Fractions = Union[float, Iterable[float]]


def validate_fractions(fractions: Fractions) -> Tuple[float, ...]:
    """Return the fractions as a tuple of floats, or reject the whole batch."""
    if isinstance(fractions, (numbers.Real, Decimal, str, bytes)):
        fractions = [fractions]
    checked: List[float] = []
    invalid: List[Any] = []
    for q in fractions:
        # fractions are real numbers; "0.5" and True are not
        if isinstance(q, bool) or not isinstance(q, (numbers.Real, Decimal)):
            invalid.append(q)
            continue
        try:
            value = float(q)
        except (TypeError, ValueError):
            invalid.append(q)
            continue
        # NaN fails both comparisons
        if not (0.0 <= value <= 1.0):
            invalid.append(q)
        checked.append(value)
    if invalid:
        raise ValidationError(invalid)
    return tuple(checked)


def _materialize(elements: Iterable[Any]) -> Sequence:
    if isinstance(elements, (np.ndarray, Sequence)):
        return elements  # type: ignore[return-value]
    return list(elements)


@dataclass(frozen=True)
class QuantileRequest:
    """A validated batch of fractions, one interpolation mode and one tier.

    Construction fails fast: out-of-range fractions raise ``ValidationError``
    and a mode the tier cannot compute raises
    ``UnsupportedInterpolationError``, before any data is looked at.
    """

    fractions: Tuple[float, ...]
    interpolation: Interpolation
    tier: ElementTier

    def __post_init__(self) -> None:
        object.__setattr__(self, "fractions", validate_fractions(self.fractions))
        object.__setattr__(self, "interpolation", Interpolation.parse(self.interpolation))
        object.__setattr__(self, "tier", classify(self.tier))
        if not self.tier.supports(self.interpolation):
            raise UnsupportedInterpolationError(self.interpolation, self.tier)

    @classmethod
    def of(
        cls,
        fractions: Fractions,
        interpolation: Union[Interpolation, str] = Interpolation.LINEAR,
        tier: Any = float,
    ) -> "QuantileRequest":
        return cls(validate_fractions(fractions), interpolation, tier)  # type: ignore[arg-type]

    @property
    def sorts_input(self) -> bool:
        # Several ranks amortise one sort; key-ordered tiers cannot use quickselect.
        return len(self.fractions) > 1 or self.tier.needs_key_sort

    def compute(self, elements: Iterable[Any], *, in_place: bool = False) -> List[Any]:
        """Compute one result per fraction.

        With ``in_place=True`` a single-fraction request reorders ``elements``
        (a list or 1-D ndarray) instead of copying it. The sort path always
        works on a private copy.
        """
        data = _materialize(elements)
        n = len(data)
        if n == 0 or not self.fractions:
            return [None] * len(self.fractions)
        sort = self.sorts_input
        logger = get_logger()
        logger.debug(
            "quantiles n=%d fractions=%d tier=%s interpolation=%s strategy=%s",
            n,
            len(self.fractions),
            self.tier,
            self.interpolation.value,
            "sort" if sort else ("select-in-place" if in_place else "select"),
        )
        ctx = prepare(data, sort=sort, key=self.tier.sort_key, in_place=in_place)
        return [interpolate(self.interpolation, self.tier, rank_position(n, q), ctx.at) for q in self.fractions]


def compute(
    elements: Iterable[Any],
    fractions: Fractions,
    interpolation: Union[Interpolation, str] = Interpolation.LINEAR,
    tier: Any = None,
    *,
    in_place: bool = False,
) -> List[Any]:
    """Quantiles of ``elements`` at each of ``fractions``.

    ``tier`` is an ``ElementTier`` or any type tag ``classify`` understands;
    when omitted it is inferred from the data. Results are floats for
    fixed-width and polymorphic numbers, ``Decimal`` for int/Decimal input and
    the elements themselves for other ordered types.
    """
    checked = validate_fractions(fractions)
    mode = Interpolation.parse(interpolation)
    data = _materialize(elements)
    if tier is None:
        if len(data) == 0:
            return [None] * len(checked)
        tier = infer_tier(data)
    request = QuantileRequest(checked, mode, classify(tier))
    return request.compute(data, in_place=in_place)


def compute_of(
    elements: Iterable[Any],
    transform: Callable[[Any], Any],
    fractions: Fractions,
    interpolation: Union[Interpolation, str] = Interpolation.LINEAR,
    tier: Any = None,
) -> List[Any]:
    """Apply ``transform`` to every element, then rank the transformed values."""
    validate_fractions(fractions)
    return compute([transform(x) for x in elements], fractions, interpolation, tier)


def _resolve(data: Sequence, interpolation: Any, tier: Any, cfg: QuantileConfig) -> Tuple[Interpolation, Any]:
    if tier is None and len(data):
        tier = infer_tier(data)
    if interpolation is None:
        arithmetic = classify(tier).arithmetic if tier is not None else True
        interpolation = cfg.default_interpolation(arithmetic)
    return Interpolation.parse(interpolation), tier


def quantiles(
    elements: Iterable[Any],
    qs: Iterable[float],
    interpolation: Optional[Union[Interpolation, str]] = None,
    tier: Any = None,
    cfg: Optional[QuantileConfig] = None,
) -> List[Any]:
    """Like :func:`compute`, but the interpolation defaults per tier.

    Arithmetic tiers default to LINEAR, generic ordered values to LOWER.
    """
    cfg = cfg or _DEFAULTS
    checked = validate_fractions(qs)
    data = _materialize(elements)
    mode, tier = _resolve(data, interpolation, tier, cfg)
    return compute(data, checked, mode, tier, in_place=cfg.in_place)


def quantile(
    elements: Iterable[Any],
    q: float,
    interpolation: Optional[Union[Interpolation, str]] = None,
    tier: Any = None,
    cfg: Optional[QuantileConfig] = None,
) -> Any:
    return quantiles(elements, [q], interpolation, tier, cfg)[0]


def median(
    elements: Iterable[Any],
    interpolation: Optional[Union[Interpolation, str]] = None,
    tier: Any = None,
    cfg: Optional[QuantileConfig] = None,
) -> Any:
    return quantile(elements, 0.5, interpolation, tier, cfg)


def percentile(
    elements: Iterable[Any],
    p: float,
    interpolation: Optional[Union[Interpolation, str]] = None,
    tier: Any = None,
    cfg: Optional[QuantileConfig] = None,
) -> Any:
    """Quantile at ``p`` percent (0-100)."""
    if isinstance(p, bool) or not isinstance(p, (numbers.Real, Decimal)):
        raise ValidationError([p])
    q = float(p) / 100.0
    if math.isnan(q) or not (0.0 <= q <= 1.0):
        raise ValidationError([p])
    return quantile(elements, q, interpolation, tier, cfg)


__all__ = [
    "QuantileRequest",
    "validate_fractions",
    "compute",
    "compute_of",
    "quantile",
    "quantiles",
    "median",
    "percentile",
]
