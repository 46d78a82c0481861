"""Element tiers: which arithmetic a collection's element type supports.

A tier is resolved once per request. Each variant carries only the operations
it can legally perform, so interpolation never has to inspect element types.

* ``FixedWidthNumber`` - machine-width numbers (numpy dtypes, Python float).
  Results are floats; integer differences are taken exactly before the final
  conversion, but magnitudes beyond 2**53 can still lose precision under
  LINEAR/MIDPOINT.
* ``ArbitraryPrecisionInteger`` / ``ArbitraryPrecisionDecimal`` - Python int and
  ``decimal.Decimal``. Results are exact ``Decimal`` values.
* ``PolymorphicNumber`` - a mix of numeric types. Ordered and interpolated via
  ``float`` since native comparisons across subtypes are not trusted.
* ``GenericOrderedValue`` - anything with a total order and no arithmetic.
"""
from __future__ import annotations

import decimal
import numbers
import operator
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, FrozenSet, Iterable, Optional

import numpy as np

from .config import TYPE_ALIASES
from .errors import UnsupportedInterpolationError, UnsupportedTypeError
from .interpolate import Interpolation

ALL_MODES: FrozenSet[Interpolation] = frozenset(Interpolation)
ORDER_MODES: FrozenSet[Interpolation] = frozenset(
    {Interpolation.LOWER, Interpolation.HIGHER, Interpolation.NEAREST}
)

# Unrounded context: add/sub/mul on Decimals are exact under it.
_EXACT = decimal.Context(
    prec=decimal.MAX_PREC,
    Emax=decimal.MAX_EMAX,
    Emin=decimal.MIN_EMIN,
    traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
)
_HALF = Decimal("0.5")

# Builtins that define comparison operators without a total order.
_UNORDERED = {object, complex, dict, set, frozenset, type(None)}


class ElementTier:
    arithmetic: bool = True
    needs_key_sort: bool = False
    modes: FrozenSet[Interpolation] = ALL_MODES

    @property
    def sort_key(self) -> Optional[Callable[[Any], Any]]:
        return None

    def supports(self, mode: Interpolation) -> bool:
        return mode in self.modes

    def value(self, x: Any) -> Any:
        raise NotImplementedError

    def linear(self, lower: Any, higher: Any, fraction: float) -> Any:
        raise NotImplementedError

    def midpoint(self, lower: Any, higher: Any) -> Any:
        raise NotImplementedError

    def __str__(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class FixedWidthNumber(ElementTier):
    dtype: Optional[np.dtype] = None  # None when the concrete width is unknown

    def __post_init__(self) -> None:
        if self.dtype is None:
            return
        dt = np.dtype(self.dtype)
        if dt.kind not in "iuf":
            raise UnsupportedTypeError(dt, "not a fixed-width real number")
        object.__setattr__(self, "dtype", dt)

    @property
    def _integral(self) -> bool:
        return self.dtype is not None and self.dtype.kind in "iu"

    def value(self, x: Any) -> float:
        return float(x)

    def linear(self, lower: Any, higher: Any, fraction: float) -> float:
        if self._integral:
            # Python ints cannot wrap around, so the difference stays exact.
            # index() rejects non-integral values instead of truncating them.
            lo = operator.index(lower)
            return float(lo) + (operator.index(higher) - lo) * fraction
        lo = float(lower)
        return lo + (float(higher) - lo) * fraction

    def midpoint(self, lower: Any, higher: Any) -> float:
        if self._integral:
            return (operator.index(lower) + operator.index(higher)) / 2
        return (float(lower) + float(higher)) / 2.0

    def __str__(self) -> str:
        return f"FixedWidthNumber({self.dtype.name if self.dtype is not None else 'unknown width'})"


class _ExactTier(ElementTier):
    def _to_decimal(self, x: Any) -> Decimal:
        raise NotImplementedError

    def value(self, x: Any) -> Decimal:
        return self._to_decimal(x)

    def linear(self, lower: Any, higher: Any, fraction: float) -> Decimal:
        lo = self._to_decimal(lower)
        with decimal.localcontext(_EXACT):
            # Decimal(float) is the exact binary value of the fraction.
            return lo + (self._to_decimal(higher) - lo) * Decimal(fraction)

    def midpoint(self, lower: Any, higher: Any) -> Decimal:
        with decimal.localcontext(_EXACT):
            return (self._to_decimal(lower) + self._to_decimal(higher)) * _HALF


@dataclass(frozen=True)
class ArbitraryPrecisionInteger(_ExactTier):
    def _to_decimal(self, x: Any) -> Decimal:
        return Decimal(operator.index(x))


@dataclass(frozen=True)
class ArbitraryPrecisionDecimal(_ExactTier):
    def _to_decimal(self, x: Any) -> Decimal:
        return x if isinstance(x, Decimal) else Decimal(x)


@dataclass(frozen=True)
class PolymorphicNumber(ElementTier):
    needs_key_sort = True

    @property
    def sort_key(self) -> Callable[[Any], float]:
        return float

    def value(self, x: Any) -> float:
        return float(x)

    def linear(self, lower: Any, higher: Any, fraction: float) -> float:
        lo = float(lower)
        return lo + (float(higher) - lo) * fraction

    def midpoint(self, lower: Any, higher: Any) -> float:
        return (float(lower) + float(higher)) / 2.0


@dataclass(frozen=True)
class GenericOrderedValue(ElementTier):
    type_tag: Any = None
    arithmetic = False
    modes = ORDER_MODES

    def value(self, x: Any) -> Any:
        return x

    def linear(self, lower: Any, higher: Any, fraction: float) -> Any:
        raise UnsupportedInterpolationError(Interpolation.LINEAR, self)

    def midpoint(self, lower: Any, higher: Any) -> Any:
        raise UnsupportedInterpolationError(Interpolation.MIDPOINT, self)

    def __str__(self) -> str:
        if self.type_tag is None:
            return "GenericOrderedValue"
        name = getattr(self.type_tag, "__name__", None) or str(self.type_tag)
        return f"GenericOrderedValue({name})"


def _has_total_order(tp: type) -> bool:
    if tp in _UNORDERED:
        return False
    if issubclass(tp, numbers.Complex) and not issubclass(tp, numbers.Real):
        return False
    return getattr(tp, "__lt__", object.__lt__) is not object.__lt__


def _classify_dtype(dt: np.dtype) -> ElementTier:
    if dt.kind in "iuf":
        return FixedWidthNumber(dt)
    if dt.kind in "bMmUS":
        return GenericOrderedValue(dt)
    if dt.kind == "O":
        raise UnsupportedTypeError(dt, "object arrays need per-element inspection")
    raise UnsupportedTypeError(dt)


def _classify_name(name: str) -> ElementTier:
    key = name.strip().lower()
    # numpy units are case-sensitive ("datetime64[D]"), so only aliases are case-folded
    tag = TYPE_ALIASES.get(key, name.strip())
    if not isinstance(tag, str):
        return classify(tag)
    try:
        dt = np.dtype(tag)
    except TypeError:
        raise UnsupportedTypeError(name, "unknown type name") from None
    return _classify_dtype(dt)


def classify(tag: Any) -> ElementTier:
    """Map a type tag to its element tier.

    ``tag`` may be an ``ElementTier`` (returned unchanged), a Python type, a
    numpy dtype or scalar type, or a type name such as ``"int32"`` or
    ``"decimal"``. Raises ``UnsupportedTypeError`` when the type has no total
    order.
    """
    if isinstance(tag, ElementTier):
        return tag
    if isinstance(tag, str):
        return _classify_name(tag)
    if isinstance(tag, np.dtype):
        return _classify_dtype(tag)
    if not isinstance(tag, type):
        raise UnsupportedTypeError(tag, "not a type")
    if issubclass(tag, np.generic):
        return _classify_dtype(np.dtype(tag))
    if issubclass(tag, bool):
        return GenericOrderedValue(tag)
    if issubclass(tag, int):
        return ArbitraryPrecisionInteger()
    if issubclass(tag, float):
        return FixedWidthNumber(np.dtype(np.float64))
    if issubclass(tag, Decimal):
        return ArbitraryPrecisionDecimal()
    if tag in (numbers.Number, numbers.Real) or (
        issubclass(tag, numbers.Real) and _has_total_order(tag)
    ):
        return PolymorphicNumber()
    if _has_total_order(tag):
        return GenericOrderedValue(tag)
    raise UnsupportedTypeError(tag)


def infer_tier(elements: Iterable[Any]) -> ElementTier:
    """Derive the tier from the data itself.

    numpy arrays are classified by dtype. Otherwise every element's type is
    collected: a single type is classified directly, a mix of numeric types is
    polymorphic, and any other mix is rejected. Consumes one pass over
    ``elements``; pass a sequence, not an iterator.
    """
    dt = getattr(elements, "dtype", None)
    if isinstance(dt, np.dtype) and dt.kind != "O":
        return _classify_dtype(dt)
    kinds = {type(x) for x in elements}
    if not kinds:
        return GenericOrderedValue()
    if len(kinds) == 1:
        return classify(kinds.pop())
    tiers = [classify(k) for k in kinds]
    if all(t.arithmetic for t in tiers):
        return PolymorphicNumber()
    raise UnsupportedTypeError(tuple(sorted(k.__name__ for k in kinds)), "mixed element types")


__all__ = [
    "ElementTier",
    "FixedWidthNumber",
    "ArbitraryPrecisionInteger",
    "ArbitraryPrecisionDecimal",
    "PolymorphicNumber",
    "GenericOrderedValue",
    "classify",
    "infer_tier",
]
