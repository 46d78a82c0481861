"""Turn textual values into elements of a declared tier.

The CLI reads one value per line and the HTTP service receives JSON scalars;
both go through :func:`value_parser` so a declared tier always sees elements
of its own type. A value that does not fit the tier raises ``ValueError``
rather than being truncated or left as a string.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Callable, List, Optional, Sequence

import numpy as np

from .errors import UnsupportedTypeError
from .tiers import (
    ArbitraryPrecisionDecimal,
    ArbitraryPrecisionInteger,
    ElementTier,
    FixedWidthNumber,
    GenericOrderedValue,
    PolymorphicNumber,
)

_TIMEDELTA = re.compile(
    r"^(?:(?P<days>-?\d+) days?, )?(?P<hours>\d+):(?P<minutes>[0-5]\d):(?P<seconds>[0-5]\d(?:\.\d{1,6})?)$"
)
_BOOLS = {"true": True, "false": False, "1": True, "0": False}


def number(text: str) -> Any:
    try:
        return int(text)
    except ValueError:
        return float(text)


def auto(text: str) -> Any:
    try:
        return number(text)
    except ValueError:
        return text


def integer(text: str) -> int:
    """Parse an integer; ``"3.0"`` is accepted, ``"1.5"`` is not."""
    try:
        return int(text)
    except ValueError:
        value = float(text)
        if not value.is_integer():
            raise ValueError(f"not an integer: {text!r}") from None
        return int(value)


def boolean(text: str) -> bool:
    try:
        return _BOOLS[text.strip().lower()]
    except KeyError:
        raise ValueError(f"not a boolean: {text!r} (expected true/false)") from None


def parse_timedelta(text: str) -> timedelta:
    """Parse ``H:MM:SS[.ffffff]``, optionally prefixed by ``N day(s), `` as ``str(timedelta)`` prints it."""
    m = _TIMEDELTA.match(text.strip())
    if m is None:
        raise ValueError(f"not a duration: {text!r} (expected H:MM:SS)")
    days = int(m.group("days") or 0)
    return timedelta(
        days=days,
        hours=int(m.group("hours")),
        minutes=int(m.group("minutes")),
        seconds=float(m.group("seconds")),
    )


_ORDERED_PARSERS = {
    str: str,
    bool: boolean,
    date: date.fromisoformat,
    datetime: datetime.fromisoformat,
    time: time.fromisoformat,
    timedelta: parse_timedelta,
}


def _dtype_parser(dt: np.dtype) -> Callable[[str], Any]:
    if dt.kind == "b":
        return lambda text: np.bool_(boolean(text))
    if dt.kind == "U":
        return str
    if dt.kind == "S":
        return lambda text: text.encode("utf-8")
    unit, _ = np.datetime_data(dt)
    if dt.kind == "M":
        if unit == "generic":
            return np.datetime64
        return lambda text: np.datetime64(text, unit)
    if dt.kind == "m":
        # durations are integer counts of the dtype's unit
        if unit == "generic":
            return lambda text: np.timedelta64(integer(text))
        return lambda text: np.timedelta64(integer(text), unit)
    raise UnsupportedTypeError(dt, "no text parser")


def value_parser(tier: Optional[ElementTier]) -> Callable[[str], Any]:
    """Return the text parser for ``tier`` (``None`` guesses number or string)."""
    if tier is None:
        return auto
    if isinstance(tier, FixedWidthNumber):
        if tier.dtype is not None and tier.dtype.kind in "iu":
            return integer
        return float
    if isinstance(tier, ArbitraryPrecisionInteger):
        return integer
    if isinstance(tier, ArbitraryPrecisionDecimal):
        return Decimal
    if isinstance(tier, PolymorphicNumber):
        return number
    if isinstance(tier, GenericOrderedValue):
        if isinstance(tier.type_tag, np.dtype):
            return _dtype_parser(tier.type_tag)
        try:
            return _ORDERED_PARSERS[tier.type_tag]
        except (KeyError, TypeError):
            raise UnsupportedTypeError(tier.type_tag, "no text parser") from None
    raise UnsupportedTypeError(tier, "no text parser")


def pack(values: List[Any], tier: Optional[ElementTier]) -> Sequence[Any]:
    """Store parsed values the way the tier computes fastest: fixed widths as an ndarray."""
    if isinstance(tier, FixedWidthNumber) and tier.dtype is not None:
        return np.array(values, dtype=tier.dtype)
    return values


__all__ = ["value_parser", "pack", "number", "integer", "boolean", "parse_timedelta"]
