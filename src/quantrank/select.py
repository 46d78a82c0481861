"""Order statistics: the element that would sit at a given rank when sorted.

Two strategies, picked once per request:

- sort path: a private sorted copy, indexed directly. Used for batches of more
  than one fraction (the sort is amortised across ranks) and for tiers that
  must be ordered through a derived key.
- selection path: quickselect on a buffer, average O(n) per rank without a
  full sort. The buffer is partially reordered on every call; each call still
  returns the correct rank regardless of what earlier calls did to it.

Selection only reorders the caller's storage when ``in_place`` is requested;
otherwise it works on a private copy.
"""
from __future__ import annotations

from collections.abc import MutableSequence
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

import numpy as np


def _median_of_three(a: Any, b: Any, c: Any) -> Any:
    if b < a:
        a, b = b, a
    if c < b:
        b = c
        if b < a:
            b = a
    return b


def quickselect(buf: MutableSequence, k: int) -> Any:
    """Return the k-th smallest element of ``buf``, partially reordering it.

    Iterative three-way partitioning with a median-of-three pivot; only ``<``
    is used, so any totally ordered element type works. Runs of equal values
    are handled in one pass.
    """
    n = len(buf)
    if not 0 <= k < n:
        raise IndexError(f"rank {k} out of range for {n} elements")
    lo, hi = 0, n - 1
    while lo < hi:
        pivot = _median_of_three(buf[lo], buf[(lo + hi) // 2], buf[hi])
        # [lo, lt) < pivot, [lt, i) == pivot, (gt, hi] > pivot
        lt, i, gt = lo, lo, hi
        while i <= gt:
            v = buf[i]
            if v < pivot:
                buf[lt], buf[i] = v, buf[lt]
                lt += 1
                i += 1
            elif pivot < v:
                buf[gt], buf[i] = v, buf[gt]
                gt -= 1
            else:
                i += 1
        if k < lt:
            hi = lt - 1
        elif k > gt:
            lo = gt + 1
        else:
            return buf[k]
    return buf[k]


def _partition_select(arr: np.ndarray, k: int) -> Any:
    arr.partition(k)
    return arr[k]


@dataclass
class ComputationContext:
    """Prepared data for one request plus the accessor bound to it."""

    data: Any  # list or 1-D ndarray
    is_sorted: bool

    def __len__(self) -> int:
        return len(self.data)

    @property
    def at(self) -> Callable[[int], Any]:
        if self.is_sorted:
            return self.data.__getitem__
        if isinstance(self.data, np.ndarray):
            return lambda k: _partition_select(self.data, k)
        return lambda k: quickselect(self.data, k)


def _require_1d(arr: np.ndarray) -> None:
    if arr.ndim != 1:
        raise ValueError(f"expected a 1-D array, got shape {arr.shape}")


def sorted_copy(elements: Sequence[Any], key: Optional[Callable[[Any], Any]] = None) -> Any:
    if isinstance(elements, np.ndarray):
        _require_1d(elements)
        if key is None:
            return np.sort(elements, kind="stable")
    return sorted(elements, key=key)


def selection_buffer(elements: Sequence[Any], in_place: bool) -> Any:
    if isinstance(elements, np.ndarray):
        _require_1d(elements)
        return elements if in_place else elements.copy()
    if in_place:
        if not isinstance(elements, MutableSequence):
            raise TypeError(
                f"in_place=True needs a mutable sequence or ndarray, got {type(elements).__name__}"
            )
        return elements
    return list(elements)


def prepare(
    elements: Sequence[Any],
    sort: bool,
    key: Optional[Callable[[Any], Any]] = None,
    in_place: bool = False,
) -> ComputationContext:
    """Build the computation context for one request.

    ``sort`` selects the sort path (always a private copy, ``in_place`` is
    ignored). Otherwise ``elements`` is prepared for selection, reordering the
    caller's buffer only when ``in_place`` is true.
    """
    if sort:
        return ComputationContext(sorted_copy(elements, key), is_sorted=True)
    return ComputationContext(selection_buffer(elements, in_place), is_sorted=False)


__all__ = [
    "ComputationContext",
    "quickselect",
    "prepare",
    "sorted_copy",
    "selection_buffer",
]
