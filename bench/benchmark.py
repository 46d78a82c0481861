"""Simple benchmarking harness for quantrank.

Times the selection path (single fraction, quickselect / ndarray.partition)
against the sort path (several fractions) on synthetic data, for both a
Python list and a numpy array. Keeps dependencies minimal; for deeper
profiling integrate with py-spy or scalene externally.
"""
from __future__ import annotations

import argparse
import time
from typing import Any, Callable, List

import numpy as np

from quantrank import compute


def synthetic_values(n: int, seed: int = 42) -> np.ndarray:
    rng = np.random.default_rng(seed)
    # Skewed sample so the median is not near the middle of the value range
    return rng.lognormal(mean=0.0, sigma=1.0, size=n)


def _time(fn: Callable[[], Any], repeat: int) -> float:
    best = float("inf")
    for _ in range(max(1, repeat)):
        start = time.perf_counter()
        fn()
        best = min(best, time.perf_counter() - start)
    return best * 1000.0


def run(size: int, repeat: int, seed: int = 42) -> List[str]:
    arr = synthetic_values(size, seed)
    as_list = arr.tolist()
    rows = [
        ("list   select q=0.5", lambda: compute(as_list, [0.5])),
        ("list   sort   q=0.5,0.9", lambda: compute(as_list, [0.5, 0.9])),
        ("ndarray select q=0.5", lambda: compute(arr, [0.5])),
        ("ndarray sort   q=0.5,0.9", lambda: compute(arr, [0.5, 0.9])),
    ]
    lines = []
    for label, fn in rows:
        lines.append(f"{label:<26} {_time(fn, repeat):9.3f} ms (best of {repeat}, n={size})")
    for line in lines:
        print(line)
    return lines


def main() -> int:
    ap = argparse.ArgumentParser(description="Benchmark quantrank selection vs sort")
    ap.add_argument("--size", type=int, default=100_000, help="Number of synthetic values")
    ap.add_argument("--repeat", type=int, default=5, help="Timed repetitions per strategy")
    ap.add_argument("--seed", type=int, default=42)
    args = ap.parse_args()
    run(args.size, args.repeat, args.seed)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual use
    raise SystemExit(main())
