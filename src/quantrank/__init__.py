"""Package metadata and public API for quantrank.

Expose a single source of truth for the version. Prefer reading from
importlib.metadata so that an editable install or wheel always reports
the version declared in pyproject.toml. Fallback to a hardcoded string
to avoid import errors when metadata is unavailable (e.g. direct source
usage without installation).
"""

from __future__ import annotations

from importlib import metadata as _metadata

from .engine import QuantileRequest, compute, compute_of, median, percentile, quantile, quantiles
from .errors import QuantileError, UnsupportedInterpolationError, UnsupportedTypeError, ValidationError
from .interpolate import Interpolation
from .tiers import (
	ArbitraryPrecisionDecimal,
	ArbitraryPrecisionInteger,
	ElementTier,
	FixedWidthNumber,
	GenericOrderedValue,
	PolymorphicNumber,
	classify,
	infer_tier,
)

__all__ = [
	"__version__",
	"Interpolation",
	"QuantileRequest",
	"compute",
	"compute_of",
	"quantile",
	"quantiles",
	"median",
	"percentile",
	"ElementTier",
	"FixedWidthNumber",
	"ArbitraryPrecisionInteger",
	"ArbitraryPrecisionDecimal",
	"PolymorphicNumber",
	"GenericOrderedValue",
	"classify",
	"infer_tier",
	"QuantileError",
	"ValidationError",
	"UnsupportedInterpolationError",
	"UnsupportedTypeError",
]

_FALLBACK_VERSION = "0.1.0"  # MUST match pyproject.toml [project].version

try:  # pragma: no cover - success path covered indirectly via CLI test
	__version__ = _metadata.version("quantrank")  # type: ignore[assignment]
except Exception:  # pragma: no cover - fallback exercised if metadata missing
	__version__ = _FALLBACK_VERSION
