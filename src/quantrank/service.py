"""Optional FastAPI service exposing quantile computation as HTTP endpoints.

Install with `pip install quantrank[server]` to enable.
This keeps the core library dependency-light.
"""
from __future__ import annotations

from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Sequence, Union

import numpy as np

try:  # pragma: no cover - optional dependency
    from fastapi import FastAPI, HTTPException
    from pydantic import BaseModel
except Exception as exc:  # noqa: BLE001
    raise RuntimeError(
        "FastAPI not installed. Install with `pip install quantrank[server]` to use the service."  # noqa: E501
    ) from exc

from . import __version__
from .config import QuantileConfig
from .engine import quantiles
from .errors import QuantileError
from .interpolate import Interpolation
from .logutil import get_logger
from .tiers import ElementTier, classify, infer_tier
from .values import pack, value_parser

Value = Union[int, float, str]
_DEFAULTS = QuantileConfig()


class QuantilesRequest(BaseModel):
    values: List[Value]
    fractions: List[float]
    interpolation: Optional[str] = None
    tier: Optional[str] = None  # type name, e.g. "float64", "decimal", "str"


class MedianRequest(BaseModel):
    values: List[Value]
    interpolation: Optional[str] = None
    tier: Optional[str] = None


class QuantilesResponse(BaseModel):
    tier: Optional[str]
    interpolation: str
    results: List[Any]


class MedianResponse(BaseModel):
    result: Any


def _coerce(values: List[Value], tier: Optional[ElementTier]) -> Sequence[Any]:
    # JSON has no decimal or date types; a declared tier parses every value from its text form.
    if tier is None:
        return list(values)
    parse = value_parser(tier)
    parsed: List[Any] = []
    for i, v in enumerate(values):
        try:
            parsed.append(parse(str(v)))
        except (ValueError, InvalidOperation) as exc:
            raise ValueError(f"values[{i}]: cannot parse {v!r} as {tier}") from exc
    return pack(parsed, tier)


def _jsonable(value: Any) -> Any:
    if isinstance(value, (Decimal, timedelta, np.datetime64, np.timedelta64)):
        return str(value)
    if isinstance(value, np.generic):
        return value.item()
    return value


def _run(values: List[Value], fractions: List[float], interpolation: Optional[str], tier_name: Optional[str]):
    try:
        tier = classify(tier_name) if tier_name else None
        data = _coerce(values, tier)
        if tier is None and data:
            tier = infer_tier(data)
        if interpolation:
            mode = Interpolation.parse(interpolation)
        else:
            mode = _DEFAULTS.default_interpolation(tier.arithmetic if tier is not None else True)
        results = quantiles(data, fractions, mode, tier)
    except (QuantileError, ValueError, TypeError, ArithmeticError) as exc:
        get_logger().info("rejected request: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return tier, mode, [_jsonable(r) for r in results]


def build_app() -> FastAPI:
    app = FastAPI(title="quantrank service", version=__version__)

    @app.get("/healthz")
    def health() -> dict[str, str]:  # pragma: no cover - trivial
        return {"status": "ok"}

    @app.post("/quantiles", response_model=QuantilesResponse)
    def compute_quantiles(req: QuantilesRequest) -> QuantilesResponse:
        tier, mode, results = _run(req.values, req.fractions, req.interpolation, req.tier)
        return QuantilesResponse(
            tier=str(tier) if tier is not None else None,
            interpolation=mode.value,
            results=results,
        )

    @app.post("/median", response_model=MedianResponse)
    def compute_median(req: MedianRequest) -> MedianResponse:
        _, _, results = _run(req.values, [0.5], req.interpolation, req.tier)
        return MedianResponse(result=results[0])

    return app


__all__ = ["build_app"]
