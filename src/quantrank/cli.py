import argparse
import json
import sys
from datetime import date, datetime, time
from decimal import InvalidOperation
from typing import Any, Iterable, List, Optional, TYPE_CHECKING

import numpy as np

from . import __version__
from .config import FRACTION_PRESETS, QuantileConfig
from .engine import quantiles
from .errors import QuantileError
from .interpolate import Interpolation
from .logutil import get_logger, set_verbose
from .tiers import ElementTier, classify
from .values import pack, value_parser

if TYPE_CHECKING:  # pragma: no cover - typing only
    from rich.console import Console as _Console
    from rich.table import Table as _Table
else:  # runtime optional import
    try:  # noqa: SIM105
        from rich.console import Console as _Console  # type: ignore
        from rich.table import Table as _Table  # type: ignore
    except Exception:  # noqa: BLE001
        _Console = None  # type: ignore
        _Table = None  # type: ignore


def read_values(lines: Iterable[str], tier: Optional[ElementTier]) -> Any:
    """Parse one value per line; blank lines are treated as missing and skipped."""
    parse = value_parser(tier)
    values: List[Any] = []
    for lineno, raw in enumerate(lines, start=1):
        text = raw.strip()
        if not text:
            continue
        try:
            values.append(parse(text))
        except (ValueError, InvalidOperation) as exc:
            raise ValueError(f"line {lineno}: cannot parse {text!r}: {exc}") from exc
    return pack(values, tier)


def _read_source(path: str) -> List[str]:
    if path == "-":
        return sys.stdin.read().splitlines()
    with open(path, "r", encoding="utf-8") as handle:
        return handle.read().splitlines()


def resolve_fractions(args: argparse.Namespace) -> List[float]:
    fractions: List[float] = []
    for name in getattr(args, "preset", None) or []:
        fractions.extend(FRACTION_PRESETS[name])
    fractions.extend(getattr(args, "quantile", None) or [])
    fractions.extend(p / 100.0 for p in getattr(args, "percentile", None) or [])
    return fractions or list(FRACTION_PRESETS["median"])


def format_value(value: Any, cfg: QuantileConfig) -> str:
    if value is None:
        return "NA"
    if isinstance(value, float) and cfg.float_digits is not None:
        return f"{value:.{cfg.float_digits}g}"
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    return str(value)


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, np.generic):
        return value.item() if not isinstance(value, (np.datetime64, np.timedelta64)) else str(value)
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    return str(value)


def _maybe_console(args: argparse.Namespace) -> Optional["_Console"]:
    if getattr(args, "no_color", False):
        return None
    if _Console is None:
        return None
    # force_terminal ensures ANSI codes even when output is being captured (for tests)
    return _Console(color_system="truecolor", stderr=False, force_terminal=True)


def print_results(fractions: List[float], results: List[Any], args: argparse.Namespace, cfg: QuantileConfig) -> None:
    console = _maybe_console(args)
    if console is not None and _Table is not None:
        table = _Table(title=f"{len(fractions)} quantile(s)")
        table.add_column("q", style="cyan", justify="right")
        table.add_column("value", style="bold green")
        for q, value in zip(fractions, results):
            table.add_row(f"{q:g}", format_value(value, cfg))
        console.print(table)
        return
    for q, value in zip(fractions, results):
        print(f"q={q:g} {format_value(value, cfg)}")


def _run_quantiles(args: argparse.Namespace, fractions: List[float]) -> int:
    if getattr(args, "verbose", False):
        set_verbose(True)
    cfg = QuantileConfig(float_digits=getattr(args, "digits", None))
    try:
        tier = classify(args.tier) if getattr(args, "tier", None) else None
        values = read_values(_read_source(args.file), tier)
        mode = Interpolation.parse(args.interpolation) if getattr(args, "interpolation", None) else None
        results = quantiles(values, fractions, mode, tier, cfg)
    except FileNotFoundError:
        print(f"[quantrank] file not found: {args.file}", file=sys.stderr)
        return 2
    except (QuantileError, ValueError, TypeError, OverflowError) as exc:
        print(f"[quantrank] {exc}", file=sys.stderr)
        return 2
    get_logger().debug("computed %d quantile(s) over %d values", len(results), len(values))

    if getattr(args, "json", None):
        payload = [{"q": q, "value": _jsonable(v)} for q, v in zip(fractions, results)]
        with open(args.json, "w", encoding="utf-8") as out:
            json.dump(payload, out, indent=2)
    print_results(fractions, results, args, cfg)
    return 0


def cmd_compute(args: argparse.Namespace) -> int:
    return _run_quantiles(args, resolve_fractions(args))


def cmd_median(args: argparse.Namespace) -> int:
    return _run_quantiles(args, [0.5])


def cmd_serve(args: argparse.Namespace) -> int:  # pragma: no cover - integration feature
    try:
        import uvicorn
        from .service import build_app
    except Exception:  # noqa: BLE001
        print("'serve' requires fastapi and uvicorn. Install with `pip install quantrank[server]`.", file=sys.stderr)
        return 2
    uvicorn.run(build_app(), host=args.host, port=args.port, log_level="info")
    return 0


def cmd_bench(args: argparse.Namespace) -> int:  # pragma: no cover - covered via integration test
    try:
        from bench.benchmark import run
    except Exception as exc:  # noqa: BLE001
        print(f"[quantrank] bench harness import failed: {exc}", file=sys.stderr)
        return 2
    run(args.size, args.repeat, args.seed)
    return 0


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("file", help="File with one value per line ('-' for stdin)")
    p.add_argument("--tier", help="Element type (e.g. float64, int32, int, decimal, number, str, bool, date, timedelta, datetime64[s])")
    p.add_argument(
        "--interpolation",
        choices=Interpolation.names(),
        help="Interpolation mode (default: linear for numbers, lower for other ordered values)",
    )
    p.add_argument("--digits", type=int, help="Significant digits for float output")
    p.add_argument("--json", help="Write results as JSON to this path")
    p.add_argument("--no-color", action="store_true", help="Disable colorized output even if rich present")
    p.add_argument("--verbose", action="store_true", help="Log engine decisions to stderr")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quantrank", description="Exact quantiles over ordered values")
    parser.add_argument("--version", action="version", version=f"quantrank {__version__}")
    sub = parser.add_subparsers(dest="cmd")

    compute_parser = sub.add_parser("compute", help="Compute one or more quantiles of a value file")
    _add_common(compute_parser)
    compute_parser.add_argument("-q", "--quantile", action="append", type=float, help="Fraction in [0,1] (repeatable)")
    compute_parser.add_argument("-p", "--percentile", action="append", type=float, help="Percentile in [0,100] (repeatable)")
    compute_parser.add_argument(
        "--preset",
        action="append",
        choices=sorted(FRACTION_PRESETS.keys()),
        help="Named set of fractions (repeatable)",
    )
    compute_parser.set_defaults(func=cmd_compute)

    median_parser = sub.add_parser("median", help="Median of a value file")
    _add_common(median_parser)
    median_parser.set_defaults(func=cmd_median)

    bench_parser = sub.add_parser("bench", help="Time selection vs full sort on synthetic data")
    bench_parser.add_argument("--size", type=int, default=100_000, help="Number of synthetic values")
    bench_parser.add_argument("--repeat", type=int, default=5, help="Timed repetitions per strategy")
    bench_parser.add_argument("--seed", type=int, default=42)
    bench_parser.set_defaults(func=cmd_bench)

    serve_parser = sub.add_parser("serve", help="Run HTTP service (requires quantrank[server])")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8080)
    serve_parser.set_defaults(func=cmd_serve)

    # Simple 'version' subcommand for shells/users preferring explicit command
    version_parser = sub.add_parser("version", help="Show version and exit")
    version_parser.set_defaults(func=lambda _: (print(f"quantrank {__version__}"), 0)[1])

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    if not getattr(args, "cmd", None):  # No subcommand provided
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
