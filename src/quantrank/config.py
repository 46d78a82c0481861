import numbers
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from .interpolate import Interpolation


@dataclass
class QuantileConfig:
    # Interpolation used when the caller does not name one
    numeric_interpolation: Interpolation = Interpolation.LINEAR
    ordered_interpolation: Interpolation = Interpolation.LOWER
    # Let single-fraction selection reorder the caller's buffer instead of a private copy
    in_place: bool = False
    # CLI rendering: significant digits for float results (None = repr)
    float_digits: int | None = None

    def default_interpolation(self, arithmetic: bool) -> Interpolation:
        return self.numeric_interpolation if arithmetic else self.ordered_interpolation


# Named fraction sets; tune as needed
FRACTION_PRESETS = {
    "median": [0.5],
    "quartiles": [0.25, 0.5, 0.75],
    "deciles": [i / 10 for i in range(1, 10)],
    "tail": [0.9, 0.95, 0.99],
    "extremes": [0.0, 1.0],
}

# Type tag names understood by tiers.classify. String values are numpy dtype names.
TYPE_ALIASES = {
    "byte": "int8",
    "short": "int16",
    "long": "int64",
    "double": "float64",
    "float": float,
    "int": int,
    "integer": int,
    "bigint": int,
    "biginteger": int,
    "decimal": Decimal,
    "bigdecimal": Decimal,
    "number": numbers.Number,
    "str": str,
    "string": str,
    "bool": bool,
    "date": date,
    "datetime": datetime,
    "time": time,
    "timedelta": timedelta,
}
