"""Numeric statistics for fields whose values are numeric-typed."""
import decimal
from dataclasses import asdict, dataclass
from typing import Any, Sequence

import numpy as np
import pandas as pd

from common.bson_types import ExtendedScalar


@dataclass(frozen=True)
class FieldStats:
    min: float
    max: float
    avg: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def _unwrap(value: Any) -> Any:
    if isinstance(value, ExtendedScalar) and hasattr(value, "as_number"):
        value = value.as_number()
    if isinstance(value, bool):
        return None
    # Python ints are unbounded; go through float so pandas never overflows
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return None
    if isinstance(value, decimal.Decimal):
        return str(value)
    if isinstance(value, (float, str)):
        return value
    return None


def coerce_numeric(values: Sequence[Any]) -> list[float]:
    """
    Convert values to floats, dropping anything that does not parse.

    Tagged Long/Decimal wrappers are unwrapped first. Values that cannot be
    read as a finite number are skipped rather than treated as errors.

    Args:
        values: Raw values of numeric-typed PathValues.

    Returns:
        The coercible subset as floats, in input order.
    """
    if not values:
        return []
    series = pd.Series([_unwrap(v) for v in values], dtype=object)
    numeric = pd.to_numeric(series, errors="coerce").astype("float64")
    numeric = numeric[np.isfinite(numeric)]
    return numeric.tolist()


def calculate_stats(values: Sequence[float]) -> FieldStats:
    """Min, max and mean of values. An empty input yields all zeros."""
    if len(values) == 0:
        return FieldStats(min=0, max=0, avg=0)

    arr = np.asarray(values, dtype="float64")
    return FieldStats(
        min=_as_python_number(arr.min()),
        max=_as_python_number(arr.max()),
        avg=float(arr.mean()),
    )


def percentile(values: Sequence[float], p: float) -> float:
    """
    p-th percentile (0-100) using linear interpolation between closest ranks.

    Returns 0 for an empty input.
    """
    if len(values) == 0:
        return 0.0
    return float(np.percentile(np.asarray(values, dtype="float64"), p))


def std_dev(values: Sequence[float], avg: float) -> float:
    """Population standard deviation around a precomputed mean."""
    if len(values) <= 1:
        return 0.0
    arr = np.asarray(values, dtype="float64")
    return float(np.sqrt(np.mean((arr - avg) ** 2)))


def _as_python_number(value: np.floating) -> float:
    """Return an int for integral values so 42 renders as 42, not 42.0."""
    value = float(value)
    if value.is_integer() and abs(value) < 2 ** 53:
        return int(value)
    return value
