"""General utilities for fincalc

Contents
--------
- Validation helpers
- Rate conversions (percent ↔ decimal, annual → periodic)
- Rounding helpers (half-up display rounding)
- Threshold-table lookup (largest threshold <= key)
- Array helpers (ensure_1d)
"""

from __future__ import annotations

import math
from bisect import bisect_right
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence, Tuple, TypeVar

import numpy as np

from .exceptions import DomainError, ValidationError

__all__ = [
    # Validation
    "check_non_negative",
    "check_positive",
    "check_choice",
    # Rates
    "pct_to_decimal",
    "periodic_rate",
    # Rounding
    "round_money",
    "round_half_up",
    # Tables
    "threshold_lookup",
    # Arrays
    "ensure_1d",
]

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def check_non_negative(name: str, value: float) -> None:
    """Raise if *value* is negative (strict)."""
    if value < 0:
        raise ValidationError(f"{name} must be non-negative (got {value}).")


def check_positive(name: str, value: float) -> None:
    """Raise DomainError if *value* is not strictly positive (or is NaN)."""
    if not value > 0:
        raise DomainError(f"{name} must be positive (got {value}).")


def check_choice(name: str, value: str, choices: Sequence[str]) -> None:
    """Raise if *value* is not one of *choices*."""
    if value not in choices:
        raise ValidationError(
            f"{name} must be one of {sorted(choices)}, got {value!r}."
        )


# ---------------------------------------------------------------------------
# Rate conversions
# ---------------------------------------------------------------------------

def pct_to_decimal(pct: float) -> float:
    """Convert a percent value (5 → 0.05)."""
    return pct / 100.0


def periodic_rate(annual_pct: float, periods_per_year: int) -> float:
    """Nominal annual percent rate split evenly across periods (5, 12 → 0.05/12).

    Rates at or below -100% are rejected; `(1 + r)` must stay positive.
    """
    if periods_per_year < 1:
        raise DomainError(
            f"periods_per_year must be >= 1 (got {periods_per_year})."
        )
    if annual_pct <= -100:
        raise DomainError(f"annual rate must be > -100% (got {annual_pct}).")
    return annual_pct / 100.0 / periods_per_year


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

def round_money(value: float, places: int = 2) -> float:
    """Round to *places* decimals, ties away from zero, on the exact binary value.

    Matches fixed-point display rounding rather than Python's banker's
    rounding.
    """
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def round_half_up(value: float, places: int = 1) -> float:
    """Scale, add one half, floor: ``floor(x * 10**p + 0.5) / 10**p``."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


# ---------------------------------------------------------------------------
# Table lookup
# ---------------------------------------------------------------------------

def threshold_lookup(
    table: Sequence[Tuple[float, T]],
    key: float,
    default: T,
) -> T:
    """Return the value paired with the largest threshold <= *key*.

    *table* must be sorted ascending by threshold. Keys below the first
    threshold return *default*.

    Examples
    --------
    >>> threshold_lookup(((30, 80), (40, 82)), 35, default=80)
    80
    >>> threshold_lookup(((30, 80), (40, 82)), 45, default=80)
    82
    """
    thresholds = [t for t, _ in table]
    idx = bisect_right(thresholds, key)
    if idx == 0:
        return default
    return table[idx - 1][1]


# ---------------------------------------------------------------------------
# Array helpers
# ---------------------------------------------------------------------------

def ensure_1d(a: Sequence[float] | np.ndarray, *, name: str = "array") -> np.ndarray:
    """Convert input to a 1-D float NumPy array with helpful error messages."""
    arr = np.asarray(a, dtype=float)
    if arr.ndim != 1:
        raise ValidationError(f"{name} must be 1-D, got shape {arr.shape}.")
    if not np.isfinite(arr).all():
        raise ValidationError(f"{name} must contain only finite values.")
    return arr
