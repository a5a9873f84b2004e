"""
Actuarial tables for fincalc.

Purpose
-------
Parametric mortality curve, survival probabilities and the simplified
life-expectancy and death-probability estimators shared by the annuity,
pension and insurance calculators.

Key Mathematical Framework
--------------------------
- Gompertz-Makeham annual mortality:  q(x) = a + b·e^(c·x), clamped to [0, 0.99]
- Gompertz survival (life annuities): S(x, t) = exp(−0.0005·e^(0.08(x−20))·t)
- Death probability over n years:     1 − Π_{k<n} (1 − min(0.99, q₀·1.08^max(0, x+k−40)))

Decade-indexed tables are sorted ``(threshold_age, value)`` tuples resolved
with ``utils.threshold_lookup`` (largest threshold <= age).

Example
-------
>>> life_expectancy(40)
82.3
>>> 0 < death_probability(40, 20) < 1
True
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import pandas as pd

from .constants import SMOKER_MULTIPLIER
from .exceptions import ValidationError
from .utils import check_choice, check_non_negative, round_half_up, threshold_lookup

__all__ = [
    "MortalityCurve",
    "HEALTH_ADJUSTMENTS",
    "life_expectancy",
    "death_probability",
    "survival_probability",
]


BASE_LIFE_EXPECTANCY: Tuple[Tuple[int, float], ...] = (
    (30, 80.0),
    (40, 82.0),
    (50, 83.0),
    (60, 84.0),
    (70, 85.0),
    (80, 88.0),
    (90, 92.0),
)
DEFAULT_LIFE_EXPECTANCY = 80.0

# Annual deaths per 1000 lives.
BASE_ANNUAL_MORTALITY: Tuple[Tuple[int, float], ...] = (
    (30, 1.2),
    (40, 1.8),
    (50, 4.5),
    (60, 12.5),
    (70, 35.0),
    (80, 95.0),
)
DEFAULT_ANNUAL_MORTALITY = 1.2

SMOKER_LIFE_REDUCTION = 8.0

# NOTE: "poor" adds years rather than removing them. Pending product
# clarification.
HEALTH_ADJUSTMENTS = {
    "excellent": 2.0,
    "good": 0.0,
    "average": 0.0,
    "poor": 5.0,
}

MAX_ANNUAL_HAZARD = 0.99


# ---------------------------------------------------------------------------
# Mortality curve
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MortalityCurve:
    """
    Gompertz-Makeham mortality curve ``q(x) = a + b·e^(c·x)``.

    Parameters
    ----------
    a : float
        Age-independent (Makeham) hazard.
    b : float
        Gompertz scale.
    c : float
        Gompertz rate of ageing.

    Notes
    -----
    Defaults are GAM83-style parameters for a simple mortality table
    generator. Every rate is clamped to [0, 0.99].

    Examples
    --------
    >>> curve = MortalityCurve()
    >>> 0 <= curve.mortality_rate(65) <= 0.99
    True
    """

    a: float = 0.00005
    b: float = 0.085
    c: float = 0.0000001

    def mortality_rate(self, age: float) -> float:
        """Annual probability of death at *age*, clamped to [0, 0.99]."""
        qx = self.a + self.b * math.exp(self.c * age)
        return min(MAX_ANNUAL_HAZARD, max(0.0, qx))

    def survival_rate(self, age: float) -> float:
        """One-year survival probability, never below 0.01."""
        return max(0.01, 1.0 - self.mortality_rate(age))

    def mortality_table(self, start_age: int = 30, end_age: int = 100) -> pd.DataFrame:
        """
        Tabulate the curve for integer ages ``start_age..end_age`` inclusive.

        Returns
        -------
        pd.DataFrame
            Indexed by ``age`` with columns ``death_rate``, ``survival_rate``
            and ``deaths_per_1000``.
        """
        if end_age < start_age:
            raise ValidationError(f"end_age ({end_age}) must be >= start_age ({start_age})")
        ages = range(int(start_age), int(end_age) + 1)
        rows = [
            {
                "age": age,
                "death_rate": self.mortality_rate(age),
                "survival_rate": self.survival_rate(age),
                "deaths_per_1000": int(round_half_up(self.mortality_rate(age) * 1000, 0)),
            }
            for age in ages
        ]
        return pd.DataFrame(rows).set_index("age")


# ---------------------------------------------------------------------------
# Estimators
# ---------------------------------------------------------------------------

def life_expectancy(age: float, is_smoker: bool = False, health: str = "good") -> float:
    """
    Projected age at death.

    Parameters
    ----------
    age : float
        Current age.
    is_smoker : bool, default False
        Smokers lose 8 years.
    health : {"excellent", "good", "average", "poor"}, default "good"
        Health tier; see ``HEALTH_ADJUSTMENTS``.

    Returns
    -------
    float
        Life expectancy rounded half-up to one decimal.

    Notes
    -----
    The base value from the decade table is nudged by
    ``(10 − age mod 10)·0.3/10`` toward the next decade boundary.
    """
    check_non_negative("age", age)
    check_choice("health", health, tuple(HEALTH_ADJUSTMENTS))

    base = threshold_lookup(BASE_LIFE_EXPECTANCY, age, DEFAULT_LIFE_EXPECTANCY)
    years_until_next_decade = 10 - (age % 10)
    base += years_until_next_decade * 0.3 / 10

    smoker_reduction = SMOKER_LIFE_REDUCTION if is_smoker else 0.0
    return round_half_up(base - smoker_reduction + HEALTH_ADJUSTMENTS[health], 1)


def death_probability(age: float, years: int, is_smoker: bool = False) -> float:
    """
    Probability of dying within *years* starting at *age*.

    The annual base rate comes from the decade table (per 1000), is scaled by
    2.5 for smokers, and grows 8% per year of age beyond 40. Each year's
    hazard is capped at 99%.

    Returns
    -------
    float
        Probability in [0, 1].
    """
    check_non_negative("age", age)
    base_rate = threshold_lookup(BASE_ANNUAL_MORTALITY, age, DEFAULT_ANNUAL_MORTALITY) / 1000
    if is_smoker:
        base_rate *= SMOKER_MULTIPLIER

    survival = 1.0
    for year in range(int(years)):
        adjusted = base_rate * 1.08 ** max(0, age + year - 40)
        survival *= 1 - min(MAX_ANNUAL_HAZARD, adjusted)

    return max(0.0, min(1.0, 1.0 - survival))


def survival_probability(age: float, years: float) -> float:
    """Gompertz survival to ``age + years`` used when pricing life annuities."""
    hazard = 0.0005 * math.exp(0.08 * (age - 20))
    return math.exp(-hazard * years)
