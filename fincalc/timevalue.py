"""
Time-value-of-money primitives for fincalc.

Purpose
-------
Leaf module used by almost every calculator: present value of a level
annuity, compound growth, level amortization payment and full amortization
schedules. All functions are pure float arithmetic with no rounding.

Key Mathematical Framework
--------------------------
- PV of annuity:      PV = PMT · (1 − (1+r)^−n) / r      (r ≠ 0)
                      PV = PMT · n                        (r = 0)
- Compound growth:    FV = P · (1+r)^n
- Level payment:      PMT = P · r(1+r)^n / ((1+r)^n − 1)  (r ≠ 0)
                      PMT = P / n                         (r = 0)

Rates here are **decimal per period** (0.05/12 for 5% compounded monthly).
Use ``RateSpec`` or ``utils.periodic_rate`` to convert percent inputs.

Example
-------
>>> pmt = amortization_payment(200_000, 0.06 / 12, 360)
>>> round(pmt, 2)
1199.1
>>> present_value_of_annuity(pmt, 0.06 / 12, 360)  # ≈ 200000.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .exceptions import DomainError
from .types import AmortizationRowDict
from .utils import periodic_rate

__all__ = [
    "RateSpec",
    "present_value_of_annuity",
    "future_value_growth",
    "amortization_payment",
    "discount_factor",
    "present_value",
    "amortization_schedule",
]


# ---------------------------------------------------------------------------
# Rate specification
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RateSpec:
    """
    Annual percentage rate plus compounding frequency.

    Parameters
    ----------
    annual_pct : float
        Nominal annual rate in percent. May be negative (deflation) but must
        be > -100.
    frequency : int, default 1
        Compounding periods per year (>= 1).

    Examples
    --------
    >>> RateSpec(6.0, 12).periodic_rate
    0.005
    """

    annual_pct: float
    frequency: int = 1

    def __post_init__(self):
        if self.frequency < 1:
            raise DomainError(f"frequency must be >= 1, got {self.frequency}")
        if self.annual_pct <= -100:
            raise DomainError(f"annual_pct must be > -100, got {self.annual_pct}")

    @property
    def periodic_rate(self) -> float:
        """Decimal rate per compounding period."""
        return periodic_rate(self.annual_pct, self.frequency)


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

def present_value_of_annuity(payment: float, periodic_rate: float, num_periods: float) -> float:
    """
    Present value of a level ordinary annuity.

    Parameters
    ----------
    payment : float
        Payment at the end of each period.
    periodic_rate : float
        Decimal discount rate per period.
    num_periods : float
        Number of payments.

    Returns
    -------
    float
        ``payment · (1 − (1+r)^−n) / r``, or exactly ``payment · n`` when
        the rate is zero.
    """
    if periodic_rate == 0:
        return payment * num_periods
    return payment * (1 - (1 + periodic_rate) ** -num_periods) / periodic_rate


def future_value_growth(principal: float, periodic_rate: float, num_periods: float) -> float:
    """Compound *principal* for *num_periods* at *periodic_rate*."""
    return principal * (1 + periodic_rate) ** num_periods


def amortization_payment(principal: float, periodic_rate: float, num_periods: float) -> float:
    """
    Level payment that fully amortizes *principal* over *num_periods*.

    Raises
    ------
    DomainError
        If ``num_periods <= 0``.

    Notes
    -----
    A zero rate takes the limit ``principal / num_periods``.
    """
    if num_periods <= 0:
        raise DomainError(
            f"num_periods must be positive, got {num_periods}. "
            f"A level payment is undefined over zero periods."
        )
    if periodic_rate == 0:
        return principal / num_periods
    growth = (1 + periodic_rate) ** num_periods
    return principal * (periodic_rate * growth) / (growth - 1)


def discount_factor(periodic_rate: float, periods: float) -> float:
    """``(1 + r)^−t``."""
    return (1 + periodic_rate) ** -periods


def present_value(amount: float, periodic_rate: float, periods: float) -> float:
    """Discount a single *amount* received after *periods*."""
    return amount * discount_factor(periodic_rate, periods)


# ---------------------------------------------------------------------------
# Schedules
# ---------------------------------------------------------------------------

def amortization_schedule(
    principal: float,
    annual_rate_pct: float,
    years: float,
    payments_per_year: int = 12,
) -> List[AmortizationRowDict]:
    """
    Full period-by-period amortization schedule of a level-payment loan.

    Parameters
    ----------
    principal : float
        Amount borrowed.
    annual_rate_pct : float
        Nominal annual rate in percent.
    years : float
        Term in years; the period count is truncated to an integer.
    payments_per_year : int, default 12
        Payment frequency.

    Returns
    -------
    list of AmortizationRowDict
        One row per period. Balances are floored at zero for display; the
        running balance itself is not floored.

    Examples
    --------
    >>> rows = amortization_schedule(100_000, 6, 5)
    >>> len(rows)
    60
    """
    rate = periodic_rate(annual_rate_pct, payments_per_year)
    n = int(years * payments_per_year)
    payment = amortization_payment(principal, rate, n)

    schedule: List[AmortizationRowDict] = []
    balance = principal
    for period in range(1, n + 1):
        interest = balance * rate
        principal_paid = payment - interest
        balance -= principal_paid
        schedule.append(
            {
                "period": period,
                "payment": payment,
                "principal": principal_paid,
                "interest": interest,
                "balance": max(0.0, balance),
            }
        )
    return schedule
