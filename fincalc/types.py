"""
Type definitions for fincalc.

Purpose
-------
Provides TypedDict definitions for the small dictionary rows embedded in
result records (schedules, weight listings, option tables). Top-level results
are frozen dataclasses; these rows stay plain dicts so they serialize as-is.

Type Definitions
----------------
AmortizationRowDict
    One period of a loan schedule: {"period", "payment", "interest", ...}

AssetWeightDict
    Named portfolio weight: {"asset", "weight"}

ProjectionRowDict
    Sampled balance snapshot: {"year", "age", "balance"}

ScenarioRowDict
    Variable-annuity snapshot: {"year", "value", "gain"}

CoverageOptionDict
    Umbrella coverage tier: {"coverage", "annual_cost"}

RentalYearDict
    Rental projection year: {"year", "property_value", "noi", ...}
"""

from typing_extensions import TypedDict, NotRequired

__all__ = [
    "AmortizationRowDict",
    "AssetWeightDict",
    "ProjectionRowDict",
    "ScenarioRowDict",
    "CashValueRowDict",
    "DividendRowDict",
    "CoverageOptionDict",
    "RentalYearDict",
]


class AmortizationRowDict(TypedDict):
    """
    One period of an amortization schedule.

    Attributes
    ----------
    period : int
        1-based payment number.
    payment : float
        Level payment for the period.
    principal : float
        Part of the payment that reduces the balance.
    interest : float
        Interest accrued on the opening balance.
    balance : float
        Closing balance, floored at zero.
    total_interest : float, optional
        Cumulative interest paid so far (mortgage schedules only).
    """

    period: int
    payment: float
    principal: float
    interest: float
    balance: float
    total_interest: NotRequired[float]


class AssetWeightDict(TypedDict):
    """
    Named portfolio weight.

    Examples
    --------
    >>> w: AssetWeightDict = {"asset": "Equities", "weight": 0.6}
    """

    asset: str
    weight: float


class ProjectionRowDict(TypedDict):
    """Sampled balance snapshot of an accumulation schedule."""

    year: int
    age: int
    balance: float


class ScenarioRowDict(TypedDict):
    """Variable-annuity snapshot: account value and gain over contributions."""

    year: int
    value: float
    gain: float


class CashValueRowDict(TypedDict):
    """Whole-life policy snapshot."""

    year: int
    age: int
    annual_premium: float
    cash_value: float
    death_benefit: float
    borrowing_capacity: float


class DividendRowDict(TypedDict):
    """Participating-policy dividend snapshot."""

    year: int
    annual_dividend: float
    cumulative_dividends: float
    dividend_use: str


class CoverageOptionDict(TypedDict):
    """Umbrella liability coverage tier."""

    coverage: float
    annual_cost: float


class RentalYearDict(TypedDict):
    """Rental property projection year."""

    year: int
    property_value: float
    noi: float
    cash_flow: float
    equity: float
