"""
Audit and accounting calculators for fincalc.

Purpose
-------
- audit_sampling         : materiality thresholds and attribute sample size
- calculate_depreciation : straight-line, double-declining and sum-of-years
- financial_ratios       : liquidity, leverage and return ratios

Key Mathematical Framework
--------------------------
Attribute sample size with finite-population correction:

    n₀ = z²·p(1 − p) / e²
    n  = ⌈ n₀ / (1 + (n₀ − 1)/N) ⌉
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Optional

from .constants import AUDIT_Z_SCORES, DEFAULT_AUDIT_Z
from .exceptions import DomainError, ValidationError
from .utils import check_choice, check_positive

__all__ = [
    "AuditPlan",
    "DepreciationResult",
    "FinancialRatios",
    "DEPRECIATION_METHODS",
    "audit_sampling",
    "calculate_depreciation",
    "financial_ratios",
]

PERFORMANCE_MATERIALITY = 0.75
TRIVIAL_THRESHOLD = 0.05
QUICK_ASSET_SHARE = 0.7

DepreciationMethod = Literal["straight-line", "declining-balance", "sum-of-years"]
DEPRECIATION_METHODS = ("straight-line", "declining-balance", "sum-of-years")


@dataclass(frozen=True)
class AuditPlan:
    """
    Audit planning figures.

    Attributes
    ----------
    materiality : float
        Smallest of the asset, revenue and income bases times the
        materiality percentage.
    performance_materiality : float
        75% of materiality.
    trivial_threshold : float
        5% of materiality.
    sample_size : int
        Attribute sample size after the finite-population correction.
    sampling_rate_pct : float
        Sample size over population, percent.
    """

    materiality: float
    performance_materiality: float
    trivial_threshold: float
    sample_size: int
    sampling_rate_pct: float


@dataclass(frozen=True)
class DepreciationResult:
    annual_depreciation: float
    accumulated_depreciation: float
    book_value: float
    method: str


@dataclass(frozen=True)
class FinancialRatios:
    current_ratio: float
    quick_ratio: float
    debt_to_equity: Optional[float]
    debt_to_assets: float
    roe_pct: Optional[float]
    roa_pct: float
    profit_margin_pct: Optional[float]
    working_capital: float


def audit_sampling(
    assets: float,
    revenue: float,
    income: float,
    materiality_pct: float,
    population_size: int,
    confidence: float = 95,
    margin_pct: float = 5,
    expected_error_pct: float = 5,
) -> AuditPlan:
    """
    Plan materiality and an attribute sample.

    Parameters
    ----------
    assets, revenue, income : float
        Materiality bases.
    materiality_pct : float
        Percent applied to each base.
    population_size : int
        Items in the population (> 0).
    confidence : float, default 95
        90, 95 or 99 map to z = 1.645, 1.96, 2.576; anything else uses 1.96.
    margin_pct : float, default 5
        Tolerable deviation (> 0), percent.
    expected_error_pct : float, default 5
        Expected deviation rate, percent.

    Returns
    -------
    AuditPlan

    Raises
    ------
    DomainError
        If the population is empty or the margin is zero.

    Examples
    --------
    >>> audit_sampling(1e6, 2e6, 1e5, 5, population_size=1000).sample_size
    69
    """
    if population_size <= 0:
        raise DomainError(f"population_size must be > 0, got {population_size}")
    check_positive("margin_pct", margin_pct)

    pct = materiality_pct / 100
    materiality = min(assets * pct, revenue * pct, income * pct)

    z = AUDIT_Z_SCORES.get(confidence, DEFAULT_AUDIT_Z)
    p = expected_error_pct / 100
    e = margin_pct / 100
    n0 = z * z * p * (1 - p) / (e * e)

    # Zero expected variance needs no sample; skip the correction so n stays 0.
    if n0 > 0:
        n0 = n0 / (1 + (n0 - 1) / population_size)
    sample_size = int(math.ceil(n0))

    return AuditPlan(
        materiality=materiality,
        performance_materiality=materiality * PERFORMANCE_MATERIALITY,
        trivial_threshold=materiality * TRIVIAL_THRESHOLD,
        sample_size=sample_size,
        sampling_rate_pct=sample_size / population_size * 100,
    )


def calculate_depreciation(
    cost: float,
    salvage: float,
    useful_life: int,
    method: DepreciationMethod = "straight-line",
    year: int = 1,
) -> DepreciationResult:
    """
    Depreciation charge and book value for a given year.

    Parameters
    ----------
    cost : float
        Original cost.
    salvage : float
        Residual value; declining balance never depreciates below it.
    useful_life : int
        Life in years (> 0).
    method : {"straight-line", "declining-balance", "sum-of-years"}
        ``declining-balance`` is double declining (rate ``2 / life``).
    year : int, default 1
        1-based year of interest.

    Returns
    -------
    DepreciationResult

    Raises
    ------
    ValidationError
        For an unknown method or a year outside ``1..useful_life`` (sum of
        years only).
    """
    check_choice("method", method, DEPRECIATION_METHODS)
    check_positive("useful_life", useful_life)
    if year < 1:
        raise ValidationError(f"year must be >= 1, got {year}")

    depreciable = cost - salvage
    if method == "straight-line":
        charge = depreciable / useful_life
        book_value = cost - charge * year
        accumulated = cost - book_value
    elif method == "declining-balance":
        rate = 2 / useful_life
        remaining = cost
        charge = 0.0
        for _ in range(int(year)):
            charge = remaining * rate
            remaining -= charge
            if remaining < salvage:
                charge = remaining + charge - salvage
                remaining = salvage
        book_value = remaining
        accumulated = cost - book_value
    else:
        if year > useful_life:
            raise ValidationError(f"year ({year}) must not exceed useful_life ({useful_life})")
        sum_of_years = useful_life * (useful_life + 1) / 2
        charge = depreciable * (useful_life - year + 1) / sum_of_years
        # Cumulative charge through the requested year.
        accumulated = depreciable * sum(
            (useful_life - k + 1) for k in range(1, int(year) + 1)
        ) / sum_of_years
        book_value = cost - accumulated

    return DepreciationResult(
        annual_depreciation=charge,
        accumulated_depreciation=accumulated,
        book_value=book_value,
        method=method,
    )


def financial_ratios(
    current_assets: float,
    current_liabilities: float,
    total_assets: float,
    total_liabilities: float,
    revenue: float,
    net_income: float,
) -> FinancialRatios:
    """
    Standard balance-sheet and income ratios.

    The quick ratio assumes 70% of current assets are liquid. Ratios over
    equity or revenue are None when the denominator is zero.
    """
    check_positive("current_liabilities", current_liabilities)
    check_positive("total_assets", total_assets)

    equity = total_assets - total_liabilities
    return FinancialRatios(
        current_ratio=current_assets / current_liabilities,
        quick_ratio=current_assets * QUICK_ASSET_SHARE / current_liabilities,
        debt_to_equity=total_liabilities / equity if equity != 0 else None,
        debt_to_assets=total_liabilities / total_assets,
        roe_pct=net_income / equity * 100 if equity != 0 else None,
        roa_pct=net_income / total_assets * 100,
        profit_margin_pct=net_income / revenue * 100 if revenue != 0 else None,
        working_capital=current_assets - current_liabilities,
    )
