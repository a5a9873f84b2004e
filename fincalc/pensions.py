"""
Pension and retirement calculators for fincalc.

Purpose
-------
- defined_benefit_pension   : final-salary pension with early-retirement
                              penalty, survivor options and present value
- defined_contribution_401k : annual accumulation, 4% rule, first RMD
- retirement_projection     : monthly accumulation with employer match and a
                              real-terms depletion test

Key Mathematical Framework
--------------------------
Defined benefit:
    B = salary · accrual_rate · years_service
    B_reduced = B · (1 − 0.06 · max(0, 65 − retirement_age))
    PV = Σ_{t=1..⌊LE − age⌋} B_reduced / 1.04^t

Defined contribution (annual compounding):
    W_t = W_{t−1} · (1 + r) + C

Notes
-----
The first required minimum distribution uses a fixed divisor of 26.5 (the
IRS Uniform Lifetime factor at 73) regardless of the actual start age.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List

from .actuarial import life_expectancy
from .constants import (
    EARLY_RETIREMENT_PENALTY,
    MONTHS_PER_YEAR,
    NORMAL_RETIREMENT_AGE,
    RMD_DIVISOR,
    RMD_START_AGE,
    SAFE_WITHDRAWAL_RATE,
    SCHEDULE_SAMPLE_EVERY,
    SURVIVOR_HAIRCUTS,
)
from .exceptions import ValidationError
from .timevalue import future_value_growth, present_value
from .types import ProjectionRowDict
from .utils import check_non_negative, check_positive, round_money

__all__ = [
    "DefinedBenefitResult",
    "DefinedContributionResult",
    "RetirementProjection",
    "defined_benefit_pension",
    "defined_contribution_401k",
    "retirement_projection",
]

logger = logging.getLogger(__name__)

PENSION_DISCOUNT_RATE = 0.04


# ---------------------------------------------------------------------------
# Result records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DefinedBenefitResult:
    """
    Defined benefit pension estimate.

    Attributes
    ----------
    unreduced_annual_benefit, unreduced_monthly_benefit : float
        Benefit before any early-retirement penalty.
    early_retirement_penalty_pct : float
        Penalty in percent (6 points per year before 65).
    reduced_annual_benefit, reduced_monthly_benefit : float
        Benefit after the penalty.
    survivor_options : dict
        ``{"100%": ..., "75%": ..., "50%": ...}`` annual benefit under each
        joint-and-survivor election.
    projected_lifetime_payments : float
        Reduced benefit × years of payment (undiscounted).
    present_value : float
        Reduced benefit discounted at 4% over the whole payment years.
    life_expectancy_at_retirement : float
    """

    years_of_service: float
    salary: float
    accrual_rate_pct: float
    unreduced_annual_benefit: float
    unreduced_monthly_benefit: float
    early_retirement_penalty_pct: float
    reduced_annual_benefit: float
    reduced_monthly_benefit: float
    survivor_options: Dict[str, float]
    projected_lifetime_payments: float
    present_value: float
    life_expectancy_at_retirement: float


@dataclass(frozen=True)
class DefinedContributionResult:
    projection_years: int
    retirement_age: float
    current_balance: float
    annual_contribution: float
    average_return_pct: float
    projected_balance: float
    safe_annual_withdrawal: float
    safe_monthly_withdrawal: float
    real_monthly_income: float
    years_of_retirement: float
    balance_projection: List[ProjectionRowDict] = field(default_factory=list)
    required_monthly_contribution: float = 0.0
    first_rmd_amount: float = 0.0
    rmd_start_age: int = RMD_START_AGE


@dataclass(frozen=True)
class RetirementProjection:
    """
    Monthly-compounded retirement projection.

    ``lasting_years`` counts whole retirement years fully funded by the 4%
    income, capped at the retirement horizon; ``sufficient`` is True when the
    savings last the whole horizon.
    """

    retirement_balance: float
    real_balance: float
    annual_withdrawal: float
    monthly_income: float
    total_contributions: float
    investment_gains: float
    lasting_years: float
    sufficient: bool


# ---------------------------------------------------------------------------
# Defined benefit
# ---------------------------------------------------------------------------

def defined_benefit_pension(
    years_service: float,
    salary: float,
    accrual_rate: float = 0.015,
    retirement_age: float = 65,
) -> DefinedBenefitResult:
    """
    Estimate a final-salary defined benefit pension.

    Parameters
    ----------
    years_service : float
        Credited years of service (>= 0).
    salary : float
        Final (or current) annual salary (>= 0).
    accrual_rate : float, default 0.015
        Decimal benefit accrual per year of service (1.5% → 0.015).
    retirement_age : float, default 65
        Age benefits commence. Each year before 65 costs 6% of the benefit.

    Returns
    -------
    DefinedBenefitResult

    Examples
    --------
    >>> res = defined_benefit_pension(30, 80_000)
    >>> res.unreduced_annual_benefit
    36000.0
    >>> res.early_retirement_penalty_pct
    0.0
    """
    check_non_negative("years_service", years_service)
    check_non_negative("salary", salary)
    check_non_negative("accrual_rate", accrual_rate)

    annual_benefit = salary * accrual_rate * years_service
    penalty = 0.0
    if retirement_age < NORMAL_RETIREMENT_AGE:
        penalty = EARLY_RETIREMENT_PENALTY * (NORMAL_RETIREMENT_AGE - retirement_age)
    reduced = annual_benefit * (1 - penalty)

    survivor_options = {
        label: round_money(reduced * haircut) for label, haircut in SURVIVOR_HAIRCUTS
    }

    le = life_expectancy(retirement_age)
    years_of_payment = le - retirement_age
    pv = sum(
        present_value(reduced, PENSION_DISCOUNT_RATE, year)
        for year in range(1, math.floor(years_of_payment) + 1)
    )

    return DefinedBenefitResult(
        years_of_service=years_service,
        salary=salary,
        accrual_rate_pct=accrual_rate * 100,
        unreduced_annual_benefit=round_money(annual_benefit),
        unreduced_monthly_benefit=round_money(annual_benefit / MONTHS_PER_YEAR),
        early_retirement_penalty_pct=round_money(penalty * 100),
        reduced_annual_benefit=round_money(reduced),
        reduced_monthly_benefit=round_money(reduced / MONTHS_PER_YEAR),
        survivor_options=survivor_options,
        projected_lifetime_payments=round_money(reduced * years_of_payment),
        present_value=round_money(pv),
        life_expectancy_at_retirement=le,
    )


# ---------------------------------------------------------------------------
# Defined contribution
# ---------------------------------------------------------------------------

def defined_contribution_401k(
    current_age: int,
    retirement_age: int,
    current_balance: float,
    annual_contribution: float,
    return_rate_pct: float = 7,
    inflation_rate_pct: float = 3,
) -> DefinedContributionResult:
    """
    Project a 401(k)/403(b) balance to retirement.

    Parameters
    ----------
    current_age, retirement_age : int
        Whole-year ages; ``retirement_age`` must not precede ``current_age``.
    current_balance : float
        Account balance today.
    annual_contribution : float
        Yearly deposit including any employer match, added at year end.
    return_rate_pct : float, default 7
        Annual return in percent.
    inflation_rate_pct : float, default 3
        Annual inflation in percent; deflates the 4% income over half of the
        retirement horizon.

    Returns
    -------
    DefinedContributionResult
        Balance snapshots every fifth year and the final year.
    """
    years = int(retirement_age - current_age)
    if years < 0:
        raise ValidationError(
            f"retirement_age ({retirement_age}) must be >= current_age ({current_age})."
        )
    check_non_negative("current_balance", current_balance)

    le = life_expectancy(retirement_age)
    retirement_years = le - retirement_age
    r = return_rate_pct / 100

    balance = current_balance
    projection: List[ProjectionRowDict] = []
    for year in range(1, years + 1):
        balance = balance * (1 + r) + annual_contribution
        if year % SCHEDULE_SAMPLE_EVERY == 0 or year == years:
            projection.append(
                {"year": year, "age": current_age + year, "balance": round_money(balance)}
            )

    safe_annual = balance * SAFE_WITHDRAWAL_RATE
    real_annual = safe_annual / (1 + inflation_rate_pct / 100) ** (retirement_years / 2)

    years_to_rmd = max(0, RMD_START_AGE - retirement_age)
    rmd_balance = future_value_growth(balance, r, years_to_rmd)

    return DefinedContributionResult(
        projection_years=years,
        retirement_age=retirement_age,
        current_balance=current_balance,
        annual_contribution=annual_contribution,
        average_return_pct=return_rate_pct,
        projected_balance=round_money(balance),
        safe_annual_withdrawal=round_money(safe_annual),
        safe_monthly_withdrawal=round_money(safe_annual / MONTHS_PER_YEAR),
        real_monthly_income=round_money(real_annual / MONTHS_PER_YEAR),
        years_of_retirement=retirement_years,
        balance_projection=projection,
        required_monthly_contribution=round_money(annual_contribution / MONTHS_PER_YEAR),
        first_rmd_amount=round_money(rmd_balance / RMD_DIVISOR),
        rmd_start_age=RMD_START_AGE,
    )


# ---------------------------------------------------------------------------
# Retirement projection
# ---------------------------------------------------------------------------

def retirement_projection(
    current_age: int,
    retire_age: int,
    current_savings: float,
    monthly_contribution: float,
    annual_return_pct: float,
    employer_match_pct: float,
    inflation_pct: float,
    life_expectancy: float,
) -> RetirementProjection:
    """
    Monthly accumulation followed by a 4%-rule depletion test in real terms.

    Parameters
    ----------
    current_age, retire_age : int
        Whole-year ages.
    current_savings : float
        Savings today.
    monthly_contribution : float
        Employee deposit per month.
    annual_return_pct : float
        Effective annual return in percent, converted to the equivalent
        monthly rate ``(1 + r)^(1/12) − 1``.
    employer_match_pct : float
        Employer match as a percent of the employee deposit.
    inflation_pct : float
        Annual inflation in percent.
    life_expectancy : float
        Planning horizon age.

    Returns
    -------
    RetirementProjection
    """
    years_to_retirement = retire_age - current_age
    if years_to_retirement < 0:
        raise ValidationError(
            f"retire_age ({retire_age}) must be >= current_age ({current_age})."
        )
    check_positive("1 + annual_return_pct / 100", 1 + annual_return_pct / 100)
    years_in_retirement = life_expectancy - retire_age

    monthly_rate = (1 + annual_return_pct / 100) ** (1 / MONTHS_PER_YEAR) - 1
    total_contribution = monthly_contribution * (1 + employer_match_pct / 100)
    months = int(years_to_retirement * MONTHS_PER_YEAR)

    balance = current_savings
    for _ in range(months):
        balance = balance * (1 + monthly_rate) + total_contribution

    real_balance = balance / (1 + inflation_pct / 100) ** years_to_retirement
    annual_withdrawal = balance * SAFE_WITHDRAWAL_RATE
    monthly_income = annual_withdrawal / MONTHS_PER_YEAR

    real_return = 1 + (annual_return_pct - inflation_pct) / 100
    check_positive("real return factor", real_return)
    real_monthly_rate = real_return ** (1 / MONTHS_PER_YEAR) - 1

    remaining = balance
    lasting_years = 0
    depleted = False
    year = 0
    while year < years_in_retirement and not depleted:
        for _ in range(MONTHS_PER_YEAR):
            remaining = remaining * (1 + real_monthly_rate) - monthly_income
            if remaining <= 0:
                depleted = True
                break
        if not depleted:
            lasting_years += 1
        year += 1

    if depleted:
        logger.debug("Savings depleted after %d retirement years", lasting_years)

    contributed = current_savings + total_contribution * months
    return RetirementProjection(
        retirement_balance=balance,
        real_balance=real_balance,
        annual_withdrawal=annual_withdrawal,
        monthly_income=monthly_income,
        total_contributions=contributed,
        investment_gains=balance - contributed,
        lasting_years=min(lasting_years, years_in_retirement),
        sufficient=lasting_years >= years_in_retirement,
    )
