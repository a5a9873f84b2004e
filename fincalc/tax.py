"""
Tax calculators for fincalc.

Purpose
-------
- calculate_income_tax   : federal income tax from progressive brackets
- calculate_complete_tax : federal, state, capital gains, dividends and FICA
- compare_ira            : Roth versus traditional IRA outcome
- tax_loss_harvesting    : net capital loss offset and carryforward

Bracket tables are sorted ``(upper_limit, rate)`` tuples for the 2024 tax
year. They are illustrative constants, not a compliance engine.

Example
-------
>>> round(calculate_income_tax(50_000).total_tax, 2)
6053.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Literal, Tuple

from .utils import check_choice, check_non_negative

__all__ = [
    "TAX_BRACKETS",
    "STATE_TAX_RATES",
    "IncomeTaxResult",
    "CompleteTaxResult",
    "IRAComparison",
    "HarvestingResult",
    "bracket_tax",
    "calculate_income_tax",
    "calculate_complete_tax",
    "compare_ira",
    "tax_loss_harvesting",
]

FilingStatus = Literal["single", "married"]

TAX_BRACKETS: Dict[str, Tuple[Tuple[float, float], ...]] = {
    "single": (
        (11_600, 0.10),
        (47_150, 0.12),
        (100_525, 0.22),
        (191_950, 0.24),
        (243_725, 0.32),
        (609_350, 0.35),
        (math.inf, 0.37),
    ),
    "married": (
        (23_200, 0.10),
        (94_300, 0.12),
        (201_050, 0.22),
        (383_900, 0.24),
        (487_450, 0.32),
        (731_200, 0.35),
        (math.inf, 0.37),
    ),
}

STATE_TAX_RATES: Dict[str, float] = {
    "CA": 0.093,
    "NY": 0.0685,
    "TX": 0.0,
    "FL": 0.0,
    "WA": 0.0,
    "IL": 0.0495,
    "MA": 0.05,
    "PA": 0.0307,
}
DEFAULT_STATE_RATE = 0.05

# Long-term capital gains: (taxable income below, rate).
CAPITAL_GAINS_BRACKETS: Tuple[Tuple[float, float], ...] = (
    (47_025, 0.0),
    (518_900, 0.15),
    (math.inf, 0.20),
)
QUALIFIED_DIVIDEND_RATE = 0.15

SOCIAL_SECURITY_WAGE_BASE = 168_600
SOCIAL_SECURITY_RATE = 0.062
MEDICARE_RATE = 0.0145
ADDITIONAL_MEDICARE_THRESHOLD = 200_000
ADDITIONAL_MEDICARE_RATE = 0.009

ORDINARY_LOSS_OFFSET_CAP = 3000
HARVESTING_BENEFIT_THRESHOLD = 500
IRA_SIGNIFICANCE_THRESHOLD = 1000


@dataclass(frozen=True)
class IncomeTaxResult:
    gross_income: float
    deductions: float
    taxable_income: float
    total_tax: float
    effective_rate_pct: float
    after_tax_income: float


@dataclass(frozen=True)
class CompleteTaxResult:
    """
    Combined tax picture.

    ``effective_rate_pct`` is total tax over wage income, 0 for zero income.
    """

    gross_income: float
    capital_gains: float
    dividends: float
    total_income: float
    deductions: float
    taxable_income: float
    federal_tax: float
    state_tax: float
    capital_gains_tax: float
    dividend_tax: float
    fica_tax: float
    total_tax: float
    effective_rate_pct: float
    after_tax_income: float


@dataclass(frozen=True)
class IRAComparison:
    traditional_contribution: float
    traditional_balance: float
    traditional_after_tax: float
    traditional_tax_savings_now: float
    roth_contribution: float
    roth_balance: float
    roth_after_tax: float
    roth_tax_savings_retirement: float
    difference: float
    better_choice: str
    recommendation: str


@dataclass(frozen=True)
class HarvestingResult:
    capital_gains: float
    capital_losses: float
    carryover: float
    net_gains: float
    ordinary_income_offset: float
    new_carryover: float
    total_tax_saved: float
    recommendation: str


def bracket_tax(taxable_income: float, brackets: Tuple[Tuple[float, float], ...]) -> float:
    """Progressive tax of *taxable_income* over sorted ``(limit, rate)`` brackets."""
    tax = 0.0
    lower = 0.0
    for limit, rate in brackets:
        if taxable_income <= lower:
            break
        tax += (min(taxable_income, limit) - lower) * rate
        lower = limit
    return tax


def calculate_income_tax(
    income: float,
    filing_status: FilingStatus = "single",
    deductions: float = 0,
) -> IncomeTaxResult:
    """
    Federal income tax.

    Parameters
    ----------
    income : float
        Gross income (>= 0).
    filing_status : {"single", "married"}, default "single"
    deductions : float, default 0
        Subtracted from income; taxable income is floored at zero.

    Returns
    -------
    IncomeTaxResult
        ``effective_rate_pct`` is tax over gross income, 0 when income is 0.
    """
    check_non_negative("income", income)
    check_choice("filing_status", filing_status, tuple(TAX_BRACKETS))

    taxable = max(0.0, income - deductions)
    tax = bracket_tax(taxable, TAX_BRACKETS[filing_status])
    return IncomeTaxResult(
        gross_income=income,
        deductions=deductions,
        taxable_income=taxable,
        total_tax=tax,
        effective_rate_pct=tax / income * 100 if income > 0 else 0.0,
        after_tax_income=income - tax,
    )


def calculate_complete_tax(
    income: float,
    filing_status: FilingStatus = "single",
    state: str = "",
    capital_gains: float = 0,
    dividends: float = 0,
    deductions: float = 0,
) -> CompleteTaxResult:
    """
    Federal, state, investment and payroll tax for one filer.

    State tax is a flat rate on taxable income (5% for states not in
    ``STATE_TAX_RATES``). Capital gains use the 0/15/20% bands on taxable
    income; qualified dividends pay 15% whenever gains are taxed. FICA is
    Social Security up to the wage base, Medicare, and the additional 0.9%
    Medicare above 200k.
    """
    check_non_negative("income", income)
    check_choice("filing_status", filing_status, tuple(TAX_BRACKETS))

    taxable = max(0.0, income - deductions)
    federal = bracket_tax(taxable, TAX_BRACKETS[filing_status])
    state_tax = taxable * STATE_TAX_RATES.get(state.upper(), DEFAULT_STATE_RATE)

    gains_rate = next(rate for limit, rate in CAPITAL_GAINS_BRACKETS if taxable < limit)
    gains_tax = capital_gains * gains_rate
    dividend_tax = dividends * QUALIFIED_DIVIDEND_RATE if gains_tax > 0 else 0.0

    fica = (
        min(income, SOCIAL_SECURITY_WAGE_BASE) * SOCIAL_SECURITY_RATE
        + income * MEDICARE_RATE
        + max(0.0, income - ADDITIONAL_MEDICARE_THRESHOLD) * ADDITIONAL_MEDICARE_RATE
    )

    total = federal + state_tax + gains_tax + dividend_tax + fica
    total_income = income + capital_gains + dividends
    return CompleteTaxResult(
        gross_income=income,
        capital_gains=capital_gains,
        dividends=dividends,
        total_income=total_income,
        deductions=deductions,
        taxable_income=taxable,
        federal_tax=federal,
        state_tax=state_tax,
        capital_gains_tax=gains_tax,
        dividend_tax=dividend_tax,
        fica_tax=fica,
        total_tax=total,
        effective_rate_pct=total / income * 100 if income > 0 else 0.0,
        after_tax_income=total_income - total,
    )


def compare_ira(
    contribution: float,
    years: float,
    return_rate_pct: float,
    current_tax_rate_pct: float,
    retirement_tax_rate_pct: float,
) -> IRAComparison:
    """
    Compare the after-tax outcome of a traditional and a Roth IRA.

    The traditional account grows the pre-tax contribution and is taxed on
    withdrawal; the Roth grows the after-tax contribution tax-free. A gap
    above 1000 is reported as significant.
    """
    check_non_negative("contribution", contribution)
    growth = (1 + return_rate_pct / 100) ** years

    traditional_balance = contribution * growth
    traditional_after_tax = traditional_balance * (1 - retirement_tax_rate_pct / 100)

    roth_contribution = contribution * (1 - current_tax_rate_pct / 100)
    roth_balance = roth_contribution * growth

    difference = roth_balance - traditional_after_tax
    better = "Roth IRA" if difference > 0 else "Traditional IRA"
    if difference > IRA_SIGNIFICANCE_THRESHOLD:
        recommendation = f"{better} is significantly better"
    else:
        recommendation = "Both options are similar"

    return IRAComparison(
        traditional_contribution=contribution,
        traditional_balance=traditional_balance,
        traditional_after_tax=traditional_after_tax,
        traditional_tax_savings_now=contribution * current_tax_rate_pct / 100,
        roth_contribution=roth_contribution,
        roth_balance=roth_balance,
        roth_after_tax=roth_balance,
        roth_tax_savings_retirement=roth_balance * retirement_tax_rate_pct / 100,
        difference=difference,
        better_choice=better,
        recommendation=recommendation,
    )


def tax_loss_harvesting(
    capital_gains: float,
    capital_losses: float,
    carryover: float,
    tax_rate_pct: float,
) -> HarvestingResult:
    """
    Net realised gains against losses and prior carryover.

    A net loss offsets up to 3000 of ordinary income; the rest carries
    forward. Savings above 500 are reported as beneficial.
    """
    net = capital_gains - capital_losses - carryover
    net_loss = max(0.0, -net)
    offset = min(net_loss, ORDINARY_LOSS_OFFSET_CAP)
    new_carryover = net_loss - offset

    rate = tax_rate_pct / 100
    saved = new_carryover * rate + offset * rate
    if saved > HARVESTING_BENEFIT_THRESHOLD:
        recommendation = "Tax loss harvesting is beneficial"
    else:
        recommendation = "Consider waiting for better opportunities"

    return HarvestingResult(
        capital_gains=capital_gains,
        capital_losses=capital_losses,
        carryover=carryover,
        net_gains=net,
        ordinary_income_offset=offset,
        new_carryover=new_carryover,
        total_tax_saved=saved,
        recommendation=recommendation,
    )
