"""
Insurance calculators for fincalc.

Purpose
-------
Premium and need estimators for personal and business cover:

- term_life_premium       : level term premium from rate table and age/smoker loads
- whole_life_policy       : premium, cash-value schedule, dividends, surrender
- dividend_projection     : participating-policy dividend schedule
- disability_insurance    : income-replacement need and premium
- long_term_care          : LTC premium, hybrid product and partner discount
- key_person_insurance    : cover for the loss of a critical employee
- business_buyout         : cross-purchase cover for a buy-sell agreement
- estate_tax_planning     : federal and state estate tax with ILIT sizing
- umbrella_liability      : excess liability tiers

Notes
-----
Rates are illustrative market approximations, not filed premium tables.
Percent outputs are floats (``12.5`` means 12.5%); callers format them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .actuarial import death_probability, life_expectancy
from .constants import SCHEDULE_SAMPLE_EVERY, SMOKER_MULTIPLIER
from .exceptions import DomainError
from .types import CashValueRowDict, CoverageOptionDict, DividendRowDict
from .utils import (
    check_choice,
    check_non_negative,
    check_positive,
    round_half_up,
    round_money,
    threshold_lookup,
)

__all__ = [
    "TermLifeQuote",
    "WholeLifeQuote",
    "DisabilityQuote",
    "LongTermCareQuote",
    "KeyPersonQuote",
    "BuyoutQuote",
    "EstateTaxPlan",
    "UmbrellaQuote",
    "term_life_premium",
    "whole_life_policy",
    "dividend_projection",
    "disability_insurance",
    "long_term_care",
    "key_person_insurance",
    "business_buyout",
    "estate_tax_planning",
    "umbrella_liability",
]

# Annual rate per $1000 of cover, by health class and term length.
TERM_BASE_RATES: Dict[str, Dict[int, float]] = {
    "excellent": {10: 0.25, 20: 0.45, 30: 0.75},
    "good": {10: 0.35, 20: 0.65, 30: 1.10},
    "average": {10: 0.55, 20: 1.05, 30: 1.85},
    "poor": {10: 1.05, 20: 2.15, 30: 4.25},
}
TERM_FALLBACK_RATE = 0.65
TERM_AGE_LOAD = 1.08
WHOLE_LIFE_RATE = 7.50
WHOLE_LIFE_AGE_LOAD = 1.10
PRICING_BASE_AGE = 35
MAX_POLICY_YEARS = 50
MAX_DIVIDEND_YEARS = 30

# Waiting period in days → premium factor.
DISABILITY_WAITING_PERIODS: Tuple[Tuple[int, float], ...] = (
    (30, 1.00),
    (60, 0.85),
    (90, 0.75),
    (180, 0.65),
)

# LTC premium per $100 of monthly benefit by issue age.
LTC_AGE_FACTORS: Tuple[Tuple[int, float], ...] = (
    (50, 0.35),
    (55, 0.48),
    (60, 0.72),
    (65, 1.15),
    (70, 1.85),
    (75, 3.25),
    (80, 5.75),
)
LTC_MAX_MONTHLY_BENEFIT = 6000
LTC_INFLATION = 0.045

FEDERAL_ESTATE_EXEMPTION = 13_610_000
FEDERAL_ESTATE_RATE = 0.40
STATE_ESTATE_THRESHOLD = 5_000_000
STATE_ESTATE_RATE = 0.05

UMBRELLA_TIERS: Tuple[Tuple[str, float, float], ...] = (
    ("1M", 1_000_000, 1.0),
    ("2M", 2_000_000, 1.7),
    ("5M", 5_000_000, 3.5),
)


# ---------------------------------------------------------------------------
# Result records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TermLifeQuote:
    """
    Level term life quote.

    Attributes
    ----------
    monthly_premium, annual_premium, total_cost_over_term : float
    term_years : int
    coverage_amount : float
    projected_life_expectancy : float
    death_probability_pct : float
        Probability of dying within the term, in percent.
    break_even_age : float
        ``age + coverage / (annual_premium × 1000)`` rounded to 2 decimals.
    health : str
    is_smoker : bool
    """

    monthly_premium: float
    annual_premium: float
    total_cost_over_term: float
    term_years: int
    coverage_amount: float
    projected_life_expectancy: float
    death_probability_pct: float
    break_even_age: float
    health: str
    is_smoker: bool


@dataclass(frozen=True)
class WholeLifeQuote:
    monthly_premium: float
    annual_premium: float
    death_benefit: float
    cash_value_schedule: List[CashValueRowDict]
    final_cash_value: float
    total_premiums_paid: float
    guaranteed_cash_value: float
    dividend_projection: List[DividendRowDict]
    surrender_charge_years: int


@dataclass(frozen=True)
class DisabilityQuote:
    required_monthly_benefit: float
    annual_premium: float
    monthly_premium: float
    benefit_period_years: float
    total_lifetime_cost: float
    waiting_period_options: Dict[int, float]
    estimated_tax_deduction: float
    cost_pct_of_income: float


@dataclass(frozen=True)
class LongTermCareQuote:
    monthly_premium: float
    annual_premium: float
    monthly_benefit: float
    estimated_daily_need: float
    total_care_need: float
    years_of_projected_care: float
    inflation_adjusted_cost_year5: float
    hybrid_annual_premium: float
    hybrid_death_benefit: float
    partner_annual_cost: float
    partner_savings: float


@dataclass(frozen=True)
class KeyPersonQuote:
    revenue_loss_monthly: float
    total_revenue_at_risk: float
    replacement_costs: float
    recommended_coverage: float
    estimated_annual_premium: float
    roi_pct: float


@dataclass(frozen=True)
class BuyoutQuote:
    current_business_value: float
    owner_share: float
    projected_future_value: float
    projected_owner_share: float
    insurance_needed: float
    per_partner_cost: float
    total_group_cost: float
    recommended_policy_type: str
    years_to_fund_needs: float


@dataclass(frozen=True)
class EstateTaxPlan:
    total_assets: float
    liabilities: float
    net_estate: float
    federal_exemption: float
    taxable_estate: float
    federal_tax: float
    state_tax: float
    total_estate_tax: float
    effective_tax_rate_pct: float
    life_insurance_needed: float
    ilit_recommended_coverage: float
    strategy: str = "Qualified Charitable Distribution or ILIT"


@dataclass(frozen=True)
class UmbrellaQuote:
    home_value: float
    assets: float
    annual_income: float
    recommended_coverage: float
    coverage_options: Dict[str, CoverageOptionDict] = field(default_factory=dict)
    risk_profile: str = ""


# ---------------------------------------------------------------------------
# Life insurance
# ---------------------------------------------------------------------------

def term_life_premium(
    age: float,
    coverage: float,
    term_years: int,
    health: str = "good",
    is_smoker: bool = False,
) -> TermLifeQuote:
    """
    Quote a level term life policy.

    Parameters
    ----------
    age : float
        Issue age.
    coverage : float
        Death benefit (> 0).
    term_years : int
        Term length. 10, 20 and 30 have tabulated rates; other terms fall back
        to 0.65 per $1000.
    health : {"excellent", "good", "average", "poor"}, default "good"
        Underwriting class.
    is_smoker : bool, default False
        Smokers pay 2.5× the standard rate.

    Returns
    -------
    TermLifeQuote

    Examples
    --------
    >>> quote = term_life_premium(35, 500_000, 20)
    >>> quote.annual_premium
    325.0
    """
    check_non_negative("age", age)
    check_positive("coverage", coverage)
    check_choice("health", health, tuple(TERM_BASE_RATES))

    base_rate = TERM_BASE_RATES[health].get(int(term_years), TERM_FALLBACK_RATE)
    age_multiplier = TERM_AGE_LOAD ** max(0, age - PRICING_BASE_AGE)
    smoker_multiplier = SMOKER_MULTIPLIER if is_smoker else 1.0

    adjusted_rate = base_rate * age_multiplier * smoker_multiplier
    monthly = coverage / 1000 * adjusted_rate / 12
    annual = monthly * 12

    return TermLifeQuote(
        monthly_premium=round_money(monthly),
        annual_premium=round_money(annual),
        total_cost_over_term=round_money(annual * term_years),
        term_years=int(term_years),
        coverage_amount=coverage,
        projected_life_expectancy=life_expectancy(age, is_smoker),
        death_probability_pct=round_money(death_probability(age, term_years, is_smoker) * 100),
        break_even_age=age + round_half_up(coverage / (annual * 1000), 2),
        health=health,
        is_smoker=is_smoker,
    )


def dividend_projection(base_premium: float, years: int) -> List[DividendRowDict]:
    """
    Dividends of a participating policy, sampled at year 1 and every fifth year.

    The dividend rate starts at 1.2% of premium and rises 0.2 points a year,
    capped at 20%. At most 30 years are projected.
    """
    rows: List[DividendRowDict] = []
    cumulative = 0.0
    for year in range(1, min(int(years), MAX_DIVIDEND_YEARS) + 1):
        dividend = base_premium * min(0.20, 0.01 + 0.002 * year)
        cumulative += dividend
        if year % SCHEDULE_SAMPLE_EVERY == 0 or year == 1:
            rows.append(
                {
                    "year": year,
                    "annual_dividend": round_money(dividend),
                    "cumulative_dividends": round_money(cumulative),
                    "dividend_use": "Reduce Premium",
                }
            )
    return rows


def whole_life_policy(age: float, coverage: float, years: int = 50) -> WholeLifeQuote:
    """
    Quote a whole life policy and project its cash value.

    80% of each premium is credited to cash value, which grows 2% a year for
    the first five years and 4% thereafter. Borrowing capacity is 90% of cash
    value; the guaranteed value is 95%.

    Parameters
    ----------
    age : float
        Issue age.
    coverage : float
        Level death benefit (> 0).
    years : int, default 50
        Modelling horizon; the schedule is capped at 50 years.
    """
    check_non_negative("age", age)
    check_positive("coverage", coverage)

    annual_premium = coverage / 1000 * WHOLE_LIFE_RATE * WHOLE_LIFE_AGE_LOAD ** max(0, age - PRICING_BASE_AGE)

    schedule: List[CashValueRowDict] = []
    cash_value = 0.0
    net_premium = annual_premium * 0.80
    for year in range(1, min(int(years), MAX_POLICY_YEARS) + 1):
        growth = 0.02 if year <= 5 else 0.04
        cash_value = cash_value * (1 + growth) + net_premium
        if year % SCHEDULE_SAMPLE_EVERY == 0 or year == 1:
            schedule.append(
                {
                    "year": year,
                    "age": int(age + year),
                    "annual_premium": round_money(annual_premium),
                    "cash_value": round_money(cash_value),
                    "death_benefit": coverage,
                    "borrowing_capacity": round_money(cash_value * 0.90),
                }
            )

    return WholeLifeQuote(
        monthly_premium=round_money(annual_premium / 12),
        annual_premium=round_money(annual_premium),
        death_benefit=coverage,
        cash_value_schedule=schedule,
        final_cash_value=round_money(cash_value),
        total_premiums_paid=round_money(annual_premium * years),
        guaranteed_cash_value=round_money(cash_value * 0.95),
        dividend_projection=dividend_projection(annual_premium, years),
        surrender_charge_years=min(15, int(round_half_up(years / 3, 0))),
    )


# ---------------------------------------------------------------------------
# Health and care
# ---------------------------------------------------------------------------

def disability_insurance(
    monthly_income: float,
    monthly_expenses: float,
    months_emergency_fund: float = 6,
    retirement_age: float = 65,
    current_age: float = 40,
) -> DisabilityQuote:
    """
    Size long-term disability cover.

    The target benefit replaces 65% of income, less the emergency fund spread
    over 240 months, but never below monthly expenses. Premium is quoted per
    $100 of monthly benefit at ``0.45 + 0.05·(age − 35)``.
    """
    check_positive("monthly_income", monthly_income)
    check_non_negative("monthly_expenses", monthly_expenses)

    required = monthly_income * 0.65
    buffer = months_emergency_fund * monthly_expenses
    benefit = max(monthly_expenses, required - buffer / 240)

    benefit_period = retirement_age - current_age
    cost_per_100 = 0.45 + 0.05 * (current_age - PRICING_BASE_AGE)
    annual_premium = benefit / 100 * cost_per_100 * 12

    return DisabilityQuote(
        required_monthly_benefit=round_money(benefit),
        annual_premium=round_money(annual_premium),
        monthly_premium=round_money(annual_premium / 12),
        benefit_period_years=benefit_period,
        total_lifetime_cost=round_money(annual_premium * benefit_period),
        waiting_period_options={
            days: round_money(annual_premium * factor)
            for days, factor in DISABILITY_WAITING_PERIODS
        },
        estimated_tax_deduction=round_money(annual_premium * 0.25),
        cost_pct_of_income=round_money(annual_premium / (monthly_income * 12) * 100),
    )


def long_term_care(
    current_age: float,
    daily_cost: float = 250,
    years_of_care: float = 3,
    has_family_support: bool = False,
) -> LongTermCareQuote:
    """
    Quote long-term care cover.

    Parameters
    ----------
    current_age : float
        Issue age; selects the premium factor (0.35 below 50).
    daily_cost : float, default 250
        Expected cost of care per day.
    years_of_care : float, default 3
        Expected care duration.
    has_family_support : bool, default False
        Family support cuts the total need to 60%.

    Returns
    -------
    LongTermCareQuote
        Includes a hybrid life/LTC alternative at 1.5× premium and a couple's
        enrolment at a 30% discount each.
    """
    check_non_negative("daily_cost", daily_cost)
    annual_cost = daily_cost * 365
    age_factor = threshold_lookup(LTC_AGE_FACTORS, current_age, LTC_AGE_FACTORS[0][1])

    monthly_benefit = min(LTC_MAX_MONTHLY_BENEFIT, math.ceil(annual_cost / 12))
    monthly_premium = monthly_benefit / 100 * age_factor
    annual_premium = monthly_premium * 12

    total_need = annual_cost * years_of_care
    adjusted_need = total_need * 0.6 if has_family_support else total_need
    partner_premium = annual_premium * 0.7

    return LongTermCareQuote(
        monthly_premium=round_money(monthly_premium),
        annual_premium=round_money(annual_premium),
        monthly_benefit=monthly_benefit,
        estimated_daily_need=daily_cost,
        total_care_need=round_money(adjusted_need),
        years_of_projected_care=years_of_care,
        inflation_adjusted_cost_year5=round_money(annual_cost * (1 + LTC_INFLATION) ** 5),
        hybrid_annual_premium=round_money(annual_premium * 1.5),
        hybrid_death_benefit=round_money(adjusted_need * 0.5),
        partner_annual_cost=round_money(partner_premium * 2),
        partner_savings=round_money(annual_premium * 0.6),
    )


# ---------------------------------------------------------------------------
# Business and estate
# ---------------------------------------------------------------------------

def key_person_insurance(
    annual_revenue: float,
    salary: float,
    profit_margin: float = 0.20,
    months: float = 12,
) -> KeyPersonQuote:
    """
    Size cover for a key employee.

    Need = lost profit over the replacement window + replacement salary for
    the same window. Premium is $750 per $100k of cover; ROI is cover over
    twenty years of premium.

    ``profit_margin`` is a decimal.
    """
    check_non_negative("annual_revenue", annual_revenue)
    check_non_negative("salary", salary)

    monthly_loss = annual_revenue * profit_margin / 12
    revenue_at_risk = monthly_loss * months
    replacement = salary * months / 12
    coverage = revenue_at_risk + replacement
    premium = coverage / 100_000 * 750

    if premium <= 0:
        raise DomainError("key person cover is zero; revenue or salary must be positive.")

    return KeyPersonQuote(
        revenue_loss_monthly=round_money(monthly_loss),
        total_revenue_at_risk=round_money(revenue_at_risk),
        replacement_costs=round_money(replacement),
        recommended_coverage=round_money(coverage),
        estimated_annual_premium=round_money(premium),
        roi_pct=round_half_up(coverage / (premium * 20) * 100, 1),
    )


def business_buyout(
    business_value: float,
    owner_age: float,
    years_to_retirement: float,
    partners: int = 1,
) -> BuyoutQuote:
    """
    Cross-purchase buy-sell cover for one owner's share.

    The business value grows 3% a year to retirement; each of ``partners``
    co-owners insures an equal slice of the owner's share plus a 20% buffer
    at $450 per $100k.
    """
    check_positive("business_value", business_value)
    if partners < 1:
        raise DomainError(f"partners must be >= 1, got {partners}")

    owner_share = business_value / (partners + 1)
    future_value = business_value * 1.03 ** years_to_retirement
    future_share = future_value / (partners + 1)
    insurance_needed = future_share * 1.2
    per_partner = insurance_needed / partners
    cost_per_owner = per_partner / 100_000 * 450

    return BuyoutQuote(
        current_business_value=business_value,
        owner_share=round_money(owner_share),
        projected_future_value=round_money(future_value),
        projected_owner_share=round_money(future_share),
        insurance_needed=round_money(insurance_needed),
        per_partner_cost=round_money(cost_per_owner),
        total_group_cost=round_money(cost_per_owner * partners),
        recommended_policy_type="Cross-Purchase Term Life",
        years_to_fund_needs=years_to_retirement,
    )


def estate_tax_planning(
    total_assets: float,
    liabilities: float = 0,
    years_to_pass: float = 25,
) -> EstateTaxPlan:
    """
    Estimate estate tax and the life cover needed to pay it.

    Federal tax is 40% above the 13.61M exemption; a flat 5% state tax applies
    above 5M. Insurance need carries a 10% buffer; ILIT cover is 110% of the
    federally taxable estate. ``years_to_pass`` is accepted for reporting and
    does not change the estimate.
    """
    check_non_negative("total_assets", total_assets)
    net_estate = total_assets - liabilities
    if net_estate <= 0:
        raise DomainError(f"net estate must be positive, got {net_estate}")

    taxable = max(0.0, net_estate - FEDERAL_ESTATE_EXEMPTION)
    federal = taxable * FEDERAL_ESTATE_RATE
    state = max(0.0, (net_estate - STATE_ESTATE_THRESHOLD) * STATE_ESTATE_RATE)
    total = federal + state

    return EstateTaxPlan(
        total_assets=total_assets,
        liabilities=liabilities,
        net_estate=round_money(net_estate),
        federal_exemption=FEDERAL_ESTATE_EXEMPTION,
        taxable_estate=round_money(taxable),
        federal_tax=round_money(federal),
        state_tax=round_money(state),
        total_estate_tax=round_money(total),
        effective_tax_rate_pct=round_money(total / net_estate * 100),
        life_insurance_needed=round_money(total * 1.1),
        ilit_recommended_coverage=round_money(taxable * 1.1),
    )


def umbrella_liability(
    home_value: float,
    assets: float,
    annual_income: float,
    has_employees: bool = False,
) -> UmbrellaQuote:
    """Recommend umbrella cover of assets plus ten years of income."""
    recommended = assets + annual_income * 10
    cost_per_million = 150 + (100 if has_employees else 0)

    options: Dict[str, CoverageOptionDict] = {
        label: {"coverage": amount, "annual_cost": round_money(cost_per_million * factor)}
        for label, amount, factor in UMBRELLA_TIERS
    }
    top_tier = UMBRELLA_TIERS[-1][1]
    risk_profile = (
        "High Risk - Consider $10M" if recommended > top_tier else "Standard Coverage Available"
    )
    return UmbrellaQuote(
        home_value=home_value,
        assets=assets,
        annual_income=annual_income,
        recommended_coverage=round_money(recommended),
        coverage_options=options,
        risk_profile=risk_profile,
    )
