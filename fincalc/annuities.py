"""
Annuity calculators for fincalc.

Purpose
-------
Values annuities from the time-value primitives and the actuarial tables:

- annuity_present_value : immediate, deferred, certain and life annuities
- fixed_annuity         : payout projection for an immediate/deferred contract
- variable_annuity      : three-scenario accumulation projection

Reporting cadence
-----------------
Payout and accumulation schedules are computed every year but only sampled
for output at year 1 and every fifth year (fixed annuity), or every fifth
year and the final year (variable annuity).

Example
-------
>>> res = fixed_annuity(100_000, current_age=60, start_age=65)
>>> [entry.period for entry in res.schedule][:3]
[1, 5, 10]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Sequence, Tuple

from .actuarial import life_expectancy, survival_probability
from .constants import MONTHS_PER_YEAR, SCHEDULE_SAMPLE_EVERY
from .exceptions import ValidationError
from .timevalue import (
    amortization_payment,
    future_value_growth,
    present_value_of_annuity,
)
from .types import ScenarioRowDict
from .utils import check_choice, check_positive, round_half_up, round_money

__all__ = [
    "AnnuityValue",
    "ScheduleEntry",
    "FixedAnnuityResult",
    "VariableAnnuityScenario",
    "VariableAnnuityResult",
    "annuity_present_value",
    "fixed_annuity",
    "variable_annuity",
]

AnnuityKind = Literal["immediate", "deferred", "life", "certain"]
ANNUITY_KINDS: Tuple[str, ...] = ("immediate", "deferred", "life", "certain")

MAX_PAYOUT_YEARS = 30

# Long-run asset class returns used by the variable annuity projection.
EQUITY_RETURN = 0.08
BOND_RETURN = 0.04
CASH_RETURN = 0.02

SCENARIO_MULTIPLIERS: Tuple[Tuple[str, float], ...] = (
    ("conservative", 0.75),
    ("base", 1.00),
    ("optimistic", 1.25),
)


# ---------------------------------------------------------------------------
# Result records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnnuityValue:
    present_value: float
    total_payments: float
    discount_effect: float
    effective_return: float


@dataclass(frozen=True)
class ScheduleEntry:
    """
    One sampled snapshot of an annuity payout schedule.

    Attributes
    ----------
    period : int
        Payout year (1-based).
    age : float
        Annuitant age in that year.
    payment : float
        Payment made during the year.
    cumulative_paid : float
        Payments made up to and including this year.
    remaining_balance : float
        Contract balance after the year's payment, floored at zero.
    """

    period: int
    age: float
    payment: float
    cumulative_paid: float
    remaining_balance: float


@dataclass(frozen=True)
class FixedAnnuityResult:
    monthly_payment: float
    annual_payment: float
    total_projected_payments: float
    deferral_growth: float
    schedule: List[ScheduleEntry]
    break_even_age: float
    life_expectancy: float
    annuity_factor_pct: float


@dataclass(frozen=True)
class VariableAnnuityScenario:
    final_value: float
    total_contributed: float
    investment_gain: float
    cagr_pct: float
    yearly_projection: List[ScenarioRowDict] = field(default_factory=list)


@dataclass(frozen=True)
class VariableAnnuityResult:
    initial_investment: float
    monthly_contribution: float
    allocation: Dict[str, float]
    annual_fees_pct: float
    projection_years: int
    scenarios: Dict[str, VariableAnnuityScenario]


# ---------------------------------------------------------------------------
# Present value by annuity kind
# ---------------------------------------------------------------------------

def annuity_present_value(
    kind: AnnuityKind,
    payment: float,
    rate_pct: float,
    periods: int,
    age: float = 65,
    deferral: float = 0,
) -> AnnuityValue:
    """
    Present value of a level annuity.

    Parameters
    ----------
    kind : {"immediate", "deferred", "life", "certain"}
        - immediate / certain: ordinary annuity
        - deferred: ordinary annuity discounted over ``deferral`` periods
        - life: each payment weighted by the Gompertz survival probability
    payment : float
        Payment per period.
    rate_pct : float
        Discount rate per period, in percent.
    periods : int
        Number of payments.
    age : float, default 65
        Annuitant age (life annuities only).
    deferral : float, default 0
        Periods before the first payment window (deferred annuities only).

    Returns
    -------
    AnnuityValue
    """
    check_choice("kind", kind, ANNUITY_KINDS)
    r = rate_pct / 100

    if kind == "life":
        pv = sum(
            payment * survival_probability(age, t) * (1 + r) ** -t
            for t in range(1, int(periods) + 1)
        )
    else:
        pv = present_value_of_annuity(payment, r, periods)
        if kind == "deferred":
            pv *= (1 + r) ** -deferral

    total = payment * periods
    return AnnuityValue(
        present_value=pv,
        total_payments=total,
        discount_effect=total - pv,
        effective_return=rate_pct,
    )


# ---------------------------------------------------------------------------
# Fixed annuity
# ---------------------------------------------------------------------------

def fixed_annuity(
    investment: float,
    current_age: float,
    start_age: float,
    annual_rate_pct: float = 4.5,
) -> FixedAnnuityResult:
    """
    Project payouts of a fixed annuity.

    The premium grows at the contract rate until ``start_age`` (deferred
    contracts), then is paid out as a level monthly payment over the months
    between ``start_age`` and the buyer's life expectancy.

    Parameters
    ----------
    investment : float
        Single premium (> 0).
    current_age : float
        Age at purchase; also drives the life-expectancy estimate.
    start_age : float
        Age at which payouts begin. Equal to ``current_age`` for an immediate
        annuity.
    annual_rate_pct : float, default 4.5
        Guaranteed crediting rate in percent.

    Returns
    -------
    FixedAnnuityResult
        The schedule covers at most 30 payout years while the annuitant's age
        does not exceed life expectancy.

    Raises
    ------
    DomainError
        If ``start_age`` is at or beyond the life expectancy (no payout
        months remain).
    """
    check_positive("investment", investment)
    le = life_expectancy(current_age)
    deferral_years = max(0.0, start_age - current_age)
    rate = annual_rate_pct / 100

    value_at_start = investment
    if deferral_years > 0:
        value_at_start = future_value_growth(investment, rate, deferral_years)

    months = (le - start_age) * MONTHS_PER_YEAR
    monthly_payment = amortization_payment(value_at_start, rate / MONTHS_PER_YEAR, months)
    annual_payment = monthly_payment * MONTHS_PER_YEAR

    schedule: List[ScheduleEntry] = []
    balance = value_at_start
    total_paid = 0.0
    age = start_age
    year = 1
    while age <= le and year <= MAX_PAYOUT_YEARS:
        balance = balance + balance * rate - annual_payment
        total_paid += annual_payment
        if year % SCHEDULE_SAMPLE_EVERY == 0 or year == 1:
            schedule.append(
                ScheduleEntry(
                    period=year,
                    age=age,
                    payment=round_money(annual_payment),
                    cumulative_paid=round_money(total_paid),
                    remaining_balance=max(0.0, round_money(balance)),
                )
            )
        year += 1
        age += 1

    return FixedAnnuityResult(
        monthly_payment=round_money(monthly_payment),
        annual_payment=round_money(annual_payment),
        total_projected_payments=round_money(annual_payment * (le - start_age)),
        deferral_growth=round_money(value_at_start - investment),
        schedule=schedule,
        break_even_age=start_age + round_half_up(investment / annual_payment, 1),
        life_expectancy=le,
        annuity_factor_pct=round_money(annual_payment / investment * 100),
    )


# ---------------------------------------------------------------------------
# Variable annuity
# ---------------------------------------------------------------------------

def variable_annuity(
    investment: float,
    monthly_contribution: float,
    years: int,
    allocation: Sequence[float] = (70, 25, 5),
    fees_pct: float = 1.5,
) -> VariableAnnuityResult:
    """
    Project a variable annuity under conservative, base and optimistic returns.

    Parameters
    ----------
    investment : float
        Initial premium (> 0).
    monthly_contribution : float
        Ongoing deposit, credited once a year as ``12 × monthly``.
    years : int
        Projection horizon (>= 1).
    allocation : (equities, bonds, cash), default (70, 25, 5)
        Percent allocation across the three sub-account classes.
    fees_pct : float, default 1.5
        Annual mortality, expense and fund fees, in percent.

    Returns
    -------
    VariableAnnuityResult
        Scenario returns are 0.75×, 1× and 1.25× the blended gross return,
        each net of fees. Snapshots every fifth year and the final year.
    """
    check_positive("investment", investment)
    check_positive("years", years)
    if len(allocation) != 3:
        raise ValidationError(f"allocation must have 3 entries (equities, bonds, cash), got {len(allocation)}")

    equity_pct, bond_pct, cash_pct = (x / 100 for x in allocation)
    portfolio_return = EQUITY_RETURN * equity_pct + BOND_RETURN * bond_pct + CASH_RETURN * cash_pct
    fee = fees_pct / 100

    scenarios: Dict[str, VariableAnnuityScenario] = {}
    for name, multiplier in SCENARIO_MULTIPLIERS:
        scenario_return = portfolio_return * multiplier
        balance = investment
        contributed = investment
        projection: List[ScenarioRowDict] = []

        for year in range(1, int(years) + 1):
            growth = balance * (scenario_return - fee)
            yearly_contribution = monthly_contribution * MONTHS_PER_YEAR
            balance += growth + yearly_contribution
            contributed += yearly_contribution

            if year % SCHEDULE_SAMPLE_EVERY == 0 or year == years:
                projection.append(
                    {
                        "year": year,
                        "value": round_money(balance),
                        "gain": round_money(balance - contributed),
                    }
                )

        scenarios[name] = VariableAnnuityScenario(
            final_value=round_money(balance),
            total_contributed=round_money(contributed),
            investment_gain=round_money(balance - contributed),
            cagr_pct=((balance / investment) ** (1 / years) - 1) * 100,
            yearly_projection=projection,
        )

    return VariableAnnuityResult(
        initial_investment=investment,
        monthly_contribution=monthly_contribution,
        allocation={
            "equities": equity_pct * 100,
            "bonds": bond_pct * 100,
            "cash": cash_pct * 100,
        },
        annual_fees_pct=fees_pct,
        projection_years=int(years),
        scenarios=scenarios,
    )
