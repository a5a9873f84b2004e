"""
Lending and real-estate calculators for fincalc.

Purpose
-------
- calculate_mortgage      : P&I payment, escrow items, PMI and a yearly
                            amortization summary
- loan_affordability      : maximum loan under a 43% debt-to-income cap
- calculate_dscr          : debt service coverage ratio with a credit rating
- lease_vs_buy            : after-tax cost comparison of leasing and buying
- rental_property         : NOI, cap rate, cash-on-cash and a 5-year outlook
- like_kind_exchange      : tax deferred by a 1031 exchange, with boot

Rates are percent inputs; terms are in years with monthly payments.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

from .constants import MONTHS_PER_YEAR
from .exceptions import DomainError
from .timevalue import amortization_schedule, present_value_of_annuity
from .types import AmortizationRowDict, RentalYearDict
from .utils import check_non_negative, check_positive, periodic_rate

__all__ = [
    "MortgageResult",
    "AffordabilityResult",
    "DSCRResult",
    "LeaseVsBuyResult",
    "RentalPropertyResult",
    "ExchangeResult",
    "calculate_mortgage",
    "loan_affordability",
    "calculate_dscr",
    "lease_vs_buy",
    "rental_property",
    "like_kind_exchange",
]

MAX_DEBT_TO_INCOME = 0.43
PMI_EQUITY_THRESHOLD = 0.20
DEPRECIATION_SHIELD_FACTOR = 0.7
RENT_GROWTH = 0.02
RENTAL_PROJECTION_YEARS = 5

DSCR_RATINGS = (
    (1.25, "Excellent - Low risk"),
    (1.15, "Good - Acceptable risk"),
    (1.00, "Marginal - High risk"),
)
DSCR_FAILING = "Poor - Cannot cover debt"

EXCHANGE_BENEFIT_THRESHOLD = 10_000


@dataclass(frozen=True)
class MortgageResult:
    """
    Mortgage payment breakdown.

    ``schedule`` samples month 1, every 12th month and the final month.
    ``total_cost`` is principal plus interest over the whole term.
    """

    loan_amount: float
    monthly_payment: float
    total_monthly_payment: float
    monthly_property_tax: float
    monthly_insurance: float
    monthly_hoa: float
    monthly_pmi: float
    total_interest: float
    total_cost: float
    ltv_pct: float
    equity: float
    schedule: List[AmortizationRowDict] = field(default_factory=list)


@dataclass(frozen=True)
class AffordabilityResult:
    max_monthly_payment: float
    max_loan: float
    max_home_price: float
    down_payment: float
    dti_ratio_pct: float


@dataclass(frozen=True)
class DSCRResult:
    dscr: float
    net_operating_income: float
    total_debt_service: float
    excess_cash_flow: float
    rating: str


@dataclass(frozen=True)
class LeaseVsBuyResult:
    """
    Lease and buy costs over the lease term.

    ``savings`` is net lease cost minus net buy cost; positive favours buying.
    """

    lease_total_payments: float
    lease_purchase_option: float
    lease_tax_savings: float
    lease_net_cost: float
    buy_monthly_payment: float
    buy_total_payments: float
    buy_interest: float
    salvage_value: float
    depreciation_shield: float
    buy_net_cost: float
    savings: float
    recommendation: Literal["Buy", "Lease"]


@dataclass(frozen=True)
class RentalPropertyResult:
    noi: float
    cash_flow: float
    monthly_cash_flow: float
    cap_rate_pct: float
    cash_on_cash_pct: float
    gross_rent_multiplier: float
    vacancy_loss: float
    break_even: float
    projections: List[RentalYearDict] = field(default_factory=list)


@dataclass(frozen=True)
class ExchangeResult:
    """
    Outcome of a like-kind exchange compared with an outright sale.

    Attributes
    ----------
    capital_gain : float
        Appreciation between the relinquished basis and the replacement price.
    depreciation_recapture : float
        Accumulated depreciation on the relinquished property.
    total_gain : float
        ``capital_gain + depreciation_recapture``.
    boot : float
        Cash or non-like-kind property received in the exchange.
    taxable_gain : float
        Gain recognised now, ``min(boot, total_gain)``. Recapture is
        recognised first.
    deferred_gain : float
        ``total_gain - taxable_gain``.
    tax_if_sold : float
        Tax owed on a direct sale.
    tax_due : float
        Tax owed on the recognised gain.
    tax_deferred : float
        ``tax_if_sold - tax_due``; capital freed for reinvestment.
    new_basis : float
        Replacement price less the deferred gain.
    recommendation : str
    """

    relinquished_basis: float
    replacement_price: float
    capital_gain: float
    depreciation_recapture: float
    total_gain: float
    boot: float
    taxable_gain: float
    deferred_gain: float
    tax_if_sold: float
    tax_due: float
    tax_deferred: float
    new_basis: float
    recommendation: str


def calculate_mortgage(
    home_price: float,
    down_payment: float,
    interest_rate_pct: float,
    term_years: int,
    property_tax: float,
    insurance: float,
    hoa: float = 0.0,
    pmi_pct: float = 0.0,
) -> MortgageResult:
    """
    Monthly cost of a fixed-rate mortgage.

    Parameters
    ----------
    home_price : float
        Purchase price (> 0).
    down_payment : float
        Cash down; PMI applies when it is below 20% of the price.
    interest_rate_pct : float
        Annual note rate in percent.
    term_years : int
        Amortization term.
    property_tax, insurance, hoa : float
        Annual amounts, spread monthly.
    pmi_pct : float, default 0
        Annual PMI as a percent of the loan amount.

    Returns
    -------
    MortgageResult
    """
    check_positive("home_price", home_price)
    check_non_negative("down_payment", down_payment)
    loan = home_price - down_payment
    if loan <= 0:
        raise DomainError(f"down_payment ({down_payment}) must be below home_price ({home_price}).")

    rows = amortization_schedule(loan, interest_rate_pct, term_years, MONTHS_PER_YEAR)
    months = len(rows)
    payment = rows[0]["payment"]

    schedule: List[AmortizationRowDict] = []
    total_interest = 0.0
    for row in rows:
        total_interest += row["interest"]
        month = row["period"]
        if month == 1 or month % MONTHS_PER_YEAR == 0 or month == months:
            sampled: AmortizationRowDict = dict(row)  # type: ignore[assignment]
            sampled["total_interest"] = total_interest
            schedule.append(sampled)

    monthly_pmi = 0.0
    if down_payment / home_price < PMI_EQUITY_THRESHOLD:
        monthly_pmi = loan * pmi_pct / 100 / MONTHS_PER_YEAR

    monthly_tax = property_tax / MONTHS_PER_YEAR
    monthly_insurance = insurance / MONTHS_PER_YEAR
    monthly_hoa = hoa / MONTHS_PER_YEAR

    return MortgageResult(
        loan_amount=loan,
        monthly_payment=payment,
        total_monthly_payment=payment + monthly_tax + monthly_insurance + monthly_hoa + monthly_pmi,
        monthly_property_tax=monthly_tax,
        monthly_insurance=monthly_insurance,
        monthly_hoa=monthly_hoa,
        monthly_pmi=monthly_pmi,
        total_interest=total_interest,
        total_cost=payment * months,
        ltv_pct=loan / home_price * 100,
        equity=home_price - loan,
        schedule=schedule,
    )


def loan_affordability(
    monthly_income: float,
    monthly_debt: float,
    down_payment: float,
    interest_rate_pct: float,
    term_years: int,
) -> AffordabilityResult:
    """
    Largest home price supportable under a 43% debt-to-income cap.

    The payment headroom is ``0.43 · income − existing debt``; the maximum
    loan is the present value of that payment over the term, and is zero
    when there is no headroom.
    """
    check_non_negative("monthly_income", monthly_income)
    max_payment = monthly_income * MAX_DEBT_TO_INCOME - monthly_debt
    r = periodic_rate(interest_rate_pct, MONTHS_PER_YEAR)
    n = int(term_years * MONTHS_PER_YEAR)
    if n < 1:
        raise DomainError(f"term_years must cover at least one month, got {term_years}")

    max_loan = max(0.0, present_value_of_annuity(max_payment, r, n))
    return AffordabilityResult(
        max_monthly_payment=max_payment,
        max_loan=max_loan,
        max_home_price=max_loan + down_payment,
        down_payment=down_payment,
        dti_ratio_pct=MAX_DEBT_TO_INCOME * 100,
    )


def calculate_dscr(net_operating_income: float, total_debt_service: float) -> DSCRResult:
    """
    Debt service coverage ratio ``NOI / debt service`` with a lender rating.

    Examples
    --------
    >>> calculate_dscr(125_000, 100_000).rating
    'Excellent - Low risk'
    """
    check_positive("total_debt_service", total_debt_service)
    dscr = net_operating_income / total_debt_service

    rating = DSCR_FAILING
    for threshold, label in DSCR_RATINGS:
        if dscr >= threshold:
            rating = label
            break

    return DSCRResult(
        dscr=dscr,
        net_operating_income=net_operating_income,
        total_debt_service=total_debt_service,
        excess_cash_flow=net_operating_income - total_debt_service,
        rating=rating,
    )


def lease_vs_buy(
    asset_cost: float,
    lease_term_years: int,
    monthly_lease: float,
    purchase_option: float,
    loan_rate_pct: float,
    salvage_value: float,
    tax_rate_pct: float,
) -> LeaseVsBuyResult:
    """
    Compare leasing an asset against buying it with a loan over the lease term.

    Lease payments are fully deductible. Buying earns a simplified MACRS
    depreciation shield of ``0.7 · cost · tax rate`` and recovers the salvage
    value. The loan amortizes over the lease term.
    """
    check_positive("asset_cost", asset_cost)
    tax = tax_rate_pct / 100

    lease_payments = monthly_lease * lease_term_years * MONTHS_PER_YEAR
    option_cost = purchase_option or 0.0
    lease_tax_savings = lease_payments * tax
    lease_net = lease_payments + option_cost - lease_tax_savings

    rows = amortization_schedule(asset_cost, loan_rate_pct, lease_term_years, MONTHS_PER_YEAR)
    monthly_payment = rows[0]["payment"]
    buy_payments = monthly_payment * len(rows)
    interest = sum(row["interest"] for row in rows)
    shield = asset_cost * DEPRECIATION_SHIELD_FACTOR * tax
    buy_net = buy_payments - salvage_value - shield

    savings = lease_net - buy_net
    return LeaseVsBuyResult(
        lease_total_payments=lease_payments,
        lease_purchase_option=option_cost,
        lease_tax_savings=lease_tax_savings,
        lease_net_cost=lease_net,
        buy_monthly_payment=monthly_payment,
        buy_total_payments=buy_payments,
        buy_interest=interest,
        salvage_value=salvage_value,
        depreciation_shield=shield,
        buy_net_cost=buy_net,
        savings=savings,
        recommendation="Buy" if savings > 0 else "Lease",
    )


def rental_property(
    purchase_price: float,
    down_payment: float,
    closing_costs: float,
    monthly_rent: float,
    vacancy_pct: float,
    monthly_expenses: float,
    mortgage_payment: float,
    appreciation_pct: float = 3.0,
) -> RentalPropertyResult:
    """
    Income analysis of a rental property.

    NOI grows 2% a year in the projection; the property appreciates at
    ``appreciation_pct``. Equity in the projection ignores loan paydown.
    """
    check_positive("purchase_price", purchase_price)
    check_positive("monthly_rent", monthly_rent)
    invested = down_payment + closing_costs
    if invested <= 0:
        raise DomainError("down_payment + closing_costs must be positive.")

    annual_rent = monthly_rent * MONTHS_PER_YEAR
    vacancy_loss = annual_rent * vacancy_pct / 100
    annual_expenses = monthly_expenses * MONTHS_PER_YEAR
    annual_mortgage = mortgage_payment * MONTHS_PER_YEAR

    noi = annual_rent - vacancy_loss - annual_expenses
    cash_flow = noi - annual_mortgage

    projections: List[RentalYearDict] = []
    value = purchase_price
    loan = purchase_price - down_payment
    for year in range(1, RENTAL_PROJECTION_YEARS + 1):
        value *= 1 + appreciation_pct / 100
        year_noi = noi * (1 + RENT_GROWTH) ** year
        projections.append(
            {
                "year": year,
                "property_value": value,
                "noi": year_noi,
                "cash_flow": year_noi - annual_mortgage,
                "equity": value - loan,
            }
        )

    return RentalPropertyResult(
        noi=noi,
        cash_flow=cash_flow,
        monthly_cash_flow=cash_flow / MONTHS_PER_YEAR,
        cap_rate_pct=noi / purchase_price * 100,
        cash_on_cash_pct=cash_flow / invested * 100,
        gross_rent_multiplier=purchase_price / annual_rent,
        vacancy_loss=vacancy_loss,
        break_even=annual_expenses + annual_mortgage,
        projections=projections,
    )


def like_kind_exchange(
    relinquished_basis: float,
    replacement_price: float,
    accumulated_depreciation: float = 0.0,
    boot: float = 0.0,
    capital_gains_rate_pct: float = 20.0,
    recapture_rate_pct: float = 25.0,
) -> ExchangeResult:
    """
    Tax deferred by swapping into a replacement property under section 1031.

    The gain is the replacement price over the relinquished basis (floored at
    zero) plus accumulated depreciation. Boot is taxed up to the total gain,
    recapture first at ``recapture_rate_pct`` and the remainder at
    ``capital_gains_rate_pct``. The rest of the gain is deferred and carried
    into the new basis.

    Examples
    --------
    >>> result = like_kind_exchange(300_000, 500_000, accumulated_depreciation=50_000)
    >>> result.tax_deferred
    52500.0
    >>> result.new_basis
    250000.0
    """
    check_non_negative("relinquished_basis", relinquished_basis)
    check_non_negative("replacement_price", replacement_price)
    check_non_negative("accumulated_depreciation", accumulated_depreciation)
    check_non_negative("boot", boot)
    cg_rate = capital_gains_rate_pct / 100
    recapture_rate = recapture_rate_pct / 100

    capital_gain = max(replacement_price - relinquished_basis, 0.0)
    total_gain = capital_gain + accumulated_depreciation
    tax_if_sold = capital_gain * cg_rate + accumulated_depreciation * recapture_rate

    taxable = min(boot, total_gain)
    recaptured = min(taxable, accumulated_depreciation)
    tax_due = recaptured * recapture_rate + (taxable - recaptured) * cg_rate
    tax_deferred = tax_if_sold - tax_due
    deferred_gain = total_gain - taxable

    return ExchangeResult(
        relinquished_basis=relinquished_basis,
        replacement_price=replacement_price,
        capital_gain=capital_gain,
        depreciation_recapture=accumulated_depreciation,
        total_gain=total_gain,
        boot=boot,
        taxable_gain=taxable,
        deferred_gain=deferred_gain,
        tax_if_sold=tax_if_sold,
        tax_due=tax_due,
        tax_deferred=tax_deferred,
        new_basis=replacement_price - deferred_gain,
        recommendation=(
            "1031 Exchange highly beneficial"
            if tax_deferred > EXCHANGE_BENEFIT_THRESHOLD
            else "Consider direct sale"
        ),
    )
