"""
Equity valuation models for fincalc.

Purpose
-------
- calculate_dcf  : enterprise and per-share value from projected free cash
                   flows plus a Gordon-growth terminal value
- calculate_ddm  : Gordon-growth dividend discount model
- calculate_wacc : weighted average cost of capital
- calculate_capm : expected return from the capital asset pricing model

Both Gordon-growth models are undefined when the discount rate does not
exceed the growth rate. That boundary is an anticipated input condition, so
the DCF and DDM report it in the result's ``error`` field with ``None``
values instead of raising.

All rates are percent inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .exceptions import DomainError, ValidationError
from .utils import ensure_1d

__all__ = [
    "DCFResult",
    "DDMResult",
    "WACCResult",
    "CAPMResult",
    "calculate_dcf",
    "calculate_ddm",
    "calculate_wacc",
    "calculate_capm",
]

GROWTH_BOUNDARY_ERROR = "Required return must be greater than growth rate"
WACC_BOUNDARY_ERROR = "WACC must be greater than terminal growth rate"


@dataclass(frozen=True)
class DCFResult:
    """
    Discounted cash flow valuation.

    When ``error`` is set every valuation field is None.
    """

    wacc_pct: float
    terminal_growth_pct: float
    pv_cash_flows: Optional[float] = None
    terminal_value: Optional[float] = None
    pv_terminal_value: Optional[float] = None
    enterprise_value: Optional[float] = None
    equity_value: Optional[float] = None
    price_per_share: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DDMResult:
    """
    Gordon-growth dividend discount valuation.

    Attributes
    ----------
    intrinsic_value : float or None
        ``D1 / (r − g)``; None when ``error`` is set.
    next_dividend : float or None
        ``D0 · (1 + g)``.
    dividend_yield_pct : float or None
        ``D1 / intrinsic_value · 100`` (equals ``r − g`` in percent).
    error : str or None
        Set when the required return does not exceed growth.
    """

    current_dividend: float
    growth_rate_pct: float
    required_return_pct: float
    intrinsic_value: Optional[float] = None
    next_dividend: Optional[float] = None
    dividend_yield_pct: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class WACCResult:
    wacc_pct: float
    equity_weight_pct: float
    debt_weight_pct: float
    cost_of_equity_pct: float
    cost_of_debt_pct: float
    after_tax_cost_of_debt_pct: float
    tax_rate_pct: float


@dataclass(frozen=True)
class CAPMResult:
    expected_return_pct: float
    risk_free_rate_pct: float
    market_return_pct: float
    beta: float
    market_risk_premium_pct: float
    interpretation: str


def calculate_dcf(
    free_cash_flows: Sequence[float],
    terminal_growth_pct: float,
    wacc_pct: float,
    cash: float = 0.0,
    debt: float = 0.0,
    shares: float = 1.0,
) -> DCFResult:
    """
    Value a firm from projected free cash flows.

    Parameters
    ----------
    free_cash_flows : sequence of float
        Projected FCF for years 1..n (at least one).
    terminal_growth_pct : float
        Perpetual growth after year n, percent.
    wacc_pct : float
        Discount rate, percent.
    cash, debt : float
        Added to / subtracted from enterprise value to reach equity value.
    shares : float
        Shares outstanding (> 0).

    Returns
    -------
    DCFResult
        With ``error`` set when ``wacc_pct <= terminal_growth_pct``.

    Raises
    ------
    ValidationError
        If no cash flows are given.
    DomainError
        If ``shares`` is not positive.
    """
    flows = ensure_1d(free_cash_flows, name="free_cash_flows")
    if flows.size == 0:
        raise ValidationError("free_cash_flows must contain at least one year.")
    if not shares > 0:
        raise DomainError(f"shares must be > 0, got {shares}")

    r = wacc_pct / 100
    g = terminal_growth_pct / 100
    if r <= g:
        return DCFResult(
            wacc_pct=wacc_pct,
            terminal_growth_pct=terminal_growth_pct,
            error=WACC_BOUNDARY_ERROR,
        )

    t = np.arange(1, flows.size + 1, dtype=float)
    pv_flows = float(np.sum(flows / (1 + r) ** t))
    terminal = float(flows[-1]) * (1 + g) / (r - g)
    pv_terminal = terminal / (1 + r) ** flows.size
    enterprise = pv_flows + pv_terminal
    equity = enterprise + cash - debt

    return DCFResult(
        wacc_pct=wacc_pct,
        terminal_growth_pct=terminal_growth_pct,
        pv_cash_flows=pv_flows,
        terminal_value=terminal,
        pv_terminal_value=pv_terminal,
        enterprise_value=enterprise,
        equity_value=equity,
        price_per_share=equity / shares,
    )


def calculate_ddm(
    current_dividend: float,
    growth_rate: float,
    required_return: float,
) -> DDMResult:
    """
    Gordon-growth dividend discount model.

    ``growth_rate`` and ``required_return`` are percent values.

    Examples
    --------
    >>> calculate_ddm(2, 3, 3).intrinsic_value is None
    True
    >>> round(calculate_ddm(2, 3, 8).intrinsic_value, 2)
    41.2
    """
    g = growth_rate / 100
    r = required_return / 100
    if r <= g:
        return DDMResult(
            current_dividend=current_dividend,
            growth_rate_pct=growth_rate,
            required_return_pct=required_return,
            error=GROWTH_BOUNDARY_ERROR,
        )

    next_dividend = current_dividend * (1 + g)
    value = next_dividend / (r - g)
    dividend_yield = next_dividend / value * 100 if value != 0 else None
    return DDMResult(
        current_dividend=current_dividend,
        growth_rate_pct=growth_rate,
        required_return_pct=required_return,
        intrinsic_value=value,
        next_dividend=next_dividend,
        dividend_yield_pct=dividend_yield,
    )


def calculate_wacc(
    equity_value: float,
    debt_value: float,
    cost_of_equity_pct: float,
    cost_of_debt_pct: float,
    tax_rate_pct: float,
) -> WACCResult:
    """
    Weighted average cost of capital with tax-deductible interest.

    Raises
    ------
    DomainError
        If total capital (equity + debt) is zero.
    """
    total = equity_value + debt_value
    if total == 0:
        raise DomainError("equity_value + debt_value must be non-zero.")

    equity_weight = equity_value / total
    debt_weight = debt_value / total
    after_tax_debt = cost_of_debt_pct * (1 - tax_rate_pct / 100)

    return WACCResult(
        wacc_pct=equity_weight * cost_of_equity_pct + debt_weight * after_tax_debt,
        equity_weight_pct=equity_weight * 100,
        debt_weight_pct=debt_weight * 100,
        cost_of_equity_pct=cost_of_equity_pct,
        cost_of_debt_pct=cost_of_debt_pct,
        after_tax_cost_of_debt_pct=after_tax_debt,
        tax_rate_pct=tax_rate_pct,
    )


def calculate_capm(risk_free_rate: float, market_return: float, beta: float) -> CAPMResult:
    """``E[R] = Rf + β(Rm − Rf)`` in percent, with a plain-language beta reading."""
    premium = market_return - risk_free_rate
    if beta > 1:
        interpretation = "More volatile than market"
    elif beta < 1:
        interpretation = "Less volatile than market"
    else:
        interpretation = "Tracks market"

    return CAPMResult(
        expected_return_pct=risk_free_rate + beta * premium,
        risk_free_rate_pct=risk_free_rate,
        market_return_pct=market_return,
        beta=beta,
        market_risk_premium_pct=premium,
        interpretation=interpretation,
    )
