"""
Discounted cash-flow analysis for fincalc.

Purpose
-------
Net present value, internal rate of return, payback period and
profitability index of an investment described by an initial outlay and a
series of end-of-period cash flows.

Key Mathematical Framework
--------------------------
    NPV(r)  = −I + Σ_{i=0..n−1} CF_i / (1+r)^(i+1)
    NPV'(r) = −Σ_{i=0..n−1} (i+1)·CF_i / (1+r)^(i+2)

IRR solves NPV(r) = 0 with Newton-Raphson seeded at 10%. A series whose
cash flows never change sign has no IRR; the solver then reports
``converged=False`` and the last iterate.

Payback interpolates inside the period in which cumulative cash turns
non-negative: ``periods_before + shortfall / CF_crossing``.

Example
-------
>>> res = calculate_npv_irr(1000, [400, 400, 400], rate_pct=10)
>>> round(res.npv, 2), res.irr_converged
(-5.26, True)
>>> round(res.payback, 2)
2.5
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .constants import IRR_INITIAL_GUESS
from .exceptions import ValidationError
from .rootfind import RootResult, newton_raphson
from .utils import ensure_1d

__all__ = [
    "NpvIrrResult",
    "npv",
    "npv_derivative",
    "irr",
    "payback_period",
    "calculate_npv_irr",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NpvIrrResult:
    """
    Combined NPV / IRR analysis.

    Attributes
    ----------
    npv : float
        Net present value at the requested rate.
    irr : float
        Internal rate of return in percent (last iterate when not converged).
    irr_converged : bool
        Whether the IRR search met its tolerance.
    irr_iterations : int
    payback : float or None
        Interpolated payback in periods; None when the outlay is never
        recovered.
    profitability_index : float or None
        PV of inflows over the initial outlay; None for a zero outlay.
    total_cashflow : float
        Undiscounted sum of the cash flows (excluding the outlay).
    """

    npv: float
    irr: float
    irr_converged: bool
    irr_iterations: int
    payback: Optional[float]
    profitability_index: Optional[float]
    total_cashflow: float


def _validated_flows(cashflows: Sequence[float]) -> np.ndarray:
    flows = ensure_1d(cashflows, name="cashflows")
    if flows.size == 0:
        raise ValidationError("cashflows must contain at least one period.")
    return flows


def npv(initial: float, cashflows: Sequence[float], rate_pct: float) -> float:
    """
    Net present value of ``cashflows`` less ``initial`` at ``rate_pct`` percent.

    The first cash flow is discounted one full period.
    """
    flows = _validated_flows(cashflows)
    return _npv_at(initial, flows, rate_pct / 100)


def _npv_at(initial: float, flows: np.ndarray, r: float) -> float:
    t = np.arange(1, flows.size + 1, dtype=float)
    return float(-initial + np.sum(flows / (1 + r) ** t))


def npv_derivative(cashflows: Sequence[float], r: float) -> float:
    """Analytic ``d NPV / d r`` at decimal rate *r*."""
    return _npv_derivative_at(_validated_flows(cashflows), r)


def _npv_derivative_at(flows: np.ndarray, r: float) -> float:
    t = np.arange(1, flows.size + 1, dtype=float)
    return float(-np.sum(t * flows / (1 + r) ** (t + 1)))


def irr(
    initial: float,
    cashflows: Sequence[float],
    guess: float = IRR_INITIAL_GUESS,
) -> RootResult:
    """
    Internal rate of return by Newton-Raphson.

    Parameters
    ----------
    initial : float
        Outlay at time 0 (positive for an investment).
    cashflows : sequence of float
        End-of-period cash flows.
    guess : float, default 0.10
        Decimal starting rate.

    Returns
    -------
    RootResult
        ``root`` is a decimal rate. Check ``converged`` before relying on it.
    """
    flows = _validated_flows(cashflows)
    result = newton_raphson(
        lambda r: _npv_at(initial, flows, r),
        lambda r: _npv_derivative_at(flows, r),
        guess,
    )
    if not result.converged:
        logger.info("IRR search did not converge; reporting last iterate %.6g", result.root)
    return result


def payback_period(initial: float, cashflows: Sequence[float]) -> Optional[float]:
    """
    Interpolated payback period in periods.

    Returns 0 when there is no outlay to recover and None when cumulative
    cash never turns non-negative.
    """
    flows = _validated_flows(cashflows)
    if initial <= 0:
        return 0.0

    cumulative = -initial
    for i, cf in enumerate(flows):
        previous = cumulative
        cumulative += cf
        if cumulative >= 0:
            return float(i + (-previous) / cf)
    return None


def calculate_npv_irr(
    initial: float,
    cashflows: Sequence[float],
    rate_pct: float,
    irr_guess: float = IRR_INITIAL_GUESS,
) -> NpvIrrResult:
    """
    Full capital-budgeting summary of an investment.

    Parameters
    ----------
    initial : float
        Outlay at time 0.
    cashflows : sequence of float
        End-of-period cash flows (at least one).
    rate_pct : float
        Discount rate in percent.
    irr_guess : float, default 0.10
        Decimal starting rate for the IRR search.

    Returns
    -------
    NpvIrrResult
    """
    flows = _validated_flows(cashflows)
    r = rate_pct / 100
    value = _npv_at(initial, flows, r)
    root = irr(initial, flows, guess=irr_guess)

    pv_inflows = value + initial
    pi = pv_inflows / initial if initial != 0 else None

    return NpvIrrResult(
        npv=value,
        irr=root.root * 100,
        irr_converged=root.converged,
        irr_iterations=root.iterations,
        payback=payback_period(initial, flows),
        profitability_index=pi,
        total_cashflow=float(np.sum(flows)),
    )
