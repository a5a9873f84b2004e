"""
Bond and fixed-income calculator for fincalc.

Purpose
-------
Prices a plain fixed-coupon bond and derives its Macaulay and modified
duration, convexity and current yield.

Key Mathematical Framework
--------------------------
With face F, coupon C per period, yield y per period, n periods and m
payments per year:

- Price:       P = C·(1 − (1+y)^−n)/y + F·(1+y)^−n
- Macaulay:    D = [Σ_{t=1..n} t·C(1+y)^−t + n·F(1+y)^−n] / P / m
- Modified:    D* = D / (1 + y)
- Convexity:   [Σ t(t+1)·C(1+y)^−t + n(n+1)·F(1+y)^−n] / (P(1+y)²) / m²

Period count
------------
``n = years · payments_per_year`` is truncated toward zero and must be at
least 1. A zero yield degenerates to undiscounted coupons ``C·n``.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .exceptions import DomainError
from .timevalue import present_value_of_annuity
from .utils import check_positive

__all__ = ["BondResult", "price_bond"]

# Relative band around face value inside which a bond counts as priced at par.
PAR_TOLERANCE = 1e-9


@dataclass(frozen=True)
class BondResult:
    """
    Priced bond.

    Attributes
    ----------
    price : float
        Dirty price per ``face_value``.
    duration : float
        Macaulay duration in years.
    modified_duration : float
        Percent price change per 1.00 change in the per-period yield.
    convexity : float
        Convexity in years².
    current_yield : float
        Annual coupon over price, in percent.
    ytm : float
        Market yield echoed back, in percent.
    total_coupon_payments : float
        Undiscounted sum of coupons.
    premium, discount : bool
        ``price > face_value`` / ``price < face_value``, ignoring
        float noise within ``PAR_TOLERANCE`` of par.
    """

    price: float
    duration: float
    modified_duration: float
    convexity: float
    current_yield: float
    ytm: float
    total_coupon_payments: float
    premium: bool
    discount: bool


def price_bond(
    face_value: float,
    coupon_rate_pct: float,
    years: float,
    market_yield_pct: float,
    payments_per_year: int = 2,
) -> BondResult:
    """
    Price a fixed-coupon bond and compute its risk measures.

    Parameters
    ----------
    face_value : float
        Redemption amount (> 0).
    coupon_rate_pct : float
        Annual coupon rate in percent.
    years : float
        Years to maturity.
    market_yield_pct : float
        Annual yield to maturity in percent (> -100).
    payments_per_year : int, default 2
        Coupon frequency (>= 1).

    Returns
    -------
    BondResult

    Raises
    ------
    DomainError
        If the truncated period count is below 1, or inputs are out of range.

    Examples
    --------
    >>> result = price_bond(1000, 5, 10, 5, 2)
    >>> round(result.price, 2), result.premium, result.discount
    (1000.0, False, False)
    """
    check_positive("face_value", face_value)
    if payments_per_year < 1:
        raise DomainError(f"payments_per_year must be >= 1, got {payments_per_year}")
    if market_yield_pct <= -100 * payments_per_year:
        raise DomainError(f"market_yield_pct too low: {market_yield_pct}")

    n = int(years * payments_per_year)
    if n < 1:
        raise DomainError(
            f"years * payments_per_year must give at least one period, "
            f"got {years} * {payments_per_year}."
        )

    coupon = face_value * coupon_rate_pct / 100 / payments_per_year
    y = market_yield_pct / 100 / payments_per_year

    pv_coupons = present_value_of_annuity(coupon, y, n)
    pv_face = face_value * (1 + y) ** -n
    price = pv_coupons + pv_face

    t = np.arange(1, n + 1, dtype=float)
    coupon_pvs = coupon * (1 + y) ** -t

    duration = (float(np.sum(t * coupon_pvs)) + n * pv_face) / price / payments_per_year
    modified_duration = duration / (1 + y)

    convexity = float(np.sum(t * (t + 1) * coupon_pvs)) + n * (n + 1) * pv_face
    convexity = convexity / (price * (1 + y) ** 2) / payments_per_year ** 2

    annual_coupon = face_value * coupon_rate_pct / 100
    par_band = face_value * PAR_TOLERANCE
    return BondResult(
        price=price,
        duration=duration,
        modified_duration=modified_duration,
        convexity=convexity,
        current_yield=annual_coupon / price * 100,
        ytm=market_yield_pct,
        total_coupon_payments=coupon * n,
        premium=bool(price - face_value > par_band),
        discount=bool(face_value - price > par_band),
    )
