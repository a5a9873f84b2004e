"""
Black-Scholes option pricing for fincalc.

Purpose
-------
Closed-form European option price and Greeks under log-normal dynamics.

Key Mathematical Framework
--------------------------
    d1 = [ln(S/K) + (r + σ²/2)·T] / (σ·√T)
    d2 = d1 − σ·√T

    call = S·N(d1) − K·e^(−rT)·N(d2)
    put  = K·e^(−rT)·N(−d2) − S·N(−d1)

Greeks are reported per market convention:

- vega and rho per 1 percentage point move (÷100)
- theta per calendar day (÷365)

Normal CDF
----------
The default CDF is the Zelen & Severo (1964) polynomial approximation,
maximum absolute error 7.5e-8. ``cdf="exact"`` switches to
``scipy.special.ndtr``. Both satisfy ``N(x) + N(−x) = 1`` to well within
1e-4, so put-call parity holds for either choice.

Rates here are decimals (``risk_free_rate=0.05``, ``volatility=0.2``).

Example
-------
>>> contract = OptionContract(spot=100, strike=100, time_to_maturity_years=1,
...                           risk_free_rate=0.05, volatility=0.2)
>>> round(black_scholes(contract).price, 2)
10.45
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Callable, Dict, Literal

from scipy.special import ndtr

from .constants import DAYS_PER_YEAR
from .exceptions import DomainError
from .utils import check_choice

__all__ = [
    "OptionContract",
    "OptionResult",
    "normal_cdf",
    "exact_normal_cdf",
    "black_scholes",
    "put_call_parity_gap",
]

OptionType = Literal["call", "put"]

# Zelen & Severo coefficients (Abramowitz & Stegun 26.2.17).
_ZS_P = 0.2316419
_ZS_DENSITY = 0.3989423
_ZS_B = (0.3193815, -0.3565638, 1.781478, -1.821256, 1.330274)


def normal_cdf(x: float) -> float:
    """Standard normal CDF by the Zelen & Severo polynomial approximation."""
    t = 1.0 / (1.0 + _ZS_P * abs(x))
    d = _ZS_DENSITY * math.exp(-x * x / 2)
    b1, b2, b3, b4, b5 = _ZS_B
    prob = d * t * (b1 + t * (b2 + t * (b3 + t * (b4 + t * b5))))
    return 1 - prob if x > 0 else prob


def exact_normal_cdf(x: float) -> float:
    """Standard normal CDF via ``scipy.special.ndtr``."""
    return float(ndtr(x))


CDF_METHODS: Dict[str, Callable[[float], float]] = {
    "zelen_severo": normal_cdf,
    "exact": exact_normal_cdf,
}


@dataclass(frozen=True)
class OptionContract:
    """
    European option contract.

    Parameters
    ----------
    spot : float
        Underlying price (> 0).
    strike : float
        Strike price (> 0).
    time_to_maturity_years : float
        Time to expiry in years (> 0).
    risk_free_rate : float
        Continuously compounded risk-free rate, decimal.
    volatility : float
        Annualised volatility, decimal (> 0).
    option_type : {"call", "put"}, default "call"

    Raises
    ------
    DomainError
        If spot, strike, maturity or volatility is not strictly positive.
    """

    spot: float
    strike: float
    time_to_maturity_years: float
    risk_free_rate: float
    volatility: float
    option_type: OptionType = "call"

    def __post_init__(self):
        for name in ("spot", "strike", "time_to_maturity_years", "volatility"):
            value = getattr(self, name)
            if not value > 0:
                raise DomainError(f"{name} must be > 0 for Black-Scholes pricing, got {value}")
        check_choice("option_type", self.option_type, ("call", "put"))

    def with_type(self, option_type: OptionType) -> "OptionContract":
        """Same contract with a different ``option_type``."""
        return replace(self, option_type=option_type)


@dataclass(frozen=True)
class OptionResult:
    """
    Price and Greeks of a European option.

    Attributes
    ----------
    price : float
    delta : float
        ∂V/∂S.
    gamma : float
        ∂²V/∂S².
    vega : float
        Value change for a 1 point rise in volatility.
    theta : float
        Value change per calendar day.
    rho : float
        Value change for a 1 point rise in the risk-free rate.
    d1, d2 : float
    """

    price: float
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float
    d1: float
    d2: float


def black_scholes(contract: OptionContract, cdf: str = "zelen_severo") -> OptionResult:
    """
    Price a European option and compute its Greeks.

    Parameters
    ----------
    contract : OptionContract
        Validated contract.
    cdf : {"zelen_severo", "exact"}, default "zelen_severo"
        Normal CDF implementation.

    Returns
    -------
    OptionResult
    """
    check_choice("cdf", cdf, tuple(CDF_METHODS))
    N = CDF_METHODS[cdf]

    S = contract.spot
    K = contract.strike
    T = contract.time_to_maturity_years
    r = contract.risk_free_rate
    sigma = contract.volatility

    sqrt_t = math.sqrt(T)
    d1 = (math.log(S / K) + (r + sigma * sigma / 2) * T) / (sigma * sqrt_t)
    d2 = d1 - sigma * sqrt_t
    discounted_strike = K * math.exp(-r * T)
    density = math.exp(-d1 * d1 / 2) / math.sqrt(2 * math.pi)

    if contract.option_type == "call":
        price = S * N(d1) - discounted_strike * N(d2)
        delta = N(d1)
        rho = K * T * math.exp(-r * T) * N(d2) / 100
        carry = -r * discounted_strike * N(d2)
    else:
        price = discounted_strike * N(-d2) - S * N(-d1)
        delta = N(d1) - 1
        rho = -K * T * math.exp(-r * T) * N(-d2) / 100
        carry = r * discounted_strike * N(-d2)

    gamma = density / (S * sigma * sqrt_t)
    vega = S * sqrt_t * density / 100
    theta = (-S * sigma * density / (2 * sqrt_t) + carry) / DAYS_PER_YEAR

    return OptionResult(
        price=price,
        delta=delta,
        gamma=gamma,
        vega=vega,
        theta=theta,
        rho=rho,
        d1=d1,
        d2=d2,
    )


def put_call_parity_gap(contract: OptionContract, cdf: str = "zelen_severo") -> float:
    """``(call − put) − (S − K·e^(−rT))``; zero up to CDF error."""
    call = black_scholes(contract.with_type("call"), cdf).price
    put = black_scholes(contract.with_type("put"), cdf).price
    forward_gap = contract.spot - contract.strike * math.exp(
        -contract.risk_free_rate * contract.time_to_maturity_years
    )
    return (call - put) - forward_gap
