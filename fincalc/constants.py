"""
Global constants for fincalc.

Purpose
-------
Centralizes default values and magic numbers used throughout the calculator
modules. The actuarial and market percentages below are historical-market
approximations, not derived quantities.

Usage
-----
>>> from fincalc.constants import DEFAULT_SIMULATIONS, NEWTON_TOLERANCE
>>>
>>> result = monte_carlo_simulation(10_000, 7, 15, 30, simulations=DEFAULT_SIMULATIONS)

Categories
----------
- Root finding: iteration budget, tolerance, lower clamp
- Simulation: Monte Carlo defaults
- Frontier: greedy search grid and step sizes
- Actuarial: survivor haircuts, early retirement penalty, RMD divisor
- Risk: z-score tables
- Cache: size and TTL defaults
"""

from typing import Dict, Tuple

__all__ = [
    # Root finding
    "NEWTON_MAX_ITERATIONS",
    "NEWTON_TOLERANCE",
    "NEWTON_LOWER_BOUND",
    "IRR_INITIAL_GUESS",
    # Simulation
    "DEFAULT_SIMULATIONS",
    "DEFAULT_SEED",
    "TRADING_DAYS_PER_YEAR",
    "DAYS_PER_YEAR",
    "MONTHS_PER_YEAR",
    # Frontier
    "FRONTIER_MIN_TARGET",
    "FRONTIER_MAX_TARGET",
    "FRONTIER_STEP",
    "FRONTIER_MAX_ITERATIONS",
    "FRONTIER_RETURN_TOLERANCE",
    "DEFAULT_RISK_FREE_RATE",
    # Actuarial / pensions
    "SCHEDULE_SAMPLE_EVERY",
    "NORMAL_RETIREMENT_AGE",
    "EARLY_RETIREMENT_PENALTY",
    "SURVIVOR_HAIRCUTS",
    "SAFE_WITHDRAWAL_RATE",
    "RMD_START_AGE",
    "RMD_DIVISOR",
    "SMOKER_MULTIPLIER",
    # Risk
    "VAR_Z_SCORES",
    "DEFAULT_VAR_Z",
    "AUDIT_Z_SCORES",
    "DEFAULT_AUDIT_Z",
    # Cache
    "DEFAULT_CACHE_SIZE",
    "DEFAULT_CACHE_TTL_SECONDS",
]


# =============================================================================
# Root Finding
# =============================================================================

NEWTON_MAX_ITERATIONS: int = 100
"""Default iteration budget for Newton-Raphson."""

NEWTON_TOLERANCE: float = 1e-4
"""Absolute tolerance on |f(r)| for Newton-Raphson convergence."""

NEWTON_LOWER_BOUND: float = -0.99
"""Iterates are clamped to stay >= this value so (1 + r) remains positive."""

IRR_INITIAL_GUESS: float = 0.10
"""Seed for the IRR search (10%)."""


# =============================================================================
# Simulation Defaults
# =============================================================================

DEFAULT_SIMULATIONS: int = 1000
"""Default number of Monte Carlo trials."""

DEFAULT_SEED: int = 42
"""Default random seed used by the CLI for reproducibility."""

TRADING_DAYS_PER_YEAR: int = 252
"""Trading days used to de-annualize return and volatility for VaR."""

DAYS_PER_YEAR: int = 365
"""Calendar days used to express option theta per day."""

MONTHS_PER_YEAR: int = 12
"""Number of months in a year."""


# =============================================================================
# Greedy Frontier Search
# =============================================================================

FRONTIER_MIN_TARGET: float = 5.0
"""Lowest target return (percent) on the frontier grid."""

FRONTIER_MAX_TARGET: float = 20.0
"""Highest target return (percent) on the frontier grid (inclusive)."""

FRONTIER_STEP: float = 0.5
"""Spacing between consecutive target returns (percent)."""

FRONTIER_MAX_ITERATIONS: int = 50
"""Weight-nudging iterations allowed per target return."""

FRONTIER_RETURN_TOLERANCE: float = 0.1
"""Stop nudging once the portfolio return is within this many points of target."""

DEFAULT_RISK_FREE_RATE: float = 2.0
"""Default risk-free rate (percent) for Sharpe ratios on the frontier."""


# =============================================================================
# Actuarial / Pension Defaults
# =============================================================================

SCHEDULE_SAMPLE_EVERY: int = 5
"""Reporting cadence (years) for sampled annuity and pension schedules."""

NORMAL_RETIREMENT_AGE: int = 65
"""Age at which a defined-benefit pension is unreduced."""

EARLY_RETIREMENT_PENALTY: float = 0.06
"""Benefit reduction per year of retirement before NORMAL_RETIREMENT_AGE."""

SURVIVOR_HAIRCUTS: Tuple[Tuple[str, float], ...] = (
    ("100%", 1.00),
    ("75%", 0.95),
    ("50%", 0.92),
)
"""Joint-and-survivor elections and the fraction of the reduced benefit kept."""

SAFE_WITHDRAWAL_RATE: float = 0.04
"""The 4% rule."""

RMD_START_AGE: int = 73
"""Age of the first Required Minimum Distribution."""

RMD_DIVISOR: float = 26.5
"""Fixed distribution period at age 73.

Stands in for the age-indexed IRS Uniform Lifetime Table at every age.
"""

SMOKER_MULTIPLIER: float = 2.5
"""Mortality and premium multiplier applied to smokers."""


# =============================================================================
# Risk Tables
# =============================================================================

VAR_Z_SCORES: Dict[int, float] = {90: 1.282, 95: 1.645, 99: 2.326}
"""One-tailed z-scores for parametric VaR by confidence level (percent)."""

DEFAULT_VAR_Z: float = 1.645
"""z-score used for unrecognized VaR confidence levels (95%)."""

AUDIT_Z_SCORES: Dict[int, float] = {90: 1.645, 95: 1.96, 99: 2.576}
"""Two-tailed z-scores for attribute sampling by confidence level (percent)."""

DEFAULT_AUDIT_Z: float = 1.96
"""z-score used for unrecognized audit confidence levels (95%)."""


# =============================================================================
# Cache Defaults
# =============================================================================

DEFAULT_CACHE_SIZE: int = 100
"""Maximum number of entries kept by CalculationCache."""

DEFAULT_CACHE_TTL_SECONDS: float = 3600.0
"""Time-to-live of a cache entry (1 hour)."""
