"""
Portfolio analytics for fincalc.

Purpose
-------
- risk_metrics            : parametric VaR, CVaR, Sharpe, Treynor, Jensen's alpha
- PortfolioAsset          : named asset with expected return, risk, correlations
- GreedyFrontierSearch    : iterative weight-nudging efficient frontier heuristic
- efficient_frontier      : functional wrapper around GreedyFrontierSearch
- equal_weight_portfolio  : 1/n baseline portfolio
- monte_carlo_simulation  : terminal-value distribution by Box-Muller sampling

Key Mathematical Framework
--------------------------
Risk metrics (returns and volatility in percent, de-annualised over 252 days):

    σ_d   = σ / 100 / √252
    VaR   = V · z · σ_d · √h
    CVaR  = V · σ_d · √h · φ(z) / (1 − c)        φ(z) = e^(−z²/2)/√(2π)

Portfolio risk for weights w, risks σ and correlations ρ:

    σ_p² = Σ_i Σ_j w_i w_j σ_i σ_j ρ_ij        (ρ_ii = 1, missing ρ_ij = 0)

Monte Carlo terminal value for one trial:

    V_T = V_0 · Π_{y=1..Y} (1 + μ + σ·z_y),    z_y = √(−2 ln u1)·cos(2π u2)

Percentiles
-----------
Percentiles are order statistics of the sorted terminal values, without
interpolation: median = sorted[⌊n/2⌋], p10 = sorted[⌊0.1n⌋],
p90 = sorted[⌊0.9n⌋]. With few trials this differs from
``numpy.percentile``.

Frontier heuristic
------------------
The frontier is not a quadratic-programming solve. For each target return
on the grid 5%, 5.5%, ..., 20% the search starts from equal weights and, at
most 50 times, nudges each weight by ``(target − current)/n / return_i``,
floors it at zero and renormalises, stopping once within 0.1 points of the
target. Reported points carry the target return, not the achieved one.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from .constants import (
    DEFAULT_RISK_FREE_RATE,
    DEFAULT_SIMULATIONS,
    DEFAULT_VAR_Z,
    FRONTIER_MAX_ITERATIONS,
    FRONTIER_MAX_TARGET,
    FRONTIER_MIN_TARGET,
    FRONTIER_RETURN_TOLERANCE,
    FRONTIER_STEP,
    TRADING_DAYS_PER_YEAR,
    VAR_Z_SCORES,
)
from .exceptions import DomainError, ValidationError
from .types import AssetWeightDict
from .utils import check_positive

__all__ = [
    "RiskMetrics",
    "PortfolioAsset",
    "FrontierPoint",
    "FrontierResult",
    "GreedyFrontierSearch",
    "EqualWeightResult",
    "SimulationResult",
    "risk_metrics",
    "efficient_frontier",
    "equal_weight_portfolio",
    "monte_carlo_simulation",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Risk metrics
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RiskMetrics:
    """
    Closed-form risk and performance measures.

    Attributes
    ----------
    var : float
        Parametric value at risk in currency units over ``days``.
    var_pct : float
        VaR as a percent of portfolio value.
    cvar : float
        Expected shortfall approximation in currency units.
    sharpe : float
        ``(return − rf) / σ``.
    treynor : float or None
        ``(return − rf) / β``; None when β is zero.
    alpha : float or None
        Jensen's alpha in percent; None without a market return.
    beta : float
    annualized_vol : float
        Input volatility echoed back, percent.
    """

    var: float
    var_pct: float
    cvar: float
    sharpe: float
    treynor: Optional[float]
    alpha: Optional[float]
    beta: float
    annualized_vol: float


def risk_metrics(
    value: float,
    expected_return: float,
    std_dev: float,
    risk_free_rate: float,
    confidence: float = 95,
    days: float = 1,
    beta: float = 1.0,
    market_return: Optional[float] = None,
) -> RiskMetrics:
    """
    Parametric risk metrics of a portfolio.

    Parameters
    ----------
    value : float
        Portfolio value.
    expected_return, std_dev, risk_free_rate : float
        Annual figures in percent. ``std_dev`` must be > 0.
    confidence : float, default 95
        Confidence level in percent, strictly between 0 and 100. Levels 90,
        95 and 99 have tabulated z-scores; any other level uses 1.645.
    days : float, default 1
        Holding period in trading days.
    beta : float, default 1.0
        Market beta.
    market_return : float, optional
        Annual market return in percent, needed for Jensen's alpha.

    Returns
    -------
    RiskMetrics
    """
    check_positive("std_dev", std_dev)
    if not 0 < confidence < 100:
        raise DomainError(f"confidence must be strictly between 0 and 100, got {confidence}")
    if days < 0:
        raise ValidationError(f"days must be non-negative, got {days}")

    z = VAR_Z_SCORES.get(confidence, DEFAULT_VAR_Z)
    daily_std = std_dev / 100 / math.sqrt(TRADING_DAYS_PER_YEAR)
    horizon_std = daily_std * math.sqrt(days)

    excess = expected_return - risk_free_rate
    alpha = None
    if market_return is not None:
        alpha = expected_return - (risk_free_rate + beta * (market_return - risk_free_rate))

    tail_density = math.exp(-0.5 * z * z) / math.sqrt(2 * math.pi)
    return RiskMetrics(
        var=value * z * horizon_std,
        var_pct=z * horizon_std * 100,
        cvar=value * horizon_std * tail_density / (1 - confidence / 100),
        sharpe=excess / std_dev,
        treynor=excess / beta if beta != 0 else None,
        alpha=alpha,
        beta=beta,
        annualized_vol=std_dev,
    )


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PortfolioAsset:
    """
    Asset in a frontier or equal-weight analysis.

    Parameters
    ----------
    name : str
        Unique asset name, also the key used in other assets' correlations.
    expected_return : float
        Annual expected return in percent.
    std_dev : float
        Annual volatility in percent (>= 0).
    correlations : mapping of str to float, optional
        Pairwise correlation to other assets by name. Missing pairs count as
        uncorrelated.

    Examples
    --------
    >>> stocks = PortfolioAsset("Stocks", 10, 18, {"Bonds": 0.2})
    >>> stocks.correlation_with("Bonds"), stocks.correlation_with("Stocks")
    (0.2, 1.0)
    """

    name: str
    expected_return: float
    std_dev: float
    correlations: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        if not self.name:
            raise ValidationError("asset name must be non-empty")
        if self.std_dev < 0:
            raise ValidationError(f"std_dev of {self.name!r} must be >= 0, got {self.std_dev}")
        for other, rho in self.correlations.items():
            if not -1 <= rho <= 1:
                raise ValidationError(
                    f"correlation {self.name!r}-{other!r} must lie in [-1, 1], got {rho}"
                )

    def correlation_with(self, other: str) -> float:
        if other == self.name:
            return 1.0
        return float(self.correlations.get(other, 0.0))


def _check_unique_names(assets: Sequence[PortfolioAsset]) -> None:
    names = [a.name for a in assets]
    if len(set(names)) != len(names):
        raise ValidationError(f"asset names must be unique, got {names}")


def _correlation_matrix(assets: Sequence[PortfolioAsset]) -> np.ndarray:
    """Correlation matrix as seen from each row asset (ρ_ij = asset_i's view of j)."""
    n = len(assets)
    rho = np.empty((n, n))
    for i, a in enumerate(assets):
        for j, b in enumerate(assets):
            rho[i, j] = 1.0 if i == j else a.correlation_with(b.name)
    return rho


def _weights_listing(assets: Sequence[PortfolioAsset], weights: np.ndarray) -> List[AssetWeightDict]:
    return [{"asset": a.name, "weight": float(w)} for a, w in zip(assets, weights)]


def _sharpe(excess: float, risk: float) -> float:
    if risk > 0:
        return excess / risk
    if excess == 0:
        return 0.0
    return math.copysign(math.inf, excess)


# ---------------------------------------------------------------------------
# Greedy frontier
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FrontierPoint:
    """One point of the frontier: target return, risk, Sharpe ratio and weights."""

    expected_return: float
    risk: float
    sharpe: float
    weights: List[AssetWeightDict]
    iterations: int = 0


@dataclass(frozen=True)
class FrontierResult:
    """
    Frontier produced by ``GreedyFrontierSearch``.

    Attributes
    ----------
    frontier : list of FrontierPoint
        One point per target return, in ascending target order.
    optimal : FrontierPoint
        First point with the maximum Sharpe ratio.
    risk_free_rate : float
    """

    frontier: List[FrontierPoint]
    optimal: FrontierPoint
    risk_free_rate: float

    def to_frame(self) -> pd.DataFrame:
        """
        Frontier as a DataFrame indexed by target return.

        Columns are ``risk``, ``sharpe``, ``iterations`` and one weight column
        per asset.
        """
        rows = []
        for point in self.frontier:
            row: Dict[str, float] = {
                "expected_return": point.expected_return,
                "risk": point.risk,
                "sharpe": point.sharpe,
                "iterations": point.iterations,
            }
            for entry in point.weights:
                row[entry["asset"]] = entry["weight"]
            rows.append(row)
        return pd.DataFrame(rows).set_index("expected_return")

    def summary(self) -> str:
        best = self.optimal
        lines = [
            "FrontierResult(",
            f"  Points: {len(self.frontier)}",
            f"  Optimal return: {best.expected_return:.2f}%",
            f"  Optimal risk: {best.risk:.2f}%",
            f"  Optimal Sharpe: {best.sharpe:.4f}",
            f"  Risk-free rate: {self.risk_free_rate:.2f}%",
            ")",
        ]
        return "\n".join(lines)


class GreedyFrontierSearch:
    """
    Greedy iterative weight-nudging approximation of the efficient frontier.

    This is a heuristic, not the minimum-variance frontier a quadratic program would find.

    Parameters
    ----------
    min_target, max_target, step : float
        Target return grid in percent (inclusive of both ends).
    max_iterations : int
        Nudging iterations allowed per target.
    tolerance : float
        Stop once ``|portfolio return − target| < tolerance`` (points).

    Examples
    --------
    >>> assets = [PortfolioAsset("Stocks", 10, 18), PortfolioAsset("Bonds", 4, 6)]
    >>> result = GreedyFrontierSearch().run(assets)
    >>> len(result.frontier)
    31
    """

    def __init__(
        self,
        min_target: float = FRONTIER_MIN_TARGET,
        max_target: float = FRONTIER_MAX_TARGET,
        step: float = FRONTIER_STEP,
        max_iterations: int = FRONTIER_MAX_ITERATIONS,
        tolerance: float = FRONTIER_RETURN_TOLERANCE,
    ):
        if step <= 0:
            raise ValidationError(f"step must be > 0, got {step}")
        if max_target < min_target:
            raise ValidationError(
                f"max_target ({max_target}) must be >= min_target ({min_target})"
            )
        if max_iterations < 0:
            raise ValidationError(f"max_iterations must be >= 0, got {max_iterations}")
        self.min_target = min_target
        self.max_target = max_target
        self.step = step
        self.max_iterations = max_iterations
        self.tolerance = tolerance

    def __repr__(self) -> str:
        return (
            f"GreedyFrontierSearch(targets={self.min_target}..{self.max_target} "
            f"step {self.step}, max_iterations={self.max_iterations}, "
            f"tolerance={self.tolerance})"
        )

    def targets(self) -> List[float]:
        """Target return grid."""
        count = int(math.floor((self.max_target - self.min_target) / self.step + 1e-9)) + 1
        return [self.min_target + k * self.step for k in range(count)]

    def fit_weights(self, returns: np.ndarray, target: float) -> tuple[np.ndarray, int]:
        """
        Nudge equal weights toward ``target``.

        Returns
        -------
        (weights, iterations)
        """
        n = returns.size
        weights = np.full(n, 1.0 / n)
        iterations = 0
        for iterations in range(self.max_iterations):
            current = float(weights @ returns)
            if abs(current - target) < self.tolerance:
                break
            adjustment = (target - current) / n
            nudged = np.maximum(0.0, weights + adjustment / returns)
            total = nudged.sum()
            if total <= 0:
                logger.debug("All weights floored at target %.2f; keeping previous weights", target)
                break
            weights = nudged / total
        else:
            iterations = self.max_iterations
        return weights, iterations

    def run(
        self,
        assets: Sequence[PortfolioAsset],
        risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
    ) -> FrontierResult:
        """
        Trace the frontier for ``assets``.

        Raises
        ------
        ValidationError
            If no assets are given, names repeat, or an asset has a zero
            expected return (the nudge divides by it).
        """
        if not assets:
            raise ValidationError("at least one asset is required")
        _check_unique_names(assets)
        returns = np.array([a.expected_return for a in assets], dtype=float)
        if np.any(returns == 0):
            zero = [a.name for a in assets if a.expected_return == 0]
            raise ValidationError(f"assets with zero expected return cannot be nudged: {zero}")

        sigma = np.array([a.std_dev for a in assets], dtype=float)
        covariance = np.outer(sigma, sigma) * _correlation_matrix(assets)

        frontier: List[FrontierPoint] = []
        for target in self.targets():
            weights, iterations = self.fit_weights(returns, target)
            variance = float(weights @ covariance @ weights)
            risk = math.sqrt(max(0.0, variance))
            frontier.append(
                FrontierPoint(
                    expected_return=target,
                    risk=risk,
                    sharpe=_sharpe(target - risk_free_rate, risk),
                    weights=_weights_listing(assets, weights),
                    iterations=iterations,
                )
            )

        optimal = max(frontier, key=lambda p: p.sharpe)
        logger.debug("Frontier traced: %d points, optimal target %.2f", len(frontier), optimal.expected_return)
        return FrontierResult(frontier=frontier, optimal=optimal, risk_free_rate=risk_free_rate)


def efficient_frontier(
    assets: Sequence[PortfolioAsset],
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
) -> FrontierResult:
    """Run ``GreedyFrontierSearch`` with its default grid."""
    return GreedyFrontierSearch().run(assets, risk_free_rate)


# ---------------------------------------------------------------------------
# Equal weight baseline
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EqualWeightResult:
    expected_return: float
    risk: float
    sharpe_ratio: float
    weights: List[AssetWeightDict]


def equal_weight_portfolio(assets: Sequence[PortfolioAsset]) -> EqualWeightResult:
    """
    1/n portfolio, treating assets as uncorrelated.

    Risk is ``√Σ(σ_i w_i)²`` and the Sharpe ratio uses a zero risk-free rate.
    """
    if not assets:
        raise ValidationError("at least one asset is required")
    n = len(assets)
    weights = np.full(n, 1.0 / n)
    returns = np.array([a.expected_return for a in assets], dtype=float)
    sigma = np.array([a.std_dev for a in assets], dtype=float)

    expected = float(weights @ returns)
    risk = float(np.sqrt(np.sum((sigma * weights) ** 2)))
    return EqualWeightResult(
        expected_return=expected,
        risk=risk,
        sharpe_ratio=_sharpe(expected, risk),
        weights=_weights_listing(assets, weights),
    )


# ---------------------------------------------------------------------------
# Monte Carlo
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SimulationResult:
    """
    Monte Carlo terminal-value distribution.

    Attributes
    ----------
    values : np.ndarray
        Terminal values sorted ascending, shape (simulations,).
    mean, median, percentile_10, percentile_90 : float
        Order-statistic summaries (see module docstring).
    best_case, worst_case : float
        Largest and smallest terminal value.
    probability_of_loss : float
        Fraction in [0, 1] of trials ending below the initial investment.
    """

    simulations: int
    years: int
    initial_investment: float
    values: np.ndarray
    mean: float
    median: float
    percentile_10: float
    percentile_90: float
    best_case: float
    worst_case: float
    probability_of_loss: float

    def summary(self) -> str:
        lines = [
            "SimulationResult(",
            f"  Trials: {self.simulations} x {self.years} years",
            f"  Initial: {self.initial_investment:,.2f}",
            f"  Mean: {self.mean:,.2f}",
            f"  Median: {self.median:,.2f}",
            f"  P10 / P90: {self.percentile_10:,.2f} / {self.percentile_90:,.2f}",
            f"  Probability of loss: {self.probability_of_loss:.1%}",
            ")",
        ]
        return "\n".join(lines)


def box_muller(rng: np.random.Generator, size: tuple[int, ...]) -> np.ndarray:
    """Standard normals ``√(−2 ln u1)·cos(2π u2)`` with ``u1`` in (0, 1]."""
    u1 = 1.0 - rng.random(size)
    u2 = rng.random(size)
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


def monte_carlo_simulation(
    initial: float,
    annual_return_pct: float,
    std_dev_pct: float,
    years: int,
    simulations: int = DEFAULT_SIMULATIONS,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> SimulationResult:
    """
    Simulate terminal portfolio values with one normal annual return per year.

    Parameters
    ----------
    initial : float
        Starting value (> 0).
    annual_return_pct, std_dev_pct : float
        Mean and volatility of the annual return, percent.
    years : int
        Horizon (>= 0).
    simulations : int, default 1000
        Number of trials (>= 1).
    seed : int, optional
        Seed for a fresh ``numpy.random.default_rng``. Ignored when ``rng``
        is given.
    rng : numpy.random.Generator, optional
        Caller-owned generator.

    Returns
    -------
    SimulationResult

    Notes
    -----
    With ``std_dev_pct = 0`` every trial equals ``initial·(1 + μ)^years`` and
    ``probability_of_loss`` is exactly 0 or 1.
    """
    check_positive("initial", initial)
    if std_dev_pct < 0:
        raise ValidationError(f"std_dev_pct must be >= 0, got {std_dev_pct}")
    if simulations < 1:
        raise ValidationError(f"simulations must be >= 1, got {simulations}")
    if years < 0:
        raise ValidationError(f"years must be >= 0, got {years}")

    simulations = int(simulations)
    years = int(years)
    generator = rng if rng is not None else np.random.default_rng(seed)
    logger.debug("Monte Carlo: %d trials x %d years", simulations, years)

    z = box_muller(generator, (simulations, years))
    growth = 1.0 + annual_return_pct / 100 + (std_dev_pct / 100) * z
    values = np.sort(initial * np.prod(growth, axis=1))

    return SimulationResult(
        simulations=simulations,
        years=years,
        initial_investment=initial,
        values=values,
        mean=float(values.mean()),
        median=float(values[simulations // 2]),
        percentile_10=float(values[int(math.floor(simulations * 0.10))]),
        percentile_90=float(values[int(math.floor(simulations * 0.90))]),
        best_case=float(values[-1]),
        worst_case=float(values[0]),
        probability_of_loss=float(np.count_nonzero(values < initial) / simulations),
    )
