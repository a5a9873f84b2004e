"""
Configuration management module for fincalc.

Purpose
-------
Pydantic models for validated calculator inputs (JSON files, CLI options)
and application settings read from the environment. Each input model maps
onto a domain call through ``to_domain()`` or is consumed directly by the
CLI.

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Serializable: Easy conversion to/from JSON for input files
- Environment-aware: ``FINCALC_*`` variables and .env files

Example
-------
>>> from fincalc.config import BondConfig, MonteCarloConfig
>>> bond = BondConfig(face_value=1000, coupon_rate=5, years=10, market_yield=5)
>>> bond.price().premium
False
>>>
>>> mc = MonteCarloConfig(initial=10_000, annual_return=7, std_dev=15, years=30, seed=42)
>>> mc.model_dump()["simulations"]
1000
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_CACHE_SIZE,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_RISK_FREE_RATE,
    DEFAULT_SEED,
    DEFAULT_SIMULATIONS,
    FRONTIER_MAX_ITERATIONS,
    FRONTIER_MAX_TARGET,
    FRONTIER_MIN_TARGET,
    FRONTIER_RETURN_TOLERANCE,
    FRONTIER_STEP,
    IRR_INITIAL_GUESS,
)
from .exceptions import ConfigurationError

__all__ = [
    "BondConfig",
    "OptionConfig",
    "CashFlowConfig",
    "MonteCarloConfig",
    "AssetConfig",
    "FrontierConfig",
    "CacheConfig",
    "AppSettings",
    "load_settings",
]


# ---------------------------------------------------------------------------
# Fixed income
# ---------------------------------------------------------------------------

class BondConfig(BaseModel):
    """
    Inputs for ``price_bond``.

    Attributes
    ----------
    face_value : float
        Redemption amount.
    coupon_rate : float
        Annual coupon, percent.
    years : float
        Years to maturity.
    market_yield : float
        Annual yield to maturity, percent.
    payments_per_year : int
        Coupon frequency (1, 2, 4 or 12 in practice).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    face_value: float = Field(
        gt=0,
        description="Face (redemption) value"
    )
    coupon_rate: float = Field(
        ge=0,
        le=100,
        description="Annual coupon rate in percent"
    )
    years: float = Field(
        gt=0,
        le=100,
        description="Years to maturity"
    )
    market_yield: float = Field(
        gt=-100,
        le=100,
        description="Annual yield to maturity in percent"
    )
    payments_per_year: int = Field(
        default=2,
        ge=1,
        le=12,
        description="Coupon payments per year"
    )

    def price(self):
        from .bonds import price_bond

        return price_bond(
            self.face_value,
            self.coupon_rate,
            self.years,
            self.market_yield,
            self.payments_per_year,
        )


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

class OptionConfig(BaseModel):
    """
    Inputs for a Black-Scholes valuation.

    Rates and volatility are decimals (0.05 for 5%), matching
    ``OptionContract``.

    Examples
    --------
    >>> config = OptionConfig(spot=100, strike=100, time_to_maturity_years=1,
    ...                       risk_free_rate=0.05, volatility=0.2)
    >>> round(config.to_domain().spot, 1)
    100.0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    spot: float = Field(gt=0, description="Underlying price")
    strike: float = Field(gt=0, description="Strike price")
    time_to_maturity_years: float = Field(gt=0, description="Years to expiry")
    risk_free_rate: float = Field(
        default=0.05,
        ge=-0.5,
        le=1.0,
        description="Continuously compounded risk-free rate (decimal)"
    )
    volatility: float = Field(
        gt=0,
        le=5.0,
        description="Annualised volatility (decimal)"
    )
    option_type: Literal["call", "put"] = Field(
        default="call",
        description="Option type"
    )
    cdf: Literal["zelen_severo", "exact"] = Field(
        default="zelen_severo",
        description="Normal CDF used in the pricing formula"
    )

    def to_domain(self):
        from .options import OptionContract

        return OptionContract(
            spot=self.spot,
            strike=self.strike,
            time_to_maturity_years=self.time_to_maturity_years,
            risk_free_rate=self.risk_free_rate,
            volatility=self.volatility,
            option_type=self.option_type,
        )


# ---------------------------------------------------------------------------
# Cash flows
# ---------------------------------------------------------------------------

class CashFlowConfig(BaseModel):
    """Initial outlay, periodic cash flows and discount rate for NPV/IRR."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    initial_investment: float = Field(
        description="Outlay at t=0 (positive number)"
    )
    cash_flows: List[float] = Field(
        min_length=1,
        description="Cash flows for periods 1..n"
    )
    discount_rate: float = Field(
        default=10.0,
        gt=-100,
        description="Discount rate in percent"
    )
    irr_guess: float = Field(
        default=IRR_INITIAL_GUESS,
        gt=-1,
        description="Initial IRR iterate (decimal)"
    )

    def evaluate(self):
        from .cashflow import calculate_npv_irr

        return calculate_npv_irr(
            self.initial_investment,
            self.cash_flows,
            self.discount_rate,
            irr_guess=self.irr_guess,
        )


# ---------------------------------------------------------------------------
# Monte Carlo
# ---------------------------------------------------------------------------

class MonteCarloConfig(BaseModel):
    """
    Configuration for a terminal-value Monte Carlo run.

    Attributes
    ----------
    initial : float
        Starting portfolio value.
    annual_return, std_dev : float
        Annual mean and volatility, percent.
    years : int
        Horizon.
    simulations : int
        Number of trials (1-1,000,000).
    seed : int, optional
        Random seed for reproducibility. If None, uses fresh entropy.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    initial: float = Field(gt=0, description="Initial investment")
    annual_return: float = Field(
        ge=-100,
        le=100,
        description="Expected annual return in percent"
    )
    std_dev: float = Field(
        ge=0,
        le=200,
        description="Annual return volatility in percent"
    )
    years: int = Field(ge=0, le=100, description="Simulation horizon in years")
    simulations: int = Field(
        default=DEFAULT_SIMULATIONS,
        ge=1,
        le=1_000_000,
        description="Number of Monte Carlo trials"
    )
    seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducibility"
    )

    def run(self):
        from .portfolio import monte_carlo_simulation

        return monte_carlo_simulation(
            self.initial,
            self.annual_return,
            self.std_dev,
            self.years,
            simulations=self.simulations,
            seed=self.seed,
        )


# ---------------------------------------------------------------------------
# Portfolio assets and frontier
# ---------------------------------------------------------------------------

class AssetConfig(BaseModel):
    """
    Configuration for one asset in a frontier analysis.

    Examples
    --------
    >>> asset = AssetConfig(name="Stocks", expected_return=10, std_dev=18,
    ...                     correlations={"Bonds": 0.2})
    >>> asset.to_domain().correlation_with("Bonds")
    0.2
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(
        min_length=1,
        max_length=50,
        description="Asset name/identifier"
    )
    expected_return: float = Field(
        ge=-100,
        le=100,
        description="Expected annual return in percent"
    )
    std_dev: float = Field(
        ge=0,
        le=200,
        description="Annual volatility in percent"
    )
    correlations: Dict[str, float] = Field(
        default_factory=dict,
        description="Correlation to other assets keyed by name"
    )

    @field_validator("correlations")
    @classmethod
    def validate_correlations(cls, v):
        """Ensure every correlation lies in [-1, 1]."""
        for other, rho in v.items():
            if not -1 <= rho <= 1:
                raise ValueError(f"Correlation with {other!r} must be in [-1, 1], got {rho}")
        return v

    def to_domain(self):
        from .portfolio import PortfolioAsset

        return PortfolioAsset(
            name=self.name,
            expected_return=self.expected_return,
            std_dev=self.std_dev,
            correlations=dict(self.correlations),
        )


class FrontierConfig(BaseModel):
    """Target grid and stopping rule of the greedy frontier search."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_target: float = Field(
        default=FRONTIER_MIN_TARGET,
        description="First target return (percent)"
    )
    max_target: float = Field(
        default=FRONTIER_MAX_TARGET,
        description="Last target return (percent)"
    )
    step: float = Field(
        default=FRONTIER_STEP,
        gt=0,
        description="Target grid step (percent)"
    )
    max_iterations: int = Field(
        default=FRONTIER_MAX_ITERATIONS,
        ge=0,
        le=10_000,
        description="Nudging iterations per target"
    )
    tolerance: float = Field(
        default=FRONTIER_RETURN_TOLERANCE,
        gt=0,
        description="Stop within this distance of the target (points)"
    )
    risk_free_rate: float = Field(
        default=DEFAULT_RISK_FREE_RATE,
        description="Risk-free rate for Sharpe ratios (percent)"
    )

    @model_validator(mode="after")
    def validate_grid(self):
        """Ensure min_target <= max_target."""
        if self.min_target > self.max_target:
            raise ValueError(
                f"min_target ({self.min_target}) must be <= max_target ({self.max_target})"
            )
        return self

    def to_domain(self):
        from .portfolio import GreedyFrontierSearch

        return GreedyFrontierSearch(
            min_target=self.min_target,
            max_target=self.max_target,
            step=self.step,
            max_iterations=self.max_iterations,
            tolerance=self.tolerance,
        )


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

class CacheConfig(BaseModel):
    """Size and lifetime of a ``CalculationCache``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_size: int = Field(
        default=DEFAULT_CACHE_SIZE,
        ge=1,
        le=1_000_000,
        description="Maximum cached entries"
    )
    ttl_seconds: float = Field(
        default=DEFAULT_CACHE_TTL_SECONDS,
        gt=0,
        description="Entry lifetime in seconds"
    )

    def to_domain(self):
        from .cache import CalculationCache

        return CalculationCache(max_size=self.max_size, ttl_seconds=self.ttl_seconds)


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    are prefixed with FINCALC_ (e.g., FINCALC_LOG_LEVEL=DEBUG).

    Attributes
    ----------
    debug : bool
        Enable debug mode; forces DEBUG logging in the CLI.
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR"
    cache_max_size : int
        Default ``CalculationCache`` capacity.
    cache_ttl_seconds : float
        Default ``CalculationCache`` entry lifetime.
    default_seed : int
        Seed used by the CLI when none is given.

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.log_level
    'WARNING'

    # With environment:
    # FINCALC_DEBUG=true
    >>> AppSettings().debug
    True
    """

    model_config = SettingsConfigDict(
        env_prefix="FINCALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
    cache_max_size: int = Field(
        default=DEFAULT_CACHE_SIZE,
        ge=1,
        le=1_000_000,
        description="Default calculation cache capacity"
    )
    cache_ttl_seconds: float = Field(
        default=DEFAULT_CACHE_TTL_SECONDS,
        gt=0,
        description="Default calculation cache TTL in seconds"
    )
    default_seed: int = Field(
        default=DEFAULT_SEED,
        description="Random seed used when none is supplied"
    )

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

    def cache_config(self) -> CacheConfig:
        return CacheConfig(max_size=self.cache_max_size, ttl_seconds=self.cache_ttl_seconds)


def load_settings() -> AppSettings:
    """
    Read ``AppSettings`` from the environment.

    Raises
    ------
    ConfigurationError
        If a ``FINCALC_*`` variable holds an invalid value.
    """
    try:
        return AppSettings()
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid FINCALC_* environment settings: {e}") from e
