"""
fincalc - Financial calculation engine

Stateless calculators for personal and corporate finance: time value of
money, fixed income, options, capital budgeting, valuation, lending,
retirement, insurance, tax, audit and portfolio analytics.

Modules
-------
- timevalue    : Annuity present value, amortization, discounting
- rootfind     : Newton-Raphson solver
- bonds        : Bond price, duration, convexity
- options      : Black-Scholes price and Greeks
- cashflow     : NPV, IRR, payback, profitability index
- valuation    : DCF, DDM, WACC, CAPM
- lending      : Mortgage, affordability, DSCR, lease vs buy, rentals
- actuarial    : Life expectancy, mortality table, death probability
- annuities    : Annuity valuation, fixed and variable annuities
- pensions     : Defined benefit, 401(k), retirement projection
- insurance    : Life, disability, long-term care and business coverage
- tax          : Income, capital gains, IRA and harvesting
- audit        : Audit sampling, depreciation, financial ratios
- portfolio    : Risk metrics, greedy frontier, Monte Carlo
- cache        : Caller-owned LRU/TTL calculation cache
- config       : Pydantic input models and environment settings
- serialization: Result to JSON conversion
"""

__version__ = "0.1.0"

from .exceptions import (
    FinCalcError,
    ConfigurationError,
    ValidationError,
    DomainError,
    ConvergenceError,
)
from .timevalue import (
    RateSpec,
    present_value_of_annuity,
    amortization_payment,
    amortization_schedule,
    present_value,
)
from .rootfind import RootResult, newton_raphson
from .bonds import BondResult, price_bond
from .options import OptionContract, OptionResult, black_scholes
from .cashflow import NpvIrrResult, calculate_npv_irr, irr, npv
from .valuation import calculate_capm, calculate_dcf, calculate_ddm, calculate_wacc
from .actuarial import MortalityCurve, death_probability, life_expectancy
from .portfolio import (
    PortfolioAsset,
    GreedyFrontierSearch,
    efficient_frontier,
    equal_weight_portfolio,
    monte_carlo_simulation,
    risk_metrics,
)
from .cache import CalculationCache, cached_call
from . import (
    annuities,
    audit,
    insurance,
    lending,
    pensions,
    tax,
    utils,
)

__all__ = [
    "__version__",
    # Exceptions
    "FinCalcError",
    "ConfigurationError",
    "ValidationError",
    "DomainError",
    "ConvergenceError",
    # Time value
    "RateSpec",
    "present_value_of_annuity",
    "amortization_payment",
    "amortization_schedule",
    "present_value",
    "RootResult",
    "newton_raphson",
    # Instruments
    "BondResult",
    "price_bond",
    "OptionContract",
    "OptionResult",
    "black_scholes",
    "NpvIrrResult",
    "calculate_npv_irr",
    "irr",
    "npv",
    "calculate_capm",
    "calculate_dcf",
    "calculate_ddm",
    "calculate_wacc",
    # Actuarial
    "MortalityCurve",
    "death_probability",
    "life_expectancy",
    # Portfolio
    "PortfolioAsset",
    "GreedyFrontierSearch",
    "efficient_frontier",
    "equal_weight_portfolio",
    "monte_carlo_simulation",
    "risk_metrics",
    # Cache
    "CalculationCache",
    "cached_call",
    # Submodules
    "annuities",
    "audit",
    "insurance",
    "lending",
    "pensions",
    "tax",
    "utils",
]
