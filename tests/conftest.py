"""
Pytest configuration and fixtures for the fincalc test suite.

This module provides reusable fixtures for testing all fincalc calculators.
Fixtures follow the principle of "arrange-act-assert" with clear separation.
"""

import json
from typing import List

import numpy as np
import pytest

from fincalc.options import OptionContract
from fincalc.portfolio import PortfolioAsset


# ---------------------------------------------------------------------------
# Random Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def seed() -> int:
    """Standard random seed for reproducibility."""
    return 42


@pytest.fixture
def rng(seed) -> np.random.Generator:
    """Caller-owned generator seeded with the standard seed."""
    return np.random.default_rng(seed)


# ---------------------------------------------------------------------------
# Option Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def atm_call() -> OptionContract:
    """
    At-the-money one-year call.

    S = K = 100, r = 5%, σ = 20%
    """
    return OptionContract(
        spot=100,
        strike=100,
        time_to_maturity_years=1,
        risk_free_rate=0.05,
        volatility=0.20,
    )


# ---------------------------------------------------------------------------
# Cash Flow Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def level_cashflows() -> List[float]:
    """Three level inflows of 400 against a 1000 outlay."""
    return [400.0, 400.0, 400.0]


# ---------------------------------------------------------------------------
# Portfolio Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def stock_bond_assets() -> List[PortfolioAsset]:
    """
    Two-asset universe.

    Stocks: 10% return, 18% volatility
    Bonds: 4% return, 6% volatility, correlation 0.2
    """
    return [
        PortfolioAsset("Stocks", 10, 18, {"Bonds": 0.2}),
        PortfolioAsset("Bonds", 4, 6, {"Stocks": 0.2}),
    ]


@pytest.fixture
def three_assets() -> List[PortfolioAsset]:
    """Stocks, bonds and real estate with symmetric correlations."""
    return [
        PortfolioAsset("Stocks", 10, 18, {"Bonds": 0.2, "REIT": 0.6}),
        PortfolioAsset("Bonds", 4, 6, {"Stocks": 0.2, "REIT": 0.1}),
        PortfolioAsset("REIT", 8, 15, {"Stocks": 0.6, "Bonds": 0.1}),
    ]


@pytest.fixture
def assets_file(tmp_path):
    """JSON asset list for the frontier loaders."""
    data = [
        {"name": "Stocks", "expected_return": 10, "std_dev": 18, "correlations": {"Bonds": 0.2}},
        {"name": "Bonds", "expected_return": 4, "std_dev": 6, "correlations": {"Stocks": 0.2}},
    ]
    path = tmp_path / "assets.json"
    with open(path, "w") as f:
        json.dump(data, f)
    return path


# ---------------------------------------------------------------------------
# Environment Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def clean_fincalc_env(monkeypatch):
    """Keep developer FINCALC_* variables out of settings-dependent tests."""
    for name in (
        "FINCALC_DEBUG",
        "FINCALC_LOG_LEVEL",
        "FINCALC_CACHE_MAX_SIZE",
        "FINCALC_CACHE_TTL_SECONDS",
        "FINCALC_DEFAULT_SEED",
    ):
        monkeypatch.delenv(name, raising=False)
