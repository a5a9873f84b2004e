"""
Unit tests for portfolio.py module.

Tests risk metrics, the greedy frontier search, the equal-weight baseline
and the Monte Carlo simulation.
"""

import math

import numpy as np
import pandas as pd
import pytest

from fincalc.exceptions import DomainError, ValidationError
from fincalc.portfolio import (
    GreedyFrontierSearch,
    PortfolioAsset,
    efficient_frontier,
    equal_weight_portfolio,
    monte_carlo_simulation,
    risk_metrics,
)


# ============================================================================
# RISK METRICS
# ============================================================================

class TestRiskMetrics:
    """Test parametric VaR and performance ratios."""

    def test_ratios(self):
        result = risk_metrics(1e6, 10, 20, 2)

        assert result.sharpe == pytest.approx(0.4)
        assert result.treynor == pytest.approx(8.0)
        assert result.alpha is None
        assert result.annualized_vol == 20

    def test_var(self):
        result = risk_metrics(1e6, 10, 20, 2)
        expected = 1e6 * 1.645 * 0.20 / math.sqrt(252)

        assert result.var == pytest.approx(expected)
        assert result.var_pct == pytest.approx(expected / 1e6 * 100)
        assert result.cvar > result.var

    def test_var_scales_with_root_horizon(self):
        one_day = risk_metrics(1e6, 10, 20, 2, days=1)
        ten_day = risk_metrics(1e6, 10, 20, 2, days=10)
        assert ten_day.var == pytest.approx(one_day.var * math.sqrt(10))

    def test_confidence_table(self):
        v95 = risk_metrics(1e6, 10, 20, 2, confidence=95)
        v99 = risk_metrics(1e6, 10, 20, 2, confidence=99)
        v97 = risk_metrics(1e6, 10, 20, 2, confidence=97)

        assert v99.var == pytest.approx(v95.var * 2.326 / 1.645)
        assert v97.var == pytest.approx(v95.var)

    def test_jensens_alpha(self):
        result = risk_metrics(1e6, 10, 20, 2, beta=1.2, market_return=8)
        assert result.alpha == pytest.approx(0.8)

    def test_zero_beta_has_no_treynor(self):
        assert risk_metrics(1e6, 10, 20, 2, beta=0).treynor is None

    def test_zero_volatility_raises(self):
        with pytest.raises(DomainError):
            risk_metrics(1e6, 10, 0, 2)

    @pytest.mark.parametrize("confidence", [0, 100, 120])
    def test_confidence_out_of_range_raises(self, confidence):
        with pytest.raises(DomainError, match="confidence"):
            risk_metrics(1e6, 10, 20, 2, confidence=confidence)


# ============================================================================
# ASSETS
# ============================================================================

class TestPortfolioAsset:
    """Test asset validation."""

    def test_self_correlation(self):
        asset = PortfolioAsset("Stocks", 10, 18, {"Bonds": 0.2})

        assert asset.correlation_with("Stocks") == 1.0
        assert asset.correlation_with("Bonds") == 0.2
        assert asset.correlation_with("Gold") == 0.0

    def test_correlation_out_of_range_raises(self):
        with pytest.raises(ValidationError, match="correlation"):
            PortfolioAsset("Stocks", 10, 18, {"Bonds": 1.5})

    def test_negative_std_dev_raises(self):
        with pytest.raises(ValidationError):
            PortfolioAsset("Stocks", 10, -1)

    def test_empty_name_raises(self):
        with pytest.raises(ValidationError):
            PortfolioAsset("", 10, 18)


# ============================================================================
# FRONTIER
# ============================================================================

class TestGreedyFrontierSearch:
    """Test the weight-nudging frontier heuristic."""

    def test_default_grid(self):
        targets = GreedyFrontierSearch().targets()

        assert len(targets) == 31
        assert targets[0] == 5.0
        assert targets[-1] == pytest.approx(20.0)

    def test_custom_grid(self):
        assert GreedyFrontierSearch(5, 6, 0.5).targets() == [5.0, 5.5, 6.0]

    def test_single_point_grid(self):
        assert GreedyFrontierSearch(8, 8).targets() == [8]

    def test_already_on_target_takes_no_steps(self):
        weights, iterations = GreedyFrontierSearch().fit_weights(np.array([10.0, 4.0]), 7.0)

        assert iterations == 0
        np.testing.assert_allclose(weights, [0.5, 0.5])

    def test_weights_move_toward_target(self):
        weights, _ = GreedyFrontierSearch().fit_weights(np.array([10.0, 4.0]), 9.0)
        assert weights[0] > 0.5
        assert weights.sum() == pytest.approx(1.0)

    def test_frontier_points(self, stock_bond_assets):
        result = GreedyFrontierSearch().run(stock_bond_assets)

        assert len(result.frontier) == 31
        assert [p.expected_return for p in result.frontier][:2] == [5.0, 5.5]
        for point in result.frontier:
            weights = [w["weight"] for w in point.weights]
            assert sum(weights) == pytest.approx(1.0)
            assert all(w >= 0 for w in weights)

    def test_optimal_is_max_sharpe(self, stock_bond_assets):
        result = GreedyFrontierSearch().run(stock_bond_assets)
        assert result.optimal.sharpe == max(p.sharpe for p in result.frontier)

    def test_equal_weight_risk_uses_correlation(self, stock_bond_assets):
        result = GreedyFrontierSearch(7, 7).run(stock_bond_assets, risk_free_rate=2)
        point = result.frontier[0]
        expected = math.sqrt(0.25 * 18 ** 2 + 0.25 * 6 ** 2 + 2 * 0.25 * 18 * 6 * 0.2)

        assert point.risk == pytest.approx(expected)
        assert point.sharpe == pytest.approx(5 / expected)

    def test_three_assets(self, three_assets):
        result = efficient_frontier(three_assets)
        assert len(result.frontier) == 31
        assert {w["asset"] for w in result.optimal.weights} == {"Stocks", "Bonds", "REIT"}

    def test_to_frame(self, stock_bond_assets):
        frame = efficient_frontier(stock_bond_assets).to_frame()

        assert isinstance(frame, pd.DataFrame)
        assert frame.index.name == "expected_return"
        assert len(frame) == 31
        assert {"risk", "sharpe", "iterations", "Stocks", "Bonds"} <= set(frame.columns)

    def test_summary(self, stock_bond_assets):
        text = efficient_frontier(stock_bond_assets).summary()
        assert "Points: 31" in text
        assert "Optimal Sharpe" in text

    def test_no_assets_raise(self):
        with pytest.raises(ValidationError, match="at least one asset"):
            efficient_frontier([])

    def test_duplicate_names_raise(self):
        assets = [PortfolioAsset("A", 10, 18), PortfolioAsset("A", 4, 6)]
        with pytest.raises(ValidationError, match="unique"):
            efficient_frontier(assets)

    def test_zero_return_asset_raises(self):
        assets = [PortfolioAsset("Cash", 0, 0), PortfolioAsset("Stocks", 10, 18)]
        with pytest.raises(ValidationError, match="zero expected return"):
            efficient_frontier(assets)

    @pytest.mark.parametrize("kwargs", [
        {"step": 0},
        {"min_target": 10, "max_target": 5},
        {"max_iterations": -1},
    ])
    def test_bad_grid_raises(self, kwargs):
        with pytest.raises(ValidationError):
            GreedyFrontierSearch(**kwargs)


class TestEqualWeight:
    """Test the 1/n baseline."""

    def test_two_assets(self, stock_bond_assets):
        result = equal_weight_portfolio(stock_bond_assets)

        assert result.expected_return == pytest.approx(7.0)
        assert result.risk == pytest.approx(math.sqrt(90))
        assert result.sharpe_ratio == pytest.approx(7 / math.sqrt(90))
        assert [w["weight"] for w in result.weights] == [0.5, 0.5]

    def test_riskless_asset_sharpe_is_infinite(self):
        result = equal_weight_portfolio([PortfolioAsset("Cash", 3, 0)])
        assert result.sharpe_ratio == math.inf

    def test_no_assets_raise(self):
        with pytest.raises(ValidationError):
            equal_weight_portfolio([])


# ============================================================================
# MONTE CARLO
# ============================================================================

class TestMonteCarlo:
    """Test the terminal-value simulation."""

    def test_zero_volatility_is_deterministic(self):
        result = monte_carlo_simulation(1000, 7, 0, 10, simulations=50, seed=1)

        assert result.mean == pytest.approx(1000 * 1.07 ** 10)
        assert result.best_case == pytest.approx(result.worst_case)
        assert result.probability_of_loss == 0.0

    def test_zero_volatility_loss(self):
        result = monte_carlo_simulation(1000, -5, 0, 3, simulations=20, seed=1)
        assert result.probability_of_loss == 1.0

    def test_zero_years_keeps_initial(self):
        result = monte_carlo_simulation(1000, 7, 15, 0, simulations=10, seed=1)
        assert np.all(result.values == 1000)
        assert result.probability_of_loss == 0.0

    def test_seed_reproducible(self):
        a = monte_carlo_simulation(10_000, 7, 15, 30, simulations=200, seed=42)
        b = monte_carlo_simulation(10_000, 7, 15, 30, simulations=200, seed=42)
        np.testing.assert_array_equal(a.values, b.values)

    def test_caller_generator_used(self, rng):
        expected = monte_carlo_simulation(
            10_000, 7, 15, 30, simulations=100, rng=np.random.default_rng(42)
        )
        result = monte_carlo_simulation(10_000, 7, 15, 30, simulations=100, seed=999, rng=rng)
        np.testing.assert_array_equal(result.values, expected.values)

    def test_order_statistics(self):
        result = monte_carlo_simulation(10_000, 7, 15, 30, simulations=101, seed=3)

        assert np.all(np.diff(result.values) >= 0)
        assert result.median == result.values[50]
        assert result.percentile_10 == result.values[10]
        assert result.percentile_90 == result.values[90]
        assert result.worst_case <= result.percentile_10 <= result.median <= result.percentile_90

    def test_probability_of_loss_is_fraction(self):
        result = monte_carlo_simulation(10_000, 2, 30, 5, simulations=500, seed=7)
        assert 0 < result.probability_of_loss < 1

    def test_mean_close_to_expected_growth(self):
        result = monte_carlo_simulation(1000, 7, 10, 10, simulations=20_000, seed=42)
        assert result.mean == pytest.approx(1000 * 1.07 ** 10, rel=0.02)

    def test_summary(self):
        text = monte_carlo_simulation(1000, 7, 0, 1, simulations=4, seed=1).summary()
        assert "Probability of loss: 0.0%" in text

    @pytest.mark.parametrize("kwargs, exc", [
        ({"initial": 0}, DomainError),
        ({"std_dev_pct": -1}, ValidationError),
        ({"simulations": 0}, ValidationError),
        ({"years": -1}, ValidationError),
    ])
    def test_invalid_inputs_raise(self, kwargs, exc):
        params = dict(initial=1000, annual_return_pct=7, std_dev_pct=15, years=10, simulations=10)
        params.update(kwargs)
        with pytest.raises(exc):
            monte_carlo_simulation(**params)
