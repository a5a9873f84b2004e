"""
Unit tests for rootfind.py module.
"""

import pytest

from fincalc.exceptions import ConvergenceError
from fincalc.rootfind import RootResult, newton_raphson


class TestNewtonRaphson:
    """Test the Newton-Raphson solver."""

    def test_finds_square_root(self):
        result = newton_raphson(lambda x: x * x - 4, lambda x: 2 * x, 1.0)

        assert result.converged
        assert result.root == pytest.approx(2.0, abs=1e-4)
        assert abs(result.residual) < 1e-4

    def test_already_converged_takes_no_steps(self):
        result = newton_raphson(lambda x: x - 3, lambda x: 1.0, 3.0)

        assert result.converged
        assert result.iterations == 0

    def test_zero_derivative_stops(self):
        result = newton_raphson(lambda x: x * x + 1, lambda x: 2 * x, 0.0)

        assert not result.converged
        assert result.iterations == 0
        assert result.root == 0.0

    def test_budget_exhausted(self):
        result = newton_raphson(
            lambda x: x * x + 1,
            lambda x: 2 * x,
            1.0,
            max_iterations=10,
        )

        assert not result.converged
        assert result.iterations == 10

    def test_iterates_clamped_at_lower_bound(self):
        # f has its root at -5, below the default clamp of -0.99.
        result = newton_raphson(lambda x: x + 5, lambda x: 1.0, 0.0, max_iterations=3)

        assert not result.converged
        assert result.root == pytest.approx(-0.99)

    def test_custom_tolerance(self):
        loose = newton_raphson(lambda x: x * x - 2, lambda x: 2 * x, 1.0, tolerance=0.5)
        tight = newton_raphson(lambda x: x * x - 2, lambda x: 2 * x, 1.0, tolerance=1e-12)

        assert loose.iterations < tight.iterations


class TestRootResult:
    """Test RootResult helpers."""

    def test_raise_if_not_converged_returns_root(self):
        result = RootResult(root=0.1, converged=True, iterations=4, residual=1e-6)
        assert result.raise_if_not_converged() == 0.1

    def test_raise_if_not_converged_raises(self):
        result = RootResult(root=0.1, converged=False, iterations=100, residual=3.0)
        with pytest.raises(ConvergenceError, match="did not converge"):
            result.raise_if_not_converged()
