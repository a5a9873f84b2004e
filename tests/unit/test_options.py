"""
Unit tests for options.py module.

Tests Black-Scholes prices, Greeks, the normal CDF approximations and
put-call parity.
"""

import math

import pytest

from fincalc.exceptions import DomainError, ValidationError
from fincalc.options import (
    OptionContract,
    black_scholes,
    exact_normal_cdf,
    normal_cdf,
    put_call_parity_gap,
)


# ============================================================================
# NORMAL CDF
# ============================================================================

class TestNormalCdf:
    """Test both CDF implementations."""

    @pytest.mark.parametrize("x, expected", [
        (0.0, 0.5),
        (1.0, 0.841345),
        (-1.0, 0.158655),
        (1.96, 0.975002),
    ])
    def test_zelen_severo_accuracy(self, x, expected):
        assert normal_cdf(x) == pytest.approx(expected, abs=1e-5)

    @pytest.mark.parametrize("x", [-3.0, -0.5, 0.3, 2.2])
    def test_symmetry(self, x):
        assert normal_cdf(x) + normal_cdf(-x) == pytest.approx(1.0, abs=1e-7)

    @pytest.mark.parametrize("x", [-2.5, -1.0, 0.0, 0.7, 3.1])
    def test_matches_exact(self, x):
        assert normal_cdf(x) == pytest.approx(exact_normal_cdf(x), abs=2e-7)


# ============================================================================
# CONTRACT
# ============================================================================

class TestOptionContract:
    """Test OptionContract validation."""

    @pytest.mark.parametrize("field", ["spot", "strike", "time_to_maturity_years", "volatility"])
    def test_non_positive_inputs_raise(self, field):
        kwargs = dict(spot=100, strike=100, time_to_maturity_years=1,
                      risk_free_rate=0.05, volatility=0.2)
        kwargs[field] = 0
        with pytest.raises(DomainError, match=field):
            OptionContract(**kwargs)

    def test_unknown_type_raises(self):
        with pytest.raises(ValidationError):
            OptionContract(100, 100, 1, 0.05, 0.2, option_type="straddle")

    def test_negative_rate_allowed(self):
        contract = OptionContract(100, 100, 1, -0.01, 0.2)
        assert contract.risk_free_rate == -0.01

    def test_with_type(self, atm_call):
        put = atm_call.with_type("put")
        assert put.option_type == "put"
        assert put.spot == atm_call.spot
        assert atm_call.option_type == "call"


# ============================================================================
# PRICING
# ============================================================================

class TestBlackScholesPrice:
    """Test option prices."""

    def test_atm_call_reference_price(self, atm_call):
        assert black_scholes(atm_call).price == pytest.approx(10.4506, abs=1e-3)

    def test_atm_put_reference_price(self, atm_call):
        assert black_scholes(atm_call.with_type("put")).price == pytest.approx(5.5735, abs=1e-3)

    def test_exact_cdf_close_to_default(self, atm_call):
        default = black_scholes(atm_call).price
        exact = black_scholes(atm_call, cdf="exact").price
        assert default == pytest.approx(exact, abs=1e-4)

    def test_unknown_cdf_raises(self, atm_call):
        with pytest.raises(ValidationError, match="cdf"):
            black_scholes(atm_call, cdf="erf")

    def test_deep_in_the_money_call_near_intrinsic(self):
        contract = OptionContract(200, 100, 1, 0.05, 0.2)
        intrinsic = 200 - 100 * math.exp(-0.05)
        assert black_scholes(contract).price == pytest.approx(intrinsic, abs=1e-2)

    def test_d2_relationship(self, atm_call):
        result = black_scholes(atm_call)
        assert result.d1 - result.d2 == pytest.approx(0.2)


class TestPutCallParity:
    """Test C − P = S − K·e^(−rT)."""

    @pytest.mark.parametrize("cdf", ["zelen_severo", "exact"])
    @pytest.mark.parametrize("spot, strike, maturity, rate, vol", [
        (100, 100, 1, 0.05, 0.2),
        (80, 100, 0.5, 0.03, 0.35),
        (120, 90, 2, 0.01, 0.15),
        (50, 55, 0.1, 0.07, 0.6),
    ])
    def test_parity_holds(self, cdf, spot, strike, maturity, rate, vol):
        contract = OptionContract(spot, strike, maturity, rate, vol)
        assert abs(put_call_parity_gap(contract, cdf)) < 1e-4


class TestGreeks:
    """Test Greeks."""

    def test_call_delta_in_unit_interval(self, atm_call):
        delta = black_scholes(atm_call).delta
        assert 0 < delta < 1

    def test_put_delta_is_call_delta_minus_one(self, atm_call):
        call = black_scholes(atm_call)
        put = black_scholes(atm_call.with_type("put"))
        assert put.delta == pytest.approx(call.delta - 1)

    def test_gamma_and_vega_shared(self, atm_call):
        call = black_scholes(atm_call)
        put = black_scholes(atm_call.with_type("put"))
        assert put.gamma == pytest.approx(call.gamma)
        assert put.vega == pytest.approx(call.vega)
        assert call.gamma > 0
        assert call.vega > 0

    def test_vega_per_point(self, atm_call):
        """Vega approximates the price change for a one point volatility move."""
        base = black_scholes(atm_call)
        bumped = black_scholes(OptionContract(100, 100, 1, 0.05, 0.21))
        assert bumped.price - base.price == pytest.approx(base.vega, rel=1e-2)

    def test_theta_call_put_gap(self, atm_call):
        """Call theta minus put theta equals −r·K·e^(−rT) per day."""
        call = black_scholes(atm_call)
        put = black_scholes(atm_call.with_type("put"))
        expected = -0.05 * 100 * math.exp(-0.05) / 365
        assert call.theta - put.theta == pytest.approx(expected, abs=1e-6)

    def test_call_theta_negative(self, atm_call):
        assert black_scholes(atm_call).theta < 0

    def test_rho_signs(self, atm_call):
        assert black_scholes(atm_call).rho > 0
        assert black_scholes(atm_call.with_type("put")).rho < 0
