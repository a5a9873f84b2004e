"""
Unit tests for timevalue.py module.

Tests annuity present value, amortization and discounting primitives.
"""

import pytest

from fincalc.exceptions import DomainError
from fincalc.timevalue import (
    RateSpec,
    amortization_payment,
    amortization_schedule,
    discount_factor,
    future_value_growth,
    present_value,
    present_value_of_annuity,
)


# ============================================================================
# RATE SPEC
# ============================================================================

class TestRateSpec:
    """Test RateSpec validation and conversion."""

    def test_periodic_rate(self):
        assert RateSpec(6.0, 12).periodic_rate == pytest.approx(0.005)

    def test_default_frequency_is_annual(self):
        assert RateSpec(5.0).periodic_rate == pytest.approx(0.05)

    def test_negative_rate_allowed(self):
        assert RateSpec(-2.0, 1).periodic_rate == pytest.approx(-0.02)

    def test_zero_frequency_raises(self):
        with pytest.raises(DomainError, match="frequency"):
            RateSpec(5.0, 0)

    def test_rate_at_minus_100_raises(self):
        with pytest.raises(DomainError):
            RateSpec(-100.0, 1)

    def test_frozen(self):
        spec = RateSpec(5.0, 12)
        with pytest.raises(Exception):
            spec.annual_pct = 6.0


# ============================================================================
# PRIMITIVES
# ============================================================================

class TestPresentValueOfAnnuity:
    """Test level annuity present value."""

    def test_zero_rate_is_exact_sum(self):
        assert present_value_of_annuity(100, 0.0, 12) == 1200

    def test_known_value(self):
        # 1000 a year for 10 years at 5%
        assert present_value_of_annuity(1000, 0.05, 10) == pytest.approx(7721.7349, abs=1e-4)

    def test_pv_below_undiscounted_total_for_positive_rate(self):
        assert present_value_of_annuity(100, 0.01, 24) < 2400


class TestAmortizationPayment:
    """Test level payment computation."""

    def test_zero_rate_is_principal_over_periods(self):
        assert amortization_payment(12_000, 0.0, 12) == pytest.approx(1000)

    def test_known_mortgage_payment(self):
        payment = amortization_payment(240_000, 0.06 / 12, 360)
        assert payment == pytest.approx(1438.92, abs=0.01)

    @pytest.mark.parametrize("rate", [0.0, 0.001, 0.005, 0.02])
    def test_round_trip_with_annuity_pv(self, rate):
        """The PV of the amortizing payment recovers the principal."""
        principal = 150_000.0
        payment = amortization_payment(principal, rate, 180)
        assert present_value_of_annuity(payment, rate, 180) == pytest.approx(principal, abs=1e-6)

    @pytest.mark.parametrize("periods", [0, -5])
    def test_non_positive_periods_raise(self, periods):
        with pytest.raises(DomainError, match="num_periods"):
            amortization_payment(1000, 0.01, periods)


class TestDiscounting:
    """Test single-sum growth and discounting."""

    def test_discount_factor(self):
        assert discount_factor(0.10, 2) == pytest.approx(1 / 1.21)

    def test_future_value_growth(self):
        assert future_value_growth(100, 0.10, 2) == pytest.approx(121.0)

    def test_present_value_inverts_growth(self):
        fv = future_value_growth(250, 0.04, 7)
        assert present_value(fv, 0.04, 7) == pytest.approx(250)

    def test_zero_periods_is_identity(self):
        assert present_value(500, 0.08, 0) == 500


# ============================================================================
# SCHEDULE
# ============================================================================

class TestAmortizationSchedule:
    """Test the full amortization schedule."""

    @pytest.fixture
    def schedule(self):
        return amortization_schedule(100_000, 6, 5)

    def test_row_count(self, schedule):
        assert len(schedule) == 60
        assert schedule[0]["period"] == 1
        assert schedule[-1]["period"] == 60

    def test_level_payment(self, schedule):
        payments = {round(row["payment"], 8) for row in schedule}
        assert len(payments) == 1

    def test_loan_fully_repaid(self, schedule):
        assert schedule[-1]["balance"] == pytest.approx(0.0, abs=1e-6)
        assert sum(row["principal"] for row in schedule) == pytest.approx(100_000, abs=1e-6)

    def test_first_interest_is_rate_times_principal(self, schedule):
        assert schedule[0]["interest"] == pytest.approx(500.0)

    def test_interest_declines(self, schedule):
        interest = [row["interest"] for row in schedule]
        assert all(a > b for a, b in zip(interest, interest[1:]))

    def test_balances_never_negative(self, schedule):
        assert all(row["balance"] >= 0 for row in schedule)

    def test_period_count_truncates(self):
        assert len(amortization_schedule(10_000, 5, 2.99)) == 35

    def test_zero_term_raises(self):
        with pytest.raises(DomainError):
            amortization_schedule(10_000, 5, 0)
