"""
Unit tests for lending.py module.
"""

import pytest

from fincalc.exceptions import DomainError, ValidationError
from fincalc.lending import (
    calculate_dscr,
    calculate_mortgage,
    lease_vs_buy,
    like_kind_exchange,
    loan_affordability,
    rental_property,
)


# ============================================================================
# MORTGAGE
# ============================================================================

class TestMortgage:
    """Test the mortgage calculator."""

    @pytest.fixture
    def mortgage(self):
        return calculate_mortgage(300_000, 60_000, 6, 30, 3600, 1200)

    def test_loan_and_payment(self, mortgage):
        assert mortgage.loan_amount == 240_000
        assert mortgage.monthly_payment == pytest.approx(1438.92, abs=0.01)

    def test_escrow_items(self, mortgage):
        assert mortgage.monthly_property_tax == pytest.approx(300.0)
        assert mortgage.monthly_insurance == pytest.approx(100.0)
        assert mortgage.total_monthly_payment == pytest.approx(
            mortgage.monthly_payment + 400.0
        )

    def test_no_pmi_at_twenty_percent_down(self, mortgage):
        assert mortgage.monthly_pmi == 0.0

    def test_pmi_below_twenty_percent_down(self):
        result = calculate_mortgage(300_000, 30_000, 6, 30, 3600, 1200, pmi_pct=0.5)
        assert result.monthly_pmi == pytest.approx(112.5)

    def test_total_cost_is_principal_and_interest(self, mortgage):
        assert mortgage.total_cost == pytest.approx(mortgage.monthly_payment * 360)
        assert mortgage.total_interest == pytest.approx(mortgage.total_cost - 240_000, abs=1e-4)

    def test_ltv_and_equity(self, mortgage):
        assert mortgage.ltv_pct == pytest.approx(80.0)
        assert mortgage.equity == 60_000

    def test_schedule_sampling(self, mortgage):
        periods = [row["period"] for row in mortgage.schedule]

        assert len(mortgage.schedule) == 31
        assert periods[0] == 1
        assert periods[1] == 12
        assert periods[-1] == 360
        assert mortgage.schedule[-1]["balance"] == pytest.approx(0.0, abs=1e-6)

    def test_schedule_carries_running_interest(self, mortgage):
        running = [row["total_interest"] for row in mortgage.schedule]
        assert all(a < b for a, b in zip(running, running[1:]))
        assert running[-1] == pytest.approx(mortgage.total_interest)

    def test_down_payment_covering_price_raises(self):
        with pytest.raises(DomainError, match="down_payment"):
            calculate_mortgage(300_000, 300_000, 6, 30, 3600, 1200)


# ============================================================================
# AFFORDABILITY / DSCR
# ============================================================================

class TestLoanAffordability:
    """Test the debt-to-income affordability check."""

    def test_headroom_and_loan(self):
        result = loan_affordability(10_000, 500, 50_000, 6, 30)

        assert result.max_monthly_payment == pytest.approx(3800.0)
        assert result.max_loan == pytest.approx(3800 / (1438.92 / 240_000), rel=1e-5)
        assert result.max_home_price == pytest.approx(result.max_loan + 50_000)
        assert result.dti_ratio_pct == pytest.approx(43.0)

    def test_no_headroom_floors_loan_at_zero(self):
        result = loan_affordability(1000, 1000, 20_000, 6, 30)

        assert result.max_monthly_payment < 0
        assert result.max_loan == 0.0
        assert result.max_home_price == 20_000


class TestDscr:
    """Test debt service coverage ratings."""

    @pytest.mark.parametrize("noi, rating", [
        (125_000, "Excellent - Low risk"),
        (115_000, "Good - Acceptable risk"),
        (100_000, "Marginal - High risk"),
        (90_000, "Poor - Cannot cover debt"),
    ])
    def test_rating_bands(self, noi, rating):
        assert calculate_dscr(noi, 100_000).rating == rating

    def test_ratio_and_excess(self):
        result = calculate_dscr(150_000, 100_000)
        assert result.dscr == pytest.approx(1.5)
        assert result.excess_cash_flow == pytest.approx(50_000)

    def test_zero_debt_service_raises(self):
        with pytest.raises(DomainError):
            calculate_dscr(100_000, 0)


# ============================================================================
# LEASE VS BUY
# ============================================================================

class TestLeaseVsBuy:
    """Test the lease-or-buy comparison."""

    @pytest.fixture
    def result(self):
        return lease_vs_buy(50_000, 3, 1200, 0, 6, 20_000, 25)

    def test_lease_side(self, result):
        assert result.lease_total_payments == pytest.approx(43_200)
        assert result.lease_tax_savings == pytest.approx(10_800)
        assert result.lease_net_cost == pytest.approx(32_400)

    def test_buy_side(self, result):
        assert result.depreciation_shield == pytest.approx(8750)
        assert result.buy_total_payments == pytest.approx(result.buy_monthly_payment * 36)
        assert result.buy_net_cost == pytest.approx(
            result.buy_total_payments - 20_000 - 8750
        )

    def test_recommendation(self, result):
        assert result.savings == pytest.approx(result.lease_net_cost - result.buy_net_cost)
        assert result.savings > 0
        assert result.recommendation == "Buy"

    def test_cheap_lease_recommended(self):
        result = lease_vs_buy(50_000, 3, 200, 0, 6, 0, 25)
        assert result.recommendation == "Lease"


# ============================================================================
# RENTAL PROPERTY
# ============================================================================

class TestRentalProperty:
    """Test rental income analysis."""

    @pytest.fixture
    def result(self):
        return rental_property(300_000, 60_000, 5_000, 2500, 5, 800, 1500)

    def test_income_measures(self, result):
        assert result.vacancy_loss == pytest.approx(1500)
        assert result.noi == pytest.approx(18_900)
        assert result.cash_flow == pytest.approx(900)
        assert result.monthly_cash_flow == pytest.approx(75)

    def test_ratios(self, result):
        assert result.cap_rate_pct == pytest.approx(6.3)
        assert result.cash_on_cash_pct == pytest.approx(900 / 65_000 * 100)
        assert result.gross_rent_multiplier == pytest.approx(10.0)
        assert result.break_even == pytest.approx(27_600)

    def test_projection(self, result):
        years = [row["year"] for row in result.projections]

        assert years == [1, 2, 3, 4, 5]
        assert result.projections[0]["property_value"] == pytest.approx(309_000)
        assert result.projections[0]["equity"] == pytest.approx(69_000)
        assert result.projections[0]["noi"] == pytest.approx(18_900 * 1.02)

    def test_nothing_invested_raises(self):
        with pytest.raises(DomainError):
            rental_property(300_000, 0, 0, 2500, 5, 800, 1500)


# ============================================================================
# LIKE-KIND EXCHANGE
# ============================================================================

class TestLikeKindExchange:
    """Test 1031 exchange deferral."""

    def test_zero_boot_defers_everything(self):
        result = like_kind_exchange(300_000, 500_000, accumulated_depreciation=50_000)

        assert result.capital_gain == pytest.approx(200_000)
        assert result.total_gain == pytest.approx(250_000)
        assert result.tax_if_sold == pytest.approx(52_500)
        assert result.boot == 0
        assert result.taxable_gain == 0
        assert result.tax_due == 0
        assert result.tax_deferred == pytest.approx(52_500)
        assert result.deferred_gain == pytest.approx(250_000)
        assert result.new_basis == pytest.approx(250_000)
        assert result.recommendation == "1031 Exchange highly beneficial"

    def test_partial_boot_taxes_recapture_first(self):
        result = like_kind_exchange(300_000, 500_000, accumulated_depreciation=50_000,
                                    boot=60_000)

        assert result.taxable_gain == pytest.approx(60_000)
        assert result.tax_due == pytest.approx(50_000 * 0.25 + 10_000 * 0.20)
        assert result.tax_deferred == pytest.approx(38_000)
        assert result.deferred_gain == pytest.approx(190_000)
        assert result.new_basis == pytest.approx(310_000)

    def test_boot_above_gain_defers_nothing(self):
        result = like_kind_exchange(300_000, 500_000, accumulated_depreciation=50_000,
                                    boot=400_000)

        assert result.taxable_gain == pytest.approx(250_000)
        assert result.tax_deferred == pytest.approx(0)
        assert result.deferred_gain == 0
        assert result.new_basis == pytest.approx(500_000)
        assert result.recommendation == "Consider direct sale"

    def test_no_appreciation(self):
        result = like_kind_exchange(500_000, 400_000)

        assert result.capital_gain == 0
        assert result.tax_if_sold == 0
        assert result.recommendation == "Consider direct sale"

    def test_custom_rates(self):
        result = like_kind_exchange(100_000, 200_000, capital_gains_rate_pct=15)
        assert result.tax_deferred == pytest.approx(15_000)

    def test_negative_boot_raises(self):
        with pytest.raises(ValidationError):
            like_kind_exchange(300_000, 500_000, boot=-1)
