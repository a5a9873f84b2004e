"""
Unit tests for audit.py module.
"""

import pytest

from fincalc.audit import audit_sampling, calculate_depreciation, financial_ratios
from fincalc.exceptions import DomainError, ValidationError


# ============================================================================
# SAMPLING
# ============================================================================

class TestAuditSampling:
    """Test materiality and attribute sample size."""

    @pytest.fixture
    def plan(self):
        return audit_sampling(1e6, 2e6, 1e5, 5, population_size=1000)

    def test_materiality(self, plan):
        assert plan.materiality == pytest.approx(5000.0)
        assert plan.performance_materiality == pytest.approx(3750.0)
        assert plan.trivial_threshold == pytest.approx(250.0)

    def test_sample_size(self, plan):
        assert plan.sample_size == 69
        assert plan.sampling_rate_pct == pytest.approx(6.9)

    def test_higher_confidence_needs_more_samples(self):
        low = audit_sampling(1e6, 2e6, 1e5, 5, 1000, confidence=90)
        high = audit_sampling(1e6, 2e6, 1e5, 5, 1000, confidence=99)
        assert low.sample_size < high.sample_size

    def test_unknown_confidence_uses_95(self, plan):
        assert audit_sampling(1e6, 2e6, 1e5, 5, 1000, confidence=80).sample_size == plan.sample_size

    def test_no_expected_error_needs_no_sample(self):
        assert audit_sampling(1e6, 2e6, 1e5, 5, 1000, expected_error_pct=0).sample_size == 0

    def test_sample_never_exceeds_population(self):
        assert audit_sampling(1e6, 2e6, 1e5, 5, 10).sample_size <= 10

    def test_empty_population_raises(self):
        with pytest.raises(DomainError, match="population_size"):
            audit_sampling(1e6, 2e6, 1e5, 5, 0)

    def test_zero_margin_raises(self):
        with pytest.raises(DomainError):
            audit_sampling(1e6, 2e6, 1e5, 5, 1000, margin_pct=0)


# ============================================================================
# DEPRECIATION
# ============================================================================

class TestDepreciation:
    """Test the three depreciation methods."""

    def test_straight_line(self):
        result = calculate_depreciation(10_000, 1000, 5, "straight-line", 2)

        assert result.annual_depreciation == pytest.approx(1800.0)
        assert result.book_value == pytest.approx(6400.0)
        assert result.accumulated_depreciation == pytest.approx(3600.0)

    def test_double_declining_first_year(self):
        result = calculate_depreciation(10_000, 1000, 5, "declining-balance", 1)

        assert result.annual_depreciation == pytest.approx(4000.0)
        assert result.book_value == pytest.approx(6000.0)

    def test_double_declining_floors_at_salvage(self):
        result = calculate_depreciation(10_000, 1000, 5, "declining-balance", 5)

        assert result.book_value == pytest.approx(1000.0)
        assert result.annual_depreciation == pytest.approx(296.0)

    def test_sum_of_years(self):
        result = calculate_depreciation(10_000, 1000, 5, "sum-of-years", 2)

        assert result.annual_depreciation == pytest.approx(2400.0)
        assert result.accumulated_depreciation == pytest.approx(5400.0)
        assert result.book_value == pytest.approx(4600.0)

    def test_sum_of_years_fully_depreciates(self):
        result = calculate_depreciation(10_000, 1000, 5, "sum-of-years", 5)
        assert result.book_value == pytest.approx(1000.0)

    def test_sum_of_years_beyond_life_raises(self):
        with pytest.raises(ValidationError, match="useful_life"):
            calculate_depreciation(10_000, 1000, 5, "sum-of-years", 6)

    def test_unknown_method_raises(self):
        with pytest.raises(ValidationError, match="method"):
            calculate_depreciation(10_000, 1000, 5, "units-of-production")

    def test_year_zero_raises(self):
        with pytest.raises(ValidationError):
            calculate_depreciation(10_000, 1000, 5, year=0)


# ============================================================================
# RATIOS
# ============================================================================

class TestFinancialRatios:
    """Test balance-sheet and income ratios."""

    def test_ratios(self):
        result = financial_ratios(200, 100, 1000, 500, 500, 50)

        assert result.current_ratio == pytest.approx(2.0)
        assert result.quick_ratio == pytest.approx(1.4)
        assert result.debt_to_equity == pytest.approx(1.0)
        assert result.debt_to_assets == pytest.approx(0.5)
        assert result.roe_pct == pytest.approx(10.0)
        assert result.roa_pct == pytest.approx(5.0)
        assert result.profit_margin_pct == pytest.approx(10.0)
        assert result.working_capital == 100

    def test_zero_equity_gives_none(self):
        result = financial_ratios(200, 100, 1000, 1000, 500, 50)
        assert result.debt_to_equity is None
        assert result.roe_pct is None

    def test_zero_revenue_gives_none(self):
        assert financial_ratios(200, 100, 1000, 500, 0, 50).profit_margin_pct is None

    def test_zero_current_liabilities_raise(self):
        with pytest.raises(DomainError):
            financial_ratios(200, 0, 1000, 500, 500, 50)
