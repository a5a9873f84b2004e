"""
Unit tests for tax.py module.
"""

import pytest

from fincalc.exceptions import ValidationError
from fincalc.tax import (
    TAX_BRACKETS,
    bracket_tax,
    calculate_complete_tax,
    calculate_income_tax,
    compare_ira,
    tax_loss_harvesting,
)


class TestBracketTax:
    """Test the progressive bracket walk."""

    def test_zero_income(self):
        assert bracket_tax(0, TAX_BRACKETS["single"]) == 0.0

    def test_first_bracket_only(self):
        assert bracket_tax(10_000, TAX_BRACKETS["single"]) == pytest.approx(1000.0)

    def test_top_bracket_reached(self):
        low = bracket_tax(1_000_000, TAX_BRACKETS["single"])
        high = bracket_tax(1_000_100, TAX_BRACKETS["single"])
        assert high - low == pytest.approx(37.0)


class TestIncomeTax:
    """Test federal income tax."""

    def test_single(self):
        result = calculate_income_tax(50_000)

        assert result.total_tax == pytest.approx(6053.0)
        assert result.effective_rate_pct == pytest.approx(12.106)
        assert result.after_tax_income == pytest.approx(43_947.0)

    def test_married(self):
        assert calculate_income_tax(50_000, "married").total_tax == pytest.approx(5536.0)

    def test_deductions_floor_taxable_at_zero(self):
        result = calculate_income_tax(10_000, deductions=20_000)
        assert result.taxable_income == 0.0
        assert result.total_tax == 0.0

    def test_zero_income_rate(self):
        assert calculate_income_tax(0).effective_rate_pct == 0.0

    def test_unknown_status_raises(self):
        with pytest.raises(ValidationError, match="filing_status"):
            calculate_income_tax(50_000, "head_of_household")

    def test_negative_income_raises(self):
        with pytest.raises(ValidationError):
            calculate_income_tax(-1)


class TestCompleteTax:
    """Test the combined tax picture."""

    def test_fica(self):
        assert calculate_complete_tax(100_000, state="TX").fica_tax == pytest.approx(7650.0)

    def test_fica_above_wage_base_and_medicare_threshold(self):
        result = calculate_complete_tax(250_000, state="TX")
        expected = 168_600 * 0.062 + 250_000 * 0.0145 + 50_000 * 0.009
        assert result.fica_tax == pytest.approx(expected)

    def test_state_rates(self):
        assert calculate_complete_tax(100_000, state="ca").state_tax == pytest.approx(9300.0)
        assert calculate_complete_tax(100_000, state="TX").state_tax == 0.0
        assert calculate_complete_tax(100_000, state="ZZ").state_tax == pytest.approx(5000.0)

    def test_investment_income(self):
        result = calculate_complete_tax(100_000, state="TX", capital_gains=10_000, dividends=1000)

        assert result.capital_gains_tax == pytest.approx(1500.0)
        assert result.dividend_tax == pytest.approx(150.0)
        assert result.total_income == 111_000

    def test_low_income_gains_untaxed(self):
        result = calculate_complete_tax(30_000, capital_gains=10_000, dividends=1000)
        assert result.capital_gains_tax == 0.0
        assert result.dividend_tax == 0.0

    def test_total_is_sum_of_parts(self):
        result = calculate_complete_tax(120_000, state="NY", capital_gains=5000, dividends=500)
        parts = (result.federal_tax + result.state_tax + result.capital_gains_tax
                 + result.dividend_tax + result.fica_tax)
        assert result.total_tax == pytest.approx(parts)
        assert result.after_tax_income == pytest.approx(result.total_income - result.total_tax)


class TestCompareIra:
    """Test the Roth versus traditional comparison."""

    def test_equal_rates_are_similar(self):
        result = compare_ira(6000, 30, 7, 22, 22)
        assert result.difference == pytest.approx(0.0, abs=1e-6)
        assert result.recommendation == "Both options are similar"

    def test_lower_retirement_rate_favours_traditional(self):
        result = compare_ira(6000, 30, 7, 32, 12)
        assert result.better_choice == "Traditional IRA"
        assert result.difference < 0

    def test_higher_retirement_rate_favours_roth(self):
        result = compare_ira(6000, 30, 7, 12, 32)
        assert result.better_choice == "Roth IRA"
        assert result.recommendation == "Roth IRA is significantly better"


class TestTaxLossHarvesting:
    """Test loss netting and carryforward."""

    def test_net_loss(self):
        result = tax_loss_harvesting(5000, 12_000, 0, 24)

        assert result.net_gains == -7000
        assert result.ordinary_income_offset == 3000
        assert result.new_carryover == 4000
        assert result.total_tax_saved == pytest.approx(1680.0)
        assert result.recommendation == "Tax loss harvesting is beneficial"

    def test_net_gain_saves_nothing(self):
        result = tax_loss_harvesting(10_000, 2000, 0, 24)

        assert result.ordinary_income_offset == 0
        assert result.new_carryover == 0
        assert result.recommendation == "Consider waiting for better opportunities"

    def test_carryover_counts_as_loss(self):
        result = tax_loss_harvesting(1000, 0, 2500, 20)
        assert result.ordinary_income_offset == 1500
