"""
Tests for tax withholding math.

Covers:
- Floor rounding of tax
- Rate boundaries 0 and 100
- Rejection of out-of-range rates and negative salaries
"""

import pytest

from payroll_kernel.domain.tax import (
    MAX_TAX_RATE,
    Withholding,
    compute_withholding,
    is_valid_tax_rate,
)


class TestComputeWithholding:
    """Tests for compute_withholding."""

    def test_twenty_percent_of_hundred(self):
        result = compute_withholding(100, 20)
        assert result == Withholding(salary=100, tax_rate=20, tax=20, net=80)

    def test_tax_rounds_down(self):
        """33% of 10 is 3.3 -> tax 3, net 7."""
        result = compute_withholding(10, 33)
        assert result.tax == 3
        assert result.net == 7

    def test_small_salary_rounds_tax_to_zero(self):
        result = compute_withholding(1, 99)
        assert result.tax == 0
        assert result.net == 1

    def test_zero_rate_pays_full_salary(self):
        result = compute_withholding(1234, 0)
        assert result.tax == 0
        assert result.net == 1234

    def test_full_rate_withholds_everything(self):
        result = compute_withholding(1234, MAX_TAX_RATE)
        assert result.tax == 1234
        assert result.net == 0

    def test_zero_salary(self):
        result = compute_withholding(0, 50)
        assert result.tax == 0
        assert result.net == 0

    def test_large_salary_exact(self):
        salary = 10**18 + 7
        result = compute_withholding(salary, 15)
        assert result.tax == salary * 15 // 100
        assert result.tax + result.net == salary

    def test_negative_salary_rejected(self):
        with pytest.raises(ValueError):
            compute_withholding(-1, 10)

    @pytest.mark.parametrize("rate", [-1, 101, 1000])
    def test_out_of_range_rate_rejected(self, rate):
        with pytest.raises(ValueError):
            compute_withholding(100, rate)


class TestIsValidTaxRate:
    """Tests for is_valid_tax_rate."""

    @pytest.mark.parametrize("rate", [0, 1, 50, 99, 100])
    def test_valid(self, rate):
        assert is_valid_tax_rate(rate) is True

    @pytest.mark.parametrize("rate", [-1, 101, 12.5, "20", None, True, False])
    def test_invalid(self, rate):
        assert is_valid_tax_rate(rate) is False
