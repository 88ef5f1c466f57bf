"""Tests for boundary argument validation."""

import pytest

from payroll_kernel.domain.validation import (
    MAX_AMOUNT,
    require_address,
    require_amount,
    require_registrable_address,
    require_tax_rate,
    require_text,
)
from payroll_kernel.exceptions import (
    InvalidArgumentError,
    InvalidTaxRateError,
    ValidationError,
)


class TestRequireAddress:
    def test_accepts_plain_string(self):
        assert require_address("0xA") == "0xA"

    @pytest.mark.parametrize("value", ["", " 0xA", "0xA ", None, 42, b"0xA"])
    def test_rejects_malformed(self, value):
        with pytest.raises(InvalidArgumentError) as exc_info:
            require_address(value, "employee")
        assert exc_info.value.argument == "employee"


class TestRequireRegistrableAddress:
    def test_accepts_ordinary_address(self):
        assert require_registrable_address("0xB", "employee") == "0xB"

    @pytest.mark.parametrize("value", ["ledger:custody", "ledger:", "ledger:0xB"])
    def test_rejects_ledger_namespace(self, value):
        with pytest.raises(InvalidArgumentError) as exc_info:
            require_registrable_address(value, "employee")
        assert exc_info.value.argument == "employee"
        assert "reserved" in exc_info.value.reason

    def test_prefix_must_lead(self):
        assert require_registrable_address("0xledger:1") == "0xledger:1"

    def test_still_rejects_malformed(self):
        with pytest.raises(InvalidArgumentError):
            require_registrable_address(" 0xB")


class TestRequireAmount:
    @pytest.mark.parametrize("value", [0, 1, 10**18, MAX_AMOUNT])
    def test_accepts_non_negative_ints(self, value):
        assert require_amount(value) == value

    @pytest.mark.parametrize("value", [-1, 1.5, "100", None, True, MAX_AMOUNT + 1, 10**20])
    def test_rejects(self, value):
        with pytest.raises(InvalidArgumentError):
            require_amount(value, "salary")


class TestRequireTaxRate:
    def test_accepts_boundaries(self):
        assert require_tax_rate(0) == 0
        assert require_tax_rate(100) == 100

    def test_rejects_above_hundred(self):
        with pytest.raises(InvalidTaxRateError) as exc_info:
            require_tax_rate(101)
        assert exc_info.value.rate == 101
        assert exc_info.value.code == "INVALID_TAX_RATE"

    def test_tax_rate_error_is_an_invalid_argument(self):
        with pytest.raises(InvalidArgumentError):
            require_tax_rate(-5)


class TestRequireText:
    def test_accepts(self):
        assert require_text("h1", "evidence_hash") == "h1"

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_rejects(self, value):
        with pytest.raises(ValidationError):
            require_text(value, "evidence_hash")
