"""Tests for the typed exception hierarchy."""

import pytest

from payroll_kernel import exceptions as exc


class TestErrorCodes:
    @pytest.mark.parametrize(
        "cls, code",
        [
            (exc.AlreadyRegisteredError, "ALREADY_REGISTERED"),
            (exc.UnauthorizedError, "UNAUTHORIZED"),
            (exc.EmployeeNotFoundError, "EMPLOYEE_NOT_FOUND"),
            (exc.EmployerNotFoundError, "EMPLOYER_NOT_FOUND"),
            (exc.EmployeeInactiveError, "EMPLOYEE_INACTIVE"),
            (exc.InvalidKYCTransitionError, "INVALID_KYC_TRANSITION"),
            (exc.InvalidArgumentError, "INVALID_ARGUMENT"),
            (exc.InvalidTaxRateError, "INVALID_TAX_RATE"),
            (exc.KYCNotVerifiedError, "KYC_NOT_VERIFIED"),
            (exc.InsufficientFundsError, "INSUFFICIENT_FUNDS"),
            (exc.TransferFailedError, "TRANSFER_FAILED"),
            (exc.AuditChainBrokenError, "AUDIT_CHAIN_BROKEN"),
            (exc.ImmutabilityViolationError, "IMMUTABILITY_VIOLATION"),
        ],
    )
    def test_code_is_a_class_attribute(self, cls, code):
        assert cls.code == code
        assert issubclass(cls, exc.PayrollKernelError)

    def test_codes_are_unique(self):
        leaves = [
            exc.AlreadyRegisteredError,
            exc.UnauthorizedError,
            exc.EmployeeNotFoundError,
            exc.EmployerNotFoundError,
            exc.EmployeeInactiveError,
            exc.InvalidKYCTransitionError,
            exc.InvalidArgumentError,
            exc.InvalidTaxRateError,
            exc.KYCNotVerifiedError,
            exc.InsufficientFundsError,
            exc.TransferFailedError,
            exc.AuditChainBrokenError,
            exc.ImmutabilityViolationError,
        ]
        codes = [cls.code for cls in leaves]
        assert len(codes) == len(set(codes))


class TestFamilies:
    def test_families(self):
        assert issubclass(exc.AlreadyRegisteredError, exc.RegistryError)
        assert issubclass(exc.UnauthorizedError, exc.AuthorizationError)
        assert issubclass(exc.EmployeeInactiveError, exc.EmployeeError)
        assert issubclass(exc.KYCNotVerifiedError, exc.KYCError)
        assert issubclass(exc.InvalidTaxRateError, exc.ValidationError)
        assert issubclass(exc.TransferFailedError, exc.PaymentError)

    def test_structured_attributes(self):
        error = exc.InvalidKYCTransitionError("0xB", "rejected", "pending")
        assert error.employee == "0xB"
        assert error.from_status == "rejected"
        assert error.to_status == "pending"
        assert "rejected -> pending" in str(error)
