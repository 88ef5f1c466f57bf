"""
Typed Exception Hierarchy for the Payroll Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the ledger branch on the cause of a rejected operation: a
transport layer maps ``UnauthorizedError`` to a 403, ``InsufficientFundsError``
to a prompt for more value, ``InvalidKYCTransitionError`` to a stale-view
refresh.  Matching on message text is fragile, so:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        ledger.process_payment(caller, employee, value=salary)
    except KYCNotVerifiedError as e:
        notify(e.employee, f"KYC status is {e.kyc_status}")
    except InsufficientFundsError as e:
        api_response(code=e.code, required=e.required, provided=e.provided)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from PayrollKernelError:

    PayrollKernelError (base)
    |
    +-- RegistryError
    |   +-- AlreadyRegisteredError
    |   +-- EmployerNotFoundError
    |
    +-- AuthorizationError
    |   +-- UnauthorizedError
    |
    +-- EmployeeError
    |   +-- EmployeeNotFoundError
    |   +-- EmployeeInactiveError
    |
    +-- KYCError
    |   +-- InvalidKYCTransitionError
    |   +-- KYCNotVerifiedError
    |
    +-- ValidationError
    |   +-- InvalidArgumentError
    |       +-- InvalidTaxRateError
    |
    +-- PaymentError
    |   +-- InsufficientFundsError
    |   +-- TransferFailedError
    |
    +-- AuditError
    |   +-- AuditChainBrokenError
    |
    +-- ImmutabilityError
        +-- ImmutabilityViolationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Registry        | ALREADY_REGISTERED          | Address already holds a role
                | EMPLOYER_NOT_FOUND          | No employer record for address
----------------|-----------------------------|-----------------------------------------
Authorization   | UNAUTHORIZED                | Wrong role, or not the owning employer
----------------|-----------------------------|-----------------------------------------
Employee        | EMPLOYEE_NOT_FOUND          | No employee record for address
                | EMPLOYEE_INACTIVE           | Employee has been deactivated
----------------|-----------------------------|-----------------------------------------
KYC             | INVALID_KYC_TRANSITION      | Transition attempted from wrong state
                | KYC_NOT_VERIFIED            | Payment to a non-verified employee
----------------|-----------------------------|-----------------------------------------
Validation      | INVALID_ARGUMENT            | Malformed address, amount or hash
                | INVALID_TAX_RATE            | Tax rate outside 0..100
----------------|-----------------------------|-----------------------------------------
Payment         | INSUFFICIENT_FUNDS          | Attached value below salary
                | TRANSFER_FAILED             | Net transfer to employee failed
----------------|-----------------------------|-----------------------------------------
Audit           | AUDIT_CHAIN_BROKEN          | Hash chain validation failed
----------------|-----------------------------|-----------------------------------------
Immutability    | IMMUTABILITY_VIOLATION      | Modifying a payment record or audit event

===============================================================================
DESIGN DECISIONS
===============================================================================

1. WHY INHERIT FROM Exception (not ValueError, etc.)?
   Domain exceptions should be catchable as a group.  Inheriting from
   built-in types mixes domain errors with programming errors.

2. WHY code CLASS ATTRIBUTE (not instance)?
   Codes are static per exception type, so ``UnauthorizedError.code`` is
   available without instantiation for API docs and static analysis.

3. WHY SEPARATE ERROR CATEGORIES?
   Middleware handles families differently:
   - AuthorizationError -> log security warning
   - ValidationError    -> user-facing "fix your input"
   - PaymentError       -> surface to the paying employer

===============================================================================
"""


class PayrollKernelError(Exception):
    """
    Base exception for all payroll kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "PAYROLL_KERNEL_ERROR"


# Registry exceptions


class RegistryError(PayrollKernelError):
    """Base exception for identity registry errors."""

    code: str = "REGISTRY_ERROR"


class AlreadyRegisteredError(RegistryError):
    """Address already holds a role and cannot be registered again."""

    code: str = "ALREADY_REGISTERED"

    def __init__(self, address: str, role: str):
        self.address = address
        self.role = role
        super().__init__(f"Address {address} is already registered as {role}")


class EmployerNotFoundError(RegistryError):
    """No employer record exists for the address."""

    code: str = "EMPLOYER_NOT_FOUND"

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Employer not found: {address}")


# Authorization exceptions


class AuthorizationError(PayrollKernelError):
    """Base exception for authorization errors."""

    code: str = "AUTHORIZATION_ERROR"


class UnauthorizedError(AuthorizationError):
    """
    Caller is not allowed to perform the operation.

    Raised for a wrong role, an unverified employer, or an employer that
    does not own the target employee.
    """

    code: str = "UNAUTHORIZED"

    def __init__(self, caller: str, operation: str, reason: str):
        self.caller = caller
        self.operation = operation
        self.reason = reason
        super().__init__(f"{caller} is not authorized to {operation}: {reason}")


# Employee exceptions


class EmployeeError(PayrollKernelError):
    """Base exception for employee lookup errors."""

    code: str = "EMPLOYEE_ERROR"


class EmployeeNotFoundError(EmployeeError):
    """No employee record exists for the address."""

    code: str = "EMPLOYEE_NOT_FOUND"

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Employee not found: {address}")


class EmployeeInactiveError(EmployeeError):
    """Employee has been deactivated and can no longer be paid or modified."""

    code: str = "EMPLOYEE_INACTIVE"

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Employee {address} is inactive")


# KYC exceptions


class KYCError(PayrollKernelError):
    """Base exception for KYC workflow errors."""

    code: str = "KYC_ERROR"


class InvalidKYCTransitionError(KYCError):
    """KYC transition attempted from a state that does not allow it."""

    code: str = "INVALID_KYC_TRANSITION"

    def __init__(self, employee: str, from_status: str, to_status: str):
        self.employee = employee
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid KYC transition for {employee}: {from_status} -> {to_status}"
        )


class KYCNotVerifiedError(KYCError):
    """Payment attempted for an employee whose KYC is not verified."""

    code: str = "KYC_NOT_VERIFIED"

    def __init__(self, employee: str, kyc_status: str):
        self.employee = employee
        self.kyc_status = kyc_status
        super().__init__(
            f"KYC not verified for {employee} (status: {kyc_status})"
        )


# Validation exceptions


class ValidationError(PayrollKernelError):
    """Base exception for argument validation errors."""

    code: str = "VALIDATION_ERROR"


class InvalidArgumentError(ValidationError):
    """An argument is malformed or outside its allowed range."""

    code: str = "INVALID_ARGUMENT"

    def __init__(self, argument: str, value: object, reason: str):
        self.argument = argument
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {argument} {value!r}: {reason}")


class InvalidTaxRateError(InvalidArgumentError):
    """Tax rate is outside the 0..100 percent range."""

    code: str = "INVALID_TAX_RATE"

    def __init__(self, rate: object):
        self.rate = rate
        super().__init__("tax_rate", rate, "must be an integer between 0 and 100")


# Payment exceptions


class PaymentError(PayrollKernelError):
    """Base exception for payment processing errors."""

    code: str = "PAYMENT_ERROR"


class InsufficientFundsError(PaymentError):
    """Attached value does not cover the employee's salary."""

    code: str = "INSUFFICIENT_FUNDS"

    def __init__(self, employee: str, required: int, provided: int):
        self.employee = employee
        self.required = required
        self.provided = provided
        super().__init__(
            f"Insufficient funds to pay {employee}: "
            f"required {required}, provided {provided}"
        )


class TransferFailedError(PaymentError):
    """The net value transfer to the employee failed."""

    code: str = "TRANSFER_FAILED"

    def __init__(self, recipient: str, amount: int, reason: str):
        self.recipient = recipient
        self.amount = amount
        self.reason = reason
        super().__init__(f"Transfer of {amount} to {recipient} failed: {reason}")


# Audit exceptions


class AuditError(PayrollKernelError):
    """Base exception for audit-related errors."""

    code: str = "AUDIT_ERROR"


class AuditChainBrokenError(AuditError):
    """Audit hash chain validation failed - possible tampering."""

    code: str = "AUDIT_CHAIN_BROKEN"

    def __init__(self, audit_event_seq: int, expected_hash: str, actual_hash: str):
        self.audit_event_seq = audit_event_seq
        self.expected_hash = expected_hash
        self.actual_hash = actual_hash
        super().__init__(
            f"Audit chain broken at seq {audit_event_seq}: "
            f"expected {expected_hash}, got {actual_hash}"
        )


# Immutability exceptions


class ImmutabilityError(PayrollKernelError):
    """Base exception for immutability errors."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """Attempted to modify or delete an append-only record."""

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Cannot modify immutable {entity_type} {entity_id}: {reason}"
        )
