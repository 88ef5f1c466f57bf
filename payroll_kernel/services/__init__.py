"""Service layer for the payroll kernel."""

from payroll_kernel.services.auditor_service import (
    AuditorService,
    AuditTrace,
    AuditTraceEntry,
)
from payroll_kernel.services.container import PayrollServices
from payroll_kernel.services.employment_service import EmploymentService
from payroll_kernel.services.kyc_service import KYCService
from payroll_kernel.services.payment_service import PaymentService
from payroll_kernel.services.registry_service import IdentityRegistryService
from payroll_kernel.services.sequence_service import SequenceService
from payroll_kernel.services.value_transfer_service import (
    CUSTODY_HOLDER,
    PayoutPort,
    ValueTransferService,
)

__all__ = [
    "AuditorService",
    "AuditTrace",
    "AuditTraceEntry",
    "PayrollServices",
    "EmploymentService",
    "KYCService",
    "PaymentService",
    "IdentityRegistryService",
    "SequenceService",
    "CUSTODY_HOLDER",
    "PayoutPort",
    "ValueTransferService",
]
