"""
Payroll Kernel

A role-gated payroll ledger with:
- Identity registry (employer / employee roles, set exactly once)
- KYC verification workflow gating payability
- Atomic payment processing with automatic tax withholding
- Append-only payment records and a hash-chained audit trail
"""

__version__ = "0.1.0"
