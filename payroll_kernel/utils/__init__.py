"""Utility modules for the payroll kernel."""

from payroll_kernel.utils.hashing import (
    GENESIS_MARKER,
    canonicalize_json,
    hash_audit_event,
    hash_payload,
    sha256_hex,
)

__all__ = [
    "GENESIS_MARKER",
    "canonicalize_json",
    "hash_audit_event",
    "hash_payload",
    "sha256_hex",
]
