"""
Canonical SHA-256 hashing for the audit chain and configuration checksums.

Two values that compare equal as JSON documents always hash equal: keys are
sorted, separators carry no whitespace, and dates render as ISO-8601.
"""

import hashlib
import json
from datetime import date
from enum import Enum
from typing import Any

GENESIS_MARKER = "GENESIS"
_CHAIN_SEPARATOR = "|"


def _json_default(value: Any) -> Any:
    # datetime is a date subclass
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonicalize_json(data: Any) -> str:
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        default=_json_default,
    )


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def hash_payload(payload: dict[str, Any]) -> str:
    """Hex SHA-256 of the canonical JSON form of ``payload``."""
    return sha256_hex(canonicalize_json(payload))


def hash_audit_event(
    entity_type: str,
    entity_id: str,
    action: str,
    payload_hash: str,
    prev_hash: str | None,
) -> str:
    """
    Chain hash of one audit event.

    Covers the entity, the action, the payload hash and the previous
    event's hash (``GENESIS`` for the first event), so rewriting any event
    breaks every hash after it.
    """
    return sha256_hex(
        _CHAIN_SEPARATOR.join(
            (entity_type, entity_id, action, payload_hash, prev_hash or GENESIS_MARKER)
        )
    )
