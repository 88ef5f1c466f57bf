"""
Configuration Loader (``payroll_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the frozen
``payroll_config.schema`` dataclasses.  Callers use
``payroll_config.get_active_config()``; this module is its internal
tooling.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; required fields have no silent defaults.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the parsed
  document for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Wrongly typed values  -> ``ValueError``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from payroll_config.schema import DatabaseConfig, LedgerConfig, LoggingConfig
from payroll_kernel.utils.hashing import hash_payload

_LOG_LEVELS = frozenset(logging.getLevelNamesMapping())


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{key} must be a non-empty string, got {value!r}")
    return value


def _require_int(data: dict[str, Any], key: str, default: int, minimum: int = 0) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValueError(f"{key} must be an integer >= {minimum}, got {value!r}")
    return value


def parse_database(data: dict[str, Any]) -> DatabaseConfig:
    echo = data.get("echo", False)
    if not isinstance(echo, bool):
        raise ValueError(f"echo must be a boolean, got {echo!r}")
    return DatabaseConfig(
        url=_require_str(data, "url"),
        echo=echo,
        pool_size=_require_int(data, "pool_size", 20, minimum=1),
        max_overflow=_require_int(data, "max_overflow", 10),
    )


def parse_logging(data: dict[str, Any]) -> LoggingConfig:
    level = str(data.get("level", "INFO")).upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"Unknown log level {level!r}")
    return LoggingConfig(level=level)


def compute_checksum(data: dict[str, Any]) -> str:
    """
    SHA-256 of the parsed document in the audit chain's canonical JSON form.

    Identical ``data`` always produces identical checksums.
    """
    return hash_payload(data)


def parse_ledger_config(data: dict[str, Any]) -> LedgerConfig:
    """
    Parse a full ``LedgerConfig`` from a YAML document.

    Raises:
        KeyError: ``config_id``, ``administrator``, ``database`` or
            ``database.url`` missing.
        ValueError: a value has the wrong type.
    """
    database = data["database"]
    if not isinstance(database, dict):
        raise ValueError("database must be a mapping")
    logging_section = data.get("logging") or {}
    if not isinstance(logging_section, dict):
        raise ValueError("logging must be a mapping")

    return LedgerConfig(
        config_id=_require_str(data, "config_id"),
        version=_require_int(data, "version", 1, minimum=1),
        administrator=_require_str(data, "administrator"),
        database=parse_database(database),
        logging=parse_logging(logging_section),
        checksum=compute_checksum(data),
    )


def load_ledger_config(path: Path) -> LedgerConfig:
    return parse_ledger_config(load_yaml_file(path))
