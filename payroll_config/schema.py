"""
Payroll ledger configuration schema.

Frozen dataclasses the loader parses YAML into.  A ``LedgerConfig`` is the
only configuration artifact the runtime sees.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection settings passed to ``init_engine_from_url``."""

    url: str
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class LedgerConfig:
    """
    Complete ledger configuration.

    ``administrator`` is the address allowed to approve or reject KYC
    submissions.  It is fixed for the lifetime of the ledger built from
    this configuration.
    """

    config_id: str
    version: int
    administrator: str
    database: DatabaseConfig
    logging: LoggingConfig
    checksum: str
