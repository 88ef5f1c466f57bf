"""
payroll_config -- single public entrypoint for ledger configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    directly.  Returns a frozen ``LedgerConfig``.

Architecture position:
    Configuration.  This package sits above ``payroll_kernel``; the kernel
    never imports from ``payroll_config`` at runtime.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``KeyError`` -- a required key is missing.
    - ``ValueError`` -- a value is malformed.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``payroll_config_loaded`` log entry carrying the config_id, version and
    checksum, tying each ledger run to the exact configuration it used.
"""

from __future__ import annotations

import logging
from pathlib import Path

from payroll_config.loader import load_ledger_config
from payroll_config.schema import DatabaseConfig, LedgerConfig, LoggingConfig

_logger = logging.getLogger("payroll_kernel.config")

# Default configuration file
_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | str | None = None) -> LedgerConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to a YAML configuration file.
            Defaults to payroll_config/sets/default.yaml.

    Raises:
        FileNotFoundError: If the file does not exist.
        KeyError: If a required key is missing.
        ValueError: If a value is malformed.
    """
    path = Path(config_path) if config_path is not None else _DEFAULT_CONFIG_PATH
    config = load_ledger_config(path)

    _logger.info(
        "payroll_config_loaded",
        extra={
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "config_path": str(path),
        },
    )
    return config


__all__ = [
    "get_active_config",
    "LedgerConfig",
    "DatabaseConfig",
    "LoggingConfig",
]
