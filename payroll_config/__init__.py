"""
payroll_config -- single public entrypoint for payroll rate tables.

Responsibility:
    Provides ``get_rate_tables()``, the way runtime code obtains a
    validated, immutable ``RateTables`` snapshot.  YAML parsing lives in
    ``loader``; structural checks live in ``validator``.

Architecture position:
    Configuration -- sits above ``payroll_kernel`` and below
    ``payroll_engines``.  Engines receive a ``RateTables`` object; they
    never read files themselves.

Invariants enforced:
    - Every returned snapshot has passed ``validate_rate_tables``.
    - Snapshots are frozen dataclasses; the same file always yields the
      same cached object, so concurrent callers share one immutable view.

Failure modes:
    - ``RateTableNotFoundError`` -- unknown version, no set effective on
      the requested date, or missing directory.
    - ``RateTableValidationError`` -- structural validation failed.
    - ``yaml.YAMLError`` / ``KeyError`` -- malformed source file.
"""

from __future__ import annotations

import functools
from datetime import date
from pathlib import Path

from payroll_config.loader import load_rate_tables
from payroll_config.schema import (
    DEFAULT_TAX_BRACKETS,
    IncomeTaxTable,
    InsuranceRates,
    PremiumRates,
    RateTables,
    TaxBracket,
)
from payroll_config.validator import (
    RateTableValidationResult,
    assert_valid,
    validate_rate_tables,
)
from payroll_kernel.exceptions import RateTableNotFoundError
from payroll_kernel.logging_config import get_logger

logger = get_logger("config")

DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"
DEFAULT_VERSION = "jp_2024"

__all__ = [
    "DEFAULT_CONFIG_DIR",
    "DEFAULT_TAX_BRACKETS",
    "DEFAULT_VERSION",
    "IncomeTaxTable",
    "InsuranceRates",
    "PremiumRates",
    "RateTableValidationResult",
    "RateTables",
    "TaxBracket",
    "clear_rate_table_cache",
    "get_rate_tables",
    "validate_rate_tables",
]


def get_rate_tables(
    version: str | None = None,
    as_of_date: date | None = None,
    config_dir: Path | None = None,
) -> RateTables:
    """
    Return a validated rate-table snapshot.

    Selection:
        - ``version`` given: the file ``<version>.yaml`` in ``config_dir``.
        - ``as_of_date`` given: the set with the latest ``effective_from``
          on or before that date.
        - neither: ``DEFAULT_VERSION``.

    Args:
        version: Rate-table version identifier, e.g. ``"jp_2024"``.
        as_of_date: Pay-period date used to pick the effective set.
        config_dir: Directory of ``*.yaml`` sets.  Defaults to
            ``payroll_config/sets/``.

    Raises:
        RateTableNotFoundError: no file or no set effective on the date.
        RateTableValidationError: the selected set is invalid.
    """
    sets_dir = config_dir or DEFAULT_CONFIG_DIR

    if version is not None:
        tables = _load_validated(sets_dir / f"{version}.yaml")
    elif as_of_date is not None:
        tables = _select_effective(sets_dir, as_of_date)
    else:
        tables = _load_validated(sets_dir / f"{DEFAULT_VERSION}.yaml")

    logger.info(
        "PAYROLL_CONFIG_TRACE",
        extra={
            "trace_type": "PAYROLL_CONFIG_TRACE",
            "rate_table_version": tables.version,
            "effective_from": tables.effective_from.isoformat(),
            "checksum": tables.checksum,
        },
    )
    return tables


def clear_rate_table_cache() -> None:
    """Drop cached snapshots so edited files are re-read. Used by tests."""
    _load_validated.cache_clear()


@functools.lru_cache(maxsize=32)
def _load_validated(path: Path) -> RateTables:
    tables = load_rate_tables(path)
    assert_valid(tables)
    return tables


def _select_effective(sets_dir: Path, as_of_date: date) -> RateTables:
    if not sets_dir.is_dir():
        raise RateTableNotFoundError(str(sets_dir))

    candidates = [
        _load_validated(path) for path in sorted(sets_dir.glob("*.yaml"))
    ]
    effective = [t for t in candidates if t.effective_from <= as_of_date]
    if not effective:
        raise RateTableNotFoundError(
            f"{sets_dir} (no rate table effective on {as_of_date.isoformat()})"
        )
    return max(effective, key=lambda t: t.effective_from)
