"""
Rate-table loader (``payroll_config.loader``).

Responsibility
--------------
Loads a rate-table YAML file and parses it into the frozen
``payroll_config.schema`` dataclasses.  Callers at runtime go through
``payroll_config.get_rate_tables()``; this module is the parsing layer
underneath it and is used directly only by tests and tooling.

Invariants enforced
-------------------
* Every numeric value is converted to ``Decimal`` (floats through
  ``str``), never kept as ``float``.
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` is deterministic for identical source data.

Failure modes
-------------
* Missing YAML file  -> ``RateTableNotFoundError``.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Unknown ``schema_version``  -> ``UnsupportedRateTableVersionError``.
* Invalid date format  -> ``ValueError`` from ``date.fromisoformat``.
"""

from __future__ import annotations

import hashlib
import json
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from payroll_config.schema import (
    IncomeTaxTable,
    InsuranceRates,
    PremiumRates,
    RateTables,
    TaxBracket,
)
from payroll_kernel.exceptions import (
    RateTableNotFoundError,
    UnsupportedRateTableVersionError,
)
from payroll_kernel.logging_config import get_logger
from payroll_kernel.values import to_decimal

logger = get_logger("config.loader")

SUPPORTED_SCHEMA_VERSIONS: tuple[int, ...] = (1,)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        RateTableNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    if not path.is_file():
        raise RateTableNotFoundError(str(path))
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_date(value: Any) -> date:
    """Parse a date from YAML (string or date object)."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise ValueError(f"Cannot parse date from {value!r}")


def parse_insurance(data: dict[str, Any]) -> InsuranceRates:
    """Parse the ``insurance`` section."""
    return InsuranceRates(
        health=to_decimal(data["health"]),
        pension=to_decimal(data["pension"]),
        employment=to_decimal(data["employment"]),
        long_care=to_decimal(data["long_care"]),
        long_care_min_age=int(data.get("long_care_min_age", 40)),
    )


def parse_premiums(data: dict[str, Any]) -> PremiumRates:
    """Parse the ``premiums`` section."""
    return PremiumRates(
        overtime_normal=to_decimal(data["overtime_normal"]),
        overtime_extended=to_decimal(data["overtime_extended"]),
        extended_overtime_threshold=to_decimal(data["extended_overtime_threshold"]),
        night=to_decimal(data["night"]),
        holiday=to_decimal(data["holiday"]),
        standard_monthly_hours=to_decimal(data["standard_monthly_hours"]),
    )


def parse_bracket(data: dict[str, Any]) -> TaxBracket:
    """Parse one bracket row; a null ``max`` marks the open top bracket."""
    max_income = data.get("max")
    return TaxBracket(
        min_income=to_decimal(data["min"]),
        max_income=to_decimal(max_income) if max_income is not None else None,
        rate=to_decimal(data["rate"]),
        deduction=to_decimal(data.get("deduction", 0)),
    )


def parse_income_tax(data: dict[str, Any]) -> IncomeTaxTable:
    """Parse the ``income_tax`` section, keeping bracket order as written."""
    return IncomeTaxTable(
        brackets=tuple(parse_bracket(b) for b in data["brackets"]),
        dependent_deduction=to_decimal(data["dependent_deduction"]),
    )


def parse_rate_tables(data: dict[str, Any]) -> RateTables:
    """
    Parse a full rate-table document.

    Preconditions:
        - ``data`` contains ``version``, ``effective_from``, ``insurance``,
          ``premiums`` and ``income_tax``.
    Postconditions:
        - Returns a ``RateTables`` whose ``checksum`` identifies ``data``.
    Raises:
        UnsupportedRateTableVersionError: unknown ``schema_version``.
        KeyError: if required keys are missing.
    """
    schema_version = int(data.get("schema_version", 1))
    if schema_version not in SUPPORTED_SCHEMA_VERSIONS:
        raise UnsupportedRateTableVersionError(
            schema_version, SUPPORTED_SCHEMA_VERSIONS
        )

    tables = RateTables(
        version=str(data["version"]),
        effective_from=parse_date(data["effective_from"]),
        insurance=parse_insurance(data["insurance"]),
        premiums=parse_premiums(data["premiums"]),
        income_tax=parse_income_tax(data["income_tax"]),
        description=str(data.get("description", "")).strip(),
        checksum=compute_checksum(data),
    )
    logger.debug(
        "rate_tables_parsed",
        extra={
            "version": tables.version,
            "effective_from": tables.effective_from.isoformat(),
            "bracket_count": len(tables.income_tax.brackets),
            "checksum": tables.checksum,
        },
    )
    return tables


def load_rate_tables(path: Path) -> RateTables:
    """Load and parse one rate-table YAML file (no validation)."""
    return parse_rate_tables(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
