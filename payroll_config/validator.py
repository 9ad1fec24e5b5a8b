"""
Rate-table validator (``payroll_config.validator``).

Responsibility
--------------
Checks a ``RateTables`` snapshot for structural problems before it is
handed to an engine.  The engines stay total and never validate rates
themselves; a misconfigured table is caught here, at load time.

Invariants enforced
-------------------
* Tax brackets are in ascending order, contiguous (each ``min`` equals
  the previous ``max``), start at 0 and end with exactly one open-ended
  bracket.  A gap would make the income-tax lookup fall through to its
  zero-tax guard.
* All rates lie in ``[0, 1]``; premium multipliers are at least 1.
* Hour constants are positive; deductions are non-negative.

Failure modes
-------------
* Errors (``RateTableValidationResult.errors``) -> the tables MUST NOT
  be used; ``assert_valid`` raises ``RateTableValidationError``.
* Warnings -> usable but worth review.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from payroll_config.schema import IncomeTaxTable, InsuranceRates, PremiumRates, RateTables
from payroll_kernel.exceptions import RateTableValidationError

_ZERO = Decimal("0")
_ONE = Decimal("1")


@dataclass
class RateTableValidationResult:
    """Errors block use of the tables; warnings do not."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_rate_tables(tables: RateTables) -> RateTableValidationResult:
    """Validate every section of ``tables``."""
    result = RateTableValidationResult()

    if not tables.version:
        result.add_error("version must not be empty")

    _validate_insurance(tables.insurance, result)
    _validate_premiums(tables.premiums, result)
    _validate_income_tax(tables.income_tax, result)

    return result


def assert_valid(tables: RateTables) -> None:
    """Raise ``RateTableValidationError`` if ``tables`` has errors."""
    result = validate_rate_tables(tables)
    if not result.is_valid:
        raise RateTableValidationError(tables.version, result.errors)


def _validate_insurance(
    insurance: InsuranceRates, result: RateTableValidationResult
) -> None:
    for name in ("health", "pension", "employment", "long_care"):
        rate = getattr(insurance, name)
        if not _ZERO <= rate <= _ONE:
            result.add_error(f"insurance.{name} must be within [0, 1], got {rate}")
    if insurance.long_care_min_age < 0:
        result.add_error("insurance.long_care_min_age cannot be negative")


def _validate_premiums(
    premiums: PremiumRates, result: RateTableValidationResult
) -> None:
    for name in ("overtime_normal", "overtime_extended", "night", "holiday"):
        multiplier = getattr(premiums, name)
        if multiplier < _ONE:
            result.add_error(
                f"premiums.{name} must be at least 1, got {multiplier}"
            )
    if premiums.overtime_extended < premiums.overtime_normal:
        result.add_warning(
            "premiums.overtime_extended is lower than overtime_normal"
        )
    if premiums.extended_overtime_threshold <= _ZERO:
        result.add_error("premiums.extended_overtime_threshold must be positive")
    if premiums.standard_monthly_hours <= _ZERO:
        result.add_error("premiums.standard_monthly_hours must be positive")


def _validate_income_tax(
    table: IncomeTaxTable, result: RateTableValidationResult
) -> None:
    if table.dependent_deduction < _ZERO:
        result.add_error("income_tax.dependent_deduction cannot be negative")

    brackets = table.brackets
    if not brackets:
        result.add_error("income_tax.brackets must not be empty")
        return

    if brackets[0].min_income != _ZERO:
        result.add_error(
            f"first bracket must start at 0, starts at {brackets[0].min_income}"
        )

    for i, bracket in enumerate(brackets):
        label = f"income_tax.brackets[{i}]"
        if not _ZERO <= bracket.rate <= _ONE:
            result.add_error(f"{label}.rate must be within [0, 1], got {bracket.rate}")
        if bracket.deduction < _ZERO:
            result.add_error(f"{label}.deduction cannot be negative")
        if bracket.max_income is not None and bracket.max_income <= bracket.min_income:
            result.add_error(
                f"{label} is empty or inverted: "
                f"[{bracket.min_income}, {bracket.max_income})"
            )
        is_last = i == len(brackets) - 1
        if bracket.is_open_ended and not is_last:
            result.add_error(f"{label} is open-ended but is not the last bracket")
        if is_last and not bracket.is_open_ended:
            result.add_error(f"{label} is the last bracket and must be open-ended")

    for prev, curr in zip(brackets, brackets[1:]):
        if prev.max_income is None:
            continue
        if curr.min_income > prev.max_income:
            result.add_error(
                f"gap between brackets: [{prev.max_income}, {curr.min_income}) "
                "is not covered"
            )
        elif curr.min_income < prev.max_income:
            result.add_error(
                f"overlapping brackets at {curr.min_income} "
                f"(previous bracket ends at {prev.max_income})"
            )
