"""
Values -- numeric conversion helpers shared by every engine.

Responsibility:
    Central place for the three numeric conversions the payroll core
    performs at its boundary: coercing untrusted attendance hours to
    ``Decimal``, converting configuration amounts to ``Decimal``, and
    rounding a yen amount to a whole currency unit.

Architecture position:
    Kernel -- pure functions, zero I/O.  Imported by config and engines.

Invariants enforced:
    - Decimal-only arithmetic: floats are converted through ``str`` so
      ``0.1`` becomes ``Decimal("0.1")``, never its binary expansion.
    - ``round_yen`` is ROUND_HALF_UP to the nearest whole yen.

Failure modes:
    - ``coerce_hours`` never raises; unusable input becomes ``Decimal("0")``.
    - ``to_decimal`` propagates ``decimal.InvalidOperation`` / ``TypeError``
      for non-numeric configuration values.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
YEN = Decimal("1")
HOUR_PRECISION = Decimal("0.01")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a configuration amount to ``Decimal`` without validation."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError(f"Expected a numeric amount, got {value!r}")
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def parse_hours(value: Any) -> Decimal | None:
    """Parse an hour value, returning ``None`` when it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            return None
    if not result.is_finite():
        return None
    return result


def coerce_hours(value: Any) -> Decimal:
    """
    Convert one attendance hour value to ``Decimal``, defaulting to zero.

    Attendance rows come from storage with nullable columns and, in older
    data, free-text values.  Absent (``None``), boolean, non-numeric, NaN
    and infinite values all count as zero hours.  This is a documented
    defensive default of the aggregator, applied explicitly here rather
    than through truthiness.
    """
    parsed = parse_hours(value)
    if parsed is None:
        return ZERO
    return parsed


def round_yen(amount: Decimal) -> Decimal:
    """Round to the nearest whole yen, halves away from zero."""
    return amount.quantize(YEN, rounding=ROUND_HALF_UP)


def round_hours(hours: Decimal) -> Decimal:
    """Round an hour figure to two decimal places."""
    return hours.quantize(HOUR_PRECISION, rounding=ROUND_HALF_UP)
