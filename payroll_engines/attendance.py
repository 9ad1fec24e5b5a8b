"""
Attendance aggregation (``payroll_engines.attendance``).

Responsibility
--------------
Reduce a month's daily attendance entries to one ``AttendanceTotals``
value: the summed worked, overtime, night and holiday hours that the
payroll engine consumes.

Architecture position
---------------------
**Engines layer** -- pure fold, zero I/O.  Entries come from the
persistence layer either as ``AttendanceRecord`` objects or as plain
mappings (snake_case or camelCase keys).  A snake_case key holding
``None`` defers to its camelCase twin.

Invariants enforced
-------------------
* Aggregation never fails: an empty sequence yields all-zero totals.
* Absent, non-numeric, NaN and infinite hour values count as zero.  This
  is a documented defensive default applied through ``coerce_hours``,
  not silent data loss; each coercion of a present value is logged.
* No input is mutated; every step of the fold produces a new totals value.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from functools import reduce
from typing import Any, Union

from payroll_kernel.logging_config import get_logger
from payroll_kernel.values import ZERO, coerce_hours, parse_hours, to_decimal

logger = get_logger("engines.attendance")

HOUR_FIELDS: tuple[str, ...] = (
    "work_hours",
    "overtime_hours",
    "night_hours",
    "holiday_hours",
)

# Storage column names as delivered by the API layer
_CAMEL_CASE_KEYS: dict[str, str] = {
    "work_hours": "workHours",
    "overtime_hours": "overtimeHours",
    "night_hours": "nightHours",
    "holiday_hours": "holidayHours",
}


@dataclass(frozen=True)
class AttendanceTotals:
    """Hour totals over a date range, typically one calendar month."""

    work_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    night_hours: Decimal = ZERO
    holiday_hours: Decimal = ZERO

    def __post_init__(self) -> None:
        for name in HOUR_FIELDS:
            object.__setattr__(self, name, to_decimal(getattr(self, name)))

    def __add__(self, other: AttendanceTotals) -> AttendanceTotals:
        if not isinstance(other, AttendanceTotals):
            return NotImplemented
        return AttendanceTotals(
            work_hours=self.work_hours + other.work_hours,
            overtime_hours=self.overtime_hours + other.overtime_hours,
            night_hours=self.night_hours + other.night_hours,
            holiday_hours=self.holiday_hours + other.holiday_hours,
        )

    @classmethod
    def of(
        cls,
        work_hours: Any = 0,
        overtime_hours: Any = 0,
        night_hours: Any = 0,
        holiday_hours: Any = 0,
    ) -> AttendanceTotals:
        """Build totals from loosely typed values (ints, strings, floats)."""
        return cls(
            work_hours=coerce_hours(work_hours),
            overtime_hours=coerce_hours(overtime_hours),
            night_hours=coerce_hours(night_hours),
            holiday_hours=coerce_hours(holiday_hours),
        )

    @property
    def is_zero(self) -> bool:
        return all(getattr(self, name) == ZERO for name in HOUR_FIELDS)


@dataclass(frozen=True)
class AttendanceRecord:
    """
    One day's attendance as stored.

    Hour fields are optional because the storage columns are nullable
    (e.g. a day with a clock-in but no clock-out yet).
    """

    work_date: date | None = None
    work_hours: Decimal | None = None
    overtime_hours: Decimal | None = None
    night_hours: Decimal | None = None
    holiday_hours: Decimal | None = None


AttendanceEntry = Union[AttendanceRecord, Mapping[str, Any]]


def _raw_value(entry: AttendanceEntry, field_name: str) -> Any:
    if isinstance(entry, Mapping):
        value = entry.get(field_name)
        if value is None:
            value = entry.get(_CAMEL_CASE_KEYS[field_name])
        return value
    return getattr(entry, field_name, None)


def to_totals(entry: AttendanceEntry) -> AttendanceTotals:
    """Convert one entry to totals, coercing unusable hour values to zero."""
    values: dict[str, Decimal] = {}
    for name in HOUR_FIELDS:
        raw = _raw_value(entry, name)
        if raw is not None and parse_hours(raw) is None:
            logger.debug(
                "attendance_hours_coerced",
                extra={"field": name, "raw_value": repr(raw)},
            )
        values[name] = coerce_hours(raw)
    return AttendanceTotals(**values)


def aggregate(records: Iterable[AttendanceEntry]) -> AttendanceTotals:
    """
    Sum hour fields across all attendance entries.

    Args:
        records: Daily entries in any order.  May be empty.

    Returns:
        ``AttendanceTotals`` holding the four summed hour fields.
    """
    totals = reduce(
        lambda acc, entry: acc + to_totals(entry),
        records,
        AttendanceTotals(),
    )
    logger.debug(
        "attendance_aggregated",
        extra={name: str(getattr(totals, name)) for name in HOUR_FIELDS},
    )
    return totals
