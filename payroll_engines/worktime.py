"""
Work-time Engine (``payroll_engines.worktime``).

Responsibility
--------------
Pure functions that derive one day's hour figures from clock times under
the Labor Standards Act conventions the payroll core assumes:

* worked hours with the statutory minimum break auto-applied
  (> 6h needs 45 min, > 8h needs 60 min),
* overtime beyond the 8-hour standard day,
* late-night hours (22:00-05:00),
* holiday hours on Sundays and national holidays,

plus the monthly overtime-cap check of a standard Article 36 agreement.

Architecture position
---------------------
**Engines layer** -- ZERO I/O, ZERO clock reads.  Clock times are passed
in; tracking who is clocked in is the caller's concern.  The output of
``build_daily_record`` feeds ``payroll_engines.attendance.aggregate``.

Invariants enforced
-------------------
* Hour results are ``Decimal`` rounded to 0.01 and never negative.
* The holiday calendar is an approximation: fixed-date holidays,
  Happy-Monday holidays and equinox days from the standard
  approximation formulas.  Substitute holidays are not modelled.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum

from payroll_engines.attendance import AttendanceRecord, AttendanceTotals
from payroll_kernel.logging_config import get_logger
from payroll_kernel.values import ZERO, round_hours

logger = get_logger("engines.worktime")

STANDARD_DAILY_HOURS = Decimal("8")

NIGHT_START_HOUR = 22
NIGHT_END_HOUR = 5

# Sunday
LEGAL_HOLIDAY_WEEKDAY = 6

_ONE_SECOND = timedelta(seconds=1)
_SIXTY = Decimal("60")

# (month, day)
FIXED_NATIONAL_HOLIDAYS: frozenset[tuple[int, int]] = frozenset({
    (1, 1),    # New Year's Day
    (2, 11),   # National Foundation Day
    (2, 23),   # Emperor's Birthday
    (4, 29),   # Showa Day
    (5, 3),    # Constitution Memorial Day
    (5, 4),    # Greenery Day
    (5, 5),    # Children's Day
    (8, 11),   # Mountain Day
    (11, 3),   # Culture Day
    (11, 23),  # Labor Thanksgiving Day
})

# month -> nth Monday
HAPPY_MONDAY_HOLIDAYS: dict[int, int] = {
    1: 2,   # Coming of Age Day
    7: 3,   # Marine Day
    9: 3,   # Respect for the Aged Day
    10: 2,  # Sports Day
}


# ---------------------------------------------------------------------------
# Daily hours
# ---------------------------------------------------------------------------


def _minutes_between(start: datetime, end: datetime) -> Decimal:
    return Decimal((end - start) // _ONE_SECOND) / _SIXTY


def calculate_work_hours(
    clock_in: datetime,
    clock_out: datetime,
    break_start: datetime | None = None,
    break_end: datetime | None = None,
) -> Decimal:
    """
    Worked hours between clock-in and clock-out, less the break.

    If the recorded break is shorter than the legal minimum for the
    length of the day, the minimum replaces it: 60 minutes when more
    than 8 hours were worked, 45 minutes when more than 6.
    """
    total_minutes = _minutes_between(clock_in, clock_out)
    break_minutes = ZERO
    if break_start is not None and break_end is not None:
        break_minutes = _minutes_between(break_start, break_end)

    hours = (total_minutes - break_minutes) / _SIXTY

    if hours > 8 and break_minutes < 60:
        hours = (total_minutes - 60) / _SIXTY
    elif hours > 6 and break_minutes < 45:
        hours = (total_minutes - 45) / _SIXTY

    return round_hours(max(hours, ZERO))


def calculate_overtime_hours(
    work_hours: Decimal, standard_daily_hours: Decimal = STANDARD_DAILY_HOURS
) -> Decimal:
    """Hours beyond the standard working day."""
    return max(work_hours - standard_daily_hours, ZERO)


def calculate_night_hours(clock_in: datetime, clock_out: datetime) -> Decimal:
    """Hours worked inside the 22:00-05:00 late-night window."""
    night_seconds = 0
    current = clock_in
    while current < clock_out:
        next_hour = current.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
        period_end = min(next_hour, clock_out)
        if current.hour >= NIGHT_START_HOUR or current.hour < NIGHT_END_HOUR:
            night_seconds += (period_end - current) // _ONE_SECOND
        current = period_end
    return round_hours(Decimal(night_seconds) / Decimal("3600"))


# ---------------------------------------------------------------------------
# Holiday calendar
# ---------------------------------------------------------------------------


def is_legal_holiday(day: date) -> bool:
    """Sunday is the statutory weekly day off."""
    return day.weekday() == LEGAL_HOLIDAY_WEEKDAY


def _is_nth_monday(day: date, nth: int) -> bool:
    return day.weekday() == 0 and (day.day - 1) // 7 == nth - 1


def vernal_equinox_day(year: int) -> int:
    """Approximate day of March on which the vernal equinox falls."""
    if 1851 <= year <= 1899:
        return math.floor(19.8277 + 0.2422 * (year - 1851) - math.floor((year - 1851) / 4))
    if 1900 <= year <= 1979:
        return math.floor(21.124 + 0.2422 * (year - 1900) - math.floor((year - 1900) / 4))
    if 1980 <= year <= 2099:
        return math.floor(20.8431 + 0.242194 * (year - 1980) - math.floor((year - 1980) / 4))
    if 2100 <= year <= 2150:
        return math.floor(21.8510 + 0.242194 * (year - 2100) - math.floor((year - 2100) / 4))
    return 20


def autumnal_equinox_day(year: int) -> int:
    """Approximate day of September on which the autumnal equinox falls."""
    if 1851 <= year <= 1899:
        return math.floor(22.7020 + 0.2422 * (year - 1851) - math.floor((year - 1851) / 4))
    if 1900 <= year <= 1979:
        return math.floor(23.2488 + 0.2422 * (year - 1900) - math.floor((year - 1900) / 4))
    if 1980 <= year <= 2099:
        return math.floor(23.2488 + 0.242194 * (year - 1980) - math.floor((year - 1980) / 4))
    if 2100 <= year <= 2150:
        return math.floor(24.2488 + 0.242194 * (year - 2100) - math.floor((year - 2100) / 4))
    return 23


def is_national_holiday(day: date) -> bool:
    """Whether ``day`` is a Japanese national holiday (approximate calendar)."""
    if (day.month, day.day) in FIXED_NATIONAL_HOLIDAYS:
        return True

    nth = HAPPY_MONDAY_HOLIDAYS.get(day.month)
    if nth is not None and _is_nth_monday(day, nth):
        return True

    if day.month == 3 and day.day == vernal_equinox_day(day.year):
        return True
    if day.month == 9 and day.day == autumnal_equinox_day(day.year):
        return True

    return False


def calculate_holiday_hours(
    clock_in: datetime,
    clock_out: datetime,
    work_date: date,
    break_start: datetime | None = None,
    break_end: datetime | None = None,
) -> Decimal:
    """All worked hours count as holiday hours on a Sunday or national holiday."""
    if is_legal_holiday(work_date) or is_national_holiday(work_date):
        return calculate_work_hours(clock_in, clock_out, break_start, break_end)
    return ZERO


def build_daily_record(
    work_date: date,
    clock_in: datetime,
    clock_out: datetime,
    break_start: datetime | None = None,
    break_end: datetime | None = None,
    standard_daily_hours: Decimal = STANDARD_DAILY_HOURS,
) -> AttendanceRecord:
    """Derive a complete ``AttendanceRecord`` for one day of clock times."""
    work_hours = calculate_work_hours(clock_in, clock_out, break_start, break_end)
    record = AttendanceRecord(
        work_date=work_date,
        work_hours=work_hours,
        overtime_hours=calculate_overtime_hours(work_hours, standard_daily_hours),
        night_hours=calculate_night_hours(clock_in, clock_out),
        holiday_hours=calculate_holiday_hours(
            clock_in, clock_out, work_date, break_start, break_end
        ),
    )
    logger.debug("daily_record_built", extra={
        "work_date": work_date.isoformat(),
        "work_hours": str(record.work_hours),
        "overtime_hours": str(record.overtime_hours),
        "night_hours": str(record.night_hours),
        "holiday_hours": str(record.holiday_hours),
    })
    return record


# ---------------------------------------------------------------------------
# Article 36 agreement limits
# ---------------------------------------------------------------------------


class ViolationSeverity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class LaborTimeViolation:
    """One breached working-time limit."""

    violation_type: str
    message: str
    severity: ViolationSeverity
    hours: Decimal


MONTHLY_OVERTIME_LIMIT = Decimal("45")
MONTHLY_OVERTIME_HARD_LIMIT = Decimal("80")
MONTHLY_OVERTIME_AND_HOLIDAY_LIMIT = Decimal("100")


def check_labor_time_violations(
    totals: AttendanceTotals,
) -> tuple[LaborTimeViolation, ...]:
    """
    Check a month's totals against the Article 36 overtime caps.

    * Overtime above 45h is a warning, above 80h an error.
    * Overtime plus holiday work must stay under 100h.
    """
    violations: list[LaborTimeViolation] = []

    if totals.overtime_hours > MONTHLY_OVERTIME_LIMIT:
        severity = (
            ViolationSeverity.ERROR
            if totals.overtime_hours > MONTHLY_OVERTIME_HARD_LIMIT
            else ViolationSeverity.WARNING
        )
        violations.append(LaborTimeViolation(
            violation_type="monthly_overtime_limit",
            message=(
                f"Monthly overtime exceeds {MONTHLY_OVERTIME_LIMIT}h "
                f"({totals.overtime_hours}h)"
            ),
            severity=severity,
            hours=totals.overtime_hours,
        ))

    combined = totals.overtime_hours + totals.holiday_hours
    if combined >= MONTHLY_OVERTIME_AND_HOLIDAY_LIMIT:
        violations.append(LaborTimeViolation(
            violation_type="monthly_total_limit",
            message=(
                f"Overtime plus holiday work reaches "
                f"{MONTHLY_OVERTIME_AND_HOLIDAY_LIMIT}h ({combined}h)"
            ),
            severity=ViolationSeverity.ERROR,
            hours=combined,
        ))

    if violations:
        logger.warning("labor_time_violations_found", extra={
            "violation_types": [v.violation_type for v in violations],
            "overtime_hours": str(totals.overtime_hours),
            "holiday_hours": str(totals.holiday_hours),
        })
    return tuple(violations)
