"""
Payslip text rendering.

Renders a ``PayrollResult`` as the plain-text Japanese payslip
(給与明細) used in notices and console output, and formats hour
figures as ``H:MM`` for display.
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

from payroll_engines.payroll import PayrollResult
from payroll_kernel.values import ZERO, round_yen, to_decimal

RULE = "─" * 16

EARNING_LINES: tuple[tuple[str, str], ...] = (
    ("基本給", "base_salary"),
    ("残業手当", "overtime_pay"),
    ("深夜手当", "night_pay"),
    ("休日手当", "holiday_pay"),
    ("通勤手当", "transport_allowance"),
    ("家族手当", "family_allowance"),
    ("住宅手当", "housing_allowance"),
    ("職位手当", "position_allowance"),
    ("技能手当", "skill_allowance"),
    ("その他手当", "other_allowances"),
)

DEDUCTION_LINES: tuple[tuple[str, str], ...] = (
    ("健康保険料", "health_insurance"),
    ("厚生年金保険料", "pension_insurance"),
    ("雇用保険料", "employment_insurance"),
    ("介護保険料", "long_care_insurance"),
    ("所得税", "income_tax"),
    ("住民税", "residence_tax"),
    ("その他控除", "other_deductions"),
)

HOUR_LINES: tuple[tuple[str, str], ...] = (
    ("労働時間", "work_hours"),
    ("残業時間", "overtime_hours"),
    ("深夜時間", "night_hours"),
    ("休日時間", "holiday_hours"),
)


def format_yen(amount: Decimal) -> str:
    """``Decimal("323438")`` -> ``"323,438円"``."""
    return f"{round_yen(amount):,}円"


def _format_hour_figure(hours: Decimal) -> str:
    if hours == hours.to_integral_value():
        return str(int(hours))
    return f"{hours.normalize():f}"


def format_payroll_result(result: PayrollResult) -> str:
    """
    Render the payslip as multi-line text.

    Sections: 【支給項目】 earnings and gross, 【控除項目】 deductions and
    their total, 【差引支給額】 net pay, 【労働時間】 the hour totals.
    """
    lines = ["=== 給与明細 ===", "【支給項目】"]
    lines += [f"{label}: {format_yen(getattr(result, name))}" for label, name in EARNING_LINES]
    lines += [RULE, f"総支給額: {format_yen(result.gross_salary)}", ""]

    lines.append("【控除項目】")
    lines += [f"{label}: {format_yen(getattr(result, name))}" for label, name in DEDUCTION_LINES]
    lines += [RULE, f"総控除額: {format_yen(result.total_deductions)}", ""]

    lines += ["【差引支給額】", f"手取り額: {format_yen(result.net_salary)}", ""]

    lines.append("【労働時間】")
    lines += [
        f"{label}: {_format_hour_figure(getattr(result, name))}時間"
        for label, name in HOUR_LINES
    ]
    return "\n".join(lines)


def format_hours(hours: Decimal | int | str | None) -> str:
    """
    Format decimal hours as ``H:MM``.

    ``Decimal("7.5")`` -> ``"7:30"``.  ``None`` and zero give ``"0:00"``.
    Minutes are rounded half-up; 59.5 minutes or more carries into the hour.
    Negative values keep their sign: ``Decimal("-0.5")`` -> ``"-0:30"``.
    """
    if hours is None:
        return "0:00"
    value = to_decimal(hours)
    if value == ZERO:
        return "0:00"

    sign = "-" if value < ZERO else ""
    value = abs(value)
    whole = value.to_integral_value(rounding=ROUND_FLOOR)
    minutes = ((value - whole) * 60).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if minutes == 60:
        whole += 1
        minutes = ZERO
    if whole == ZERO and minutes == ZERO:
        sign = ""
    return f"{sign}{int(whole)}:{int(minutes):02d}"
