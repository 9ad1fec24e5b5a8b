"""
Pay Component Engine - earnings line items from hours and an hourly rate.

Computes the variable-pay lines of a Japanese paycheck: overtime pay
(split at the monthly extended-overtime threshold), late-night premium
and statutory-holiday pay.  Pure functions with no I/O; multipliers come
from a ``PremiumRates`` snapshot.

Rounding: each component is rounded half-up to whole yen once, on the
component total.  The two overtime tranches are summed unrounded.

Usage:
    from decimal import Decimal
    from payroll_engines.attendance import AttendanceTotals
    from payroll_engines.pay_components import PayComponentCalculator

    calc = PayComponentCalculator()
    rate = calc.hourly_rate(Decimal("300000"))            # 1875
    totals = AttendanceTotals(overtime_hours=Decimal("10"))
    print(calc.overtime_pay(totals, rate))                 # 23438
"""

from __future__ import annotations

from decimal import Decimal

from payroll_config.schema import PremiumRates
from payroll_engines.attendance import AttendanceTotals
from payroll_kernel.logging_config import get_logger
from payroll_kernel.values import ZERO, round_yen

logger = get_logger("engines.pay_components")


class PayComponentCalculator:
    """
    Calculate earnings components.

    Pure functions - no I/O.  The extended-overtime threshold and
    multiplier are fixed by the rate table and cannot be overridden per
    call; the normal, night and holiday multipliers can, because an
    employee's salary settings may carry their own.

    Negative hours are not rejected; they flow through the formulas
    unchanged.
    """

    def __init__(self, premiums: PremiumRates | None = None):
        self.premiums = premiums or PremiumRates()

    def hourly_rate(
        self,
        base_salary: Decimal,
        standard_monthly_hours: Decimal | None = None,
    ) -> Decimal:
        """
        Derive the hourly rate from a monthly base salary.

        Args:
            base_salary: Monthly fixed salary.
            standard_monthly_hours: Divisor; defaults to the table's
                standard month (160 = 20 workdays x 8h).

        Returns:
            Unrounded hourly rate.
        """
        hours = (
            standard_monthly_hours
            if standard_monthly_hours is not None
            else self.premiums.standard_monthly_hours
        )
        return base_salary / hours

    def overtime_pay(
        self,
        totals: AttendanceTotals,
        hourly_rate: Decimal,
        normal_rate: Decimal | None = None,
    ) -> Decimal:
        """
        Overtime pay with the monthly extended-overtime split.

        Hours up to the threshold (60) are paid at ``normal_rate``; hours
        beyond it at the table's extended multiplier (1.50).
        """
        rate = normal_rate if normal_rate is not None else self.premiums.overtime_normal
        threshold = self.premiums.extended_overtime_threshold

        normal_hours = min(totals.overtime_hours, threshold)
        extended_hours = max(totals.overtime_hours - threshold, ZERO)

        normal_pay = normal_hours * hourly_rate * rate
        extended_pay = extended_hours * hourly_rate * self.premiums.overtime_extended
        pay = round_yen(normal_pay + extended_pay)

        logger.debug("overtime_pay_calculated", extra={
            "normal_hours": str(normal_hours),
            "extended_hours": str(extended_hours),
            "normal_rate": str(rate),
            "overtime_pay": str(pay),
        })
        return pay

    def night_pay(
        self,
        totals: AttendanceTotals,
        hourly_rate: Decimal,
        night_rate: Decimal | None = None,
    ) -> Decimal:
        """
        Late-night premium (22:00-05:00).

        The hour itself is already paid by base or overtime pay, so only
        the increment ``night_rate - 1`` is charged here.
        """
        rate = night_rate if night_rate is not None else self.premiums.night
        return round_yen(totals.night_hours * hourly_rate * (rate - 1))

    def holiday_pay(
        self,
        totals: AttendanceTotals,
        hourly_rate: Decimal,
        holiday_rate: Decimal | None = None,
    ) -> Decimal:
        """Statutory-holiday pay at the full holiday multiplier."""
        rate = holiday_rate if holiday_rate is not None else self.premiums.holiday
        return round_yen(totals.holiday_hours * hourly_rate * rate)
