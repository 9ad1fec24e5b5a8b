"""
Payroll Engine (``payroll_engines.payroll``).

Responsibility
--------------
The single public entry point of the payroll core:
``calculate(totals, salary, tax) -> PayrollResult``.  Orchestrates the
pay-component and deduction calculators into one itemized paycheck:
gross pay, statutory deductions, net pay, and the echoed hour totals.

Architecture position
---------------------
**Engines layer** -- pure orchestration, zero I/O.  The engine is bound
to one ``RateTables`` snapshot at construction and never re-reads
configuration, so every figure of a result comes from the same rates.
Persisting, versioning and approving results belong to the caller.

Invariants enforced
-------------------
* ``gross_salary`` is exactly the sum of base salary, the three
  variable-pay components and the six allowances.
* ``total_deductions`` is exactly the sum of the seven deduction fields.
* ``net_salary == gross_salary - total_deductions``.
* Residence tax and other deductions are always zero: residence tax
  depends on prior-year income, which is not modelled.

Failure modes
-------------
* None for well-typed input: ``calculate`` is total and has no partial
  results.  Negative amounts or hours are passed through the formulas
  and logged as a warning.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any

from payroll_config import get_rate_tables
from payroll_config.schema import RateTables
from payroll_engines.attendance import HOUR_FIELDS, AttendanceTotals
from payroll_engines.deductions import DeductionCalculator
from payroll_engines.pay_components import PayComponentCalculator
from payroll_engines.tracer import traced_engine
from payroll_kernel.logging_config import get_logger
from payroll_kernel.values import ZERO, round_yen, to_decimal

logger = get_logger("engines.payroll")

ENGINE_NAME = "payroll"
ENGINE_VERSION = "1.0"

ALLOWANCE_FIELDS: tuple[str, ...] = (
    "transport_allowance",
    "family_allowance",
    "housing_allowance",
    "position_allowance",
    "skill_allowance",
    "other_allowances",
)

_RATE_OVERRIDE_FIELDS: tuple[str, ...] = (
    "hourly_rate",
    "overtime_rate",
    "night_rate",
    "holiday_rate",
)


# =============================================================================
# Inputs
# =============================================================================


@dataclass(frozen=True)
class SalaryConfig:
    """
    An employee's salary settings for one pay period.

    Amounts may be given as ``Decimal``, ``int``, ``str`` or ``float``;
    they are converted to ``Decimal`` on construction but otherwise not
    validated.  A rate override of ``None`` means "derive it": the hourly
    rate from base salary, the multipliers from the rate table.  An
    explicit zero is honored as zero.
    """

    base_salary: Decimal
    transport_allowance: Decimal = ZERO
    family_allowance: Decimal = ZERO
    housing_allowance: Decimal = ZERO
    position_allowance: Decimal = ZERO
    skill_allowance: Decimal = ZERO
    other_allowances: Decimal = ZERO
    hourly_rate: Decimal | None = None
    overtime_rate: Decimal | None = None
    night_rate: Decimal | None = None
    holiday_rate: Decimal | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_salary", to_decimal(self.base_salary))
        for name in ALLOWANCE_FIELDS:
            object.__setattr__(self, name, to_decimal(getattr(self, name)))
        for name in _RATE_OVERRIDE_FIELDS:
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, to_decimal(value))

    @property
    def total_allowances(self) -> Decimal:
        return sum((getattr(self, name) for name in ALLOWANCE_FIELDS), ZERO)


@dataclass(frozen=True)
class TaxConfig:
    """
    Tax-relevant demographics.

    ``social_insurance_exemption`` is carried for the record only; it
    does not change any deduction.
    """

    dependents: int = 0
    social_insurance_exemption: bool = False
    age: int = 0


# =============================================================================
# Output
# =============================================================================


@dataclass(frozen=True)
class PayrollResult:
    """
    Itemized paycheck for one employee and period.

    Pure calculation output with no identity of its own; the caller
    persists it if needed.
    """

    # Earnings
    base_salary: Decimal
    overtime_pay: Decimal
    night_pay: Decimal
    holiday_pay: Decimal
    transport_allowance: Decimal
    family_allowance: Decimal
    housing_allowance: Decimal
    position_allowance: Decimal
    skill_allowance: Decimal
    other_allowances: Decimal
    gross_salary: Decimal

    # Deductions
    health_insurance: Decimal
    pension_insurance: Decimal
    employment_insurance: Decimal
    long_care_insurance: Decimal
    income_tax: Decimal
    residence_tax: Decimal
    other_deductions: Decimal
    total_deductions: Decimal

    net_salary: Decimal

    # Echoed hour totals
    work_hours: Decimal
    overtime_hours: Decimal
    night_hours: Decimal
    holiday_hours: Decimal

    # Traceability
    hourly_rate: Decimal = ZERO
    taxable_income: Decimal = ZERO
    rate_table_version: str = ""

    @property
    def social_insurance_total(self) -> Decimal:
        return (
            self.health_insurance
            + self.pension_insurance
            + self.employment_insurance
            + self.long_care_insurance
        )

    def as_dict(self) -> dict[str, Any]:
        """camelCase mapping matching the caller's persisted payroll record."""
        return {_camel_case(f.name): getattr(self, f.name) for f in fields(self)}


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


# =============================================================================
# Engine
# =============================================================================


class PayrollEngine:
    """
    Compute an itemized paycheck from attendance totals and settings.

    Holds a rate-table snapshot and the two calculators built from it;
    holds no per-call state, so one engine can serve concurrent callers.
    """

    def __init__(self, rate_tables: RateTables | None = None):
        self.rate_tables = rate_tables or get_rate_tables()
        self.components = PayComponentCalculator(self.rate_tables.premiums)
        self.deductions = DeductionCalculator(
            self.rate_tables.insurance, self.rate_tables.income_tax
        )

    @traced_engine(ENGINE_NAME, ENGINE_VERSION, fingerprint_fields=("totals", "salary", "tax"))
    def calculate(
        self,
        totals: AttendanceTotals,
        salary: SalaryConfig,
        tax: TaxConfig,
    ) -> PayrollResult:
        """
        Calculate one paycheck.

        Args:
            totals: Monthly attendance totals.
            salary: Base salary, allowances and optional rate overrides.
            tax: Dependents, age and the informational exemption flag.

        Returns:
            Fully populated ``PayrollResult``.
        """
        logger.info("payroll_calculation_started", extra={
            "base_salary": str(salary.base_salary),
            "overtime_hours": str(totals.overtime_hours),
            "night_hours": str(totals.night_hours),
            "holiday_hours": str(totals.holiday_hours),
            "dependents": tax.dependents,
            "age": tax.age,
            "social_insurance_exemption": tax.social_insurance_exemption,
            "rate_table_version": self.rate_tables.version,
        })
        self._warn_on_negative_inputs(totals, salary, tax)

        # 1. Hourly rate
        hourly_rate = (
            salary.hourly_rate
            if salary.hourly_rate is not None
            else self.components.hourly_rate(salary.base_salary)
        )

        # 2. Earnings
        overtime_pay = self.components.overtime_pay(
            totals, hourly_rate, salary.overtime_rate
        )
        night_pay = self.components.night_pay(totals, hourly_rate, salary.night_rate)
        holiday_pay = self.components.holiday_pay(
            totals, hourly_rate, salary.holiday_rate
        )
        gross_salary = (
            salary.base_salary
            + overtime_pay
            + night_pay
            + holiday_pay
            + salary.total_allowances
        )

        # 3. Social insurance on gross
        health = self.deductions.health_insurance(gross_salary)
        pension = self.deductions.pension_insurance(gross_salary)
        employment = self.deductions.employment_insurance(gross_salary)
        long_care = self.deductions.long_care_insurance(gross_salary, tax.age)
        social_insurance = health + pension + employment + long_care

        # 4-5. Income tax on gross less social insurance
        taxable_income = gross_salary - social_insurance
        income_tax = self.deductions.income_tax(taxable_income, tax.dependents)

        # 6. Not modelled
        residence_tax = ZERO
        other_deductions = ZERO

        # 7. Totals
        total_deductions = social_insurance + income_tax + residence_tax + other_deductions
        net_salary = gross_salary - total_deductions

        result = PayrollResult(
            base_salary=salary.base_salary,
            overtime_pay=overtime_pay,
            night_pay=night_pay,
            holiday_pay=holiday_pay,
            transport_allowance=salary.transport_allowance,
            family_allowance=salary.family_allowance,
            housing_allowance=salary.housing_allowance,
            position_allowance=salary.position_allowance,
            skill_allowance=salary.skill_allowance,
            other_allowances=salary.other_allowances,
            gross_salary=gross_salary,
            health_insurance=health,
            pension_insurance=pension,
            employment_insurance=employment,
            long_care_insurance=long_care,
            income_tax=income_tax,
            residence_tax=residence_tax,
            other_deductions=other_deductions,
            total_deductions=total_deductions,
            net_salary=net_salary,
            work_hours=totals.work_hours,
            overtime_hours=totals.overtime_hours,
            night_hours=totals.night_hours,
            holiday_hours=totals.holiday_hours,
            hourly_rate=hourly_rate,
            taxable_income=taxable_income,
            rate_table_version=self.rate_tables.version,
        )

        logger.info("payroll_calculation_completed", extra={
            "gross_salary": str(gross_salary),
            "social_insurance": str(social_insurance),
            "income_tax": str(income_tax),
            "total_deductions": str(total_deductions),
            "net_salary": str(net_salary),
        })
        return result

    def _warn_on_negative_inputs(
        self,
        totals: AttendanceTotals,
        salary: SalaryConfig,
        tax: TaxConfig,
    ) -> None:
        negative = [name for name in HOUR_FIELDS if getattr(totals, name) < ZERO]
        negative += [
            name
            for name in ("base_salary",) + ALLOWANCE_FIELDS
            if getattr(salary, name) < ZERO
        ]
        if tax.dependents < 0:
            negative.append("dependents")
        if negative:
            logger.warning("payroll_negative_input", extra={"fields": negative})


def calculate(
    totals: AttendanceTotals,
    salary: SalaryConfig,
    tax: TaxConfig,
    rate_tables: RateTables | None = None,
) -> PayrollResult:
    """Calculate one paycheck with the given (or default) rate tables."""
    return PayrollEngine(rate_tables).calculate(totals, salary, tax)


def monthly_salary_from_annual(
    annual_salary: Decimal | int | str, months: int = 12
) -> Decimal:
    """
    Monthly salary from an annual figure, rounded to whole yen.

    ``months`` is 12 for a flat salary, or 14-16 when the annual figure
    includes bonus months.
    """
    return round_yen(to_decimal(annual_salary) / months)
