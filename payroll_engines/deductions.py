"""
Deduction Engine - statutory deductions from gross salary.

Employee-side social insurance (health, employees' pension, employment,
long-term care) and monthly withholding income tax via a bracket table.
Pure functions with no I/O; rates come from ``InsuranceRates`` and
``IncomeTaxTable`` snapshots.

Each line item is rounded half-up to whole yen after multiplication.
There is no final adjustment step, so rounding drift across line items
is expected.

Usage:
    from decimal import Decimal
    from payroll_engines.deductions import DeductionCalculator

    calc = DeductionCalculator()
    calc.health_insurance(Decimal("300000"))              # 7425
    calc.long_care_insurance(Decimal("300000"), age=40)   # 1845
    calc.income_tax(Decimal("299666"), dependents=0)      # 18950
"""

from __future__ import annotations

from decimal import Decimal

from payroll_config.schema import IncomeTaxTable, InsuranceRates
from payroll_kernel.logging_config import get_logger
from payroll_kernel.values import ZERO, round_yen

logger = get_logger("engines.deductions")


class DeductionCalculator:
    """
    Calculate statutory deductions.

    Pure functions - no I/O.  Each insurance method accepts an explicit
    ``rate`` so callers can price a what-if without building a new table.
    """

    def __init__(
        self,
        insurance: InsuranceRates | None = None,
        income_tax_table: IncomeTaxTable | None = None,
    ):
        self.insurance = insurance or InsuranceRates()
        self.income_tax_table = income_tax_table or IncomeTaxTable()

    # ------------------------------------------------------------------
    # Social insurance
    # ------------------------------------------------------------------

    def health_insurance(
        self, gross_salary: Decimal, rate: Decimal | None = None
    ) -> Decimal:
        """Health insurance, employee half of the listed rate."""
        rate = rate if rate is not None else self.insurance.health
        return round_yen(gross_salary * rate / 2)

    def pension_insurance(
        self, gross_salary: Decimal, rate: Decimal | None = None
    ) -> Decimal:
        """Employees' pension, employee half of the listed rate."""
        rate = rate if rate is not None else self.insurance.pension
        return round_yen(gross_salary * rate / 2)

    def employment_insurance(
        self, gross_salary: Decimal, rate: Decimal | None = None
    ) -> Decimal:
        """Employment insurance; the listed rate is already the employee share."""
        rate = rate if rate is not None else self.insurance.employment
        return round_yen(gross_salary * rate)

    def long_care_insurance(
        self,
        gross_salary: Decimal,
        age: int,
        rate: Decimal | None = None,
    ) -> Decimal:
        """Long-term-care insurance, charged from age 40, employee half."""
        if age < self.insurance.long_care_min_age:
            return ZERO
        rate = rate if rate is not None else self.insurance.long_care
        return round_yen(gross_salary * rate / 2)

    # ------------------------------------------------------------------
    # Income tax
    # ------------------------------------------------------------------

    def income_tax(self, taxable_income: Decimal, dependents: int = 0) -> Decimal:
        """
        Monthly withholding income tax (simplified bracket model).

        ``dependents x 38000`` is subtracted from taxable income, floored
        at zero, and the first ``[min, max)`` bracket holding the result
        gives ``adjusted x rate - deduction``.

        Returns ``Decimal("0")`` when no bracket matches.  A validated
        table always has an open top bracket starting at 0, so this only
        happens with a table that skipped validation.
        """
        table = self.income_tax_table
        dependent_deduction = table.dependent_deduction * dependents
        adjusted_income = max(taxable_income - dependent_deduction, ZERO)

        bracket = table.find_bracket(adjusted_income)
        if bracket is None:
            logger.warning("income_tax_bracket_not_found", extra={
                "adjusted_income": str(adjusted_income),
                "bracket_count": len(table.brackets),
            })
            return ZERO

        tax = round_yen(adjusted_income * bracket.rate - bracket.deduction)
        logger.debug("income_tax_calculated", extra={
            "taxable_income": str(taxable_income),
            "dependents": dependents,
            "adjusted_income": str(adjusted_income),
            "bracket_min": str(bracket.min_income),
            "bracket_rate": str(bracket.rate),
            "income_tax": str(tax),
        })
        return tax
