"""
Rate-table schema.

Frozen dataclasses describing the statutory rates the payroll engines
apply: social-insurance rates, overtime/night/holiday premium
multipliers, and the withholding income-tax bracket table.

A ``RateTables`` instance is the unit of configuration: it is versioned,
carries the checksum of the source it was parsed from, and is handed to
the engine as an immutable snapshot, so a calculation can never observe
a rate change half-way through.

Field defaults reproduce the 2024 set shipped in ``sets/jp_2024.yaml``
so tests and callers can build tables in code without touching YAML.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

# ---------------------------------------------------------------------------
# Social insurance
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InsuranceRates:
    """
    Social-insurance rates as listed (before the employee/employer split).

    Health, pension and long-term-care premiums are shared 50/50, so the
    employee pays half the listed rate.  The employment-insurance rate is
    already the employee's share and is applied in full.
    """

    health: Decimal = Decimal("0.0495")
    pension: Decimal = Decimal("0.0915")
    employment: Decimal = Decimal("0.003")
    long_care: Decimal = Decimal("0.0123")
    long_care_min_age: int = 40


# ---------------------------------------------------------------------------
# Premium pay
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PremiumRates:
    """Premium multipliers over the hourly rate."""

    overtime_normal: Decimal = Decimal("1.25")
    overtime_extended: Decimal = Decimal("1.50")
    # Monthly overtime hours above this are paid at overtime_extended
    extended_overtime_threshold: Decimal = Decimal("60")
    # Night work is charged as the delta (night - 1) over pay already
    # covering the hour
    night: Decimal = Decimal("1.25")
    holiday: Decimal = Decimal("1.35")
    standard_monthly_hours: Decimal = Decimal("160")


# ---------------------------------------------------------------------------
# Income tax
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TaxBracket:
    """
    One ``[min_income, max_income)`` row of the withholding table.

    ``max_income`` of ``None`` means the bracket is open-ended.
    Tax inside the bracket is ``income * rate - deduction``.
    """

    min_income: Decimal
    max_income: Decimal | None
    rate: Decimal
    deduction: Decimal = Decimal("0")

    def contains(self, income: Decimal) -> bool:
        if income < self.min_income:
            return False
        return self.max_income is None or income < self.max_income

    @property
    def is_open_ended(self) -> bool:
        return self.max_income is None


DEFAULT_TAX_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(Decimal("0"), Decimal("88000"), Decimal("0"), Decimal("0")),
    TaxBracket(Decimal("88000"), Decimal("162000"), Decimal("0.05"), Decimal("4400")),
    TaxBracket(Decimal("162000"), Decimal("270000"), Decimal("0.10"), Decimal("12500")),
    TaxBracket(Decimal("270000"), Decimal("350000"), Decimal("0.15"), Decimal("26000")),
    TaxBracket(Decimal("350000"), Decimal("450000"), Decimal("0.20"), Decimal("43500")),
    TaxBracket(Decimal("450000"), Decimal("550000"), Decimal("0.25"), Decimal("66000")),
    TaxBracket(Decimal("550000"), None, Decimal("0.30"), Decimal("93500")),
)


@dataclass(frozen=True)
class IncomeTaxTable:
    """Ascending, non-overlapping bracket table plus the dependent deduction."""

    brackets: tuple[TaxBracket, ...] = DEFAULT_TAX_BRACKETS
    dependent_deduction: Decimal = Decimal("38000")

    def find_bracket(self, income: Decimal) -> TaxBracket | None:
        """First bracket, in ascending order, whose range holds ``income``."""
        for bracket in self.brackets:
            if bracket.contains(income):
                return bracket
        return None


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RateTables:
    """
    Complete, versioned rate configuration for one effective period.

    ``checksum`` is the SHA-256 of the canonical source data when the
    tables were loaded from YAML, and empty for tables built in code.
    """

    version: str = "jp_2024"
    effective_from: date = date(2024, 4, 1)
    insurance: InsuranceRates = field(default_factory=InsuranceRates)
    premiums: PremiumRates = field(default_factory=PremiumRates)
    income_tax: IncomeTaxTable = field(default_factory=IncomeTaxTable)
    description: str = ""
    checksum: str = ""
