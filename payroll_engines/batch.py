"""
Payroll batch run and statistics (``payroll_engines.batch``).

Responsibility
--------------
Run the payroll engine over many employees for one period and reduce the
results to the period summary shown on the payroll dashboard: headcount,
total gross/net/overtime pay, average gross, and a per-department
breakdown.

Architecture position
---------------------
**Engines layer** -- pure, zero I/O.  Calculations are independent of
each other; the batch shares one engine (and therefore one rate-table
snapshot) across all entries.

Failure modes
-------------
* An entry whose input cannot be computed (e.g. a malformed override
  that raises during arithmetic) is recorded as a ``CalculationError`` in
  ``BatchResult.failures``; the remaining entries still run.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from payroll_engines.attendance import AttendanceTotals
from payroll_engines.payroll import PayrollEngine, PayrollResult, SalaryConfig, TaxConfig
from payroll_kernel.exceptions import CalculationError
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_kernel.values import ZERO, round_yen

logger = get_logger("engines.batch")

UNASSIGNED_DEPARTMENT = "unassigned"


@dataclass(frozen=True)
class PayrollInput:
    """Everything needed to calculate one employee's paycheck."""

    employee_id: str
    totals: AttendanceTotals
    salary: SalaryConfig
    tax: TaxConfig
    department: str | None = None


@dataclass(frozen=True)
class EmployeePayroll:
    """A calculated paycheck tagged with who it belongs to."""

    employee_id: str
    result: PayrollResult
    department: str | None = None


@dataclass(frozen=True)
class BatchResult:
    """Outcome of a batch run: successes in input order, plus failures."""

    period: str
    payrolls: tuple[EmployeePayroll, ...] = ()
    failures: tuple[CalculationError, ...] = ()

    @property
    def is_complete(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class DepartmentStats:
    count: int = 0
    total_gross: Decimal = ZERO
    total_net: Decimal = ZERO
    total_overtime: Decimal = ZERO


@dataclass(frozen=True)
class PayrollSummary:
    """Period totals across a set of calculated payrolls."""

    total_employees: int
    total_gross_salary: Decimal
    total_net_salary: Decimal
    total_overtime_pay: Decimal
    average_gross_salary: Decimal
    department_stats: dict[str, DepartmentStats] = field(default_factory=dict)


def calculate_batch(
    entries: Iterable[PayrollInput],
    period: str,
    engine: PayrollEngine | None = None,
) -> BatchResult:
    """
    Calculate every entry independently with one shared engine.

    Args:
        entries: One input per employee.
        period: Label for logs and the result, e.g. ``"2024-06"``.
        engine: Engine to use; a default-rate engine is built if omitted.
    """
    engine = engine or PayrollEngine()
    payrolls: list[EmployeePayroll] = []
    failures: list[CalculationError] = []

    with LogContext.bind(period=period):
        for entry in entries:
            with LogContext.bind(employee_id=entry.employee_id):
                try:
                    result = engine.calculate(entry.totals, entry.salary, entry.tax)
                except (ArithmeticError, TypeError) as exc:
                    logger.exception("payroll_batch_entry_failed")
                    failures.append(CalculationError(entry.employee_id, str(exc)))
                    continue
            payrolls.append(EmployeePayroll(
                employee_id=entry.employee_id,
                result=result,
                department=entry.department,
            ))

        logger.info("payroll_batch_completed", extra={
            "calculated": len(payrolls),
            "failed": len(failures),
            "rate_table_version": engine.rate_tables.version,
        })

    return BatchResult(
        period=period,
        payrolls=tuple(payrolls),
        failures=tuple(failures),
    )


def summarize(payrolls: Iterable[EmployeePayroll]) -> PayrollSummary:
    """
    Reduce calculated payrolls to period statistics.

    The average gross salary is rounded to whole yen and is zero for an
    empty set.  Payrolls without a department are grouped under
    ``"unassigned"``.
    """
    count = 0
    total_gross = ZERO
    total_net = ZERO
    total_overtime = ZERO
    departments: dict[str, DepartmentStats] = {}

    for payroll in payrolls:
        result = payroll.result
        count += 1
        total_gross += result.gross_salary
        total_net += result.net_salary
        total_overtime += result.overtime_pay

        name = payroll.department or UNASSIGNED_DEPARTMENT
        current = departments.get(name, DepartmentStats())
        departments[name] = DepartmentStats(
            count=current.count + 1,
            total_gross=current.total_gross + result.gross_salary,
            total_net=current.total_net + result.net_salary,
            total_overtime=current.total_overtime + result.overtime_pay,
        )

    average = round_yen(total_gross / count) if count else ZERO

    return PayrollSummary(
        total_employees=count,
        total_gross_salary=total_gross,
        total_net_salary=total_net,
        total_overtime_pay=total_overtime,
        average_gross_salary=average,
        department_stats=departments,
    )
