"""
Module: payroll_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    payroll calculation modules.  This is the canonical import surface
    for callers (HTTP handlers, batch jobs, the demo script).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import payroll_kernel, payroll_config and sibling engine
    modules.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Clock times and work dates are passed in as explicit parameters.
    - Decimal-only arithmetic: all yen amounts and hours are ``Decimal``.
    - Determinism: identical inputs and rate tables always produce
      identical results.

Failure modes:
    - ImportError if a sub-module is missing or has unresolved dependencies.
    - ConfigurationError from ``PayrollEngine()`` when the default rate
      tables cannot be loaded.

Audit relevance:
    Every ``PayrollEngine.calculate`` call is traced via the
    ``@traced_engine`` decorator (see ``payroll_engines.tracer``), emitting
    PAYROLL_ENGINE_TRACE log records with engine name, version, input
    fingerprint and duration.

Usage:
    from payroll_engines import (
        SalaryConfig, TaxConfig, aggregate, calculate, format_payroll_result,
    )

    totals = aggregate(daily_records)
    result = calculate(totals, SalaryConfig(base_salary=300000), TaxConfig(age=35))
    print(format_payroll_result(result))
"""

from payroll_kernel.logging_config import get_logger

logger = get_logger("engines")

from payroll_engines.attendance import (
    HOUR_FIELDS,
    AttendanceRecord,
    AttendanceTotals,
    aggregate,
    to_totals,
)
from payroll_engines.batch import (
    BatchResult,
    DepartmentStats,
    EmployeePayroll,
    PayrollInput,
    PayrollSummary,
    calculate_batch,
    summarize,
)
from payroll_engines.deductions import DeductionCalculator
from payroll_engines.formatter import format_hours, format_payroll_result, format_yen
from payroll_engines.pay_components import PayComponentCalculator
from payroll_engines.payroll import (
    ALLOWANCE_FIELDS,
    PayrollEngine,
    PayrollResult,
    SalaryConfig,
    TaxConfig,
    calculate,
    monthly_salary_from_annual,
)
from payroll_engines.tracer import compute_input_fingerprint, traced_engine
from payroll_engines.worktime import (
    LaborTimeViolation,
    ViolationSeverity,
    build_daily_record,
    calculate_holiday_hours,
    calculate_night_hours,
    calculate_overtime_hours,
    calculate_work_hours,
    check_labor_time_violations,
    is_legal_holiday,
    is_national_holiday,
)

__all__ = [
    # Attendance
    "HOUR_FIELDS",
    "AttendanceRecord",
    "AttendanceTotals",
    "aggregate",
    "to_totals",
    # Pay components and deductions
    "PayComponentCalculator",
    "DeductionCalculator",
    # Payroll
    "ALLOWANCE_FIELDS",
    "PayrollEngine",
    "PayrollResult",
    "SalaryConfig",
    "TaxConfig",
    "calculate",
    "monthly_salary_from_annual",
    # Formatting
    "format_hours",
    "format_payroll_result",
    "format_yen",
    # Work time
    "LaborTimeViolation",
    "ViolationSeverity",
    "build_daily_record",
    "calculate_holiday_hours",
    "calculate_night_hours",
    "calculate_overtime_hours",
    "calculate_work_hours",
    "check_labor_time_violations",
    "is_legal_holiday",
    "is_national_holiday",
    # Batch
    "BatchResult",
    "DepartmentStats",
    "EmployeePayroll",
    "PayrollInput",
    "PayrollSummary",
    "calculate_batch",
    "summarize",
    # Tracing
    "compute_input_fingerprint",
    "traced_engine",
]
