"""
Pytest fixtures for the payroll core test suite.

Provides:
- Default rate tables and engine
- A clean logging / LogContext state for every test
- Builders for the common golden-scenario inputs
"""

from decimal import Decimal

import pytest

from payroll_config import RateTables, clear_rate_table_cache, get_rate_tables
from payroll_engines.attendance import AttendanceTotals
from payroll_engines.payroll import PayrollEngine, SalaryConfig, TaxConfig
from payroll_kernel.logging_config import LogContext, reset_logging


@pytest.fixture(autouse=True)
def _clean_logging_state():
    """Reset logging configuration and context between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def rate_tables() -> RateTables:
    """The shipped default rate tables, loaded from YAML."""
    clear_rate_table_cache()
    return get_rate_tables()


@pytest.fixture
def engine(rate_tables) -> PayrollEngine:
    return PayrollEngine(rate_tables)


@pytest.fixture
def standard_salary() -> SalaryConfig:
    """Base 300000, no allowances, no overrides."""
    return SalaryConfig(base_salary=Decimal("300000"))


@pytest.fixture
def standard_tax() -> TaxConfig:
    """Single, under 40, no dependents."""
    return TaxConfig(dependents=0, age=35)


@pytest.fixture
def ten_hours_overtime() -> AttendanceTotals:
    return AttendanceTotals(
        work_hours=Decimal("170"),
        overtime_hours=Decimal("10"),
    )
