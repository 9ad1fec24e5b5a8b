"""
Tests for batch payroll runs and period statistics.

Covers:
- One independent result per entry, in input order
- A failing entry is recorded without aborting the batch
- Period summary totals, average and department breakdown
"""

import logging
from decimal import Decimal

from payroll_config.schema import PremiumRates, RateTables
from payroll_engines.attendance import AttendanceTotals
from payroll_engines.batch import (
    PayrollInput,
    calculate_batch,
    summarize,
)
from payroll_engines.payroll import PayrollEngine, SalaryConfig, TaxConfig
from payroll_kernel.exceptions import CalculationError


def _entry(employee_id, base, overtime="0", department=None, **salary):
    return PayrollInput(
        employee_id=employee_id,
        department=department,
        totals=AttendanceTotals(overtime_hours=Decimal(overtime)),
        salary=SalaryConfig(base_salary=base, **salary),
        tax=TaxConfig(age=35),
    )


class TestCalculateBatch:
    """Tests for calculate_batch()."""

    def test_results_in_input_order(self, engine):
        entries = [
            _entry("E001", 300000, overtime="10", department="sales"),
            _entry("E002", 250000, department="engineering"),
        ]

        batch = calculate_batch(entries, period="2024-06", engine=engine)

        assert batch.period == "2024-06"
        assert batch.is_complete
        assert [p.employee_id for p in batch.payrolls] == ["E001", "E002"]
        assert batch.payrolls[0].result.net_salary == Decimal("280716")
        assert batch.payrolls[1].department == "engineering"

    def test_same_as_individual_calculation(self, engine):
        entry = _entry("E001", 300000, overtime="10")
        batch = calculate_batch([entry], period="2024-06", engine=engine)
        assert batch.payrolls[0].result == engine.calculate(
            entry.totals, entry.salary, entry.tax
        )

    def test_empty_batch(self, engine):
        batch = calculate_batch([], period="2024-06", engine=engine)
        assert batch.payrolls == ()
        assert batch.is_complete

    def test_failing_entry_does_not_abort(self, caplog):
        # Unvalidated table: deriving an hourly rate divides by zero
        engine = PayrollEngine(RateTables(
            version="broken",
            premiums=PremiumRates(standard_monthly_hours=Decimal("0")),
        ))
        entries = [
            _entry("E001", 300000, hourly_rate=2000),
            _entry("E002", 300000),
            _entry("E003", 320000, hourly_rate=2000),
        ]

        with caplog.at_level(logging.ERROR):
            batch = calculate_batch(entries, period="2024-06", engine=engine)

        assert not batch.is_complete
        assert [p.employee_id for p in batch.payrolls] == ["E001", "E003"]
        (failure,) = batch.failures
        assert isinstance(failure, CalculationError)
        assert failure.employee_id == "E002"
        assert any(
            r.getMessage() == "payroll_batch_entry_failed" for r in caplog.records
        )

    def test_batch_completion_logged(self, engine, caplog):
        caplog.set_level(logging.INFO, logger="payroll_kernel")

        calculate_batch([_entry("E001", 300000)], period="2024-06", engine=engine)

        (record,) = [
            r for r in caplog.records if r.getMessage() == "payroll_batch_completed"
        ]
        assert record.calculated == 1
        assert record.failed == 0


class TestSummarize:
    """Tests for summarize()."""

    def test_empty(self):
        summary = summarize([])
        assert summary.total_employees == 0
        assert summary.total_gross_salary == Decimal("0")
        assert summary.average_gross_salary == Decimal("0")
        assert summary.department_stats == {}

    def test_totals_and_departments(self, engine):
        entries = [
            _entry("E001", 300000, overtime="10", department="sales"),
            _entry("E002", 200000, department="sales"),
            _entry("E003", 250001),
        ]
        batch = calculate_batch(entries, period="2024-06", engine=engine)

        summary = summarize(batch.payrolls)

        assert summary.total_employees == 3
        assert summary.total_gross_salary == Decimal("773439")
        assert summary.total_overtime_pay == Decimal("23438")
        # 773439 / 3 = 257813
        assert summary.average_gross_salary == Decimal("257813")
        assert summary.total_net_salary == sum(
            p.result.net_salary for p in batch.payrolls
        )

        sales = summary.department_stats["sales"]
        assert sales.count == 2
        assert sales.total_gross == Decimal("523438")
        assert sales.total_overtime == Decimal("23438")
        assert summary.department_stats["unassigned"].count == 1
