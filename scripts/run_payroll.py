#!/usr/bin/env python3
"""
Calculate and print payslips for the employees in a YAML input file.

Input format:

    period: "2024-06"
    employees:
      - employee_id: E001
        department: sales
        salary: {base_salary: 300000, transport_allowance: 15000}
        tax: {dependents: 1, age: 42}
        attendance:
          - {work_date: 2024-06-03, work_hours: 8, overtime_hours: 2}
          - {work_date: 2024-06-04, work_hours: 8, night_hours: 1.5}

Usage:
    python3 scripts/run_payroll.py scripts/sample_payroll.yaml
    python3 scripts/run_payroll.py input.yaml --summary --check-limits
    python3 scripts/run_payroll.py input.yaml --rates jp_2024 --log-level INFO
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from payroll_config import DEFAULT_VERSION, get_rate_tables
from payroll_engines import (
    PayrollEngine,
    PayrollInput,
    SalaryConfig,
    TaxConfig,
    aggregate,
    calculate_batch,
    check_labor_time_violations,
    format_payroll_result,
    format_yen,
    summarize,
)
from payroll_kernel import ConfigurationError, configure_logging


def _build_inputs(employees):
    inputs = []
    for employee in employees:
        inputs.append(PayrollInput(
            employee_id=str(employee["employee_id"]),
            department=employee.get("department"),
            totals=aggregate(employee.get("attendance") or []),
            salary=SalaryConfig(**employee["salary"]),
            tax=TaxConfig(**(employee.get("tax") or {})),
        ))
    return inputs


def _print_summary(batch):
    summary = summarize(batch.payrolls)
    print("=== 集計 ===")
    print(f"対象人数: {summary.total_employees}")
    print(f"総支給額合計: {format_yen(summary.total_gross_salary)}")
    print(f"手取り額合計: {format_yen(summary.total_net_salary)}")
    print(f"残業手当合計: {format_yen(summary.total_overtime_pay)}")
    print(f"平均総支給額: {format_yen(summary.average_gross_salary)}")
    for name, stats in sorted(summary.department_stats.items()):
        print(f"  {name}: {stats.count}名 総支給 {format_yen(stats.total_gross)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calculate payslips from a YAML attendance/salary file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("input", type=Path, help="YAML input file")
    parser.add_argument(
        "--rates",
        default=DEFAULT_VERSION,
        help="Rate table version (default: %(default)s)",
    )
    parser.add_argument("--summary", action="store_true", help="Print period totals")
    parser.add_argument(
        "--check-limits",
        action="store_true",
        help="Report monthly overtime-limit violations",
    )
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main() -> int:
    args = build_parser().parse_args()

    configure_logging(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    if not args.input.exists():
        print(f"Input file not found: {args.input}", file=sys.stderr)
        return 2
    with args.input.open(encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    try:
        engine = PayrollEngine(get_rate_tables(version=args.rates))
    except ConfigurationError as exc:
        print(f"Cannot load rate tables: {exc}", file=sys.stderr)
        return 2

    inputs = _build_inputs(data.get("employees") or [])
    batch = calculate_batch(inputs, period=str(data.get("period", "")), engine=engine)

    for payroll in batch.payrolls:
        print(f"# {payroll.employee_id}")
        print(format_payroll_result(payroll.result))
        print()

    if args.check_limits:
        for entry in inputs:
            for violation in check_labor_time_violations(entry.totals):
                print(f"[{violation.severity.value}] {entry.employee_id}: {violation.message}")

    if args.summary:
        _print_summary(batch)

    for failure in batch.failures:
        print(f"FAILED {failure.employee_id}: {failure.reason}", file=sys.stderr)
    return 0 if batch.is_complete else 1


if __name__ == "__main__":
    raise SystemExit(main())
