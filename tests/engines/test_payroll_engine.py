"""
Tests for the payroll engine.

Covers:
- The golden scenario (base 300000, 10 hours overtime)
- Gross / deduction / net identities
- Rate overrides (None derives, explicit zero is honored)
- Informational exemption flag
- Negative inputs, tracing, as_dict rendering
- monthly_salary_from_annual
"""

import dataclasses
import logging
from decimal import Decimal

import pytest

from payroll_config.schema import InsuranceRates, RateTables
from payroll_engines.attendance import AttendanceTotals
from payroll_engines.payroll import (
    PayrollEngine,
    PayrollResult,
    SalaryConfig,
    TaxConfig,
    calculate,
    monthly_salary_from_annual,
)

EARNING_FIELDS = (
    "base_salary",
    "overtime_pay",
    "night_pay",
    "holiday_pay",
    "transport_allowance",
    "family_allowance",
    "housing_allowance",
    "position_allowance",
    "skill_allowance",
    "other_allowances",
)

DEDUCTION_FIELDS = (
    "health_insurance",
    "pension_insurance",
    "employment_insurance",
    "long_care_insurance",
    "income_tax",
    "residence_tax",
    "other_deductions",
)


def _assert_identities(result: PayrollResult) -> None:
    assert result.gross_salary == sum(getattr(result, f) for f in EARNING_FIELDS)
    assert result.total_deductions == sum(getattr(result, f) for f in DEDUCTION_FIELDS)
    assert result.net_salary == result.gross_salary - result.total_deductions


class TestGoldenScenario:
    """Base 300000, 10 hours overtime, age 35, no dependents."""

    @pytest.fixture
    def result(self, engine, ten_hours_overtime, standard_salary, standard_tax):
        return engine.calculate(ten_hours_overtime, standard_salary, standard_tax)

    def test_earnings(self, result):
        assert result.hourly_rate == Decimal("1875")
        assert result.overtime_pay == Decimal("23438")
        assert result.night_pay == Decimal("0")
        assert result.holiday_pay == Decimal("0")
        assert result.gross_salary == Decimal("323438")

    def test_social_insurance(self, result):
        assert result.health_insurance == Decimal("8005")
        assert result.pension_insurance == Decimal("14797")
        assert result.employment_insurance == Decimal("970")
        assert result.long_care_insurance == Decimal("0")
        assert result.social_insurance_total == Decimal("23772")

    def test_income_tax_and_net(self, result):
        assert result.taxable_income == Decimal("299666")
        assert result.income_tax == Decimal("18950")
        assert result.residence_tax == Decimal("0")
        assert result.other_deductions == Decimal("0")
        assert result.total_deductions == Decimal("42722")
        assert result.net_salary == Decimal("280716")

    def test_hours_echoed(self, result):
        assert result.work_hours == Decimal("170")
        assert result.overtime_hours == Decimal("10")

    def test_identities(self, result):
        _assert_identities(result)

    def test_rate_table_version_recorded(self, result):
        assert result.rate_table_version == "jp_2024"

    def test_result_is_frozen(self, result):
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.net_salary = Decimal("0")


class TestEngineBehaviour:
    """Engine-level properties beyond the golden scenario."""

    def test_zero_input(self, engine):
        result = engine.calculate(
            AttendanceTotals(), SalaryConfig(base_salary=0), TaxConfig()
        )
        assert result.gross_salary == Decimal("0")
        assert result.total_deductions == Decimal("0")
        assert result.net_salary == Decimal("0")

    def test_allowances_added_to_gross(self, engine, standard_tax):
        salary = SalaryConfig(
            base_salary=300000,
            transport_allowance=15000,
            family_allowance="10000",
            housing_allowance=20000,
            position_allowance=30000,
            skill_allowance=5000,
            other_allowances=1000,
        )
        result = engine.calculate(AttendanceTotals(), salary, standard_tax)

        assert result.gross_salary == Decimal("381000")
        assert result.family_allowance == Decimal("10000")
        _assert_identities(result)

    def test_all_components(self, engine):
        totals = AttendanceTotals(
            work_hours=Decimal("184"),
            overtime_hours=Decimal("24"),
            night_hours=Decimal("6"),
            holiday_hours=Decimal("8"),
        )
        salary = SalaryConfig(base_salary=320000, transport_allowance=12000)
        result = engine.calculate(totals, salary, TaxConfig(dependents=1, age=45))

        # hourly 2000: 24 x 2500, 6 x 500, 8 x 2700
        assert result.overtime_pay == Decimal("60000")
        assert result.night_pay == Decimal("3000")
        assert result.holiday_pay == Decimal("21600")
        assert result.gross_salary == Decimal("416600")
        assert result.long_care_insurance > 0
        _assert_identities(result)

    def test_long_care_from_age_40(self, engine, ten_hours_overtime, standard_salary):
        result = engine.calculate(ten_hours_overtime, standard_salary, TaxConfig(age=40))

        assert result.long_care_insurance == Decimal("1989")
        assert result.taxable_income == Decimal("297677")
        assert result.income_tax == Decimal("18652")
        _assert_identities(result)

    def test_dependents_lower_income_tax(self, engine, ten_hours_overtime, standard_salary):
        single = engine.calculate(ten_hours_overtime, standard_salary, TaxConfig(age=35))
        family = engine.calculate(
            ten_hours_overtime, standard_salary, TaxConfig(dependents=2, age=35)
        )
        assert family.income_tax == Decimal("9867")
        assert family.income_tax < single.income_tax

    def test_exemption_flag_is_informational(
        self, engine, ten_hours_overtime, standard_salary
    ):
        off = engine.calculate(
            ten_hours_overtime, standard_salary, TaxConfig(age=35)
        )
        on = engine.calculate(
            ten_hours_overtime,
            standard_salary,
            TaxConfig(age=35, social_insurance_exemption=True),
        )
        assert on == off

    def test_custom_rate_tables(self, ten_hours_overtime, standard_salary, standard_tax):
        tables = RateTables(
            version="test_high_employment",
            insurance=InsuranceRates(employment=Decimal("0.006")),
        )
        result = PayrollEngine(tables).calculate(
            ten_hours_overtime, standard_salary, standard_tax
        )
        assert result.employment_insurance == Decimal("1941")
        assert result.rate_table_version == "test_high_employment"

    def test_float_hours_and_salary_accepted(self, engine):
        result = engine.calculate(
            AttendanceTotals(overtime_hours=10.5),
            SalaryConfig(base_salary=300000.0),
            TaxConfig(age=30),
        )
        # 10.5h x 1875 x 1.25 = 24609.375
        assert result.overtime_pay == Decimal("24609")
        assert result.gross_salary == Decimal("324609")
        assert result.overtime_hours == Decimal("10.5")


class TestRateOverrides:
    """Per-employee rate overrides on SalaryConfig."""

    def test_hourly_rate_override(self, engine, ten_hours_overtime, standard_tax):
        salary = SalaryConfig(base_salary=300000, hourly_rate=2000)
        result = engine.calculate(ten_hours_overtime, salary, standard_tax)
        assert result.hourly_rate == Decimal("2000")
        assert result.overtime_pay == Decimal("25000")

    def test_explicit_zero_hourly_rate_is_honored(
        self, engine, ten_hours_overtime, standard_tax
    ):
        salary = SalaryConfig(base_salary=300000, hourly_rate=0)
        result = engine.calculate(ten_hours_overtime, salary, standard_tax)
        assert result.hourly_rate == Decimal("0")
        assert result.overtime_pay == Decimal("0")
        assert result.gross_salary == Decimal("300000")

    def test_overtime_rate_override(self, engine, ten_hours_overtime, standard_tax):
        salary = SalaryConfig(base_salary=300000, overtime_rate="1.5")
        result = engine.calculate(ten_hours_overtime, salary, standard_tax)
        assert result.overtime_pay == Decimal("28125")

    def test_night_and_holiday_overrides(self, engine, standard_tax):
        totals = AttendanceTotals(night_hours=Decimal("4"), holiday_hours=Decimal("8"))
        salary = SalaryConfig(
            base_salary=300000, night_rate="1.5", holiday_rate="1.5"
        )
        result = engine.calculate(totals, salary, standard_tax)
        assert result.night_pay == Decimal("3750")
        assert result.holiday_pay == Decimal("22500")

    def test_float_amounts_converted_exactly(self):
        salary = SalaryConfig(base_salary=300000.5, overtime_rate=1.3)
        assert salary.base_salary == Decimal("300000.5")
        assert salary.overtime_rate == Decimal("1.3")
        assert salary.hourly_rate is None


class TestEngineLogging:
    """Structured log events emitted by the engine."""

    def test_negative_input_warning(self, engine, standard_salary, standard_tax, caplog):
        totals = AttendanceTotals(overtime_hours=Decimal("-5"))

        with caplog.at_level(logging.WARNING):
            result = engine.calculate(totals, standard_salary, standard_tax)

        warnings = [r for r in caplog.records if r.getMessage() == "payroll_negative_input"]
        assert len(warnings) == 1
        assert warnings[0].fields == ["overtime_hours"]
        _assert_identities(result)

    def test_no_warning_for_clean_input(
        self, engine, ten_hours_overtime, standard_salary, standard_tax, caplog
    ):
        with caplog.at_level(logging.WARNING):
            engine.calculate(ten_hours_overtime, standard_salary, standard_tax)
        assert not any(
            r.getMessage() == "payroll_negative_input" for r in caplog.records
        )

    def test_engine_trace_emitted(
        self, engine, ten_hours_overtime, standard_salary, standard_tax, caplog
    ):
        caplog.set_level(logging.INFO, logger="payroll_kernel")

        engine.calculate(ten_hours_overtime, standard_salary, standard_tax)

        traces = [r for r in caplog.records if r.getMessage() == "PAYROLL_ENGINE_TRACE"]
        assert len(traces) == 1
        assert traces[0].engine_name == "payroll"
        assert traces[0].engine_version == "1.0"
        assert len(traces[0].input_fingerprint) == 16

    def test_calculation_events_logged(
        self, engine, ten_hours_overtime, standard_salary, standard_tax, caplog
    ):
        caplog.set_level(logging.INFO, logger="payroll_kernel")

        engine.calculate(ten_hours_overtime, standard_salary, standard_tax)

        messages = [r.getMessage() for r in caplog.records]
        assert "payroll_calculation_started" in messages
        assert "payroll_calculation_completed" in messages


class TestResultRendering:
    """PayrollResult.as_dict and the module-level helpers."""

    def test_as_dict_uses_camel_case(
        self, ten_hours_overtime, standard_salary, standard_tax, rate_tables
    ):
        data = calculate(
            ten_hours_overtime, standard_salary, standard_tax, rate_tables
        ).as_dict()

        assert data["baseSalary"] == Decimal("300000")
        assert data["longCareInsurance"] == Decimal("0")
        assert data["netSalary"] == Decimal("280716")
        assert data["rateTableVersion"] == "jp_2024"
        assert "base_salary" not in data

    def test_module_calculate_matches_engine(
        self, engine, ten_hours_overtime, standard_salary, standard_tax, rate_tables
    ):
        assert calculate(
            ten_hours_overtime, standard_salary, standard_tax, rate_tables
        ) == engine.calculate(ten_hours_overtime, standard_salary, standard_tax)


class TestMonthlySalaryFromAnnual:
    """Tests for monthly_salary_from_annual()."""

    def test_twelve_months(self):
        assert monthly_salary_from_annual(3600000) == Decimal("300000")

    def test_bonus_months(self):
        assert monthly_salary_from_annual("4200000", months=14) == Decimal("300000")

    def test_rounds_to_whole_yen(self):
        assert monthly_salary_from_annual(1000000) == Decimal("83333")
