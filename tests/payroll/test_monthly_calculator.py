from dataclasses import replace
from datetime import date, datetime, time
from decimal import Decimal

import pytest

from src.payroll_engine.payroll_engine.attendance.model import AttendanceRecord
from src.payroll_engine.payroll_engine.core.enums import PayslipStatus, SalaryType, ScheduleKind
from src.payroll_engine.payroll_engine.core.exceptions import PeriodLockedError
from src.payroll_engine.payroll_engine.employees.model import Employee
from src.payroll_engine.payroll_engine.payroll.monthly import (
    MonthlyPayrollCalculator,
    merge_with_existing,
    split_valid_entries,
)
from src.payroll_engine.payroll_engine.payslips.model import CustomItem, Payslip
from src.payroll_engine.payroll_engine.schedules.model import ScheduleEntry
from src.payroll_engine.payroll_engine.settings.model import CompanyConfig, DeductionRules


def emp(employee_id, salary, **kwargs):
    return Employee(
        employee_id=employee_id,
        company_id="c1",
        name=employee_id.upper(),
        role="staff",
        base_salary=Decimal(salary),
        **kwargs,
    )


def work(employee_id, day):
    return ScheduleEntry(employee_id=employee_id, work_date=day, start_time=time(9, 0), end_time=time(18, 0))


def came(employee_id, day, hh=9, mm=0):
    return AttendanceRecord(
        employee_id=employee_id,
        work_date=day,
        clock_in=datetime.combine(day, time(hh, mm)),
        clock_out=datetime.combine(day, time(18, 0)),
    )


def fresh_payslip(**kwargs):
    base = dict(employee_id="e1", month_id="2026-03", company_id="c1", base_salary=Decimal("1000"))
    base.update(kwargs)
    return Payslip(**base).with_net_total()


def test_merge_without_existing_is_draft():
    merged = merge_with_existing(fresh_payslip(), None)
    assert merged.status == PayslipStatus.DRAFT
    assert merged.net_total == Decimal("1000.00")


def test_merge_keeps_manual_items_and_status_but_not_money():
    existing = fresh_payslip(
        base_salary=Decimal("999"),
        status=PayslipStatus.SAVED,
        custom_incomes=(CustomItem("bonus", Decimal("100")),),
        custom_deductions=(CustomItem("advance", Decimal("40")),),
    )
    merged = merge_with_existing(fresh_payslip(), existing)

    assert merged.base_salary == Decimal("1000")
    assert merged.status == PayslipStatus.SAVED
    assert merged.custom_incomes == existing.custom_incomes
    assert merged.net_total == Decimal("1060.00")


def test_merge_refuses_paid():
    with pytest.raises(PeriodLockedError):
        merge_with_existing(fresh_payslip(), fresh_payslip(status=PayslipStatus.PAID))


def test_split_valid_entries_drops_malformed_and_out_of_period(caplog):
    entries = [
        work("e1", date(2026, 3, 1)),
        ScheduleEntry(employee_id="e1", work_date=None),
        ScheduleEntry(employee_id="", work_date=date(2026, 3, 2)),
        work("e1", date(2026, 4, 1)),
        ScheduleEntry(employee_id="e1", work_date=date(2026, 3, 3), kind=ScheduleKind.LEAVE, ot_hours=Decimal("2")),
    ]
    grouped = split_valid_entries(entries, month_id="2026-03")
    assert list(grouped) == ["e1"]
    # Odd but complete rows are kept; the day computation ignores what does not apply.
    assert [e.work_date.day for e in grouped["e1"]] == [1, 3]
    assert "malformed" in caplog.text


def test_late_total_is_capped_for_the_month():
    config = CompanyConfig(
        deduction_rules=DeductionRules(
            grace_period_minutes=0,
            deduction_per_minute=Decimal("10"),
            max_deduction_per_day=Decimal("100"),
        )
    )
    days = [date(2026, 3, d) for d in (2, 3, 4)]
    batch = MonthlyPayrollCalculator().compute_month(
        company_id="c1",
        month_id="2026-03",
        employees=[emp("e1", "30000")],
        entries=[work("e1", d) for d in days],
        attendance=[came("e1", d, 9, 30) for d in days],
        config=config,
    )
    slip = batch.get("e1")
    assert slip.late_count == 3
    assert slip.late_minutes == 90
    assert slip.late_deduction == Decimal("100")


def test_daily_employee_base_is_earned_wages():
    days = [date(2026, 3, d) for d in (2, 3, 4)]
    batch = MonthlyPayrollCalculator().compute_month(
        company_id="c1",
        month_id="2026-03",
        employees=[emp("e1", "500", salary_type=SalaryType.DAILY, deduction_profile_raw="tax")],
        entries=[work("e1", d) for d in days],
        attendance=[came("e1", d) for d in days[:2]],
        config=CompanyConfig.defaults(),
    )
    slip = batch.get("e1")
    assert slip.base_salary == Decimal("1000.00")
    assert slip.work_days == 2
    assert slip.absent_count == 1
    assert slip.tax == Decimal("30.00")


def test_paid_employees_are_skipped_and_errors_are_isolated(monkeypatch):
    calc = MonthlyPayrollCalculator()
    paid = fresh_payslip(employee_id="e2", status=PayslipStatus.PAID)
    original = calc.compute_employee

    def flaky(employee, *args, **kwargs):
        if employee.employee_id == "e3":
            raise ArithmeticError("boom")
        return original(employee, *args, **kwargs)

    monkeypatch.setattr(calc, "compute_employee", flaky)

    batch = calc.compute_month(
        company_id="c1",
        month_id="2026-03",
        employees=[emp("e1", "1000"), emp("e2", "1000"), emp("e3", "1000")],
        entries=[],
        attendance=[],
        config=CompanyConfig.defaults(),
        existing=[paid],
    )
    assert [p.employee_id for p in batch.payslips] == ["e1"]
    assert batch.skipped_paid == ["e2"]
    assert [e.employee_id for e in batch.errors] == ["e3"]


def test_results_are_identical_across_runs():
    days = [date(2026, 3, d) for d in range(2, 7)]
    kwargs = dict(
        company_id="c1",
        month_id="2026-03",
        employees=[emp("e1", "20000", deduction_profile_raw="sso_tax")],
        entries=[work("e1", d) for d in days],
        attendance=[came("e1", d, 9, 7) for d in days],
        config=CompanyConfig(deduction_rules=DeductionRules(grace_period_minutes=5, deduction_per_minute=Decimal("3"))),
    )
    first = MonthlyPayrollCalculator().compute_month(**kwargs).get("e1")
    second = MonthlyPayrollCalculator().compute_month(**kwargs).get("e1")
    assert first.financials() == second.financials()
    assert replace(first, updated_at=None) == replace(second, updated_at=None)


def test_unexpected_error_for_one_employee_is_recorded(monkeypatch):
    calc = MonthlyPayrollCalculator()
    original = calc.compute_employee

    def bad_row(employee, *args, **kwargs):
        if employee.employee_id == "e2":
            raise KeyError("salary_type")
        return original(employee, *args, **kwargs)

    monkeypatch.setattr(calc, "compute_employee", bad_row)

    batch = calc.compute_month(
        company_id="c1",
        month_id="2026-03",
        employees=[emp("e1", "1000"), emp("e2", "1000")],
        entries=[],
        attendance=[],
        config=CompanyConfig.defaults(),
    )
    assert [p.employee_id for p in batch.payslips] == ["e1"]
    assert [e.employee_id for e in batch.errors] == ["e2"]
