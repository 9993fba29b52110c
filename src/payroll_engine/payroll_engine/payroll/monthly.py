from __future__ import annotations

import logging
from concurrent.futures import Executor
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..attendance.index import AttendanceIndex
from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import month_range
from ..common.money import ZERO, round_cents
from ..core.enums import DayStatus, PayslipStatus
from ..core.exceptions import MalformedScheduleEntryError, PeriodLockedError
from ..employees.model import Employee
from ..payslips.model import Payslip
from ..rules.deduction import cap_total
from ..rules.tax_profile import resolve_tax
from ..schedules.model import ScheduleEntry
from ..settings.model import CompanyConfig
from .calculator.factory import SalaryCalculatorFactory
from .daily import DayRecord, aggregate_day

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmployeePayroll:
    payslip: Payslip
    days: tuple[DayRecord, ...]


@dataclass(frozen=True)
class EmployeeError:
    employee_id: str
    message: str


@dataclass
class PayrollBatch:
    company_id: str
    month_id: str
    payslips: list[Payslip] = field(default_factory=list)
    days_by_employee: dict[str, tuple[DayRecord, ...]] = field(default_factory=dict)
    skipped_paid: list[str] = field(default_factory=list)
    errors: list[EmployeeError] = field(default_factory=list)

    @property
    def total_net(self) -> Decimal:
        return sum((p.net_total for p in self.payslips), ZERO)

    def get(self, employee_id: str) -> Optional[Payslip]:
        for p in self.payslips:
            if p.employee_id == employee_id:
                return p
        return None


def merge_with_existing(fresh: Payslip, existing: Optional[Payslip]) -> Payslip:
    """Three-way merge of a fresh computation with the persisted payslip.

    Field precedence:
    - calculated money fields and attendance stats: always from `fresh`;
    - custom_incomes / custom_deductions: from `existing` when it exists;
    - status: from `existing` (draft or saved), otherwise draft;
    - updated_at: from `existing`;
    - net_total: recomputed from the merged line items.

    A paid `existing` is never merged; callers skip those employees.
    """
    if existing is None:
        return replace(fresh, status=PayslipStatus.DRAFT).with_net_total()
    if existing.status == PayslipStatus.PAID:
        raise PeriodLockedError(
            "Kỳ lương đã chốt, không thể tính lại",
            employee_id=existing.employee_id,
            month_id=existing.month_id,
        )
    return replace(
        fresh,
        custom_incomes=existing.custom_incomes,
        custom_deductions=existing.custom_deductions,
        status=existing.status,
        updated_at=existing.updated_at,
    ).with_net_total()


def split_valid_entries(entries: Iterable[ScheduleEntry], *, month_id: str) -> dict[str, list[ScheduleEntry]]:
    """Group entries per employee, dropping malformed or out-of-period rows."""
    start, end = month_range(month_id)
    grouped: dict[str, list[ScheduleEntry]] = {}
    for entry in entries:
        try:
            entry.ensure_valid()
        except MalformedScheduleEntryError as e:
            logger.warning("Skipping malformed schedule entry (%s): %r", e, entry)
            continue
        if not start <= entry.work_date <= end:
            logger.debug("Schedule entry outside %s ignored: %r", month_id, entry)
            continue
        grouped.setdefault(entry.employee_id, []).append(entry)
    return grouped


class MonthlyPayrollCalculator:
    def __init__(self, *, factory: Optional[SalaryCalculatorFactory] = None):
        self._factory = factory or SalaryCalculatorFactory()

    def compute_employee(
        self,
        employee: Employee,
        entries: Sequence[ScheduleEntry],
        attendance: AttendanceIndex,
        config: CompanyConfig,
        *,
        month_id: str,
        existing: Optional[Payslip] = None,
    ) -> EmployeePayroll:
        calculator = self._factory.for_salary_type(employee.salary_type)
        days: list[DayRecord] = []
        for entry in sorted(entries, key=lambda e: e.work_date):
            att = attendance.get(employee.employee_id, entry.work_date)
            days.append(aggregate_day(employee, entry, att, config, calculator=calculator))

        earned_wages = sum((d.wage for d in days), ZERO)
        base = calculator.monthly_base(employee, earned_wages=earned_wages)
        late_total = cap_total(sum((d.deduction for d in days), ZERO), config.deduction_rules)
        tax = resolve_tax(employee.deduction_profile_raw, base)

        fresh = Payslip(
            employee_id=employee.employee_id,
            month_id=month_id,
            company_id=employee.company_id,
            employee_name=employee.name,
            role=employee.role,
            salary_type=employee.salary_type,
            base_salary=round_cents(base),
            ot_pay=sum((d.ot_pay for d in days), ZERO),
            incentive=sum((d.incentive for d in days), ZERO),
            late_deduction=late_total,
            social_security=tax.social_security,
            tax=tax.tax,
            deduction_profile=tax.profile,
            work_days=sum(1 for d in days if d.attended),
            late_count=sum(1 for d in days if d.status == DayStatus.LATE),
            late_minutes=sum(d.late_minutes for d in days),
            absent_count=sum(1 for d in days if d.status == DayStatus.ABSENT),
            leave_count=sum(1 for d in days if d.status == DayStatus.LEAVE),
            ot_hours=sum((d.ot_hours for d in days), ZERO),
        )
        return EmployeePayroll(payslip=merge_with_existing(fresh, existing), days=tuple(days))

    def compute_month(
        self,
        *,
        company_id: str,
        month_id: str,
        employees: Sequence[Employee],
        entries: Iterable[ScheduleEntry],
        attendance: Iterable[AttendanceRecord],
        config: CompanyConfig,
        existing: Iterable[Payslip] = (),
        executor: Optional[Executor] = None,
    ) -> PayrollBatch:
        """Draft payslips for every employee; paid employees are skipped.

        A failure for one employee is recorded in `errors` and does not abort the batch.
        """
        batch = PayrollBatch(company_id=company_id, month_id=month_id)
        grouped = split_valid_entries(entries, month_id=month_id)
        index = AttendanceIndex.build(attendance)
        existing_by_emp = {p.employee_id: p for p in existing}

        todo: list[Employee] = []
        for emp in employees:
            prev = existing_by_emp.get(emp.employee_id)
            if prev is not None and prev.status == PayslipStatus.PAID:
                batch.skipped_paid.append(emp.employee_id)
                continue
            todo.append(emp)

        def run(emp: Employee):
            try:
                return self.compute_employee(
                    emp,
                    grouped.get(emp.employee_id, []),
                    index,
                    config,
                    month_id=month_id,
                    existing=existing_by_emp.get(emp.employee_id),
                )
            except Exception as e:
                logger.exception("Payroll failed for employee=%s month=%s", emp.employee_id, month_id)
                return EmployeeError(employee_id=emp.employee_id, message=str(e) or type(e).__name__)

        results = list(executor.map(run, todo)) if executor else [run(emp) for emp in todo]

        for emp, result in zip(todo, results):
            if isinstance(result, EmployeeError):
                batch.errors.append(result)
                continue
            batch.payslips.append(result.payslip)
            batch.days_by_employee[emp.employee_id] = result.days

        logger.info(
            "Computed payroll company=%s month=%s payslips=%d skipped_paid=%d errors=%d",
            company_id,
            month_id,
            len(batch.payslips),
            len(batch.skipped_paid),
            len(batch.errors),
        )
        return batch
