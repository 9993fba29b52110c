from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

import pytest

from src.payroll_engine.payroll_engine.attendance.model import AttendanceRecord
from src.payroll_engine.payroll_engine.common.datetime_utils import month_range
from src.payroll_engine.payroll_engine.container import Container, build_memory_container
from src.payroll_engine.payroll_engine.core.enums import ScheduleKind
from src.payroll_engine.payroll_engine.employees.model import Employee
from src.payroll_engine.payroll_engine.payslips.memory_repository import InMemoryPayslipRepository
from src.payroll_engine.payroll_engine.schedules.model import ScheduleEntry
from src.payroll_engine.payroll_engine.settings.model import CompanyConfig

COMPANY = "c1"


@dataclass
class InMemoryEmployees:
    employees: list[Employee]

    def list_active(self, company_id: str):
        return [e for e in self.employees if e.company_id == company_id and e.is_active]


@dataclass
class InMemorySchedules:
    entries: list[ScheduleEntry]
    company_id: str = COMPANY

    def list_range(self, company_id: str, *, start: date, end: date):
        if company_id != self.company_id:
            return []
        # Rows without a date are returned as-is, like the MySQL adapter does.
        return [e for e in self.entries if e.work_date is None or start <= e.work_date <= end]


@dataclass
class InMemoryAttendance:
    records: list[AttendanceRecord]
    company_id: str = COMPANY

    def list_range(self, company_id: str, *, start: date, end: date):
        if company_id != self.company_id:
            return []
        return [r for r in self.records if start <= r.work_date <= end]


@dataclass
class InMemorySettings:
    configs: dict[str, CompanyConfig]

    def get_company_config(self, company_id: str) -> Optional[CompanyConfig]:
        return self.configs.get(company_id)


@dataclass
class PayrollEnv:
    """Mutable in-memory world; tests append rows, then build the service."""

    employees: list[Employee] = field(default_factory=list)
    entries: list[ScheduleEntry] = field(default_factory=list)
    attendance: list[AttendanceRecord] = field(default_factory=list)
    configs: dict[str, CompanyConfig] = field(default_factory=lambda: {COMPANY: CompanyConfig.defaults()})
    payslips: InMemoryPayslipRepository = field(default_factory=InMemoryPayslipRepository)

    def add_employee(self, employee_id: str, base_salary, **kwargs) -> Employee:
        emp = Employee(
            employee_id=employee_id,
            company_id=kwargs.pop("company_id", COMPANY),
            name=kwargs.pop("name", f"Employee {employee_id}"),
            role=kwargs.pop("role", "staff"),
            base_salary=Decimal(str(base_salary)),
            **kwargs,
        )
        self.employees.append(emp)
        return emp

    def work_day(
        self,
        employee_id: str,
        work_date: date,
        *,
        start: time = time(9, 0),
        end: time = time(18, 0),
        clock_in: Optional[time] = time(9, 0),
        clock_out: Optional[time] = time(18, 0),
        **entry_kwargs,
    ) -> None:
        self.entries.append(
            ScheduleEntry(employee_id=employee_id, work_date=work_date, start_time=start, end_time=end, **entry_kwargs)
        )
        if clock_in is not None:
            out_dt = datetime.combine(work_date, clock_out) if clock_out else None
            if out_dt is not None and clock_out <= start:
                out_dt += timedelta(days=1)
            self.attendance.append(
                AttendanceRecord(
                    employee_id=employee_id,
                    work_date=work_date,
                    clock_in=datetime.combine(work_date, clock_in),
                    clock_out=out_dt,
                )
            )

    def work_month(self, employee_id: str, month_id: str, **kwargs) -> None:
        """Schedule (and by default attend) every calendar day of the month."""
        first, last = month_range(month_id)
        day = first
        while day <= last:
            self.work_day(employee_id, day, **kwargs)
            day += timedelta(days=1)

    def day_off(self, employee_id: str, work_date: date, kind: ScheduleKind = ScheduleKind.OFF) -> None:
        self.entries.append(ScheduleEntry(employee_id=employee_id, work_date=work_date, kind=kind))

    def container(self, **kwargs) -> Container:
        return build_memory_container(
            employees=InMemoryEmployees(self.employees),
            schedules=InMemorySchedules(self.entries),
            attendance=InMemoryAttendance(self.attendance),
            settings=InMemorySettings(self.configs),
            payslips=self.payslips,
            **kwargs,
        )

    def service(self, **kwargs):
        return self.container(**kwargs).payroll_service


@pytest.fixture()
def env() -> PayrollEnv:
    return PayrollEnv()
