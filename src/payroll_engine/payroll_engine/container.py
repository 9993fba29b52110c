from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .core.constants import DEFAULT_MAX_WORKERS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .payroll.service import PayrollService
from .payslips.memory_repository import InMemoryPayslipRepository
from .payslips.mysql_payslip_repository import MySQLPayslipRepository
from .payslips.repository import PayslipRepository
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    schedules_repo: ScheduleRepository
    attendance_repo: AttendanceRepository
    settings_repo: SettingsRepository
    payslips_repo: PayslipRepository

    payroll_service: PayrollService


def build_container(*, db_config: dict, max_workers: int = DEFAULT_MAX_WORKERS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)
    payslips_repo = MySQLPayslipRepository(conn)

    payroll_service = PayrollService(
        employees_repo,
        schedules_repo,
        attendance_repo,
        settings_repo,
        payslips_repo,
        max_workers=max_workers,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        payslips_repo=payslips_repo,
        payroll_service=payroll_service,
    )


def build_memory_container(
    *,
    employees: EmployeeRepository,
    schedules: ScheduleRepository,
    attendance: AttendanceRepository,
    settings: SettingsRepository,
    payslips: Optional[PayslipRepository] = None,
    max_workers: int = 1,
) -> Container:
    """Wire the service over caller-supplied sources and an in-memory payslip store (tests, embedding)."""
    payslips = payslips if payslips is not None else InMemoryPayslipRepository()
    return Container(
        conn=None,
        employees_repo=employees,
        schedules_repo=schedules,
        attendance_repo=attendance,
        settings_repo=settings,
        payslips_repo=payslips,
        payroll_service=PayrollService(
            employees, schedules, attendance, settings, payslips, max_workers=max_workers
        ),
    )
