from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import shift_bounds
from ..common.money import ZERO, to_decimal
from ..core.enums import ClockStatus, DayStatus, ScheduleKind
from ..employees.model import Employee
from ..rules.deduction import late_deduction
from ..rules.overtime import evaluate_overtime, hourly_wage, resolve_rate
from ..rules.time_rules import evaluate_clock_in
from ..schedules.model import ScheduleEntry
from ..settings.model import CompanyConfig
from .calculator.base import SalaryCalculator
from .calculator.factory import SalaryCalculatorFactory

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class DayRecord:
    """Result of one employee-day; built per payroll run, never persisted."""

    work_date: date
    status: DayStatus
    income: Decimal = ZERO
    wage: Decimal = ZERO
    ot_pay: Decimal = ZERO
    incentive: Decimal = ZERO
    deduction: Decimal = ZERO
    late_minutes: int = 0
    ot_hours: Decimal = ZERO
    notes: tuple[str, ...] = ()

    @property
    def attended(self) -> bool:
        return self.status in (DayStatus.PRESENT, DayStatus.LATE)

    @property
    def note(self) -> str:
        return ", ".join(self.notes)


def aggregate_day(
    employee: Employee,
    entry: ScheduleEntry,
    attendance: Optional[AttendanceRecord],
    config: CompanyConfig,
    *,
    calculator: Optional[SalaryCalculator] = None,
) -> DayRecord:
    """Combine one schedule entry and its attendance into a DayRecord."""
    calculator = calculator or SalaryCalculatorFactory().for_salary_type(employee.salary_type)
    work_date = entry.work_date
    notes: list[str] = [entry.note] if entry.note else []

    if entry.kind != ScheduleKind.WORK and entry.has_overtime:
        notes.append(f"OT ignored on {entry.kind.value} day")

    if entry.kind in (ScheduleKind.OFF, ScheduleKind.HOLIDAY):
        return DayRecord(work_date=work_date, status=DayStatus(entry.kind.value), notes=tuple(notes))

    if entry.kind == ScheduleKind.LEAVE:
        wage = calculator.day_wage(employee)
        notes.append("leave")
        return DayRecord(work_date=work_date, status=DayStatus.LEAVE, income=wage, wage=wage, notes=tuple(notes))

    if work_date.weekday() in employee.day_offs:
        notes.append("scheduled on day off")

    rules = config.deduction_rules
    start_dt, end_dt = shift_bounds(work_date, entry.start_time, entry.end_time)
    clock_in = attendance.clock_in if attendance else None
    clock = evaluate_clock_in(
        scheduled_start=start_dt,
        clock_in=clock_in,
        grace_period_minutes=rules.grace_period_minutes,
    )
    attended = clock.status != ClockStatus.ABSENT

    status = DayStatus.PRESENT
    deduction = ZERO
    late_minutes = 0
    if clock.status == ClockStatus.ABSENT:
        status = DayStatus.ABSENT
        notes.append("absent")
    elif clock.status == ClockStatus.LATE:
        status = DayStatus.LATE
        late_minutes = clock.late_minutes
        deduction = late_deduction(late_minutes, rules)
        notes.append(f"late {late_minutes} min")

    wage = calculator.day_wage(employee) if calculator.earns_wage(attended=attended) else ZERO

    ot_pay = ZERO
    ot_hours = ZERO
    if entry.has_overtime and attended:
        rate = resolve_rate(entry.ot_type, config)
        if not rate.known:
            logger.warning(
                "OT type %r not configured; employee=%s date=%s uses default multiplier %s",
                entry.ot_type,
                employee.employee_id,
                work_date,
                rate.multiplier,
            )
            notes.append(f"unknown OT type {entry.ot_type}")
        elif not rate.enabled:
            notes.append(f"OT type {entry.ot_type} disabled")

        ot = evaluate_overtime(
            scheduled_end=end_dt,
            clock_out=attendance.clock_out if attendance else None,
            approved_hours=entry.ot_hours,
            rate_multiplier=rate.multiplier,
            hourly=hourly_wage(employee.base_salary, employee.salary_type),
        )
        ot_pay, ot_hours = ot.pay, ot.paid_hours
        if ot_hours > 0:
            notes.append(f"OT {ot_hours:.1f} h")

    incentive = ZERO
    if attended and to_decimal(entry.incentive) > 0:
        incentive = to_decimal(entry.incentive)
        notes.append("incentive")

    return DayRecord(
        work_date=work_date,
        status=status,
        income=max(ZERO, wage + ot_pay + incentive),
        wage=wage,
        ot_pay=ot_pay,
        incentive=incentive,
        deduction=deduction,
        late_minutes=late_minutes,
        ot_hours=ot_hours,
        notes=tuple(notes),
    )
