from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.money import ZERO, round_unit, to_decimal
from ..core.constants import DEFAULT_OT_MULTIPLIER, STANDARD_MONTH_DAYS, STANDARD_WORK_HOURS
from ..core.enums import SalaryType
from ..settings.model import CompanyConfig


@dataclass(frozen=True)
class OvertimeResult:
    paid_hours: Decimal = ZERO
    pay: Decimal = ZERO


@dataclass(frozen=True)
class OvertimeRate:
    multiplier: Decimal
    known: bool = True
    enabled: bool = True


def hourly_wage(base_salary: Decimal, salary_type: SalaryType) -> Decimal:
    """Monthly salary / 30 / 8, or daily wage / 8."""
    salary = max(to_decimal(base_salary), ZERO)
    if salary_type == SalaryType.DAILY:
        return salary / STANDARD_WORK_HOURS
    return salary / STANDARD_MONTH_DAYS / STANDARD_WORK_HOURS


def resolve_rate(ot_type: Optional[str], config: CompanyConfig) -> OvertimeRate:
    """Look up the OT multiplier; unknown types fall back to DEFAULT_OT_MULTIPLIER."""
    if not ot_type:
        return OvertimeRate(multiplier=ZERO)
    found = config.find_ot_type(ot_type)
    if found is None:
        return OvertimeRate(multiplier=DEFAULT_OT_MULTIPLIER, known=False)
    if not found.enabled:
        return OvertimeRate(multiplier=ZERO, enabled=False)
    return OvertimeRate(multiplier=max(to_decimal(found.rate_multiplier), ZERO))


def evaluate_overtime(
    *,
    scheduled_end: Optional[datetime],
    clock_out: Optional[datetime],
    approved_hours: Decimal,
    rate_multiplier: Decimal,
    hourly: Decimal,
) -> OvertimeResult:
    """OT pay for one day, bounded by actual clock-out and by the approved hours."""
    approved = max(to_decimal(approved_hours), ZERO)
    if clock_out is None or scheduled_end is None or approved == 0:
        return OvertimeResult()

    actual_minutes = max(0, int((clock_out - scheduled_end).total_seconds() // 60))
    paid_hours = min(Decimal(actual_minutes) / 60, approved)
    if paid_hours <= 0:
        return OvertimeResult()

    pay = round_unit(to_decimal(hourly) * paid_hours * max(to_decimal(rate_multiplier), ZERO))
    return OvertimeResult(paid_hours=paid_hours, pay=pay)
