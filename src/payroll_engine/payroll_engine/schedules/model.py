from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Optional

from ..core.enums import ScheduleKind
from ..core.exceptions import MalformedScheduleEntryError


@dataclass(frozen=True)
class ScheduleEntry:
    """One scheduled day for one employee.

    `work_date` is Optional only because upstream rows can be malformed; such
    entries are skipped by the payroll run.
    """

    employee_id: str
    work_date: Optional[date]
    kind: ScheduleKind = ScheduleKind.WORK
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    ot_type: Optional[str] = None
    ot_hours: Decimal = Decimal("0")
    incentive: Decimal = Decimal("0")
    note: Optional[str] = None

    @property
    def has_overtime(self) -> bool:
        return bool(self.ot_type) and self.ot_hours > 0

    def ensure_valid(self) -> None:
        if not self.employee_id or self.work_date is None:
            raise MalformedScheduleEntryError("missing employee or date")
