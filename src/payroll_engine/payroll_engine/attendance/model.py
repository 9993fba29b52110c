from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi chấm công trong ngày."""

    employee_id: str
    work_date: date
    clock_in: Optional[datetime]
    clock_out: Optional[datetime] = None
