from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from .model import AttendanceRecord


@dataclass
class AttendanceIndex:
    """Attendance keyed by (employee_id, work_date), built once per payroll run.

    When a day has several rows the earliest clock-in and the latest clock-out win.
    """

    _by_key: dict[tuple[str, date], AttendanceRecord] = field(default_factory=dict)

    @classmethod
    def build(cls, records: Iterable[AttendanceRecord]) -> "AttendanceIndex":
        index = cls()
        for rec in records:
            index._add(rec)
        return index

    def _add(self, rec: AttendanceRecord) -> None:
        key = (rec.employee_id, rec.work_date)
        current = self._by_key.get(key)
        if current is None:
            self._by_key[key] = rec
            return

        clock_in = min((t for t in (current.clock_in, rec.clock_in) if t), default=None)
        clock_out = max((t for t in (current.clock_out, rec.clock_out) if t), default=None)
        self._by_key[key] = AttendanceRecord(
            employee_id=rec.employee_id,
            work_date=rec.work_date,
            clock_in=clock_in,
            clock_out=clock_out,
        )

    def get(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_key.get((employee_id, work_date))

    def __len__(self) -> int:
        return len(self._by_key)
