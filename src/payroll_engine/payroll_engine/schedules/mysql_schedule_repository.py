from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from ..common.money import to_decimal
from ..core.enums import ScheduleKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import ScheduleEntry
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_range(self, company_id: str, *, start: date, end: date) -> Sequence[ScheduleEntry]:
        # Rows with a NULL work_date are returned too so the payroll run can report them.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, work_date, kind, start_time, end_time, ot_type, ot_hours, incentive, note
                FROM schedules
                WHERE company_id=%s AND (work_date BETWEEN %s AND %s OR work_date IS NULL)
                ORDER BY work_date ASC, employee_id ASC
                """,
                (company_id, start, end),
            )
            rows = fetchall(cur)

        out: list[ScheduleEntry] = []
        for r in rows:
            try:
                kind = ScheduleKind((r.get("kind") or "work").lower())
            except ValueError:
                logger.warning("Unknown schedule kind %r for employee=%s date=%s; skipped", r.get("kind"), r.get("employee_id"), r.get("work_date"))
                continue
            out.append(
                ScheduleEntry(
                    employee_id=str(r["employee_id"]),
                    work_date=r.get("work_date"),
                    kind=kind,
                    start_time=normalize_mysql_time(r.get("start_time")),
                    end_time=normalize_mysql_time(r.get("end_time")),
                    ot_type=r.get("ot_type") or None,
                    ot_hours=to_decimal(r.get("ot_hours")),
                    incentive=to_decimal(r.get("incentive")),
                    note=r.get("note") or None,
                )
            )
        return out
