from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_datetime
from .model import AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    """Raw clock-in/out rows; duplicates per day are merged later by AttendanceIndex."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_range(self, company_id: str, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, work_date, clock_in, clock_out
                FROM attendance_records
                WHERE company_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC, employee_id ASC, clock_in ASC
                """,
                (company_id, start, end),
            )
            return [
                AttendanceRecord(
                    employee_id=str(r["employee_id"]),
                    work_date=r["work_date"],
                    clock_in=normalize_mysql_datetime(r.get("clock_in")),
                    clock_out=normalize_mysql_datetime(r.get("clock_out")),
                )
                for r in fetchall(cur)
            ]
