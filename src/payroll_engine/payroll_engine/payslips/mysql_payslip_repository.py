from __future__ import annotations

import json
from datetime import datetime
from typing import Mapping, Optional, Sequence

from ..core.enums import PayslipStatus
from ..core.exceptions import PayslipConflictError, PeriodLockedError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, select_for_update
from .model import Payslip
from .repository import PayslipRepository, close_conflicts

_UPSERT = """
    INSERT INTO payslips(company_id, employee_id, month_id, status, net_total, data, updated_at)
    VALUES(%s,%s,%s,%s,%s,%s,%s)
    ON DUPLICATE KEY UPDATE status=VALUES(status), net_total=VALUES(net_total),
                            data=VALUES(data), updated_at=VALUES(updated_at)
"""


def _row_params(p: Payslip) -> tuple:
    return (
        p.company_id,
        p.employee_id,
        p.month_id,
        p.status.value,
        p.net_total,
        json.dumps(p.to_dict(), ensure_ascii=False),
        p.updated_at,
    )


def _from_row(r: dict) -> Payslip:
    data = r["data"]
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8")
    doc = json.loads(data) if isinstance(data, str) else dict(data)
    # Status column is authoritative: close_period only flips it there.
    doc["status"] = r["status"]
    return Payslip.from_dict(doc)


class MySQLPayslipRepository(PayslipRepository):
    """Payslip store; each write is a transaction that first locks the month with SELECT ... FOR UPDATE."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, company_id: str, employee_id: str, month_id: str) -> Optional[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT status, data FROM payslips WHERE company_id=%s AND employee_id=%s AND month_id=%s",
                (company_id, employee_id, month_id),
            )
            r = fetchone(cur)
            return _from_row(r) if r else None

    def list_for_month(self, company_id: str, month_id: str) -> Sequence[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT status, data FROM payslips WHERE company_id=%s AND month_id=%s ORDER BY employee_id ASC",
                (company_id, month_id),
            )
            return [_from_row(r) for r in fetchall(cur)]

    def list_for_company(self, company_id: str) -> Sequence[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT status, data FROM payslips WHERE company_id=%s ORDER BY month_id ASC, employee_id ASC",
                (company_id,),
            )
            return [_from_row(r) for r in fetchall(cur)]

    def _lock_month(self, cur, company_id: str, month_id: str) -> list[Payslip]:
        """Row-lock every payslip of the month; the index range lock also blocks new inserts."""
        rows = select_for_update(
            cur,
            "SELECT status, data FROM payslips WHERE company_id=%s AND month_id=%s",
            (company_id, month_id),
        )
        return [_from_row(r) for r in rows]

    @staticmethod
    def _is_closed(month_rows: Sequence[Payslip]) -> bool:
        return any(p.status == PayslipStatus.PAID for p in month_rows)

    def save(self, payslip: Payslip) -> Payslip:
        with db_cursor(self._conn_factory) as (_, cur):
            if self._is_closed(self._lock_month(cur, payslip.company_id, payslip.month_id)):
                raise PeriodLockedError(
                    f"Kỳ lương {payslip.month_id} đã chốt",
                    employee_id=payslip.employee_id,
                    month_id=payslip.month_id,
                )
            cur.execute(_UPSERT, _row_params(payslip))
        return payslip

    def replace_unless_paid(self, payslip: Payslip) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            month_rows = self._lock_month(cur, payslip.company_id, payslip.month_id)
            stored = {p.employee_id for p in month_rows}
            if payslip.employee_id not in stored or self._is_closed(month_rows):
                return False
            cur.execute(_UPSERT, _row_params(payslip))
            return True

    def close_period(
        self,
        company_id: str,
        month_id: str,
        payslips: Sequence[Payslip],
        *,
        expected: Optional[Mapping[str, Optional[datetime]]] = None,
    ) -> list[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            month_rows = self._lock_month(cur, company_id, month_id)
            if self._is_closed(month_rows):
                raise PeriodLockedError(f"Kỳ lương {month_id} đã chốt trước đó", month_id=month_id)
            conflicts = close_conflicts(month_rows, payslips, expected)
            if conflicts:
                raise PayslipConflictError(
                    f"Phiếu lương kỳ {month_id} đã thay đổi trong lúc chốt: {', '.join(conflicts)}"
                )

            for p in payslips:
                if p.company_id != company_id or p.month_id != month_id or p.status != PayslipStatus.PAID:
                    raise ValidationError(f"Phiếu lương {p.employee_id} không hợp lệ để chốt kỳ {month_id}")
                cur.execute(_UPSERT, _row_params(p))
        return list(payslips)
