from __future__ import annotations

import threading
from datetime import datetime
from typing import Mapping, Optional, Sequence

from ..core.enums import PayslipStatus
from ..core.exceptions import PayslipConflictError, PeriodLockedError, ValidationError
from .model import Payslip
from .repository import PayslipRepository, close_conflicts

Key = tuple[str, str, str]


class InMemoryPayslipRepository(PayslipRepository):
    """Thread-safe payslip store.

    Writes are staged on a copy and swapped in under the lock, so a failing
    `close_period` leaves the previous state untouched.
    """

    def __init__(self, payslips: Sequence[Payslip] = ()):
        self._lock = threading.RLock()
        self._rows: dict[Key, Payslip] = {p.key: p for p in payslips}

    def get(self, company_id: str, employee_id: str, month_id: str) -> Optional[Payslip]:
        with self._lock:
            return self._rows.get((company_id, employee_id, month_id))

    def list_for_month(self, company_id: str, month_id: str) -> list[Payslip]:
        with self._lock:
            rows = self._month_rows(company_id, month_id)
        return sorted(rows, key=lambda p: p.employee_id)

    def list_for_company(self, company_id: str) -> list[Payslip]:
        with self._lock:
            rows = [p for (c, _, _), p in self._rows.items() if c == company_id]
        return sorted(rows, key=lambda p: (p.month_id, p.employee_id))

    def _month_rows(self, company_id: str, month_id: str) -> list[Payslip]:
        return [p for (c, _, m), p in self._rows.items() if c == company_id and m == month_id]

    def _is_closed(self, company_id: str, month_id: str) -> bool:
        return any(p.status == PayslipStatus.PAID for p in self._month_rows(company_id, month_id))

    def _ensure_open(self, company_id: str, month_id: str, *, employee_id: Optional[str] = None) -> None:
        if self._is_closed(company_id, month_id):
            raise PeriodLockedError(f"Kỳ lương {month_id} đã chốt", employee_id=employee_id, month_id=month_id)

    def save(self, payslip: Payslip) -> Payslip:
        with self._lock:
            self._ensure_open(payslip.company_id, payslip.month_id, employee_id=payslip.employee_id)
            self._rows[payslip.key] = payslip
            return payslip

    def replace_unless_paid(self, payslip: Payslip) -> bool:
        with self._lock:
            if self._rows.get(payslip.key) is None or self._is_closed(payslip.company_id, payslip.month_id):
                return False
            self._rows[payslip.key] = payslip
            return True

    def close_period(
        self,
        company_id: str,
        month_id: str,
        payslips: Sequence[Payslip],
        *,
        expected: Optional[Mapping[str, Optional[datetime]]] = None,
    ) -> list[Payslip]:
        with self._lock:
            self._ensure_open(company_id, month_id)
            conflicts = close_conflicts(self._month_rows(company_id, month_id), payslips, expected)
            if conflicts:
                raise PayslipConflictError(
                    f"Phiếu lương kỳ {month_id} đã thay đổi trong lúc chốt: {', '.join(conflicts)}"
                )

            staged = dict(self._rows)
            for p in payslips:
                staged[p.key] = self._stage_paid(p, company_id=company_id, month_id=month_id)
            self._rows = staged
            return list(payslips)

    @staticmethod
    def _stage_paid(payslip: Payslip, *, company_id: str, month_id: str) -> Payslip:
        if payslip.company_id != company_id or payslip.month_id != month_id:
            raise ValidationError(f"Phiếu lương {payslip.employee_id} không thuộc kỳ {month_id}")
        if payslip.status != PayslipStatus.PAID:
            raise ValidationError(f"Phiếu lương {payslip.employee_id} chưa ở trạng thái paid")
        return payslip
