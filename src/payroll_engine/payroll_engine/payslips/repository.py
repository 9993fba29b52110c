from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping, Optional, Protocol, Sequence

from .model import Payslip


class PayslipRepository(Protocol):
    """Persisted payslips, keyed by (company_id, employee_id, month_id).

    Implementations must make `save`, `replace_unless_paid` and `close_period`
    atomic with respect to each other. A month holding any paid row is closed.
    """

    def get(self, company_id: str, employee_id: str, month_id: str) -> Optional[Payslip]:
        raise NotImplementedError

    def list_for_month(self, company_id: str, month_id: str) -> Sequence[Payslip]:
        raise NotImplementedError

    def list_for_company(self, company_id: str) -> Sequence[Payslip]:
        raise NotImplementedError

    def save(self, payslip: Payslip) -> Payslip:
        """Insert or overwrite; raises PeriodLockedError if the month is closed."""

        raise NotImplementedError

    def replace_unless_paid(self, payslip: Payslip) -> bool:
        """Overwrite an existing unpaid row. Returns False (no write) if missing or the month is closed."""

        raise NotImplementedError

    def close_period(
        self,
        company_id: str,
        month_id: str,
        payslips: Sequence[Payslip],
        *,
        expected: Optional[Mapping[str, Optional[datetime]]] = None,
    ) -> list[Payslip]:
        """Persist all payslips as paid in one transaction.

        `expected` maps employee_id to the `updated_at` the caller read (None for
        no stored row). Raises PayslipConflictError when stored rows moved since.
        """

        raise NotImplementedError


def close_conflicts(
    stored: Iterable[Payslip],
    payslips: Sequence[Payslip],
    expected: Optional[Mapping[str, Optional[datetime]]] = None,
) -> list[str]:
    """Employee ids whose stored row would be left behind or overwritten stale by a close."""
    incoming = {p.employee_id for p in payslips}
    conflicts: list[str] = []
    for current in stored:
        emp_id = current.employee_id
        if emp_id not in incoming:
            conflicts.append(emp_id)
        elif expected is not None and expected.get(emp_id) != current.updated_at:
            conflicts.append(emp_id)
    return sorted(conflicts)
