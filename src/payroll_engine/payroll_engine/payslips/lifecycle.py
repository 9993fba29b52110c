from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import PayslipStatus
from ..core.exceptions import InvalidTransitionError, PeriodLockedError, ValidationError
from .model import CustomItem, Payslip

_ALLOWED: dict[PayslipStatus, frozenset[PayslipStatus]] = {
    PayslipStatus.DRAFT: frozenset({PayslipStatus.SAVED, PayslipStatus.PAID}),
    PayslipStatus.SAVED: frozenset({PayslipStatus.SAVED, PayslipStatus.PAID}),
    PayslipStatus.PAID: frozenset(),
}


class PayslipLifecycle:
    """State machine draft -> saved -> paid.

    - draft: computed in memory, never persisted;
    - saved: persisted, editable, recomputed in place;
    - paid: persisted and locked; only reachable through `close_period`.
    """

    def __init__(self, *, clock: Callable[[], datetime] = now_local):
        self._clock = clock

    @staticmethod
    def can_edit(payslip: Payslip) -> bool:
        return payslip.status != PayslipStatus.PAID

    def ensure_editable(self, payslip: Payslip) -> None:
        if not self.can_edit(payslip):
            raise PeriodLockedError(
                f"Kỳ lương {payslip.month_id} đã chốt, phiếu lương bị khoá",
                employee_id=payslip.employee_id,
                month_id=payslip.month_id,
            )

    def transition(self, payslip: Payslip, target: PayslipStatus) -> Payslip:
        self.ensure_editable(payslip)
        if target not in _ALLOWED[payslip.status]:
            raise InvalidTransitionError(f"Không thể chuyển {payslip.status.value} -> {target.value}")
        return replace(payslip, status=target, updated_at=self._clock())

    def mark_saved(self, payslip: Payslip) -> Payslip:
        return self.transition(payslip.with_net_total(), PayslipStatus.SAVED)

    def apply_adjustments(
        self,
        payslip: Payslip,
        *,
        incomes: Iterable[CustomItem],
        deductions: Iterable[CustomItem],
    ) -> Payslip:
        self.ensure_editable(payslip)
        return replace(
            payslip,
            custom_incomes=tuple(incomes),
            custom_deductions=tuple(deductions),
        ).with_net_total()

    def close_period(self, payslips: Sequence[Payslip], *, company_id: str, month_id: str) -> list[Payslip]:
        """Mark every payslip of one period as paid, or none of them.

        Everything is validated before the first payslip is transformed.
        """
        if not payslips:
            raise ValidationError(f"Không có phiếu lương nào trong kỳ {month_id}")

        seen: set[str] = set()
        for p in payslips:
            if p.company_id != company_id or p.month_id != month_id:
                raise ValidationError(f"Phiếu lương {p.employee_id} không thuộc kỳ {company_id}/{month_id}")
            if p.employee_id in seen:
                raise ValidationError(f"Phiếu lương trùng cho nhân viên {p.employee_id}")
            seen.add(p.employee_id)
            self.ensure_editable(p)

        closed_at = self._clock()
        return [replace(p.with_net_total(), status=PayslipStatus.PAID, updated_at=closed_at) for p in payslips]
