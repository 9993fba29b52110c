from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from ..common.money import ZERO, round_cents, to_decimal
from ..core.enums import DeductionProfile, PayslipStatus, SalaryType


@dataclass(frozen=True)
class CustomItem:
    """Khoản thu nhập/khấu trừ nhập tay (thưởng, tạm ứng, ...)."""

    label: str
    amount: Decimal

    def to_dict(self) -> dict:
        return {"label": self.label, "amount": str(self.amount)}


@dataclass(frozen=True)
class Payslip:
    """Thực thể miền (domain): Phiếu lương tháng của một nhân viên.

    Khoá duy nhất: (company_id, employee_id, month_id).
    """

    employee_id: str
    month_id: str
    company_id: str
    employee_name: str = ""
    role: str = ""
    salary_type: SalaryType = SalaryType.MONTHLY
    base_salary: Decimal = ZERO
    ot_pay: Decimal = ZERO
    incentive: Decimal = ZERO
    late_deduction: Decimal = ZERO
    social_security: Decimal = ZERO
    tax: Decimal = ZERO
    deduction_profile: DeductionProfile = DeductionProfile.NONE
    custom_incomes: tuple[CustomItem, ...] = ()
    custom_deductions: tuple[CustomItem, ...] = ()
    net_total: Decimal = ZERO
    status: PayslipStatus = PayslipStatus.DRAFT
    work_days: int = 0
    late_count: int = 0
    late_minutes: int = 0
    absent_count: int = 0
    leave_count: int = 0
    ot_hours: Decimal = ZERO
    updated_at: Optional[datetime] = field(default=None, compare=False)

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.company_id, self.employee_id, self.month_id)

    @property
    def total_income(self) -> Decimal:
        return self.base_salary + self.ot_pay + self.incentive + sum((i.amount for i in self.custom_incomes), ZERO)

    @property
    def total_deduction(self) -> Decimal:
        return (
            self.late_deduction
            + self.social_security
            + self.tax
            + sum((d.amount for d in self.custom_deductions), ZERO)
        )

    def with_net_total(self) -> "Payslip":
        """Return a copy whose net_total is recomputed from its line items."""
        return replace(self, net_total=round_cents(self.total_income - self.total_deduction))

    def financials(self) -> tuple:
        """Money fields only; used to compare payslips ignoring timestamps/status."""
        return (
            self.base_salary,
            self.ot_pay,
            self.incentive,
            self.late_deduction,
            self.social_security,
            self.tax,
            self.custom_incomes,
            self.custom_deductions,
            self.net_total,
        )

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "month_id": self.month_id,
            "company_id": self.company_id,
            "employee_name": self.employee_name,
            "role": self.role,
            "salary_type": self.salary_type.value,
            "base_salary": str(self.base_salary),
            "ot_pay": str(self.ot_pay),
            "incentive": str(self.incentive),
            "late_deduction": str(self.late_deduction),
            "social_security": str(self.social_security),
            "tax": str(self.tax),
            "deduction_profile": self.deduction_profile.value,
            "custom_incomes": [i.to_dict() for i in self.custom_incomes],
            "custom_deductions": [d.to_dict() for d in self.custom_deductions],
            "net_total": str(self.net_total),
            "status": self.status.value,
            "work_days": self.work_days,
            "late_count": self.late_count,
            "late_minutes": self.late_minutes,
            "absent_count": self.absent_count,
            "leave_count": self.leave_count,
            "ot_hours": str(self.ot_hours),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Payslip":
        """Rebuild a payslip from a stored document; missing numbers read as 0."""

        def items(raw) -> tuple[CustomItem, ...]:
            return tuple(
                CustomItem(label=str(i.get("label") or ""), amount=to_decimal(i.get("amount")))
                for i in (raw or [])
            )

        updated_at = data.get("updated_at")
        if isinstance(updated_at, str):
            updated_at = datetime.fromisoformat(updated_at)

        return cls(
            employee_id=str(data["employee_id"]),
            month_id=str(data["month_id"]),
            company_id=str(data["company_id"]),
            employee_name=data.get("employee_name") or "",
            role=data.get("role") or "",
            salary_type=SalaryType(data.get("salary_type") or SalaryType.MONTHLY.value),
            base_salary=to_decimal(data.get("base_salary")),
            ot_pay=to_decimal(data.get("ot_pay")),
            incentive=to_decimal(data.get("incentive")),
            late_deduction=to_decimal(data.get("late_deduction")),
            social_security=to_decimal(data.get("social_security")),
            tax=to_decimal(data.get("tax")),
            deduction_profile=DeductionProfile(data.get("deduction_profile") or DeductionProfile.NONE.value),
            custom_incomes=items(data.get("custom_incomes")),
            custom_deductions=items(data.get("custom_deductions")),
            net_total=to_decimal(data.get("net_total")),
            status=PayslipStatus(data.get("status") or PayslipStatus.SAVED.value),
            work_days=int(data.get("work_days") or 0),
            late_count=int(data.get("late_count") or 0),
            late_minutes=int(data.get("late_minutes") or 0),
            absent_count=int(data.get("absent_count") or 0),
            leave_count=int(data.get("leave_count") or 0),
            ot_hours=to_decimal(data.get("ot_hours")),
            updated_at=updated_at,
        )
