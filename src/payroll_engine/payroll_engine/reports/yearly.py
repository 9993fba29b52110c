from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Mapping, Union

from ..common.money import ZERO, to_decimal

PayslipLike = Union[Mapping[str, Any], Any]


@dataclass
class EmployeeYearTotals:
    employee_id: str
    name: str = ""
    role: str = ""
    total_income: Decimal = ZERO
    total_net: Decimal = ZERO
    total_social_security: Decimal = ZERO
    total_tax: Decimal = ZERO
    months: int = 0

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "name": self.name,
            "role": self.role,
            "total_income": str(self.total_income),
            "total_net": str(self.total_net),
            "total_social_security": str(self.total_social_security),
            "total_tax": str(self.total_tax),
            "months": self.months,
        }


@dataclass
class YearlySummary:
    company_id: str
    year: int
    total_net: Decimal = ZERO
    total_social_security: Decimal = ZERO
    total_tax: Decimal = ZERO
    monthly_net: list[Decimal] = field(default_factory=lambda: [ZERO] * 12)
    employees: list[EmployeeYearTotals] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "company_id": self.company_id,
            "year": self.year,
            "total_net": str(self.total_net),
            "total_social_security": str(self.total_social_security),
            "total_tax": str(self.total_tax),
            "monthly_net": [str(v) for v in self.monthly_net],
            "employees": [e.to_dict() for e in self.employees],
        }


def _field(slip: PayslipLike, name: str) -> Any:
    if isinstance(slip, Mapping):
        return slip.get(name)
    return getattr(slip, name, None)


def summarize_year(payslips: Iterable[PayslipLike], *, company_id: str, year: int) -> YearlySummary:
    """Roll persisted payslips (objects or raw documents) up into one year.

    Only payslips of `company_id` whose month_id starts with the year count.
    Missing numeric fields count as 0; income is base + OT + incentive.
    """
    summary = YearlySummary(company_id=company_id, year=int(year))
    prefix = f"{int(year):04d}-"
    per_employee: dict[str, EmployeeYearTotals] = {}

    for slip in payslips:
        slip_company = _field(slip, "company_id")
        month_id = str(_field(slip, "month_id") or "")
        if slip_company not in (None, company_id) or not month_id.startswith(prefix):
            continue

        net = to_decimal(_field(slip, "net_total"))
        sso = to_decimal(_field(slip, "social_security"))
        tax = to_decimal(_field(slip, "tax"))
        income = (
            to_decimal(_field(slip, "base_salary"))
            + to_decimal(_field(slip, "ot_pay"))
            + to_decimal(_field(slip, "incentive"))
        )

        summary.total_net += net
        summary.total_social_security += sso
        summary.total_tax += tax

        month_part = month_id[len(prefix):]
        if month_part.isdigit() and 1 <= int(month_part) <= 12:
            summary.monthly_net[int(month_part) - 1] += net

        emp_id = str(_field(slip, "employee_id") or "")
        totals = per_employee.get(emp_id)
        if totals is None:
            totals = EmployeeYearTotals(
                employee_id=emp_id,
                name=_field(slip, "employee_name") or "",
                role=_field(slip, "role") or "",
            )
            per_employee[emp_id] = totals
        totals.total_income += income
        totals.total_net += net
        totals.total_social_security += sso
        totals.total_tax += tax
        totals.months += 1

    summary.employees = sorted(per_employee.values(), key=lambda e: e.employee_id)
    return summary
