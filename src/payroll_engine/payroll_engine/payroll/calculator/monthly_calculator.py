from __future__ import annotations

from decimal import Decimal

from ...common.money import ZERO, round_cents, to_decimal
from ...core.constants import STANDARD_MONTH_DAYS
from ...employees.model import Employee
from .base import SalaryCalculator


class MonthlySalaryCalculator(SalaryCalculator):
    """Fixed monthly salary; every scheduled work day is paid, absence is only recorded."""

    def day_wage(self, employee: Employee) -> Decimal:
        return round_cents(max(to_decimal(employee.base_salary), ZERO) / STANDARD_MONTH_DAYS)

    def earns_wage(self, *, attended: bool) -> bool:
        return True

    def monthly_base(self, employee: Employee, *, earned_wages: Decimal) -> Decimal:
        return max(to_decimal(employee.base_salary), ZERO)
