from __future__ import annotations

from decimal import Decimal

from ...common.money import ZERO, to_decimal
from ...employees.model import Employee
from .base import SalaryCalculator


class DailySalaryCalculator(SalaryCalculator):
    """No work, no pay: the base is the sum of wages for attended days."""

    def day_wage(self, employee: Employee) -> Decimal:
        return max(to_decimal(employee.base_salary), ZERO)

    def earns_wage(self, *, attended: bool) -> bool:
        return attended

    def monthly_base(self, employee: Employee, *, earned_wages: Decimal) -> Decimal:
        return earned_wages
