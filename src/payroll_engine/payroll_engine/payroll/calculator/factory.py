from __future__ import annotations

from dataclasses import dataclass

from ...core.enums import SalaryType
from .base import SalaryCalculator
from .daily_calculator import DailySalaryCalculator
from .monthly_calculator import MonthlySalaryCalculator


@dataclass
class SalaryCalculatorFactory:
    """Factory Pattern: choose the salary strategy for an employee."""

    def for_salary_type(self, salary_type: SalaryType) -> SalaryCalculator:
        if salary_type == SalaryType.DAILY:
            return DailySalaryCalculator()
        return MonthlySalaryCalculator()
