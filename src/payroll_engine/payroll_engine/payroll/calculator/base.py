from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...employees.model import Employee


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern per salary type)."""

    @abstractmethod
    def day_wage(self, employee: Employee) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def earns_wage(self, *, attended: bool) -> bool:
        """Whether a scheduled work day pays the day wage."""
        raise NotImplementedError

    @abstractmethod
    def monthly_base(self, employee: Employee, *, earned_wages: Decimal) -> Decimal:
        """Base salary line of the payslip (also the SSO/tax base)."""
        raise NotImplementedError
