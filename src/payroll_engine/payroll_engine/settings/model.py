from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class DeductionRules:
    """Quy tắc trừ tiền đi muộn của công ty.

    `max_deduction_per_day` = 0 nghĩa là không giới hạn.
    """

    grace_period_minutes: int = 0
    deduction_per_minute: Decimal = Decimal("0")
    max_deduction_per_day: Decimal = Decimal("0")


@dataclass(frozen=True)
class OvertimeTypeDef:
    ot_type_id: str
    rate_multiplier: Decimal
    name: str = ""
    enabled: bool = True


@dataclass(frozen=True)
class CompanyConfig:
    deduction_rules: DeductionRules = field(default_factory=DeductionRules)
    overtime_types: tuple[OvertimeTypeDef, ...] = ()

    @classmethod
    def defaults(cls) -> "CompanyConfig":
        """Zero-rate rules used when a company has no configuration."""
        return cls()

    def find_ot_type(self, ot_type_id: Optional[str]) -> Optional[OvertimeTypeDef]:
        for t in self.overtime_types:
            if t.ot_type_id == ot_type_id:
                return t
        return None
