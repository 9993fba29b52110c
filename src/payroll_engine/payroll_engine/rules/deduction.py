from __future__ import annotations

from decimal import Decimal

from ..common.money import ZERO, round_unit, to_decimal
from ..settings.model import DeductionRules


def late_deduction(late_minutes: int, rules: DeductionRules) -> Decimal:
    """Penalty for one day: minutes past the grace period times the rate, capped."""
    grace = max(0, int(rules.grace_period_minutes or 0))
    billable = max(0, int(late_minutes or 0) - grace)
    raw = Decimal(billable) * max(to_decimal(rules.deduction_per_minute), ZERO)
    return round_unit(cap_total(raw, rules))


def cap_total(amount: Decimal, rules: DeductionRules) -> Decimal:
    cap = to_decimal(rules.max_deduction_per_day)
    if cap > 0:
        return min(amount, cap)
    return amount
