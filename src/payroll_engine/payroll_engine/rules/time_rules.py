from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ClockStatus


@dataclass(frozen=True)
class ClockInResult:
    status: ClockStatus
    late_minutes: int = 0


def evaluate_clock_in(
    *,
    scheduled_start: Optional[datetime],
    clock_in: Optional[datetime],
    grace_period_minutes: int,
) -> ClockInResult:
    """Classify a clock-in against the scheduled start.

    Late minutes are whole minutes after the start (floored, never negative);
    the day is late only when they exceed the grace period.
    """
    if clock_in is None:
        return ClockInResult(status=ClockStatus.ABSENT)
    if scheduled_start is None:
        return ClockInResult(status=ClockStatus.ON_TIME)

    late_minutes = max(0, int((clock_in - scheduled_start).total_seconds() // 60))
    if late_minutes > max(0, int(grace_period_minutes or 0)):
        return ClockInResult(status=ClockStatus.LATE, late_minutes=late_minutes)
    return ClockInResult(status=ClockStatus.ON_TIME, late_minutes=late_minutes)
