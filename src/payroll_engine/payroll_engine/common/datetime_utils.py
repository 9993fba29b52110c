from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.exceptions import ValidationError

_MONTH_ID = re.compile(r"^(\d{4})-(\d{2})$")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_month_id(month_id: str) -> tuple[int, int]:
    """Split a `YYYY-MM` period key into (year, month)."""
    m = _MONTH_ID.match(month_id or "")
    if not m:
        raise ValidationError(f"Kỳ lương không hợp lệ: {month_id!r} (YYYY-MM)")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(f"Kỳ lương không hợp lệ: {month_id!r} (YYYY-MM)")
    return year, month


def month_range(month_id: str) -> tuple[date, date]:
    """First and last calendar day of a `YYYY-MM` period."""
    year, month = parse_month_id(month_id)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def shift_bounds(work_date: date, start: Optional[time], end: Optional[time]) -> tuple[Optional[datetime], Optional[datetime]]:
    """Absolute start/end of a shift; an end at or before start rolls to the next day."""
    start_dt = datetime.combine(work_date, start) if start else None
    end_dt = datetime.combine(work_date, end) if end else None
    if start_dt and end_dt and end_dt <= start_dt:
        end_dt += timedelta(days=1)
    return start_dt, end_dt
