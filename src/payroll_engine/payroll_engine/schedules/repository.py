from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import ScheduleEntry


class ScheduleRepository(Protocol):
    def list_range(self, company_id: str, *, start: date, end: date) -> Sequence[ScheduleEntry]:
        """All schedule rows of a company between start and end (inclusive)."""

        raise NotImplementedError
