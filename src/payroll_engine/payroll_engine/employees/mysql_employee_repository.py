from __future__ import annotations

from typing import Optional, Sequence

from ..common.money import to_decimal
from ..core.enums import SalaryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Employee
from .repository import EmployeeRepository

# Older rows store the salary type as typed in the (Thai) admin form.
_SALARY_TYPES = {
    "monthly": SalaryType.MONTHLY,
    "รายเดือน": SalaryType.MONTHLY,
    "salary": SalaryType.MONTHLY,
    "fulltime": SalaryType.MONTHLY,
    "daily": SalaryType.DAILY,
    "รายวัน": SalaryType.DAILY,
}


def parse_salary_type(value: Optional[str]) -> SalaryType:
    return _SALARY_TYPES.get((value or "").strip().lower(), SalaryType.MONTHLY)


def parse_day_offs(value: Optional[str]) -> frozenset[int]:
    """'5,6' -> {5, 6}; anything outside 0..6 is ignored."""
    out = set()
    for part in (value or "").split(","):
        part = part.strip()
        if part.isdigit() and 0 <= int(part) <= 6:
            out.add(int(part))
    return frozenset(out)


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self, company_id: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, company_id, full_name, role, base_salary, salary_type,
                       deduction_profile, day_offs, is_active
                FROM employees
                WHERE company_id=%s AND is_active=1 AND role<>'admin'
                ORDER BY employee_id ASC
                """,
                (company_id,),
            )
            rows = fetchall(cur)
            return [
                Employee(
                    employee_id=str(r["employee_id"]),
                    company_id=str(r["company_id"]),
                    name=r["full_name"],
                    role=r.get("role") or "",
                    base_salary=to_decimal(r.get("base_salary")),
                    salary_type=parse_salary_type(r.get("salary_type")),
                    deduction_profile_raw=r.get("deduction_profile") or "none",
                    day_offs=parse_day_offs(r.get("day_offs")),
                    is_active=bool(r.get("is_active", 1)),
                )
                for r in rows
            ]
