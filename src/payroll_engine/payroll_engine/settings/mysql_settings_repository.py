from __future__ import annotations

from typing import Optional

from ..common.money import to_decimal
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CompanyConfig, DeductionRules, OvertimeTypeDef
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_company_config(self, company_id: str) -> Optional[CompanyConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT grace_period_minutes, deduction_per_minute, max_deduction_per_day
                FROM companies
                WHERE company_id=%s
                """,
                (company_id,),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                """
                SELECT ot_type_id, name, rate_multiplier, enabled
                FROM overtime_types
                WHERE company_id=%s
                ORDER BY ot_type_id ASC
                """,
                (company_id,),
            )
            ot_rows = fetchall(cur)

        return CompanyConfig(
            deduction_rules=DeductionRules(
                grace_period_minutes=int(r.get("grace_period_minutes") or 0),
                deduction_per_minute=to_decimal(r.get("deduction_per_minute")),
                max_deduction_per_day=to_decimal(r.get("max_deduction_per_day")),
            ),
            overtime_types=tuple(
                OvertimeTypeDef(
                    ot_type_id=str(o["ot_type_id"]),
                    name=o.get("name") or "",
                    rate_multiplier=to_decimal(o.get("rate_multiplier")),
                    enabled=bool(o.get("enabled", 1)),
                )
                for o in ot_rows
            ),
        )
