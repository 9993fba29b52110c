from datetime import datetime
from decimal import Decimal

import pytest

from src.payroll_engine.payroll_engine.core.constants import DEFAULT_OT_MULTIPLIER
from src.payroll_engine.payroll_engine.core.enums import SalaryType
from src.payroll_engine.payroll_engine.rules.overtime import evaluate_overtime, hourly_wage, resolve_rate
from src.payroll_engine.payroll_engine.settings.model import CompanyConfig, OvertimeTypeDef

END = datetime(2026, 3, 2, 18, 0)

CONFIG = CompanyConfig(
    overtime_types=(
        OvertimeTypeDef(ot_type_id="ot15", rate_multiplier=Decimal("1.5")),
        OvertimeTypeDef(ot_type_id="holiday", rate_multiplier=Decimal("3"), enabled=False),
    )
)


def test_hourly_wage_for_monthly_and_daily():
    assert hourly_wage(Decimal("24000"), SalaryType.MONTHLY) == Decimal("100")
    assert hourly_wage(Decimal("800"), SalaryType.DAILY) == Decimal("100")


def test_paid_hours_capped_by_approval():
    result = evaluate_overtime(
        scheduled_end=END,
        clock_out=datetime(2026, 3, 2, 21, 0),
        approved_hours=Decimal("2"),
        rate_multiplier=Decimal("1.5"),
        hourly=Decimal("100"),
    )
    assert result.paid_hours == Decimal("2")
    assert result.pay == Decimal("300")


def test_paid_hours_limited_by_actual_stay():
    result = evaluate_overtime(
        scheduled_end=END,
        clock_out=datetime(2026, 3, 2, 19, 30),
        approved_hours=Decimal("3"),
        rate_multiplier=Decimal("2"),
        hourly=Decimal("100"),
    )
    assert result.paid_hours == Decimal("1.5")
    assert result.pay == Decimal("300")


@pytest.mark.parametrize(
    "clock_out",
    [None, datetime(2026, 3, 2, 17, 30), datetime(2026, 3, 2, 18, 0)],
)
def test_no_overtime_without_stay_past_end(clock_out):
    result = evaluate_overtime(
        scheduled_end=END,
        clock_out=clock_out,
        approved_hours=Decimal("2"),
        rate_multiplier=Decimal("1.5"),
        hourly=Decimal("100"),
    )
    assert result.paid_hours == 0
    assert result.pay == 0


def test_overnight_clock_out_is_measured_across_midnight():
    result = evaluate_overtime(
        scheduled_end=datetime(2026, 3, 2, 23, 0),
        clock_out=datetime(2026, 3, 3, 1, 0),
        approved_hours=Decimal("4"),
        rate_multiplier=Decimal("1"),
        hourly=Decimal("50"),
    )
    assert result.paid_hours == Decimal("2")
    assert result.pay == Decimal("100")


def test_resolve_rate_known_unknown_and_disabled():
    assert resolve_rate("ot15", CONFIG).multiplier == Decimal("1.5")

    unknown = resolve_rate("gone", CONFIG)
    assert unknown.known is False
    assert unknown.multiplier == DEFAULT_OT_MULTIPLIER

    disabled = resolve_rate("holiday", CONFIG)
    assert disabled.enabled is False
    assert disabled.multiplier == 0

    assert resolve_rate(None, CONFIG).multiplier == 0
