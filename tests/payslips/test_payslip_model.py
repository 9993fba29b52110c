from datetime import datetime
from decimal import Decimal

from src.payroll_engine.payroll_engine.core.enums import DeductionProfile, PayslipStatus
from src.payroll_engine.payroll_engine.payslips.model import CustomItem, Payslip


def test_net_total_from_line_items():
    p = Payslip(
        employee_id="e1",
        month_id="2026-03",
        company_id="c1",
        base_salary=Decimal("20000"),
        ot_pay=Decimal("300"),
        incentive=Decimal("200"),
        late_deduction=Decimal("150"),
        social_security=Decimal("750"),
        tax=Decimal("600"),
        custom_incomes=(CustomItem("bonus", Decimal("1000")),),
        custom_deductions=(CustomItem("advance", Decimal("500.5")),),
    ).with_net_total()

    assert p.total_income == Decimal("21500")
    assert p.total_deduction == Decimal("2000.5")
    assert p.net_total == Decimal("19499.50")


def test_from_dict_fills_missing_fields():
    p = Payslip.from_dict(
        {
            "employee_id": 7,
            "month_id": "2026-03",
            "company_id": "c1",
            "base_salary": "15000",
            "net_total": None,
            "custom_incomes": [{"label": "bonus", "amount": "100"}],
        }
    )
    assert p.employee_id == "7"
    assert p.ot_pay == 0
    assert p.net_total == 0
    assert p.status == PayslipStatus.SAVED
    assert p.deduction_profile == DeductionProfile.NONE
    assert p.custom_incomes[0].amount == Decimal("100")


def test_to_dict_serializes_money_as_strings():
    p = Payslip(
        employee_id="e1",
        month_id="2026-03",
        company_id="c1",
        base_salary=Decimal("100.50"),
        updated_at=datetime(2026, 4, 1, 8, 0),
    )
    data = p.to_dict()
    assert data["base_salary"] == "100.50"
    assert data["status"] == "draft"
    assert data["updated_at"] == "2026-04-01T08:00:00"
    assert Payslip.from_dict(data).updated_at == datetime(2026, 4, 1, 8, 0)
