from decimal import Decimal

from src.payroll_engine.payroll_engine.core.enums import SalaryType
from src.payroll_engine.payroll_engine.employees.model import Employee
from src.payroll_engine.payroll_engine.employees.mysql_employee_repository import parse_day_offs, parse_salary_type
from src.payroll_engine.payroll_engine.payroll.calculator.daily_calculator import DailySalaryCalculator
from src.payroll_engine.payroll_engine.payroll.calculator.factory import SalaryCalculatorFactory
from src.payroll_engine.payroll_engine.payroll.calculator.monthly_calculator import MonthlySalaryCalculator


def test_factory_picks_strategy_by_salary_type():
    factory = SalaryCalculatorFactory()
    assert isinstance(factory.for_salary_type(SalaryType.MONTHLY), MonthlySalaryCalculator)
    assert isinstance(factory.for_salary_type(SalaryType.DAILY), DailySalaryCalculator)


def test_monthly_base_ignores_earned_wages():
    emp = Employee(employee_id="e1", company_id="c1", name="A", role="staff", base_salary=Decimal("15000"))
    calc = MonthlySalaryCalculator()
    assert calc.day_wage(emp) == Decimal("500.00")
    assert calc.earns_wage(attended=False) is True
    assert calc.monthly_base(emp, earned_wages=Decimal("1")) == Decimal("15000")


def test_daily_pays_only_attended_days():
    calc = DailySalaryCalculator()
    assert calc.earns_wage(attended=False) is False
    assert calc.earns_wage(attended=True) is True


def test_legacy_salary_type_and_day_off_columns():
    assert parse_salary_type("รายวัน") == SalaryType.DAILY
    assert parse_salary_type("Monthly") == SalaryType.MONTHLY
    assert parse_salary_type(None) == SalaryType.MONTHLY
    assert parse_day_offs("5, 6,9,x") == frozenset({5, 6})
    assert parse_day_offs(None) == frozenset()
