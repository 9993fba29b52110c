from dataclasses import replace
from datetime import datetime
from decimal import Decimal

import pytest

from src.payroll_engine.payroll_engine.core.enums import PayslipStatus
from src.payroll_engine.payroll_engine.core.exceptions import PayslipConflictError, PeriodLockedError
from src.payroll_engine.payroll_engine.payslips.memory_repository import InMemoryPayslipRepository
from src.payroll_engine.payroll_engine.payslips.model import Payslip


def slip(employee_id, status=PayslipStatus.SAVED, month_id="2026-03", base="1000"):
    return Payslip(
        employee_id=employee_id,
        month_id=month_id,
        company_id="c1",
        base_salary=Decimal(base),
        status=status,
    ).with_net_total()


def test_save_and_list():
    repo = InMemoryPayslipRepository()
    repo.save(slip("e2"))
    repo.save(slip("e1"))
    repo.save(slip("e1", month_id="2026-04"))

    assert [p.employee_id for p in repo.list_for_month("c1", "2026-03")] == ["e1", "e2"]
    assert len(repo.list_for_company("c1")) == 3
    assert repo.get("c1", "e1", "2026-04") is not None


def test_save_over_paid_row_is_rejected():
    repo = InMemoryPayslipRepository([slip("e1", PayslipStatus.PAID)])
    with pytest.raises(PeriodLockedError):
        repo.save(slip("e1", base="5000"))
    assert repo.get("c1", "e1", "2026-03").base_salary == Decimal("1000")


def test_replace_unless_paid():
    repo = InMemoryPayslipRepository([slip("e1"), slip("e2", PayslipStatus.PAID)])

    assert repo.replace_unless_paid(slip("e1", base="2000")) is True
    assert repo.replace_unless_paid(slip("e2", base="2000")) is False
    assert repo.replace_unless_paid(slip("e3")) is False

    assert repo.get("c1", "e1", "2026-03").base_salary == Decimal("2000")
    assert repo.get("c1", "e2", "2026-03").base_salary == Decimal("1000")
    assert repo.get("c1", "e3", "2026-03") is None


def test_close_period_is_all_or_nothing():
    class FailingRepo(InMemoryPayslipRepository):
        @staticmethod
        def _stage_paid(payslip, *, company_id, month_id):
            if payslip.employee_id == "e2":
                raise RuntimeError("disk full")
            return payslip

    repo = FailingRepo([slip("e1"), slip("e2")])
    paid = [replace(p, status=PayslipStatus.PAID) for p in repo.list_for_month("c1", "2026-03")]

    with pytest.raises(RuntimeError):
        repo.close_period("c1", "2026-03", paid)

    assert {p.status for p in repo.list_for_month("c1", "2026-03")} == {PayslipStatus.SAVED}


def test_close_period_twice_is_locked():
    repo = InMemoryPayslipRepository([slip("e1")])
    paid = [replace(slip("e1"), status=PayslipStatus.PAID)]
    repo.close_period("c1", "2026-03", paid)

    with pytest.raises(PeriodLockedError):
        repo.close_period("c1", "2026-03", paid)


def test_closed_month_takes_no_new_rows():
    repo = InMemoryPayslipRepository([slip("e1", PayslipStatus.PAID)])

    with pytest.raises(PeriodLockedError):
        repo.save(slip("e2"))
    assert repo.get("c1", "e2", "2026-03") is None
    # Other months stay open.
    repo.save(slip("e2", month_id="2026-04"))


def test_replace_unless_paid_in_closed_month():
    # Legacy mixed month: one row paid, one still saved.
    repo = InMemoryPayslipRepository([slip("e1", PayslipStatus.PAID), slip("e2")])
    assert repo.replace_unless_paid(slip("e2", base="2000")) is False
    assert repo.get("c1", "e2", "2026-03").base_salary == Decimal("1000")


def test_close_refuses_to_leave_stored_rows_behind():
    repo = InMemoryPayslipRepository([slip("e1"), slip("e2")])
    paid = [replace(slip("e1"), status=PayslipStatus.PAID)]

    with pytest.raises(PayslipConflictError):
        repo.close_period("c1", "2026-03", paid)
    assert {p.status for p in repo.list_for_month("c1", "2026-03")} == {PayslipStatus.SAVED}


def test_close_refuses_rows_changed_after_they_were_read():
    read_at = datetime(2026, 4, 1, 8, 0)
    repo = InMemoryPayslipRepository([replace(slip("e1"), updated_at=read_at)])
    repo.save(replace(slip("e1", base="3000"), updated_at=datetime(2026, 4, 1, 8, 5)))
    paid = [replace(slip("e1"), status=PayslipStatus.PAID)]

    with pytest.raises(PayslipConflictError):
        repo.close_period("c1", "2026-03", paid, expected={"e1": read_at})
    assert repo.get("c1", "e1", "2026-03").base_salary == Decimal("3000")

    repo.close_period("c1", "2026-03", paid, expected={"e1": datetime(2026, 4, 1, 8, 5)})
    assert repo.get("c1", "e1", "2026-03").status == PayslipStatus.PAID
