from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_range, parse_month_id
from ..common.validators import require_amount, require_non_empty
from ..core.enums import PayslipStatus
from ..core.exceptions import InvalidAdjustmentError, PayslipNotFoundError, PeriodLockedError, ValidationError
from ..employees.repository import EmployeeRepository
from ..payslips.lifecycle import PayslipLifecycle
from ..payslips.model import CustomItem, Payslip
from ..payslips.repository import PayslipRepository
from ..reports.yearly import YearlySummary, summarize_year
from ..schedules.repository import ScheduleRepository
from ..settings.model import CompanyConfig
from ..settings.repository import SettingsRepository
from .monthly import MonthlyPayrollCalculator, PayrollBatch

logger = logging.getLogger(__name__)


def parse_custom_items(raw: Optional[Iterable[Any]], field_name: str) -> tuple[CustomItem, ...]:
    """Validate manual items coming from the outside ({label, amount} dicts or CustomItem)."""
    items: list[CustomItem] = []
    for i, item in enumerate(raw or []):
        if isinstance(item, CustomItem):
            label, amount = item.label, item.amount
        elif isinstance(item, dict):
            label, amount = item.get("label"), item.get("amount")
        else:
            raise InvalidAdjustmentError(f"{field_name}[{i}] không hợp lệ")
        try:
            label = require_non_empty(str(label or ""), f"{field_name}[{i}].label")
        except ValidationError as e:
            raise InvalidAdjustmentError(str(e))
        items.append(CustomItem(label=label, amount=require_amount(amount, f"{field_name}[{i}].amount")))
    return tuple(items)


class PayrollService:
    """Monthly payroll use cases: compute, recompute, save, close period, yearly report."""

    def __init__(
        self,
        employees: EmployeeRepository,
        schedules: ScheduleRepository,
        attendance: AttendanceRepository,
        settings: SettingsRepository,
        payslips: PayslipRepository,
        *,
        calculator: Optional[MonthlyPayrollCalculator] = None,
        lifecycle: Optional[PayslipLifecycle] = None,
        max_workers: int = 1,
    ):
        self._employees = employees
        self._schedules = schedules
        self._attendance = attendance
        self._settings = settings
        self._payslips = payslips
        self._calculator = calculator or MonthlyPayrollCalculator()
        self._lifecycle = lifecycle or PayslipLifecycle()
        self._max_workers = max(1, int(max_workers))

    def _load_config(self, company_id: str) -> CompanyConfig:
        config = self._settings.get_company_config(company_id)
        if config is None:
            logger.warning("No configuration for company=%s; using zero-rate defaults", company_id)
            return CompanyConfig.defaults()
        return config

    def compute_monthly_payroll(self, company_id: str, month_id: str) -> PayrollBatch:
        """Draft payslips for a period. Nothing is written."""
        start, end = month_range(month_id)
        employees = list(self._employees.list_active(company_id))
        entries = list(self._schedules.list_range(company_id, start=start, end=end))
        attendance = list(self._attendance.list_range(company_id, start=start, end=end))
        config = self._load_config(company_id)
        existing = list(self._payslips.list_for_month(company_id, month_id))

        kwargs = dict(
            company_id=company_id,
            month_id=month_id,
            employees=employees,
            entries=entries,
            attendance=attendance,
            config=config,
            existing=existing,
        )
        if self._max_workers > 1 and len(employees) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                return self._calculator.compute_month(executor=pool, **kwargs)
        return self._calculator.compute_month(**kwargs)

    def recompute_month(self, company_id: str, month_id: str) -> PayrollBatch:
        """Recompute and write back saved payslips in place; paid ones are never touched."""
        batch = self.compute_monthly_payroll(company_id, month_id)
        for p in batch.payslips:
            if p.status != PayslipStatus.SAVED:
                continue
            if not self._payslips.replace_unless_paid(p):
                # Closed (or removed) between read and write.
                logger.info("Recompute skipped employee=%s month=%s (locked)", p.employee_id, month_id)
                batch.skipped_paid.append(p.employee_id)
        return batch

    def save_payslip(self, payslip: Payslip) -> Payslip:
        parse_month_id(payslip.month_id)
        parse_custom_items(payslip.custom_incomes, "custom_incomes")
        parse_custom_items(payslip.custom_deductions, "custom_deductions")

        saved = self._payslips.save(self._lifecycle.mark_saved(payslip))
        logger.info(
            "Saved payslip company=%s employee=%s month=%s net=%s",
            saved.company_id,
            saved.employee_id,
            saved.month_id,
            saved.net_total,
        )
        return saved

    def update_adjustments(
        self,
        company_id: str,
        month_id: str,
        employee_id: str,
        *,
        incomes: Optional[Iterable[Any]] = None,
        deductions: Optional[Iterable[Any]] = None,
    ) -> Payslip:
        """Replace an employee's manual items on a fresh computation and save it."""
        custom_incomes = parse_custom_items(incomes, "custom_incomes")
        custom_deductions = parse_custom_items(deductions, "custom_deductions")

        batch = self.compute_monthly_payroll(company_id, month_id)
        if employee_id in batch.skipped_paid:
            raise PeriodLockedError(
                f"Kỳ lương {month_id} đã chốt",
                employee_id=employee_id,
                month_id=month_id,
            )
        payslip = batch.get(employee_id)
        if payslip is None:
            raise PayslipNotFoundError(f"Không có phiếu lương cho nhân viên {employee_id} trong kỳ {month_id}")

        adjusted = self._lifecycle.apply_adjustments(payslip, incomes=custom_incomes, deductions=custom_deductions)
        return self.save_payslip(adjusted)

    def close_period(self, company_id: str, month_id: str) -> list[Payslip]:
        """Mark every payslip of the month as paid in one atomic write."""
        batch = self.compute_monthly_payroll(company_id, month_id)
        if batch.skipped_paid:
            raise PeriodLockedError(f"Kỳ lương {month_id} đã chốt trước đó", month_id=month_id)
        if batch.errors:
            failed = ", ".join(e.employee_id for e in batch.errors)
            raise ValidationError(f"Không thể chốt kỳ {month_id}: lỗi tính lương cho {failed}")

        computed_ids = {p.employee_id for p in batch.payslips}
        # Saved payslips of employees no longer active are closed as they are.
        leftovers = [
            p for p in self._payslips.list_for_month(company_id, month_id) if p.employee_id not in computed_ids
        ]

        to_close = batch.payslips + leftovers
        # What was read; the store refuses the close if any row moved since.
        expected = {p.employee_id: p.updated_at for p in to_close}
        paid = self._lifecycle.close_period(to_close, company_id=company_id, month_id=month_id)
        result = self._payslips.close_period(company_id, month_id, paid, expected=expected)
        logger.info("Closed period company=%s month=%s payslips=%d", company_id, month_id, len(result))
        return result

    def is_period_closed(self, company_id: str, month_id: str) -> bool:
        rows = self._payslips.list_for_month(company_id, month_id)
        return bool(rows) and all(p.status == PayslipStatus.PAID for p in rows)

    def compute_yearly_summary(self, company_id: str, year: int) -> YearlySummary:
        return summarize_year(self._payslips.list_for_company(company_id), company_id=company_id, year=year)
