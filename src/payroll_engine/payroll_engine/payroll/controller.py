from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request

from ..core.exceptions import (
    DomainError,
    PayslipConflictError,
    PayslipNotFoundError,
    PeriodLockedError,
    ValidationError,
)
from ..container import Container
from .daily import DayRecord
from .monthly import PayrollBatch

logger = logging.getLogger(__name__)


def _day_to_dict(day: DayRecord) -> dict:
    return {
        "work_date": day.work_date.isoformat(),
        "status": day.status.value,
        "income": str(day.income),
        "wage": str(day.wage),
        "ot_pay": str(day.ot_pay),
        "incentive": str(day.incentive),
        "deduction": str(day.deduction),
        "late_minutes": day.late_minutes,
        "ot_hours": str(day.ot_hours),
        "note": day.note,
    }


def _batch_to_dict(batch: PayrollBatch, *, with_days: bool = False) -> dict:
    data = {
        "company_id": batch.company_id,
        "month_id": batch.month_id,
        "total_net": str(batch.total_net),
        "payslips": [p.to_dict() for p in batch.payslips],
        "skipped_paid": list(batch.skipped_paid),
        "errors": [{"employee_id": e.employee_id, "message": e.message} for e in batch.errors],
    }
    if with_days:
        data["days"] = {
            emp_id: [_day_to_dict(d) for d in days] for emp_id, days in batch.days_by_employee.items()
        }
    return data


def register(app: Flask, container: Container) -> None:
    def json_errors(view):
        """Map domain errors to JSON: 400 invalid input, 404 unknown payslip, 409 locked or conflicting write."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except PeriodLockedError as e:
                return jsonify({"success": False, "message": str(e)}), 409
            except PayslipConflictError as e:
                return jsonify({"success": False, "message": str(e)}), 409
            except PayslipNotFoundError as e:
                return jsonify({"success": False, "message": str(e)}), 404
            except ValidationError as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except DomainError as e:
                return jsonify({"success": False, "message": str(e)}), 400

        return wrapper

    svc = container.payroll_service

    @app.route("/api/payroll/<company_id>/<month_id>", methods=["GET"], endpoint="api_payroll_month")
    @json_errors
    def api_payroll_month(company_id: str, month_id: str):
        batch = svc.compute_monthly_payroll(company_id, month_id)
        with_days = request.args.get("days") in {"1", "true"}
        return jsonify({
            "success": True,
            "closed": svc.is_period_closed(company_id, month_id),
            **_batch_to_dict(batch, with_days=with_days),
        })

    @app.route("/api/payroll/<company_id>/<month_id>/recompute", methods=["POST"], endpoint="api_payroll_recompute")
    @json_errors
    def api_payroll_recompute(company_id: str, month_id: str):
        batch = svc.recompute_month(company_id, month_id)
        return jsonify({"success": True, **_batch_to_dict(batch)})

    @app.route(
        "/api/payroll/<company_id>/<month_id>/payslips/<employee_id>",
        methods=["POST"],
        endpoint="api_payroll_save_payslip",
    )
    @json_errors
    def api_payroll_save_payslip(company_id: str, month_id: str, employee_id: str):
        data = request.get_json(silent=True) or {}
        payslip = svc.update_adjustments(
            company_id,
            month_id,
            employee_id,
            incomes=data.get("custom_incomes"),
            deductions=data.get("custom_deductions"),
        )
        return jsonify({"success": True, "message": "Đã lưu phiếu lương", "payslip": payslip.to_dict()})

    @app.route("/api/payroll/<company_id>/<month_id>/close", methods=["POST"], endpoint="api_payroll_close")
    @json_errors
    def api_payroll_close(company_id: str, month_id: str):
        paid = svc.close_period(company_id, month_id)
        logger.info("Period %s/%s closed via API", company_id, month_id)
        return jsonify({
            "success": True,
            "message": f"Đã chốt kỳ lương {month_id}",
            "payslips": [p.to_dict() for p in paid],
        })

    @app.route("/api/payroll/<company_id>/years/<int:year>", methods=["GET"], endpoint="api_payroll_year")
    @json_errors
    def api_payroll_year(company_id: str, year: int):
        summary = svc.compute_yearly_summary(company_id, year)
        return jsonify({"success": True, **summary.to_dict()})
