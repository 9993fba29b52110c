"""Chốt kỳ lương từ dòng lệnh.

    python scripts/close_period.py <company_id> <YYYY-MM> [--dry-run]

Với --dry-run chỉ in bảng lương dự kiến, không ghi gì vào DB.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import load_settings

from src.payroll_engine.payroll_engine.container import build_container
from src.payroll_engine.payroll_engine.core.exceptions import DomainError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Close a payroll period (mark every payslip paid).")
    parser.add_argument("company_id")
    parser.add_argument("month_id", help="YYYY-MM")
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = load_settings()
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        max_workers=int(getattr(settings, "PAYROLL_MAX_WORKERS", 1)),
    )
    svc = container.payroll_service

    try:
        if args.dry_run:
            batch = svc.compute_monthly_payroll(args.company_id, args.month_id)
            for p in batch.payslips:
                print(f"{p.employee_id:<12} {p.employee_name:<30} {p.status.value:<6} {p.net_total:>12}")
            for e in batch.errors:
                print(f"ERROR {e.employee_id}: {e.message}")
            print(f"Total net: {batch.total_net} (skipped paid: {len(batch.skipped_paid)})")
            return 1 if batch.errors else 0

        paid = svc.close_period(args.company_id, args.month_id)
    except DomainError as e:
        print(f"FAILED: {e}", file=sys.stderr)
        return 1

    print(f"OK: closed {args.company_id}/{args.month_id} ({len(paid)} payslips)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
