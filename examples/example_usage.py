"""Ví dụ: tính bảng lương một tháng qua service layer (không qua Flask).

    APP_ENV=development python -m examples.example_usage <company_id> <YYYY-MM>
"""

import sys

from dotenv import load_dotenv

from config import load_settings

from src.payroll_engine.payroll_engine.container import build_container


def main():
    load_dotenv(override=False)
    company_id, month_id = sys.argv[1], sys.argv[2]
    settings = load_settings()
    container = build_container(db_config=settings.DB_CONFIG, max_workers=settings.PAYROLL_MAX_WORKERS)

    batch = container.payroll_service.compute_monthly_payroll(company_id, month_id)
    for p in batch.payslips:
        print(p.employee_name, p.status.value, p.net_total)
    print("Tổng thực lĩnh:", batch.total_net)

    summary = container.payroll_service.compute_yearly_summary(company_id, int(month_id[:4]))
    print("Theo tháng:", [str(v) for v in summary.monthly_net])


if __name__ == "__main__":
    main()
