from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from ..core.enums import SalaryType


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): Nhân viên được tính lương.

    Lưu ý: `deduction_profile_raw` giữ nguyên văn bản lịch sử; việc chuẩn hoá
    nằm ở `rules.tax_profile`. `day_offs` dùng chỉ số `date.weekday()` (0 = thứ Hai).
    """

    employee_id: str
    company_id: str
    name: str
    role: str
    base_salary: Decimal
    salary_type: SalaryType = SalaryType.MONTHLY
    deduction_profile_raw: str = "none"
    day_offs: frozenset[int] = field(default_factory=frozenset)
    is_active: bool = True
