from __future__ import annotations

from enum import Enum


class SalaryType(str, Enum):
    """Cách trả lương: theo tháng hoặc theo ngày công."""

    MONTHLY = "monthly"
    DAILY = "daily"


class ScheduleKind(str, Enum):
    """Loại ngày trong lịch làm việc."""

    WORK = "work"
    OFF = "off"
    HOLIDAY = "holiday"
    LEAVE = "leave"


class ClockStatus(str, Enum):
    """Kết quả so sánh giờ vào ca với giờ bắt đầu ca."""

    ON_TIME = "on_time"
    LATE = "late"
    ABSENT = "absent"


class DayStatus(str, Enum):
    """Trạng thái một ngày công sau khi tổng hợp."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    LEAVE = "leave"
    OFF = "off"
    HOLIDAY = "holiday"


class DeductionProfile(str, Enum):
    """Hồ sơ khấu trừ chuẩn hoá (bảo hiểm xã hội / thuế)."""

    NONE = "none"
    SSO = "sso"
    TAX = "tax"
    SSO_TAX = "sso_tax"

    @property
    def includes_sso(self) -> bool:
        return self in (DeductionProfile.SSO, DeductionProfile.SSO_TAX)

    @property
    def includes_tax(self) -> bool:
        return self in (DeductionProfile.TAX, DeductionProfile.SSO_TAX)


class PayslipStatus(str, Enum):
    """Vòng đời phiếu lương: draft -> saved -> paid."""

    DRAFT = "draft"
    SAVED = "saved"
    PAID = "paid"
