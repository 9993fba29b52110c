"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

STANDARD_MONTH_DAYS = 30
STANDARD_WORK_HOURS = 8

SSO_RATE = Decimal("0.05")
SSO_SALARY_CAP = Decimal("15000")
WITHHOLDING_TAX_RATE = Decimal("0.03")

# Applied when a schedule references an OT type missing from company config.
DEFAULT_OT_MULTIPLIER = Decimal("1.5")

DEFAULT_MAX_WORKERS = 4
