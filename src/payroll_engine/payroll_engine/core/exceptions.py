class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidAdjustmentError(ValidationError):
    """Raised when a manual income/deduction item is rejected."""


class MalformedScheduleEntryError(ValidationError):
    """Raised when a schedule row lacks a required field."""


class PeriodLockedError(DomainError):
    """Raised when a paid payslip (closed period) would be modified."""

    def __init__(self, message: str, *, employee_id: str | None = None, month_id: str | None = None):
        super().__init__(message)
        self.employee_id = employee_id
        self.month_id = month_id


class InvalidTransitionError(DomainError):
    """Raised when a payslip status change is not allowed."""


class PayslipNotFoundError(DomainError):
    """Raised when no payslip exists for an employee/month."""


class PayslipConflictError(DomainError):
    """Raised when stored payslips changed between a read and the write based on it."""
