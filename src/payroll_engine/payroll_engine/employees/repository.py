from __future__ import annotations

from typing import Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Giao diện repository cho Employee.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def list_active(self, company_id: str) -> Sequence[Employee]:
        raise NotImplementedError
