from __future__ import annotations

from typing import Optional, Protocol

from .model import CompanyConfig


class SettingsRepository(Protocol):
    def get_company_config(self, company_id: str) -> Optional[CompanyConfig]:
        """Return None when the company has never been configured."""

        raise NotImplementedError
