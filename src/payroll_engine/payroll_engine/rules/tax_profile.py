"""Deduction profile normalization and SSO / withholding tax amounts.

Employee records carry the profile as free text: canonical labels
(`sso_tax`), legacy codes (`wht`) or historical Thai labels typed into
older forms ("ประกันสังคม + ภาษี"). Everything maps to one
`DeductionProfile` here and nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..common.money import ZERO, round_cents, to_decimal
from ..core.constants import SSO_RATE, SSO_SALARY_CAP, WITHHOLDING_TAX_RATE
from ..core.enums import DeductionProfile

_ALIASES: dict[str, DeductionProfile] = {
    "none": DeductionProfile.NONE,
    "": DeductionProfile.NONE,
    "sso": DeductionProfile.SSO,
    "social_security": DeductionProfile.SSO,
    "tax": DeductionProfile.TAX,
    "wht": DeductionProfile.TAX,
    "sso_tax": DeductionProfile.SSO_TAX,
    "sso+tax": DeductionProfile.SSO_TAX,
    "sso_wht": DeductionProfile.SSO_TAX,
}

_SSO_MARKERS = ("ประกัน", "sso", "social")
_TAX_MARKERS = ("ภาษี", "3%", "tax", "wht")


@dataclass(frozen=True)
class TaxResult:
    profile: DeductionProfile
    social_security: Decimal = ZERO
    tax: Decimal = ZERO


def normalize_deduction_profile(raw: Optional[str]) -> DeductionProfile:
    text = (raw or "").strip().lower()
    exact = _ALIASES.get(text)
    if exact is not None:
        return exact

    has_sso = any(m in text for m in _SSO_MARKERS)
    has_tax = any(m in text for m in _TAX_MARKERS)
    if has_sso and has_tax:
        return DeductionProfile.SSO_TAX
    if has_sso:
        return DeductionProfile.SSO
    if has_tax:
        return DeductionProfile.TAX
    return DeductionProfile.NONE


def resolve_tax(raw_profile: Optional[str], base_salary: Decimal) -> TaxResult:
    profile = normalize_deduction_profile(raw_profile)
    base = max(to_decimal(base_salary), ZERO)

    sso = round_cents(min(base, SSO_SALARY_CAP) * SSO_RATE) if profile.includes_sso else ZERO
    tax = round_cents(base * WITHHOLDING_TAX_RATE) if profile.includes_tax else ZERO
    return TaxResult(profile=profile, social_security=sso, tax=tax)
