"""Contractor registration rules."""

from __future__ import annotations

import re

from obravista.core.enums import PersonType
from obravista.core.exceptions import ValidationError

_NON_DIGITS = re.compile(r"\D")

TAX_ID_LENGTHS = {
    PersonType.INDIVIDUAL: 11,  # CPF
    PersonType.COMPANY: 14,  # CNPJ
}


def strip_mask(value: str | None) -> str:
    return _NON_DIGITS.sub("", value or "")


def normalize_tax_id(value: str | None, person_type: PersonType) -> str:
    """Strip punctuation from a CPF/CNPJ and check its length."""
    label = "CPF" if person_type is PersonType.INDIVIDUAL else "CNPJ"
    digits = strip_mask(value)
    if not digits:
        raise ValidationError(f"{label} is required.")
    expected = TAX_ID_LENGTHS[person_type]
    if len(digits) != expected:
        raise ValidationError(f"{label} must have {expected} digits.")
    return digits
