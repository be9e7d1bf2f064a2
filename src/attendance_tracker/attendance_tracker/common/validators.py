from __future__ import annotations

from typing import Iterable

from ..core.constants import MIN_PHONE_DIGITS
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required.")
    return value.strip()


def require_phone(value: str, field_name: str = "Phone number") -> str:
    phone = require_non_empty(value, field_name)
    if not phone.isdigit() or len(phone) < MIN_PHONE_DIGITS:
        raise ValidationError(f"{field_name} must have at least {MIN_PHONE_DIGITS} digits.")
    return phone


def require_email(value: str, field_name: str = "Email") -> str:
    email = require_non_empty(value, field_name)
    if "@" not in email:
        raise ValidationError(f"{field_name} is not a valid email address.")
    return email


def require_selection(values: Iterable[str]) -> list[str]:
    """Drop blanks and duplicates, keeping first-seen order."""
    out: list[str] = []
    for v in values or []:
        v = (v or "").strip()
        if v and v not in out:
            out.append(v)
    return out


def require_positive_total(value) -> int:
    """Lecture count used as a percentage denominator; a misconfigured value fails at startup."""
    total = int(value)
    if total <= 0:
        raise ValueError(f"EXPECTED_TOTAL_LECTURES must be a positive integer, got {value!r}.")
    return total
