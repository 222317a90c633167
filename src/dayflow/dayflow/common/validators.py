from __future__ import annotations

from datetime import date

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str) -> str:
    email = require_non_empty(value, "Email").lower()
    local, _, domain = email.partition("@")
    if not local or not domain:
        raise ValidationError("Email is not valid")
    return email


def parse_salary(value) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    try:
        salary = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Salary must be a number")
    if salary < 0:
        raise ValidationError("Salary cannot be negative")
    return salary


def require_date(value, field_name: str) -> date:
    if isinstance(value, date):
        return value
    raw = require_non_empty(value, field_name)
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")
