"""Form validation that reports field errors instead of raising."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Mapping, Optional

from .date_range import APP_TIMEZONE, months_between, parse_day

DATA_TYPES = ("SALES", "REGISTRATION")
DEFAULT_DATA_TYPE = "SALES"
MAX_RANGE_MONTHS = 3
CODE_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

TRUTHY = {"1", "true", "on", "yes"}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a form: a cleaned value or per-field messages."""

    errors: Dict[str, str] = field(default_factory=dict)
    value: Any = None

    @property
    def ok(self) -> bool:
        return not self.errors

    def error(self, name: str) -> Optional[str]:
        return self.errors.get(name)


@dataclass(frozen=True)
class FilterForm:
    code: str
    start: Optional[date]
    end: Optional[date]
    data_type: str
    summary: bool


@dataclass(frozen=True)
class LoginForm:
    email: str
    password: str


def check_date_range(
    start: Optional[date],
    end: Optional[date],
    max_months: int = MAX_RANGE_MONTHS,
) -> Dict[str, str]:
    """Ordering and span rules shared by the filter form and the filter store."""
    errors: Dict[str, str] = {}
    if start is None or end is None:
        return errors
    if start > end:
        errors["start_date"] = "From date cannot be after to date"
    if months_between(start, end) > max_months:
        errors["end_date"] = f"Date range cannot exceed {max_months} months"
    return errors


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in TRUTHY


def validate_filter_form(
    data: Mapping[str, Any],
    today: date,
    tz: str = APP_TIMEZONE,
    max_months: int = MAX_RANGE_MONTHS,
) -> ValidationResult:
    errors: Dict[str, str] = {}

    code = str(data.get("code") or "").strip()
    if not code:
        errors["code"] = "Input value is required"
    elif len(code) > CODE_MAX_LENGTH:
        errors["code"] = f"Input value cannot exceed {CODE_MAX_LENGTH} characters"

    dates: Dict[str, Optional[date]] = {}
    for key, label in (("start_date", "From"), ("end_date", "To")):
        raw = str(data.get(key) or "").strip()
        parsed = parse_day(raw, tz)
        dates[key] = parsed
        if raw and parsed is None:
            errors[key] = f"{label} date is not a valid date"
        elif parsed is not None and parsed > today:
            errors[key] = f"{label} date cannot be in the future"

    for key, message in check_date_range(dates["start_date"], dates["end_date"], max_months).items():
        errors.setdefault(key, message)

    data_type = str(data.get("data_type") or DEFAULT_DATA_TYPE).strip().upper()
    if data_type not in DATA_TYPES:
        errors["data_type"] = "Please select a type"

    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(
        value=FilterForm(
            code=code,
            start=dates["start_date"],
            end=dates["end_date"],
            data_type=data_type,
            summary=_flag(data.get("summary")),
        )
    )


def validate_login_form(data: Mapping[str, Any]) -> ValidationResult:
    errors: Dict[str, str] = {}

    email = str(data.get("email") or "").strip()
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_RE.match(email):
        errors["email"] = "Please enter a valid email address"

    password = str(data.get("password") or "")
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < PASSWORD_MIN_LENGTH:
        errors["password"] = f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
    elif len(password) > PASSWORD_MAX_LENGTH:
        errors["password"] = f"Password must be less than {PASSWORD_MAX_LENGTH} characters"

    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(value=LoginForm(email=email, password=password))


__all__ = [
    "DATA_TYPES",
    "DEFAULT_DATA_TYPE",
    "FilterForm",
    "LoginForm",
    "MAX_RANGE_MONTHS",
    "ValidationResult",
    "check_date_range",
    "validate_filter_form",
    "validate_login_form",
]
