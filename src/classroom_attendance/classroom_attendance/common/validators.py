from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_positive_id(value: Any, field_name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if parsed <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return parsed


def require_status(value: Any) -> AttendanceStatus:
    try:
        return AttendanceStatus(str(value or "").strip().upper())
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(f"status must be one of: {allowed}")


def require_date_range(start: Optional[date], end: Optional[date]) -> None:
    if (start is None) != (end is None):
        raise ValidationError("start and end dates must be given together")
    if start and end and start > end:
        raise ValidationError("start date must not be after end date")
