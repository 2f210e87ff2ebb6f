from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_int(value: Any, field_name: str) -> int:
    if value is None or str(value).strip() == "":
        raise ValidationError(f"{field_name} is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")


def optional_date(value: Any, field_name: str):
    if value is None or str(value).strip() == "":
        return None
    try:
        return parse_iso_date(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be in YYYY-MM-DD format")
