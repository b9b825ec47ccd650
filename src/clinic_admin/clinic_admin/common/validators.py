from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")


def require_min_value(value: int, field_name: str, min_value: int, *, unit: str = "") -> int:
    if value < min_value:
        suffix = f" {unit}" if unit else ""
        raise ValidationError(f"{field_name} must be at least {min_value}{suffix}")
    return value


def normalize_name(value: str | None) -> str:
    return (value or "").strip().lower()


def require_range(value: int, field_name: str, min_value: int, max_value: int, *, unit: str = "") -> int:
    value = require_min_value(value, field_name, min_value, unit=unit)
    if value > max_value:
        suffix = f" {unit}" if unit else ""
        if unit and max_value != 1 and not unit.endswith("s"):
            suffix += "s"
        raise ValidationError(f"{field_name} must be at most {max_value}{suffix}")
    return value
