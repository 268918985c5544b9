from __future__ import annotations

import math

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} must not be empty")
    return str(value).strip()


def require_latitude(value: float, field_name: str = "latitude") -> float:
    value = _require_finite(value, field_name)
    if not -90.0 <= value <= 90.0:
        raise ValidationError(f"{field_name} out of range: {value}")
    return value


def require_longitude(value: float, field_name: str = "longitude") -> float:
    value = _require_finite(value, field_name)
    if not -180.0 <= value <= 180.0:
        raise ValidationError(f"{field_name} out of range: {value}")
    return value


def require_non_negative(value: float, field_name: str) -> float:
    value = _require_finite(value, field_name)
    if value < 0:
        raise ValidationError(f"{field_name} must be >= 0, got {value}")
    return value


def _require_finite(value: float, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is not a number: {value!r}") from None
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field_name} is not finite: {value!r}")
    return number
