from __future__ import annotations

from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.constants import MAX_MANAGEMENT_LEVEL
from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_enum(enum_cls: Type[E], value, field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(str(m.value) for m in enum_cls)
        raise ValidationError(f"Invalid {field_name}. Must be one of: {allowed}")


def require_management_level(value) -> int:
    try:
        level = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Management level must be an integer")
    if not 0 <= level <= MAX_MANAGEMENT_LEVEL:
        raise ValidationError(f"Management level must be between 0 and {MAX_MANAGEMENT_LEVEL}")
    return level


def require_non_negative_number(value, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return number


def optional_int(value, field_name: str) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer id")


def unique_ids(values) -> list[int]:
    """Drop blanks and duplicates while keeping first-seen order."""
    out: list[int] = []
    for v in values or []:
        if v in (None, ""):
            continue
        try:
            i = int(v)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid id: {v!r}")
        if i not in out:
            out.append(i)
    return out
