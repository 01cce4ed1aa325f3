"""
Input validation utilities for record writes.

Each validator returns the cleaned value or raises ValidationError naming
the offending field.
"""
import enum
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Type

from core.exceptions import ValidationError

MAX_AGE = 150


def require_text(data: Dict[str, Any], field: str, label: Optional[str] = None) -> str:
    """
    Required non-blank string.

    Args:
        data: Input mapping (snake_case keys)
        field: Key to read
        label: Name used in the error message

    Returns:
        The stripped string
    """
    value = data.get(field)
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label or field} is required", field=field)
    return value.strip()


def validate_age(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError("age must be a whole number", field="age")
    try:
        age = int(value)
    except (TypeError, ValueError):
        raise ValidationError("age must be a whole number", field="age")
    if age < 0 or age > MAX_AGE:
        raise ValidationError(f"age must be between 0 and {MAX_AGE}", field="age")
    return age


def parse_date(value: Any, field: str) -> date:
    """Accept a date, a datetime or an ISO string (YYYY-MM-DD, optionally with time)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        # fromisoformat only understands "Z" from Python 3.11
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
    raise ValidationError(f"{field} must be a date in YYYY-MM-DD format", field=field)


def validate_enum(value: Any, enum_class: Type[enum.Enum], field: str) -> enum.Enum:
    """Case-insensitive lookup of an enum member by value."""
    if isinstance(value, enum_class):
        return value
    if isinstance(value, str):
        for member in enum_class:
            if member.value == value.strip().lower():
                return member
    allowed = ", ".join(m.value for m in enum_class)
    raise ValidationError(f"{field} must be one of: {allowed}", field=field)


def validate_tags(value: Any, field: str) -> List[str]:
    """List of non-blank strings, duplicates removed, order kept."""
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise ValidationError(f"{field} must be a list of strings", field=field)
    tags: List[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValidationError(f"{field} must be a list of strings", field=field)
        item = item.strip()
        if item and item not in tags:
            tags.append(item)
    return tags


def pick_fields(
    data: Dict[str, Any],
    allowed: Iterable[str],
    nullable: Iterable[str] = ()
) -> Dict[str, Any]:
    """
    Keep only the allowed keys that were actually supplied.

    None means absent, except for keys listed in nullable where an explicit
    None clears the value.
    """
    return {
        k: v for k, v in data.items()
        if k in allowed and (v is not None or k in nullable)
    }
