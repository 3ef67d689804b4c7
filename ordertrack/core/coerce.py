from __future__ import annotations

from typing import Any

NOT_AVAILABLE = "N/A"


def display_value(value: Any) -> str:
    """Render a raw source value as the string shown to operators.

    Missing, blank and structured values collapse to ``"N/A"``.
    """

    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value != value:  # NaN
            return NOT_AVAILABLE
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (dict, list, tuple, set)):
        return NOT_AVAILABLE
    text = str(value)
    if not text.strip():
        return NOT_AVAILABLE
    return text


def has_value(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    cleaned = value.strip()
    return bool(cleaned) and cleaned != NOT_AVAILABLE
