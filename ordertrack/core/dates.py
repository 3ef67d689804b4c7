"""Date normalisation for the loosely formatted delivery dates in order feeds.

Sources mix ISO dates (``2024-03-01``) with day-first dashed dates
(``1-3-2024`` / ``01-03-2024``).  ``normalize_date`` maps both onto a
comparable timestamp and returns ``None`` for anything it cannot read so
that sorting never has to deal with parse failures.
"""
from __future__ import annotations

import re
from typing import Any

import pandas as pd

from ordertrack.core.coerce import NOT_AVAILABLE

DAY_FIRST_PATTERN = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")

# pandas resolves these against the clock
RELATIVE_KEYWORDS = {"now", "today"}


def normalize_date(value: Any) -> pd.Timestamp | None:
    if value is None:
        return None

    raw = str(value).strip()
    if not raw or raw == NOT_AVAILABLE:
        return None

    match = DAY_FIRST_PATTERN.fullmatch(raw)
    if match:
        day, month, year = (int(part) for part in match.groups())
        try:
            return pd.Timestamp(year=year, month=month, day=day)
        except ValueError:
            return None

    if raw.lower() in RELATIVE_KEYWORDS:
        return None

    try:
        parsed = pd.to_datetime(raw, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert(None)
    return parsed


def compare_dates(left: pd.Timestamp | None, right: pd.Timestamp | None, *, descending: bool = False) -> int:
    """Three-way comparison that always places invalid dates last."""

    if left is None and right is None:
        return 0
    if left is None:
        return 1
    if right is None:
        return -1
    if left == right:
        return 0
    earlier_first = -1 if left < right else 1
    return -earlier_first if descending else earlier_first


__all__ = ["compare_dates", "normalize_date"]
