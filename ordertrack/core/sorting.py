from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable

from ordertrack.core.dates import compare_dates, normalize_date
from ordertrack.core.schema import CompositeOrderRecord, SortDirection

SERIES_PRIORITY = {"H": 1, "J": 2}
DEFAULT_PRIORITY = 3


def series_priority(job_no: str) -> int:
    cleaned = job_no.strip().upper()
    if not cleaned:
        return DEFAULT_PRIORITY
    return SERIES_PRIORITY.get(cleaned[0], DEFAULT_PRIORITY)


def sort_records(
    records: Iterable[CompositeOrderRecord],
    direction: SortDirection = SortDirection.ASCENDING,
) -> list[CompositeOrderRecord]:
    """Order by series bucket, then delivery date.

    Undated records trail their bucket in either direction; ``sorted`` is
    stable so ties keep their incoming order.
    """

    descending = direction == SortDirection.DESCENDING
    keyed = [(series_priority(record.job_no), normalize_date(record.final_delivery_date), record) for record in records]

    def compare(left: tuple, right: tuple) -> int:
        if left[0] != right[0]:
            return left[0] - right[0]
        return compare_dates(left[1], right[1], descending=descending)

    return [item[2] for item in sorted(keyed, key=cmp_to_key(compare))]
