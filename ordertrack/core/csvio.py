from __future__ import annotations

from typing import Iterable, Sequence

import pandas as pd

from ordertrack.core.schema import NAMED_FIELDS, CompositeOrderRecord

BASE_COLUMNS: tuple[str, ...] = ("job_no", "image", *NAMED_FIELDS)


def _linked_column(source: str) -> str:
    return f"{source}_linked"


def _flatten(record: CompositeOrderRecord) -> dict[str, object]:
    row: dict[str, object] = {"job_no": record.job_no, "image": record.image or ""}
    for name in NAMED_FIELDS:
        row[name] = getattr(record, name)
    for key, value in record.primary_fields.items():
        row.setdefault(key, value)
    for source, report in record.linked_reports.items():
        row[_linked_column(source)] = report is not None
    return row


def export_columns(records: Sequence[CompositeOrderRecord], linked_sources: Iterable[str] = ()) -> list[str]:
    """Fixed columns first, then raw primary fields in first-seen order, then linked flags."""

    columns = list(BASE_COLUMNS)
    seen = set(columns)
    linked = [_linked_column(source) for source in linked_sources]
    for record in records:
        for key in record.primary_fields:
            if key not in seen:
                seen.add(key)
                columns.append(key)
        for source in record.linked_reports:
            if _linked_column(source) not in linked:
                linked.append(_linked_column(source))
    return columns + [column for column in linked if column not in seen]


def records_to_csv(records: Iterable[CompositeOrderRecord], linked_sources: Iterable[str] = ()) -> str:
    """Render records as CSV; an empty selection still yields the header row."""

    rows = list(records)
    df = pd.DataFrame([_flatten(record) for record in rows], columns=export_columns(rows, linked_sources))
    return df.to_csv(index=False)
