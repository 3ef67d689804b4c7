from __future__ import annotations

import re

from ordertrack.core.coerce import display_value
from ordertrack.core.schema import CompositeOrderRecord


def record_segments(record: CompositeOrderRecord, *, include_linked: bool = True) -> list[str]:
    """Searchable text of a composite record, one segment per report.

    The primary fields form the first segment and every linked report adds
    its own. A query has to fit inside a single segment.
    """

    segments = [" ".join(record.primary_fields.values())]
    if include_linked:
        for report in record.linked_reports.values():
            if report is None:
                continue
            segments.append(" ".join(display_value(value) for value in report.values()))
    return segments


def matches_text(text: str, query: str) -> bool:
    if not query:
        return True
    return query.lower() in (text or "").lower()


def matches_record(record: CompositeOrderRecord, query: str, *, include_linked: bool = True) -> bool:
    if not query:
        return True
    return any(matches_text(segment, query) for segment in record_segments(record, include_linked=include_linked))


def highlight_spans(text: str, query: str) -> list[tuple[str, bool]]:
    """Split ``text`` into ``(segment, is_match)`` pairs for on-screen highlighting."""

    if not text:
        return []
    if not query:
        return [(text, False)]

    pattern = re.compile(f"({re.escape(query)})", re.IGNORECASE)
    spans: list[tuple[str, bool]] = []
    for index, part in enumerate(pattern.split(text)):
        if not part:
            continue
        # re.split puts captured groups at odd positions
        spans.append((part, index % 2 == 1))
    return spans
