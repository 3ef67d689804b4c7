"""Filter pipeline over the aggregated order collection.

Every active setting in :class:`FilterState` becomes an independent
predicate; a record is kept only when all of them pass, so the result does
not depend on evaluation order.
"""
from __future__ import annotations

from typing import Callable, Iterable

from ordertrack.core.coerce import has_value
from ordertrack.core.schema import CompositeOrderRecord, FilterState
from ordertrack.core.search import matches_record, matches_text

ALL = "ALL"

Predicate = Callable[[CompositeOrderRecord], bool]


def series_predicate(series: str) -> Predicate | None:
    prefix = (series or "").strip().upper()
    if not prefix or prefix == ALL:
        return None
    return lambda record: record.job_no.upper().startswith(prefix)


def job_no_predicate(query: str) -> Predicate | None:
    if not query:
        return None
    return lambda record: matches_text(record.job_no, query)


def category_predicate(field: str, value: str) -> Predicate | None:
    if value == ALL:
        return None
    return lambda record: record.field_value(field) == value


def presence_predicate(field: str, mode: str) -> Predicate | None:
    if mode == "WITH":
        return lambda record: has_value(record.field_value(field))
    if mode == "WITHOUT":
        return lambda record: not has_value(record.field_value(field))
    return None


def missing_image_predicate(enabled: bool) -> Predicate | None:
    if not enabled:
        return None
    return lambda record: not has_value(record.image)


def search_predicate(query: str, *, include_linked: bool) -> Predicate | None:
    if not query:
        return None
    return lambda record: matches_record(record, query, include_linked=include_linked)


def build_predicates(state: FilterState) -> list[Predicate]:
    candidates: list[Predicate | None] = [
        series_predicate(state.series),
        job_no_predicate(state.job_no),
        missing_image_predicate(state.only_without_image),
    ]
    candidates.extend(category_predicate(field, value) for field, value in state.categories.items())
    candidates.extend(presence_predicate(field, mode) for field, mode in state.presence.items())
    # most expensive last
    candidates.append(search_predicate(state.search, include_linked=state.search_linked))
    return [predicate for predicate in candidates if predicate is not None]


def apply_filters(records: Iterable[CompositeOrderRecord], state: FilterState) -> list[CompositeOrderRecord]:
    predicates = build_predicates(state)
    return [record for record in records if all(predicate(record) for predicate in predicates)]


__all__ = ["ALL", "apply_filters", "build_predicates"]
