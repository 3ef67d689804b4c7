"""Join the raw source collections into one composite record per job."""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from ordertrack.core.coerce import NOT_AVAILABLE, display_value
from ordertrack.core.errors import SourceParseError
from ordertrack.core.schema import CompositeOrderRecord, RawSourceRecord
from ordertrack.core.sources import DEFAULT_REGISTRY, JoinKeySpec, SourceRegistry

IMAGE_FIELD = "mainimagepath"

# named field -> candidate primary keys, first populated one wins
NAMED_FIELD_SOURCES: dict[str, tuple[str, ...]] = {
    "final_delivery_date": ("finaldelvdate", "final_year_delivery1"),
    "po_no": ("pono",),
    "buyer": ("buyer_sh",),
    "unit": ("punit_sh",),
    "style": ("styleid",),
    "quantity": ("quantity",),
    "u46": ("u46",),
    "style_no": ("styleno",),
    "our_delivery_date": ("ourdeldate",),
    "order_date": ("date",),
    "merchandiser": ("merch",),
}


def as_record_list(source: str, payload: Any) -> list[RawSourceRecord]:
    """Normalise a decoded payload into a list of records.

    A bare object is treated as a single record.
    """

    if isinstance(payload, dict):
        return [payload]
    if not isinstance(payload, list):
        raise SourceParseError(source, f"expected a list of records, got {type(payload).__name__}")
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise SourceParseError(source, f"record {index} is {type(item).__name__}, expected an object")
    return list(payload)


def _first_populated(record: RawSourceRecord, keys: Iterable[str]) -> str:
    for key in keys:
        value = display_value(record.get(key))
        if value != NOT_AVAILABLE:
            return value
    return NOT_AVAILABLE


def _find_linked(job_no: str, records: Sequence[RawSourceRecord], key: JoinKeySpec) -> RawSourceRecord | None:
    for record in records:
        if key(record) == job_no:
            return record
    return None


def _image_reference(record: RawSourceRecord) -> str | None:
    value = record.get(IMAGE_FIELD)
    return value if isinstance(value, str) else None


def aggregate_orders(
    primary: Sequence[RawSourceRecord],
    primary_key: JoinKeySpec,
    linked: Mapping[str, tuple[Sequence[RawSourceRecord], JoinKeySpec]],
) -> list[CompositeOrderRecord]:
    """Build composite records, keeping the first linked match per source.

    Records whose primary key resolves to ``"N/A"`` are dropped.
    """

    composites: list[CompositeOrderRecord] = []
    for record in primary:
        job_no = primary_key(record)
        if job_no == NOT_AVAILABLE:
            continue

        primary_fields = {str(key): display_value(value) for key, value in record.items()}
        reports = {name: _find_linked(job_no, records, key) for name, (records, key) in linked.items()}
        named = {field: _first_populated(record, keys) for field, keys in NAMED_FIELD_SOURCES.items()}

        composites.append(
            CompositeOrderRecord(
                job_no=job_no,
                primary_fields=primary_fields,
                linked_reports=reports,
                image=_image_reference(record),
                **named,
            )
        )
    return composites


def build_collection(
    payloads: Mapping[str, Any],
    registry: SourceRegistry = DEFAULT_REGISTRY,
) -> list[CompositeOrderRecord]:
    """Aggregate decoded payloads keyed by source name.

    Every registered source must be present; a missing or malformed payload
    fails the whole collection.
    """

    collections: dict[str, list[RawSourceRecord]] = {}
    for source in registry.all:
        if source.name not in payloads:
            raise SourceParseError(source.name, "no payload received")
        collections[source.name] = as_record_list(source.name, payloads[source.name])

    linked = {source.name: (collections[source.name], source.join_key) for source in registry.linked}
    return aggregate_orders(collections[registry.primary.name], registry.primary.join_key, linked)


__all__ = ["aggregate_orders", "as_record_list", "build_collection"]
