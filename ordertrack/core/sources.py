"""Registry of the order-tracking feeds and how each one names the job number."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable

from ordertrack.core.coerce import display_value
from ordertrack.core.schema import RawSourceRecord

DEFAULT_API_BASE = "https://app.herofashion.com"

JoinKeySpec = Callable[[RawSourceRecord], str]


def field_key(field_name: str) -> JoinKeySpec:
    """Build a join-key extractor that reads ``field_name`` from a record."""

    def extract(record: RawSourceRecord) -> str:
        return display_value(record.get(field_name))

    extract.__name__ = f"key_{field_name}"
    return extract


@dataclass(frozen=True, slots=True)
class SourceDefinition:
    name: str
    path: str
    key_field: str
    label: str

    @property
    def join_key(self) -> JoinKeySpec:
        return field_key(self.key_field)


@dataclass(frozen=True, slots=True)
class SourceRegistry:
    """Ordered set of sources; the first entry is the primary order header feed."""

    primary: SourceDefinition
    linked: tuple[SourceDefinition, ...]

    @property
    def all(self) -> tuple[SourceDefinition, ...]:
        return (self.primary, *self.linked)

    @property
    def names(self) -> list[str]:
        return [source.name for source in self.all]

    def get(self, name: str) -> SourceDefinition:
        for source in self.all:
            if source.name == name:
                return source
        raise KeyError(name)


DEFAULT_REGISTRY = SourceRegistry(
    primary=SourceDefinition("order_panda", "/order_panda/", "jobno_oms", "order header"),
    linked=(
        SourceDefinition("ordmatpen", "/ordmatpen/", "orderno", "material allocation"),
        SourceDefinition("accessory", "/accessory/", "orderno", "accessories"),
        SourceDefinition("Allotpen", "/Allotpen/", "jobno_oms", "yarn allotment"),
        SourceDefinition("knitst", "/knitst/", "orderno", "knitting status"),
        SourceDefinition("Fabst", "/Fabst/", "jobno_fabric_status", "fabric status"),
        SourceDefinition("Fabyarn", "/Fabyarn/", "orderno", "fabric yarn"),
    ),
)


def api_base_url() -> str:
    base = os.getenv("ORDER_API_BASE") or DEFAULT_API_BASE
    return base.rstrip("/")


def api_timeout() -> float:
    raw = os.getenv("ORDER_API_TIMEOUT")
    if not raw:
        return 30.0
    try:
        return float(raw)
    except ValueError:
        return 30.0
