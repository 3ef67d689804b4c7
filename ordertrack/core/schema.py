from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

RawSourceRecord = dict[str, Any]

PresenceMode = Literal["ALL", "WITH", "WITHOUT"]


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class CompositeOrderRecord(BaseModel):
    """One manufacturing job merged across every registered source."""

    model_config = ConfigDict(frozen=True)

    job_no: str = Field(min_length=1)
    primary_fields: dict[str, str] = Field(default_factory=dict)
    linked_reports: dict[str, RawSourceRecord | None] = Field(default_factory=dict)
    image: str | None = None

    final_delivery_date: str = "N/A"
    po_no: str = "N/A"
    buyer: str = "N/A"
    unit: str = "N/A"
    style: str = "N/A"
    quantity: str = "N/A"
    u46: str = "N/A"
    style_no: str = "N/A"
    our_delivery_date: str = "N/A"
    order_date: str = "N/A"
    merchandiser: str = "N/A"

    def field_value(self, name: str) -> str | None:
        """Look up a named scalar field, falling back to the raw primary fields."""

        if name in NAMED_FIELDS:
            return getattr(self, name)
        return self.primary_fields.get(name)

    def linked_count(self) -> int:
        return sum(1 for report in self.linked_reports.values() if report is not None)


NAMED_FIELDS: tuple[str, ...] = (
    "final_delivery_date",
    "po_no",
    "buyer",
    "unit",
    "style",
    "quantity",
    "u46",
    "style_no",
    "our_delivery_date",
    "order_date",
    "merchandiser",
)


class FilterState(BaseModel):
    """Operator-controlled filter configuration; replaced wholesale on every change."""

    search: str = ""
    search_linked: bool = True
    job_no: str = ""
    series: str = "ALL"
    categories: dict[str, str] = Field(default_factory=dict)
    presence: dict[str, PresenceMode] = Field(default_factory=dict)
    only_without_image: bool = False


class SortUpdate(BaseModel):
    direction: SortDirection


class HighlightRequest(BaseModel):
    text: str = ""
    query: str = ""
