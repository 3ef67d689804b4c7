"""Domain entities for the order board session."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from ordertrack.core.schema import CompositeOrderRecord, FilterState, SortDirection
from ordertrack.core.window import ResultWindow

LoadStatus = Literal["loading", "error", "ready"]


@dataclass(slots=True)
class BoardState:
    """Everything the board needs to derive the current view.

    ``records`` is replaced as a whole by each fetch cycle and never mutated
    in place.
    """

    status: LoadStatus = "loading"
    error: str | None = None
    records: tuple[CompositeOrderRecord, ...] = ()
    filters: FilterState = field(default_factory=FilterState)
    sort: SortDirection = SortDirection.ASCENDING
    window: ResultWindow = field(default_factory=ResultWindow)
    loaded_at: datetime | None = None
    source_counts: dict[str, int] = field(default_factory=dict)
    cycles: int = 0
