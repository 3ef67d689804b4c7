"""Application service that owns the order board session."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from ordertrack.core.aggregate import build_collection
from ordertrack.core.csvio import records_to_csv
from ordertrack.core.errors import SourceError
from ordertrack.core.filters import apply_filters
from ordertrack.core.schema import CompositeOrderRecord, FilterState, SortDirection
from ordertrack.core.sorting import sort_records
from ordertrack.domain import BoardState
from ordertrack.infrastructure import SourceClient, get_source_client

logger = logging.getLogger(__name__)


class OrderBoardService:
    """Runs fetch cycles and derives the filtered, sorted, windowed view.

    Views are recomputed from the current state on every call; nothing
    derived is cached between requests.
    """

    def __init__(self, client: SourceClient | None = None) -> None:
        self._client = client
        self._state = BoardState()
        self._lock = asyncio.Lock()

    @property
    def client(self) -> SourceClient:
        return self._client or get_source_client()

    @property
    def state(self) -> BoardState:
        return self._state

    # ------------------------------------------------------------------
    # fetch cycle
    # ------------------------------------------------------------------
    async def refresh(self) -> BoardState:
        async with self._lock:
            state = self._state
            state.status = "loading"
            state.error = None
            client = self.client
            try:
                payloads = await client.fetch_all()
                records = build_collection(payloads, client.registry)
            except SourceError as exc:
                label = self._label_for(client, exc.source)
                state.status = "error"
                state.error = f"Failed to load {label}: {exc}"
                state.records = ()
                state.source_counts = {}
                logger.warning("order board refresh failed: %s", state.error)
                raise
            except Exception as exc:
                state.status = "error"
                state.error = f"Failed to load order sources: {exc}"
                state.records = ()
                state.source_counts = {}
                logger.exception("order board refresh failed unexpectedly")
                raise
            else:
                state.records = tuple(records)
                state.source_counts = {name: len(rows) for name, rows in payloads.items()}
                state.loaded_at = datetime.now(timezone.utc)
                state.status = "ready"
                logger.info(
                    "order board loaded %d jobs from %d sources",
                    len(state.records),
                    len(state.source_counts),
                )
            finally:
                state.cycles += 1
                state.window.reset()
            return state

    async def ensure_loaded(self) -> BoardState:
        """Run the first fetch cycle of the session if none has happened yet."""

        if self._state.cycles == 0 and not self._lock.locked():
            try:
                await self.refresh()
            except SourceError:
                # already recorded on the board as the error state
                pass
        return self._state

    @staticmethod
    def _label_for(client: SourceClient, source: str) -> str:
        try:
            return client.registry.get(source).label
        except KeyError:
            return source

    # ------------------------------------------------------------------
    # view state
    # ------------------------------------------------------------------
    def set_filters(self, filters: FilterState) -> FilterState:
        self._state.filters = filters
        self._state.window.reset()
        return filters

    def set_sort(self, direction: SortDirection) -> SortDirection:
        self._state.sort = direction
        self._state.window.reset()
        return direction

    def grow(self) -> int:
        return self._state.window.grow()

    # ------------------------------------------------------------------
    # derived views
    # ------------------------------------------------------------------
    def matched_records(self) -> list[CompositeOrderRecord]:
        state = self._state
        filtered = apply_filters(state.records, state.filters)
        return sort_records(filtered, state.sort)

    def view(self) -> dict[str, object]:
        state = self._state
        matched = self.matched_records() if state.status == "ready" else []
        return {
            "status": state.status,
            "error": state.error,
            "items": state.window.visible(matched),
            "visible": state.window.count,
            "matched": len(matched),
            "total": len(state.records),
            "has_more": state.window.has_more(len(matched)),
            "filters": state.filters,
            "sort": state.sort,
        }

    def get_record(self, job_no: str) -> CompositeOrderRecord | None:
        for record in self._state.records:
            if record.job_no == job_no:
                return record
        return None

    def export_csv(self) -> str:
        linked = [source.name for source in self.client.registry.linked]
        return records_to_csv(self.matched_records(), linked)

    def status(self) -> dict[str, object]:
        state = self._state
        return {
            "status": state.status,
            "error": state.error,
            "total": len(state.records),
            "loaded_at": state.loaded_at.isoformat() if state.loaded_at else None,
            "sources": dict(state.source_counts),
        }

    # ------------------------------------------------------------------
    # testing helpers
    # ------------------------------------------------------------------
    def reset(self, client: SourceClient | None = None) -> None:
        self._client = client
        self._state = BoardState()
        self._lock = asyncio.Lock()


_service = OrderBoardService()


def get_order_service() -> OrderBoardService:
    """Return the singleton order board service for the process."""

    return _service


def reset_order_state(client: SourceClient | None = None) -> None:
    """Reset the in-memory board (used in tests)."""

    _service.reset(client)
