from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from ordertrack.application import get_order_service
from ordertrack.core.errors import SourceError
from ordertrack.core.palette import unit_color
from ordertrack.core.schema import CompositeOrderRecord, FilterState, HighlightRequest, SortUpdate
from ordertrack.core.search import highlight_spans

router = APIRouter(tags=["orders"])


def _serialise_record(record: CompositeOrderRecord) -> dict[str, Any]:
    card = record.model_dump()
    card["unit_color"] = unit_color(record.unit)
    card["linked_count"] = record.linked_count()
    return card


@router.get("/orders")
async def list_orders() -> dict:
    service = get_order_service()
    await service.ensure_loaded()
    view = service.view()
    view["items"] = [_serialise_record(record) for record in view["items"]]
    view["filters"] = view["filters"].model_dump()
    view["sort"] = view["sort"].value
    return view


@router.get("/orders/status")
async def get_status() -> dict:
    return get_order_service().status()


@router.post("/orders/refresh")
async def refresh_orders() -> dict:
    service = get_order_service()
    try:
        await service.refresh()
    except SourceError as exc:
        raise HTTPException(status_code=502, detail=service.state.error or str(exc)) from exc
    return service.status()


@router.put("/orders/filters")
async def update_filters(payload: FilterState) -> dict:
    service = get_order_service()
    filters = service.set_filters(payload)
    return {"filters": filters.model_dump(), "visible": service.state.window.count}


@router.put("/orders/sort")
async def update_sort(payload: SortUpdate) -> dict:
    service = get_order_service()
    direction = service.set_sort(payload.direction)
    return {"sort": direction.value, "visible": service.state.window.count}


@router.post("/orders/grow")
async def grow_window() -> dict:
    service = get_order_service()
    visible = service.grow()
    return {"visible": visible}


@router.get("/orders/export")
async def export_orders() -> Response:
    service = get_order_service()
    if service.state.status != "ready":
        raise HTTPException(status_code=409, detail="orders are not loaded")
    return Response(
        content=service.export_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="orders.csv"'},
    )


@router.get("/orders/{job_no}")
async def get_order(job_no: str) -> dict:
    record = get_order_service().get_record(job_no)
    if record is None:
        raise HTTPException(status_code=404, detail="order not found")
    return _serialise_record(record)


@router.post("/highlight")
async def highlight(payload: HighlightRequest) -> dict:
    spans = highlight_spans(payload.text, payload.query)
    return {"spans": [{"text": text, "match": match} for text, match in spans]}
