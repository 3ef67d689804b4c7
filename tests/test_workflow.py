import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from ordertrack.application import get_order_service, reset_order_state
from ordertrack.core.sources import DEFAULT_REGISTRY
from ordertrack.infrastructure import DirectorySourceClient, HttpSourceClient

from conftest import sample_payloads


@pytest.fixture()
def client():
    from ordertrack.app import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _write_sources(tmp_path, payloads: dict):
    for name, payload in payloads.items():
        (tmp_path / f"{name}.json").write_text(json.dumps(payload), encoding="utf-8")
    return tmp_path


def _many_orders(count: int) -> dict:
    payloads = sample_payloads()
    payloads["order_panda"] = [
        {"jobno_oms": f"H{index:03d}", "finaldelvdate": f"2024-01-{(index % 28) + 1:02d}", "punit_sh": "U1"}
        for index in range(count)
    ]
    return payloads


def test_end_to_end_board(client, tmp_path):
    reset_order_state(DirectorySourceClient(_write_sources(tmp_path, sample_payloads())))

    # 1. first read triggers the fetch cycle
    response = client.get("/api/orders")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert [item["job_no"] for item in data["items"]] == ["H200", "H100", "J050", "X999"]
    assert data["total"] == 4
    assert data["matched"] == 4
    assert data["has_more"] is False
    assert data["items"][0]["unit_color"] == "#E8F5E9"

    # 2. status reports per-source counts
    status = client.get("/api/orders/status").json()
    assert status["status"] == "ready"
    assert status["sources"]["order_panda"] == 5
    assert status["sources"]["knitst"] == 1

    # 3. filters narrow the view
    response = client.put("/api/orders/filters", json={"search": "blue"})
    assert response.status_code == 200
    items = client.get("/api/orders").json()["items"]
    assert [item["job_no"] for item in items] == ["J050"]
    assert items[0]["linked_reports"]["ordmatpen"]["material"] == "Blue Cotton"

    # 4. sort direction
    client.put("/api/orders/filters", json={})
    response = client.put("/api/orders/sort", json={"direction": "descending"})
    assert response.json()["sort"] == "descending"
    items = client.get("/api/orders").json()["items"]
    assert [item["job_no"] for item in items] == ["H100", "H200", "J050", "X999"]

    # 5. single record and export
    record = client.get("/api/orders/J050").json()
    assert record["buyer"] == "H&M"
    assert client.get("/api/orders/NOPE").status_code == 404

    export = client.get("/api/orders/export")
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")
    lines = export.text.strip().splitlines()
    assert lines[0].startswith("job_no,")
    assert len(lines) == 5

    # an empty selection still exports the header
    client.put("/api/orders/filters", json={"job_no": "NOTHING-MATCHES"})
    export = client.get("/api/orders/export")
    assert export.status_code == 200
    header, *rows = export.text.splitlines()
    assert header.startswith("job_no,image,final_delivery_date,")
    assert header.endswith(",Fabyarn_linked")
    assert rows == []


def test_window_grows_and_resets(client, tmp_path):
    reset_order_state(DirectorySourceClient(_write_sources(tmp_path, _many_orders(55))))

    data = client.get("/api/orders").json()
    assert len(data["items"]) == 20
    assert data["has_more"] is True

    assert client.post("/api/orders/grow").json()["visible"] == 40
    assert client.post("/api/orders/grow").json()["visible"] == 60
    data = client.get("/api/orders").json()
    assert len(data["items"]) == 55
    assert data["has_more"] is False

    response = client.put("/api/orders/filters", json={"series": "H"})
    assert response.json()["visible"] == 20
    assert len(client.get("/api/orders").json()["items"]) == 20

    client.post("/api/orders/grow")
    response = client.put("/api/orders/sort", json={"direction": "ascending"})
    assert response.json()["visible"] == 20


def test_failed_source_puts_board_in_error_state(client):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/Fabst/":
            return httpx.Response(500)
        return httpx.Response(200, json=sample_payloads()[request.url.path.strip("/")])

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    reset_order_state(HttpSourceClient("https://orders.example", http_client=http_client))

    data = client.get("/api/orders").json()
    assert data["status"] == "error"
    assert data["items"] == []
    assert "fabric status" in data["error"]

    response = client.post("/api/orders/refresh")
    assert response.status_code == 502
    assert "fabric status" in response.json()["detail"]

    assert client.get("/api/orders/export").status_code == 409
    assert get_order_service().state.records == ()


def test_refresh_rebuilds_collection(client, tmp_path):
    source_dir = _write_sources(tmp_path, sample_payloads())
    reset_order_state(DirectorySourceClient(source_dir))

    assert client.post("/api/orders/refresh").json()["total"] == 4

    payloads = sample_payloads()
    payloads["order_panda"] = payloads["order_panda"][:1]
    _write_sources(tmp_path, payloads)
    assert client.post("/api/orders/refresh").json()["total"] == 1


def test_invalid_sort_direction_is_rejected(client):
    response = client.put("/api/orders/sort", json={"direction": "sideways"})
    assert response.status_code == 422


def test_highlight_endpoint(client):
    response = client.post("/api/highlight", json={"text": "Blue Cotton", "query": "cot"})
    assert response.json()["spans"] == [
        {"text": "Blue ", "match": False},
        {"text": "Cot", "match": True},
        {"text": "ton", "match": False},
    ]


def test_undecodable_source_file_puts_board_in_error_state(client, tmp_path):
    source_dir = _write_sources(tmp_path, sample_payloads())
    (source_dir / "Fabst.json").write_bytes(b'[{"jobno_fabric_status": "\xff\xfe"}]')
    reset_order_state(DirectorySourceClient(source_dir))

    for _ in range(2):
        response = client.get("/api/orders")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "error"
        assert "fabric status" in data["error"]
        assert data["items"] == []

    assert get_order_service().state.status == "error"
    assert get_order_service().state.cycles == 1


def test_unexpected_client_failure_never_leaves_board_loading():
    class BrokenClient:
        registry = DEFAULT_REGISTRY

        async def fetch_all(self):
            raise RuntimeError("socket exploded")

    reset_order_state(BrokenClient())
    service = get_order_service()

    with pytest.raises(RuntimeError):
        asyncio.run(service.refresh())

    assert service.state.status == "error"
    assert "socket exploded" in service.state.error
    assert service.state.cycles == 1
    assert service.view()["items"] == []
