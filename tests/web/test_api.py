import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient


ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cabinet_web.config import Settings


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "api.db"


@pytest.fixture
def api_client(db_path):
    import server

    settings = Settings(database_url=f"sqlite:///{db_path}", save_delay=60)
    app = server.create_app(settings)
    with TestClient(app) as client:
        yield client, app


def drawers_by_id(client):
    res = client.get("/drawers")
    assert res.status_code == 200
    return {item["id"]: item for item in res.json()}


def test_empty_store_starts_with_default_layout(api_client):
    client, app = api_client
    drawers = drawers_by_id(client)
    assert len(drawers) == 180
    assert drawers["A1"]["size"] == "SMALL"
    assert drawers["A10"]["size"] == "MEDIUM"
    assert json.loads(drawers["A1"]["positions"]) == [1]
    assert app.state.gateway.count() == 180


def test_security_headers(api_client):
    client, _ = api_client
    res = client.get("/drawers/A1")
    assert res.headers["X-Content-Type-Options"] == "nosniff"
    assert res.headers["X-Frame-Options"] == "DENY"


def test_resize_is_saved_after_flush(api_client):
    client, app = api_client
    res = client.post("/drawers/A1/resize", json={"size": "MEDIUM"})
    assert res.status_code == 200
    body = res.json()
    assert body["outcome"] == "APPLIED"
    assert body["removed"] == ["A2"]
    assert body["drawer"]["title"] == "A01,A02"

    assert client.get("/drawers/A2").status_code == 404
    assert app.state.gateway.count() == 180

    res = client.post("/drawers/flush")
    assert res.status_code == 200
    assert res.json() == {"saved": True, "pending": False}
    assert app.state.gateway.count() == 179


def test_resize_rejections(api_client):
    client, _ = api_client
    res = client.post("/drawers/A8/resize", json={"size": "LARGE"})
    assert res.status_code == 409
    assert "section ends" in res.json()["detail"]

    res = client.post("/drawers/A1/resize", json={"size": "GIANT"})
    assert res.status_code == 409

    res = client.post("/drawers/Z9/resize", json={"size": "SMALL"})
    assert res.status_code == 404


def test_resize_same_size_is_unchanged(api_client):
    client, app = api_client
    res = client.post("/drawers/A12/resize", json={"size": "medium"})
    assert res.status_code == 200
    assert res.json()["outcome"] == "UNCHANGED"
    assert app.state.layout_session.save_pending is False


def test_layout_survives_restart(db_path):
    import server

    settings = Settings(database_url=f"sqlite:///{db_path}", save_delay=60)
    with TestClient(server.create_app(settings)) as client:
        client.post("/drawers/B10/resize", json={"size": "LARGE"})
        client.patch("/drawers/B10", json={"name": "Cables"})

    with TestClient(server.create_app(settings)) as client:
        drawer = client.get("/drawers/B10").json()
        assert drawer["title"] == "B10,B11"
        assert drawer["name"] == "Cables"
        assert client.get("/drawers/B11").status_code == 404


def test_patch_updates_name_and_keywords(api_client):
    client, _ = api_client
    res = client.patch("/drawers/C3", json={"name": "Fuses", "keywords": ["5A", "10A"]})
    assert res.status_code == 200
    assert res.json()["name"] == "Fuses"
    assert json.loads(res.json()["keywords"]) == ["5A", "10A"]

    res = client.patch("/drawers/C3", json={"keywords": "glass, 5A"})
    assert res.json()["name"] == "Fuses"
    assert json.loads(res.json()["keywords"]) == ["glass", "5A"]

    res = client.patch("/drawers/C3", json={"name": ""})
    assert res.json()["name"] is None

    assert client.patch("/drawers/C99", json={"name": "x"}).status_code == 404


def test_search(api_client):
    client, _ = api_client
    client.patch("/drawers/D5", json={"name": "LEDs", "keywords": ["red"]})
    res = client.get("/drawers/search", params={"q": "led"})
    assert res.status_code == 200
    body = res.json()
    assert body["matches"] == ["D5"]
    assert len(body["visibility"]) == 180
    assert body["visibility"]["D5"] is True

    res = client.get("/drawers/search")
    assert len(res.json()["matches"]) == 180


def test_replace_layout(api_client):
    client, app = api_client
    drawers = drawers_by_id(client)
    payload = [item for key, item in drawers.items() if key not in ("E1", "E2")]
    payload.append({"id": "E1", "size": "MEDIUM", "positions": "[1, 2]", "name": "Relays"})

    res = client.put("/drawers", json=payload)
    assert res.status_code == 200
    assert res.json() == {"success": True, "count": 179}
    assert app.state.gateway.count() == 179
    assert client.get("/drawers/E1").json()["name"] == "Relays"


def test_replace_rejects_invalid_layouts(api_client):
    client, app = api_client
    drawers = list(drawers_by_id(client).values())

    res = client.put("/drawers", json=drawers[1:])
    assert res.status_code == 422

    res = client.put("/drawers", json=drawers + [drawers[0]])
    assert res.status_code == 422

    broken = [dict(item) for item in drawers]
    broken[0]["positions"] = "[1, 2]"
    res = client.put("/drawers", json=broken)
    assert res.status_code == 422

    assert app.state.gateway.count() == 180


def test_printer_config_roundtrip(api_client):
    client, _ = api_client
    res = client.get("/printer")
    assert res.status_code == 200
    assert res.json()["port"] == 631

    res = client.put("/printer", json={"queue_name": " labels ", "virtual_printing": True})
    assert res.status_code == 200
    assert res.json()["queue_name"] == "labels"
    assert client.get("/printer").json()["virtual_printing"] is True

    assert client.put("/printer", json={"port": 0}).status_code == 422


def test_virtual_print(api_client):
    client, _ = api_client
    client.put("/printer", json={"virtual_printing": True})
    client.patch("/drawers/F2", json={"name": "Springs"})

    res = client.post("/drawers/F2/print")
    assert res.status_code == 200
    assert res.json() == {"success": True, "virtual": True, "text": "Springs"}

    res = client.post("/drawers/F3/print")
    assert res.json()["text"] == "F03"

    res = client.post("/print", json={"text": "Hello"})
    assert res.json()["text"] == "Hello"


def test_print_errors(api_client, monkeypatch):
    client, _ = api_client
    res = client.post("/print", json={"text": "Hello"})
    assert res.status_code == 400

    from printer_client import PrinterClient, PrinterError

    def offline(self, text):
        raise PrinterError("printer offline")

    monkeypatch.setattr(PrinterClient, "print_text", offline)
    client.put("/printer", json={"queue_name": "labels"})
    res = client.post("/print", json={"text": "Hello"})
    assert res.status_code == 502
    assert res.json()["detail"] == "printer offline"


def test_print_closes_client_session(api_client, monkeypatch):
    client, _ = api_client
    from printer_client import PrinterClient, PrinterError

    closed = []
    monkeypatch.setattr(PrinterClient, "close", lambda self: closed.append(self.queue))

    client.put("/printer", json={"virtual_printing": True, "queue_name": "labels"})
    assert client.post("/print", json={"text": "Hello"}).status_code == 200
    assert closed == ["labels"]

    def offline(self, text):
        raise PrinterError("printer offline")

    monkeypatch.setattr(PrinterClient, "print_text", offline)
    assert client.post("/print", json={"text": "Hello"}).status_code == 502
    assert closed == ["labels", "labels"]
