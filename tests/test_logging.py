import json
import logging
import random

from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.responses import JSONResponse

from cafe.app.middlewares.logging import LoggingMiddleware
from cafe.app.middlewares.request_id import RequestIdMiddleware
from cafe.app.obs.logging import JsonFormatter, RequestIdFilter


def _make_app():
    test_app = FastAPI()
    test_app.add_middleware(RequestIdMiddleware)
    test_app.add_middleware(LoggingMiddleware)

    @test_app.get("/health")
    async def health():
        return {"ok": True}

    @test_app.post("/echo")
    async def echo(data: dict):
        return data

    @test_app.post("/api/orders")
    async def reject():
        return JSONResponse({}, status_code=403)

    return test_app


def test_request_id_propagation(monkeypatch, caplog):
    monkeypatch.setattr("cafe.app.middlewares.logging.LOG_SAMPLE_2XX", 1)
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="api"):
        resp = client.get("/health", headers={"X-Request-ID": "abc"})
    assert resp.headers["X-Request-ID"] == "abc"
    data = json.loads(caplog.messages[1])
    assert data["req_id"] == "abc"
    assert data["status"] == 200


def test_request_id_generation(monkeypatch, caplog):
    monkeypatch.setattr("cafe.app.middlewares.logging.LOG_SAMPLE_2XX", 1)
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="api"):
        resp = client.get("/health")
    rid = resp.headers["X-Request-ID"]
    assert rid
    assert json.loads(caplog.messages[0])["req_id"] == rid
    assert json.loads(caplog.messages[1])["req_id"] == rid


def test_location_and_staff_key_redacted(monkeypatch, caplog):
    monkeypatch.setattr("cafe.app.middlewares.logging.LOG_SAMPLE_2XX", 1)
    client = TestClient(_make_app())
    payload = {
        "table_id": 4,
        "latitude": 12.97,
        "longitude": 77.59,
        "nested": {"lat": 1, "lng": 2},
        "staff_key": "s3cret",
    }
    with caplog.at_level(logging.INFO, logger="api"):
        client.post("/echo", json=payload, params={"lon": "77.59"})
    inbound = json.loads(caplog.messages[0])
    body = inbound["body"]
    for key in ("latitude", "longitude", "staff_key"):
        assert body[key] == "***"
    assert body["nested"] == {"lat": "***", "lng": "***"}
    assert body["table_id"] == 4
    assert inbound["query"]["lon"] == "***"


def test_order_4xx_sampling(monkeypatch, caplog):
    monkeypatch.setattr("cafe.app.middlewares.logging.LOG_SAMPLE_2XX", 1)
    monkeypatch.setattr("cafe.app.middlewares.logging.LOG_SAMPLE_ORDER_4XX", 0.1)
    random.seed(1)
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="api"):
        for _ in range(100):
            client.post("/api/orders")
    logged = len(caplog.messages) // 2
    assert 5 <= logged <= 15


def test_2xx_sampling(monkeypatch, caplog):
    monkeypatch.setattr("cafe.app.middlewares.logging.LOG_SAMPLE_2XX", 0.1)
    random.seed(1)
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="api"):
        for _ in range(100):
            client.get("/health")
    logged = len(caplog.messages) // 2
    assert 5 <= logged <= 15


def test_json_formatter_fields():
    formatter = JsonFormatter()
    record = logging.LogRecord(
        "cafe.orders", logging.WARNING, __file__, 0, "order paid", (), None
    )
    record.order_id = "o-1"
    record.reason = "outside service area"
    RequestIdFilter().filter(record)
    data = json.loads(formatter.format(record))
    assert data["level"] == "WARNING"
    assert data["logger"] == "cafe.orders"
    assert data["order_id"] == "o-1"
    assert data["reason"] == "outside service area"
    assert "table_id" not in data


def test_json_formatter_redacts_contact_details():
    formatter = JsonFormatter()
    record = logging.LogRecord(
        "api", logging.INFO, __file__, 0, "call 9998887776 or foo@example.com", (), None
    )
    msg = json.loads(formatter.format(record))["msg"]
    assert "9998887776" not in msg
    assert "foo@example.com" not in msg
