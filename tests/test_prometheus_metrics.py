from fastapi import FastAPI
from fastapi.testclient import TestClient

from cafe.app.middlewares.prometheus import PrometheusMiddleware
from cafe.app.routes_metrics import router as metrics_router


def test_metrics_expose_counters():
    app = FastAPI()
    app.add_middleware(PrometheusMiddleware)
    app.include_router(metrics_router)

    @app.get("/api/orders/{order_id}")
    async def order(order_id: str):
        return {}

    client = TestClient(app)
    client.get("/missing")
    client.get("/api/orders/abc")
    text = client.get("/metrics").text
    assert "http_requests_total" in text
    assert 'path="unmatched"' in text
    assert 'path="/api/orders/{order_id}"' in text
    assert "orders_created_total" in text
    assert "order_rate_limited_total" in text
    assert "analytics_malformed_orders_total" in text


def test_rejections_are_counted(client):
    client.post(
        "/api/orders",
        json={"table_id": 1, "items": [{"item_id": 1}], "latitude": 13.5, "longitude": 77.6},
    )
    text = client.get("/metrics").text
    assert 'admission_rejections_total{strategy="geofence",reason="outside service area"}' in text
