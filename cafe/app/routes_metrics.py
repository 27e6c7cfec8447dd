# routes_metrics.py

"""Prometheus metrics and /metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

# Counters
http_requests_total = Counter(
    "http_requests_total", "Total HTTP requests", ["path", "method", "status"]
)

http_errors_total = Counter("http_errors_total", "Total HTTP errors", ["status"])
http_errors_total.labels(status="0").inc(0)

orders_created_total = Counter("orders_created_total", "Total orders created")
orders_created_total.inc(0)

orders_updated_total = Counter("orders_updated_total", "Total pending orders modified")
orders_updated_total.inc(0)

orders_paid_total = Counter(
    "orders_paid_total", "Total orders marked paid", ["payment_type"]
)

admission_rejections_total = Counter(
    "admission_rejections_total",
    "Order requests rejected by the admission guard",
    ["strategy", "reason"],
)

order_rate_limited_total = Counter(
    "order_rate_limited_total", "Order attempts rejected by the rate limiter"
)
order_rate_limited_total.inc(0)

analytics_malformed_orders_total = Counter(
    "analytics_malformed_orders_total",
    "Orders skipped by analytics because their items were malformed",
)
analytics_malformed_orders_total.inc(0)

store_errors_total = Counter(
    "store_errors_total", "Failed order store operations", ["op", "kind"]
)

router = APIRouter()


@router.get("/metrics")
async def metrics_endpoint() -> Response:
    """Expose Prometheus metrics."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
