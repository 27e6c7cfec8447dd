"""Shared helpers for order request guards."""

from __future__ import annotations

ORDERS_PATH = "/api/orders"


def _is_order_post(path: str, method: str) -> bool:
    """Return True if the request places a new order."""
    return method == "POST" and path.rstrip("/") == ORDERS_PATH
