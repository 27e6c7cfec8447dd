"""Sales analytics over paid orders.

:class:`OrderAggregator` derives every metric in one pass over the order set.
Rows whose ``items`` are not a list are counted as orders but contribute
nothing to revenue or item totals; they are logged and skipped rather than
failing the report. Hour buckets use the café's fixed UTC offset.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable

from ..domain import NotFound, OrderStatus
from ..repos.orders_repo import OrdersRepo
from ..routes_metrics import analytics_malformed_orders_total
from ..utils.timewindow import local_tz, resolve_window

logger = logging.getLogger("cafe.analytics")

UNKNOWN_ITEM = "Unknown"
CENT = Decimal("0.01")


def _price(raw: Any) -> Decimal:
    if raw is None or isinstance(raw, bool):
        return Decimal(0)
    try:
        value = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        return Decimal(0)
    if not value.is_finite():
        return Decimal(0)
    return value


def _quantity(raw: Any) -> int:
    if isinstance(raw, bool):
        return 1
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return 1
    return value or 1


def _field(order: Any, name: str) -> Any:
    if isinstance(order, dict):
        return order.get(name)
    return getattr(order, name, None)


def _money(value: Decimal) -> float:
    return float(value.quantize(CENT))


def hour_label(hour: int) -> str:
    return f"{hour:02d}:00-{hour + 1:02d}:00"


class OrderAggregator:
    """Accumulate order metrics in a single scan."""

    def __init__(self, utc_offset: timedelta = timedelta(0)) -> None:
        self.tz = timezone(utc_offset)
        self.total_orders = 0
        self.total_revenue = Decimal(0)
        self.total_items_sold = 0
        self.item_quantities: Dict[str, int] = {}
        self.hour_counts = [0] * 24

    def add(self, order: Any) -> None:
        self.total_orders += 1
        self._bucket(_field(order, "created_at"))

        items = _field(order, "items")
        if not isinstance(items, list):
            analytics_malformed_orders_total.inc()
            logger.warning(
                "skipping order with malformed items",
                extra={"order_id": _field(order, "id")},
            )
            return

        for line in items:
            if not isinstance(line, dict):
                logger.warning(
                    "skipping malformed line", extra={"order_id": _field(order, "id")}
                )
                continue
            quantity = _quantity(line.get("quantity"))
            self.total_revenue += _price(line.get("price")) * quantity
            self.total_items_sold += quantity
            name = line.get("name") or UNKNOWN_ITEM
            self.item_quantities[name] = self.item_quantities.get(name, 0) + quantity

    def _bucket(self, created_at: Any) -> None:
        if isinstance(created_at, str):
            try:
                created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
            except ValueError:
                return
        if not isinstance(created_at, datetime):
            return
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        self.hour_counts[created_at.astimezone(self.tz).hour] += 1

    def extend(self, orders: Iterable[Any]) -> "OrderAggregator":
        for order in orders:
            self.add(order)
        return self

    @property
    def average_order_value(self) -> Decimal:
        if not self.total_orders:
            return Decimal(0)
        return self.total_revenue / self.total_orders

    @property
    def most_sold_item(self) -> dict:
        best = {"name": "N/A", "totalSold": 0}
        for name, sold in self.item_quantities.items():
            if sold > best["totalSold"]:
                best = {"name": name, "totalSold": sold}
        return best

    @property
    def peak_hour(self) -> str:
        peak = 0
        for hour, count in enumerate(self.hour_counts):
            if count > self.hour_counts[peak]:
                peak = hour
        return hour_label(peak) if self.hour_counts[peak] > 0 else "N/A"

    def summary(self) -> dict:
        return {
            "totalOrders": self.total_orders,
            "totalRevenue": _money(self.total_revenue),
            "averageOrderValue": _money(self.average_order_value),
            "mostSoldItem": self.most_sold_item,
            "peakHour": self.peak_hour,
            "totalItemsSold": self.total_items_sold,
        }


METRICS: Dict[str, Callable[[dict], dict]] = {
    "total-orders": lambda s: {"totalOrders": s["totalOrders"]},
    "total-revenue": lambda s: {"totalRevenue": s["totalRevenue"]},
    "average-order-value": lambda s: {"averageOrderValue": s["averageOrderValue"]},
    "most-sold-item": lambda s: dict(s["mostSoldItem"]),
    "peak-hours": lambda s: {"peakHour": s["peakHour"]},
    "total-items-sold": lambda s: {"totalItemsSold": s["totalItemsSold"]},
    "summary": lambda s: s,
}


class AnalyticsService:
    """Load paid orders for a window and aggregate them."""

    def __init__(self, orders: OrdersRepo, utc_offset_minutes: int = 0) -> None:
        self.orders = orders
        self.utc_offset = timedelta(minutes=utc_offset_minutes)

    async def summary(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        now: datetime | None = None,
    ) -> dict:
        start, end = resolve_window(start_date, end_date, local_tz(self.utc_offset_minutes), now)
        orders = await self.orders.query(statuses=[OrderStatus.PAID], start=start, end=end)
        return OrderAggregator(self.utc_offset).extend(orders).summary()

    @property
    def utc_offset_minutes(self) -> int:
        return int(self.utc_offset.total_seconds() // 60)

    async def metric(
        self,
        name: str,
        start_date: str | None = None,
        end_date: str | None = None,
        now: datetime | None = None,
    ) -> dict:
        project = METRICS.get(name)
        if project is None:
            raise NotFound(f"unknown metric {name!r}")
        return project(await self.summary(start_date, end_date, now))


def total_revenue(orders: Iterable[Any]) -> float:
    """Return the revenue of ``orders``; used by the order history export."""

    return _money(OrderAggregator().extend(orders).total_revenue)
