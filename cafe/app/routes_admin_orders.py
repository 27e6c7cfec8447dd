"""Staff facing order queues and history."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from config import Settings

from .deps import get_app_settings, get_orders_repo
from .domain import BadRequest, OrderStatus
from .repos.orders_repo import OrdersRepo
from .services.analytics import total_revenue
from .utils.responses import ok
from .utils.timewindow import local_tz, parse_bound

router = APIRouter(prefix="/api/admin/orders", tags=["admin"])


def _parse_statuses(raw: str | None) -> list[OrderStatus] | None:
    if not raw:
        return None
    statuses = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            statuses.append(OrderStatus(part))
        except ValueError as exc:
            raise BadRequest(f"unknown status {part!r}") from exc
    return statuses or None


@router.get("")
async def pending_orders(orders: OrdersRepo = Depends(get_orders_repo)) -> dict:
    """Return the pending queue, oldest first."""

    pending = await orders.query(statuses=[OrderStatus.PENDING])
    return ok([order.model_dump(mode="json") for order in pending])


@router.get("/history")
async def order_history(
    startDate: str | None = None,
    endDate: str | None = None,
    statuses: str | None = None,
    aggregate: str | None = None,
    orders: OrdersRepo = Depends(get_orders_repo),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """Return past orders newest first, or their revenue with ``aggregate=revenue``."""

    tz = local_tz(settings.cafe_utc_offset_minutes)
    start = parse_bound(startDate, tz, end=False, name="startDate")
    end = parse_bound(endDate, tz, end=True, name="endDate")
    wanted = _parse_statuses(statuses)

    if aggregate is not None and aggregate != "revenue":
        raise BadRequest(f"unknown aggregate {aggregate!r}")
    if aggregate == "revenue":
        if wanted is not None and OrderStatus.PAID not in wanted:
            return ok({"totalRevenue": 0.0})
        paid = await orders.query(statuses=[OrderStatus.PAID], start=start, end=end)
        return ok({"totalRevenue": total_revenue(paid)})

    history = await orders.query(statuses=wanted, start=start, end=end, newest_first=True)
    return ok([order.model_dump(mode="json") for order in history])
