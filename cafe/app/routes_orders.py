"""Customer and staff order routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from .deps import get_order_lifecycle
from .schemas import OrderCreate, OrderUpdate, PaymentIn
from .security.admission import STAFF_HEADER, AdmissionRequest
from .security.network import client_ip
from .services import OrderLifecycle
from .utils.responses import ok

router = APIRouter(prefix="/api/orders", tags=["orders"])


def _admission_request(request: Request, payload: OrderCreate) -> AdmissionRequest:
    return AdmissionRequest(
        staff_key=request.headers.get(STAFF_HEADER),
        latitude=payload.latitude,
        longitude=payload.longitude,
        client_ip=client_ip(
            request.headers, request.client.host if request.client else None
        ),
    )


@router.post("")
async def create_order(
    payload: OrderCreate,
    request: Request,
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
) -> dict:
    """Place a new order for a table after admission and validation."""

    items = [item.model_dump() for item in payload.items] if payload.items is not None else None
    order = await lifecycle.create(
        _admission_request(request, payload), payload.table_id, items, payload.notes
    )
    return ok(order.model_dump(mode="json"))


@router.get("/{order_id}")
async def get_order(
    order_id: str, lifecycle: OrderLifecycle = Depends(get_order_lifecycle)
) -> dict:
    order = await lifecycle.get(order_id)
    return ok(order.model_dump(mode="json"))


@router.patch("/{order_id}")
async def update_order(
    order_id: str,
    payload: OrderUpdate,
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
) -> dict:
    """Replace the items of a pending order."""

    items = [item.model_dump() for item in payload.items] if payload.items is not None else None
    order = await lifecycle.update(order_id, items, payload.notes)
    return ok(order.model_dump(mode="json"))


@router.patch("/{order_id}/pay")
async def pay_order(
    order_id: str,
    payload: PaymentIn,
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
) -> dict:
    """Mark a pending order as paid."""

    order = await lifecycle.mark_paid(order_id, payload.payment_type)
    return ok(order.model_dump(mode="json"))
