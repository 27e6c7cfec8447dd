"""Order lifecycle: creation, edits while pending, and payment.

Orders start ``pending`` and move once to ``paid``; see
:mod:`cafe.app.domain.order_status`. Every write to an existing order is a
compare-and-set on the status the controller observed, so a payment racing an
edit either lands before it (and the edit fails) or after it (and pays for
the edited items), never in between.
"""

from __future__ import annotations

import logging
import secrets
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Sequence

from ..domain import (
    BadRequest,
    DuplicateKey,
    Internal,
    InvalidTransition,
    NotFound,
    OrderStatus,
    PaymentType,
    StatusConflict,
    can_transition,
    is_mutable,
)
from ..repos.orders_repo import OrdersRepo
from ..routes_metrics import orders_created_total, orders_paid_total, orders_updated_total
from ..schemas import Order
from ..security.admission import AdmissionGuard, AdmissionRequest
from .order_validator import OrderValidator, dump_lines

logger = logging.getLogger("cafe.orders")

ORDER_NUMBER_ATTEMPTS = 5
MAX_NOTES_LENGTH = 1000


def random_order_number() -> str:
    """Return a display code such as ``ORD-4821``."""

    return f"ORD-{1000 + secrets.randbelow(9000)}"


def _clean_notes(notes: Any) -> str | None:
    if notes is None:
        return None
    if not isinstance(notes, str):
        raise BadRequest("notes must be a string")
    notes = notes.strip()
    return notes[:MAX_NOTES_LENGTH] or None


class OrderLifecycle:
    """Own the pending → paid state machine for orders."""

    def __init__(
        self,
        orders: OrdersRepo,
        validator: OrderValidator,
        guard: AdmissionGuard,
        order_number: Callable[[], str] = random_order_number,
    ) -> None:
        self.orders = orders
        self.validator = validator
        self.guard = guard
        self.order_number = order_number

    async def create(
        self,
        admission: AdmissionRequest,
        table_id: Any,
        items: Sequence[Any] | None,
        notes: Any = None,
    ) -> Order:
        """Admit, validate and persist a new pending order."""

        await self.guard.check(admission)
        lines = await self.validator.validate(table_id, items)
        notes = _clean_notes(notes)

        for _ in range(ORDER_NUMBER_ATTEMPTS):
            order = Order(
                id=str(uuid.uuid4()),
                order_number=self.order_number(),
                table_id=table_id,
                items=dump_lines(lines),
                status=OrderStatus.PENDING,
                notes=notes,
                created_at=datetime.now(timezone.utc),
            )
            try:
                created = await self.orders.insert(order)
            except DuplicateKey:
                logger.info("order number %s taken; retrying", order.order_number)
                continue
            orders_created_total.inc()
            logger.info(
                "order created",
                extra={"order_id": created.id, "table_id": created.table_id},
            )
            return created

        logger.error("could not allocate an order number", extra={"table_id": table_id})
        raise Internal()

    async def get(self, order_id: str) -> Order:
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise NotFound("order not found")
        return order

    async def update(self, order_id: str, items: Sequence[Any] | None, notes: Any = None) -> Order:
        """Replace the items (and notes, when given) of a pending order."""

        order = await self.get(order_id)
        if not is_mutable(order.status):
            raise InvalidTransition("order is not pending")

        lines = await self.validator.normalize_items(items)
        new_notes = _clean_notes(notes) if notes is not None else order.notes
        try:
            updated = await self.orders.update_items(
                order.id, dump_lines(lines), new_notes, expected_status=OrderStatus.PENDING
            )
        except StatusConflict as exc:
            logger.info("order changed concurrently", extra={"order_id": order.id})
            raise InvalidTransition("order is not pending") from exc
        orders_updated_total.inc()
        return updated

    async def mark_paid(self, order_id: str, payment_type: Any) -> Order:
        """Settle a pending order; a paid order is never re-settled."""

        payment = PaymentType.parse(payment_type)
        if payment is None:
            allowed = ", ".join(p.value for p in PaymentType)
            raise BadRequest(f"payment_type must be one of {allowed}")

        order = await self.get(order_id)
        if not can_transition(order.status, OrderStatus.PAID):
            raise InvalidTransition("order is already paid")
        try:
            paid = await self.orders.set_paid(
                order.id, payment, expected_status=OrderStatus.PENDING
            )
        except StatusConflict as exc:
            logger.info("order paid concurrently", extra={"order_id": order.id})
            raise InvalidTransition("order is already paid") from exc
        orders_paid_total.labels(payment_type=payment.value).inc()
        logger.info("order paid", extra={"order_id": paid.id})
        return paid
