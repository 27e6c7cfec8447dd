"""SQLAlchemy-backed order store.

Status changing writes are compare-and-set updates: the ``UPDATE`` carries
``status = :expected`` in its ``WHERE`` clause and a zero row count means
another writer got there first, reported as :class:`StatusConflict`.
Timestamps are written in UTC from Python so that window queries compare
like with like on every backend.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from ..domain import DuplicateKey, Internal, OrderStatus, PaymentType, StatusConflict
from ..models import Order as OrderRow
from ..models import Table as TableRow
from ..repos.orders_repo import OrdersRepo
from ..schemas import Order
from . import SQLRepo


def _utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_schema(row: OrderRow, table_number: int | None) -> Order:
    return Order(
        id=row.id,
        order_number=row.order_number,
        table_id=row.table_id,
        table_number=table_number,
        items=row.items,
        status=OrderStatus(row.status),
        payment_type=PaymentType.parse(row.payment_type),
        notes=row.notes,
        created_at=_utc(row.created_at),
        updated_at=_utc(row.updated_at),
        paid_at=_utc(row.paid_at),
    )


def _with_table():
    return select(OrderRow, TableRow.number).outerjoin(
        TableRow, TableRow.id == OrderRow.table_id
    )


class OrdersRepoSQL(SQLRepo, OrdersRepo):
    async def insert(self, order: Order) -> Order:
        async def _insert():
            row = OrderRow(
                id=order.id,
                order_number=order.order_number,
                table_id=order.table_id,
                items=order.items,
                status=order.status.value,
                notes=order.notes,
                created_at=_utc(order.created_at) or datetime.now(timezone.utc),
            )
            self.session.add(row)
            try:
                await self.session.commit()
            except IntegrityError as exc:
                await self.session.rollback()
                if await self._number_taken(order.order_number):
                    raise DuplicateKey(order.order_number) from exc
                raise
            return await self._fetch(order.id)

        return await self._run("insert_order", _insert, order_id=order.id)

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        return await self._run(
            "get_order", lambda: self._fetch(order_id), order_id=order_id
        )

    async def _fetch(self, order_id: str) -> Optional[Order]:
        result = await self.session.execute(_with_table().where(OrderRow.id == order_id))
        row = result.one_or_none()
        if row is None:
            return None
        return _to_schema(row[0], row[1])

    async def _number_taken(self, order_number: str) -> bool:
        result = await self.session.execute(
            select(OrderRow.id).where(OrderRow.order_number == order_number)
        )
        return result.first() is not None

    async def _compare_and_set(
        self, order_id: str, expected_status: OrderStatus, values: dict
    ) -> Order:
        result = await self.session.execute(
            update(OrderRow)
            .where(OrderRow.id == order_id, OrderRow.status == expected_status.value)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.session.rollback()
            raise StatusConflict(order_id, expected_status.value)
        await self.session.commit()
        # identity map may hold the pre-update row
        self.session.expire_all()
        order = await self._fetch(order_id)
        if order is None:
            raise Internal()
        return order

    async def update_items(
        self,
        order_id: str,
        items: List[dict],
        notes: Optional[str],
        expected_status: OrderStatus = OrderStatus.PENDING,
    ) -> Order:
        values = {
            "items": items,
            "notes": notes,
            "updated_at": datetime.now(timezone.utc),
        }
        return await self._run(
            "update_order_items",
            lambda: self._compare_and_set(order_id, expected_status, values),
            order_id=order_id,
        )

    async def set_paid(
        self,
        order_id: str,
        payment_type: PaymentType,
        expected_status: OrderStatus = OrderStatus.PENDING,
    ) -> Order:
        now = datetime.now(timezone.utc)
        values = {
            "status": OrderStatus.PAID.value,
            "payment_type": payment_type.value,
            "paid_at": now,
            "updated_at": now,
        }
        return await self._run(
            "set_order_paid",
            lambda: self._compare_and_set(order_id, expected_status, values),
            order_id=order_id,
        )

    async def query(
        self,
        statuses: Iterable[OrderStatus] | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        newest_first: bool = False,
    ) -> List[Order]:
        stmt = _with_table()
        if statuses:
            stmt = stmt.where(OrderRow.status.in_([s.value for s in statuses]))
        if start is not None:
            stmt = stmt.where(OrderRow.created_at >= _utc(start))
        if end is not None:
            stmt = stmt.where(OrderRow.created_at <= _utc(end))
        order_by = OrderRow.created_at.desc() if newest_first else OrderRow.created_at.asc()
        stmt = stmt.order_by(order_by)

        async def _query():
            result = await self.session.execute(stmt)
            return [_to_schema(row, number) for row, number in result.all()]

        return await self._run("query_orders", _query)
