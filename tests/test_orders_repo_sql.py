import asyncio
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError, ProgrammingError

from cafe.app.db import create_schema, create_test_session
from cafe.app.domain import (
    DuplicateKey,
    Internal,
    OrderStatus,
    PaymentType,
    StatusConflict,
    UpstreamUnavailable,
)
from cafe.app.models import CafeSettings as CafeSettingsRow
from cafe.app.models import MenuItem as MenuItemRow
from cafe.app.models import Table as TableRow
from cafe.app.repos_sqlalchemy import SQLRepo
from cafe.app.repos_sqlalchemy.menu_repo_sql import MenuRepoSQL
from cafe.app.repos_sqlalchemy.orders_repo_sql import OrdersRepoSQL
from cafe.app.repos_sqlalchemy.settings_repo_sql import SettingsRepoSQL
from cafe.app.repos_sqlalchemy.tables_repo_sql import TablesRepoSQL
from cafe.app.schemas import Order


@pytest.fixture
async def session():
    Session, engine = create_test_session()
    await create_schema(engine)
    async with Session() as s:
        s.add_all(
            [
                TableRow(id=1, number=7),
                MenuItemRow(id=1, name="Chai", price=40, category="Beverages"),
                MenuItemRow(id=2, name="Brownie", price=110, category="Desserts"),
                MenuItemRow(id=3, name="Old Soup", price=80, category="Mains", is_available=False),
            ]
        )
        await s.commit()
        yield s
    await engine.dispose()


def _order(number="ORD-1234", created_at=None):
    return Order(
        id=str(uuid.uuid4()),
        order_number=number,
        table_id=1,
        items=[{"item_id": 1, "name": "Chai", "price": 40.0, "quantity": 2}],
        created_at=created_at or datetime.now(timezone.utc),
    )


@pytest.mark.anyio
async def test_insert_and_fetch_with_table_number(session):
    repo = OrdersRepoSQL(session)
    created = await repo.insert(_order())
    assert created.table_number == 7
    assert created.status == OrderStatus.PENDING
    assert created.created_at.tzinfo is not None
    fetched = await repo.get_by_id(created.id)
    assert fetched.items == created.items
    assert await repo.get_by_id("missing") is None


@pytest.mark.anyio
async def test_duplicate_order_number(session):
    repo = OrdersRepoSQL(session)
    await repo.insert(_order("ORD-5555"))
    with pytest.raises(DuplicateKey):
        await repo.insert(_order("ORD-5555"))
    assert len(await repo.query()) == 1


@pytest.mark.anyio
async def test_set_paid_is_compare_and_set(session):
    repo = OrdersRepoSQL(session)
    order = await repo.insert(_order())
    paid = await repo.set_paid(order.id, PaymentType.CARD, OrderStatus.PENDING)
    assert paid.status == OrderStatus.PAID
    assert paid.payment_type == PaymentType.CARD
    assert paid.paid_at is not None

    with pytest.raises(StatusConflict):
        await repo.set_paid(order.id, PaymentType.CASH, OrderStatus.PENDING)
    with pytest.raises(StatusConflict):
        await repo.update_items(order.id, [], None, OrderStatus.PENDING)
    stored = await repo.get_by_id(order.id)
    assert stored.payment_type == PaymentType.CARD
    assert len(stored.items) == 1


@pytest.mark.anyio
async def test_update_items(session):
    repo = OrdersRepoSQL(session)
    order = await repo.insert(_order())
    items = [{"item_id": 2, "name": "Brownie", "price": 110.0, "quantity": 1}]
    updated = await repo.update_items(order.id, items, "no nuts", OrderStatus.PENDING)
    assert updated.items == items
    assert updated.notes == "no nuts"
    assert updated.updated_at is not None


@pytest.mark.anyio
async def test_query_filters_and_orders(session):
    repo = OrdersRepoSQL(session)
    base = datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
    first = await repo.insert(_order("ORD-1001", base))
    second = await repo.insert(_order("ORD-1002", base + timedelta(hours=1)))
    await repo.insert(_order("ORD-1003", base + timedelta(days=2)))
    await repo.set_paid(second.id, PaymentType.UPI, OrderStatus.PENDING)

    window = await repo.query(start=base, end=base + timedelta(hours=1))
    assert [o.id for o in window] == [first.id, second.id]

    newest = await repo.query(start=base, end=base + timedelta(hours=1), newest_first=True)
    assert [o.id for o in newest] == [second.id, first.id]

    paid = await repo.query(statuses=[OrderStatus.PAID])
    assert [o.id for o in paid] == [second.id]


@pytest.mark.anyio
async def test_catalog_and_tables(session):
    menu = MenuRepoSQL(session)
    available = await menu.list_available()
    assert [i.name for i in available] == ["Chai", "Brownie"]
    found = await menu.get_items_by_ids({1, 3, 99})
    assert set(found) == {1, 3}
    assert found[1].price == 40.0

    tables = TablesRepoSQL(session)
    assert (await tables.get_table(1)).number == 7
    assert await tables.get_table(2) is None


@pytest.mark.anyio
async def test_settings_row_overrides_configuration(session):
    repo = SettingsRepoSQL(session)
    configured = await repo.get_cafe_settings()
    assert configured.geofence_radius_meters >= 0

    session.add(CafeSettingsRow(id=1, latitude=1.5, longitude=2.5, geofence_radius_meters=50))
    await session.commit()
    stored = await repo.get_cafe_settings()
    assert (stored.latitude, stored.longitude, stored.geofence_radius_meters) == (1.5, 2.5, 50)


@pytest.mark.anyio
async def test_store_timeout_maps_to_upstream_unavailable(session):
    repo = SQLRepo(session, timeout=0.01)

    async def _slow():
        await asyncio.sleep(1)

    with pytest.raises(UpstreamUnavailable):
        await repo._run("slow_op", _slow)


@pytest.mark.anyio
async def test_driver_errors_are_wrapped(session):
    repo = SQLRepo(session)

    async def _down():
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    async def _broken():
        raise ProgrammingError("SELECT nope", {}, Exception("syntax"))

    with pytest.raises(UpstreamUnavailable):
        await repo._run("down", _down)
    with pytest.raises(Internal) as excinfo:
        await repo._run("broken", _broken)
    assert "syntax" not in excinfo.value.message


@pytest.mark.anyio
async def test_non_number_integrity_errors_are_not_retried(session):
    repo = OrdersRepoSQL(session)
    first = await repo.insert(_order("ORD-2001"))
    clash = _order("ORD-2002").model_copy(update={"id": first.id})
    with pytest.raises(Internal):
        await repo.insert(clash)
    assert [o.order_number for o in await repo.query()] == ["ORD-2001"]


@pytest.mark.anyio
async def test_vanished_row_after_update_is_internal(session, monkeypatch):
    repo = OrdersRepoSQL(session)
    order = await repo.insert(_order())

    async def _gone(order_id):
        return None

    monkeypatch.setattr(repo, "_fetch", _gone)
    with pytest.raises(Internal):
        await repo.set_paid(order.id, PaymentType.CASH, OrderStatus.PENDING)
