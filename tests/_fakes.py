"""In-memory stores used by service and route tests."""

from __future__ import annotations

from datetime import datetime, timezone

from cafe.app.domain import DuplicateKey, OrderStatus, StatusConflict
from cafe.app.repos.menu_repo import MenuRepo
from cafe.app.repos.orders_repo import OrdersRepo
from cafe.app.repos.settings_repo import SettingsRepo
from cafe.app.repos.tables_repo import TablesRepo
from cafe.app.schemas import CafeSettings, MenuItem, Table

CAFE_LAT = 12.9716
CAFE_LON = 77.5946
STAFF_KEY = "test-staff-key"

MENU = [
    MenuItem(id=1, name="Masala Chai", price=40, category="Beverages"),
    MenuItem(id=2, name="Filter Coffee", price=60, category="Beverages"),
    MenuItem(id=3, name="Veg Sandwich", price=120.5, category="Snacks"),
    MenuItem(id=4, name="Seasonal Tart", price=90, category="Desserts", is_available=False),
]


class FakeTablesRepo(TablesRepo):
    def __init__(self, numbers=(1, 2, 3)):
        self.tables = {n: Table(id=n, number=n) for n in numbers}

    async def get_table(self, table_id):
        return self.tables.get(table_id)

    async def list_tables(self):
        return sorted(self.tables.values(), key=lambda t: t.number)


class FakeMenuRepo(MenuRepo):
    def __init__(self, items=MENU):
        self.items = {item.id: item for item in items}

    async def get_items_by_ids(self, item_ids):
        return {i: self.items[i] for i in item_ids if i in self.items}

    async def list_available(self):
        available = [i for i in self.items.values() if i.is_available]
        return sorted(available, key=lambda i: (i.category, i.name))


class FakeOrdersRepo(OrdersRepo):
    def __init__(self):
        self.orders = {}

    async def insert(self, order):
        if any(o.order_number == order.order_number for o in self.orders.values()):
            raise DuplicateKey(order.order_number)
        self.orders[order.id] = order.model_copy(deep=True)
        return order.model_copy(deep=True)

    async def get_by_id(self, order_id):
        order = self.orders.get(order_id)
        return order.model_copy(deep=True) if order else None

    def _expect(self, order_id, expected_status):
        order = self.orders.get(order_id)
        if order is None or order.status != expected_status:
            raise StatusConflict(order_id, expected_status.value)
        return order

    async def update_items(self, order_id, items, notes, expected_status=OrderStatus.PENDING):
        order = self._expect(order_id, expected_status)
        order.items = items
        order.notes = notes
        order.updated_at = datetime.now(timezone.utc)
        return order.model_copy(deep=True)

    async def set_paid(self, order_id, payment_type, expected_status=OrderStatus.PENDING):
        order = self._expect(order_id, expected_status)
        now = datetime.now(timezone.utc)
        order.status = OrderStatus.PAID
        order.payment_type = payment_type
        order.paid_at = now
        order.updated_at = now
        return order.model_copy(deep=True)

    async def query(self, statuses=None, start=None, end=None, newest_first=False):
        rows = [
            o
            for o in self.orders.values()
            if (not statuses or o.status in statuses)
            and (start is None or o.created_at >= start)
            and (end is None or o.created_at <= end)
        ]
        rows.sort(key=lambda o: o.created_at, reverse=newest_first)
        return [o.model_copy(deep=True) for o in rows]


class FakeSettingsRepo(SettingsRepo):
    def __init__(self, latitude=CAFE_LAT, longitude=CAFE_LON, radius=100.0):
        self.settings = CafeSettings(
            latitude=latitude, longitude=longitude, geofence_radius_meters=radius
        )

    async def get_cafe_settings(self):
        return self.settings
