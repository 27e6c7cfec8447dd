#!/usr/bin/env python3
"""Seed a demo menu, dining tables and the café location.

Populates the database configured by ``DATABASE_URL`` with six tables and a
small menu. Pass ``--reset`` to delete existing orders, menu items, tables
and settings first.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

sys.path.append(str(Path(__file__).resolve().parents[1]))

from cafe.app.db import create_schema, get_engine  # noqa: E402
from cafe.app.models import CafeSettings, MenuItem, Order, Table  # noqa: E402
from config import get_settings  # noqa: E402

MENU_ITEMS = [
    ("Masala Chai", 40, "Beverages"),
    ("Filter Coffee", 60, "Beverages"),
    ("Cold Brew", 150, "Beverages"),
    ("Veg Sandwich", 120, "Snacks"),
    ("Paneer Puff", 45, "Snacks"),
    ("Chocolate Brownie", 110, "Desserts"),
]
TABLE_COUNT = 6


async def _reset(session: AsyncSession) -> None:
    """Remove orders, menu items, tables and the settings row."""

    for model in (Order, MenuItem, Table, CafeSettings):
        await session.execute(delete(model))
    await session.commit()


async def _seed(session: AsyncSession) -> dict[str, object]:
    """Insert demo data and return created identifiers."""

    settings = get_settings()
    session.add(
        CafeSettings(
            id=1,
            latitude=settings.cafe_latitude,
            longitude=settings.cafe_longitude,
            geofence_radius_meters=settings.geofence_radius_meters,
        )
    )

    items = []
    for name, price, category in MENU_ITEMS:
        item = MenuItem(name=name, price=price, category=category, is_available=True)
        session.add(item)
        await session.flush()
        items.append({"id": item.id, "name": name})

    tables = []
    for number in range(1, TABLE_COUNT + 1):
        table = Table(number=number)
        session.add(table)
        await session.flush()
        tables.append({"id": table.id, "number": number})

    await session.commit()
    return {"items": items, "tables": tables}


async def main(reset: bool) -> None:
    engine = get_engine()
    await create_schema(engine)
    sessionmaker = async_sessionmaker(engine, expire_on_commit=False)
    async with sessionmaker() as session:
        if reset:
            await _reset(session)
        data = await _seed(session)
    await engine.dispose()
    print(json.dumps(data))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo café data")
    parser.add_argument(
        "--reset", action="store_true", help="Purge existing data before seeding"
    )
    args = parser.parse_args()
    asyncio.run(main(args.reset))
