"""SQLAlchemy implementation of :class:`MenuRepo`."""

from __future__ import annotations

from typing import Dict, Iterable, List

from sqlalchemy import select

from ..models import MenuItem as MenuItemRow
from ..repos.menu_repo import MenuRepo
from ..schemas import MenuItem
from . import SQLRepo


def _to_schema(row: MenuItemRow) -> MenuItem:
    return MenuItem(
        id=row.id,
        name=row.name,
        price=float(row.price),
        category=row.category or "",
        description=row.description,
        image_url=row.image_url,
        is_available=bool(row.is_available),
    )


class MenuRepoSQL(SQLRepo, MenuRepo):
    async def get_items_by_ids(self, item_ids: Iterable[int]) -> Dict[int, MenuItem]:
        ids = sorted(set(item_ids))
        if not ids:
            return {}

        async def _get():
            result = await self.session.execute(
                select(MenuItemRow).where(MenuItemRow.id.in_(ids))
            )
            return {row.id: _to_schema(row) for row in result.scalars()}

        return await self._run("get_menu_items", _get)

    async def list_available(self) -> List[MenuItem]:
        async def _list():
            result = await self.session.execute(
                select(MenuItemRow)
                .where(MenuItemRow.is_available.is_(True))
                .order_by(MenuItemRow.category, MenuItemRow.name)
            )
            return [_to_schema(row) for row in result.scalars()]

        return await self._run("list_menu", _list)
