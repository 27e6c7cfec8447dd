"""Read-only menu and table listings for the ordering frontend."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from .deps import get_menu_repo, get_tables_repo
from .repos.menu_repo import MenuRepo
from .repos.tables_repo import TablesRepo
from .utils.responses import ok

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/menu")
async def list_menu(menu: MenuRepo = Depends(get_menu_repo)) -> dict:
    items = await menu.list_available()
    return ok([item.model_dump() for item in items])


@router.get("/tables")
async def list_tables(tables: TablesRepo = Depends(get_tables_repo)) -> dict:
    rows = await tables.list_tables()
    return ok([table.model_dump() for table in rows])
