"""SQLAlchemy implementation of :class:`TablesRepo`."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select

from ..models import Table as TableRow
from ..repos.tables_repo import TablesRepo
from ..schemas import Table
from . import SQLRepo


class TablesRepoSQL(SQLRepo, TablesRepo):
    async def get_table(self, table_id: int) -> Optional[Table]:
        async def _get():
            row = await self.session.get(TableRow, table_id)
            return Table.model_validate(row) if row is not None else None

        return await self._run("get_table", _get, table_id=table_id)

    async def list_tables(self) -> List[Table]:
        async def _list():
            result = await self.session.execute(select(TableRow).order_by(TableRow.number))
            return [Table.model_validate(row) for row in result.scalars()]

        return await self._run("list_tables", _list)
