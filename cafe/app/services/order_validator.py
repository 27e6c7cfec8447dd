"""Validation and normalization of order line items.

The validator checks that a write references a real table and real menu items
and turns raw client requests into :class:`OrderLine` snapshots. Line data is
always taken from the catalog (the authoritative policy); client supplied
names, prices and categories are ignored so an order cannot be underpriced
from the browser.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Protocol, Sequence

from ..domain import BadRequest, InvalidReference
from ..repos.menu_repo import MenuRepo
from ..repos.tables_repo import TablesRepo
from ..schemas import MenuItem, OrderLine

logger = logging.getLogger("cafe.orders")

MAX_NOTE_LENGTH = 500


class LineNormalizer(Protocol):
    """Build a stored line from a raw request and its catalog entry."""

    def __call__(self, raw: Mapping[str, Any], item: MenuItem, quantity: int) -> OrderLine:
        ...


def authoritative_line(raw: Mapping[str, Any], item: MenuItem, quantity: int) -> OrderLine:
    """Snapshot name, price, category and image from the catalog entry."""

    return OrderLine(
        item_id=item.id,
        name=item.name,
        price=item.price,
        quantity=quantity,
        category=item.category or "",
        image_url=item.image_url,
        note=_clean_note(raw.get("note")),
    )


def _clean_note(raw: Any) -> str:
    if not isinstance(raw, str):
        return ""
    return raw.strip()[:MAX_NOTE_LENGTH]


def _as_mapping(raw: Any) -> Mapping[str, Any]:
    if isinstance(raw, Mapping):
        return raw
    if hasattr(raw, "model_dump"):
        return raw.model_dump()
    raise BadRequest("each item must be an object")


def parse_item_id(raw: Any) -> int | None:
    """Return ``raw`` as a catalog id, or ``None`` if it is missing/unusable."""

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        return int(raw.strip())
    return None


def parse_quantity(raw: Any) -> int:
    """Return a positive quantity; a missing value means one."""

    if raw is None:
        return 1
    if isinstance(raw, bool):
        raise BadRequest("quantity must be a positive integer")
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    if isinstance(raw, str) and raw.strip().isdigit():
        raw = int(raw.strip())
    if not isinstance(raw, int) or raw < 1:
        raise BadRequest("quantity must be a positive integer")
    return raw


class OrderValidator:
    """Check referential integrity of an order and normalize its lines."""

    def __init__(
        self,
        tables: TablesRepo,
        menu: MenuRepo,
        normalize: LineNormalizer = authoritative_line,
    ) -> None:
        self.tables = tables
        self.menu = menu
        self.normalize = normalize

    async def check_table(self, table_id: Any) -> None:
        if table_id is None or isinstance(table_id, bool):
            raise BadRequest("table_id is required")
        if await self.tables.get_table(table_id) is None:
            logger.info("unknown table", extra={"table_id": table_id})
            raise InvalidReference("table")

    async def normalize_items(self, items: Sequence[Any] | None) -> List[OrderLine]:
        """Resolve ``items`` against the catalog and return order lines."""

        if not isinstance(items, (list, tuple)) or not items:
            raise BadRequest("items must be a non-empty array")

        raws = [_as_mapping(raw) for raw in items]
        quantities = [parse_quantity(raw.get("quantity")) for raw in raws]
        ids = [parse_item_id(raw.get("item_id")) for raw in raws]
        if any(item_id is None for item_id in ids):
            raise InvalidReference("items")

        requested = set(ids)
        found = await self.menu.get_items_by_ids(requested)
        if len(found) != len(requested):
            missing = sorted(i for i in requested if i not in found)
            logger.info("unknown menu items %s", missing)
            raise InvalidReference("items")

        lines = []
        for raw, item_id, quantity in zip(raws, ids, quantities):
            item = found.get(item_id)
            if item is None:
                raise InvalidReference("items")
            lines.append(self.normalize(raw, item, quantity))
        return lines

    async def validate(self, table_id: Any, items: Sequence[Any] | None) -> List[OrderLine]:
        """Run the table check then the item check for a new order."""

        await self.check_table(table_id)
        return await self.normalize_items(items)


def dump_lines(lines: Iterable[OrderLine]) -> List[dict]:
    return [line.model_dump() for line in lines]
