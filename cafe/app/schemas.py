# schemas.py

"""Pydantic models for API payloads, responses and store records."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt

from .domain import OrderStatus, PaymentType


class Table(BaseModel):
    """Dining table as returned by the table store."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    number: int


class MenuItem(BaseModel):
    """Catalog entry as returned by the menu store."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: float = Field(ge=0)
    category: str = ""
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_available: bool = True


class OrderLine(BaseModel):
    """Snapshot of a menu item inside an order."""

    item_id: int
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    category: str = ""
    image_url: Optional[str] = None
    note: str = ""


class Order(BaseModel):
    """Order record.

    ``items`` is left untyped because historical rows may hold malformed
    data; writers always store a list of :class:`OrderLine` dumps.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    order_number: str
    table_id: int
    table_number: Optional[int] = None
    items: Any = Field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING
    payment_type: Optional[PaymentType] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None


class CafeSettings(BaseModel):
    """Café location used by the geofence admission strategy."""

    model_config = ConfigDict(from_attributes=True)

    latitude: float
    longitude: float
    geofence_radius_meters: float = Field(ge=0)


class OrderItemIn(BaseModel):
    """Requested line item.

    Client supplied ``name``, ``price`` and ``category`` are accepted for
    compatibility with existing frontends but are never trusted.
    """

    model_config = ConfigDict(extra="ignore")

    item_id: Optional[int | str] = None
    quantity: Any = None
    note: Optional[str] = None
    name: Any = None
    price: Any = None
    category: Any = None


class OrderCreate(BaseModel):
    """Payload for placing a new order from a table."""

    table_id: Optional[StrictInt] = None
    items: Optional[List[OrderItemIn]] = None
    notes: Optional[str] = None
    latitude: Any = Field(default=None, validation_alias=AliasChoices("latitude", "lat"))
    longitude: Any = Field(
        default=None, validation_alias=AliasChoices("longitude", "lon", "lng")
    )


class OrderUpdate(BaseModel):
    """Payload replacing the contents of a pending order."""

    items: Optional[List[OrderItemIn]] = None
    notes: Optional[str] = None


class PaymentIn(BaseModel):
    """Payload for settling an order."""

    payment_type: Optional[str] = None
