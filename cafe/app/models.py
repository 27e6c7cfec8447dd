"""Database models for the café ordering schema.

These models are kept isolated from any application wiring so that they can
be used in tests or migrations independently. Order line items are stored as
a JSON snapshot on the order row so that historical names and prices survive
later menu edits.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Table(Base):
    """Dining tables customers order from."""

    __tablename__ = "tables"

    id = Column(Integer, primary_key=True)
    number = Column(Integer, nullable=False, unique=True)


class MenuItem(Base):
    """Catalog entries orders are validated against."""

    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String, nullable=False, default="")
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)


class Order(Base):
    """Orders placed from a table."""

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_number = Column(String(16), nullable=False, unique=True)
    table_id = Column(Integer, ForeignKey("tables.id"), nullable=False)
    items = Column(JSON, nullable=False, default=list)
    status = Column(String(16), nullable=False, default="pending", index=True)
    payment_type = Column(String(16), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)


class CafeSettings(Base):
    """Singleton row holding the café location used for geofencing."""

    __tablename__ = "cafe_settings"

    id = Column(Integer, primary_key=True, default=1)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    geofence_radius_meters = Column(Float, nullable=False)
