"""Async engine and session helpers.

The engine is created lazily from ``Settings.database_url`` so that tests can
point the application at an in-memory SQLite database before the first
request. In-memory SQLite URLs use a static pool so every session shares the
same data.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from config import get_settings

from ..models import Base
from ..obs import add_query_logger

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url)


def build_engine(url: str) -> AsyncEngine:
    """Return an :class:`AsyncEngine` for ``url`` with query logging attached."""

    if _is_memory_sqlite(url):
        engine = create_async_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(url, pool_pre_ping=True)
    add_query_logger(engine, "cafe")
    return engine


def get_engine() -> AsyncEngine:
    """Return the process wide engine, creating it on first use."""

    global _engine, _sessionmaker
    if _engine is None:
        _engine = build_engine(get_settings().database_url)
        _sessionmaker = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an ``AsyncSession`` for the duration of a request."""

    get_engine()
    assert _sessionmaker is not None
    async with _sessionmaker() as session:
        yield session


async def create_schema(engine: AsyncEngine | None = None) -> None:
    """Create all tables on ``engine``; used for SQLite development setups."""

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def create_test_session() -> tuple[async_sessionmaker[AsyncSession], AsyncEngine]:
    """Return a session factory and engine backed by in-memory SQLite.

    The schema is not created here; callers await :func:`create_schema` with
    the returned engine inside their event loop.
    """

    engine = build_engine("sqlite+aiosqlite://")
    return async_sessionmaker(engine, expire_on_commit=False), engine


async def dispose_engine() -> None:
    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _sessionmaker = None


__all__ = [
    "build_engine",
    "create_schema",
    "create_test_session",
    "dispose_engine",
    "get_engine",
    "get_session",
]
