"""SQLAlchemy-backed repository implementations.

Every store call made by these repositories goes through :meth:`SQLRepo._run`,
which bounds it with ``store_timeout_secs`` and wraps driver failures into the
service's error taxonomy. Timeouts and connection problems become
:class:`UpstreamUnavailable`; any other SQLAlchemy error becomes
:class:`Internal`. The original error text is logged, never returned.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config import get_settings

from ..domain import Internal, UpstreamUnavailable
from ..routes_metrics import store_errors_total

logger = logging.getLogger("cafe.store")

T = TypeVar("T")


class SQLRepo:
    """Base class holding the session and the store call guard."""

    def __init__(self, session: AsyncSession, timeout: float | None = None) -> None:
        self.session = session
        self.timeout = timeout if timeout is not None else get_settings().store_timeout_secs

    async def _run(self, op: str, fn: Callable[[], Awaitable[T]], **context: Any) -> T:
        try:
            return await asyncio.wait_for(fn(), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            store_errors_total.labels(op=op, kind="timeout").inc()
            logger.error("store timeout after %ss", self.timeout, extra={"op": op, **context})
            await self._rollback(op)
            raise UpstreamUnavailable() from exc
        except (OperationalError, InterfaceError, DisconnectionError) as exc:
            store_errors_total.labels(op=op, kind="unavailable").inc()
            logger.error("store unavailable: %s", exc, extra={"op": op, **context})
            await self._rollback(op)
            raise UpstreamUnavailable() from exc
        except SQLAlchemyError as exc:
            store_errors_total.labels(op=op, kind="error").inc()
            logger.exception("store error", extra={"op": op, **context})
            await self._rollback(op)
            raise Internal() from exc

    async def _rollback(self, op: str) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError:  # pragma: no cover - connection already gone
            logger.warning("rollback failed", extra={"op": op})


__all__ = ["SQLRepo"]
