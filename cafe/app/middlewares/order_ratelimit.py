"""Rate limiting middleware for order placement.

Runs ahead of the route handler so abusive clients are turned away before any
admission check or store lookup happens.
"""

from __future__ import annotations

import asyncio
import logging

from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from config import get_settings

from ..routes_metrics import order_rate_limited_total
from ..security import ratelimit
from ..security.network import client_ip
from ..utils import ratelimits
from ..utils.responses import rate_limited
from .order_utils import _is_order_post

logger = logging.getLogger("api")

BUCKET = "order_create"


class OrderRateLimitMiddleware(BaseHTTPMiddleware):
    """Limit order creation attempts per client IP in a fixed window."""

    async def dispatch(self, request: Request, call_next):
        if not _is_order_post(request.url.path, request.method):
            return await call_next(request)

        ip = client_ip(request.headers, request.client.host if request.client else None)
        ip = ip or "unknown"
        redis = request.app.state.redis
        policy = ratelimits.order_create()
        timeout = get_settings().store_timeout_secs
        try:
            allowed = await asyncio.wait_for(
                ratelimit.allow(
                    redis, ip, BUCKET, limit=policy.limit, window_secs=policy.window_secs
                ),
                timeout,
            )
            if not allowed:
                order_rate_limited_total.inc()
                wait = await asyncio.wait_for(ratelimit.retry_after(redis, ip, BUCKET), timeout)
                return rate_limited(wait)
        except asyncio.TimeoutError:
            logger.warning(
                "rate limiter timed out after %ss", timeout, extra={"client_ip": ip}
            )
        except RedisError as exc:
            # limiter unavailable; admit and let the admission guard decide
            logger.warning("rate limiter unavailable: %s", exc, extra={"client_ip": ip})
        return await call_next(request)
