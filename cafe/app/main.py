# main.py

"""FastAPI application for café table ordering and sales analytics."""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.asyncio import from_url
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware

from config import get_settings

from .db import create_schema, dispose_engine
from .domain import CafeError
from .middlewares import (
    HttpErrorCounterMiddleware,
    LoggingMiddleware,
    OrderRateLimitMiddleware,
    PrometheusMiddleware,
    RequestIdMiddleware,
)
from .obs import capture_exception, init_sentry
from .obs.logging import configure_logging
from .routes_admin_orders import router as admin_orders_router
from .routes_analytics import router as analytics_router
from .routes_catalog import router as catalog_router
from .routes_metrics import router as metrics_router
from .routes_orders import router as orders_router
from .utils.responses import err, ok

settings = get_settings()
app = FastAPI(title="Cafe Ordering API", version="1.0.0")

app.state.redis = from_url(
    settings.redis_url,
    decode_responses=True,
    socket_timeout=settings.store_timeout_secs,
    socket_connect_timeout=settings.store_timeout_secs,
)
app.add_middleware(GZipMiddleware, minimum_size=1024)
app.add_middleware(PrometheusMiddleware)
app.add_middleware(HttpErrorCounterMiddleware)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(OrderRateLimitMiddleware)
app.add_middleware(LoggingMiddleware)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
configure_logging(getattr(logging, LOG_LEVEL, logging.INFO))
logger = logging.getLogger("api")
init_sentry(env=os.getenv("ENV"))


@app.exception_handler(CafeError)
async def cafe_error_handler(request: Request, exc: CafeError):
    logger.info(
        exc.message,
        extra={
            "status": exc.status_code,
            "route": request.url.path,
            "error_code": exc.code,
        },
    )
    return JSONResponse(err(exc.code, exc.message), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg')}" if field else "invalid request body"
    logger.info(
        message,
        extra={"status": 400, "route": request.url.path, "error_code": "BAD_REQUEST"},
    )
    return JSONResponse(err("BAD_REQUEST", message), status_code=400)


HTTP_ERROR_CODES = {
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "INVALID_TRANSITION",
    413: "PAYLOAD_TOO_LARGE",
    415: "UNSUPPORTED_MEDIA_TYPE",
    429: "RATE_LIMIT",
    503: "UPSTREAM_UNAVAILABLE",
}


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(exc.detail, extra={"status": exc.status_code, "route": request.url.path})
    code = HTTP_ERROR_CODES.get(exc.status_code)
    if code is None:
        code = "INTERNAL" if exc.status_code >= 500 else "BAD_REQUEST"
    return JSONResponse(err(code, str(exc.detail)), status_code=exc.status_code)


@app.exception_handler(Exception)
async def general_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", extra={"status": 500, "route": request.url.path})
    capture_exception(exc)
    return JSONResponse(err("INTERNAL", "Internal Server Error"), status_code=500)


@app.on_event("startup")
async def prepare_schema() -> None:
    """Create tables for SQLite development databases."""

    current = get_settings()
    if current.auto_create_schema and current.database_url.startswith("sqlite"):
        await create_schema()


@app.on_event("shutdown")
async def close_engine() -> None:
    await dispose_engine()


@app.get("/health")
async def health() -> dict:
    return ok({"status": "ok"})


app.include_router(catalog_router)
app.include_router(orders_router)
app.include_router(admin_orders_router)
app.include_router(analytics_router)
app.include_router(metrics_router)
