from .http_errors import HttpErrorCounterMiddleware
from .logging import LoggingMiddleware
from .order_ratelimit import OrderRateLimitMiddleware
from .prometheus import PrometheusMiddleware
from .request_id import RequestIdMiddleware

__all__ = [
    "RequestIdMiddleware",
    "LoggingMiddleware",
    "OrderRateLimitMiddleware",
    "PrometheusMiddleware",
    "HttpErrorCounterMiddleware",
]
