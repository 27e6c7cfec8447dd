"""Service layer for order admission, lifecycle and analytics."""

from .analytics import AnalyticsService, OrderAggregator
from .order_lifecycle import OrderLifecycle
from .order_validator import OrderValidator

__all__ = [
    "AnalyticsService",
    "OrderAggregator",
    "OrderLifecycle",
    "OrderValidator",
]
