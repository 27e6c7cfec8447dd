"""Domain models and helpers."""

from .errors import (
    BadRequest,
    CafeError,
    DuplicateKey,
    Forbidden,
    Internal,
    InvalidReference,
    InvalidTransition,
    NotFound,
    StatusConflict,
    UpstreamUnavailable,
)
from .order_status import OrderStatus, TRANSITIONS, can_transition, is_mutable
from .payment_type import PaymentType

__all__ = [
    "OrderStatus",
    "TRANSITIONS",
    "can_transition",
    "is_mutable",
    "PaymentType",
    "CafeError",
    "BadRequest",
    "InvalidReference",
    "Forbidden",
    "NotFound",
    "InvalidTransition",
    "UpstreamUnavailable",
    "Internal",
    "StatusConflict",
    "DuplicateKey",
]
