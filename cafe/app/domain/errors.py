"""Error taxonomy shared by the order services and the HTTP layer.

Each :class:`CafeError` subclass carries a stable machine readable ``code``
and the HTTP status used when it reaches a client. Store level signals such
as :class:`StatusConflict` are not client facing; services translate them
into one of the taxonomy errors.
"""

from __future__ import annotations


class CafeError(Exception):
    """Base class for errors returned to callers."""

    code = "INTERNAL"
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(CafeError):
    code = "BAD_REQUEST"
    status_code = 400
    default_message = "bad request"


class InvalidReference(CafeError):
    """A table or menu item referenced by an order does not exist."""

    code = "INVALID_REFERENCE"
    status_code = 400

    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(f"invalid {ref} reference")


class Forbidden(CafeError):
    code = "FORBIDDEN"
    status_code = 403
    default_message = "forbidden"


class NotFound(CafeError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "not found"


class InvalidTransition(CafeError):
    code = "INVALID_TRANSITION"
    status_code = 409
    default_message = "invalid status transition"


class UpstreamUnavailable(CafeError):
    code = "UPSTREAM_UNAVAILABLE"
    status_code = 503
    default_message = "service temporarily unavailable"


class Internal(CafeError):
    pass


class StatusConflict(Exception):
    """Raised by a store when a compare-and-set precondition fails."""

    def __init__(self, order_id: str, expected: str) -> None:
        self.order_id = order_id
        self.expected = expected
        super().__init__(f"order {order_id} is no longer {expected}")


class DuplicateKey(Exception):
    """Raised by a store when a unique column already holds the value."""
