"""Admission control for order placement.

An :class:`AdmissionGuard` wraps exactly one strategy (geofence or subnet).
Requests carrying a valid staff key skip the strategy entirely; every other
request is evaluated and a rejection is raised as :class:`Forbidden` with the
strategy's reason.
"""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Protocol

from ..domain import Forbidden
from ..routes_metrics import admission_rejections_total

logger = logging.getLogger("cafe.admission")

STAFF_HEADER = "X-Staff-Key"


@dataclass(frozen=True)
class AdmissionRequest:
    """Facts about an inbound order request relevant to admission."""

    staff_key: str | None = None
    latitude: object = None
    longitude: object = None
    client_ip: str | None = None


@dataclass(frozen=True)
class AdmissionDecision:
    """Outcome of an admission check."""

    allowed: bool
    reason: str
    distance_m: float | None = None


class AdmissionStrategy(Protocol):
    name: str

    async def evaluate(self, request: AdmissionRequest) -> AdmissionDecision:
        ...


class AdmissionGuard:
    """Decide whether an order request may proceed to validation."""

    def __init__(self, strategy: AdmissionStrategy, staff_key: str | None = None) -> None:
        self.strategy = strategy
        self._staff_key = staff_key or None

    def is_staff(self, request: AdmissionRequest) -> bool:
        """Return ``True`` if ``request`` carries the configured staff key."""

        if not self._staff_key or not request.staff_key:
            return False
        return hmac.compare_digest(
            request.staff_key.encode(), self._staff_key.encode()
        )

    async def evaluate(self, request: AdmissionRequest) -> AdmissionDecision:
        if self.is_staff(request):
            return AdmissionDecision(True, "staff")
        return await self.strategy.evaluate(request)

    async def check(self, request: AdmissionRequest) -> AdmissionDecision:
        """Return the admitting decision or raise :class:`Forbidden`."""

        decision = await self.evaluate(request)
        if not decision.allowed:
            admission_rejections_total.labels(
                strategy=self.strategy.name, reason=decision.reason
            ).inc()
            logger.warning(
                "order admission rejected",
                extra={"reason": decision.reason, "client_ip": request.client_ip},
            )
            raise Forbidden(decision.reason)
        return decision
