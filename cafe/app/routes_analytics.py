"""Admin sales analytics."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from .deps import get_analytics_service
from .services import AnalyticsService
from .utils.responses import ok

router = APIRouter(prefix="/api/admin/analytics", tags=["analytics"])


@router.get("/{metric}")
async def analytics_metric(
    metric: str,
    startDate: str | None = None,
    endDate: str | None = None,
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> dict:
    """Return ``metric`` over paid orders created within the window.

    Without ``startDate``/``endDate`` the window is today in café local time.
    """

    return ok(await analytics.metric(metric, startDate, endDate))
