"""Geofence admission: the customer's device must be near the café."""

from __future__ import annotations

import math

from ..domain import BadRequest
from ..repos.settings_repo import SettingsRepo
from .admission import AdmissionDecision, AdmissionRequest

EARTH_RADIUS_M = 6_371_000.0
OUTSIDE_AREA = "outside service area"


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the great-circle distance in metres between two points."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # rounding can push ``a`` marginally past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))


def _coordinate(raw: object, limit: float) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or abs(value) > limit:
        return None
    return value


def parse_coordinates(latitude: object, longitude: object) -> tuple[float, float]:
    """Return ``(lat, lon)`` as floats or raise ``BadRequest``."""

    lat = _coordinate(latitude, 90.0)
    lon = _coordinate(longitude, 180.0)
    if lat is None or lon is None:
        raise BadRequest("coordinates required")
    return lat, lon


class GeofenceStrategy:
    """Admit requests whose coordinates lie within the café's radius."""

    name = "geofence"

    def __init__(self, settings_repo: SettingsRepo) -> None:
        self.settings_repo = settings_repo

    async def evaluate(self, request: AdmissionRequest) -> AdmissionDecision:
        lat, lon = parse_coordinates(request.latitude, request.longitude)
        cafe = await self.settings_repo.get_cafe_settings()
        distance = haversine_m(lat, lon, cafe.latitude, cafe.longitude)
        if distance <= cafe.geofence_radius_meters:
            return AdmissionDecision(True, "inside service area", distance_m=distance)
        return AdmissionDecision(False, OUTSIDE_AREA, distance_m=distance)
