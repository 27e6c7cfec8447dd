"""SQLAlchemy implementation of :class:`SettingsRepo`.

The café settings row is optional; without it the location configured in
``config.json``/environment is used.
"""

from __future__ import annotations

from config import get_settings

from ..models import CafeSettings as CafeSettingsRow
from ..repos.settings_repo import SettingsRepo
from ..schemas import CafeSettings
from . import SQLRepo


def configured_cafe_settings() -> CafeSettings:
    settings = get_settings()
    return CafeSettings(
        latitude=settings.cafe_latitude,
        longitude=settings.cafe_longitude,
        geofence_radius_meters=settings.geofence_radius_meters,
    )


class SettingsRepoSQL(SQLRepo, SettingsRepo):
    async def get_cafe_settings(self) -> CafeSettings:
        async def _get():
            row = await self.session.get(CafeSettingsRow, 1)
            if row is None:
                return configured_cafe_settings()
            return CafeSettings.model_validate(row)

        return await self._run("get_cafe_settings", _get)
