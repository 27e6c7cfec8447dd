"""Repository interface for café settings."""

from abc import ABC, abstractmethod


class SettingsRepo(ABC):
    """Contract for reading the café settings singleton."""

    @abstractmethod
    async def get_cafe_settings(self):
        """Return the café location and geofence radius."""
        raise NotImplementedError
