# config.py

"""Application configuration utilities.

Values are primarily loaded from ``config.json`` and may be overridden by
environment variables. The :func:`get_settings` helper merges the two sources
and caches the result.
"""

from __future__ import annotations

import json
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class AdmissionMode(str, Enum):
    """Select the strategy used to admit order placement requests.

    ``GEOFENCE`` compares the coordinates sent by the customer's device with
    the café location, whereas ``SUBNET`` requires the caller to be on the
    café Wi-Fi network. Only one strategy is active per deployment.
    """

    GEOFENCE = "geofence"
    SUBNET = "subnet"


class Settings(BaseSettings):
    """Application settings merged from JSON and environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./cafe.db"
    redis_url: str = "redis://localhost:6379/0"
    admission_mode: AdmissionMode = AdmissionMode.GEOFENCE
    cafe_latitude: float = 0.0
    cafe_longitude: float = 0.0
    geofence_radius_meters: float = 100.0
    cafe_wifi_subnet: str = "192.168.1.0/24"
    staff_key: str | None = None
    cafe_utc_offset_minutes: int = 330
    store_timeout_secs: float = 5.0
    order_rate_limit: int = 5
    order_rate_window_secs: int = 900
    auto_create_schema: bool = True


# Cached singleton to avoid repeated file reads
@lru_cache
def get_settings() -> Settings:
    """Return merged settings with environment variable precedence.

    The configuration is read from ``config.json`` located alongside this file
    and fed into :class:`Settings`. Environment variables override any values
    from the JSON file. A missing JSON file leaves only the environment and
    the field defaults.
    """

    config_path = Path(__file__).with_name("config.json")
    data = json.loads(config_path.read_text()) if config_path.exists() else {}
    env_override = {
        k.lower(): v
        for k, v in os.environ.items()
        if k.lower() in Settings.model_fields
    }
    merged = {**data, **env_override}
    # Environment variables override values from the JSON file.
    return Settings(**merged)
