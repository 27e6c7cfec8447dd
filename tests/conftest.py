import logging
import sys
from pathlib import Path

import fakeredis
import fakeredis.aioredis
import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from config import AdmissionMode, Settings  # noqa: E402
from cafe.app import deps  # noqa: E402
from cafe.app.main import app  # noqa: E402
from tests._fakes import (  # noqa: E402
    CAFE_LAT,
    CAFE_LON,
    STAFF_KEY,
    FakeMenuRepo,
    FakeOrdersRepo,
    FakeSettingsRepo,
    FakeTablesRepo,
)

# The test client's own per-request INFO lines would otherwise be captured
# alongside the app's "api" log records.
logging.getLogger("httpx").setLevel(logging.WARNING)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def fake_redis():
    return fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def stores():
    return {
        "tables": FakeTablesRepo(),
        "menu": FakeMenuRepo(),
        "orders": FakeOrdersRepo(),
        "settings": FakeSettingsRepo(),
    }


@pytest.fixture
def app_settings():
    return Settings(
        admission_mode=AdmissionMode.GEOFENCE,
        cafe_latitude=CAFE_LAT,
        cafe_longitude=CAFE_LON,
        geofence_radius_meters=100,
        staff_key=STAFF_KEY,
        cafe_utc_offset_minutes=330,
    )


@pytest.fixture
def client(stores, app_settings, fake_redis):
    """Return a test client backed by in-memory stores and redis."""

    app.state.redis = fake_redis
    app.dependency_overrides[deps.get_tables_repo] = lambda: stores["tables"]
    app.dependency_overrides[deps.get_menu_repo] = lambda: stores["menu"]
    app.dependency_overrides[deps.get_orders_repo] = lambda: stores["orders"]
    app.dependency_overrides[deps.get_settings_repo] = lambda: stores["settings"]
    app.dependency_overrides[deps.get_app_settings] = lambda: app_settings
    client = TestClient(app, raise_server_exceptions=False)
    yield client
    app.dependency_overrides.clear()
