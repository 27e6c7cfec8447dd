# test_config.py
import json
from pathlib import Path

from config import AdmissionMode, Settings, get_settings

CONFIG_JSON = Path(__file__).resolve().parents[1] / "config.json"


def _settings():
    get_settings.cache_clear()
    return get_settings()


def test_defaults_from_config(monkeypatch):
    monkeypatch.delenv("REDIS_URL", raising=False)
    settings = _settings()
    data = json.loads(CONFIG_JSON.read_text())
    assert settings.redis_url == data["redis_url"]
    assert settings.cafe_latitude == data["cafe_latitude"]
    get_settings.cache_clear()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("GEOFENCE_RADIUS_METERS", "250")
    monkeypatch.setenv("ADMISSION_MODE", "subnet")
    settings = _settings()
    assert settings.geofence_radius_meters == 250
    assert settings.admission_mode == AdmissionMode.SUBNET
    get_settings.cache_clear()


def test_missing_key_uses_default(monkeypatch):
    original = CONFIG_JSON.read_text()
    monkeypatch.delenv("CAFE_LATITUDE", raising=False)
    monkeypatch.setattr(
        Path,
        "read_text",
        lambda self, *a, **k: json.dumps(
            {k: v for k, v in json.loads(original).items() if k != "cafe_latitude"}
        ),
    )
    settings = _settings()
    assert settings.cafe_latitude == 0.0
    get_settings.cache_clear()


def test_field_defaults():
    settings = Settings(_env_file=None)
    assert settings.order_rate_limit == 5
    assert settings.order_rate_window_secs == 900
    assert settings.cafe_wifi_subnet == "192.168.1.0/24"
