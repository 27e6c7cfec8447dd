import os

# Tests run against in-memory SQLite and a fake Redis
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("STAFF_KEY", "test-staff-key")
os.environ.setdefault("ADMISSION_MODE", "geofence")
os.environ.setdefault("LOG_SAMPLE_2XX", "1")
