# start_app.py
"""Apply database migrations and launch the ordering API."""

from __future__ import annotations

import argparse
import os
import subprocess
import sys

import uvicorn
from dotenv import load_dotenv

import config

ALEMBIC_INI = "cafe/alembic.ini"
CONNECTION_ERRORS = (
    "Name or service not known",
    "could not translate host name",
    "Connection refused",
)


def _echo(exc: subprocess.CalledProcessError) -> None:
    if exc.stdout:
        sys.stdout.write(exc.stdout)
    if exc.stderr:
        sys.stderr.write(exc.stderr)


def main(argv: list[str] | None = None) -> None:
    """Load settings, optionally apply migrations, then start the API."""

    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--skip-db-migrations",
        action="store_true",
        help="Start without running Alembic migrations",
    )
    args = parser.parse_args(argv)

    load_dotenv()

    env_flag = os.getenv("SKIP_DB_MIGRATIONS")
    skip = args.skip_db_migrations or (
        env_flag and env_flag.lower() not in {"0", "false"}
    )

    if not skip:
        try:
            subprocess.run(
                [sys.executable, "-m", "alembic", "-c", ALEMBIC_INI, "upgrade", "head"],
                check=True,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as exc:
            _echo(exc)
            if any(err in (exc.stderr or "") for err in CONNECTION_ERRORS):
                print(
                    "database unavailable; starting without migrations using SQLite",
                    file=sys.stderr,
                )
                os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
            else:
                print(
                    f"database migration failed (exit code {exc.returncode})",
                    file=sys.stderr,
                )
                raise SystemExit(exc.returncode)

    config.get_settings.cache_clear()
    config.get_settings()

    uvicorn.run(
        "cafe.app.main:app",
        host="0.0.0.0",  # nosec B104: bind for local development
        port=int(os.getenv("PORT", "8000")),
        log_level="info",
    )


if __name__ == "__main__":
    main()
