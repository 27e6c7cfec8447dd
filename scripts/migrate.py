#!/usr/bin/env python3
"""Apply Alembic migrations to the configured database.

Usage::

    python scripts/migrate.py                # upgrade to head
    python scripts/migrate.py --revision -1  # step back one revision
    python scripts/migrate.py --db-url sqlite+aiosqlite:///./cafe.db
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from config import get_settings  # noqa: E402

logger = logging.getLogger("cafe.migrate")


def build_config(db_url: str | None = None) -> Config:
    cfg = Config(str(ROOT / "cafe" / "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", db_url or get_settings().database_url)
    return cfg


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run database migrations")
    parser.add_argument("--revision", default="head", help="Target revision")
    parser.add_argument("--db-url", help="Override DATABASE_URL")
    args = parser.parse_args(argv)

    cfg = build_config(args.db_url)
    if args.revision.startswith("-"):
        command.downgrade(cfg, args.revision)
    else:
        command.upgrade(cfg, args.revision)
    logger.info("database at revision %s", args.revision)


if __name__ == "__main__":
    main()
