# src/liftcheck/scripts/migrate.py
from __future__ import annotations

import os

from alembic import command
from alembic.config import Config

from liftcheck.core.settings import settings

MIGRATIONS_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations"))


def run_upgrade_head(database_url: str | None = None) -> None:
    """Upgrade the configured database to the newest revision."""
    cfg = Config(os.path.join(MIGRATIONS_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    cfg.set_main_option("sqlalchemy.url", database_url or settings.database_url)
    command.upgrade(cfg, "head")


if __name__ == "__main__":
    run_upgrade_head()
