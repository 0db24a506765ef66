"""Programmatic access to the Alembic migrations shipped next to the package."""

from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def alembic_config(db_path: Path) -> Config:
    config = Config(str(REPO_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(REPO_ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")
    return config


def upgrade_head(db_path: Path) -> None:
    """Bring the archive schema at ``db_path`` up to the newest revision."""

    current = current_revision(db_path)
    head = head_revision()
    if current == head:
        return
    command.upgrade(alembic_config(db_path), "head")
    logger.info("Migrated schema at %s from %s to %s", db_path, current or "empty", head)


def head_revision() -> str | None:
    return ScriptDirectory.from_config(alembic_config(Path(":memory:"))).get_current_head()


def current_revision(db_path: Path) -> str | None:
    """Revision stamped in the database, or None for a database never migrated."""

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        with engine.connect() as connection:
            return MigrationContext.configure(connection).get_current_revision()
    finally:
        engine.dispose()
