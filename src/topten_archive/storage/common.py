"""Time normalization and SQLite connection policy shared by the storage layer."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import NullPool
from sqlmodel import create_engine

_UNIQUE_MARKERS = ("UNIQUE constraint failed", "PRIMARY KEY")


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def to_db_datetime(value: datetime) -> datetime:
    """Naive UTC form used in SQLite columns; naive input counts as UTC already."""

    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def to_utc_aware_datetime(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_unique_violation(error: IntegrityError) -> bool:
    """True for uniqueness conflicts, False for foreign key or NOT NULL failures."""

    return any(marker in str(error.orig) for marker in _UNIQUE_MARKERS)


@dataclass(slots=True, frozen=True)
class SqlitePolicy:
    """Connection pragmas applied to every SQLite handle the archive opens."""

    busy_timeout_ms: int

    def statements(self) -> tuple[str, ...]:
        return (
            "PRAGMA journal_mode = WAL",
            f"PRAGMA busy_timeout = {max(1, self.busy_timeout_ms)}",
            "PRAGMA foreign_keys = ON",
        )

    def apply(self, dbapi_connection: sqlite3.Connection) -> None:
        cursor = dbapi_connection.cursor()
        try:
            for statement in self.statements():
                cursor.execute(statement)
        finally:
            cursor.close()


def build_sqlite_engine(*, db_path: Path, busy_timeout_ms: int) -> Engine:
    policy = SqlitePolicy(busy_timeout_ms=busy_timeout_ms)
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False, "timeout": max(1.0, busy_timeout_ms / 1000)},
        poolclass=NullPool,
    )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: sqlite3.Connection, _record: object) -> None:
        policy.apply(dbapi_connection)

    return engine


def connect_sqlite_with_policy(*, db_path: Path, busy_timeout_ms: int) -> sqlite3.Connection:
    """Raw sqlite3 handle with dict-like rows, for ad-hoc queries."""

    connection = sqlite3.connect(db_path)
    SqlitePolicy(busy_timeout_ms=busy_timeout_ms).apply(connection)
    connection.row_factory = sqlite3.Row
    return connection
