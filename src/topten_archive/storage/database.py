"""Engine ownership and scoped transactions."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from sqlmodel import Session

from topten_archive.config import StorageSettings
from topten_archive.storage.alembic_runner import upgrade_head
from topten_archive.storage.common import build_sqlite_engine, connect_sqlite_with_policy


class Database:
    """Owns the SQLAlchemy engine built from explicit storage settings."""

    def __init__(self, settings: StorageSettings) -> None:
        self.settings = settings
        self.engine = build_sqlite_engine(
            db_path=settings.db_path,
            busy_timeout_ms=settings.busy_timeout_ms,
        )

        # Keep low-level connection for tests and ad-hoc debugging queries.
        self._connection: sqlite3.Connection = connect_sqlite_with_policy(
            db_path=settings.db_path,
            busy_timeout_ms=settings.busy_timeout_ms,
        )

    def close(self) -> None:
        self._connection.close()
        self.engine.dispose()

    def init_schema(self) -> None:
        upgrade_head(self.settings.db_path)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Yield a session inside one transaction: commit on success, rollback on error."""

        with Session(self.engine) as session, session.begin():
            yield session

    @contextmanager
    def session_scope(self, session: Session | None = None) -> Iterator[Session]:
        """Join the caller's transaction when given one, otherwise open a new one."""

        if session is not None:
            yield session
            return
        with self.transaction() as owned:
            yield owned

    @contextmanager
    def read_session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            yield session

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


@contextmanager
def open_database(settings: StorageSettings) -> Iterator[Database]:
    """Open the database with its schema migrated to head."""

    database = Database(settings)
    try:
        database.init_schema()
        yield database
    finally:
        database.close()
