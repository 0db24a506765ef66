"""Shared test fixtures."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from topten_archive.config import StorageSettings
from topten_archive.ingestion.articles import ArticleStore
from topten_archive.ingestion.details import DetailEnricher
from topten_archive.ingestion.rankings import RankingRecorder
from topten_archive.storage.database import Database


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep TOPTEN_ARCHIVE_* variables from the developer shell out of tests."""
    for name in list(os.environ):
        if name.startswith("TOPTEN_ARCHIVE_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def database(tmp_path: Path) -> Iterator[Database]:
    db = Database(StorageSettings(db_path=tmp_path / "archive.db"))
    db.init_schema()
    yield db
    db.close()


@pytest.fixture()
def article_store(database: Database) -> ArticleStore:
    return ArticleStore(database)


@pytest.fixture()
def recorder(database: Database) -> RankingRecorder:
    return RankingRecorder(database)


@pytest.fixture()
def enricher(database: Database) -> DetailEnricher:
    return DetailEnricher(database)
