from __future__ import annotations

from datetime import UTC, date, datetime

import allure
import pytest

from topten_archive.ingestion.articles import ArticleStore
from topten_archive.ingestion.errors import RankingConflictError, ValidationError
from topten_archive.ingestion.models import TopListEntry
from topten_archive.ingestion.pipeline import IngestionPipeline, run_daily_ingestion
from topten_archive.ingestion.rankings import RankingRecorder
from topten_archive.ingestion.sources.base import SourceError
from topten_archive.reporting.aggregation import AggregationQuery
from topten_archive.storage.database import Database

pytestmark = [
    allure.epic("Daily Ingestion"),
    allure.feature("Ingestion Pipeline"),
]


class StaticSource:
    name = "static"

    def __init__(self, entries: list[TopListEntry]) -> None:
        self._entries = entries
        self.calls = 0

    def fetch_entries(self) -> list[TopListEntry]:
        self.calls += 1
        return list(self._entries)


class FailingSource:
    name = "failing"

    def fetch_entries(self) -> list[TopListEntry]:
        raise SourceError(message="GET failed", code="fetch_failed")


def _pipeline(database: Database, expected_entries: int | None = 3) -> IngestionPipeline:
    return IngestionPipeline(
        database=database,
        article_store=ArticleStore(database),
        recorder=RankingRecorder(database),
        expected_entries=expected_entries,
    )


def _entries(*pairs: tuple[str, str]) -> list[TopListEntry]:
    return [TopListEntry(link=link, title=title) for link, title in pairs]


def _count(database: Database, table: str) -> int:
    row = database._connection.execute(f"SELECT COUNT(*) AS cnt FROM {table}").fetchone()
    assert row is not None
    return int(row["cnt"])


def test_two_day_scenario_end_to_end(database: Database) -> None:
    pipeline = _pipeline(database)

    first = pipeline.ingest_day(
        datetime(2024, 1, 1, 6, tzinfo=UTC),
        _entries(("L1", "A"), ("L2", "B"), ("L3", "C")),
    )
    second = pipeline.ingest_day(
        datetime(2024, 1, 2, 6, tzinfo=UTC),
        _entries(("L2", "B"), ("L1", "A"), ("L4", "D")),
    )

    assert first.new_articles_count == 3
    assert second.new_articles_count == 1
    assert second.article_ids[:2] == [first.article_ids[1], first.article_ids[0]]

    results = AggregationQuery(database).query(date(2024, 1, 1), date(2024, 1, 2))
    assert [(r.article.link, r.article.title, r.rating) for r in results] == [
        ("L1", "A", 1.5),
        ("L2", "B", 1.5),
        ("L3", "C", 0.25),
        ("L4", "D", 0.25),
    ]


def test_wrong_entry_count_aborts_before_touching_store(database: Database) -> None:
    pipeline = _pipeline(database, expected_entries=10)

    with pytest.raises(ValidationError) as excinfo:
        pipeline.ingest_day(
            datetime(2024, 1, 1, tzinfo=UTC),
            _entries(("L1", "A"), ("L2", "B"), ("L3", "C")),
        )

    assert excinfo.value.code == "unexpected_entry_count"
    assert _count(database, "articles") == 0
    assert _count(database, "position_records") == 0


@pytest.mark.parametrize(
    ("entries", "code"),
    [
        ([], "empty_top_list"),
        (_entries(("L1", "A"), ("", "B"), ("L3", "C")), "empty_link"),
        (_entries(("L1", "A"), ("L2", "B"), ("L1", "A again")), "duplicate_link"),
    ],
)
def test_malformed_lists_are_rejected(
    database: Database,
    entries: list[TopListEntry],
    code: str,
) -> None:
    with pytest.raises(ValidationError) as excinfo:
        _pipeline(database, expected_entries=None).ingest_day(
            datetime(2024, 1, 1, tzinfo=UTC),
            entries,
        )

    assert excinfo.value.code == code
    assert _count(database, "articles") == 0


def test_conflicting_rerun_rolls_back_new_articles(database: Database) -> None:
    pipeline = _pipeline(database)
    captured_at = datetime(2024, 1, 1, 6, tzinfo=UTC)
    pipeline.ingest_day(captured_at, _entries(("L1", "A"), ("L2", "B"), ("L3", "C")))

    with pytest.raises(RankingConflictError):
        pipeline.ingest_day(captured_at, _entries(("L1", "A"), ("L5", "E"), ("L6", "F")))

    assert _count(database, "articles") == 3
    assert _count(database, "position_records") == 3


def test_second_ingest_later_the_same_day_is_rejected(database: Database) -> None:
    pipeline = _pipeline(database)
    entries = _entries(("L1", "A"), ("L2", "B"), ("L3", "C"))
    pipeline.ingest_day(datetime(2024, 1, 1, 6, tzinfo=UTC), entries)

    with pytest.raises(RankingConflictError) as excinfo:
        pipeline.ingest_day(datetime(2024, 1, 1, 18, tzinfo=UTC), list(reversed(entries)))

    assert excinfo.value.code == "ranking_already_recorded"
    assert _count(database, "position_records") == 3
    assert RankingRecorder(database).list_day(date(2024, 1, 1)) == [1, 2, 3]


def test_run_fetches_from_source_and_defaults_capture_time(database: Database) -> None:
    source = StaticSource(_entries(("L1", "A"), ("L2", "B"), ("L3", "C")))
    before = datetime.now(tz=UTC)

    summary = run_daily_ingestion(database=database, source=source, expected_entries=3)

    assert source.calls == 1
    assert summary.captured_at >= before.replace(microsecond=0)
    assert summary.positions_recorded == 3


def test_source_failure_aborts_without_storage_changes(database: Database) -> None:
    with pytest.raises(SourceError, match="GET failed"):
        _pipeline(database).run(FailingSource())

    assert _count(database, "articles") == 0
