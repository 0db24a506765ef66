"""End-to-end ingestion of one captured top list."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from topten_archive.ingestion.articles import ArticleStore
from topten_archive.ingestion.errors import ValidationError
from topten_archive.ingestion.models import IngestionSummary, TopListEntry
from topten_archive.ingestion.rankings import RankingRecorder
from topten_archive.ingestion.sources.base import TopListSource
from topten_archive.storage.common import to_utc_aware_datetime, utc_now
from topten_archive.storage.database import Database

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Resolves a day's entries to articles and records their positions as one unit.

    Validation runs before the store is touched. Resolution and recording share
    one transaction, so a rejected or conflicting day leaves nothing behind,
    including articles that would have been created for it.
    """

    def __init__(
        self,
        *,
        database: Database,
        article_store: ArticleStore,
        recorder: RankingRecorder,
        expected_entries: int | None = 10,
    ) -> None:
        self.database = database
        self.article_store = article_store
        self.recorder = recorder
        self.expected_entries = expected_entries

    def ingest_day(
        self,
        captured_at: datetime,
        entries: Sequence[TopListEntry],
    ) -> IngestionSummary:
        self._validate(entries)

        article_ids: list[int] = []
        new_articles = 0
        with self.database.transaction() as session:
            for entry in entries:
                resolved = self.article_store.resolve(entry.link, entry.title, session=session)
                article_ids.append(resolved.article_id)
                new_articles += int(resolved.created)
            recorded = self.recorder.record_day(captured_at, article_ids, session=session)

        summary = IngestionSummary(
            captured_at=to_utc_aware_datetime(captured_at),
            article_ids=article_ids,
            new_articles_count=new_articles,
            positions_recorded=recorded,
        )
        logger.info(
            "Ingested top list captured at %s: entries=%d new_articles=%d",
            summary.captured_at.isoformat(),
            len(article_ids),
            new_articles,
        )
        return summary

    def run(self, source: TopListSource, captured_at: datetime | None = None) -> IngestionSummary:
        """Fetch one capture from ``source`` and ingest it.

        Source failures propagate before any storage work happens.
        """

        entries = source.fetch_entries()
        return self.ingest_day(captured_at or utc_now(), entries)

    def _validate(self, entries: Sequence[TopListEntry]) -> None:
        if not entries:
            raise ValidationError(message="Top list is empty.", code="empty_top_list")
        if self.expected_entries is not None and len(entries) != self.expected_entries:
            raise ValidationError(
                message=(
                    f"Top list has {len(entries)} entries, expected {self.expected_entries}."
                ),
                code="unexpected_entry_count",
            )

        seen: set[str] = set()
        for position, entry in enumerate(entries, start=1):
            if not entry.link.strip():
                raise ValidationError(
                    message=f"Top list entry {position} has no link.",
                    code="empty_link",
                )
            if entry.link in seen:
                raise ValidationError(
                    message=f"Top list lists {entry.link!r} more than once.",
                    code="duplicate_link",
                )
            seen.add(entry.link)


def run_daily_ingestion(
    *,
    database: Database,
    source: TopListSource,
    expected_entries: int | None,
    captured_at: datetime | None = None,
) -> IngestionSummary:
    """Run one ingestion with provided dependencies."""

    return IngestionPipeline(
        database=database,
        article_store=ArticleStore(database),
        recorder=RankingRecorder(database),
        expected_entries=expected_entries,
    ).run(source, captured_at=captured_at)
