"""Controllers for ingestion CLI commands."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from topten_archive.config import Settings
from topten_archive.http.fetcher import HttpFetcher
from topten_archive.ingestion.details import DetailEnricher
from topten_archive.ingestion.errors import RankingConflictError, ValidationError
from topten_archive.ingestion.models import EnrichmentSummary
from topten_archive.ingestion.pipeline import run_daily_ingestion
from topten_archive.ingestion.services.enrich_service import DetailBackfillService
from topten_archive.ingestion.sources.base import SourceError
from topten_archive.ingestion.sources.html_site import (
    HtmlArticleMetadataSource,
    HtmlTopListSource,
)
from topten_archive.storage.database import Database, open_database

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DailyIngestionCommand:
    """CLI inputs for daily ingestion command."""

    db_path: Path | None
    captured_at: datetime | None = None
    expected_entries: int | None = None
    enrich: bool | None = None


@dataclass(slots=True)
class EnrichCommand:
    """CLI inputs for detail backfill command."""

    db_path: Path | None
    max_articles: int | None = None
    max_workers: int | None = None


@dataclass(slots=True)
class MissingDetailsCommand:
    """CLI inputs for listing articles without details."""

    db_path: Path | None
    limit: int | None = None


@dataclass(slots=True)
class CommandResult:
    """Output lines plus whether the trigger should see a success status."""

    lines: list[str] = field(default_factory=list)
    success: bool = True


class IngestionCliController:
    """Coordinates ingestion command execution."""

    def run_daily(self, command: DailyIngestionCommand) -> CommandResult:
        settings = Settings.from_env(db_path=command.db_path)
        if command.expected_entries is not None:
            settings.source.expected_entries = command.expected_entries
        if command.enrich is not None:
            settings.enrichment.enabled = command.enrich
        settings.validate()

        result = CommandResult()
        with open_database(settings.storage) as database, _fetcher(settings) as fetcher:
            try:
                summary = run_daily_ingestion(
                    database=database,
                    source=HtmlTopListSource(settings.source, fetcher),
                    expected_entries=settings.source.expected_entries,
                    captured_at=command.captured_at,
                )
            except RankingConflictError as exc:
                logger.warning("Skipping ingestion: %s", exc)
                result.lines.append(f"Top list already recorded: {exc}")
            except (SourceError, ValidationError) as exc:
                logger.error("Ingestion aborted (%s): %s", exc.code, exc)
                result.lines.append(f"Ingestion aborted: code={exc.code} {exc}")
                result.success = False
                return result
            else:
                result.lines.append(
                    "Top list recorded: "
                    f"captured_at={summary.captured_at.isoformat()} "
                    f"entries={len(summary.article_ids)} "
                    f"new_articles={summary.new_articles_count}",
                )

            if settings.enrichment.enabled:
                enrichment = _backfill(settings, database, fetcher)
                result.lines.append(_format_enrichment(enrichment))
            else:
                result.lines.append("Detail backfill: disabled")
        return result

    def enrich(self, command: EnrichCommand) -> list[str]:
        settings = Settings.from_env(db_path=command.db_path)
        if command.max_articles is not None:
            settings.enrichment.max_articles = command.max_articles
        if command.max_workers is not None:
            settings.enrichment.max_workers = command.max_workers
        settings.validate()

        with open_database(settings.storage) as database, _fetcher(settings) as fetcher:
            enrichment = _backfill(settings, database, fetcher)
        return [_format_enrichment(enrichment)]

    def missing_details(self, command: MissingDetailsCommand) -> list[str]:
        settings = Settings.from_env(db_path=command.db_path)
        with open_database(settings.storage) as database:
            articles = DetailEnricher(database).list_articles_missing_details(
                limit=command.limit,
            )

        lines = [f"Articles without details: {len(articles)}"]
        lines.extend(
            f"  [{article.article_id}] {article.title} "
            f"{article.web_url(settings.source.site_origin)}"
            for article in articles
        )
        return lines


def _backfill(settings: Settings, database: Database, fetcher: HttpFetcher) -> EnrichmentSummary:
    service = DetailBackfillService(
        enricher=DetailEnricher(database),
        metadata_source=HtmlArticleMetadataSource(settings.source, fetcher),
        settings=settings.enrichment,
    )
    return service.run()


def _format_enrichment(summary: EnrichmentSummary) -> str:
    return (
        "Detail backfill: "
        f"candidates={summary.candidates} "
        f"enriched={summary.enriched} "
        f"skipped={summary.skipped} "
        f"failed={summary.failed}"
    )


@contextmanager
def _fetcher(settings: Settings) -> Iterator[HttpFetcher]:
    with HttpFetcher(
        timeout_seconds=settings.source.request_timeout_seconds,
        max_retries=settings.source.max_retries,
    ) as fetcher:
        yield fetcher
