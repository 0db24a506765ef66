"""Backfill of article details for articles that have none yet."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

from topten_archive.config import EnrichmentSettings
from topten_archive.ingestion.details import DetailEnricher
from topten_archive.ingestion.errors import DetailConflictError
from topten_archive.ingestion.models import ArticleDetails, ArticleView, EnrichmentSummary
from topten_archive.ingestion.sources.base import ArticleMetadataSource, SourceError

logger = logging.getLogger(__name__)


class DetailBackfillService:
    """Fetches metadata on a bounded worker pool and stores it one article at a time.

    Only the network calls run on worker threads; writes happen on the calling
    thread. One article failing never stops the others.
    """

    def __init__(
        self,
        *,
        enricher: DetailEnricher,
        metadata_source: ArticleMetadataSource,
        settings: EnrichmentSettings,
    ) -> None:
        self.enricher = enricher
        self.metadata_source = metadata_source
        self.settings = settings

    def run(self) -> EnrichmentSummary:
        limit = self.settings.max_articles or None
        articles = self.enricher.list_articles_missing_details(limit=limit)
        summary = EnrichmentSummary(candidates=len(articles))
        if not articles:
            return summary

        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
            future_to_article: dict[Future[ArticleDetails], ArticleView] = {
                executor.submit(self.metadata_source.fetch_details, article): article
                for article in articles
            }
            for future in as_completed(future_to_article):
                article = future_to_article[future]
                self._store(article, future, summary)

        logger.info(
            "Detail backfill finished: candidates=%d enriched=%d skipped=%d failed=%d",
            summary.candidates,
            summary.enriched,
            summary.skipped,
            summary.failed,
        )
        return summary

    def _store(
        self,
        article: ArticleView,
        future: Future[ArticleDetails],
        summary: EnrichmentSummary,
    ) -> None:
        try:
            details = future.result()
        except SourceError as exc:
            logger.warning("Could not fetch details for article %s: %s", article.article_id, exc)
            summary.failed += 1
            return
        except Exception:  # noqa: BLE001
            logger.exception("Unexpected error fetching details for %s", article.link)
            summary.failed += 1
            return

        try:
            self.enricher.attach_details(
                article.article_id,
                details.description,
                details.image_url,
            )
        except DetailConflictError:
            logger.warning("Article %s already enriched, skipping", article.article_id)
            summary.skipped += 1
            return
        summary.enriched += 1
