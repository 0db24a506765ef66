"""Domain models for ingestion, enrichment and aggregation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from topten_archive.config import join_site_url


@dataclass(slots=True, frozen=True)
class TopListEntry:
    """One scraped (link, title) pair, in list order."""

    link: str
    title: str


@dataclass(slots=True, frozen=True)
class ArticleDetails:
    """Descriptive metadata fetched from an article page."""

    description: str = ""
    image_url: str = ""


@dataclass(slots=True)
class ArticleView:
    """Read model of a stored article with its optional details."""

    article_id: int
    link: str
    title: str
    details: ArticleDetails | None = None

    def web_url(self, site_origin: str) -> str:
        if self.link.startswith(("http://", "https://")):
            return self.link
        return join_site_url(site_origin, self.link)


@dataclass(slots=True)
class ResolveResult:
    """Outcome of resolving a link to its article handle."""

    article_id: int
    created: bool


@dataclass(slots=True)
class AggregateResult:
    """Rating of one article over a queried date range."""

    article: ArticleView
    best_position: int
    rating: float
    days_ranked: int


@dataclass(slots=True)
class IngestionSummary:
    """Result of ingesting one captured top list."""

    captured_at: datetime
    article_ids: list[int]
    new_articles_count: int
    positions_recorded: int


@dataclass(slots=True)
class EnrichmentSummary:
    """Counters of one detail backfill pass."""

    candidates: int = 0
    enriched: int = 0
    skipped: int = 0
    failed: int = 0
