"""Top list and metadata sources backed by the news site's HTML pages."""

from __future__ import annotations

import logging

from topten_archive.config import SourceSettings
from topten_archive.http.fetcher import HttpFetcher
from topten_archive.http.page_parser import parse_article_metadata, parse_top_list
from topten_archive.ingestion.models import ArticleDetails, ArticleView, TopListEntry
from topten_archive.ingestion.sources.base import SourceError

logger = logging.getLogger(__name__)


class HtmlTopListSource:
    """Scrapes the ranked list from the site's front page."""

    name = "html"

    def __init__(self, settings: SourceSettings, fetcher: HttpFetcher) -> None:
        self.settings = settings
        self.fetcher = fetcher

    def fetch_entries(self) -> list[TopListEntry]:
        url = self.settings.top_list_url
        result = self.fetcher.fetch(url)
        if not result.is_success:
            raise SourceError(
                message=f"GET {url} failed: {result.error}",
                code="fetch_failed",
                url=url,
            )

        entries = parse_top_list(
            result.content,
            headline_text=self.settings.headline_text,
            headline_class=self.settings.headline_class,
        )
        logger.info("Parsed %d top list entries from %s", len(entries), url)
        return entries


class HtmlArticleMetadataSource:
    """Reads Open Graph description and image from an article page."""

    def __init__(self, settings: SourceSettings, fetcher: HttpFetcher) -> None:
        self.settings = settings
        self.fetcher = fetcher

    def fetch_details(self, article: ArticleView) -> ArticleDetails:
        url = article.web_url(self.settings.site_origin)
        result = self.fetcher.fetch(url)
        if not result.is_success:
            raise SourceError(
                message=f"GET {url} failed: {result.error}",
                code="fetch_failed",
                url=url,
            )
        return parse_article_metadata(result.content)
