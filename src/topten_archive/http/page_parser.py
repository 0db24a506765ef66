"""HTML parsing of the front page top list and article metadata."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from topten_archive.ingestion.models import ArticleDetails, TopListEntry
from topten_archive.ingestion.sources.base import SourceError


def parse_top_list(
    html: str,
    *,
    headline_text: str = "Top 10",
    headline_class: str = "conHeadline",
) -> list[TopListEntry]:
    """Return the (link, title) pairs listed next to the top list headline.

    The headline is an ``h2`` carrying ``headline_class`` whose text equals
    ``headline_text``; every anchor inside its parent element is an entry, in
    document order.
    """

    soup = BeautifulSoup(html, "html.parser")
    for headline in soup.find_all("h2", class_=headline_class):
        if headline.get_text(strip=True) != headline_text:
            continue
        container = headline.parent
        if not isinstance(container, Tag):
            break
        return [
            TopListEntry(
                link=str(anchor.get("href", "")).strip(),
                title=anchor.get_text(" ", strip=True),
            )
            for anchor in container.find_all("a")
        ]

    raise SourceError(
        message=f"Top list headline {headline_text!r} not found",
        code="top_list_not_found",
    )


def parse_article_metadata(html: str) -> ArticleDetails:
    """Read ``og:description`` and ``og:image``; missing tags yield empty strings."""

    soup = BeautifulSoup(html, "html.parser")
    return ArticleDetails(
        description=_meta_property(soup, "og:description"),
        image_url=_meta_property(soup, "og:image"),
    )


def _meta_property(soup: BeautifulSoup, name: str) -> str:
    tag = soup.find("meta", attrs={"property": name})
    if not isinstance(tag, Tag):
        return ""
    return str(tag.get("content", "")).strip()
