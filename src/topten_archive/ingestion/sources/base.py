"""Collaborator contracts for top list and metadata sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from topten_archive.ingestion.models import ArticleDetails, ArticleView, TopListEntry


@dataclass(slots=True)
class SourceError(Exception):
    """Fetch or parse failure reported by a collaborator."""

    message: str
    code: str = "source_error"
    url: str | None = None

    def __str__(self) -> str:
        return self.message


class TopListSource(Protocol):
    """Supplies one capture of the ranked list, in rank order."""

    name: str

    def fetch_entries(self) -> list[TopListEntry]:
        raise NotImplementedError


class ArticleMetadataSource(Protocol):
    """Supplies descriptive metadata for a stored article."""

    def fetch_details(self, article: ArticleView) -> ArticleDetails:
        raise NotImplementedError
