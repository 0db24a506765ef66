"""Error taxonomy shared by ingestion components."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class TopListError(Exception):
    """Base error raised by the archive core."""

    message: str
    code: str = "top_list_error"

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class ValidationError(TopListError):
    """Malformed input rejected before any storage mutation."""


@dataclass(slots=True)
class ConflictError(TopListError):
    """A uniqueness invariant rejected the write; re-runs may treat it as benign."""


@dataclass(slots=True)
class RankingConflictError(ConflictError):
    """Positions for this UTC day are already recorded."""

    captured_at: datetime | None = None


@dataclass(slots=True)
class DetailConflictError(ConflictError):
    """The article already has its detail record."""

    article_id: int | None = None
