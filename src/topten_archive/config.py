"""Runtime configuration for ingestion, enrichment and storage."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

DEFAULT_SITE_ORIGIN = "https://www.tagesschau.de"


@dataclass(slots=True)
class StorageSettings:
    """SQLite database settings."""

    db_path: Path = Path(".topten_archive.db")
    busy_timeout_ms: int = 5_000


@dataclass(slots=True)
class SourceSettings:
    """Where and how the daily top list is scraped."""

    site_origin: str = DEFAULT_SITE_ORIGIN
    top_list_path: str = "/"
    headline_text: str = "Top 10"
    headline_class: str = "conHeadline"
    expected_entries: int = 10
    request_timeout_seconds: float = 30.0
    max_retries: int = 3

    @property
    def top_list_url(self) -> str:
        return join_site_url(self.site_origin, self.top_list_path)


@dataclass(slots=True)
class EnrichmentSettings:
    """Article detail backfill settings."""

    enabled: bool = True
    max_workers: int = 4
    max_articles: int = 0


@dataclass(slots=True)
class Settings:
    """Application settings grouped by domain concerns."""

    storage: StorageSettings = field(default_factory=StorageSettings)
    source: SourceSettings = field(default_factory=SourceSettings)
    enrichment: EnrichmentSettings = field(default_factory=EnrichmentSettings)

    @classmethod
    def from_env(cls, db_path: Path | None = None) -> Settings:
        """Load settings from environment with sane defaults for local development."""

        return cls(
            storage=StorageSettings(
                db_path=db_path or Path(os.getenv("TOPTEN_ARCHIVE_DB_PATH", ".topten_archive.db")),
                busy_timeout_ms=int(os.getenv("TOPTEN_ARCHIVE_DB_BUSY_TIMEOUT_MS", "5000")),
            ),
            source=SourceSettings(
                site_origin=os.getenv("TOPTEN_ARCHIVE_SITE_ORIGIN", DEFAULT_SITE_ORIGIN).strip(),
                top_list_path=os.getenv("TOPTEN_ARCHIVE_TOP_LIST_PATH", "/").strip() or "/",
                headline_text=os.getenv("TOPTEN_ARCHIVE_HEADLINE_TEXT", "Top 10"),
                headline_class=os.getenv("TOPTEN_ARCHIVE_HEADLINE_CLASS", "conHeadline"),
                expected_entries=int(os.getenv("TOPTEN_ARCHIVE_EXPECTED_ENTRIES", "10")),
                request_timeout_seconds=float(
                    os.getenv("TOPTEN_ARCHIVE_REQUEST_TIMEOUT_SECONDS", "30.0"),
                ),
                max_retries=int(os.getenv("TOPTEN_ARCHIVE_MAX_RETRIES", "3")),
            ),
            enrichment=EnrichmentSettings(
                enabled=_env_bool("TOPTEN_ARCHIVE_ENRICH_AFTER_INGEST", default=True),
                max_workers=int(os.getenv("TOPTEN_ARCHIVE_ENRICH_MAX_WORKERS", "4")),
                max_articles=int(os.getenv("TOPTEN_ARCHIVE_ENRICH_MAX_ARTICLES", "0")),
            ),
        )

    def validate(self) -> None:
        """Raise configuration error for values the pipeline cannot work with."""

        _validate_site_origin(self.source.site_origin)
        if not self.source.top_list_path.startswith("/"):
            raise ValueError(
                "TOPTEN_ARCHIVE_TOP_LIST_PATH must start with '/': "
                f"{self.source.top_list_path!r}",
            )
        if not self.source.headline_text.strip():
            raise ValueError("TOPTEN_ARCHIVE_HEADLINE_TEXT must not be empty.")
        if self.source.expected_entries <= 0:
            raise ValueError("TOPTEN_ARCHIVE_EXPECTED_ENTRIES must be a positive integer.")
        if self.source.request_timeout_seconds <= 0:
            raise ValueError("TOPTEN_ARCHIVE_REQUEST_TIMEOUT_SECONDS must be > 0.")
        if self.source.max_retries < 0:
            raise ValueError("TOPTEN_ARCHIVE_MAX_RETRIES must be >= 0.")
        if self.enrichment.max_workers <= 0:
            raise ValueError("TOPTEN_ARCHIVE_ENRICH_MAX_WORKERS must be a positive integer.")
        if self.enrichment.max_articles < 0:
            raise ValueError("TOPTEN_ARCHIVE_ENRICH_MAX_ARTICLES must be >= 0.")
        if self.storage.busy_timeout_ms <= 0:
            raise ValueError("TOPTEN_ARCHIVE_DB_BUSY_TIMEOUT_MS must be > 0.")


def join_site_url(site_origin: str, path: str) -> str:
    """Prefix a site-relative link with the configured origin."""

    if not path.startswith("/"):
        path = f"/{path}"
    return f"{site_origin.rstrip('/')}{path}"


def _validate_site_origin(value: str) -> None:
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(
            "Invalid TOPTEN_ARCHIVE_SITE_ORIGIN: "
            f"{value!r}. Expected an absolute URL with http:// or https:// scheme.",
        )


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
