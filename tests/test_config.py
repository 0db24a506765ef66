from __future__ import annotations

from pathlib import Path

import allure
import pytest

from topten_archive.config import EnrichmentSettings, Settings, SourceSettings, join_site_url

pytestmark = [
    allure.epic("Daily Ingestion"),
    allure.feature("Configuration"),
]


def test_from_env_defaults() -> None:
    settings = Settings.from_env()

    assert settings.storage.db_path == Path(".topten_archive.db")
    assert settings.source.top_list_url == "https://www.tagesschau.de/"
    assert settings.source.expected_entries == 10
    assert settings.enrichment.enabled is True
    settings.validate()


def test_from_env_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOPTEN_ARCHIVE_DB_PATH", "/tmp/other.db")
    monkeypatch.setenv("TOPTEN_ARCHIVE_SITE_ORIGIN", "https://news.example/")
    monkeypatch.setenv("TOPTEN_ARCHIVE_TOP_LIST_PATH", "/index.html")
    monkeypatch.setenv("TOPTEN_ARCHIVE_EXPECTED_ENTRIES", "5")
    monkeypatch.setenv("TOPTEN_ARCHIVE_ENRICH_AFTER_INGEST", "off")
    monkeypatch.setenv("TOPTEN_ARCHIVE_ENRICH_MAX_WORKERS", "2")

    settings = Settings.from_env()

    assert settings.storage.db_path == Path("/tmp/other.db")
    assert settings.source.top_list_url == "https://news.example/index.html"
    assert settings.source.expected_entries == 5
    assert settings.enrichment.enabled is False
    assert settings.enrichment.max_workers == 2


def test_explicit_db_path_wins_over_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TOPTEN_ARCHIVE_DB_PATH", "/tmp/other.db")

    settings = Settings.from_env(db_path=tmp_path / "cli.db")

    assert settings.storage.db_path == tmp_path / "cli.db"


def test_invalid_boolean_env_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOPTEN_ARCHIVE_ENRICH_AFTER_INGEST", "maybe")

    with pytest.raises(ValueError, match="TOPTEN_ARCHIVE_ENRICH_AFTER_INGEST"):
        Settings.from_env()


@pytest.mark.parametrize(
    ("settings", "message"),
    [
        (Settings(source=SourceSettings(site_origin="ftp://news.example")), "SITE_ORIGIN"),
        (Settings(source=SourceSettings(top_list_path="index.html")), "TOP_LIST_PATH"),
        (Settings(source=SourceSettings(headline_text="  ")), "HEADLINE_TEXT"),
        (Settings(source=SourceSettings(expected_entries=0)), "EXPECTED_ENTRIES"),
        (Settings(enrichment=EnrichmentSettings(max_workers=0)), "ENRICH_MAX_WORKERS"),
        (Settings(enrichment=EnrichmentSettings(max_articles=-1)), "ENRICH_MAX_ARTICLES"),
    ],
)
def test_validate_rejects_unusable_values(settings: Settings, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        settings.validate()


def test_join_site_url_strips_trailing_slash() -> None:
    assert join_site_url("https://news.example/", "/a.html") == "https://news.example/a.html"


def test_join_site_url_adds_missing_leading_slash() -> None:
    assert join_site_url("https://news.example", "inland/x.html") == (
        "https://news.example/inland/x.html"
    )
