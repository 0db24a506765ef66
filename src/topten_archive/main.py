"""CLI entrypoint for topten-archive."""

from datetime import date, datetime
from pathlib import Path

import rich_click as click

from topten_archive import __version__
from topten_archive.ingestion.controllers import (
    DailyIngestionCommand,
    EnrichCommand,
    IngestionCliController,
    MissingDetailsCommand,
)
from topten_archive.reporting.controllers import ReportCliController, ReportCommand
from topten_archive.storage.common import utc_now

click.rich_click.USE_MARKDOWN = True
INGESTION_CONTROLLER = IngestionCliController()
REPORT_CONTROLLER = ReportCliController()


@click.group()
@click.version_option(version=__version__, prog_name="topten-archive")
def topten_archive() -> None:
    """Archive of the daily Top 10 news ranking."""


@topten_archive.group()
def ingest() -> None:
    """Ingestion commands."""


@ingest.command("daily")
@click.option("--db-path", type=click.Path(path_type=Path), default=None, help="SQLite DB path.")
@click.option(
    "--captured-at",
    type=click.DateTime(formats=["%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]),
    default=None,
    help="Capture timestamp in UTC. Defaults to now.",
)
@click.option(
    "--expected-entries",
    type=click.IntRange(min=1),
    default=None,
    help="Required number of list entries. Defaults to TOPTEN_ARCHIVE_EXPECTED_ENTRIES (10).",
)
@click.option(
    "--enrich/--no-enrich",
    default=None,
    help="Backfill missing article details after recording the list.",
)
def ingest_daily(
    db_path: Path | None,
    captured_at: datetime | None,
    expected_entries: int | None,
    enrich: bool | None,
) -> None:
    """Scrape today's top list and record it; meant to be run by a scheduler."""

    result = INGESTION_CONTROLLER.run_daily(
        DailyIngestionCommand(
            db_path=db_path,
            captured_at=captured_at,
            expected_entries=expected_entries,
            enrich=enrich,
        ),
    )
    _emit_lines(result.lines)
    if not result.success:
        raise click.ClickException("Top list ingestion failed.")


@ingest.command("enrich")
@click.option("--db-path", type=click.Path(path_type=Path), default=None, help="SQLite DB path.")
@click.option(
    "--max-articles",
    type=click.IntRange(min=0),
    default=None,
    help="Cap on articles processed in this pass (0 = all).",
)
@click.option(
    "--workers",
    "max_workers",
    type=click.IntRange(min=1, max=32),
    default=None,
    help="Concurrent metadata fetches.",
)
def ingest_enrich(db_path: Path | None, max_articles: int | None, max_workers: int | None) -> None:
    """Fetch description and image for articles that have none yet."""

    _emit_lines(
        INGESTION_CONTROLLER.enrich(
            EnrichCommand(
                db_path=db_path,
                max_articles=max_articles,
                max_workers=max_workers,
            ),
        ),
    )


@ingest.command("missing-details")
@click.option("--db-path", type=click.Path(path_type=Path), default=None, help="SQLite DB path.")
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Max number of articles to print.",
)
def ingest_missing_details(db_path: Path | None, limit: int | None) -> None:
    """List articles that still lack details."""

    _emit_lines(
        INGESTION_CONTROLLER.missing_details(MissingDetailsCommand(db_path=db_path, limit=limit)),
    )


@topten_archive.command("report")
@click.option("--db-path", type=click.Path(path_type=Path), default=None, help="SQLite DB path.")
@click.option(
    "--date",
    "day",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Single day to report. Defaults to today (UTC).",
)
@click.option(
    "--start",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="First day of the range (inclusive).",
)
@click.option(
    "--end",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Last day of the range (inclusive).",
)
@click.option(
    "--limit",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Max number of articles to print (0 = all).",
)
@click.option(
    "--show-details/--no-show-details",
    default=False,
    show_default=True,
    help="Print description and image of enriched articles.",
)
def report(  # noqa: PLR0913
    db_path: Path | None,
    day: datetime | None,
    start: datetime | None,
    end: datetime | None,
    limit: int,
    show_details: bool,
) -> None:
    """Show articles ranked by position-weighted rating over a day or date range."""

    start_date, end_date = _resolve_range(day=day, start=start, end=end)
    try:
        lines = REPORT_CONTROLLER.report(
            ReportCommand(
                db_path=db_path,
                start_date=start_date,
                end_date=end_date,
                limit=limit,
                show_details=show_details,
            ),
        )
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    _emit_lines(lines)


def _resolve_range(
    *,
    day: datetime | None,
    start: datetime | None,
    end: datetime | None,
) -> tuple[date, date]:
    if day is not None and (start is not None or end is not None):
        raise click.UsageError("Use either --date or --start/--end, not both.")
    if day is not None:
        return day.date(), day.date()
    if start is None and end is None:
        today = utc_now().date()
        return today, today
    if start is None or end is None:
        single = (start or end).date()  # type: ignore[union-attr]
        return single, single
    return start.date(), end.date()


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    topten_archive()
