"""Controller for the ranking report command."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path

from topten_archive.config import Settings
from topten_archive.ingestion.models import AggregateResult
from topten_archive.reporting.aggregation import AggregationQuery
from topten_archive.storage.database import open_database


@dataclass(slots=True)
class ReportCommand:
    """CLI inputs for the ranking report."""

    db_path: Path | None
    start_date: date
    end_date: date
    limit: int = 0
    show_details: bool = False


@dataclass(slots=True, frozen=True)
class DateRange:
    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def shifted(self, days: int) -> DateRange:
        return DateRange(self.start + timedelta(days=days), self.end + timedelta(days=days))

    def label(self) -> str:
        if self.start == self.end:
            return self.start.isoformat()
        return f"{self.start.isoformat()} .. {self.end.isoformat()}"


def adjacent_ranges(start_date: date, end_date: date) -> tuple[DateRange, DateRange]:
    """Previous and next ranges of the same length, for paging through the archive."""

    current = DateRange(start_date, end_date)
    return current.shifted(-current.days), current.shifted(current.days)


class ReportCliController:
    """Renders aggregated ratings as text lines."""

    def report(self, command: ReportCommand) -> list[str]:
        if command.start_date > command.end_date:
            raise ValueError(
                f"Start date {command.start_date.isoformat()} is after "
                f"end date {command.end_date.isoformat()}.",
            )

        settings = Settings.from_env(db_path=command.db_path)
        with open_database(settings.storage) as database:
            results = AggregationQuery(database).query(command.start_date, command.end_date)

        current = DateRange(command.start_date, command.end_date)
        previous, following = adjacent_ranges(command.start_date, command.end_date)
        visible = results[: command.limit] if command.limit > 0 else results

        lines = [f"Top articles for {current.label()}: {len(results)} ranked"]
        if not results:
            lines.append("  No rankings recorded in this range.")
        for rank, result in enumerate(visible, start=1):
            lines.extend(
                _format_result(
                    rank,
                    result,
                    site_origin=settings.source.site_origin,
                    show_details=command.show_details,
                ),
            )
        lines.append(f"Previous: {previous.label()}  Next: {following.label()}")
        return lines


def _format_result(
    rank: int,
    result: AggregateResult,
    *,
    site_origin: str,
    show_details: bool,
) -> list[str]:
    article = result.article
    lines = [
        f"{rank:>3}. rating={result.rating:.3f} best={result.best_position} "
        f"days={result.days_ranked} [{article.article_id}] {article.title}",
        f"     {article.web_url(site_origin)}",
    ]
    if show_details and article.details is not None:
        if article.details.description:
            lines.append(f"     {article.details.description}")
        if article.details.image_url:
            lines.append(f"     image: {article.details.image_url}")
    return lines
