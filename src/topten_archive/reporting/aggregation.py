"""Position-weighted rating of articles over a date range."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date

from sqlmodel import col, select

from topten_archive.ingestion.articles import to_article_view
from topten_archive.ingestion.models import AggregateResult, ArticleView
from topten_archive.storage.database import Database
from topten_archive.storage.sqlmodel_models import Article, ArticleDetail, PositionRecord

logger = logging.getLogger(__name__)


def decay_weight(position: int) -> float:
    """Contribution of one day's rank to the rating: 1 / 2^(position - 1)."""

    if position < 1:
        raise ValueError(f"Position must be >= 1, got {position}")
    return 0.5 ** (position - 1)


class AggregationQuery:
    """Read-only view ranking articles by how consistently high they were listed.

    An article has at most one rank per UTC calendar day. The rating sums
    ``decay_weight`` over the days in range, and results are ordered by rating
    descending, then by article handle ascending.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    def query(self, start_date: date, end_date: date) -> list[AggregateResult]:
        positions_by_article: dict[int, list[int]] = defaultdict(list)
        articles: dict[int, ArticleView] = {}
        with self.database.read_session() as session:
            rows = session.exec(
                select(PositionRecord, Article, ArticleDetail)
                .join(Article, col(Article.article_id) == col(PositionRecord.article_id))
                .join(
                    ArticleDetail,
                    col(ArticleDetail.article_id) == col(Article.article_id),
                    isouter=True,
                )
                .where(
                    col(PositionRecord.captured_on) >= start_date,
                    col(PositionRecord.captured_on) <= end_date,
                ),
            ).all()

            for record, article, detail in rows:
                positions_by_article[record.article_id].append(record.position)
                if record.article_id not in articles:
                    articles[record.article_id] = to_article_view(article, detail)

        results = [
            AggregateResult(
                article=articles[article_id],
                best_position=min(positions),
                rating=sum(decay_weight(position) for position in sorted(positions)),
                days_ranked=len(positions),
            )
            for article_id, positions in positions_by_article.items()
        ]
        results.sort(key=lambda result: (-result.rating, result.article.article_id))

        logger.debug(
            "Aggregated %d position records into %d articles for %s..%s",
            len(rows),
            len(results),
            start_date.isoformat(),
            end_date.isoformat(),
        )
        return results

    def query_day(self, day: date) -> list[AggregateResult]:
        return self.query(day, day)
