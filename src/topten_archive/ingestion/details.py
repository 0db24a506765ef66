"""Optional descriptive metadata attached to articles."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from topten_archive.ingestion.articles import to_article_view
from topten_archive.ingestion.errors import DetailConflictError, ValidationError
from topten_archive.ingestion.models import ArticleView
from topten_archive.storage.common import is_unique_violation, utc_now
from topten_archive.storage.database import Database
from topten_archive.storage.sqlmodel_models import Article, ArticleDetail

logger = logging.getLogger(__name__)


class DetailEnricher:
    """Stores at most one detail record per article; existing details are never replaced."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def attach_details(
        self,
        article_id: int,
        description: str,
        image_url: str,
        *,
        session: Session | None = None,
    ) -> None:
        try:
            with self.database.session_scope(session) as scope:
                if scope.get(Article, article_id) is None:
                    raise ValidationError(
                        message=f"Unknown article handle: {article_id}",
                        code="unknown_article",
                    )
                if scope.get(ArticleDetail, article_id) is not None:
                    raise _already_enriched(article_id)

                scope.add(
                    ArticleDetail(
                        article_id=article_id,
                        description=description or "",
                        image_url=image_url or "",
                        created_at=utc_now(),
                    ),
                )
                scope.flush()
        except IntegrityError as error:
            if is_unique_violation(error):
                raise _already_enriched(article_id) from error
            raise
        logger.debug("Attached details to article %s", article_id)

    def list_handles_missing_details(self) -> list[int]:
        return [article.article_id for article in self.list_articles_missing_details()]

    def list_articles_missing_details(self, limit: int | None = None) -> list[ArticleView]:
        """Articles without a detail record, ascending by handle."""

        with self.database.read_session() as session:
            statement = (
                select(Article)
                .join(
                    ArticleDetail,
                    col(ArticleDetail.article_id) == col(Article.article_id),
                    isouter=True,
                )
                .where(col(ArticleDetail.article_id).is_(None))
                .order_by(col(Article.article_id))
            )
            if limit is not None and limit > 0:
                statement = statement.limit(limit)
            rows = session.exec(statement).all()
            return [to_article_view(row, None) for row in rows]


def _already_enriched(article_id: int) -> DetailConflictError:
    return DetailConflictError(
        message=f"Article {article_id} already has details",
        code="details_already_attached",
        article_id=article_id,
    )
