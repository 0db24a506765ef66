"""Identity-keyed registry of known articles."""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlmodel import Session, col, select

from topten_archive.ingestion.errors import ValidationError
from topten_archive.ingestion.models import ArticleDetails, ArticleView, ResolveResult
from topten_archive.storage.common import utc_now
from topten_archive.storage.database import Database
from topten_archive.storage.sqlmodel_models import Article, ArticleDetail

logger = logging.getLogger(__name__)


class ArticleStore:
    """Resolves links to stable article handles, creating articles on first sight.

    The link is the identity key and is used verbatim. Once an article exists its
    title is never rewritten, so the first title seen for a link is the one kept.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    def resolve_or_create(self, link: str, title: str, *, session: Session | None = None) -> int:
        return self.resolve(link, title, session=session).article_id

    def resolve(self, link: str, title: str, *, session: Session | None = None) -> ResolveResult:
        if not link:
            raise ValidationError(message="Article link must not be empty.", code="empty_link")

        with self.database.session_scope(session) as scope:
            existing = self._find_id(scope, link)
            if existing is not None:
                return ResolveResult(article_id=existing, created=False)

            # Concurrent writers may insert the same link first; the unique index wins.
            result = scope.exec(
                sqlite_insert(Article)
                .values(link=link, title=title, created_at=utc_now())
                .on_conflict_do_nothing(index_elements=["link"]),
            )
            article_id = self._find_id(scope, link)
            if article_id is None:
                raise RuntimeError(f"Failed to resolve article after insert: {link!r}")

            created = result.rowcount == 1
            if created:
                logger.debug("Registered new article %s for link %s", article_id, link)
            return ResolveResult(article_id=article_id, created=created)

    def get(self, article_id: int, *, session: Session | None = None) -> ArticleView | None:
        with self.database.session_scope(session) as scope:
            row = scope.exec(
                select(Article, ArticleDetail)
                .join(
                    ArticleDetail,
                    col(ArticleDetail.article_id) == col(Article.article_id),
                    isouter=True,
                )
                .where(Article.article_id == article_id),
            ).one_or_none()
            if row is None:
                return None
            article, detail = row
            return to_article_view(article, detail)

    def count(self) -> int:
        with self.database.read_session() as session:
            return int(session.exec(select(func.count()).select_from(Article)).one())

    @staticmethod
    def _find_id(session: Session, link: str) -> int | None:
        return session.exec(
            select(Article.article_id).where(Article.link == link),
        ).one_or_none()


def to_article_view(article: Article, detail: ArticleDetail | None) -> ArticleView:
    if article.article_id is None:
        raise RuntimeError("Article row has no handle")
    return ArticleView(
        article_id=article.article_id,
        link=article.link,
        title=article.title,
        details=(
            ArticleDetails(description=detail.description, image_url=detail.image_url)
            if detail is not None
            else None
        ),
    )
