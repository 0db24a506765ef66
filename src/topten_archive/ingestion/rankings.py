"""Recording of one captured top list as position records."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from topten_archive.ingestion.errors import RankingConflictError, ValidationError
from topten_archive.storage.common import (
    is_unique_violation,
    to_db_datetime,
    to_utc_aware_datetime,
)
from topten_archive.storage.database import Database
from topten_archive.storage.sqlmodel_models import PositionRecord

logger = logging.getLogger(__name__)


class RankingRecorder:
    """Writes one position record per article for a UTC day, all or nothing.

    Capture timestamps are stored in UTC; naive values are taken as UTC. A day
    holds at most one ranking, whatever time of day it was captured at.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    def record_day(
        self,
        captured_at: datetime,
        article_ids: Sequence[int],
        *,
        session: Session | None = None,
    ) -> int:
        """Record ``article_ids`` as ranks 1..N for the UTC day of ``captured_at``.

        Raises:
            ValidationError: the list is empty or names an article twice.
            RankingConflictError: positions for that day already exist.
        """

        if not article_ids:
            raise ValidationError(message="Cannot record an empty ranking.", code="empty_ranking")
        if len(set(article_ids)) != len(article_ids):
            raise ValidationError(
                message=f"Ranking lists the same article more than once: {list(article_ids)}",
                code="duplicate_article",
            )

        captured_at_db = to_db_datetime(captured_at)
        captured_on = captured_at_db.date()
        try:
            with self.database.session_scope(session) as scope:
                if self._has_capture(scope, captured_on):
                    raise _already_recorded(captured_at)

                for position, article_id in enumerate(article_ids, start=1):
                    scope.add(
                        PositionRecord(
                            article_id=article_id,
                            captured_at=captured_at_db,
                            captured_on=captured_on,
                            position=position,
                        ),
                    )
                scope.flush()
        except IntegrityError as error:
            if is_unique_violation(error):
                raise _already_recorded(captured_at) from error
            raise

        logger.info(
            "Recorded %d positions captured at %s",
            len(article_ids),
            to_utc_aware_datetime(captured_at).isoformat(),
        )
        return len(article_ids)

    def list_day(self, day: date) -> list[int]:
        """Article handles recorded for the UTC ``day`` in rank order."""

        with self.database.read_session() as session:
            rows = session.exec(
                select(PositionRecord.article_id)
                .where(PositionRecord.captured_on == day)
                .order_by(PositionRecord.position),
            ).all()
        return list(rows)

    @staticmethod
    def _has_capture(session: Session, captured_on: date) -> bool:
        return (
            session.exec(
                select(PositionRecord.position_id)
                .where(PositionRecord.captured_on == captured_on)
                .limit(1),
            ).first()
            is not None
        )


def _already_recorded(captured_at: datetime) -> RankingConflictError:
    return RankingConflictError(
        message=(
            f"Ranking already recorded for {to_db_datetime(captured_at).date().isoformat()} "
            f"(capture at {to_utc_aware_datetime(captured_at).isoformat()})"
        ),
        code="ranking_already_recorded",
        captured_at=captured_at,
    )
