"""SQLModel ORM tables for the top list archive."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlmodel import Field, SQLModel


class Article(SQLModel, table=True):
    __tablename__ = "articles"  # type: ignore[bad-override]

    article_id: int | None = Field(default=None, primary_key=True)
    link: str = Field(sa_column=Column(Text, nullable=False, unique=True))
    title: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))


class PositionRecord(SQLModel, table=True):
    __tablename__ = "position_records"  # type: ignore[bad-override]
    __table_args__ = (
        UniqueConstraint(
            "article_id",
            "captured_on",
            name="uq_position_records_article_captured_on",
        ),
        UniqueConstraint(
            "captured_on",
            "position",
            name="uq_position_records_captured_on_position",
        ),
    )

    position_id: int | None = Field(default=None, primary_key=True)
    article_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("articles.article_id"),
            nullable=False,
            index=True,
        ),
    )
    captured_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    # UTC calendar day of captured_at; one ranking per day.
    captured_on: date = Field(sa_column=Column(Date, nullable=False, index=True))
    position: int


class ArticleDetail(SQLModel, table=True):
    __tablename__ = "article_details"  # type: ignore[bad-override]

    article_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("articles.article_id"),
            primary_key=True,
            autoincrement=False,
        ),
    )
    description: str = Field(default="", sa_column=Column(Text, nullable=False))
    image_url: str = Field(default="", sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
