"""Articles, daily position records and article details."""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "articles",
        sa.Column("article_id", sa.Integer(), nullable=False),
        sa.Column("link", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("article_id"),
        sa.UniqueConstraint("link"),
    )

    op.create_table(
        "position_records",
        sa.Column("position_id", sa.Integer(), nullable=False),
        sa.Column("article_id", sa.Integer(), nullable=False),
        sa.Column("captured_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("captured_on", sa.Date(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["article_id"], ["articles.article_id"]),
        sa.PrimaryKeyConstraint("position_id"),
        sa.UniqueConstraint(
            "article_id",
            "captured_on",
            name="uq_position_records_article_captured_on",
        ),
        sa.UniqueConstraint(
            "captured_on",
            "position",
            name="uq_position_records_captured_on_position",
        ),
    )
    op.create_index(
        "ix_position_records_article_id",
        "position_records",
        ["article_id"],
        unique=False,
    )
    op.create_index(
        "ix_position_records_captured_on",
        "position_records",
        ["captured_on"],
        unique=False,
    )

    op.create_table(
        "article_details",
        sa.Column("article_id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["article_id"], ["articles.article_id"]),
        sa.PrimaryKeyConstraint("article_id"),
    )


def downgrade() -> None:
    op.drop_table("article_details")
    op.drop_index("ix_position_records_captured_on", table_name="position_records")
    op.drop_index("ix_position_records_article_id", table_name="position_records")
    op.drop_table("position_records")
    op.drop_table("articles")
