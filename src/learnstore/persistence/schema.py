"""Table definitions shared by the SQL backend and the in-memory backend."""

from __future__ import annotations

from typing import Final

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

metadata = sa.MetaData()

# JSON on every dialect, JSONB on PostgreSQL so array containment can use @>
JsonType = sa.JSON().with_variant(JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


challenges = sa.Table(
    "challenges",
    metadata,
    sa.Column("id", sa.String(36), primary_key=True),
    sa.Column("title", sa.String(255)),
    sa.Column("content", JsonType),
    sa.Column("user_id", sa.String(64), index=True),
    sa.Column("user_email", sa.String(255), index=True),
    sa.Column("focus_area", sa.String(100), index=True),
    sa.Column("focus_area_id", sa.String(36)),
    sa.Column("challenge_type", sa.String(100)),
    sa.Column("format_type", sa.String(100)),
    sa.Column("difficulty", sa.String(50)),
    sa.Column("status", sa.String(20), nullable=False, index=True),
    sa.Column("responses", JsonType),
    sa.Column("evaluation", JsonType),
    sa.Column("evaluation_criteria", JsonType),
    sa.Column("score", sa.Float),
    *_timestamps(),
)

challenge_focus_areas = sa.Table(
    "challenge_focus_areas",
    metadata,
    sa.Column("id", sa.String(36), primary_key=True),
    sa.Column("code", sa.String(100), nullable=False, unique=True),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("description", sa.Text),
    sa.Column("is_active", sa.Boolean, nullable=False, default=True),
    sa.Column("display_order", sa.Integer, nullable=False, default=0),
    sa.Column("prerequisites", JsonType),
    sa.Column("related_areas", JsonType),
    sa.Column("metadata", JsonType),
    *_timestamps(),
)

format_types = sa.Table(
    "format_types",
    metadata,
    sa.Column("id", sa.String(36), primary_key=True),
    sa.Column("code", sa.String(100), nullable=False, unique=True),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("description", sa.Text),
    sa.Column("response_format", sa.String(50)),
    sa.Column("is_active", sa.Boolean, nullable=False, default=True),
    sa.Column("metadata", JsonType),
    *_timestamps(),
)

difficulty_levels = sa.Table(
    "difficulty_levels",
    metadata,
    sa.Column("id", sa.String(36), primary_key=True),
    sa.Column("code", sa.String(100), nullable=False, unique=True),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("description", sa.Text),
    sa.Column("sort_order", sa.Integer, nullable=False, default=0),
    sa.Column("question_count", sa.Integer, nullable=False, default=1),
    sa.Column("context_complexity", sa.Float, nullable=False, default=0.5),
    sa.Column("is_active", sa.Boolean, nullable=False, default=True),
    sa.Column("metadata", JsonType),
    *_timestamps(),
)

challenge_types = sa.Table(
    "challenge_types",
    metadata,
    sa.Column("id", sa.String(36), primary_key=True),
    sa.Column("code", sa.String(100), nullable=False, unique=True),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("description", sa.Text),
    sa.Column("format_types", JsonType),
    sa.Column("focus_areas", JsonType),
    sa.Column("is_active", sa.Boolean, nullable=False, default=True),
    sa.Column("metadata", JsonType),
    *_timestamps(),
)


def unique_columns() -> dict[str, tuple[str, ...]]:
    """Non-primary-key unique columns per table."""
    return {
        table.name: tuple(c.name for c in table.columns if c.unique)
        for table in metadata.sorted_tables
    }


TABLE_NAMES: Final = tuple(table.name for table in metadata.sorted_tables)
