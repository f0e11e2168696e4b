"""Initial schema — countries and admin_divisions

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _lifecycle_columns() -> list[sa.Column]:
    return [
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("is_deleted", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("is_archived", sa.Boolean, nullable=False, server_default="false"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # ── countries ─────────────────────────────────────────────────────────────
    op.create_table(
        "countries",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("name_local", sa.String(128), nullable=True),
        sa.Column("iso_code", sa.String(8), nullable=False, unique=True),
        sa.Column("icon", sa.String(16), nullable=False, server_default=""),
        sa.Column("structure", sa.String(256), nullable=False),
        sa.Column("continent", sa.String(32), nullable=False),
        sa.Column("timezone", sa.String(64), nullable=True),
        sa.Column("rest", postgresql.JSONB, nullable=True),
        *_lifecycle_columns(),
    )
    op.create_index("ix_countries_is_deleted", "countries", ["is_deleted"])

    # ── admin_divisions ───────────────────────────────────────────────────────
    op.create_table(
        "admin_divisions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "country_id",
            sa.Integer,
            sa.ForeignKey("countries.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "parent_id",
            sa.Integer,
            sa.ForeignKey("admin_divisions.id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("name_local", sa.String(128), nullable=True),
        sa.Column("code", sa.String(32), nullable=True),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("level", sa.Integer, nullable=False),
        sa.Column("path", sa.Text, nullable=False),
        sa.Column("timezone", sa.String(64), nullable=True),
        sa.Column("rest", postgresql.JSONB, nullable=True),
        *_lifecycle_columns(),
        sa.UniqueConstraint(
            "country_id",
            "parent_id",
            "level",
            "name",
            name="uq_admin_divisions_parent_level_name",
        ),
    )
    op.create_index(
        "ix_admin_divisions_scope",
        "admin_divisions",
        ["country_id", "parent_id", "level"],
    )
    op.create_index("ix_admin_divisions_name", "admin_divisions", ["name"])
    op.create_index("ix_admin_divisions_path", "admin_divisions", ["path"])
    op.create_index("ix_admin_divisions_is_deleted", "admin_divisions", ["is_deleted"])


def downgrade() -> None:
    op.drop_table("admin_divisions")
    op.drop_table("countries")
