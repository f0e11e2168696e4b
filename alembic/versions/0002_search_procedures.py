"""Ranked search functions over admin_divisions (pg_trgm)

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19

Both functions return whole admin_divisions rows, best match first:
names starting with the search text, then trigram similarity, then name.
"""

from typing import Sequence, Union

from alembic import op

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SIMILARITY_THRESHOLD = 0.2

_MATCH = f"""
      AND (
        d.name ILIKE lower(search) || '%'
        OR d.name_local ILIKE search || '%'
        OR similarity(d.name, lower(search)) > {SIMILARITY_THRESHOLD}
      )
"""

_ORDER = """
    ORDER BY (d.name ILIKE lower(search) || '%') DESC,
             similarity(d.name, lower(search)) DESC,
             d.name
    LIMIT lim
"""


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS pg_trgm")
    op.execute(
        "CREATE INDEX IF NOT EXISTS ix_admin_divisions_name_trgm "
        "ON admin_divisions USING gin (name gin_trgm_ops)"
    )

    op.execute(
        f"""
CREATE OR REPLACE FUNCTION search_admin_divisions(
    search text, lvl integer, cid integer, lim integer
)
RETURNS SETOF admin_divisions
LANGUAGE sql STABLE
AS $fn$
    SELECT d.*
    FROM admin_divisions d
    WHERE d.country_id = cid
      AND d.level = lvl
      AND d.is_deleted = false
{_MATCH}
{_ORDER}
$fn$
"""
    )

    op.execute(
        f"""
CREATE OR REPLACE FUNCTION search_admin_divisions_with_parentid(
    search text, lvl integer, cid integer, lim integer, parent integer
)
RETURNS SETOF admin_divisions
LANGUAGE sql STABLE
AS $fn$
    SELECT d.*
    FROM admin_divisions d
    WHERE d.country_id = cid
      AND d.level = lvl
      AND d.parent_id = parent
      AND d.is_deleted = false
{_MATCH}
{_ORDER}
$fn$
"""
    )


def downgrade() -> None:
    op.execute(
        "DROP FUNCTION IF EXISTS "
        "search_admin_divisions_with_parentid(text, integer, integer, integer, integer)"
    )
    op.execute("DROP FUNCTION IF EXISTS search_admin_divisions(text, integer, integer, integer)")
    op.execute("DROP INDEX IF EXISTS ix_admin_divisions_name_trgm")
