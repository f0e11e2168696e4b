"""
Division repository: scoped, ordered, projected reads of admin_divisions.

Every query built here carries `is_deleted = false`, and every country-scoped
query carries `country_id`. Lookups by id always join the country id too:
a division id under the wrong country is NotFound, never a hit.

Database failures are wrapped as StoreError with the driver's message.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy import Select, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from geodir.errors import NotFound, StoreError, parse_id
from geodir.models.division import AdminDivision
from geodir.services.divisions.projection import DivisionField
from geodir.settings import settings

logger = logging.getLogger(__name__)

# Marks "no parent filter supplied", as opposed to parent_id IS NULL
UNSET = object()


@dataclass
class DivisionFilters:
    level: Optional[int] = None
    parent_id: object = UNSET  # int, None (root level) or UNSET
    path_prefix: Optional[str] = None

    @classmethod
    def from_query(
        cls,
        level: Optional[str] = None,
        parent_id: Optional[str] = None,
        path_prefix: Optional[str] = None,
    ) -> "DivisionFilters":
        """
        Parse raw query-string values.

        parent_id="null" selects root-level nodes. Raises InvalidFilterError
        for a level or parent_id that is not a non-negative integer.
        """
        filters = cls()
        if level is not None:
            filters.level = parse_id(level, "level")
        if parent_id is not None:
            filters.parent_id = (
                None if parent_id.strip() == "null" else parse_id(parent_id, "parent_id")
            )
        if path_prefix:
            filters.path_prefix = path_prefix
        return filters


def usable_prefix(prefix: Optional[str]) -> Optional[str]:
    """
    Return the name prefix if it is short enough to filter on.

    Empty or over-long prefixes are dropped rather than rejected.
    """
    if not prefix or len(prefix) > settings.prefix_max_length:
        return None
    return prefix


class DivisionRepository:
    def __init__(self, db: Session):
        self.db = db

    # ── Reads returning full rows ─────────────────────────────────────────────

    def list_by_country(
        self, country_id: int, filters: Optional[DivisionFilters] = None
    ) -> list[AdminDivision]:
        """Divisions of one country matching the filters, ordered by name."""
        filters = filters or DivisionFilters()
        stmt = select(AdminDivision).where(*self._live(country_id))

        if filters.level is not None:
            stmt = stmt.where(AdminDivision.level == filters.level)
        if filters.parent_id is None:
            stmt = stmt.where(AdminDivision.parent_id.is_(None))
        elif filters.parent_id is not UNSET:
            stmt = stmt.where(AdminDivision.parent_id == filters.parent_id)
        if filters.path_prefix:
            stmt = stmt.where(
                AdminDivision.path.startswith(filters.path_prefix, autoescape=True)
            )

        stmt = stmt.order_by(AdminDivision.name.asc(), AdminDivision.id.asc())
        return list(self._run(lambda: self.db.execute(stmt).scalars().all()))

    def get_by_id(self, country_id: int, division_id: int) -> AdminDivision:
        stmt = select(AdminDivision).where(
            AdminDivision.id == division_id, *self._live(country_id)
        )
        division = self._run(lambda: self.db.execute(stmt).scalar_one_or_none())
        if division is None:
            raise NotFound()
        return division

    # ── Projected reads ───────────────────────────────────────────────────────

    def list_level(
        self,
        country_id: int,
        level: int,
        fields: Sequence[DivisionField],
        name_prefix: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[dict]:
        """Divisions at one level of a country, optionally name-prefixed."""
        stmt = self._projected(fields).where(
            *self._live(country_id), AdminDivision.level == level
        )
        return self._fetch(stmt, name_prefix, limit)

    def children_of(
        self,
        parent_id: int,
        level: int,
        country_id: int,
        fields: Sequence[DivisionField],
        name_prefix: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[dict]:
        """Direct children of a division at `level`, ordered by name, bounded."""
        stmt = self._projected(fields).where(
            *self._live(country_id),
            AdminDivision.parent_id == parent_id,
            AdminDivision.level == level,
        )
        return self._fetch(stmt, name_prefix, limit or settings.scoped_result_limit)

    def search_substring(
        self,
        text: str,
        fields: Sequence[DivisionField],
        limit: int,
        country_id: Optional[int] = None,
    ) -> list[dict]:
        """Name or path contains `text` (case-insensitive), ordered by path."""
        stmt = self._projected(fields).where(
            AdminDivision.is_deleted.is_(False),
            or_(
                AdminDivision.name.icontains(text, autoescape=True),
                AdminDivision.path.icontains(text, autoescape=True),
            ),
        )
        if country_id is not None:
            stmt = stmt.where(AdminDivision.country_id == country_id)
        stmt = stmt.order_by(AdminDivision.path.asc()).limit(limit)
        return self._rows(stmt)

    # ── Internals ─────────────────────────────────────────────────────────────

    @staticmethod
    def _live(country_id: int) -> tuple:
        return (
            AdminDivision.country_id == country_id,
            AdminDivision.is_deleted.is_(False),
        )

    @staticmethod
    def _projected(fields: Sequence[DivisionField]) -> Select:
        return select(*[f.column for f in fields])

    def _fetch(
        self, stmt: Select, name_prefix: Optional[str], limit: Optional[int]
    ) -> list[dict]:
        prefix = usable_prefix(name_prefix)
        if prefix is not None:
            stmt = stmt.where(AdminDivision.name.istartswith(prefix, autoescape=True))
        stmt = stmt.order_by(AdminDivision.name.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return self._rows(stmt)

    def _rows(self, stmt: Select) -> list[dict]:
        return self._run(
            lambda: [dict(r) for r in self.db.execute(stmt).mappings().all()]
        )

    def _run(self, fn):
        try:
            return fn()
        except SQLAlchemyError as e:
            logger.error("Division query failed: %s", e)
            raise StoreError(str(getattr(e, "orig", None) or e)) from e
