"""Country reads. Soft-deleted countries are invisible everywhere."""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from geodir.errors import NotFound, StoreError
from geodir.models.country import Country

logger = logging.getLogger(__name__)

COUNTRY_COLUMNS = (
    Country.id,
    Country.name,
    Country.name_local,
    Country.iso_code,
    Country.icon,
    Country.structure,
    Country.continent,
    Country.timezone,
    Country.is_active,
)


class CountryRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_countries(self) -> list[dict]:
        stmt = (
            select(*COUNTRY_COLUMNS)
            .where(Country.is_deleted.is_(False))
            .order_by(Country.name.asc())
        )
        return [dict(r) for r in self._execute(stmt).mappings().all()]

    def get_country(self, country_id: int) -> dict:
        stmt = select(*COUNTRY_COLUMNS).where(
            Country.id == country_id, Country.is_deleted.is_(False)
        )
        row = self._execute(stmt).mappings().one_or_none()
        if row is None:
            raise NotFound()
        return dict(row)

    def get_country_id_by_iso(self, iso_code: str) -> int:
        """Resolve a live country's id from its ISO code (any case)."""
        stmt = select(Country.id).where(
            func.upper(Country.iso_code) == iso_code.upper(),
            Country.is_deleted.is_(False),
        )
        country_id = self._execute(stmt).scalar_one_or_none()
        if country_id is None:
            raise NotFound(f"Country {iso_code.upper()} not found")
        return country_id

    def _execute(self, stmt):
        try:
            return self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("Country query failed: %s", e)
            raise StoreError(str(getattr(e, "orig", None) or e)) from e
