"""
Country-fixed routes for Nepal (settings.default_country_iso).

  GET /np/province                       → provinces, ?search= name prefix
  GET /np/district/{parent_id}           → districts under a province (max 8)
  GET /np/city/{parent_id}               → cities under a district (max 8, rest always included)
  GET /np/search/{type}                  → ranked search within the country
  GET /np/search/{type}/{parent_id}      → ranked search under one parent

Every route accepts ?field=a,b,c, resolved through the projection guard.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from geodir.database import get_db
from geodir.errors import parse_id
from geodir.hierarchy.constants import LEVEL_BY_TYPE
from geodir.models.division import DivisionType
from geodir.services.countries.repository import CountryRepository
from geodir.services.divisions.projection import (
    CHILD_FIELDS,
    PROVINCE_FIELDS,
    resolve_fields,
    with_extension,
)
from geodir.services.divisions.repository import DivisionRepository
from geodir.services.search.engine import RankedQuery, prefix_search, ranked_search
from geodir.services.search.procedure import SearchProcedure
from geodir.settings import settings

router = APIRouter(prefix="/np", tags=["np"])


# ── Dependencies ──────────────────────────────────────────────────────────────


def get_search_procedure(db: Session = Depends(get_db)) -> SearchProcedure:
    return SearchProcedure(db)


# ── Listings ──────────────────────────────────────────────────────────────────


@router.get("/province")
def list_provinces(
    search: Optional[str] = None,
    field: Optional[str] = None,
    db: Session = Depends(get_db),
) -> list[dict]:
    fields = resolve_fields(_clean(field), PROVINCE_FIELDS)
    return prefix_search(
        DivisionRepository(db),
        country_id=_country_id(db),
        level=LEVEL_BY_TYPE[DivisionType.PROVINCE],
        fields=fields,
        name_prefix=search,
    )


@router.get("/district/{parent_id}")
def list_districts(
    parent_id: str,
    search: Optional[str] = None,
    field: Optional[str] = None,
    db: Session = Depends(get_db),
) -> list[dict]:
    pid = parse_id(parent_id, "id")
    fields = resolve_fields(_clean(field), CHILD_FIELDS)
    return DivisionRepository(db).children_of(
        pid,
        LEVEL_BY_TYPE[DivisionType.DISTRICT],
        _country_id(db),
        fields,
        name_prefix=search,
        limit=settings.scoped_result_limit,
    )


@router.get("/city/{parent_id}")
def list_cities(
    parent_id: str,
    search: Optional[str] = None,
    field: Optional[str] = None,
    db: Session = Depends(get_db),
) -> list[dict]:
    pid = parse_id(parent_id, "id")
    fields = with_extension(resolve_fields(_clean(field), CHILD_FIELDS))
    return DivisionRepository(db).children_of(
        pid,
        LEVEL_BY_TYPE[DivisionType.CITY],
        _country_id(db),
        fields,
        name_prefix=search,
        limit=settings.scoped_result_limit,
    )


# ── Ranked search ─────────────────────────────────────────────────────────────


@router.get("/search/{type}")
def search_level(
    type: str,
    q: Optional[str] = None,
    field: Optional[str] = None,
    db: Session = Depends(get_db),
    procedure: SearchProcedure = Depends(get_search_procedure),
) -> list[dict]:
    query = RankedQuery.parse(type, q)
    return ranked_search(
        procedure,
        query,
        country_id=_country_id(db),
        requested_fields=_clean(field),
        fallback=CHILD_FIELDS,
        limit=settings.scoped_result_limit,
    )


@router.get("/search/{type}/{parent_id}")
def search_under_parent(
    type: str,
    parent_id: str,
    q: Optional[str] = None,
    field: Optional[str] = None,
    db: Session = Depends(get_db),
    procedure: SearchProcedure = Depends(get_search_procedure),
) -> list[dict]:
    pid = parse_id(parent_id, "id")
    query = RankedQuery.parse(type, q)
    return ranked_search(
        procedure,
        query,
        country_id=_country_id(db),
        requested_fields=_clean(field),
        fallback=CHILD_FIELDS,
        limit=settings.scoped_result_limit,
        parent_id=pid,
    )


# ── Helpers ───────────────────────────────────────────────────────────────────


def _country_id(db: Session) -> int:
    """Resolved per request; validation has already run by the time this is called."""
    return CountryRepository(db).get_country_id_by_iso(settings.default_country_iso)


def _clean(field: Optional[str]) -> Optional[str]:
    return field.strip() if field else None
