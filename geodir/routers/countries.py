"""
Country and division listing routes.

  GET /countries                                  → live countries by name
  GET /countries/{country_id}                     → one country
  GET /countries/{country_id}/divisions           → ?level= &parent_id= (or "null") &path_prefix=
  GET /countries/{country_id}/divisions/{id}      → one division, scoped to the country

Ids are taken as strings and parsed by the service so malformed values get
a 400 with a specific message.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from geodir.database import get_db
from geodir.errors import parse_id
from geodir.schemas.directory import CountryResponse, DivisionResponse
from geodir.services.countries.repository import CountryRepository
from geodir.services.divisions.repository import DivisionFilters, DivisionRepository

router = APIRouter(prefix="/countries", tags=["countries"])


@router.get("", response_model=list[CountryResponse])
def list_countries(db: Session = Depends(get_db)) -> list[dict]:
    return CountryRepository(db).list_countries()


@router.get("/{country_id}", response_model=CountryResponse)
def get_country(country_id: str, db: Session = Depends(get_db)) -> dict:
    return CountryRepository(db).get_country(parse_id(country_id, "country id"))


@router.get("/{country_id}/divisions", response_model=list[DivisionResponse])
def list_divisions(
    country_id: str,
    level: Optional[str] = None,
    parent_id: Optional[str] = None,
    path_prefix: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """
    Divisions of one country, ordered by name.
    parent_id=null selects level-1 nodes; omitting it applies no parent filter.
    """
    cid = parse_id(country_id, "country id")
    filters = DivisionFilters.from_query(level, parent_id, path_prefix)
    return DivisionRepository(db).list_by_country(cid, filters)


@router.get("/{country_id}/divisions/{division_id}", response_model=DivisionResponse)
def get_division(country_id: str, division_id: str, db: Session = Depends(get_db)):
    cid = parse_id(country_id, "id")
    did = parse_id(division_id, "id")
    return DivisionRepository(db).get_by_id(cid, did)
