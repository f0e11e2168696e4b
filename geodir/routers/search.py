"""Global search: GET /search?q=<min 2 chars>&country_id=<optional>"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from geodir.database import get_db
from geodir.services.divisions.repository import DivisionRepository
from geodir.services.search.engine import substring_search

router = APIRouter(prefix="/search", tags=["search"])


@router.get("")
def search_divisions(
    q: Optional[str] = None,
    country_id: Optional[str] = None,
    db: Session = Depends(get_db),
) -> list[dict]:
    return substring_search(DivisionRepository(db), q, country_id)
