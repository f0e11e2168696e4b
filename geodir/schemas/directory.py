"""Response shapes for the country and division endpoints."""

from typing import Any, Optional

from geodir.schemas.common import BaseSchema


class CountryResponse(BaseSchema):
    id: int
    name: str
    name_local: Optional[str] = None
    iso_code: str
    icon: str
    structure: str
    continent: str
    timezone: Optional[str] = None
    is_active: bool


class DivisionResponse(BaseSchema):
    id: int
    country_id: int
    parent_id: Optional[int] = None
    name: str
    name_local: Optional[str] = None
    code: Optional[str] = None
    type: str
    level: int
    path: str
    timezone: Optional[str] = None
    rest: Optional[dict[str, Any]] = None
    is_active: bool
