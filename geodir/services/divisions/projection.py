"""
Field projection guard.

The only place caller-supplied field names cross into a query. Requested
names are matched against a closed enum; anything else is dropped. The
result is never empty: when nothing valid survives, the endpoint's fallback
projection is used.
"""

from enum import Enum
from typing import Optional, Sequence

from sqlalchemy.orm import InstrumentedAttribute

from geodir.models.division import AdminDivision


class DivisionField(str, Enum):
    ID = "id"
    COUNTRY_ID = "country_id"
    PARENT_ID = "parent_id"
    NAME = "name"
    NAME_LOCAL = "name_local"
    CODE = "code"
    TYPE = "type"
    LEVEL = "level"
    PATH = "path"
    TIMEZONE = "timezone"
    REST = "rest"  # extension attributes

    @property
    def column(self) -> InstrumentedAttribute:
        return getattr(AdminDivision, self.value)

    def __str__(self) -> str:
        return self.value


F = DivisionField

# ── Endpoint defaults ─────────────────────────────────────────────────────────
ALL_FIELDS: tuple[DivisionField, ...] = tuple(DivisionField)
PROVINCE_FIELDS = (F.ID, F.COUNTRY_ID, F.CODE, F.LEVEL, F.NAME)
CHILD_FIELDS = (F.ID, F.COUNTRY_ID, F.LEVEL, F.NAME)
GLOBAL_SEARCH_FIELDS = (
    F.ID,
    F.COUNTRY_ID,
    F.PARENT_ID,
    F.NAME,
    F.NAME_LOCAL,
    F.TYPE,
    F.LEVEL,
    F.PATH,
)

_BY_NAME = {f.value: f for f in DivisionField}


def resolve_fields(
    requested: Optional[str], fallback: Sequence[DivisionField]
) -> list[DivisionField]:
    """
    Resolve a comma-separated field list against the whitelist.

    Order of the surviving tokens is preserved; unknown tokens and repeats
    are dropped. Returns `fallback` when `requested` is empty or nothing
    valid remains.
    """
    if not requested:
        return list(fallback)

    fields: list[DivisionField] = []
    for token in requested.split(","):
        field = _BY_NAME.get(token.strip())
        if field is not None and field not in fields:
            fields.append(field)

    return fields or list(fallback)


def with_extension(fields: Sequence[DivisionField]) -> list[DivisionField]:
    """Force-include the extension attributes (city-level results)."""
    fields = list(fields)
    if DivisionField.REST not in fields:
        fields.append(DivisionField.REST)
    return fields


def shape_row(row: dict, fields: Sequence[DivisionField]) -> dict:
    """Keep only the projected keys of a row, in projection order."""
    return {f.value: row[f.value] for f in fields if f.value in row}
