"""
Search engine: two strategies, chosen by endpoint.

Literal prefix search (root listings)
    Left-anchored match on name. Prefixes longer than
    settings.prefix_max_length are ignored, not rejected.

Ranked search (/search/{type} endpoints)
    Delegates to the scoring procedure, then shapes rows through the
    projection guard. Search text shorter than settings.search_min_length
    is rejected with ValidationError, as is an unknown type token. Row
    order is the procedure's; it is never re-sorted here.

Prefix search drops a bad prefix; ranked search rejects bad text.

Substring search (/search)
    Global name/path containment match, ordered by path.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from geodir.errors import InvalidFilterError, ValidationError, parse_id
from geodir.hierarchy.constants import LEVEL_BY_TYPE
from geodir.models.division import DivisionType
from geodir.services.divisions.projection import (
    GLOBAL_SEARCH_FIELDS,
    DivisionField,
    resolve_fields,
    shape_row,
    with_extension,
)
from geodir.services.divisions.repository import DivisionRepository
from geodir.services.search.procedure import SearchProcedure
from geodir.settings import settings

logger = logging.getLogger(__name__)


def validate_search_text(q: Optional[str]) -> str:
    """Trim and length-check search text for the strict search paths."""
    text = (q or "").strip()
    if len(text) < settings.search_min_length:
        raise ValidationError(
            f"Query 'q' required (min {settings.search_min_length} chars)"
        )
    return text


def level_for_type(type_token: str) -> int:
    level = LEVEL_BY_TYPE.get(type_token)
    if level is None:
        raise ValidationError("invalid type")
    return level


def prefix_search(
    repo: DivisionRepository,
    *,
    country_id: int,
    level: int,
    fields: Sequence[DivisionField],
    name_prefix: Optional[str] = None,
) -> list[dict]:
    return repo.list_level(country_id, level, fields, name_prefix=name_prefix)


@dataclass(frozen=True)
class RankedQuery:
    """Validated input of a ranked search: trimmed text plus target level."""

    text: str
    type_token: str
    level: int

    @classmethod
    def parse(cls, type_token: str, q: Optional[str]) -> "RankedQuery":
        text = validate_search_text(q)
        return cls(text=text, type_token=type_token, level=level_for_type(type_token))


def ranked_search(
    procedure: SearchProcedure,
    query: RankedQuery,
    *,
    country_id: int,
    requested_fields: Optional[str],
    fallback: Sequence[DivisionField],
    limit: int,
    parent_id: Optional[int] = None,
) -> list[dict]:
    """
    Run the scoring procedure for one level of one country and project its
    rows. City results always carry the extension attributes.
    """
    fields = resolve_fields(requested_fields, fallback)
    if query.type_token == DivisionType.CITY:
        fields = with_extension(fields)

    rows = procedure(
        search=query.text,
        lvl=query.level,
        cid=country_id,
        lim=limit,
        parent=parent_id,
    )
    logger.debug(
        "Ranked search %r level=%d parent=%s: %d rows",
        query.text,
        query.level,
        parent_id,
        len(rows),
    )
    return [shape_row(row, fields) for row in rows[:limit]]


def substring_search(
    repo: DivisionRepository,
    q: Optional[str],
    country_id: Optional[str] = None,
) -> list[dict]:
    """
    Global search across all countries. A non-numeric country_id is
    ignored rather than rejected.
    """
    text = validate_search_text(q)
    cid = None
    if country_id is not None:
        try:
            cid = parse_id(country_id, "country_id")
        except InvalidFilterError:
            logger.debug("Ignoring non-numeric country_id %r", country_id)
    return repo.search_substring(
        text, GLOBAL_SEARCH_FIELDS, settings.global_search_limit, country_id=cid
    )
