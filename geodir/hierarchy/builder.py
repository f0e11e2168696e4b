"""
Hierarchy builder — seeds one country's tree from a flat feed.

Rows are processed in arrival order. Two run-local lookup tables map
province code → id and (province code, district code) → id, so each
province and district is resolved once per run:

  province  level 1  parent None      path  np>bagmati
  district  level 2  parent province  path  np>bagmati>kathmandu
  city      level 3  parent district  path  np>bagmati>kathmandu>kathmandu-city
            (only when the row carries a ward count; rest = {wards, admType})

Inserts are strictly top-down inside a single transaction. Every node is
upserted on (country_id, parent_id, level, name), so re-running a seed
returns the existing ids instead of duplicating rows. Any failure rolls the
whole run back.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from geodir.errors import StoreError
from geodir.hierarchy.constants import NEPAL, NEPAL_PROVINCES
from geodir.hierarchy.feed import FeedRow
from geodir.hierarchy.path import DivisionPath
from geodir.models.country import Country
from geodir.models.division import AdminDivision, DivisionType

logger = logging.getLogger(__name__)


@dataclass
class BuildSummary:
    country_id: int
    created: Counter = field(default_factory=Counter)
    reused: Counter = field(default_factory=Counter)
    skipped_rows: int = 0


def ensure_country(session: Session, country: dict[str, Any]) -> tuple[int, bool]:
    """
    Return (country_id, created). Looks the country up by ISO code first and
    inserts only when no live row exists.
    """
    iso_code = country["iso_code"].upper()
    existing = session.execute(
        select(Country.id).where(
            func.upper(Country.iso_code) == iso_code,
            Country.is_deleted.is_(False),
        )
    ).scalar_one_or_none()
    if existing is not None:
        return existing, False

    row = Country(
        name=country["name"].lower(),
        name_local=country.get("name_local"),
        iso_code=iso_code,
        icon=country.get("icon", ""),
        structure=country["structure"],
        continent=country["continent"],
        timezone=country.get("timezone"),
        rest=country.get("rest"),
        is_active=True,
        is_deleted=False,
        is_archived=False,
    )
    session.add(row)
    session.flush()
    logger.info("Country %s created (id=%s)", iso_code, row.id)
    return row.id, True


def upsert_division(
    session: Session,
    *,
    country_id: int,
    parent_id: Optional[int],
    path: DivisionPath,
    division_type: str,
    code: Optional[str] = None,
    name_local: Optional[str] = None,
    rest: Optional[dict[str, Any]] = None,
) -> tuple[int, bool]:
    """
    Insert a division unless one already exists under the same
    (country_id, parent_id, level, name). Returns (id, created).
    """
    parent_clause = (
        AdminDivision.parent_id.is_(None)
        if parent_id is None
        else AdminDivision.parent_id == parent_id
    )
    existing = session.execute(
        select(AdminDivision.id).where(
            AdminDivision.country_id == country_id,
            parent_clause,
            AdminDivision.level == path.level,
            AdminDivision.name == path.name,
        )
    ).scalar_one_or_none()
    if existing is not None:
        return existing, False

    division = AdminDivision(
        country_id=country_id,
        parent_id=parent_id,
        name=path.name,
        name_local=name_local,
        code=code,
        type=division_type,
        level=path.level,
        path=str(path),
        rest=rest,
        is_active=True,
        is_deleted=False,
        is_archived=False,
    )
    session.add(division)
    session.flush()  # id is needed by the next level down
    return division.id, True


def build_hierarchy(
    session: Session,
    rows: Iterable[FeedRow],
    country: Optional[dict[str, Any]] = None,
    provinces: Optional[dict[str, dict[str, str]]] = None,
) -> BuildSummary:
    """
    Seed one country's province → district → city tree and commit.

    Rows with an unknown province code are skipped. Any error rolls back
    the run: store failures surface as StoreError, bad names as
    InvalidNameError.
    """
    country = country or NEPAL
    provinces = provinces or NEPAL_PROVINCES

    try:
        country_id, country_created = ensure_country(session, country)
        summary = BuildSummary(country_id=country_id)
        if country_created:
            summary.created["country"] += 1
        else:
            summary.reused["country"] += 1

        root = DivisionPath.root(country["iso_code"])
        province_ids: dict[str, int] = {}
        district_ids: dict[tuple[str, str], int] = {}

        for row in rows:
            province = provinces.get(row.province_code)
            if province is None:
                summary.skipped_rows += 1
                continue

            province_path = root.child(province["name"])
            if row.province_code not in province_ids:
                province_ids[row.province_code] = _record(
                    summary,
                    DivisionType.PROVINCE,
                    upsert_division(
                        session,
                        country_id=country_id,
                        parent_id=None,
                        path=province_path,
                        division_type=DivisionType.PROVINCE,
                        code=province["code"],
                    ),
                )

            district_key = (row.province_code, row.district_code)
            district_path = province_path.child(row.district_name)
            if district_key not in district_ids:
                district_ids[district_key] = _record(
                    summary,
                    DivisionType.DISTRICT,
                    upsert_division(
                        session,
                        country_id=country_id,
                        parent_id=province_ids[row.province_code],
                        path=district_path,
                        division_type=DivisionType.DISTRICT,
                    ),
                )

            if row.wards is not None:
                _record(
                    summary,
                    DivisionType.CITY,
                    upsert_division(
                        session,
                        country_id=country_id,
                        parent_id=district_ids[district_key],
                        path=district_path.child(row.name),
                        division_type=DivisionType.CITY,
                        name_local=row.name_native,
                        rest={"wards": row.wards, "admType": row.type},
                    ),
                )

        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Hierarchy build aborted: %s", e)
        raise StoreError(str(getattr(e, "orig", None) or e)) from e
    except Exception:
        session.rollback()
        raise

    logger.info(
        "Hierarchy build complete for %s: created=%s reused=%s skipped=%d",
        country["iso_code"],
        dict(summary.created),
        dict(summary.reused),
        summary.skipped_rows,
    )
    return summary


def _record(summary: BuildSummary, kind: str, result: tuple[int, bool]) -> int:
    division_id, created = result
    if created:
        summary.created[kind] += 1
    else:
        summary.reused[kind] += 1
    return division_id
