"""
Call contract of the server-side ranked search functions.

The functions live in the database (alembic/versions/0002) and take named
arguments:

    search_admin_divisions(search, lvl, cid, lim)
    search_admin_divisions_with_parentid(search, lvl, cid, lim, parent)

Each returns admin_divisions-shaped rows (including `rest`) already ordered
by rank, best first. This module only knows the call contract.
"""

import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from geodir.errors import StoreError
from geodir.settings import settings

logger = logging.getLogger(__name__)


class SearchProcedure:
    def __init__(
        self,
        db: Session,
        name: str = settings.search_procedure,
        name_with_parent: str = settings.search_procedure_with_parent,
    ):
        self.db = db
        self.name = name
        self.name_with_parent = name_with_parent

    def __call__(
        self,
        *,
        search: str,
        lvl: int,
        cid: int,
        lim: int,
        parent: Optional[int] = None,
    ) -> list[dict]:
        params = {"search": search, "lvl": lvl, "cid": cid, "lim": lim}
        if parent is None:
            fn = self.name
            args = "search => :search, lvl => :lvl, cid => :cid, lim => :lim"
        else:
            fn = self.name_with_parent
            args = (
                "search => :search, lvl => :lvl, cid => :cid, lim => :lim, "
                "parent => :parent"
            )
            params["parent"] = parent

        try:
            result = self.db.execute(text(f"SELECT * FROM {fn}({args})"), params)
            return [dict(r) for r in result.mappings().all()]
        except SQLAlchemyError as e:
            logger.error("Search procedure %s failed: %s", fn, e)
            raise StoreError(str(getattr(e, "orig", None) or e)) from e
