"""Declarative base and shared column mixins."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, false, func, true
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class SoftDeleteMixin:
    """
    Lifecycle flags shared by countries and divisions.

    Rows are never physically deleted; every read path filters is_deleted.
    """

    is_active: Mapped[bool] = mapped_column(
        nullable=False, default=True, server_default=true()
    )
    is_deleted: Mapped[bool] = mapped_column(
        nullable=False, default=False, server_default=false(), index=True
    )
    is_archived: Mapped[bool] = mapped_column(
        nullable=False, default=False, server_default=false()
    )
