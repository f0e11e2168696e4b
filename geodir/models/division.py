"""
AdminDivision — one node in a country's administrative tree.

The tree is flat rows linked by parent_id; children are always fetched by
query, never embedded. `path` and `level` are derived by the seeder:

    path  = "np>bagmati>kathmandu"   (country ISO + lower-cased ancestor names)
    level = parent.level + 1         (1 for nodes directly under the country)
"""

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from geodir.models.base import Base, JSONType, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from geodir.models.country import Country


class DivisionType:
    PROVINCE = "province"
    DISTRICT = "district"
    CITY = "city"


class AdminDivision(Base, SoftDeleteMixin, TimestampMixin):
    __tablename__ = "admin_divisions"
    __table_args__ = (
        Index("ix_admin_divisions_scope", "country_id", "parent_id", "level"),
        UniqueConstraint(
            "country_id",
            "parent_id",
            "level",
            "name",
            name="uq_admin_divisions_parent_level_name",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    country_id: Mapped[int] = mapped_column(
        ForeignKey("countries.id", ondelete="RESTRICT"), nullable=False
    )
    # Null only for level-1 nodes
    parent_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("admin_divisions.id", ondelete="RESTRICT"), nullable=True
    )

    name: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    name_local: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    code: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    type: Mapped[str] = mapped_column(
        String(32), nullable=False, comment="province | district | city | ..."
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    path: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    timezone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    rest: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONType, nullable=True, comment="Extension attributes, e.g. wards, admType"
    )

    country: Mapped["Country"] = relationship("Country", back_populates="divisions")

    def __repr__(self) -> str:
        return f"<AdminDivision path={self.path!r} level={self.level}>"
