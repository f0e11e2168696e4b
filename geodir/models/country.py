"""
Country — root of one administrative hierarchy.

Created once per ISO code by the hierarchy seeder and never physically
deleted. `structure` declares the expected level sequence, e.g.
"province>district>city>ward".
"""

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from geodir.models.base import Base, JSONType, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from geodir.models.division import AdminDivision


class Country(Base, SoftDeleteMixin, TimestampMixin):
    __tablename__ = "countries"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    name_local: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    iso_code: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        unique=True,
        comment="Upper-cased ISO 3166-1 alpha-2, e.g. NP",
    )
    icon: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    structure: Mapped[str] = mapped_column(
        String(256),
        nullable=False,
        comment="Expected level sequence, e.g. province>district>city>ward",
    )
    continent: Mapped[str] = mapped_column(String(32), nullable=False)
    timezone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    rest: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType, nullable=True)

    divisions: Mapped[list["AdminDivision"]] = relationship(
        "AdminDivision", back_populates="country", lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<Country iso={self.iso_code!r} name={self.name!r}>"
