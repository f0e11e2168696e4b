# Import all models here so Alembic's env.py can discover them via Base.metadata
from geodir.models.base import Base  # noqa: F401
from geodir.models.country import Country  # noqa: F401
from geodir.models.division import AdminDivision, DivisionType  # noqa: F401
