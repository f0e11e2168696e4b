"""
Test fixtures and shared setup.

Runs against in-memory SQLite unless DATABASE_URL points elsewhere (e.g. a
PostgreSQL test database). Every test runs in a transaction that is rolled
back afterwards, so the DB is always clean without truncating tables.
"""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# ── Override settings BEFORE importing app modules ────────────────────────────
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

from geodir.database import engine_options, get_db
from geodir.hierarchy.builder import build_hierarchy
from geodir.hierarchy.feed import FeedRow
from geodir.main import app
from geodir.models import *  # noqa — ensures all models registered
from geodir.models.base import Base
from geodir.routers.nepal import get_search_procedure


# ── Test engine ───────────────────────────────────────────────────────────────
TEST_DATABASE_URL = os.environ["DATABASE_URL"]
test_engine = create_engine(TEST_DATABASE_URL, **engine_options(TEST_DATABASE_URL))
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="session")
def create_test_tables():
    """Create all tables once per test session."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db(create_test_tables) -> Session:
    """Provide a DB session that is rolled back after each test."""
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


class FakeSearchProcedure:
    """
    Stands in for the PostgreSQL scoring functions.

    Returns the canned `rows` and records every call's arguments.
    """

    def __init__(self, rows=None):
        self.rows = rows or []
        self.calls: list[dict] = []

    def __call__(self, *, search, lvl, cid, lim, parent=None):
        self.calls.append(
            {"search": search, "lvl": lvl, "cid": cid, "lim": lim, "parent": parent}
        )
        return [dict(r) for r in self.rows]


@pytest.fixture
def search_procedure() -> FakeSearchProcedure:
    return FakeSearchProcedure()


@pytest.fixture
def client(db: Session, search_procedure) -> TestClient:
    """
    FastAPI test client with the DB session and the search procedure
    overridden.
    """

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_search_procedure] = lambda: search_procedure
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ── Data builder fixtures ──────────────────────────────────────────────────────


def feed_row(
    province_code="3",
    district_code="27",
    district_name="Kathmandu",
    name="Kathmandu-City",
    name_native="काठमाडौं",
    type="Metropolitan City",
    wards=32,
    local_code="1",
) -> FeedRow:
    return FeedRow(
        province_code=province_code,
        district_code=district_code,
        district_name=district_name,
        local_code=local_code,
        name=name,
        name_native=name_native,
        type=type,
        wards=wards,
    )


SAMPLE_FEED = [
    feed_row(),
    feed_row(name="Kirtipur", name_native="कीर्तिपुर", type="Municipality", wards=10),
    feed_row(district_code="25", district_name="Kavrepalanchok", name="Dhulikhel", wards=12),
    feed_row(district_code="28", district_name="Lalitpur", name="Lalitpur-City", wards=29),
    feed_row(province_code="4", district_code="40", district_name="Kaski", name="Pokhara", wards=33),
    feed_row(province_code="9", district_code="99", district_name="Nowhere", name="Ghost", wards=1),
]


@pytest.fixture
def seeded(db: Session):
    """Nepal seeded from SAMPLE_FEED. Returns the BuildSummary."""
    return build_hierarchy(db, SAMPLE_FEED)


@pytest.fixture
def nodes(db: Session, seeded) -> dict:
    """Seeded divisions keyed by name."""
    from geodir.models.division import AdminDivision

    return {d.name: d for d in db.query(AdminDivision).all()}


@pytest.fixture
def make_row():
    return feed_row


@pytest.fixture
def sample_feed() -> list[FeedRow]:
    return list(SAMPLE_FEED)
