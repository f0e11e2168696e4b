"""
DivisionRepository tests: scoping, soft delete, ordering, projection.
Requires DB (in-memory SQLite by default).
"""

import pytest

from geodir.errors import InvalidFilterError, NotFound
from geodir.services.divisions.projection import ALL_FIELDS, CHILD_FIELDS, DivisionField
from geodir.services.divisions.repository import DivisionFilters, DivisionRepository


@pytest.fixture
def repo(db) -> DivisionRepository:
    return DivisionRepository(db)


class TestDivisionFilters:
    def test_nothing_supplied(self):
        f = DivisionFilters.from_query()
        assert f.level is None
        assert f.path_prefix is None

    def test_literal_null_parent(self):
        assert DivisionFilters.from_query(parent_id="null").parent_id is None

    def test_numeric_values(self):
        f = DivisionFilters.from_query(level="2", parent_id="14")
        assert (f.level, f.parent_id) == (2, 14)

    @pytest.mark.parametrize("level", ["abc", "-1", "1.5", ""])
    def test_bad_level(self, level):
        with pytest.raises(InvalidFilterError, match="Invalid level"):
            DivisionFilters.from_query(level=level)

    def test_bad_parent(self):
        with pytest.raises(InvalidFilterError, match="Invalid parent_id"):
            DivisionFilters.from_query(parent_id="x")


class TestListByCountry:
    def test_level_and_parent_scoping(self, repo, seeded, nodes):
        bagmati = nodes["bagmati"]
        result = repo.list_by_country(
            seeded.country_id, DivisionFilters(level=2, parent_id=bagmati.id)
        )
        assert [d.name for d in result] == ["kathmandu", "kavrepalanchok", "lalitpur"]
        for d in result:
            assert d.level == 2
            assert d.parent_id == bagmati.id
            assert d.country_id == seeded.country_id
            assert d.is_deleted is False

    def test_null_parent_is_root_level(self, repo, seeded):
        result = repo.list_by_country(seeded.country_id, DivisionFilters(parent_id=None))
        assert [d.name for d in result] == ["bagmati", "gandaki"]

    def test_no_parent_filter_returns_everything(self, repo, seeded):
        assert len(repo.list_by_country(seeded.country_id)) == 11

    def test_path_prefix(self, repo, seeded):
        result = repo.list_by_country(
            seeded.country_id, DivisionFilters(path_prefix="np>bagmati>kathmandu")
        )
        assert {d.name for d in result} == {"kathmandu", "kathmandu-city", "kirtipur"}

    def test_soft_deleted_excluded(self, db, repo, seeded, nodes):
        nodes["kirtipur"].is_deleted = True
        db.flush()
        result = repo.list_by_country(seeded.country_id, DivisionFilters(level=3))
        assert "kirtipur" not in [d.name for d in result]

    def test_other_country_is_empty(self, repo, seeded):
        assert repo.list_by_country(seeded.country_id + 1) == []


class TestGetById:
    def test_found(self, repo, seeded, nodes):
        division = repo.get_by_id(seeded.country_id, nodes["pokhara"].id)
        assert division.path == "np>gandaki>kaski>pokhara"

    def test_wrong_country_is_not_found(self, repo, seeded, nodes):
        with pytest.raises(NotFound):
            repo.get_by_id(seeded.country_id + 1, nodes["pokhara"].id)

    def test_deleted_is_not_found(self, db, repo, seeded, nodes):
        nodes["pokhara"].is_deleted = True
        db.flush()
        with pytest.raises(NotFound):
            repo.get_by_id(seeded.country_id, nodes["pokhara"].id)


class TestChildrenOf:
    def test_prefix_case_insensitive(self, repo, seeded, nodes):
        rows = repo.children_of(
            nodes["bagmati"].id, 2, seeded.country_id, CHILD_FIELDS, name_prefix="KA"
        )
        assert [r["name"] for r in rows] == ["kathmandu", "kavrepalanchok"]

    def test_prefix_kath(self, repo, seeded, nodes):
        rows = repo.children_of(
            nodes["bagmati"].id, 2, seeded.country_id, CHILD_FIELDS, name_prefix="kath"
        )
        assert [r["name"] for r in rows] == ["kathmandu"]

    def test_long_prefix_ignored(self, repo, seeded, nodes):
        rows = repo.children_of(
            nodes["bagmati"].id,
            2,
            seeded.country_id,
            CHILD_FIELDS,
            name_prefix="kathmandu-valley",
        )
        assert len(rows) == 3

    def test_wildcards_are_literal(self, repo, seeded, nodes):
        rows = repo.children_of(
            nodes["bagmati"].id, 2, seeded.country_id, CHILD_FIELDS, name_prefix="%"
        )
        assert rows == []

    def test_limit(self, repo, seeded, nodes):
        rows = repo.children_of(
            nodes["bagmati"].id, 2, seeded.country_id, CHILD_FIELDS, limit=2
        )
        assert [r["name"] for r in rows] == ["kathmandu", "kavrepalanchok"]

    def test_projection(self, repo, seeded, nodes):
        rows = repo.children_of(
            nodes["kathmandu"].id,
            3,
            seeded.country_id,
            [DivisionField.NAME, DivisionField.REST],
        )
        assert rows == [
            {"name": "kathmandu-city", "rest": {"wards": 32, "admType": "Metropolitan City"}},
            {"name": "kirtipur", "rest": {"wards": 10, "admType": "Municipality"}},
        ]

    def test_wrong_level_is_empty(self, repo, seeded, nodes):
        assert repo.children_of(nodes["bagmati"].id, 3, seeded.country_id, ALL_FIELDS) == []


class TestSearchSubstring:
    def test_matches_name_or_path_ordered_by_path(self, repo, seeded):
        rows = repo.search_substring("kath", [DivisionField.PATH], limit=20)
        assert [r["path"] for r in rows] == [
            "np>bagmati>kathmandu",
            "np>bagmati>kathmandu>kathmandu-city",
            "np>bagmati>kathmandu>kirtipur",
        ]

    def test_limit_and_country(self, repo, seeded):
        assert len(repo.search_substring("np", [DivisionField.ID], limit=4)) == 4
        assert repo.search_substring(
            "np", [DivisionField.ID], limit=20, country_id=seeded.country_id + 1
        ) == []
