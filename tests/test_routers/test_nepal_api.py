"""
Integration tests for the country-fixed /v1/np routes.
Ranked search runs against FakeSearchProcedure (see conftest).
"""

from fastapi.testclient import TestClient

API = "/v1/np"


class TestProvinces:
    def test_default_projection(self, client: TestClient, seeded):
        resp = client.get(f"{API}/province")
        assert resp.status_code == 200
        body = resp.json()
        assert [p["name"] for p in body] == ["bagmati", "gandaki"]
        assert set(body[0]) == {"id", "country_id", "code", "level", "name"}

    def test_prefix_search(self, client: TestClient, seeded):
        resp = client.get(f"{API}/province", params={"search": "gan"})
        assert [p["name"] for p in resp.json()] == ["gandaki"]

    def test_long_prefix_ignored(self, client: TestClient, seeded):
        resp = client.get(f"{API}/province", params={"search": "gandaki-province-x"})
        assert resp.status_code == 200
        assert len(resp.json()) == 2

    def test_field_selection(self, client: TestClient, seeded):
        resp = client.get(f"{API}/province", params={"field": "path,bogus"})
        assert resp.json() == [{"path": "np>bagmati"}, {"path": "np>gandaki"}]

    def test_unseeded_country_is_404(self, client: TestClient):
        resp = client.get(f"{API}/province")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Country NP not found"}


class TestDistricts:
    def test_children_with_prefix(self, client: TestClient, seeded, nodes):
        resp = client.get(
            f"{API}/district/{nodes['bagmati'].id}", params={"search": "kath"}
        )
        assert resp.status_code == 200
        body = resp.json()
        assert [d["name"] for d in body] == ["kathmandu"]
        assert set(body[0]) == {"id", "country_id", "level", "name"}

    def test_upper_case_prefix(self, client: TestClient, seeded, nodes):
        resp = client.get(
            f"{API}/district/{nodes['bagmati'].id}", params={"search": "KATH"}
        )
        assert [d["name"] for d in resp.json()] == ["kathmandu"]

    def test_bounded_to_eight(self, client: TestClient, db, seeded, nodes, make_row):
        from geodir.hierarchy.builder import build_hierarchy

        build_hierarchy(
            db,
            [
                make_row(district_code=str(50 + i), district_name=f"district-{i}", wards=None)
                for i in range(10)
            ],
        )
        resp = client.get(f"{API}/district/{nodes['bagmati'].id}")
        body = resp.json()
        assert len(body) == 8
        assert [d["name"] for d in body] == sorted(d["name"] for d in body)

    def test_bad_parent(self, client: TestClient, seeded):
        resp = client.get(f"{API}/district/abc")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid id"}


class TestCities:
    def test_rest_always_included(self, client: TestClient, seeded, nodes):
        resp = client.get(
            f"{API}/city/{nodes['kathmandu'].id}", params={"field": "name"}
        )
        assert resp.status_code == 200
        assert resp.json() == [
            {"name": "kathmandu-city", "rest": {"wards": 32, "admType": "Metropolitan City"}},
            {"name": "kirtipur", "rest": {"wards": 10, "admType": "Municipality"}},
        ]

    def test_invalid_fields_fall_back_then_add_rest(self, client: TestClient, seeded, nodes):
        resp = client.get(
            f"{API}/city/{nodes['kathmandu'].id}", params={"field": "bogus"}
        )
        assert set(resp.json()[0]) == {"id", "country_id", "level", "name", "rest"}


class TestRankedSearch:
    def test_short_query_rejected(self, client: TestClient, search_procedure):
        resp = client.get(f"{API}/search/city", params={"q": "k"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Query 'q' required (min 2 chars)"}
        assert search_procedure.calls == []

    def test_bad_type_rejected(self, client: TestClient):
        resp = client.get(f"{API}/search/ward", params={"q": "ka"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "invalid type"}

    def test_search_calls_procedure(self, client: TestClient, seeded, search_procedure):
        search_procedure.rows = [
            {"id": 1, "country_id": seeded.country_id, "level": 2, "name": "kaski",
             "path": "np>gandaki>kaski", "rest": None},
        ]
        resp = client.get(f"{API}/search/district", params={"q": "ka"})
        assert resp.status_code == 200
        assert resp.json() == [
            {"id": 1, "country_id": seeded.country_id, "level": 2, "name": "kaski"}
        ]
        assert search_procedure.calls == [
            {"search": "ka", "lvl": 2, "cid": seeded.country_id, "lim": 8, "parent": None}
        ]

    def test_search_under_parent(self, client: TestClient, seeded, nodes, search_procedure):
        resp = client.get(
            f"{API}/search/city/{nodes['kathmandu'].id}", params={"q": "kir", "field": "name"}
        )
        assert resp.status_code == 200
        assert search_procedure.calls[0]["parent"] == nodes["kathmandu"].id
        assert search_procedure.calls[0]["lvl"] == 3

    def test_search_under_bad_parent(self, client: TestClient):
        resp = client.get(f"{API}/search/city/xyz", params={"q": "kir"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid id"}
