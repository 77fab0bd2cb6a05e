"""매물 API 테스트."""
import pytest

BASE_URL = "/api/v1/apartments"


class TestApartmentAPI:
    """매물 CRUD 테스트."""

    def test_create_apartment(self, client, apartment_payload):
        """매물 등록 테스트."""
        response = client.post(BASE_URL, json=apartment_payload())
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Apartment created successfully"

        data = body["data"]
        assert data["unitName"] == "Sky Penthouse Apartment"
        assert data["price"] == 2500000
        assert data["amenities"] == ["Swimming Pool", "Gym"]
        assert data["isAvailable"] is True  # 기본값
        assert "id" in data
        assert "createdAt" in data

    def test_create_defaults(self, client, apartment_payload):
        payload = apartment_payload()
        del payload["images"], payload["amenities"], payload["description"]

        data = client.post(BASE_URL, json=payload).json()["data"]
        assert data["images"] == []
        assert data["amenities"] == []
        assert data["description"] is None

    def test_get_apartment(self, client, apartment_payload):
        """매물 조회 테스트."""
        apartment_id = client.post(BASE_URL, json=apartment_payload()).json()["data"]["id"]

        response = client.get(f"{BASE_URL}/{apartment_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["id"] == apartment_id
        assert body["data"]["project"] == "Marina Heights"

    def test_get_apartment_not_found(self, client):
        response = client.get(f"{BASE_URL}/does-not-exist")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "NOT_FOUND"
        assert "does-not-exist" in body["error"]["message"]

    def test_update_apartment(self, client, apartment_payload):
        """매물 수정 테스트."""
        apartment_id = client.post(BASE_URL, json=apartment_payload()).json()["data"]["id"]
        # 캐시에 올라간 상태에서 수정
        client.get(f"{BASE_URL}/{apartment_id}")

        response = client.put(f"{BASE_URL}/{apartment_id}", json={"price": 2400000, "isAvailable": False})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Apartment updated successfully"
        assert body["data"]["price"] == 2400000
        assert body["data"]["isAvailable"] is False
        assert body["data"]["unitName"] == "Sky Penthouse Apartment"  # 보내지 않은 필드는 유지

        # 수정 후 조회는 새 값
        data = client.get(f"{BASE_URL}/{apartment_id}").json()["data"]
        assert data["price"] == 2400000

    def test_update_clears_description(self, client, apartment_payload):
        apartment_id = client.post(BASE_URL, json=apartment_payload()).json()["data"]["id"]

        response = client.put(f"{BASE_URL}/{apartment_id}", json={"description": None})
        assert response.status_code == 200
        assert response.json()["data"]["description"] is None

    def test_update_requires_a_field(self, client, apartment_payload):
        apartment_id = client.post(BASE_URL, json=apartment_payload()).json()["data"]["id"]

        response = client.put(f"{BASE_URL}/{apartment_id}", json={})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_update_not_found(self, client):
        response = client.put(f"{BASE_URL}/does-not-exist", json={"price": 100})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_delete_apartment(self, client, apartment_payload):
        """매물 삭제 테스트."""
        apartment_id = client.post(BASE_URL, json=apartment_payload()).json()["data"]["id"]
        client.get(f"{BASE_URL}/{apartment_id}")

        response = client.delete(f"{BASE_URL}/{apartment_id}")
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Apartment deleted successfully"}

        # 삭제 확인
        assert client.get(f"{BASE_URL}/{apartment_id}").status_code == 404
        assert client.delete(f"{BASE_URL}/{apartment_id}").status_code == 404


class TestApartmentValidation:

    def test_duplicate_unit_number_conflict(self, client, apartment_payload):
        assert client.post(BASE_URL, json=apartment_payload()).status_code == 201

        response = client.post(BASE_URL, json=apartment_payload(unitName="Another Unit"))
        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "CONFLICT"

    def test_same_unit_number_in_other_project(self, client, apartment_payload):
        assert client.post(BASE_URL, json=apartment_payload()).status_code == 201
        assert client.post(BASE_URL, json=apartment_payload(project="Dubai Hills")).status_code == 201

    @pytest.mark.parametrize("overrides", [
        {"price": 0},
        {"bedrooms": 21},
        {"areaSqft": -10},
        {"unitName": ""},
        {"images": ["not-a-url"]},
        {"amenities": ["  "]},
        {"unknownField": 1},
    ])
    def test_invalid_payload(self, client, apartment_payload, overrides):
        response = client.post(BASE_URL, json=apartment_payload(**overrides))
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["errors"]

    def test_missing_required_field(self, client, apartment_payload):
        payload = apartment_payload()
        del payload["location"]

        response = client.post(BASE_URL, json=payload)
        assert response.status_code == 400
        fields = [e["field"] for e in response.json()["error"]["errors"]]
        assert "location" in fields

    def test_unknown_route(self, client):
        response = client.get("/api/v1/unknown")
        assert response.status_code == 404
        assert response.json()["error"] == {"code": "NOT_FOUND", "message": "Route /api/v1/unknown not found"}

    def test_method_not_allowed(self, client):
        response = client.delete(BASE_URL)
        assert response.status_code == 405
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "METHOD_NOT_ALLOWED"


class TestApartmentSearch:
    """목록/검색 테스트."""

    def _seed(self, client, apartment_payload):
        rows = [
            dict(unitNumber="AP-001", price=2500000, bedrooms=4, location="Dubai Marina",
                 amenities=["Swimming Pool", "Gym", "Sea View"]),
            dict(unitNumber="AP-002", price=1800000, bedrooms=3, location="Dubai Marina",
                 amenities=["Swimming Pool", "Gym"]),
            dict(unitNumber="ST-205", unitName="Modern Studio", project="Downtown Living", price=450000,
                 bedrooms=1, location="Downtown Dubai", amenities=["Gym"]),
            dict(unitNumber="MN-001", unitName="Mansion", project="Palm Jumeirah", price=8000000,
                 bedrooms=6, location="Palm Jumeirah", amenities=["Private Beach"], isAvailable=False),
        ]
        for row in rows:
            assert client.post(BASE_URL, json=apartment_payload(**row)).status_code == 201

    def test_default_listing_without_body(self, client, apartment_payload):
        self._seed(client, apartment_payload)

        response = client.post(f"{BASE_URL}/search")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        # 기본은 입주 가능 매물만
        assert len(body["data"]) == 3
        assert body["pagination"] == {
            "page": 1, "limit": 10, "total": 3, "totalPages": 1, "hasNext": False, "hasPrev": False,
        }

    def test_listing_cache_is_invalidated_by_create(self, client, apartment_payload):
        assert client.post(f"{BASE_URL}/search", json={}).json()["pagination"]["total"] == 0

        client.post(BASE_URL, json=apartment_payload())

        assert client.post(f"{BASE_URL}/search", json={}).json()["pagination"]["total"] == 1

    def test_filters(self, client, apartment_payload):
        self._seed(client, apartment_payload)

        body = client.post(f"{BASE_URL}/search", json={
            "locations": ["Dubai Marina"],
            "amenities": ["Gym", "Swimming Pool"],
            "minPrice": 1800000,
            "sortBy": "price",
            "sortOrder": "asc",
        }).json()
        assert [a["unitNumber"] for a in body["data"]] == ["AP-002", "AP-001"]

    def test_bedrooms_filter(self, client, apartment_payload):
        self._seed(client, apartment_payload)

        body = client.post(f"{BASE_URL}/search", json={"bedrooms": [1, 3]}).json()
        assert sorted(a["unitNumber"] for a in body["data"]) == ["AP-002", "ST-205"]

    def test_text_search_is_case_insensitive(self, client, apartment_payload):
        self._seed(client, apartment_payload)

        body = client.post(f"{BASE_URL}/search", json={"search": "STUDIO"}).json()
        assert [a["unitNumber"] for a in body["data"]] == ["ST-205"]

    def test_pagination(self, client, apartment_payload):
        self._seed(client, apartment_payload)

        body = client.post(f"{BASE_URL}/search", json={"page": 2, "limit": 2}).json()
        assert len(body["data"]) == 1
        assert body["pagination"]["totalPages"] == 2
        assert body["pagination"]["hasPrev"] is True
        assert body["pagination"]["hasNext"] is False

    def test_invalid_range(self, client):
        response = client.post(f"{BASE_URL}/search", json={"minPrice": 10, "maxPrice": 5})
        assert response.status_code == 400

    def test_page_too_large(self, client):
        response = client.post(f"{BASE_URL}/search", json={"page": 10**19})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert [e["field"] for e in error["errors"]] == ["page"]

    def test_page_past_end_is_empty_and_not_cached(self, client, apartment_payload):
        client.post(BASE_URL, json=apartment_payload())

        for page in range(2, 7):
            body = client.post(f"{BASE_URL}/search", json={"page": page}).json()
            assert body["data"] == []
            assert body["pagination"]["total"] == 1

        assert client.get("/api/v1/cache/stats").json()["tags"] == {}

    def test_quick_search(self, client, apartment_payload):
        self._seed(client, apartment_payload)

        response = client.get(f"{BASE_URL}/quick-search", params={"q": "palm"})
        assert response.status_code == 200
        # 빠른 검색은 입주 가능 여부와 무관
        assert [a["unitNumber"] for a in response.json()["data"]] == ["MN-001"]

    def test_quick_search_requires_query(self, client):
        assert client.get(f"{BASE_URL}/quick-search").status_code == 400


class TestLocationsAPI:

    def test_create_then_locations(self, client, apartment_payload):
        """지역 목록은 캐시된 뒤에도 새 매물 등록을 반영해야 함."""
        assert client.get(f"{BASE_URL}/locations").json() == {"success": True, "data": []}

        client.post(BASE_URL, json=apartment_payload(unitNumber="A-1", location="Dubai Marina"))
        client.post(BASE_URL, json=apartment_payload(unitNumber="A-2", location="Business Bay"))
        client.post(BASE_URL, json=apartment_payload(unitNumber="A-3", location="Dubai Marina"))

        response = client.get(f"{BASE_URL}/locations")
        assert response.status_code == 200
        assert response.json()["data"] == ["Business Bay", "Dubai Marina"]

    def test_location_update_refreshes_locations(self, client, apartment_payload):
        apartment_id = client.post(BASE_URL, json=apartment_payload()).json()["data"]["id"]
        assert client.get(f"{BASE_URL}/locations").json()["data"] == ["Dubai Marina"]

        client.put(f"{BASE_URL}/{apartment_id}", json={"location": "JBR"})

        assert client.get(f"{BASE_URL}/locations").json()["data"] == ["JBR"]


class TestSystemAPI:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert data["environment"] == "test"
        assert data["uptime"] >= 0
        assert data["timestamp"].endswith("Z")

    def test_cache_stats_and_clear(self, client, apartment_payload):
        apartment_id = client.post(BASE_URL, json=apartment_payload()).json()["data"]["id"]
        client.get(f"{BASE_URL}/{apartment_id}")

        stats = client.get("/api/v1/cache/stats").json()
        assert stats["active_keys"] >= 1

        assert client.post("/api/v1/cache/clear").json() == {"status": "cleared"}
        assert client.get("/api/v1/cache/stats").json()["total_keys"] == 0

    def test_scheduler_disabled_in_tests(self, client):
        assert client.get("/api/v1/scheduler/status").json() == {"running": False, "jobs": []}
