"""Tests for the people API endpoints."""

from datetime import datetime, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from dossier.models.person import Person


@pytest.mark.asyncio
class TestListPeople:
    async def test_list_empty(self, client: AsyncClient):
        response = await client.get("/api/people")
        assert response.status_code == 200
        assert response.json() == []

    async def test_list_returns_canonical_records(
        self, client: AsyncClient, test_person: Person
    ):
        response = await client.get("/api/people")
        assert response.status_code == 200
        [person] = response.json()
        assert person["id"] == test_person.id
        assert person["workplace"] == "Alpha"
        assert person["unit"] == "Alpha"
        assert person["stats"] == {
            "affiliation": "Directorate",
            "threat": "Low",
            "loyalty": "High",
        }
        assert person["affiliation"] == "Directorate"

    async def test_api_responses_are_not_cached(self, client: AsyncClient):
        response = await client.get("/api/people")
        assert response.headers["cache-control"] == "no-store"


@pytest.mark.asyncio
class TestCreatePerson:
    async def test_name_required(self, client: AsyncClient):
        response = await client.post("/api/people", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "name is required"}

    async def test_blank_name_rejected(self, client: AsyncClient):
        response = await client.post("/api/people", json={"name": "   "})
        assert response.status_code == 400
        assert response.json() == {"error": "name is required"}

    async def test_missing_body_rejected(self, client: AsyncClient):
        response = await client.post("/api/people")
        assert response.status_code == 400
        assert response.json() == {"error": "name is required"}

    async def test_create(self, client: AsyncClient, db_session: AsyncSession):
        response = await client.post(
            "/api/people", json={"name": "Jane", "traits": "a, b ,c"}
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Jane"
        assert data["traits"] == ["a", "b", "c"]
        assert isinstance(data["id"], int)

        stored = await db_session.get(Person, data["id"])
        assert stored is not None
        assert stored.traits == ["a", "b", "c"]

    async def test_create_trims_and_accepts_legacy_names(self, client: AsyncClient):
        response = await client.post(
            "/api/people",
            json={
                "name": "  Bram  ",
                "unit": "Harbour",
                "clearance": "Contractor",
                "proficiencies": ["boats", " ", "locks "],
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Bram"
        assert data["workplace"] == data["unit"] == "Harbour"
        assert data["affiliation"] == data["stats"]["affiliation"] == "Contractor"
        assert data["proficiencies"] == ["boats", "locks"]

    async def test_wrong_type_is_bad_request(self, client: AsyncClient):
        response = await client.post("/api/people", json={"name": ["Jane"]})
        assert response.status_code == 400
        assert "error" in response.json()


@pytest.mark.asyncio
class TestGetPerson:
    async def test_get(self, client: AsyncClient, test_person: Person):
        response = await client.get(f"/api/people/{test_person.id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Jane Doe"

    async def test_not_found(self, client: AsyncClient):
        response = await client.get("/api/people/9999")
        assert response.status_code == 404
        assert response.json() == {"error": "Person not found"}

    async def test_non_numeric_id(self, client: AsyncClient):
        response = await client.get("/api/people/abc")
        assert response.status_code == 400
        assert "error" in response.json()


@pytest.mark.asyncio
class TestUpdateProfile:
    async def test_name_required(self, client: AsyncClient, test_person: Person):
        response = await client.put(
            f"/api/people/{test_person.id}/profile", json={"role": "Courier"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "name is required"}

    async def test_not_found(self, client: AsyncClient):
        response = await client.put(
            "/api/people/9999/profile", json={"name": "Ghost"}
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Person not found"}

    async def test_partial_update(self, client: AsyncClient, test_person: Person):
        response = await client.put(
            f"/api/people/{test_person.id}/profile",
            json={"name": "Jane Doe", "stats": {"threat": "High"}},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["traits"] == ["calm", "precise"]
        assert data["stats"]["threat"] == "High"
        assert data["stats"]["affiliation"] == "Directorate"
        assert data["affiliation"] == "Directorate"

    async def test_replace_lists(self, client: AsyncClient, test_person: Person):
        response = await client.put(
            f"/api/people/{test_person.id}/profile",
            json={"name": "Jane Doe", "traits": [], "proficiencies": "x, y"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["traits"] == []
        assert data["proficiencies"] == ["x", "y"]


@pytest.mark.asyncio
class TestUpdateLastSeen:
    async def test_numeric_strings_accepted(
        self, client: AsyncClient, test_person: Person
    ):
        before = datetime.now(timezone.utc)
        response = await client.put(
            f"/api/people/{test_person.id}/last-seen",
            json={"lat": "10", "lng": "20", "notes": "seen"},
        )
        after = datetime.now(timezone.utc)

        assert response.status_code == 200
        data = response.json()
        assert data["last_seen_lat"] == 10
        assert data["last_seen_lng"] == 20
        assert data["last_seen_notes"] == "seen"
        stamp = datetime.fromisoformat(data["last_seen_timestamp"])
        assert before <= stamp <= after

    @pytest.mark.parametrize(
        "body",
        [
            {"lat": "north", "lng": 20},
            {"lat": 10},
            {"lat": "", "lng": ""},
            {"lat": None, "lng": 5},
            {},
        ],
    )
    async def test_invalid_coordinates(
        self, client: AsyncClient, test_person: Person, body: dict
    ):
        response = await client.put(
            f"/api/people/{test_person.id}/last-seen", json=body
        )
        assert response.status_code == 400
        assert response.json() == {"error": "lat and lng must be numbers"}

    async def test_not_found(self, client: AsyncClient):
        response = await client.put(
            "/api/people/9999/last-seen", json={"lat": 1, "lng": 2}
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Person not found"}


@pytest.mark.asyncio
class TestStorageFailure:
    async def test_list_failure_is_generic_500(self, broken_client: AsyncClient):
        response = await broken_client.get("/api/people")
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    async def test_driver_details_not_leaked(self, broken_client: AsyncClient):
        response = await broken_client.put(
            "/api/people/1/last-seen", json={"lat": 1, "lng": 2}
        )
        assert response.status_code == 500
        assert "connection refused" not in response.text
