"""Tests for volunteer router endpoints."""

from fastapi.testclient import TestClient


class TestVolunteerEndpoints:
    def test_create_and_read_volunteer(self, client: TestClient):
        created = client.post(
            "/volunteers/",
            json={
                "first_name": "Lydia",
                "last_name": "Thyatira",
                "email": "lydia@example.com",
                "skills": ["hospitality", "hospitality"],
                "preferred_ministries": ["Hospitality"],
            },
        )

        assert created.status_code == 201
        volunteer_id = created.json()["id_volunteer"]
        assert created.json()["skills"] == ["hospitality"]

        read = client.get(f"/volunteers/{volunteer_id}")
        assert read.status_code == 200
        assert read.json()["email"] == "lydia@example.com"

    def test_missing_first_name_is_422(self, client: TestClient):
        response = client.post("/volunteers/", json={"last_name": "Only"})

        assert response.status_code == 422

    def test_unknown_volunteer_is_404(self, client: TestClient):
        response = client.get("/volunteers/424242")

        assert response.status_code == 404

    def test_volunteer_signups(
        self, client: TestClient, make_opportunity, make_volunteer
    ):
        volunteer = make_volunteer()
        opportunity = make_opportunity(max_volunteers=1)
        client.post(
            f"/opportunities/{opportunity.id_opportunity}/signup",
            json={"id_volunteer": make_volunteer().id_volunteer},
        )
        client.post(
            f"/opportunities/{opportunity.id_opportunity}/signup",
            json={"id_volunteer": volunteer.id_volunteer},
        )

        response = client.get(f"/volunteers/{volunteer.id_volunteer}/signups")

        assert response.status_code == 200
        assert len(response.json()) == 1
        assert response.json()[0]["status"] == "waitlisted"
        assert response.json()[0]["waitlist_position"] == 1
