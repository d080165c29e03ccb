"""Integration tests for the event catalog endpoints.

Run with: pytest tests/test_event_catalog.py -v
"""

from datetime import UTC, datetime, timedelta

import pytest
from rest_framework.test import APIClient

from eventdesk.domain import EventStatus, Role


@pytest.mark.django_db
class TestEventList:
    """Tests for GET /api/events"""

    def test_list_events_returns_published_catalog(self, api_client: APIClient, db_profile, db_event):
        """Anonymous callers get published events only, soonest first."""
        organizer = db_profile(Role.ORGANIZER)
        later = db_event(organizer, title="Later", starts_at=datetime.now(UTC) + timedelta(days=60))
        sooner = db_event(organizer, title="Sooner")
        db_event(organizer, status=EventStatus.DRAFT)

        response = api_client.get("/api/events")

        assert response.status_code == 200
        assert [item["id"] for item in response.json()] == [str(sooner.id), str(later.id)]
        item = response.json()[0]
        assert item["price"] == "15.00"
        assert item["capacity"] == 10
        assert item["status"] == "published"

    def test_list_events_empty_catalog(self, api_client: APIClient):
        """Given no events, returns empty list."""
        response = api_client.get("/api/events")
        assert response.status_code == 200
        assert response.json() == []

    def test_organizer_lists_own_events(self, client_for, db_profile, db_event):
        organizer = db_profile(Role.ORGANIZER)
        draft = db_event(organizer, status=EventStatus.DRAFT)
        db_event(db_profile(Role.ORGANIZER))

        response = client_for(organizer).get("/api/events")

        assert [item["id"] for item in response.json()] == [str(draft.id)]

    def test_filters_by_search_and_category(self, api_client, db_profile, db_event):
        organizer = db_profile(Role.ORGANIZER)
        talk = db_event(organizer, title="Rust Talk", category="talk")
        db_event(organizer, title="Rust Workshop", category="workshop")
        db_event(organizer, title="Board Games", category="talk")

        response = api_client.get("/api/events", {"q": "rust", "category": "talk"})

        assert response.status_code == 200
        assert [item["id"] for item in response.json()] == [str(talk.id)]

    def test_filters_past_events(self, client_for, db_profile, db_event):
        organizer = db_profile(Role.ORGANIZER)
        past = db_event(organizer, starts_at=datetime.now(UTC) - timedelta(days=2))
        db_event(organizer)

        response = client_for(organizer).get("/api/events", {"status": "past"})

        assert [item["id"] for item in response.json()] == [str(past.id)]

    def test_filtered_listing_is_not_cached(self, api_client, db_profile, db_event):
        organizer = db_profile(Role.ORGANIZER)
        db_event(organizer, title="Rust Talk")
        db_event(organizer, title="Board Games")

        assert len(api_client.get("/api/events", {"q": "rust"}).json()) == 1
        assert len(api_client.get("/api/events").json()) == 2

    def test_unknown_status_filter(self, api_client):
        response = api_client.get("/api/events", {"status": "someday"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INPUT"


@pytest.mark.django_db
class TestRecommendedEvents:
    """Tests for GET /api/events/recommended"""

    def test_attendee_gets_unbooked_upcoming_events(self, client_for, db_profile, db_event):
        organizer = db_profile(Role.ORGANIZER)
        booked = db_event(organizer, title="Booked")
        open_event = db_event(
            organizer, title="Open", starts_at=datetime.now(UTC) + timedelta(days=40)
        )
        db_event(organizer, status=EventStatus.DRAFT)
        client = client_for(db_profile(Role.ATTENDEE))
        client.post(f"/api/events/{booked.id}/registrations")

        response = client.get("/api/events/recommended")

        assert response.status_code == 200
        assert [item["id"] for item in response.json()] == [str(open_event.id)]

    def test_organizer_is_not_eligible(self, client_for, db_profile):
        response = client_for(db_profile(Role.ORGANIZER)).get("/api/events/recommended")
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "NOT_ELIGIBLE"

    def test_anonymous_requires_authentication(self, api_client):
        assert api_client.get("/api/events/recommended").status_code == 401


@pytest.mark.django_db
class TestEventDetail:
    """Tests for GET /api/events/{id}"""

    def test_get_event_returns_details(self, api_client: APIClient, db_profile, db_event):
        event = db_event(db_profile(Role.ORGANIZER), description="Talks and snacks")
        response = api_client.get(f"/api/events/{event.id}")
        assert response.status_code == 200
        assert response.json()["description"] == "Talks and snacks"

    def test_get_event_not_found(self, api_client: APIClient):
        """Given event does not exist, returns 404."""
        response = api_client.get("/api/events/7c9e6679-7425-40de-944b-e07fc1f90ae7")
        assert response.status_code == 404
        assert response.json() == {"error": {"code": "NOT_FOUND", "message": "Event not found"}}

    def test_get_event_invalid_id_format(self, api_client: APIClient):
        """Given invalid UUID, returns 400."""
        response = api_client.get("/api/events/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ID"

    def test_draft_event_is_not_found_for_others(self, api_client, client_for, db_profile, db_event):
        draft = db_event(db_profile(Role.ORGANIZER), status=EventStatus.DRAFT)
        assert api_client.get(f"/api/events/{draft.id}").status_code == 404
        attendee = db_profile(Role.ATTENDEE)
        assert client_for(attendee).get(f"/api/events/{draft.id}").status_code == 404


@pytest.mark.django_db
class TestEventWrites:
    """Tests for POST /api/events and PATCH/DELETE /api/events/{id}"""

    def _payload(self, **overrides):
        payload = {
            "title": "Hack Night",
            "category": "workshop",
            "starts_at": (datetime.now(UTC) + timedelta(days=5)).isoformat(),
            "venue": "Lab 3",
            "capacity": 40,
            "price": "0.00",
        }
        payload.update(overrides)
        return payload

    def test_organizer_creates_event(self, client_for, db_profile):
        organizer = db_profile(Role.ORGANIZER)
        response = client_for(organizer).post("/api/events", self._payload())
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "draft"
        assert body["organizer_id"] == str(organizer.id)

    def test_attendee_cannot_create(self, client_for, db_profile):
        response = client_for(db_profile(Role.ATTENDEE)).post("/api/events", self._payload())
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "NOT_ELIGIBLE"

    def test_anonymous_create_requires_authentication(self, api_client):
        response = api_client.post("/api/events", self._payload())
        assert response.status_code == 401

    def test_malformed_body(self, client_for, db_profile):
        response = client_for(db_profile(Role.ORGANIZER)).post(
            "/api/events", self._payload(starts_at="tomorrow")
        )
        assert response.status_code == 400
        body = response.json()["error"]
        assert body["code"] == "INVALID_INPUT"
        assert "starts_at" in body["details"]

    def test_zero_capacity(self, client_for, db_profile):
        response = client_for(db_profile(Role.ORGANIZER)).post(
            "/api/events", self._payload(capacity=0)
        )
        assert response.status_code == 400

    def test_publish_and_capacity_lock(self, client_for, db_profile, db_event):
        organizer = db_profile(Role.ORGANIZER)
        event = db_event(organizer, status=EventStatus.DRAFT)
        client = client_for(organizer)

        published = client.patch(f"/api/events/{event.id}", {"status": "published"})
        assert published.status_code == 200
        assert published.json()["status"] == "published"

        resized = client.patch(f"/api/events/{event.id}", {"capacity": 500})
        assert resized.status_code == 400

    def test_invalid_transition(self, client_for, db_profile, db_event):
        organizer = db_profile(Role.ORGANIZER)
        event = db_event(organizer, status=EventStatus.COMPLETED)
        response = client_for(organizer).patch(f"/api/events/{event.id}", {"status": "draft"})
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_TRANSITION"

    def test_other_organizer_is_forbidden(self, client_for, db_profile, db_event):
        event = db_event(db_profile(Role.ORGANIZER))
        response = client_for(db_profile(Role.ORGANIZER)).delete(f"/api/events/{event.id}")
        assert response.status_code == 403

    def test_owner_deletes(self, client_for, db_profile, db_event):
        organizer = db_profile(Role.ORGANIZER)
        event = db_event(organizer)
        client = client_for(organizer)
        assert client.delete(f"/api/events/{event.id}").status_code == 204
        assert client.get(f"/api/events/{event.id}").status_code == 404


@pytest.mark.django_db
class TestAvailability:
    """Tests for GET /api/events/{id}/availability"""

    def test_availability_tracks_bookings(self, api_client, client_for, db_profile, db_event):
        event = db_event(db_profile(Role.ORGANIZER), capacity=3)
        client_for(db_profile(Role.ATTENDEE)).post(f"/api/events/{event.id}/registrations")

        response = api_client.get(f"/api/events/{event.id}/availability")

        assert response.status_code == 200
        assert response.json() == {
            "event_id": str(event.id),
            "capacity": 3,
            "occupied": 1,
            "available": 2,
        }
