"""Tests for the back-office admin.

Run with: pytest tests/test_admin.py -v
"""

import pytest
from django.utils import timezone

from eventdesk import models as orm
from eventdesk.domain import RegistrationStatus, Role


@pytest.mark.django_db
class TestAdminWritePaths:
    """The admin cannot create profiles or move registrations through their lifecycle."""

    def test_cannot_add_profile(self, admin_client):
        response = admin_client.get("/admin/eventdesk/profile/add/")
        assert response.status_code == 403

    def test_cannot_add_registration(self, admin_client):
        response = admin_client.get("/admin/eventdesk/registration/add/")
        assert response.status_code == 403

    def test_cannot_reactivate_cancelled_registration(self, admin_client, db_profile, db_event):
        event = db_event(db_profile(Role.ORGANIZER), capacity=1)
        registration = orm.Registration.objects.create(
            event=event,
            attendee=db_profile(),
            ticket_number="TKT-00C0FFEE",
            status=RegistrationStatus.CANCELLED.value,
            registered_at=timezone.now(),
        )

        response = admin_client.post(
            f"/admin/eventdesk/registration/{registration.pk}/change/",
            {"status": RegistrationStatus.CONFIRMED.value, "seat_number": "A1"},
        )

        assert response.status_code == 302
        registration.refresh_from_db()
        assert registration.status == RegistrationStatus.CANCELLED.value
        assert registration.seat_number == "A1"

    def test_event_change_page_renders_registrations_read_only(
        self, admin_client, db_profile, db_event
    ):
        event = db_event(db_profile(Role.ORGANIZER))
        orm.Registration.objects.create(
            event=event,
            attendee=db_profile(),
            ticket_number="TKT-0000BEEF",
            registered_at=timezone.now(),
        )
        response = admin_client.get(f"/admin/eventdesk/event/{event.pk}/change/")
        assert response.status_code == 200
        assert 'name="registrations-0-status"' not in response.content.decode()
