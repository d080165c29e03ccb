"""Unit tests for ProfileService.

Run with: pytest tests/test_profile_service.py -v
"""

import logging

import pytest

from eventdesk.domain import Role
from eventdesk.domain.errors import (
    ForbiddenError,
    InvalidIdError,
    InvalidInputError,
    NotFoundError,
)


class TestGetProfile:
    def test_own_profile(self, profile_service, attendee):
        assert profile_service.get_profile(attendee, str(attendee.id)) == attendee

    def test_other_profile_is_hidden(self, profile_service, attendee, organizer):
        with pytest.raises(NotFoundError):
            profile_service.get_profile(organizer, attendee.id)

    def test_invalid_id(self, profile_service, attendee):
        with pytest.raises(InvalidIdError):
            profile_service.get_profile(attendee, "1234")


class TestUpdateProfile:
    def test_updates_editable_fields(self, profile_service, volunteer, store):
        updated = profile_service.update_profile(
            volunteer, {"company": "Acme", "skills": ["first aid", "sound"], "phone": "555"}
        )
        assert updated.company == "Acme"
        assert updated.skills == ("first aid", "sound")
        assert store.get_profile(volunteer.id) == updated
        assert updated.role is Role.VOLUNTEER

    def test_role_change_is_forbidden(self, profile_service, attendee, store, caplog):
        with caplog.at_level(logging.WARNING, logger="eventdesk.services.profile_service"):
            with pytest.raises(ForbiddenError):
                profile_service.update_profile(attendee, {"role": "organizer"})
        assert "Rejected role change" in caplog.text
        assert store.get_profile(attendee.id).role is Role.ATTENDEE

    def test_unknown_field(self, profile_service, attendee):
        with pytest.raises(InvalidInputError):
            profile_service.update_profile(attendee, {"email": "new@example.com"})

    def test_empty_full_name(self, profile_service, attendee):
        with pytest.raises(InvalidInputError):
            profile_service.update_profile(attendee, {"full_name": ""})

    def test_anonymous_caller(self, profile_service):
        with pytest.raises(NotFoundError):
            profile_service.update_profile(None, {"phone": "1"})
