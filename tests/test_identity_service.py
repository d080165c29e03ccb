"""Unit tests for the identity bridge.

Run with: pytest tests/test_identity_service.py -v
"""

from uuid import uuid4

import pytest

from eventdesk.domain import IdentityCreated, ProfileId, Role
from eventdesk.domain.errors import DuplicateProfileError, ErrorCode, ProvisioningError


def _notification(**overrides) -> IdentityCreated:
    values = {
        "identity_id": str(uuid4()),
        "email": "ada@example.com",
        "metadata": {"full_name": "Ada Lovelace", "role": "volunteer", "phone": "555-0100"},
    }
    values.update(overrides)
    return IdentityCreated(**values)


class TestProvision:
    """Tests for IdentityService.provision."""

    def test_creates_profile_with_requested_role(self, identity_service, store):
        notification = _notification()
        profile = identity_service.provision(notification)
        assert profile.id == ProfileId.from_string(notification.identity_id)
        assert profile.role is Role.VOLUNTEER
        assert profile.full_name == "Ada Lovelace"
        assert profile.phone == "555-0100"
        assert store.get_profile(profile.id) == profile

    @pytest.mark.parametrize(
        "metadata",
        [
            {},
            {"role": "superuser"},
            {"role": ""},
            {"role": "Organizer"},
            {"role": "ORGANIZER"},
            {"role": " organizer "},
        ],
    )
    def test_role_defaults_to_attendee(self, identity_service, metadata):
        profile = identity_service.provision(_notification(metadata=metadata))
        assert profile.role is Role.ATTENDEE

    def test_full_name_defaults_to_email(self, identity_service):
        profile = identity_service.provision(_notification(metadata={}))
        assert profile.full_name == "ada@example.com"

    def test_redelivery_returns_existing_profile(self, identity_service):
        """A second delivery of the same signup never creates a second profile."""
        notification = _notification()
        first = identity_service.provision(notification)
        again = identity_service.provision(
            _notification(identity_id=notification.identity_id, metadata={"role": "organizer"})
        )
        assert again == first
        assert again.role is Role.VOLUNTEER

    def test_lost_race_returns_winner(self, identity_service, store, mocker):
        notification = _notification()
        winner = identity_service.provision(notification)
        mocker.patch.object(store, "get_profile", side_effect=[None, winner])
        mocker.patch.object(
            store, "create_profile", side_effect=DuplicateProfileError(notification.identity_id)
        )
        assert identity_service.provision(notification) == winner

    def test_invalid_identity_id(self, identity_service):
        with pytest.raises(ProvisioningError) as exc_info:
            identity_service.provision(_notification(identity_id="nope"))
        assert exc_info.value.code is ErrorCode.PROVISIONING_FAILED

    def test_missing_email(self, identity_service, store):
        notification = _notification(email="  ")
        with pytest.raises(ProvisioningError):
            identity_service.provision(notification)
        assert store.get_profile(ProfileId.from_string(notification.identity_id)) is None


class TestResolveActor:
    def test_resolves_provisioned_identity(self, identity_service):
        notification = _notification()
        profile = identity_service.provision(notification)
        assert identity_service.resolve_actor(notification.identity_id) == profile

    def test_unknown_or_malformed_identity(self, identity_service):
        assert identity_service.resolve_actor(str(uuid4())) is None
        assert identity_service.resolve_actor("garbage") is None
