"""Identity bridge: turns identity-provider signups into profiles.

The provider calls the bridge once per new account, but may deliver the same
notification more than once. Re-delivery answers with the existing profile.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from eventdesk.domain import IdentityCreated, Profile, ProfileId, Role
from eventdesk.domain.errors import DuplicateProfileError, ProvisioningError
from eventdesk.services.access import utcnow
from eventdesk.stores.interfaces import ProfileStore

logger = logging.getLogger(__name__)


def _clean(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class IdentityService:
    """Service provisioning profiles for external identities."""

    def __init__(self, profiles: ProfileStore, clock: Callable[[], datetime] = utcnow) -> None:
        self._profiles = profiles
        self._clock = clock

    def provision(self, notification: IdentityCreated) -> Profile:
        """Create the profile for a new identity, or return the one already created.

        Raises:
            ProvisioningError: If the notification is malformed.
        """
        try:
            profile_id = ProfileId.from_string(str(notification.identity_id))
        except ValueError as exc:
            raise ProvisioningError("Identity id is not a valid UUID") from exc

        email = _clean(notification.email)
        if email is None:
            raise ProvisioningError("Identity has no email address", str(profile_id))

        metadata = notification.metadata or {}
        now = self._clock()
        profile = Profile(
            id=profile_id,
            email=email,
            full_name=_clean(metadata.get("full_name")) or email,
            role=Role.parse(metadata.get("role")),
            created_at=now,
            updated_at=now,
            phone=_clean(metadata.get("phone")),
        )

        existing = self._profiles.get_profile(profile_id)
        if existing is not None:
            logger.info("Identity %s already provisioned, ignoring re-delivery", profile_id)
            return existing

        try:
            created = self._profiles.create_profile(profile)
        except DuplicateProfileError:
            # Lost a race with a concurrent delivery of the same notification.
            existing = self._profiles.get_profile(profile_id)
            if existing is None:
                raise
            logger.info("Identity %s provisioned concurrently, ignoring re-delivery", profile_id)
            return existing

        logger.info("Provisioned %s profile for identity %s", created.role.value, profile_id)
        return created

    def resolve_actor(self, identity_id: str) -> Profile | None:
        """Return the profile behind an authenticated identity, or None if it has none."""
        try:
            profile_id = ProfileId.from_string(str(identity_id))
        except ValueError:
            return None
        return self._profiles.get_profile(profile_id)
