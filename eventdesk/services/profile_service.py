"""Profile service: self-service reads and updates."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any

from eventdesk.domain import Operation, Profile, ProfileId
from eventdesk.domain.errors import ForbiddenError, InvalidInputError, NotFoundError
from eventdesk.services.access import ensure_allowed, ensure_visible, parse_id, utcnow
from eventdesk.stores.interfaces import ProfileStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"full_name", "phone", "company", "skills", "profile_picture_url"})


class ProfileService:
    """Service for profile operations."""

    def __init__(self, profiles: ProfileStore, clock: Callable[[], datetime] = utcnow) -> None:
        self._profiles = profiles
        self._clock = clock

    def get_profile(self, actor: Profile | None, profile_id: str | ProfileId) -> Profile:
        """Return a profile the actor may see (only their own).

        Raises:
            InvalidIdError: If the profile_id is not a valid UUID.
            NotFoundError: If the profile does not exist or is not the actor's.
        """
        profile = self._profiles.get_profile(parse_id(ProfileId, profile_id))
        if profile is None:
            raise NotFoundError("Profile")
        ensure_visible(actor, profile, "Profile")
        return profile

    def update_profile(self, actor: Profile | None, changes: Mapping[str, Any]) -> Profile:
        """Apply changes to the actor's own profile.

        Raises:
            ForbiddenError: If the changes touch the role.
            InvalidInputError: If the changes name fields that cannot be edited.
        """
        if actor is None:
            raise NotFoundError("Profile")
        if "role" in changes:
            logger.warning("Rejected role change on profile %s", actor.id)
            raise ForbiddenError("update", "Profile")
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise InvalidInputError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        current = self.get_profile(actor, actor.id)
        ensure_allowed(actor, Operation.UPDATE, current, "Profile", changes=changes)

        values = dict(changes)
        if "skills" in values:
            values["skills"] = tuple(values["skills"] or ())
        if "full_name" in values and not values["full_name"]:
            raise InvalidInputError("full_name cannot be empty")
        updated = replace(current, **values, updated_at=self._clock())
        return self._profiles.update_profile(updated)
