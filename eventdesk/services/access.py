"""Helpers shared by services for parsing ids and consulting the policy engine."""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, TypeVar

from eventdesk.domain import EntityId, EventScope, Operation, Profile, can
from eventdesk.domain.errors import ForbiddenError, InvalidIdError, NotFoundError

IdT = TypeVar("IdT", bound=EntityId)


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_id(id_type: type[IdT], raw: str | IdT) -> IdT:
    """Return ``raw`` as an ``id_type``.

    Raises:
        InvalidIdError: If raw is not a valid UUID.
    """
    if isinstance(raw, id_type):
        return raw
    try:
        return id_type.from_string(str(raw))
    except ValueError as exc:
        raise InvalidIdError(id_type.label) from exc


def ensure_visible(
    actor: Profile | None,
    resource: object,
    label: str,
    scope: EventScope | None = None,
) -> None:
    """Raise NotFoundError unless the actor may read the resource."""
    if not can(actor, Operation.READ, resource, scope=scope):
        raise NotFoundError(label)


def ensure_allowed(
    actor: Profile | None,
    operation: Operation,
    resource: object,
    label: str,
    *,
    scope: EventScope | None = None,
    changes: Mapping[str, Any] | None = None,
) -> None:
    """Raise ForbiddenError unless the actor may perform the operation."""
    if not can(actor, operation, resource, scope=scope, changes=changes):
        raise ForbiddenError(operation.value, label)
