"""Authorization policy engine.

``can`` decides whether an actor may perform an operation on a resource. It
is pure: everything it needs arrives as arguments (the actor's profile, the
resource, an ``EventScope`` snapshot for event-scoped rows and, for updates,
the proposed field changes). Rules for one (resource type, operation) pair are
unioned, so any single satisfied rule grants access.
"""

from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from eventdesk.domain.models import (
    Event,
    EventScope,
    EventStatus,
    Profile,
    Registration,
    RegistrationStatus,
    Role,
    Task,
    VolunteerAssignment,
)


class Operation(Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


Rule = Callable[[Profile | None, Any, EventScope | None, Mapping[str, Any]], bool]

# Fields staff may touch on a registration, and the statuses they may set.
CHECK_IN_FIELDS = frozenset({"status", "checked_in", "checked_in_at"})
STAFF_REGISTRATION_STATUSES = frozenset({RegistrationStatus.CONFIRMED, RegistrationStatus.ATTENDED})

# Fields an assigned volunteer may touch on a task.
TASK_PROGRESS_FIELDS = frozenset({"status", "completed_at"})


def _organizes(actor: Profile | None, scope: EventScope | None) -> bool:
    return (
        actor is not None
        and scope is not None
        and actor.role is Role.ORGANIZER
        and actor.id == scope.organizer_id
    )


def _volunteers_at(actor: Profile | None, scope: EventScope | None) -> bool:
    return actor is not None and scope is not None and actor.id in scope.volunteer_ids


# Profile


def _is_self(actor, profile: Profile, scope, changes) -> bool:
    return actor is not None and actor.id == profile.id


def _self_without_role(actor, profile: Profile, scope, changes) -> bool:
    return _is_self(actor, profile, scope, changes) and "role" not in changes


# Event


def _published(actor, event: Event, scope, changes) -> bool:
    return event.status is EventStatus.PUBLISHED


def _owns_event(actor, event: Event, scope, changes) -> bool:
    return (
        actor is not None
        and actor.role is Role.ORGANIZER
        and actor.id == event.organizer_id
    )


# Registration


def _is_attendee(actor, registration: Registration, scope, changes) -> bool:
    return actor is not None and actor.id == registration.attendee_id


def _attendee_books_self(actor, registration: Registration, scope, changes) -> bool:
    return actor is not None and actor.role is Role.ATTENDEE and actor.id == registration.attendee_id


def _attendee_cancels(actor, registration: Registration, scope, changes) -> bool:
    return (
        _is_attendee(actor, registration, scope, changes)
        and set(changes) == {"status"}
        and changes["status"] is RegistrationStatus.CANCELLED
    )


def _staff_checks_in(actor, registration: Registration, scope, changes) -> bool:
    if not (_organizes(actor, scope) or _volunteers_at(actor, scope)):
        return False
    if not changes or not set(changes) <= CHECK_IN_FIELDS:
        return False
    return "status" not in changes or changes["status"] in STAFF_REGISTRATION_STATUSES


# Assignments and tasks


def _event_organizer(actor, resource, scope, changes) -> bool:
    return _organizes(actor, scope)


def _event_volunteer(actor, resource, scope, changes) -> bool:
    return _volunteers_at(actor, scope)


def _is_assigned_volunteer(actor, resource: VolunteerAssignment | Task, scope, changes) -> bool:
    return actor is not None and resource.volunteer_id == actor.id


def _volunteer_progresses_task(actor, task: Task, scope, changes) -> bool:
    return (
        _is_assigned_volunteer(actor, task, scope, changes)
        and bool(changes)
        and set(changes) <= TASK_PROGRESS_FIELDS
    )


POLICIES: dict[type, dict[Operation, tuple[Rule, ...]]] = {
    Profile: {
        Operation.READ: (_is_self,),
        # Profiles are created by the identity bridge only and never deleted.
        Operation.CREATE: (),
        Operation.UPDATE: (_self_without_role,),
        Operation.DELETE: (),
    },
    Event: {
        Operation.READ: (_published, _owns_event),
        Operation.CREATE: (_owns_event,),
        Operation.UPDATE: (_owns_event,),
        Operation.DELETE: (_owns_event,),
    },
    Registration: {
        Operation.READ: (_is_attendee, _event_organizer, _event_volunteer),
        Operation.CREATE: (_attendee_books_self,),
        Operation.UPDATE: (_attendee_cancels, _staff_checks_in),
        # Cancellation is a status update.
        Operation.DELETE: (),
    },
    VolunteerAssignment: {
        Operation.READ: (_is_assigned_volunteer, _event_organizer),
        Operation.CREATE: (_event_organizer,),
        Operation.UPDATE: (_event_organizer,),
        Operation.DELETE: (_event_organizer,),
    },
    Task: {
        Operation.READ: (_is_assigned_volunteer, _event_organizer),
        Operation.CREATE: (_event_organizer,),
        Operation.UPDATE: (_event_organizer, _volunteer_progresses_task),
        Operation.DELETE: (_event_organizer,),
    },
}


def can(
    actor: Profile | None,
    operation: Operation,
    resource: object,
    *,
    scope: EventScope | None = None,
    changes: Mapping[str, Any] | None = None,
) -> bool:
    """Return True when ``actor`` may perform ``operation`` on ``resource``.

    ``actor`` is None for anonymous callers. ``scope`` describes the event that
    owns a registration, assignment or task; without it, event-relative rules
    deny. ``changes`` maps field names to proposed values for updates.
    """
    rules = POLICIES.get(type(resource), {}).get(operation, ())
    proposed = changes or {}
    return any(rule(actor, resource, scope, proposed) for rule in rules)
