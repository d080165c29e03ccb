from eventdesk.domain.models import (
    Availability,
    Event,
    EventScope,
    EventQuery,
    EventStatus,
    EventTiming,
    IdentityCreated,
    Profile,
    Registration,
    RegistrationStatus,
    Role,
    Task,
    TaskStatus,
    VolunteerAssignment,
)
from eventdesk.domain.policy import Operation, can
from eventdesk.domain.value_objects import (
    AssignmentId,
    Capacity,
    EntityId,
    EventId,
    Money,
    ProfileId,
    RegistrationId,
    TaskId,
    TicketNumber,
)

__all__ = [
    "Availability",
    "Event",
    "EventScope",
    "EventQuery",
    "EventStatus",
    "EventTiming",
    "IdentityCreated",
    "Profile",
    "Registration",
    "RegistrationStatus",
    "Role",
    "Task",
    "TaskStatus",
    "VolunteerAssignment",
    "Operation",
    "can",
    "AssignmentId",
    "Capacity",
    "EntityId",
    "EventId",
    "Money",
    "ProfileId",
    "RegistrationId",
    "TaskId",
    "TicketNumber",
]
