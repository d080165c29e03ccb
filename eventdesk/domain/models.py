"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in eventdesk/models.py (persistence layer).

State changes return new instances; the transition methods enforce the
lifecycle of each entity and raise ``InvalidTransitionError`` otherwise.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Self

from eventdesk.domain.errors import InvalidTransitionError
from eventdesk.domain.value_objects import (
    AssignmentId,
    Capacity,
    EventId,
    Money,
    ProfileId,
    RegistrationId,
    TaskId,
    TicketNumber,
)


class Role(Enum):
    ORGANIZER = "organizer"
    VOLUNTEER = "volunteer"
    ATTENDEE = "attendee"

    @classmethod
    def parse(cls, raw: object, default: "Role | None" = None) -> "Role":
        """Return the role named by ``raw``, falling back to ``default``.

        Signup metadata is untrusted, so anything that is not exactly one of
        the three role names maps to the default (attendee unless told
        otherwise). Case and whitespace variants are not role names.
        """
        fallback = default or cls.ATTENDEE
        if not isinstance(raw, str):
            return fallback
        try:
            return cls(raw)
        except ValueError:
            return fallback


class EventStatus(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


EVENT_TRANSITIONS: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.DRAFT: frozenset({EventStatus.PUBLISHED, EventStatus.CANCELLED}),
    EventStatus.PUBLISHED: frozenset({EventStatus.ONGOING, EventStatus.CANCELLED}),
    EventStatus.ONGOING: frozenset({EventStatus.COMPLETED, EventStatus.CANCELLED}),
    EventStatus.COMPLETED: frozenset(),
    EventStatus.CANCELLED: frozenset(),
}


class RegistrationStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    ATTENDED = "attended"


# Registrations holding a seat.
OCCUPYING_STATUSES = frozenset({RegistrationStatus.CONFIRMED, RegistrationStatus.ATTENDED})


class TaskStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Profile:
    """Domain representation of a user profile.

    ``id`` is the external identity id; ``role`` is written once by the
    identity bridge and never changes afterwards.
    """

    id: ProfileId
    email: str
    full_name: str
    role: Role
    created_at: datetime
    updated_at: datetime
    phone: str | None = None
    company: str | None = None
    skills: tuple[str, ...] = ()
    profile_picture_url: str | None = None


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    organizer_id: ProfileId
    title: str
    category: str
    starts_at: datetime
    venue: str
    capacity: Capacity
    price: Money
    status: EventStatus
    created_at: datetime
    updated_at: datetime
    description: str = ""
    ends_at: datetime | None = None
    address: str | None = None

    def is_bookable(self, now: datetime) -> bool:
        return self.status is EventStatus.PUBLISHED and self.starts_at > now

    def transition_to(self, status: EventStatus, now: datetime) -> Self:
        if status is self.status:
            return self
        if status not in EVENT_TRANSITIONS[self.status]:
            raise InvalidTransitionError("Event", self.status.value, status.value)
        return replace(self, status=status, updated_at=now)


class EventTiming(Enum):
    UPCOMING = "upcoming"
    PAST = "past"


@dataclass(frozen=True)
class EventQuery:
    """Catalog filters. An event must match every filter that is set.

    ``search`` matches title, venue or category case-insensitively;
    ``category`` must match exactly.
    """

    search: str | None = None
    category: str | None = None
    status: EventStatus | None = None
    timing: EventTiming | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.search or self.category or self.status or self.timing)

    def matches(self, event: Event, now: datetime) -> bool:
        if self.search:
            needle = self.search.lower()
            haystack = (event.title, event.venue, event.category)
            if not any(needle in value.lower() for value in haystack):
                return False
        if self.category and event.category != self.category:
            return False
        if self.status is not None and event.status is not self.status:
            return False
        if self.timing is EventTiming.UPCOMING and event.starts_at <= now:
            return False
        if self.timing is EventTiming.PAST and event.starts_at > now:
            return False
        return True


@dataclass(frozen=True)
class Registration:
    """Domain representation of one attendee's booking for an event."""

    id: RegistrationId
    event_id: EventId
    attendee_id: ProfileId
    ticket_number: TicketNumber
    status: RegistrationStatus
    registered_at: datetime
    checked_in: bool = False
    checked_in_at: datetime | None = None
    seat_number: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status is not RegistrationStatus.CANCELLED

    @property
    def occupies_seat(self) -> bool:
        return self.status in OCCUPYING_STATUSES

    def _fail(self, target: RegistrationStatus) -> InvalidTransitionError:
        return InvalidTransitionError("Registration", self.status.value, target.value)

    def cancel(self) -> Self:
        if self.status not in (RegistrationStatus.PENDING, RegistrationStatus.CONFIRMED):
            raise self._fail(RegistrationStatus.CANCELLED)
        return replace(self, status=RegistrationStatus.CANCELLED)

    def confirm(self) -> Self:
        if self.status is not RegistrationStatus.PENDING:
            raise self._fail(RegistrationStatus.CONFIRMED)
        return replace(self, status=RegistrationStatus.CONFIRMED)

    def check_in(self, now: datetime, mark_attended: bool = True) -> Self:
        """Check the attendee in at the door, optionally marking them attended.

        A confirmed registration that was checked in without attendance can
        still be marked attended later; it keeps its first ``checked_in_at``.
        """
        if self.status is not RegistrationStatus.CONFIRMED:
            raise self._fail(RegistrationStatus.ATTENDED)
        if self.checked_in:
            if not mark_attended:
                raise self._fail(RegistrationStatus.CONFIRMED)
            return replace(self, status=RegistrationStatus.ATTENDED)
        status = RegistrationStatus.ATTENDED if mark_attended else self.status
        return replace(self, status=status, checked_in=True, checked_in_at=now)


@dataclass(frozen=True)
class VolunteerAssignment:
    """Domain representation of a volunteer working an event."""

    id: AssignmentId
    event_id: EventId
    volunteer_id: ProfileId
    assigned_role: str
    assigned_at: datetime


@dataclass(frozen=True)
class Task:
    """Domain representation of a task belonging to an event."""

    id: TaskId
    event_id: EventId
    title: str
    status: TaskStatus
    created_at: datetime
    volunteer_id: ProfileId | None = None
    description: str | None = None
    due_date: datetime | None = None
    completed_at: datetime | None = None

    def with_status(self, status: TaskStatus, now: datetime) -> Self:
        """Move to ``status``; only completion sets, and only reopening clears, completed_at."""
        if status is self.status:
            return self
        if status is TaskStatus.COMPLETED:
            return replace(self, status=status, completed_at=now)
        return replace(self, status=status, completed_at=None)


@dataclass(frozen=True)
class EventScope:
    """Ownership snapshot of the event a resource belongs to."""

    event_id: EventId
    organizer_id: ProfileId
    volunteer_ids: frozenset[ProfileId] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Availability:
    """Seat usage of one event."""

    event_id: EventId
    capacity: int
    occupied: int

    @property
    def available(self) -> int:
        return max(self.capacity - self.occupied, 0)


@dataclass(frozen=True)
class IdentityCreated:
    """Notification from the identity provider that a new account exists."""

    identity_id: str
    email: str
    metadata: dict = field(default_factory=dict)
