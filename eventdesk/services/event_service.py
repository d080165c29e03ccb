"""Event service - catalog business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Consult the policy engine before returning or mutating anything
- Return domain models or raise domain errors
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from eventdesk.domain import (
    Availability,
    Capacity,
    Event,
    EventId,
    EventQuery,
    EventStatus,
    Money,
    Operation,
    Profile,
    Role,
    can,
)
from eventdesk.domain.errors import (
    InvalidInputError,
    NotEligibleError,
    NotFoundError,
)
from eventdesk.services.access import ensure_allowed, ensure_visible, parse_id, utcnow
from eventdesk.stores.interfaces import AssignmentStore, EventStore, RegistrationStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {"title", "description", "category", "starts_at", "ends_at", "venue", "address", "price", "status"}
)
INITIAL_STATUSES = frozenset({EventStatus.DRAFT, EventStatus.PUBLISHED})
RECOMMENDED_LIMIT = 6


def _money(value: Any) -> Money:
    try:
        return Money(Decimal(str(value)))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidInputError("Price must be a non-negative amount") from exc


def _status(value: Any) -> EventStatus:
    try:
        return value if isinstance(value, EventStatus) else EventStatus(value)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown event status: {value}") from exc


def _check_schedule(starts_at: datetime, ends_at: datetime | None) -> None:
    if ends_at is not None and ends_at <= starts_at:
        raise InvalidInputError("ends_at must be after starts_at")


class EventService:
    """Service for event catalog operations."""

    def __init__(
        self,
        events: EventStore,
        registrations: RegistrationStore,
        assignments: AssignmentStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._events = events
        self._registrations = registrations
        self._assignments = assignments
        self._clock = clock

    def list_events(self, actor: Profile | None, query: EventQuery | None = None) -> list[Event]:
        """Return the events an actor works with.

        Organizers see their own events, volunteers the events they are
        assigned to, attendees and anonymous callers the published catalog.
        ``query`` narrows whichever listing applies.
        """
        if actor is not None and actor.role is Role.ORGANIZER:
            events = self._events.list_events(organizer_id=actor.id)
        elif actor is not None and actor.role is Role.VOLUNTEER:
            assigned = self._assignments.list_assignments(volunteer_id=actor.id)
            if not assigned:
                return []
            events = self._events.list_events(event_ids=[a.event_id for a in assigned])
        else:
            events = self._events.list_events(status=EventStatus.PUBLISHED)
        if query is not None and not query.is_empty:
            now = self._clock()
            events = [event for event in events if query.matches(event, now)]
        return [event for event in events if can(actor, Operation.READ, event)]

    def recommended_events(
        self, actor: Profile | None, limit: int = RECOMMENDED_LIMIT
    ) -> list[Event]:
        """Return bookable events the attendee holds no active registration for.

        Raises:
            NotEligibleError: If the actor is not an attendee.
        """
        if actor is None or actor.role is not Role.ATTENDEE:
            raise NotEligibleError("Only attendees get recommendations")
        booked = {
            registration.event_id
            for registration in self._registrations.list_for_attendee(actor.id)
            if registration.is_active
        }
        now = self._clock()
        events = [
            event
            for event in self._events.list_events(status=EventStatus.PUBLISHED)
            if event.is_bookable(now) and event.id not in booked
        ]
        return events[:limit]

    def get_event(self, actor: Profile | None, event_id: str | EventId) -> Event:
        """Return an event by ID.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            NotFoundError: If the event does not exist or is hidden from the actor.
        """
        event = self._events.get_event(parse_id(EventId, event_id))
        if event is None:
            raise NotFoundError("Event")
        ensure_visible(actor, event, "Event")
        return event

    def create_event(
        self,
        actor: Profile | None,
        *,
        title: str,
        category: str,
        starts_at: datetime,
        venue: str,
        capacity: int,
        price: Any = 0,
        description: str = "",
        ends_at: datetime | None = None,
        address: str | None = None,
        status: EventStatus | str = EventStatus.DRAFT,
    ) -> Event:
        """Create an event owned by the acting organizer.

        Raises:
            NotEligibleError: If the actor is not an organizer.
            InvalidInputError: If capacity, price, schedule or status are invalid.
        """
        if actor is None or actor.role is not Role.ORGANIZER:
            raise NotEligibleError("Only organizers can create events")
        try:
            seats = Capacity(int(capacity))
        except (TypeError, ValueError) as exc:
            raise InvalidInputError("Capacity must be a positive integer") from exc
        initial = _status(status)
        if initial not in INITIAL_STATUSES:
            raise InvalidInputError("New events start as draft or published")
        _check_schedule(starts_at, ends_at)

        now = self._clock()
        event = Event(
            id=EventId.new(),
            organizer_id=actor.id,
            title=title,
            category=category,
            starts_at=starts_at,
            venue=venue,
            capacity=seats,
            price=_money(price),
            status=initial,
            created_at=now,
            updated_at=now,
            description=description or "",
            ends_at=ends_at,
            address=address,
        )
        ensure_allowed(actor, Operation.CREATE, event, "Event")
        created = self._events.add_event(event)
        logger.info("Organizer %s created event %s (%s)", actor.id, created.id, created.status.value)
        return created

    def update_event(
        self, actor: Profile | None, event_id: str | EventId, changes: Mapping[str, Any]
    ) -> Event:
        """Apply changes to an event owned by the actor.

        Raises:
            NotFoundError: If the event does not exist or is hidden from the actor.
            ForbiddenError: If the actor does not own the event.
            InvalidInputError: If the changes touch capacity or unknown fields.
            InvalidTransitionError: If the status change is not allowed.
        """
        event = self.get_event(actor, event_id)
        ensure_allowed(actor, Operation.UPDATE, event, "Event", changes=changes)
        if "capacity" in changes:
            raise InvalidInputError("Capacity is fixed once the event is created")
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise InvalidInputError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        now = self._clock()
        values = {key: value for key, value in changes.items() if key != "status"}
        if "price" in values:
            values["price"] = _money(values["price"])
        if "description" in values:
            values["description"] = values["description"] or ""
        updated = replace(event, **values, updated_at=now)
        _check_schedule(updated.starts_at, updated.ends_at)
        if "status" in changes:
            updated = updated.transition_to(_status(changes["status"]), now)

        saved = self._events.update_event(updated)
        logger.info("Event %s updated by %s", saved.id, actor.id)
        return saved

    def delete_event(self, actor: Profile | None, event_id: str | EventId) -> None:
        """Delete an event owned by the actor, with its registrations, assignments and tasks.

        Raises:
            NotFoundError: If the event does not exist or is hidden from the actor.
            ForbiddenError: If the actor does not own the event.
        """
        event = self.get_event(actor, event_id)
        ensure_allowed(actor, Operation.DELETE, event, "Event")
        self._events.delete_event(event.id)
        logger.info("Event %s deleted by %s", event.id, actor.id)

    def get_availability(self, actor: Profile | None, event_id: str | EventId) -> Availability:
        """Return capacity, occupied and available seats of a visible event."""
        event = self.get_event(actor, event_id)
        return Availability(
            event_id=event.id,
            capacity=event.capacity.value,
            occupied=self._registrations.count_occupied(event.id),
        )
