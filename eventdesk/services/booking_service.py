"""Booking service: seats, tickets and the registration lifecycle.

A booking counts and takes a seat inside ``RegistrationStore.seat_lock``, the
store's atomic unit for one event. Two bookings for the same event never
observe the same occupied count, so capacity cannot be overrun however the
requests interleave. Transient conflicts raised by the store are retried a
bounded number of times; every other error propagates to the caller.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from eventdesk.domain import (
    Event,
    EventId,
    EventScope,
    Operation,
    Profile,
    Registration,
    RegistrationId,
    RegistrationStatus,
    Role,
    TicketNumber,
    can,
)
from eventdesk.domain.errors import (
    AlreadyRegisteredError,
    CapacityExceededError,
    ConflictRetryError,
    EventNotBookableError,
    NotEligibleError,
    NotFoundError,
)
from eventdesk.services.access import ensure_allowed, ensure_visible, parse_id, utcnow
from eventdesk.services.retry import DEFAULT_ATTEMPTS, DEFAULT_BACKOFF_SECONDS, retry_on_conflict
from eventdesk.stores.interfaces import EventStore, RegistrationStore

logger = logging.getLogger(__name__)

# Fresh ticket numbers drawn per booking attempt before giving up.
TICKET_ATTEMPTS = 5


class BookingService:
    """Service for booking seats and moving registrations through their lifecycle."""

    def __init__(
        self,
        events: EventStore,
        registrations: RegistrationStore,
        clock: Callable[[], datetime] = utcnow,
        retry_attempts: int = DEFAULT_ATTEMPTS,
        retry_backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        ticket_factory: Callable[[], TicketNumber] = TicketNumber.generate,
    ) -> None:
        self._events = events
        self._registrations = registrations
        self._clock = clock
        self._retry_attempts = retry_attempts
        self._retry_backoff_seconds = retry_backoff_seconds
        self._ticket_factory = ticket_factory

    def _retry(self, operation: Callable[[], Registration]) -> Registration:
        return retry_on_conflict(
            operation,
            attempts=self._retry_attempts,
            backoff_seconds=self._retry_backoff_seconds,
        )

    def _visible_event(self, actor: Profile | None, event_id: EventId) -> Event:
        event = self._events.get_event(event_id)
        if event is None:
            raise NotFoundError("Event")
        ensure_visible(actor, event, "Event")
        return event

    def _visible_registration(
        self, actor: Profile | None, registration_id: str | RegistrationId
    ) -> tuple[Registration, EventScope | None]:
        registration = self._registrations.get_registration(
            parse_id(RegistrationId, registration_id)
        )
        if registration is None:
            raise NotFoundError("Registration")
        scope = self._events.get_scope(registration.event_id)
        ensure_visible(actor, registration, "Registration", scope)
        return registration, scope

    # Booking

    def book(self, actor: Profile | None, event_id: str | EventId) -> Registration:
        """Book a seat for the acting attendee.

        Raises:
            NotEligibleError: If the actor is not an attendee.
            NotFoundError: If the event does not exist or is hidden from the actor.
                Attendees can only read published events, so a draft, cancelled
                or completed event is reported as not found.
            EventNotBookableError: If the event has already started, or stops being
                bookable before the seat is taken.
            AlreadyRegisteredError: If the attendee already holds an active registration.
            CapacityExceededError: If every seat is taken.
            ConflictRetryError: If write conflicts persisted through every retry.
        """
        if actor is None or actor.role is not Role.ATTENDEE:
            raise NotEligibleError("Only attendees can book events")
        event = self._visible_event(actor, parse_id(EventId, event_id))
        if not event.is_bookable(self._clock()):
            raise EventNotBookableError(str(event.id))

        registration = self._retry(lambda: self._take_seat(actor, event.id))
        logger.info(
            "Attendee %s booked event %s with ticket %s",
            actor.id,
            event.id,
            registration.ticket_number,
        )
        return registration

    def _take_seat(self, actor: Profile, event_id: EventId) -> Registration:
        with self._registrations.seat_lock(event_id) as event:
            now = self._clock()
            if event is None:
                raise NotFoundError("Event")
            if not event.is_bookable(now):
                raise EventNotBookableError(str(event_id))
            if self._registrations.find_active_registration(event_id, actor.id):
                raise AlreadyRegisteredError(str(event_id))
            if self._registrations.count_occupied(event_id) >= event.capacity.value:
                raise CapacityExceededError(str(event_id))

            registration = Registration(
                id=RegistrationId.new(),
                event_id=event_id,
                attendee_id=actor.id,
                ticket_number=self._unused_ticket(),
                status=RegistrationStatus.CONFIRMED,
                registered_at=now,
            )
            ensure_allowed(actor, Operation.CREATE, registration, "Registration")
            return self._registrations.add_registration(registration)

    def _unused_ticket(self) -> TicketNumber:
        for _ in range(TICKET_ATTEMPTS):
            ticket = self._ticket_factory()
            if not self._registrations.ticket_exists(ticket):
                return ticket
            logger.info("Ticket number collision on %s, drawing another", ticket)
        raise ConflictRetryError("Could not allocate a unique ticket number")

    # Lifecycle

    def cancel(self, actor: Profile | None, registration_id: str | RegistrationId) -> Registration:
        """Cancel the actor's own registration, freeing its seat.

        Raises:
            NotFoundError: If the registration does not exist or is hidden from the actor.
            ForbiddenError: If the actor is not the registration's attendee.
            InvalidTransitionError: If the registration is already cancelled or attended.
        """

        def attempt() -> Registration:
            registration, scope = self._visible_registration(actor, registration_id)
            ensure_allowed(
                actor,
                Operation.UPDATE,
                registration,
                "Registration",
                scope=scope,
                changes={"status": RegistrationStatus.CANCELLED},
            )
            cancelled = registration.cancel()
            return self._registrations.update_registration(
                cancelled, expected_status=registration.status
            )

        registration = self._retry(attempt)
        logger.info("Registration %s cancelled by %s", registration.id, actor.id)
        return registration

    def check_in(
        self,
        actor: Profile | None,
        registration_id: str | RegistrationId,
        mark_attended: bool = True,
    ) -> Registration:
        """Check an attendee in at the door.

        Raises:
            NotFoundError: If the registration does not exist or is hidden from the actor.
            ForbiddenError: If the actor is neither organizer nor assigned volunteer.
            InvalidTransitionError: If the registration is not confirmed, or is already
                checked in and ``mark_attended`` is False.
        """

        def attempt() -> Registration:
            registration, scope = self._visible_registration(actor, registration_id)
            checked_in = registration.check_in(self._clock(), mark_attended=mark_attended)
            changes = {"checked_in": True, "checked_in_at": checked_in.checked_in_at}
            if checked_in.status is not registration.status:
                changes["status"] = checked_in.status
            ensure_allowed(
                actor, Operation.UPDATE, registration, "Registration", scope=scope, changes=changes
            )
            return self._registrations.update_registration(
                checked_in, expected_status=registration.status
            )

        registration = self._retry(attempt)
        logger.info("Registration %s checked in by %s", registration.id, actor.id)
        return registration

    def confirm(self, actor: Profile | None, registration_id: str | RegistrationId) -> Registration:
        """Confirm a pending registration, taking a seat for it.

        Raises:
            NotFoundError: If the registration does not exist or is hidden from the actor.
            ForbiddenError: If the actor is neither organizer nor assigned volunteer.
            InvalidTransitionError: If the registration is not pending.
            CapacityExceededError: If every seat is taken.
        """

        def attempt() -> Registration:
            registration, scope = self._visible_registration(actor, registration_id)
            ensure_allowed(
                actor,
                Operation.UPDATE,
                registration,
                "Registration",
                scope=scope,
                changes={"status": RegistrationStatus.CONFIRMED},
            )
            confirmed = registration.confirm()
            with self._registrations.seat_lock(registration.event_id) as event:
                if event is None:
                    raise NotFoundError("Event")
                if self._registrations.count_occupied(event.id) >= event.capacity.value:
                    raise CapacityExceededError(str(event.id))
                return self._registrations.update_registration(
                    confirmed, expected_status=registration.status
                )

        registration = self._retry(attempt)
        logger.info("Registration %s confirmed by %s", registration.id, actor.id)
        return registration

    # Queries

    def get_registration(
        self, actor: Profile | None, registration_id: str | RegistrationId
    ) -> Registration:
        """Return a registration the actor may see."""
        registration, _ = self._visible_registration(actor, registration_id)
        return registration

    def list_my_registrations(self, actor: Profile | None) -> list[Registration]:
        """Return the actor's own tickets, newest first."""
        if actor is None:
            return []
        return self._registrations.list_for_attendee(actor.id)

    def list_event_registrations(
        self, actor: Profile | None, event_id: str | EventId
    ) -> list[Registration]:
        """Return the registrations of an event visible to the actor.

        Organizers and assigned volunteers see every registration; anyone else
        sees at most their own.

        Raises:
            NotFoundError: If the event does not exist or the actor has no
                relation to it.
        """
        parsed = parse_id(EventId, event_id)
        event = self._events.get_event(parsed)
        scope = self._events.get_scope(parsed)
        if event is None or scope is None:
            raise NotFoundError("Event")
        staff = actor is not None and (
            actor.id == scope.organizer_id or actor.id in scope.volunteer_ids
        )
        if not staff:
            ensure_visible(actor, event, "Event")
        return [
            registration
            for registration in self._registrations.list_for_event(parsed)
            if can(actor, Operation.READ, registration, scope=scope)
        ]
