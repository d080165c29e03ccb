"""In-memory implementation of every store interface.

Backs the service unit tests and any process that needs the core without a
database. Seat locks are one ``threading.Lock`` per event; all other state is
guarded by a single re-entrant lock.
"""

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import replace

from eventdesk.domain import (
    AssignmentId,
    Event,
    EventId,
    EventScope,
    EventStatus,
    Profile,
    ProfileId,
    Registration,
    RegistrationId,
    RegistrationStatus,
    Task,
    TaskId,
    TicketNumber,
    VolunteerAssignment,
)
from eventdesk.domain.errors import (
    AlreadyAssignedError,
    ConflictRetryError,
    DuplicateProfileError,
)
from eventdesk.domain.models import OCCUPYING_STATUSES
from eventdesk.stores.interfaces import (
    AssignmentStore,
    EventStore,
    ProfileStore,
    RegistrationStore,
    TaskStore,
)


class InMemoryStore(ProfileStore, EventStore, RegistrationStore, AssignmentStore, TaskStore):
    """Process-local store holding domain models in dictionaries."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._seat_locks: dict[EventId, threading.Lock] = {}
        self._profiles: dict[ProfileId, Profile] = {}
        self._events: dict[EventId, Event] = {}
        self._registrations: dict[RegistrationId, Registration] = {}
        self._assignments: dict[AssignmentId, VolunteerAssignment] = {}
        self._tasks: dict[TaskId, Task] = {}

    # Profiles

    def get_profile(self, profile_id: ProfileId) -> Profile | None:
        with self._lock:
            return self._profiles.get(profile_id)

    def create_profile(self, profile: Profile) -> Profile:
        with self._lock:
            if profile.id in self._profiles:
                raise DuplicateProfileError(str(profile.id))
            self._profiles[profile.id] = profile
            return profile

    def update_profile(self, profile: Profile) -> Profile:
        with self._lock:
            stored = self._profiles[profile.id]
            updated = replace(profile, role=stored.role, created_at=stored.created_at)
            self._profiles[profile.id] = updated
            return updated

    # Events

    def list_events(
        self,
        *,
        organizer_id: ProfileId | None = None,
        status: EventStatus | None = None,
        event_ids: Iterable[EventId] | None = None,
    ) -> list[Event]:
        wanted = set(event_ids) if event_ids is not None else None
        with self._lock:
            events = [
                event
                for event in self._events.values()
                if (organizer_id is None or event.organizer_id == organizer_id)
                and (status is None or event.status is status)
                and (wanted is None or event.id in wanted)
            ]
        return sorted(events, key=lambda event: event.starts_at)

    def get_event(self, event_id: EventId) -> Event | None:
        with self._lock:
            return self._events.get(event_id)

    def add_event(self, event: Event) -> Event:
        with self._lock:
            self._events[event.id] = event
            return event

    def update_event(self, event: Event) -> Event:
        with self._lock:
            stored = self._events[event.id]
            updated = replace(event, capacity=stored.capacity, created_at=stored.created_at)
            self._events[event.id] = updated
            return updated

    def delete_event(self, event_id: EventId) -> None:
        with self._lock:
            self._events.pop(event_id, None)
            self._seat_locks.pop(event_id, None)
            for table in (self._registrations, self._assignments, self._tasks):
                for key in [key for key, row in table.items() if row.event_id == event_id]:
                    del table[key]

    def get_scope(self, event_id: EventId) -> EventScope | None:
        with self._lock:
            event = self._events.get(event_id)
            if event is None:
                return None
            volunteers = frozenset(
                assignment.volunteer_id
                for assignment in self._assignments.values()
                if assignment.event_id == event_id
            )
        return EventScope(event_id=event_id, organizer_id=event.organizer_id, volunteer_ids=volunteers)

    # Registrations

    @contextmanager
    def seat_lock(self, event_id: EventId) -> Iterator[Event | None]:
        with self._lock:
            lock = self._seat_locks.setdefault(event_id, threading.Lock())
        with lock:
            yield self.get_event(event_id)

    def count_occupied(self, event_id: EventId) -> int:
        with self._lock:
            return sum(
                1
                for registration in self._registrations.values()
                if registration.event_id == event_id and registration.status in OCCUPYING_STATUSES
            )

    def find_active_registration(
        self, event_id: EventId, attendee_id: ProfileId
    ) -> Registration | None:
        with self._lock:
            for registration in self._registrations.values():
                if (
                    registration.event_id == event_id
                    and registration.attendee_id == attendee_id
                    and registration.is_active
                ):
                    return registration
        return None

    def ticket_exists(self, ticket_number: TicketNumber) -> bool:
        with self._lock:
            return any(
                registration.ticket_number == ticket_number
                for registration in self._registrations.values()
            )

    def add_registration(self, registration: Registration) -> Registration:
        with self._lock:
            if self.ticket_exists(registration.ticket_number) or self.find_active_registration(
                registration.event_id, registration.attendee_id
            ):
                raise ConflictRetryError()
            self._registrations[registration.id] = registration
            return registration

    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        with self._lock:
            return self._registrations.get(registration_id)

    def update_registration(
        self, registration: Registration, *, expected_status: RegistrationStatus
    ) -> Registration:
        with self._lock:
            stored = self._registrations.get(registration.id)
            if stored is None or stored.status is not expected_status:
                raise ConflictRetryError()
            updated = replace(
                stored,
                status=registration.status,
                checked_in=registration.checked_in,
                checked_in_at=registration.checked_in_at,
            )
            self._registrations[registration.id] = updated
            return updated

    def list_for_attendee(self, attendee_id: ProfileId) -> list[Registration]:
        with self._lock:
            rows = [r for r in self._registrations.values() if r.attendee_id == attendee_id]
        return sorted(rows, key=lambda r: r.registered_at, reverse=True)

    def list_for_event(self, event_id: EventId) -> list[Registration]:
        with self._lock:
            rows = [r for r in self._registrations.values() if r.event_id == event_id]
        return sorted(rows, key=lambda r: r.registered_at, reverse=True)

    # Assignments

    def get_assignment(self, assignment_id: AssignmentId) -> VolunteerAssignment | None:
        with self._lock:
            return self._assignments.get(assignment_id)

    def find_assignment(
        self, event_id: EventId, volunteer_id: ProfileId
    ) -> VolunteerAssignment | None:
        with self._lock:
            for assignment in self._assignments.values():
                if assignment.event_id == event_id and assignment.volunteer_id == volunteer_id:
                    return assignment
        return None

    def add_assignment(self, assignment: VolunteerAssignment) -> VolunteerAssignment:
        with self._lock:
            if self.find_assignment(assignment.event_id, assignment.volunteer_id):
                raise AlreadyAssignedError(str(assignment.event_id))
            self._assignments[assignment.id] = assignment
            return assignment

    def delete_assignment(self, assignment_id: AssignmentId) -> None:
        with self._lock:
            self._assignments.pop(assignment_id, None)

    def list_assignments(
        self, *, event_id: EventId | None = None, volunteer_id: ProfileId | None = None
    ) -> list[VolunteerAssignment]:
        with self._lock:
            rows = [
                a
                for a in self._assignments.values()
                if (event_id is None or a.event_id == event_id)
                and (volunteer_id is None or a.volunteer_id == volunteer_id)
            ]
        return sorted(rows, key=lambda a: a.assigned_at)

    # Tasks

    def get_task(self, task_id: TaskId) -> Task | None:
        with self._lock:
            return self._tasks.get(task_id)

    def add_task(self, task: Task) -> Task:
        with self._lock:
            self._tasks[task.id] = task
            return task

    def update_task(self, task: Task) -> Task:
        with self._lock:
            self._tasks[task.id] = task
            return task

    def delete_task(self, task_id: TaskId) -> None:
        with self._lock:
            self._tasks.pop(task_id, None)

    def list_tasks(
        self, *, event_id: EventId | None = None, volunteer_id: ProfileId | None = None
    ) -> list[Task]:
        with self._lock:
            rows = [
                t
                for t in self._tasks.values()
                if (event_id is None or t.event_id == event_id)
                and (volunteer_id is None or t.volunteer_id == volunteer_id)
            ]
        return sorted(rows, key=lambda t: (t.due_date is None, t.due_date or t.created_at, t.created_at))
