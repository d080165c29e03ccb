"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Services never see ORM
rows, database exceptions or transactions; stores translate those into domain
models and domain errors.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from contextlib import AbstractContextManager

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


class ProfileStore(ABC):
    """Interface for profile persistence operations."""

    @abstractmethod
    def get_profile(self, profile_id: ProfileId) -> Profile | None:
        """Return a profile by ID, or None if not found."""
        ...

    @abstractmethod
    def create_profile(self, profile: Profile) -> Profile:
        """Insert a profile.

        Raises:
            DuplicateProfileError: If the identity already has a profile.
        """
        ...

    @abstractmethod
    def update_profile(self, profile: Profile) -> Profile:
        """Persist the mutable attributes of a profile. The role column is never written."""
        ...


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_events(
        self,
        *,
        organizer_id: ProfileId | None = None,
        status: EventStatus | None = None,
        event_ids: Iterable[EventId] | None = None,
    ) -> list[Event]:
        """Return events matching every given filter, ordered by starts_at ascending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def add_event(self, event: Event) -> Event:
        """Insert a new event."""
        ...

    @abstractmethod
    def update_event(self, event: Event) -> Event:
        """Persist the editable attributes of an event. Capacity is never written."""
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> None:
        """Delete an event and everything that belongs to it."""
        ...

    @abstractmethod
    def get_scope(self, event_id: EventId) -> EventScope | None:
        """Return organizer and assigned volunteers of an event, or None if not found."""
        ...


class RegistrationStore(ABC):
    """Interface for registration persistence operations."""

    @abstractmethod
    def seat_lock(self, event_id: EventId) -> AbstractContextManager[Event | None]:
        """Open the atomic unit in which seats of one event are counted and taken.

        While the context is held no other seat_lock for the same event can
        proceed. Yields the freshly read event, or None if it no longer exists.

        Raises:
            ConflictRetryError: If the unit could not be completed because of a
                transient conflict with another writer.
        """
        ...

    @abstractmethod
    def count_occupied(self, event_id: EventId) -> int:
        """Return the number of confirmed or attended registrations for an event."""
        ...

    @abstractmethod
    def find_active_registration(
        self, event_id: EventId, attendee_id: ProfileId
    ) -> Registration | None:
        """Return the non-cancelled registration of an attendee for an event, if any."""
        ...

    @abstractmethod
    def ticket_exists(self, ticket_number: TicketNumber) -> bool:
        """Check if any registration ever created carries this ticket number."""
        ...

    @abstractmethod
    def add_registration(self, registration: Registration) -> Registration:
        """Insert a registration.

        Raises:
            ConflictRetryError: If a uniqueness constraint was hit concurrently.
        """
        ...

    @abstractmethod
    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        """Return a registration by ID, or None if not found."""
        ...

    @abstractmethod
    def update_registration(
        self, registration: Registration, *, expected_status: RegistrationStatus
    ) -> Registration:
        """Write status and check-in fields if the stored status still equals expected_status.

        Raises:
            ConflictRetryError: If the row changed since it was read.
        """
        ...

    @abstractmethod
    def list_for_attendee(self, attendee_id: ProfileId) -> list[Registration]:
        """Return an attendee's registrations, newest first."""
        ...

    @abstractmethod
    def list_for_event(self, event_id: EventId) -> list[Registration]:
        """Return all registrations of an event, newest first."""
        ...


class AssignmentStore(ABC):
    """Interface for volunteer assignment persistence operations."""

    @abstractmethod
    def get_assignment(self, assignment_id: AssignmentId) -> VolunteerAssignment | None:
        """Return an assignment by ID, or None if not found."""
        ...

    @abstractmethod
    def find_assignment(
        self, event_id: EventId, volunteer_id: ProfileId
    ) -> VolunteerAssignment | None:
        """Return the assignment of a volunteer to an event, if any."""
        ...

    @abstractmethod
    def add_assignment(self, assignment: VolunteerAssignment) -> VolunteerAssignment:
        """Insert an assignment.

        Raises:
            AlreadyAssignedError: If the volunteer is already assigned to the event.
        """
        ...

    @abstractmethod
    def delete_assignment(self, assignment_id: AssignmentId) -> None:
        """Delete an assignment."""
        ...

    @abstractmethod
    def list_assignments(
        self, *, event_id: EventId | None = None, volunteer_id: ProfileId | None = None
    ) -> list[VolunteerAssignment]:
        """Return assignments matching every given filter, oldest first."""
        ...


class TaskStore(ABC):
    """Interface for task persistence operations."""

    @abstractmethod
    def get_task(self, task_id: TaskId) -> Task | None:
        """Return a task by ID, or None if not found."""
        ...

    @abstractmethod
    def add_task(self, task: Task) -> Task:
        """Insert a task."""
        ...

    @abstractmethod
    def update_task(self, task: Task) -> Task:
        """Persist every mutable attribute of a task."""
        ...

    @abstractmethod
    def delete_task(self, task_id: TaskId) -> None:
        """Delete a task."""
        ...

    @abstractmethod
    def list_tasks(
        self, *, event_id: EventId | None = None, volunteer_id: ProfileId | None = None
    ) -> list[Task]:
        """Return tasks matching every given filter, ordered by due date then creation."""
        ...
