"""Django ORM implementation of the store interfaces.

Each store queries the ORM and converts rows to domain models. Database
exceptions never leave this module: integrity and locking failures become
domain errors.
"""

from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from django.db import IntegrityError, OperationalError, transaction
from django.db.models import F

from eventdesk import models as orm
from eventdesk.domain import (
    AssignmentId,
    Capacity,
    Event,
    EventId,
    EventScope,
    EventStatus,
    Money,
    Profile,
    ProfileId,
    Registration,
    RegistrationId,
    RegistrationStatus,
    Role,
    Task,
    TaskId,
    TaskStatus,
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

_OCCUPYING_VALUES = [status.value for status in OCCUPYING_STATUSES]


def _profile_to_domain(row: orm.Profile) -> Profile:
    return Profile(
        id=ProfileId(row.id),
        email=row.email,
        full_name=row.full_name,
        role=Role(row.role),
        created_at=row.created_at,
        updated_at=row.updated_at,
        phone=row.phone,
        company=row.company,
        skills=tuple(row.skills or ()),
        profile_picture_url=row.profile_picture_url,
    )


def _event_to_domain(row: orm.Event) -> Event:
    return Event(
        id=EventId(row.id),
        organizer_id=ProfileId(row.organizer_id),
        title=row.title,
        category=row.category,
        starts_at=row.starts_at,
        venue=row.venue,
        capacity=Capacity(row.capacity),
        price=Money(row.price),
        status=EventStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
        description=row.description,
        ends_at=row.ends_at,
        address=row.address,
    )


def _registration_to_domain(row: orm.Registration) -> Registration:
    return Registration(
        id=RegistrationId(row.id),
        event_id=EventId(row.event_id),
        attendee_id=ProfileId(row.attendee_id),
        ticket_number=TicketNumber(row.ticket_number),
        status=RegistrationStatus(row.status),
        registered_at=row.registered_at,
        checked_in=row.checked_in,
        checked_in_at=row.checked_in_at,
        seat_number=row.seat_number,
    )


def _assignment_to_domain(row: orm.VolunteerAssignment) -> VolunteerAssignment:
    return VolunteerAssignment(
        id=AssignmentId(row.id),
        event_id=EventId(row.event_id),
        volunteer_id=ProfileId(row.volunteer_id),
        assigned_role=row.assigned_role,
        assigned_at=row.assigned_at,
    )


def _task_to_domain(row: orm.Task) -> Task:
    return Task(
        id=TaskId(row.id),
        event_id=EventId(row.event_id),
        title=row.title,
        status=TaskStatus(row.status),
        created_at=row.created_at,
        volunteer_id=ProfileId(row.volunteer_id) if row.volunteer_id else None,
        description=row.description,
        due_date=row.due_date,
        completed_at=row.completed_at,
    )


class DjangoProfileStore(ProfileStore):
    """PostgreSQL-backed profile store using Django ORM."""

    def get_profile(self, profile_id: ProfileId) -> Profile | None:
        row = orm.Profile.objects.filter(pk=profile_id.value).first()
        return _profile_to_domain(row) if row else None

    def create_profile(self, profile: Profile) -> Profile:
        try:
            with transaction.atomic():
                row = orm.Profile.objects.create(
                    id=profile.id.value,
                    email=profile.email,
                    full_name=profile.full_name,
                    role=profile.role.value,
                    phone=profile.phone,
                    company=profile.company,
                    skills=list(profile.skills),
                    profile_picture_url=profile.profile_picture_url,
                )
        except IntegrityError as exc:
            raise DuplicateProfileError(str(profile.id)) from exc
        return _profile_to_domain(row)

    def update_profile(self, profile: Profile) -> Profile:
        row = orm.Profile.objects.get(pk=profile.id.value)
        row.full_name = profile.full_name
        row.phone = profile.phone
        row.company = profile.company
        row.skills = list(profile.skills)
        row.profile_picture_url = profile.profile_picture_url
        row.save(
            update_fields=[
                "full_name",
                "phone",
                "company",
                "skills",
                "profile_picture_url",
                "updated_at",
            ]
        )
        return _profile_to_domain(row)


class DjangoEventStore(EventStore):
    """PostgreSQL-backed event store using Django ORM."""

    def list_events(
        self,
        *,
        organizer_id: ProfileId | None = None,
        status: EventStatus | None = None,
        event_ids: Iterable[EventId] | None = None,
    ) -> list[Event]:
        rows = orm.Event.objects.all()
        if organizer_id is not None:
            rows = rows.filter(organizer_id=organizer_id.value)
        if status is not None:
            rows = rows.filter(status=status.value)
        if event_ids is not None:
            rows = rows.filter(pk__in=[event_id.value for event_id in event_ids])
        return [_event_to_domain(row) for row in rows.order_by("starts_at")]

    def get_event(self, event_id: EventId) -> Event | None:
        row = orm.Event.objects.filter(pk=event_id.value).first()
        return _event_to_domain(row) if row else None

    def add_event(self, event: Event) -> Event:
        row = orm.Event.objects.create(
            id=event.id.value,
            organizer_id=event.organizer_id.value,
            title=event.title,
            description=event.description,
            category=event.category,
            starts_at=event.starts_at,
            ends_at=event.ends_at,
            venue=event.venue,
            address=event.address,
            capacity=event.capacity.value,
            price=event.price.amount,
            status=event.status.value,
        )
        return _event_to_domain(row)

    def update_event(self, event: Event) -> Event:
        row = orm.Event.objects.get(pk=event.id.value)
        row.title = event.title
        row.description = event.description
        row.category = event.category
        row.starts_at = event.starts_at
        row.ends_at = event.ends_at
        row.venue = event.venue
        row.address = event.address
        row.price = event.price.amount
        row.status = event.status.value
        row.save(
            update_fields=[
                "title",
                "description",
                "category",
                "starts_at",
                "ends_at",
                "venue",
                "address",
                "price",
                "status",
                "updated_at",
            ]
        )
        return _event_to_domain(row)

    def delete_event(self, event_id: EventId) -> None:
        orm.Event.objects.filter(pk=event_id.value).delete()

    def get_scope(self, event_id: EventId) -> EventScope | None:
        organizer_id = (
            orm.Event.objects.filter(pk=event_id.value)
            .values_list("organizer_id", flat=True)
            .first()
        )
        if organizer_id is None:
            return None
        volunteer_ids = orm.VolunteerAssignment.objects.filter(
            event_id=event_id.value
        ).values_list("volunteer_id", flat=True)
        return EventScope(
            event_id=event_id,
            organizer_id=ProfileId(organizer_id),
            volunteer_ids=frozenset(ProfileId(value) for value in volunteer_ids),
        )


class DjangoRegistrationStore(RegistrationStore):
    """PostgreSQL-backed registration store using Django ORM.

    ``seat_lock`` runs inside ``transaction.atomic()`` and holds
    ``SELECT ... FOR UPDATE`` on the event row, so every booking for one event
    counts and takes seats in turn.
    """

    @contextmanager
    def seat_lock(self, event_id: EventId) -> Iterator[Event | None]:
        try:
            with transaction.atomic():
                row = orm.Event.objects.select_for_update().filter(pk=event_id.value).first()
                yield _event_to_domain(row) if row else None
        except OperationalError as exc:
            raise ConflictRetryError() from exc

    def count_occupied(self, event_id: EventId) -> int:
        return orm.Registration.objects.filter(
            event_id=event_id.value, status__in=_OCCUPYING_VALUES
        ).count()

    def find_active_registration(
        self, event_id: EventId, attendee_id: ProfileId
    ) -> Registration | None:
        row = (
            orm.Registration.objects.filter(event_id=event_id.value, attendee_id=attendee_id.value)
            .exclude(status=RegistrationStatus.CANCELLED.value)
            .first()
        )
        return _registration_to_domain(row) if row else None

    def ticket_exists(self, ticket_number: TicketNumber) -> bool:
        return orm.Registration.objects.filter(ticket_number=ticket_number.value).exists()

    def add_registration(self, registration: Registration) -> Registration:
        try:
            with transaction.atomic():
                row = orm.Registration.objects.create(
                    id=registration.id.value,
                    event_id=registration.event_id.value,
                    attendee_id=registration.attendee_id.value,
                    registered_at=registration.registered_at,
                    status=registration.status.value,
                    ticket_number=registration.ticket_number.value,
                    seat_number=registration.seat_number,
                    checked_in=registration.checked_in,
                    checked_in_at=registration.checked_in_at,
                )
        except IntegrityError as exc:
            raise ConflictRetryError() from exc
        return _registration_to_domain(row)

    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        row = orm.Registration.objects.filter(pk=registration_id.value).first()
        return _registration_to_domain(row) if row else None

    def update_registration(
        self, registration: Registration, *, expected_status: RegistrationStatus
    ) -> Registration:
        try:
            updated = orm.Registration.objects.filter(
                pk=registration.id.value, status=expected_status.value
            ).update(
                status=registration.status.value,
                checked_in=registration.checked_in,
                checked_in_at=registration.checked_in_at,
            )
        except (IntegrityError, OperationalError) as exc:
            raise ConflictRetryError() from exc
        if updated != 1:
            raise ConflictRetryError()
        return _registration_to_domain(orm.Registration.objects.get(pk=registration.id.value))

    def list_for_attendee(self, attendee_id: ProfileId) -> list[Registration]:
        rows = orm.Registration.objects.filter(attendee_id=attendee_id.value)
        return [_registration_to_domain(row) for row in rows.order_by("-registered_at")]

    def list_for_event(self, event_id: EventId) -> list[Registration]:
        rows = orm.Registration.objects.filter(event_id=event_id.value)
        return [_registration_to_domain(row) for row in rows.order_by("-registered_at")]


class DjangoAssignmentStore(AssignmentStore):
    """PostgreSQL-backed volunteer assignment store using Django ORM."""

    def get_assignment(self, assignment_id: AssignmentId) -> VolunteerAssignment | None:
        row = orm.VolunteerAssignment.objects.filter(pk=assignment_id.value).first()
        return _assignment_to_domain(row) if row else None

    def find_assignment(
        self, event_id: EventId, volunteer_id: ProfileId
    ) -> VolunteerAssignment | None:
        row = orm.VolunteerAssignment.objects.filter(
            event_id=event_id.value, volunteer_id=volunteer_id.value
        ).first()
        return _assignment_to_domain(row) if row else None

    def add_assignment(self, assignment: VolunteerAssignment) -> VolunteerAssignment:
        try:
            with transaction.atomic():
                row = orm.VolunteerAssignment.objects.create(
                    id=assignment.id.value,
                    event_id=assignment.event_id.value,
                    volunteer_id=assignment.volunteer_id.value,
                    assigned_role=assignment.assigned_role,
                    assigned_at=assignment.assigned_at,
                )
        except IntegrityError as exc:
            raise AlreadyAssignedError(str(assignment.event_id)) from exc
        return _assignment_to_domain(row)

    def delete_assignment(self, assignment_id: AssignmentId) -> None:
        orm.VolunteerAssignment.objects.filter(pk=assignment_id.value).delete()

    def list_assignments(
        self, *, event_id: EventId | None = None, volunteer_id: ProfileId | None = None
    ) -> list[VolunteerAssignment]:
        rows = orm.VolunteerAssignment.objects.all()
        if event_id is not None:
            rows = rows.filter(event_id=event_id.value)
        if volunteer_id is not None:
            rows = rows.filter(volunteer_id=volunteer_id.value)
        return [_assignment_to_domain(row) for row in rows.order_by("assigned_at")]


class DjangoTaskStore(TaskStore):
    """PostgreSQL-backed task store using Django ORM."""

    def get_task(self, task_id: TaskId) -> Task | None:
        row = orm.Task.objects.filter(pk=task_id.value).first()
        return _task_to_domain(row) if row else None

    def add_task(self, task: Task) -> Task:
        row = orm.Task.objects.create(
            id=task.id.value,
            event_id=task.event_id.value,
            volunteer_id=task.volunteer_id.value if task.volunteer_id else None,
            title=task.title,
            description=task.description,
            status=task.status.value,
            due_date=task.due_date,
            completed_at=task.completed_at,
            created_at=task.created_at,
        )
        return _task_to_domain(row)

    def update_task(self, task: Task) -> Task:
        orm.Task.objects.filter(pk=task.id.value).update(
            volunteer_id=task.volunteer_id.value if task.volunteer_id else None,
            title=task.title,
            description=task.description,
            status=task.status.value,
            due_date=task.due_date,
            completed_at=task.completed_at,
        )
        return _task_to_domain(orm.Task.objects.get(pk=task.id.value))

    def delete_task(self, task_id: TaskId) -> None:
        orm.Task.objects.filter(pk=task_id.value).delete()

    def list_tasks(
        self, *, event_id: EventId | None = None, volunteer_id: ProfileId | None = None
    ) -> list[Task]:
        rows = orm.Task.objects.all()
        if event_id is not None:
            rows = rows.filter(event_id=event_id.value)
        if volunteer_id is not None:
            rows = rows.filter(volunteer_id=volunteer_id.value)
        rows = rows.order_by(F("due_date").asc(nulls_last=True), "created_at")
        return [_task_to_domain(row) for row in rows]
