"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
The constraints below back the booking invariants at the database level.
"""

import uuid

from django.db import models
from django.db.models import Q

from eventdesk.domain import EventStatus, RegistrationStatus, Role, TaskStatus


def _choices(enum) -> list[tuple[str, str]]:
    return [(member.value, member.value.replace("_", " ").title()) for member in enum]


class Profile(models.Model):
    """Persistence model for profiles. The primary key is the external identity id."""

    id = models.UUIDField(primary_key=True, editable=False)
    email = models.EmailField(max_length=254)
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=50, blank=True, null=True)
    role = models.CharField(max_length=20, choices=_choices(Role), default=Role.ATTENDEE.value)
    company = models.CharField(max_length=255, blank=True, null=True)
    skills = models.JSONField(default=list, blank=True)
    profile_picture_url = models.URLField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "profiles"

    def __str__(self) -> str:
        return f"{self.full_name} ({self.role})"


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organizer = models.ForeignKey(
        Profile, on_delete=models.CASCADE, related_name="organized_events"
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=100)
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField(blank=True, null=True)
    venue = models.CharField(max_length=255)
    address = models.CharField(max_length=500, blank=True, null=True)
    capacity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    status = models.CharField(
        max_length=20, choices=_choices(EventStatus), default=EventStatus.DRAFT.value
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "events"
        ordering = ["starts_at"]
        indexes = [
            models.Index(fields=["organizer"], name="events_organizer_idx"),
            models.Index(fields=["starts_at"], name="events_starts_at_idx"),
            models.Index(fields=["status"], name="events_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(capacity__gt=0), name="event_capacity_positive"),
            models.CheckConstraint(condition=Q(price__gte=0), name="event_price_non_negative"),
        ]

    def __str__(self) -> str:
        return self.title


class Registration(models.Model):
    """Persistence model for event registrations (bookings)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    attendee = models.ForeignKey(
        Profile, on_delete=models.CASCADE, related_name="registrations"
    )
    registered_at = models.DateTimeField()
    status = models.CharField(
        max_length=20,
        choices=_choices(RegistrationStatus),
        default=RegistrationStatus.CONFIRMED.value,
    )
    ticket_number = models.CharField(max_length=32, unique=True)
    seat_number = models.CharField(max_length=20, blank=True, null=True)
    checked_in = models.BooleanField(default=False)
    checked_in_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = "event_registrations"
        ordering = ["-registered_at"]
        indexes = [
            models.Index(fields=["event", "status"], name="registrations_event_idx"),
            models.Index(fields=["attendee"], name="registrations_attendee_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "attendee"],
                condition=~Q(status=RegistrationStatus.CANCELLED.value),
                name="unique_active_registration",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.ticket_number} ({self.status})"


class VolunteerAssignment(models.Model):
    """Persistence model for volunteer-to-event assignments."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="assignments")
    volunteer = models.ForeignKey(
        Profile, on_delete=models.CASCADE, related_name="assignments"
    )
    assigned_role = models.CharField(max_length=100)
    assigned_at = models.DateTimeField()

    class Meta:
        db_table = "volunteer_assignments"
        ordering = ["assigned_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "volunteer"], name="unique_assignment"),
        ]

    def __str__(self) -> str:
        return f"{self.volunteer} - {self.assigned_role}"


class Task(models.Model):
    """Persistence model for event tasks."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tasks")
    volunteer = models.ForeignKey(
        Profile, on_delete=models.CASCADE, related_name="tasks", blank=True, null=True
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    status = models.CharField(
        max_length=20, choices=_choices(TaskStatus), default=TaskStatus.PENDING.value
    )
    due_date = models.DateTimeField(blank=True, null=True)
    completed_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField()

    class Meta:
        db_table = "event_tasks"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["event"], name="tasks_event_idx"),
            models.Index(fields=["volunteer"], name="tasks_volunteer_idx"),
        ]

    def __str__(self) -> str:
        return self.title
