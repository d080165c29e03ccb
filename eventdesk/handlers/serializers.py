"""Serializers for transforming domain models to API responses and validating input.

Output serializers read straight off the frozen domain dataclasses; value
objects are unwrapped with dotted sources. Input serializers only check
shape and types, the services enforce every business rule.
"""

from rest_framework import serializers

from eventdesk.domain import EventQuery, EventStatus, EventTiming, TaskStatus


def _values(enum) -> list[str]:
    return [member.value for member in enum]


class ProfileSerializer(serializers.Serializer):
    """Serializer for Profile domain model."""

    id = serializers.UUIDField(source="id.value")
    email = serializers.EmailField()
    full_name = serializers.CharField()
    phone = serializers.CharField(allow_null=True)
    role = serializers.CharField(source="role.value")
    company = serializers.CharField(allow_null=True)
    skills = serializers.ListField(child=serializers.CharField())
    profile_picture_url = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    organizer_id = serializers.UUIDField(source="organizer_id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    category = serializers.CharField()
    starts_at = serializers.DateTimeField()
    ends_at = serializers.DateTimeField(allow_null=True)
    venue = serializers.CharField()
    address = serializers.CharField(allow_null=True)
    capacity = serializers.IntegerField(source="capacity.value")
    price = serializers.DecimalField(source="price.amount", max_digits=10, decimal_places=2)
    status = serializers.CharField(source="status.value")
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class AvailabilitySerializer(serializers.Serializer):
    event_id = serializers.UUIDField(source="event_id.value")
    capacity = serializers.IntegerField()
    occupied = serializers.IntegerField()
    available = serializers.IntegerField()


class RegistrationSerializer(serializers.Serializer):
    """Serializer for Registration domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    attendee_id = serializers.UUIDField(source="attendee_id.value")
    ticket_number = serializers.CharField(source="ticket_number.value")
    status = serializers.CharField(source="status.value")
    seat_number = serializers.CharField(allow_null=True)
    checked_in = serializers.BooleanField()
    checked_in_at = serializers.DateTimeField(allow_null=True)
    registered_at = serializers.DateTimeField()


class AssignmentSerializer(serializers.Serializer):
    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    volunteer_id = serializers.UUIDField(source="volunteer_id.value")
    assigned_role = serializers.CharField()
    assigned_at = serializers.DateTimeField()


class TaskSerializer(serializers.Serializer):
    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    volunteer_id = serializers.SerializerMethodField()
    title = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    status = serializers.CharField(source="status.value")
    due_date = serializers.DateTimeField(allow_null=True)
    completed_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()

    def get_volunteer_id(self, task) -> str | None:
        return str(task.volunteer_id) if task.volunteer_id else None


# Input


class IdentityCreatedSerializer(serializers.Serializer):
    """Payload of the identity provider's "user created" webhook.

    ``identity_id`` and ``email`` stay loosely typed so that malformed values
    reach the identity bridge and are reported as provisioning failures.
    """

    identity_id = serializers.CharField()
    email = serializers.CharField(required=False, allow_blank=True, default="")
    metadata = serializers.DictField(required=False, default=dict)


class ProfileUpdateSerializer(serializers.Serializer):
    full_name = serializers.CharField(required=False, max_length=255)
    phone = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=50)
    company = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=255)
    skills = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    profile_picture_url = serializers.URLField(required=False, allow_null=True, max_length=500)
    # Accepted so that the profile service can reject it.
    role = serializers.CharField(required=False)


class EventCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    category = serializers.CharField(max_length=100)
    starts_at = serializers.DateTimeField()
    ends_at = serializers.DateTimeField(required=False, allow_null=True, default=None)
    venue = serializers.CharField(max_length=255)
    address = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    capacity = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, default=0)
    status = serializers.ChoiceField(
        choices=[EventStatus.DRAFT.value, EventStatus.PUBLISHED.value],
        required=False,
        default=EventStatus.DRAFT.value,
    )


class EventUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(required=False, max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False, max_length=100)
    starts_at = serializers.DateTimeField(required=False)
    ends_at = serializers.DateTimeField(required=False, allow_null=True)
    venue = serializers.CharField(required=False, max_length=255)
    address = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    # Accepted so that the event service can reject it.
    capacity = serializers.IntegerField(required=False)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    status = serializers.ChoiceField(choices=_values(EventStatus), required=False)


class CheckInSerializer(serializers.Serializer):
    mark_attended = serializers.BooleanField(required=False, default=True)


class AssignmentCreateSerializer(serializers.Serializer):
    volunteer_id = serializers.UUIDField()
    assigned_role = serializers.CharField(max_length=100)


class TaskCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    due_date = serializers.DateTimeField(required=False, allow_null=True, default=None)
    volunteer_id = serializers.UUIDField(required=False, allow_null=True, default=None)


class TaskUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(required=False, max_length=255)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    due_date = serializers.DateTimeField(required=False, allow_null=True)


class TaskStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=_values(TaskStatus))


class TaskAssignSerializer(serializers.Serializer):
    volunteer_id = serializers.UUIDField(allow_null=True)


class EventQuerySerializer(serializers.Serializer):
    """Catalog query string; ``status`` also accepts ``upcoming`` and ``past``."""

    q = serializers.CharField(required=False, allow_blank=True, max_length=255)
    category = serializers.CharField(required=False, allow_blank=True, max_length=100)
    status = serializers.ChoiceField(
        choices=_values(EventStatus) + _values(EventTiming), required=False
    )

    def to_query(self) -> EventQuery:
        data = self.validated_data
        status = data.get("status")
        timings = _values(EventTiming)
        return EventQuery(
            search=data.get("q") or None,
            category=data.get("category") or None,
            status=EventStatus(status) if status and status not in timings else None,
            timing=EventTiming(status) if status in timings else None,
        )
