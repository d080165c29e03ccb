"""Wires services to the Django ORM stores and project settings."""

from django.conf import settings

from eventdesk.services import (
    BookingService,
    CoordinationService,
    EventService,
    IdentityService,
    ProfileService,
)
from eventdesk.stores.django_store import (
    DjangoAssignmentStore,
    DjangoEventStore,
    DjangoProfileStore,
    DjangoRegistrationStore,
    DjangoTaskStore,
)


def identity_service() -> IdentityService:
    return IdentityService(DjangoProfileStore())


def profile_service() -> ProfileService:
    return ProfileService(DjangoProfileStore())


def event_service() -> EventService:
    return EventService(DjangoEventStore(), DjangoRegistrationStore(), DjangoAssignmentStore())


def booking_service() -> BookingService:
    return BookingService(
        DjangoEventStore(),
        DjangoRegistrationStore(),
        retry_attempts=settings.BOOKING_RETRY_ATTEMPTS,
        retry_backoff_seconds=settings.BOOKING_RETRY_BACKOFF_SECONDS,
    )


def coordination_service() -> CoordinationService:
    return CoordinationService(
        DjangoEventStore(), DjangoProfileStore(), DjangoAssignmentStore(), DjangoTaskStore()
    )
