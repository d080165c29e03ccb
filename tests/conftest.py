"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import jwt
import pytest
from django.conf import settings
from rest_framework.test import APIClient

from eventdesk.domain import (
    Capacity,
    Event,
    EventId,
    EventStatus,
    Money,
    Profile,
    ProfileId,
    Role,
)
from eventdesk.services import (
    BookingService,
    CoordinationService,
    EventService,
    IdentityService,
    ProfileService,
)
from eventdesk.stores import InMemoryStore

NOW = datetime(2030, 1, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


# In-memory core


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def make_profile(store: InMemoryStore):
    def _make(role: Role = Role.ATTENDEE, **overrides) -> Profile:
        profile_id = ProfileId.new()
        values = {
            "id": profile_id,
            "email": f"{profile_id.value.hex[:8]}@example.com",
            "full_name": f"{role.value.title()} {profile_id.value.hex[:4]}",
            "role": role,
            "created_at": NOW,
            "updated_at": NOW,
        }
        values.update(overrides)
        return store.create_profile(Profile(**values))

    return _make


@pytest.fixture
def organizer(make_profile) -> Profile:
    return make_profile(Role.ORGANIZER)


@pytest.fixture
def volunteer(make_profile) -> Profile:
    return make_profile(Role.VOLUNTEER)


@pytest.fixture
def attendee(make_profile) -> Profile:
    return make_profile(Role.ATTENDEE)


@pytest.fixture
def make_event(store: InMemoryStore, organizer: Profile):
    def _make(
        capacity: int = 10,
        status: EventStatus = EventStatus.PUBLISHED,
        starts_at: datetime | None = None,
        owner: Profile | None = None,
        **overrides,
    ) -> Event:
        values = {
            "id": EventId.new(),
            "organizer_id": (owner or organizer).id,
            "title": "Community Meetup",
            "category": "meetup",
            "starts_at": starts_at or NOW + timedelta(days=7),
            "venue": "Main Hall",
            "capacity": Capacity(capacity),
            "price": Money(Decimal("0.00")),
            "status": status,
            "created_at": NOW,
            "updated_at": NOW,
        }
        values.update(overrides)
        return store.add_event(Event(**values))

    return _make


@pytest.fixture
def identity_service(store, clock) -> IdentityService:
    return IdentityService(store, clock=clock)


@pytest.fixture
def profile_service(store, clock) -> ProfileService:
    return ProfileService(store, clock=clock)


@pytest.fixture
def event_service(store, clock) -> EventService:
    return EventService(store, store, store, clock=clock)


@pytest.fixture
def booking_service(store, clock) -> BookingService:
    return BookingService(store, store, clock=clock, retry_backoff_seconds=0)


@pytest.fixture
def coordination_service(store, clock) -> CoordinationService:
    return CoordinationService(store, store, store, store, clock=clock)


# Database and API


def token_for(identity_id, **claims) -> str:
    payload = {
        "sub": str(identity_id),
        "aud": settings.IDENTITY_JWT_AUDIENCE,
        "exp": datetime.now(UTC) + timedelta(hours=1),
    }
    payload.update(claims)
    return jwt.encode(payload, settings.IDENTITY_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def db_profile(db):
    from eventdesk import models as orm

    def _make(role: Role = Role.ATTENDEE, **overrides) -> orm.Profile:
        identity_id = uuid4()
        values = {
            "id": identity_id,
            "email": f"{identity_id.hex[:8]}@example.com",
            "full_name": f"{role.value.title()} {identity_id.hex[:4]}",
            "role": role.value,
        }
        values.update(overrides)
        return orm.Profile.objects.create(**values)

    return _make


@pytest.fixture
def db_event(db):
    from eventdesk import models as orm

    def _make(organizer, capacity: int = 10, status: EventStatus = EventStatus.PUBLISHED, **overrides):
        values = {
            "organizer": organizer,
            "title": "Community Meetup",
            "category": "meetup",
            "starts_at": datetime.now(UTC) + timedelta(days=30),
            "venue": "Main Hall",
            "capacity": capacity,
            "price": Decimal("15.00"),
            "status": status.value,
        }
        values.update(overrides)
        return orm.Event.objects.create(**values)

    return _make


@pytest.fixture
def client_for():
    def _make(profile) -> APIClient:
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token_for(profile.id)}")
        return client

    return _make


@pytest.fixture
def make_token():
    return token_for
