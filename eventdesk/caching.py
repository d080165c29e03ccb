"""Cache keys for the published catalog and per-event seat availability."""

from django.conf import settings
from django.core.cache import cache

PUBLISHED_EVENTS_KEY = "events:list"


def availability_key(event_id: object) -> str:
    return f"events:{event_id}:availability"


def cache_timeout() -> int:
    return settings.CATALOG_CACHE_SECONDS


def invalidate_catalog() -> None:
    cache.delete(PUBLISHED_EVENTS_KEY)


def invalidate_availability(event_id: object) -> None:
    cache.delete(availability_key(event_id))
