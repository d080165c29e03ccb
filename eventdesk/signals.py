"""Django signals for cache invalidation.

Invalidation runs once the surrounding transaction commits, so a reader
cannot re-cache rows from a booking that is still inside its seat lock.
Conditional registration updates go through ``QuerySet.update`` and fire no
signals; the views invalidate availability for those themselves.
"""

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from eventdesk.caching import invalidate_availability, invalidate_catalog
from eventdesk.models import Event, Registration


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate the catalog and availability when an event is saved or deleted."""
    event_id = instance.pk

    def invalidate():
        invalidate_catalog()
        invalidate_availability(event_id)

    transaction.on_commit(invalidate)


@receiver([post_save, post_delete], sender=Registration)
def invalidate_registration_cache(sender, instance, **kwargs):
    """Invalidate the event's availability when a registration is saved or deleted."""
    event_id = instance.event_id
    transaction.on_commit(lambda: invalidate_availability(event_id))
