from eventdesk.services.booking_service import BookingService
from eventdesk.services.coordination_service import CoordinationService
from eventdesk.services.event_service import EventService
from eventdesk.services.identity_service import IdentityService
from eventdesk.services.profile_service import ProfileService

__all__ = [
    "BookingService",
    "CoordinationService",
    "EventService",
    "IdentityService",
    "ProfileService",
]
