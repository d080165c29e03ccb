"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses (via the exception handler)
- Never contain business logic
- Never expose internal error details
"""

from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from eventdesk.caching import (
    PUBLISHED_EVENTS_KEY,
    availability_key,
    cache_timeout,
    invalidate_availability,
)
from eventdesk.domain import IdentityCreated, Profile, Role
from eventdesk.handlers import dependencies
from eventdesk.handlers.permissions import HasWebhookSecret
from eventdesk.handlers.serializers import (
    AssignmentCreateSerializer,
    AssignmentSerializer,
    AvailabilitySerializer,
    CheckInSerializer,
    EventCreateSerializer,
    EventQuerySerializer,
    EventSerializer,
    EventUpdateSerializer,
    IdentityCreatedSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    RegistrationSerializer,
    TaskAssignSerializer,
    TaskCreateSerializer,
    TaskSerializer,
    TaskStatusSerializer,
    TaskUpdateSerializer,
)


def _actor(request: Request) -> Profile | None:
    return getattr(request.user, "profile", None)


def _validated(serializer_class, request: Request) -> dict:
    serializer = serializer_class(data=request.data)
    serializer.is_valid(raise_exception=True)
    return dict(serializer.validated_data)


# Identity


class IdentityUserCreatedView(APIView):
    """Handler for POST /api/identity/user-created (identity provider webhook)"""

    authentication_classes = []
    permission_classes = [HasWebhookSecret]

    def post(self, request: Request) -> Response:
        data = _validated(IdentityCreatedSerializer, request)
        profile = dependencies.identity_service().provision(
            IdentityCreated(
                identity_id=data["identity_id"],
                email=data["email"],
                metadata=data["metadata"],
            )
        )
        return Response(ProfileSerializer(profile).data, status=status.HTTP_200_OK)


class MeView(APIView):
    """Handler for GET/PATCH /api/me"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        actor = _actor(request)
        profile = dependencies.profile_service().get_profile(actor, actor.id)
        return Response(ProfileSerializer(profile).data)

    def patch(self, request: Request) -> Response:
        changes = _validated(ProfileUpdateSerializer, request)
        profile = dependencies.profile_service().update_profile(_actor(request), changes)
        return Response(ProfileSerializer(profile).data)


# Events


class EventListView(APIView):
    """Handler for GET/POST /api/events

    Anonymous callers and attendees get the published catalog. The
    unfiltered catalog is cached until an event changes; ``q``, ``category``
    and ``status`` narrow the listing.
    """

    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request: Request) -> Response:
        actor = _actor(request)
        params = EventQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        query = params.to_query()
        cacheable = query.is_empty and (actor is None or actor.role is Role.ATTENDEE)
        if cacheable:
            cached = cache.get(PUBLISHED_EVENTS_KEY)
            if cached is not None:
                return Response(cached)
        events = dependencies.event_service().list_events(actor, query)
        data = EventSerializer(events, many=True).data
        if cacheable:
            cache.set(PUBLISHED_EVENTS_KEY, data, cache_timeout())
        return Response(data)

    def post(self, request: Request) -> Response:
        data = _validated(EventCreateSerializer, request)
        event = dependencies.event_service().create_event(_actor(request), **data)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class RecommendedEventsView(APIView):
    """Handler for GET /api/events/recommended"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        events = dependencies.event_service().recommended_events(_actor(request))
        return Response(EventSerializer(events, many=True).data)


class EventDetailView(APIView):
    """Handler for GET/PATCH/DELETE /api/events/{event_id}"""

    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request: Request, event_id: str) -> Response:
        event = dependencies.event_service().get_event(_actor(request), event_id)
        return Response(EventSerializer(event).data)

    def patch(self, request: Request, event_id: str) -> Response:
        changes = _validated(EventUpdateSerializer, request)
        event = dependencies.event_service().update_event(_actor(request), event_id, changes)
        return Response(EventSerializer(event).data)

    def delete(self, request: Request, event_id: str) -> Response:
        dependencies.event_service().delete_event(_actor(request), event_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventAvailabilityView(APIView):
    """Handler for GET /api/events/{event_id}/availability"""

    def get(self, request: Request, event_id: str) -> Response:
        service = dependencies.event_service()
        event = service.get_event(_actor(request), event_id)
        key = availability_key(event.id)
        data = cache.get(key)
        if data is None:
            data = AvailabilitySerializer(service.get_availability(_actor(request), event.id)).data
            cache.set(key, data, cache_timeout())
        return Response(data)


# Registrations


class EventRegistrationsView(APIView):
    """Handler for GET/POST /api/events/{event_id}/registrations"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, event_id: str) -> Response:
        registrations = dependencies.booking_service().list_event_registrations(
            _actor(request), event_id
        )
        return Response(RegistrationSerializer(registrations, many=True).data)

    def post(self, request: Request, event_id: str) -> Response:
        registration = dependencies.booking_service().book(_actor(request), event_id)
        return Response(RegistrationSerializer(registration).data, status=status.HTTP_201_CREATED)


class MyRegistrationsView(APIView):
    """Handler for GET /api/registrations"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        registrations = dependencies.booking_service().list_my_registrations(_actor(request))
        return Response(RegistrationSerializer(registrations, many=True).data)


class RegistrationDetailView(APIView):
    """Handler for GET /api/registrations/{registration_id}"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, registration_id: str) -> Response:
        registration = dependencies.booking_service().get_registration(
            _actor(request), registration_id
        )
        return Response(RegistrationSerializer(registration).data)


class RegistrationActionView(APIView):
    """Base for registration lifecycle actions.

    Lifecycle updates are conditional ``UPDATE`` statements that fire no model
    signals, so availability is invalidated here.
    """

    permission_classes = [IsAuthenticated]

    def perform(self, request: Request, registration_id: str):
        raise NotImplementedError

    def post(self, request: Request, registration_id: str) -> Response:
        registration = self.perform(request, registration_id)
        invalidate_availability(registration.event_id)
        return Response(RegistrationSerializer(registration).data)


class RegistrationCancelView(RegistrationActionView):
    """Handler for POST /api/registrations/{registration_id}/cancel"""

    def perform(self, request: Request, registration_id: str):
        return dependencies.booking_service().cancel(_actor(request), registration_id)


class RegistrationCheckInView(RegistrationActionView):
    """Handler for POST /api/registrations/{registration_id}/check-in"""

    def perform(self, request: Request, registration_id: str):
        data = _validated(CheckInSerializer, request)
        return dependencies.booking_service().check_in(
            _actor(request), registration_id, mark_attended=data["mark_attended"]
        )


class RegistrationConfirmView(RegistrationActionView):
    """Handler for POST /api/registrations/{registration_id}/confirm"""

    def perform(self, request: Request, registration_id: str):
        return dependencies.booking_service().confirm(_actor(request), registration_id)


# Assignments


class EventAssignmentsView(APIView):
    """Handler for GET/POST /api/events/{event_id}/assignments"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, event_id: str) -> Response:
        assignments = dependencies.coordination_service().list_assignments(
            _actor(request), event_id
        )
        return Response(AssignmentSerializer(assignments, many=True).data)

    def post(self, request: Request, event_id: str) -> Response:
        data = _validated(AssignmentCreateSerializer, request)
        assignment = dependencies.coordination_service().assign_volunteer(
            _actor(request), event_id, data["volunteer_id"], data["assigned_role"]
        )
        return Response(AssignmentSerializer(assignment).data, status=status.HTTP_201_CREATED)


class AssignmentDetailView(APIView):
    """Handler for DELETE /api/assignments/{assignment_id}"""

    permission_classes = [IsAuthenticated]

    def delete(self, request: Request, assignment_id: str) -> Response:
        dependencies.coordination_service().remove_assignment(_actor(request), assignment_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


# Tasks


class EventTasksView(APIView):
    """Handler for GET/POST /api/events/{event_id}/tasks"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, event_id: str) -> Response:
        tasks = dependencies.coordination_service().list_tasks(_actor(request), event_id)
        return Response(TaskSerializer(tasks, many=True).data)

    def post(self, request: Request, event_id: str) -> Response:
        data = _validated(TaskCreateSerializer, request)
        task = dependencies.coordination_service().create_task(_actor(request), event_id, **data)
        return Response(TaskSerializer(task).data, status=status.HTTP_201_CREATED)


class MyTasksView(APIView):
    """Handler for GET /api/tasks"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        tasks = dependencies.coordination_service().list_tasks(_actor(request))
        return Response(TaskSerializer(tasks, many=True).data)


class TaskDetailView(APIView):
    """Handler for PATCH/DELETE /api/tasks/{task_id}"""

    permission_classes = [IsAuthenticated]

    def patch(self, request: Request, task_id: str) -> Response:
        changes = _validated(TaskUpdateSerializer, request)
        task = dependencies.coordination_service().update_task(_actor(request), task_id, changes)
        return Response(TaskSerializer(task).data)

    def delete(self, request: Request, task_id: str) -> Response:
        dependencies.coordination_service().delete_task(_actor(request), task_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TaskAssignView(APIView):
    """Handler for POST /api/tasks/{task_id}/assign"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, task_id: str) -> Response:
        data = _validated(TaskAssignSerializer, request)
        task = dependencies.coordination_service().assign_task(
            _actor(request), task_id, data["volunteer_id"]
        )
        return Response(TaskSerializer(task).data)


class TaskStatusView(APIView):
    """Handler for POST /api/tasks/{task_id}/status"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, task_id: str) -> Response:
        data = _validated(TaskStatusSerializer, request)
        task = dependencies.coordination_service().set_task_status(
            _actor(request), task_id, data["status"]
        )
        return Response(TaskSerializer(task).data)
