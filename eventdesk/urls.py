from django.urls import path

from eventdesk.handlers.views import (
    AssignmentDetailView,
    EventAssignmentsView,
    EventAvailabilityView,
    EventDetailView,
    EventListView,
    EventRegistrationsView,
    EventTasksView,
    IdentityUserCreatedView,
    MeView,
    MyRegistrationsView,
    MyTasksView,
    RecommendedEventsView,
    RegistrationCancelView,
    RegistrationCheckInView,
    RegistrationConfirmView,
    RegistrationDetailView,
    TaskAssignView,
    TaskDetailView,
    TaskStatusView,
)

urlpatterns = [
    path("identity/user-created", IdentityUserCreatedView.as_view(), name="identity-user-created"),
    path("me", MeView.as_view(), name="me"),
    path("events", EventListView.as_view(), name="event-list"),
    path("events/recommended", RecommendedEventsView.as_view(), name="event-recommended"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/availability",
        EventAvailabilityView.as_view(),
        name="event-availability",
    ),
    path(
        "events/<str:event_id>/registrations",
        EventRegistrationsView.as_view(),
        name="event-registrations",
    ),
    path(
        "events/<str:event_id>/assignments",
        EventAssignmentsView.as_view(),
        name="event-assignments",
    ),
    path("events/<str:event_id>/tasks", EventTasksView.as_view(), name="event-tasks"),
    path("registrations", MyRegistrationsView.as_view(), name="registration-list"),
    path(
        "registrations/<str:registration_id>",
        RegistrationDetailView.as_view(),
        name="registration-detail",
    ),
    path(
        "registrations/<str:registration_id>/cancel",
        RegistrationCancelView.as_view(),
        name="registration-cancel",
    ),
    path(
        "registrations/<str:registration_id>/check-in",
        RegistrationCheckInView.as_view(),
        name="registration-check-in",
    ),
    path(
        "registrations/<str:registration_id>/confirm",
        RegistrationConfirmView.as_view(),
        name="registration-confirm",
    ),
    path(
        "assignments/<str:assignment_id>",
        AssignmentDetailView.as_view(),
        name="assignment-detail",
    ),
    path("tasks", MyTasksView.as_view(), name="task-list"),
    path("tasks/<str:task_id>", TaskDetailView.as_view(), name="task-detail"),
    path("tasks/<str:task_id>/assign", TaskAssignView.as_view(), name="task-assign"),
    path("tasks/<str:task_id>/status", TaskStatusView.as_view(), name="task-status"),
]
