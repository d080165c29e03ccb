"""Coordination service: volunteer assignments and event tasks.

Organizers staff their events and hand out tasks; assigned volunteers move
their own tasks along. Every step goes through the policy engine first.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any

from eventdesk.domain import (
    AssignmentId,
    EventId,
    EventScope,
    Operation,
    Profile,
    ProfileId,
    Role,
    Task,
    TaskId,
    TaskStatus,
    VolunteerAssignment,
    can,
)
from eventdesk.domain.errors import (
    AlreadyAssignedError,
    InvalidInputError,
    NotEligibleError,
    NotFoundError,
)
from eventdesk.services.access import ensure_allowed, ensure_visible, parse_id, utcnow
from eventdesk.stores.interfaces import AssignmentStore, EventStore, ProfileStore, TaskStore

logger = logging.getLogger(__name__)

TASK_EDITABLE_FIELDS = frozenset({"title", "description", "due_date"})


def _task_status(value: Any) -> TaskStatus:
    try:
        return value if isinstance(value, TaskStatus) else TaskStatus(value)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown task status: {value}") from exc


class CoordinationService:
    """Service for volunteer assignment and task operations."""

    def __init__(
        self,
        events: EventStore,
        profiles: ProfileStore,
        assignments: AssignmentStore,
        tasks: TaskStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._events = events
        self._profiles = profiles
        self._assignments = assignments
        self._tasks = tasks
        self._clock = clock

    def _scope(self, event_id: EventId) -> EventScope:
        scope = self._events.get_scope(event_id)
        if scope is None:
            raise NotFoundError("Event")
        return scope

    def _organizer_scope(self, actor: Profile | None, event_id: str | EventId) -> EventScope:
        """Return the scope of an event the actor organizes; hide it from anyone else."""
        scope = self._scope(parse_id(EventId, event_id))
        if actor is None or actor.role is not Role.ORGANIZER or actor.id != scope.organizer_id:
            event = self._events.get_event(scope.event_id)
            ensure_visible(actor, event, "Event")
        return scope

    def _volunteer(self, volunteer_id: str | ProfileId) -> Profile:
        profile = self._profiles.get_profile(parse_id(ProfileId, volunteer_id))
        if profile is None or profile.role is not Role.VOLUNTEER:
            raise NotEligibleError("Only volunteers can be assigned")
        return profile

    def _visible_task(self, actor: Profile | None, task_id: str | TaskId) -> tuple[Task, EventScope]:
        task = self._tasks.get_task(parse_id(TaskId, task_id))
        if task is None:
            raise NotFoundError("Task")
        scope = self._scope(task.event_id)
        ensure_visible(actor, task, "Task", scope)
        return task, scope

    # Assignments

    def assign_volunteer(
        self,
        actor: Profile | None,
        event_id: str | EventId,
        volunteer_id: str | ProfileId,
        assigned_role: str,
    ) -> VolunteerAssignment:
        """Assign a volunteer to an event the actor organizes.

        Raises:
            NotFoundError: If the event does not exist or is hidden from the actor.
            ForbiddenError: If the actor does not organize the event.
            NotEligibleError: If the target profile is not a volunteer.
            AlreadyAssignedError: If the volunteer is already assigned to the event.
        """
        scope = self._organizer_scope(actor, event_id)
        volunteer = self._volunteer(volunteer_id)
        if not assigned_role or not assigned_role.strip():
            raise InvalidInputError("assigned_role is required")

        assignment = VolunteerAssignment(
            id=AssignmentId.new(),
            event_id=scope.event_id,
            volunteer_id=volunteer.id,
            assigned_role=assigned_role.strip(),
            assigned_at=self._clock(),
        )
        ensure_allowed(actor, Operation.CREATE, assignment, "Assignment", scope=scope)
        if self._assignments.find_assignment(scope.event_id, volunteer.id):
            raise AlreadyAssignedError(str(scope.event_id))
        created = self._assignments.add_assignment(assignment)
        logger.info(
            "Volunteer %s assigned to event %s as %s", volunteer.id, scope.event_id, created.assigned_role
        )
        return created

    def remove_assignment(self, actor: Profile | None, assignment_id: str | AssignmentId) -> None:
        """Remove a volunteer from an event the actor organizes."""
        assignment = self._assignments.get_assignment(parse_id(AssignmentId, assignment_id))
        if assignment is None:
            raise NotFoundError("Assignment")
        scope = self._scope(assignment.event_id)
        ensure_visible(actor, assignment, "Assignment", scope)
        ensure_allowed(actor, Operation.DELETE, assignment, "Assignment", scope=scope)
        self._assignments.delete_assignment(assignment.id)
        logger.info("Assignment %s removed by %s", assignment.id, actor.id)

    def list_assignments(
        self, actor: Profile | None, event_id: str | EventId | None = None
    ) -> list[VolunteerAssignment]:
        """Return an event's assignments, or the actor's own when no event is given."""
        if actor is None:
            return []
        if event_id is None:
            assignments = self._assignments.list_assignments(volunteer_id=actor.id)
        else:
            assignments = self._assignments.list_assignments(event_id=parse_id(EventId, event_id))
        scopes: dict[EventId, EventScope | None] = {}
        visible = []
        for assignment in assignments:
            if assignment.event_id not in scopes:
                scopes[assignment.event_id] = self._events.get_scope(assignment.event_id)
            if can(actor, Operation.READ, assignment, scope=scopes[assignment.event_id]):
                visible.append(assignment)
        return visible

    # Tasks

    def create_task(
        self,
        actor: Profile | None,
        event_id: str | EventId,
        *,
        title: str,
        description: str | None = None,
        due_date: datetime | None = None,
        volunteer_id: str | ProfileId | None = None,
    ) -> Task:
        """Create a task for an event the actor organizes, optionally assigned.

        Raises:
            NotFoundError: If the event does not exist or is hidden from the actor.
            ForbiddenError: If the actor does not organize the event.
            NotEligibleError: If the volunteer is not assigned to the event.
        """
        scope = self._organizer_scope(actor, event_id)
        if not title or not title.strip():
            raise InvalidInputError("title is required")
        task = Task(
            id=TaskId.new(),
            event_id=scope.event_id,
            title=title.strip(),
            status=TaskStatus.PENDING,
            created_at=self._clock(),
            description=description,
            due_date=due_date,
        )
        ensure_allowed(actor, Operation.CREATE, task, "Task", scope=scope)
        if volunteer_id is not None:
            task = replace(task, volunteer_id=self._assigned_volunteer(scope, volunteer_id))
        created = self._tasks.add_task(task)
        logger.info("Task %s created for event %s", created.id, scope.event_id)
        return created

    def _assigned_volunteer(self, scope: EventScope, volunteer_id: str | ProfileId) -> ProfileId:
        parsed = parse_id(ProfileId, volunteer_id)
        if parsed not in scope.volunteer_ids:
            raise NotEligibleError("Tasks can only go to volunteers assigned to the event")
        return parsed

    def assign_task(
        self,
        actor: Profile | None,
        task_id: str | TaskId,
        volunteer_id: str | ProfileId | None,
    ) -> Task:
        """Hand a task to an assigned volunteer, or take it back with None."""
        task, scope = self._visible_task(actor, task_id)
        assignee = None if volunteer_id is None else self._assigned_volunteer(scope, volunteer_id)
        ensure_allowed(
            actor, Operation.UPDATE, task, "Task", scope=scope, changes={"volunteer_id": assignee}
        )
        updated = self._tasks.update_task(replace(task, volunteer_id=assignee))
        logger.info("Task %s assigned to %s", updated.id, assignee)
        return updated

    def update_task(
        self, actor: Profile | None, task_id: str | TaskId, changes: Mapping[str, Any]
    ) -> Task:
        """Edit title, description or due date of a task."""
        task, scope = self._visible_task(actor, task_id)
        ensure_allowed(actor, Operation.UPDATE, task, "Task", scope=scope, changes=changes)
        unknown = set(changes) - TASK_EDITABLE_FIELDS
        if unknown:
            raise InvalidInputError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        if "title" in changes and not (changes["title"] or "").strip():
            raise InvalidInputError("title cannot be empty")
        return self._tasks.update_task(replace(task, **changes))

    def set_task_status(
        self, actor: Profile | None, task_id: str | TaskId, status: TaskStatus | str
    ) -> Task:
        """Move a task to a new status.

        Completing a task stamps completed_at; moving it back out of completed
        clears the stamp again.

        Raises:
            NotFoundError: If the task does not exist or is hidden from the actor.
            ForbiddenError: If the actor is neither organizer nor the assigned volunteer.
        """
        task, scope = self._visible_task(actor, task_id)
        updated = task.with_status(_task_status(status), self._clock())
        changes = {"status": updated.status, "completed_at": updated.completed_at}
        ensure_allowed(actor, Operation.UPDATE, task, "Task", scope=scope, changes=changes)
        if updated is task:
            return task
        saved = self._tasks.update_task(updated)
        logger.info("Task %s moved to %s by %s", saved.id, saved.status.value, actor.id)
        return saved

    def delete_task(self, actor: Profile | None, task_id: str | TaskId) -> None:
        """Delete a task of an event the actor organizes."""
        task, scope = self._visible_task(actor, task_id)
        ensure_allowed(actor, Operation.DELETE, task, "Task", scope=scope)
        self._tasks.delete_task(task.id)
        logger.info("Task %s deleted by %s", task.id, actor.id)

    def list_tasks(self, actor: Profile | None, event_id: str | EventId | None = None) -> list[Task]:
        """Return an event's tasks, or the actor's own when no event is given."""
        if actor is None:
            return []
        if event_id is None:
            tasks = self._tasks.list_tasks(volunteer_id=actor.id)
        else:
            tasks = self._tasks.list_tasks(event_id=parse_id(EventId, event_id))
        scopes: dict[EventId, EventScope | None] = {}
        visible = []
        for task in tasks:
            if task.event_id not in scopes:
                scopes[task.event_id] = self._events.get_scope(task.event_id)
            if can(actor, Operation.READ, task, scope=scopes[task.event_id]):
                visible.append(task)
        return visible
