"""Domain error codes for the eventdesk core.

Every failure the core reports is one of these typed errors; handlers map the
code to an HTTP status and never expose anything beyond ``message``.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    NOT_ELIGIBLE = "NOT_ELIGIBLE"
    EVENT_NOT_BOOKABLE = "EVENT_NOT_BOOKABLE"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    ALREADY_ASSIGNED = "ALREADY_ASSIGNED"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    PROVISIONING_FAILED = "PROVISIONING_FAILED"
    CONFLICT_RETRY = "CONFLICT_RETRY"
    INVALID_ID = "INVALID_ID"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_TRANSITION = "INVALID_TRANSITION"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """Raised when a resource is absent or hidden from the actor.

    The two cases share one error so callers cannot discover rows they
    are not allowed to see.
    """

    def __init__(self, resource: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"{resource} not found",
        )
        self.resource = resource


class ForbiddenError(DomainError):
    """Raised when the policy engine denies an operation on a visible resource."""

    def __init__(self, operation: str, resource: str) -> None:
        super().__init__(
            code=ErrorCode.FORBIDDEN,
            message=f"Not allowed to {operation} this {resource.lower()}",
        )
        self.operation = operation
        self.resource = resource


class NotEligibleError(DomainError):
    """Raised when a profile's role does not fit the operation."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.NOT_ELIGIBLE, message=message)


class EventNotBookableError(DomainError):
    """Raised when an event is not published or has already started."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_BOOKABLE,
            message="Event is not open for booking",
        )
        self.event_id = event_id


class AlreadyRegisteredError(DomainError):
    """Raised when the attendee already holds an active registration."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_REGISTERED,
            message="Already registered for this event",
        )
        self.event_id = event_id


class AlreadyAssignedError(DomainError):
    """Raised when a volunteer is already assigned to the event."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_ASSIGNED,
            message="Volunteer is already assigned to this event",
        )
        self.event_id = event_id


class CapacityExceededError(DomainError):
    """Raised when every seat of the event is taken."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_EXCEEDED,
            message="Event is fully booked",
        )
        self.event_id = event_id


class ProvisioningError(DomainError):
    """Raised when a profile cannot be created for an external identity."""

    def __init__(self, message: str, identity_id: str = "") -> None:
        super().__init__(code=ErrorCode.PROVISIONING_FAILED, message=message)
        self.identity_id = identity_id


class DuplicateProfileError(ProvisioningError):
    """Raised by stores when the identity already has a profile."""

    def __init__(self, identity_id: str) -> None:
        super().__init__("Profile already exists for identity", identity_id)


class ConflictRetryError(DomainError):
    """Raised on a transient write conflict; safe to retry."""

    def __init__(self, message: str = "Concurrent update detected, please retry") -> None:
        super().__init__(code=ErrorCode.CONFLICT_RETRY, message=message)


class InvalidIdError(DomainError):
    """Raised when an ID is not a valid UUID."""

    def __init__(self, resource: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {resource.lower()} ID format",
        )


class InvalidInputError(DomainError):
    """Raised when a command carries fields or values the core rejects."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_INPUT, message=message)


class InvalidTransitionError(DomainError):
    """Raised when a status change is not part of the entity's lifecycle."""

    def __init__(self, resource: str, current: str, target: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            message=f"{resource} cannot move from {current} to {target}",
        )
        self.current = current
        self.target = target
