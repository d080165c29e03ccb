"""Domain primitives that enforce validity at creation time."""

import re
import secrets
from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class EntityId:
    """UUID-backed identifier. Subclasses name the entity they identify."""

    value: UUID

    label: ClassVar[str] = "Entity"

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ProfileId(EntityId):
    """Identifier of a Profile, shared 1:1 with the external identity."""

    label: ClassVar[str] = "Profile"


@dataclass(frozen=True)
class EventId(EntityId):
    """Unique identifier for an Event."""

    label: ClassVar[str] = "Event"


@dataclass(frozen=True)
class RegistrationId(EntityId):
    """Unique identifier for a Registration."""

    label: ClassVar[str] = "Registration"


@dataclass(frozen=True)
class AssignmentId(EntityId):
    """Unique identifier for a VolunteerAssignment."""

    label: ClassVar[str] = "Assignment"


@dataclass(frozen=True)
class TaskId(EntityId):
    """Unique identifier for a Task."""

    label: ClassVar[str] = "Task"


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Positive number of seats an event offers."""

    value: int

    def __post_init__(self) -> None:
        if self.value <= 0:
            raise ValueError("Capacity must be positive")


_TICKET_PATTERN = re.compile(r"^TKT-[0-9A-F]{8}$")


@dataclass(frozen=True)
class TicketNumber:
    """Display token of one booking, e.g. ``TKT-9F2C41AB``."""

    value: str

    def __post_init__(self) -> None:
        if not _TICKET_PATTERN.match(self.value):
            raise ValueError("Ticket number must look like TKT-XXXXXXXX")

    @classmethod
    def generate(cls) -> Self:
        return cls(value=f"TKT-{secrets.token_hex(4).upper()}")

    def __str__(self) -> str:
        return self.value
