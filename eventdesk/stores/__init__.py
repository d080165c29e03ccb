from eventdesk.stores.interfaces import (
    AssignmentStore,
    EventStore,
    ProfileStore,
    RegistrationStore,
    TaskStore,
)
from eventdesk.stores.memory_store import InMemoryStore

__all__ = [
    "AssignmentStore",
    "EventStore",
    "ProfileStore",
    "RegistrationStore",
    "TaskStore",
    "InMemoryStore",
]
