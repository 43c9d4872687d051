"""
In-Memory Storage Implementation

Used by the test suite and when SUBTRACK_STORAGE_BACKEND=memory.
Nothing survives the process.

The subscription and login storages can be told to fail, so callers'
handling of persistence errors can be exercised without a broken disk.
"""

from typing import Optional

from subtrack.models.audit import AuditEvent
from subtrack.models.subscription import Subscription
from subtrack.services.storage.interface import (
    AuditStorageInterface,
    LoginStateStorageInterface,
    StorageError,
    SubscriptionStorageInterface,
)


class InMemorySubscriptionStorage(SubscriptionStorageInterface):
    """Keeps the last saved list in a Python list."""

    def __init__(self, initial: Optional[list[Subscription]] = None):
        self._saved: list[Subscription] = list(initial or [])
        self.save_count = 0
        self.fail_on_load = False
        self.fail_on_save = False

    @property
    def saved(self) -> list[Subscription]:
        return list(self._saved)

    def load(self) -> list[Subscription]:
        if self.fail_on_load:
            raise StorageError("Simulated load failure")
        return list(self._saved)

    def save(self, subscriptions: list[Subscription]) -> None:
        if self.fail_on_save:
            raise StorageError("Simulated save failure")
        self._saved = list(subscriptions)
        self.save_count += 1


class InMemoryLoginStateStorage(LoginStateStorageInterface):
    """Keeps the logged-in flag in an attribute."""

    def __init__(self, initial: bool = False):
        self.value = initial
        self.fail_on_load = False
        self.fail_on_save = False

    def load(self) -> bool:
        if self.fail_on_load:
            raise StorageError("Simulated load failure")
        return self.value

    def save(self, logged_in: bool) -> None:
        if self.fail_on_save:
            raise StorageError("Simulated save failure")
        self.value = logged_in


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
