"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the JSON files for a real database later
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally tiny. The subscription store always loads
and saves the full list, so backends never need partial updates.
"""

from abc import ABC, abstractmethod

from subtrack.models.audit import AuditEvent
from subtrack.models.subscription import Subscription


class SubscriptionStorageInterface(ABC):
    """
    Durable home of the subscription list.

    Any storage implementation (JSON file, SQLite, etc.)
    must implement these methods.
    """

    @abstractmethod
    def load(self) -> list[Subscription]:
        """
        Read every persisted subscription.

        Returns:
            The stored subscriptions, or an empty list if nothing was saved yet

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def save(self, subscriptions: list[Subscription]) -> None:
        """
        Replace the persisted list with the given subscriptions.

        Raises:
            StorageError: If the write fails
        """
        pass


class LoginStateStorageInterface(ABC):
    """Durable home of the single logged-in flag."""

    @abstractmethod
    def load(self) -> bool:
        """Read the flag, False if it was never written."""
        pass

    @abstractmethod
    def save(self, logged_in: bool) -> None:
        """Persist the flag."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class CorruptDataError(StorageError):
    """Persisted data exists but cannot be decoded."""
    pass
