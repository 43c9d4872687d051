"""
Subscription Store

The single owner of the user's subscription list. Every other component
receives a reference to the store and reads through it; all mutation goes
through add / delete / replace so persistence happens in one place.

PERSISTENCE SEMANTICS:
- The list is loaded once, when the store is created
- Every mutation saves the full list synchronously
- A failed load starts the store empty
- A failed save never raises: the in-memory list stays authoritative,
  has_unsaved_changes is set and the next successful save clears it
"""

from datetime import date
from typing import Iterator, Optional
from uuid import UUID

from subtrack.audit import AuditLogger
from subtrack.models.audit import AuditEventBuilder
from subtrack.models.subscription import Subscription
from subtrack.services.storage import (
    DuplicateError,
    StorageError,
    SubscriptionStorageInterface,
)


class SubscriptionStore:
    """
    In-memory subscription list backed by a storage capability.

    Reads return immutable snapshots, so callers can never mutate the
    list behind the store's back.
    """

    def __init__(
        self,
        storage: SubscriptionStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._subscriptions: list[Subscription] = []
        self._last_save_error: Optional[str] = None
        self._load()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def subscriptions(self) -> tuple[Subscription, ...]:
        return tuple(self._subscriptions)

    @property
    def has_unsaved_changes(self) -> bool:
        """True while the last attempted save has not succeeded."""
        return self._last_save_error is not None

    @property
    def last_save_error(self) -> Optional[str]:
        return self._last_save_error

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __iter__(self) -> Iterator[Subscription]:
        return iter(tuple(self._subscriptions))

    def __contains__(self, subscription_id: object) -> bool:
        return any(sub.id == subscription_id for sub in self._subscriptions)

    def get(self, subscription_id: UUID) -> Optional[Subscription]:
        """Return the subscription with this id, or None."""
        for sub in self._subscriptions:
            if sub.id == subscription_id:
                return sub
        return None

    def sorted_by_renewal(self) -> list[Subscription]:
        """Subscriptions ordered by renewal date, nearest first."""
        return sorted(self._subscriptions, key=lambda sub: sub.renewal_date)

    def upcoming_renewals(self, within_days: int, today: Optional[date] = None) -> list[Subscription]:
        """Subscriptions renewing between today and today + within_days, nearest first."""
        return [
            sub for sub in self.sorted_by_renewal()
            if 0 <= sub.days_until_renewal(today) <= within_days
        ]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_subscription(
        self,
        subscription: Subscription,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Append a subscription and persist.

        Raises:
            DuplicateError: If a subscription with the same id is already stored
        """
        if subscription.id in self:
            raise DuplicateError(f"Subscription {subscription.id} already exists")

        self._subscriptions.append(subscription)
        self._audit_logger.log(AuditEventBuilder.subscription_added(
            subscription_id=subscription.id,
            name=subscription.name,
            correlation_id=correlation_id,
        ))
        self._save()

    def delete_subscription(self, subscription_id: UUID) -> bool:
        """
        Remove exactly the subscription with this id and persist.

        Returns:
            True if something was removed, False if the id was unknown
        """
        removed = self.get(subscription_id)
        if removed is None:
            return False

        self._subscriptions = [
            sub for sub in self._subscriptions if sub.id != subscription_id
        ]
        self._audit_logger.log(AuditEventBuilder.subscription_deleted(
            subscription_id=removed.id,
            name=removed.name,
        ))
        self._save()
        return True

    def replace_all(self, subscriptions: list[Subscription]) -> None:
        """
        Replace the whole list and persist.

        Raises:
            DuplicateError: If the new list repeats an id
        """
        ids = [sub.id for sub in subscriptions]
        if len(ids) != len(set(ids)):
            raise DuplicateError("Replacement list contains duplicate subscription ids")

        previous_count = len(self._subscriptions)
        self._subscriptions = list(subscriptions)
        self._audit_logger.log(AuditEventBuilder.subscriptions_replaced(
            previous_count=previous_count,
            new_count=len(self._subscriptions),
        ))
        self._save()

    def delete_all(self) -> None:
        """Remove every subscription (the "delete all data" setting)."""
        self.replace_all([])

    def retry_save(self) -> bool:
        """
        Attempt to persist the current list again.

        Returns True when the store is fully persisted afterwards.
        """
        self._save()
        return not self.has_unsaved_changes

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _load(self) -> None:
        try:
            self._subscriptions = list(self._storage.load())
        except StorageError as e:
            self._subscriptions = []
            self._audit_logger.log(AuditEventBuilder.load_failed(
                target="subscriptions",
                error_message=str(e),
            ))
            return

        self._audit_logger.log(AuditEventBuilder.store_loaded(len(self._subscriptions)))

    def _save(self) -> None:
        try:
            self._storage.save(list(self._subscriptions))
        except StorageError as e:
            self._last_save_error = str(e)
            self._audit_logger.log(AuditEventBuilder.save_failed(
                target="subscriptions",
                error_message=str(e),
            ))
            return

        self._last_save_error = None
