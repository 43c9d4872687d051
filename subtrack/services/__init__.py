"""Services package."""

from subtrack.services.storage import (
    AuditStorageInterface,
    CorruptDataError,
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryLoginStateStorage,
    InMemorySubscriptionStorage,
    JsonFileLoginStateStorage,
    JsonFileSubscriptionStorage,
    LoginStateStorageInterface,
    StorageError,
    SubscriptionStorageInterface,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "CorruptDataError",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemoryLoginStateStorage",
    "InMemorySubscriptionStorage",
    "JsonFileLoginStateStorage",
    "JsonFileSubscriptionStorage",
    "LoginStateStorageInterface",
    "StorageError",
    "SubscriptionStorageInterface",
]
