"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
JSON files are the default backend; in-memory storage backs the tests.
"""

from subtrack.services.storage.interface import (
    AuditStorageInterface,
    CorruptDataError,
    DuplicateError,
    LoginStateStorageInterface,
    StorageError,
    SubscriptionStorageInterface,
)
from subtrack.services.storage.json_file import (
    JsonFileLoginStateStorage,
    JsonFileSubscriptionStorage,
)
from subtrack.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryLoginStateStorage,
    InMemorySubscriptionStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LoginStateStorageInterface",
    "SubscriptionStorageInterface",
    # Exceptions
    "CorruptDataError",
    "DuplicateError",
    "StorageError",
    # JSON file implementation
    "JsonFileLoginStateStorage",
    "JsonFileSubscriptionStorage",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryLoginStateStorage",
    "InMemorySubscriptionStorage",
]
