"""
JSON File Storage Implementation

DESIGN DECISION: Plain JSON files are the default backend because:
1. Users can read and diff their data directly
2. No database setup required
3. Field names match the models exactly, so ids survive restarts

TRADEOFFS:
- Every save rewrites the whole file (fine for a personal list)
- No transactions (we write to a temp file and rename over the target)
"""

import json
import os
from pathlib import Path
from typing import Union

from pydantic import TypeAdapter, ValidationError

from subtrack.models.subscription import Subscription
from subtrack.services.storage.interface import (
    CorruptDataError,
    LoginStateStorageInterface,
    StorageError,
    SubscriptionStorageInterface,
)


_SUBSCRIPTION_LIST = TypeAdapter(list[Subscription])

# Bumped when the on-disk layout changes
FORMAT_VERSION = 1


def _write_atomic(path: Path, payload: str) -> None:
    """Write payload next to path and rename it into place."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(path.name + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError as e:
        raise StorageError(f"Could not write {path}: {e}") from e


def _read_json(path: Path):
    """Return the decoded document, or None when the file does not exist."""
    if not path.exists():
        return None
    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise CorruptDataError(f"{path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise StorageError(f"Could not read {path}: {e}") from e
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise CorruptDataError(f"{path} is not valid JSON: {e}") from e


class JsonFileSubscriptionStorage(SubscriptionStorageInterface):
    """
    Stores the subscription list as a pretty-printed JSON document.

    Layout:
        {"version": 1, "subscriptions": [{"id": "...", "name": "...", ...}]}
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Subscription]:
        document = _read_json(self._path)
        if document is None:
            return []

        if not isinstance(document, dict) or "subscriptions" not in document:
            raise CorruptDataError(f"{self._path} has no 'subscriptions' list")

        try:
            return _SUBSCRIPTION_LIST.validate_python(document["subscriptions"])
        except ValidationError as e:
            raise CorruptDataError(
                f"{self._path} contains invalid subscriptions: {e.error_count()} errors"
            ) from e

    def save(self, subscriptions: list[Subscription]) -> None:
        document = {
            "version": FORMAT_VERSION,
            "subscriptions": _SUBSCRIPTION_LIST.dump_python(subscriptions, mode="json"),
        }
        _write_atomic(self._path, json.dumps(document, indent=2, ensure_ascii=False) + "\n")


class JsonFileLoginStateStorage(LoginStateStorageInterface):
    """Stores the logged-in flag as {"is_logged_in": true}."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> bool:
        document = _read_json(self._path)
        if document is None:
            return False

        value = document.get("is_logged_in") if isinstance(document, dict) else None
        if not isinstance(value, bool):
            raise CorruptDataError(f"{self._path} has no boolean 'is_logged_in'")
        return value

    def save(self, logged_in: bool) -> None:
        _write_atomic(self._path, json.dumps({"is_logged_in": logged_in}, indent=2) + "\n")
