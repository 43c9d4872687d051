"""
Login State

The persisted "has this user finished (or skipped) onboarding" flag.
Authentication itself is outside the core; this only remembers the result.
"""

from typing import Optional

from subtrack.audit import AuditLogger
from subtrack.models.audit import AuditEventBuilder
from subtrack.services.storage import LoginStateStorageInterface, StorageError


class LoginState:
    """Logged-in flag, read at startup and written on every change."""

    def __init__(
        self,
        storage: LoginStateStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._last_save_error: Optional[str] = None

        try:
            self._logged_in = self._storage.load()
        except StorageError as e:
            self._logged_in = False
            self._audit_logger.log(AuditEventBuilder.load_failed(
                target="login_state",
                error_message=str(e),
            ))

    @property
    def is_logged_in(self) -> bool:
        return self._logged_in

    @property
    def has_unsaved_changes(self) -> bool:
        return self._last_save_error is not None

    def log_in(self) -> None:
        self._set(True)

    def log_out(self) -> None:
        self._set(False)

    def _set(self, logged_in: bool) -> None:
        self._logged_in = logged_in
        self._audit_logger.log(AuditEventBuilder.login_changed(logged_in))

        try:
            self._storage.save(logged_in)
        except StorageError as e:
            self._last_save_error = str(e)
            self._audit_logger.log(AuditEventBuilder.save_failed(
                target="login_state",
                error_message=str(e),
            ))
            return

        self._last_save_error = None
