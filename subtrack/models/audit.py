"""
Audit Models for SubTrack

Every significant action in the system is logged for audit purposes.
This provides:
1. Complete traceability of store mutations
2. Debugging information when persistence fails
3. A record of how each onboarding session ended

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Store
    STORE_LOADED = "store_loaded"
    LOAD_FAILED = "load_failed"
    SUBSCRIPTION_ADDED = "subscription_added"
    SUBSCRIPTION_DELETED = "subscription_deleted"
    SUBSCRIPTIONS_REPLACED = "subscriptions_replaced"
    SAVE_FAILED = "save_failed"

    # Onboarding
    ONBOARDING_STARTED = "onboarding_started"
    SERVICE_TOGGLED = "service_toggled"
    CONFIGURATION_STARTED = "configuration_started"
    STEP_REJECTED = "step_rejected"
    STEP_COMPLETED = "step_completed"
    ONBOARDING_COMPLETED = "onboarding_completed"
    ONBOARDING_SKIPPED = "onboarding_skipped"
    ONBOARDING_ABANDONED = "onboarding_abandoned"

    # Session
    LOGGED_IN = "logged_in"
    LOGGED_OUT = "logged_out"

    # Assistant
    QUERY_EXECUTED = "query_executed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'subscription', 'onboarding', 'query')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all steps of one onboarding session)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.subscription_added(subscription_id, name)
        event = AuditEventBuilder.step_completed(session_id, index, service)
    """

    # -------------------------------------------------------------------------
    # Store
    # -------------------------------------------------------------------------

    @staticmethod
    def store_loaded(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_LOADED,
            entity_type="store",
            description=f"Loaded {count} subscriptions",
            details={"count": count},
        )

    @staticmethod
    def load_failed(target: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=target,
            description=f"Could not load {target}, starting from defaults",
            error_message=error_message,
        )

    @staticmethod
    def subscription_added(
        subscription_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTION_ADDED,
            entity_type="subscription",
            entity_id=subscription_id,
            correlation_id=correlation_id,
            description=f"Subscription added: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def subscription_deleted(subscription_id: UUID, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTION_DELETED,
            entity_type="subscription",
            entity_id=subscription_id,
            description=f"Subscription deleted: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def subscriptions_replaced(previous_count: int, new_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTIONS_REPLACED,
            entity_type="store",
            description=f"Replaced {previous_count} subscriptions with {new_count}",
            details={
                "previous_count": previous_count,
                "new_count": new_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def save_failed(target: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=target,
            description=f"Could not persist {target}, keeping in-memory state",
            error_message=error_message,
        )

    # -------------------------------------------------------------------------
    # Onboarding
    # -------------------------------------------------------------------------

    @staticmethod
    def onboarding_started(correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ONBOARDING_STARTED,
            entity_type="onboarding",
            entity_id=correlation_id,
            correlation_id=correlation_id,
            description="Onboarding started",
            is_user_action=True,
        )

    @staticmethod
    def service_toggled(
        service_id: UUID,
        service_name: str,
        selected: bool,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SERVICE_TOGGLED,
            entity_type="service",
            entity_id=service_id,
            correlation_id=correlation_id,
            description=f"{'Selected' if selected else 'Deselected'} {service_name}",
            details={"selected": selected},
            is_user_action=True,
        )

    @staticmethod
    def configuration_started(
        service_names: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONFIGURATION_STARTED,
            entity_type="onboarding",
            entity_id=correlation_id,
            correlation_id=correlation_id,
            description=f"Configuring {len(service_names)} services",
            details={"services": service_names},
            is_user_action=True,
        )

    @staticmethod
    def step_rejected(
        step_index: int,
        fields: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STEP_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="onboarding",
            entity_id=correlation_id,
            correlation_id=correlation_id,
            description=f"Step {step_index} rejected: invalid {', '.join(fields)}",
            details={
                "step_index": step_index,
                "fields": fields,
            },
            is_user_action=True,
        )

    @staticmethod
    def step_completed(
        step_index: int,
        service_name: str,
        subscription_id: UUID,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STEP_COMPLETED,
            entity_type="subscription",
            entity_id=subscription_id,
            correlation_id=correlation_id,
            description=f"Step {step_index} configured: {service_name}",
            details={
                "step_index": step_index,
                "service": service_name,
            },
            is_user_action=True,
        )

    @staticmethod
    def onboarding_completed(count: int, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ONBOARDING_COMPLETED,
            entity_type="onboarding",
            entity_id=correlation_id,
            correlation_id=correlation_id,
            description=f"Onboarding completed with {count} subscriptions",
            details={"count": count},
        )

    @staticmethod
    def onboarding_skipped(correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ONBOARDING_SKIPPED,
            entity_type="onboarding",
            entity_id=correlation_id,
            correlation_id=correlation_id,
            description="Onboarding skipped",
            is_user_action=True,
        )

    @staticmethod
    def onboarding_abandoned(
        discarded: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ONBOARDING_ABANDONED,
            entity_type="onboarding",
            entity_id=correlation_id,
            correlation_id=correlation_id,
            description=f"Onboarding abandoned, discarded {discarded} configured subscriptions",
            details={"discarded": discarded},
        )

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    @staticmethod
    def login_changed(logged_in: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGGED_IN if logged_in else AuditEventType.LOGGED_OUT,
            entity_type="session",
            description="User logged in" if logged_in else "User logged out",
            is_user_action=True,
        )

    # -------------------------------------------------------------------------
    # Queries and errors
    # -------------------------------------------------------------------------

    @staticmethod
    def query_executed(
        query_id: UUID,
        intent: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_EXECUTED,
            entity_type="query",
            entity_id=query_id,
            description=f"Assistant answered with intent: {intent}",
            details={"intent": intent},
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
