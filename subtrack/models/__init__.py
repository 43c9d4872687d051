"""
Data Models Package

This package contains all Pydantic models used in SubTrack.
All data flowing through the system must conform to these schemas.
"""

from subtrack.models.subscription import (
    Category,
    CategoryStat,
    PaymentCycle,
    PieSlice,
    PredefinedService,
    StatisticsPeriod,
    StatisticsReport,
    Subscription,
)
from subtrack.models.onboarding import (
    OnboardingStage,
    OnboardingState,
    StepOutcome,
    SubscriptionForm,
    ValidationIssue,
    ValidationResult,
)
from subtrack.models.query import AssistantIntent, AssistantReply
from subtrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Subscription models
    "Category",
    "CategoryStat",
    "PaymentCycle",
    "PieSlice",
    "PredefinedService",
    "StatisticsPeriod",
    "StatisticsReport",
    "Subscription",
    # Onboarding models
    "OnboardingStage",
    "OnboardingState",
    "StepOutcome",
    "SubscriptionForm",
    "ValidationIssue",
    "ValidationResult",
    # Query models
    "AssistantIntent",
    "AssistantReply",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
