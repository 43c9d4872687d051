"""Query execution package."""

from subtrack.queries.executor import (
    EmptyQuestionError,
    QueryExecutionError,
    SubscriptionAssistant,
    detect_intent,
)

__all__ = [
    "EmptyQuestionError",
    "QueryExecutionError",
    "SubscriptionAssistant",
    "detect_intent",
]
