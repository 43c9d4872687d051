"""
Query Models

The assistant turns a free-text question into one of a few intents and
answers it from the statistics engine. Replies carry raw numbers only;
wording, currency formatting and translation belong to the caller.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AssistantIntent(str, Enum):
    """What the user asked about."""
    TOTAL_EXPENSE = "total_expense"
    SAVINGS = "savings"
    TOP_CATEGORY = "top_category"
    COUNT = "count"
    GREETING = "greeting"


class AssistantReply(BaseModel):
    """
    Answer to one question.

    data holds the figures the presentation layer needs to phrase the
    answer, keyed by name.
    """

    query_id: UUID = Field(default_factory=uuid4)
    executed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    question: str
    intent: AssistantIntent
    data: dict[str, Any] = Field(default_factory=dict)
    data_found: bool = Field(
        ...,
        description="False when the intent needed subscriptions and there were none"
    )
    query_description: str = Field(
        ...,
        description="Plain description of what was looked up"
    )
