"""
Onboarding Models for SubTrack

The onboarding flow walks a new user through configuring one subscription
per selected catalog service. These models describe:
1. Where the flow currently is (OnboardingState)
2. What the user typed on a configuration step (SubscriptionForm)
3. Whether that input may advance the flow (ValidationResult)

DESIGN DECISION: Form input is kept as raw text. Parsing happens in the
validator so a bad cost is reported back instead of raising.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from subtrack.models.subscription import Category, PaymentCycle, Subscription


class OnboardingStage(str, Enum):
    """Stages of the onboarding state machine."""
    NOT_STARTED = "not_started"
    SELECTING = "selecting"
    CONFIGURING = "configuring"
    COMPLETE = "complete"


class OnboardingState(BaseModel):
    """
    Tagged onboarding state.

    step_index is set for CONFIGURING only, and is the index of the
    service currently being configured.
    """
    model_config = ConfigDict(frozen=True)

    stage: OnboardingStage
    step_index: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode='after')
    def validate_step_index(self) -> 'OnboardingState':
        if self.stage == OnboardingStage.CONFIGURING and self.step_index is None:
            raise ValueError("Configuring state requires a step index")
        if self.stage != OnboardingStage.CONFIGURING and self.step_index is not None:
            raise ValueError(f"{self.stage.value} state cannot carry a step index")
        return self

    @classmethod
    def not_started(cls) -> 'OnboardingState':
        return cls(stage=OnboardingStage.NOT_STARTED)

    @classmethod
    def selecting(cls) -> 'OnboardingState':
        return cls(stage=OnboardingStage.SELECTING)

    @classmethod
    def configuring(cls, index: int) -> 'OnboardingState':
        return cls(stage=OnboardingStage.CONFIGURING, step_index=index)

    @classmethod
    def complete(cls) -> 'OnboardingState':
        return cls(stage=OnboardingStage.COMPLETE)


class SubscriptionForm(BaseModel):
    """
    Raw input collected on one configuration step.

    cost_text stays a string until validation so that "" and "abc" can
    be reported as rejected input.
    """

    name: str = ""
    cost_text: str = ""
    currency: str = "EUR"
    renewal_date: date = Field(default_factory=date.today)
    payment_cycle: PaymentCycle = PaymentCycle.MONTHLY
    category: Category = Category.OTHER


class ValidationIssue(BaseModel):
    """A single problem found in form input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'negative')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Outcome of validating a SubscriptionForm."""

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_fields(self) -> set[str]:
        return {issue.field for issue in self.issues if issue.severity == "error"}


class StepOutcome(BaseModel):
    """
    Result of submitting one configuration step.

    When accepted is False the flow did not move and validation explains why.
    """

    accepted: bool
    state: OnboardingState
    validation: ValidationResult
    subscription: Optional[Subscription] = None
