"""
Subscription Form Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - FIELD VALIDATION:
- Name present after trimming whitespace
- Cost present and parseable as a number between 0 and MAX_COST
- Currency among the supported choices

STAGE 2 - SANITY CHECKS:
- Zero cost
- Renewal date already in the past
- These only produce warnings and never block a step

IMPORTANT: Validation NEVER raises on bad input and NEVER silently fixes it.
A form with errors simply cannot advance the onboarding flow.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from subtrack.config import AppSettings, get_settings
from subtrack.models.onboarding import (
    SubscriptionForm,
    ValidationIssue,
    ValidationResult,
)
from subtrack.models.subscription import MAX_COST, PredefinedService, Subscription


MAX_NAME_LENGTH = 200


def parse_cost(text: str) -> Optional[Decimal]:
    """
    Parse user-entered cost text.

    Returns None for empty, unparseable, non-finite, negative input or
    anything above MAX_COST.
    """
    text = text.strip()
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite() or value < 0 or value > MAX_COST:
        return None
    return value


class SubscriptionFormValidator:
    """
    Validates one onboarding configuration step.

    Stage 1 decides whether the step may advance.
    Stage 2 adds warnings the presentation layer may show.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    @property
    def supported_currencies(self) -> list[str]:
        return self._settings.supported_currencies_list

    @property
    def default_currency(self) -> str:
        return self._settings.default_currency

    def _validate_fields(self, form: SubscriptionForm) -> list[ValidationIssue]:
        """Stage 1: blocking field checks."""
        issues = []

        name = form.name.strip()
        if not name:
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Subscription name is required",
                severity="error",
            ))
        elif len(name) > MAX_NAME_LENGTH:
            issues.append(ValidationIssue(
                field="name",
                issue_type="too_long",
                message=f"Subscription name must be at most {MAX_NAME_LENGTH} characters",
                severity="error",
            ))

        cost_text = form.cost_text.strip()
        if not cost_text:
            issues.append(ValidationIssue(
                field="cost",
                issue_type="missing",
                message="Cost is required",
                severity="error",
            ))
        elif parse_cost(cost_text) is None:
            issue_type, message = self._cost_problem(cost_text)
            issues.append(ValidationIssue(
                field="cost",
                issue_type=issue_type,
                message=message,
                severity="error",
            ))

        if form.currency.strip().upper() not in self.supported_currencies:
            issues.append(ValidationIssue(
                field="currency",
                issue_type="unsupported",
                message=(
                    f"Currency {form.currency} is not one of "
                    f"{', '.join(self.supported_currencies)}"
                ),
                severity="error",
            ))

        return issues

    @staticmethod
    def _cost_problem(cost_text: str) -> tuple[str, str]:
        """Issue type and message for cost text that parse_cost rejected."""
        try:
            value = Decimal(cost_text)
        except InvalidOperation:
            return "invalid_format", f"'{cost_text}' is not a valid amount"

        if value.is_finite() and value < 0:
            return "negative", "Cost cannot be negative"
        if value.is_finite() and value > MAX_COST:
            return "too_large", f"Cost must be at most {MAX_COST}"
        return "invalid_format", f"'{cost_text}' is not a valid amount"

    def _validate_sanity(
        self,
        form: SubscriptionForm,
        today: date,
    ) -> list[ValidationIssue]:
        """Stage 2: non-blocking warnings."""
        issues = []

        cost = parse_cost(form.cost_text)
        if cost is not None and cost == 0:
            issues.append(ValidationIssue(
                field="cost",
                issue_type="zero",
                message="Cost is zero, this subscription will not count towards spending",
                severity="warning",
            ))

        if form.renewal_date < today:
            issues.append(ValidationIssue(
                field="renewal_date",
                issue_type="past_date",
                message="Renewal date is in the past",
                severity="warning",
            ))

        return issues

    def validate(
        self,
        form: SubscriptionForm,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """
        Run both validation stages.

        Stage 2 only runs when stage 1 found no errors.
        """
        today = today or date.today()

        issues = self._validate_fields(form)
        if not any(issue.severity == "error" for issue in issues):
            issues.extend(self._validate_sanity(form, today))

        return ValidationResult(
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
            warnings=[issue.message for issue in issues if issue.severity == "warning"],
        )

    def build_subscription(
        self,
        form: SubscriptionForm,
        service: PredefinedService,
    ) -> Subscription:
        """
        Turn a validated form into a Subscription.

        is_custom always comes from the catalog service, never from input.

        Raises:
            ValueError: If the form does not pass validation
        """
        result = self.validate(form)
        if not result.is_valid:
            raise ValueError(
                "Cannot build subscription from invalid form: "
                + ", ".join(sorted(result.error_fields))
            )

        return Subscription(
            name=form.name.strip(),
            cost=parse_cost(form.cost_text),
            currency_code=form.currency.strip().upper(),
            renewal_date=form.renewal_date,
            payment_cycle=form.payment_cycle,
            category=form.category,
            is_custom=service.is_custom,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Plain-text summary, mostly for logs and debugging."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if not result.is_valid:
            lines.append("Please fix the following before continuing:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   - {issue.message}")

        if result.warnings:
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   - {warning}")

        return "\n".join(lines)
