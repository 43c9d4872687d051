"""Form validation package."""

from subtrack.validation.validator import SubscriptionFormValidator, parse_cost

__all__ = ["SubscriptionFormValidator", "parse_cost"]
