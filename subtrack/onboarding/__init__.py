"""Onboarding flow package."""

from subtrack.onboarding.flow import (
    EmptySelectionError,
    InvalidTransitionError,
    OnboardingError,
    OnboardingFlow,
    OnboardingStateError,
    UnknownServiceError,
)

__all__ = [
    "EmptySelectionError",
    "InvalidTransitionError",
    "OnboardingError",
    "OnboardingFlow",
    "OnboardingStateError",
    "UnknownServiceError",
]
