"""
Shared fixtures.

Test strategy:
1. Unit tests for individual components (models, normalizer, validator)
2. Flow tests for onboarding and the store with in-memory storage
3. No real disk writes outside pytest's tmp_path
"""

from datetime import date
from decimal import Decimal

import pytest

from subtrack.audit import AuditLogger
from subtrack.config import AppSettings
from subtrack.models.subscription import Category, PaymentCycle, Subscription
from subtrack.services.storage import (
    InMemoryAuditStorage,
    InMemoryLoginStateStorage,
    InMemorySubscriptionStorage,
)
from subtrack.store import LoginState, SubscriptionStore


@pytest.fixture
def make_subscription():
    """Factory for subscriptions with sensible defaults."""
    def _make(
        name: str = "Netflix",
        cost: str = "10.00",
        cycle: PaymentCycle = PaymentCycle.MONTHLY,
        category: Category = Category.ENTERTAINMENT,
        renewal_date: date = date(2025, 1, 15),
        **kwargs,
    ) -> Subscription:
        return Subscription(
            name=name,
            cost=Decimal(cost),
            payment_cycle=cycle,
            category=category,
            renewal_date=renewal_date,
            **kwargs,
        )
    return _make


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def subscription_storage():
    return InMemorySubscriptionStorage()


@pytest.fixture
def login_storage():
    return InMemoryLoginStateStorage()


@pytest.fixture
def store(subscription_storage, audit_logger):
    return SubscriptionStore(subscription_storage, audit_logger)


@pytest.fixture
def login_state(login_storage, audit_logger):
    return LoginState(login_storage, audit_logger)


@pytest.fixture
def strict_settings():
    """Development settings: invariant violations raise."""
    return AppSettings(app_environment="development")


@pytest.fixture
def lenient_settings():
    """Production settings: invariant violations are clamped."""
    return AppSettings(app_environment="production")
