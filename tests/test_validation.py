"""
Tests for form validation and the service catalog.
"""

import pytest
from datetime import date
from decimal import Decimal

from subtrack.catalog import POPULAR_SERVICES, custom_service, filter_services, get_service
from subtrack.config import AppSettings
from subtrack.models.onboarding import SubscriptionForm
from subtrack.models.subscription import MAX_COST, Category, PaymentCycle
from subtrack.validation import SubscriptionFormValidator, parse_cost


TODAY = date(2025, 1, 10)


@pytest.fixture
def validator(strict_settings):
    return SubscriptionFormValidator(strict_settings)


def _form(**kwargs):
    defaults = {
        "name": "Netflix",
        "cost_text": "17.99",
        "currency": "EUR",
        "renewal_date": date(2025, 2, 1),
    }
    defaults.update(kwargs)
    return SubscriptionForm(**defaults)


class TestParseCost:
    """Tests for cost text parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("17.99", Decimal("17.99")),
        ("  5 ", Decimal("5")),
        ("0", Decimal("0")),
        ("1e2", Decimal("100")),
    ])
    def test_valid_amounts(self, text, expected):
        assert parse_cost(text) == expected

    @pytest.mark.parametrize("text", [
        "", "   ", "abc", "12,50", "-1", "NaN", "Infinity", "1e400", "1000000000.01",
    ])
    def test_rejected_amounts(self, text):
        assert parse_cost(text) is None


class TestFieldValidation:
    """Stage 1: blocking errors."""

    def test_valid_form(self, validator):
        result = validator.validate(_form(), today=TODAY)
        assert result.is_valid is True
        assert result.issues == []

    def test_missing_cost(self, validator):
        result = validator.validate(_form(cost_text=""), today=TODAY)
        assert result.is_valid is False
        assert result.issues[0].issue_type == "missing"

    def test_unparseable_cost(self, validator):
        result = validator.validate(_form(cost_text="abc"), today=TODAY)
        assert result.issues[0].issue_type == "invalid_format"
        assert "abc" in result.issues[0].message

    def test_negative_cost(self, validator):
        result = validator.validate(_form(cost_text="-3.50"), today=TODAY)
        assert result.issues[0].issue_type == "negative"

    def test_huge_cost_is_rejected(self, validator):
        """An amount too large for float arithmetic never reaches the store."""
        result = validator.validate(_form(cost_text="1e400"), today=TODAY)
        assert result.is_valid is False
        assert result.issues[0].issue_type == "too_large"

    def test_max_cost_is_accepted(self, validator):
        result = validator.validate(_form(cost_text=str(MAX_COST)), today=TODAY)
        assert result.is_valid is True

    def test_missing_name(self, validator):
        result = validator.validate(_form(name="  "), today=TODAY)
        assert result.error_fields == {"name"}

    def test_name_too_long(self, validator):
        result = validator.validate(_form(name="x" * 201), today=TODAY)
        assert result.issues[0].issue_type == "too_long"

    def test_unsupported_currency(self, validator):
        result = validator.validate(_form(currency="JPY"), today=TODAY)
        assert result.error_fields == {"currency"}

    def test_currency_is_case_insensitive(self, validator):
        assert validator.validate(_form(currency="usd"), today=TODAY).is_valid

    def test_all_errors_reported_together(self, validator):
        result = validator.validate(_form(name="", cost_text="x", currency="XXX"), today=TODAY)
        assert result.error_fields == {"name", "cost", "currency"}

    def test_currency_list_follows_settings(self):
        settings = AppSettings(supported_currencies="EUR,CHF")
        validator = SubscriptionFormValidator(settings)
        assert validator.validate(_form(currency="CHF"), today=TODAY).is_valid
        assert not validator.validate(_form(currency="USD"), today=TODAY).is_valid


class TestSanityChecks:
    """Stage 2: warnings never block."""

    def test_zero_cost_warns(self, validator):
        result = validator.validate(_form(cost_text="0"), today=TODAY)
        assert result.is_valid is True
        assert len(result.warnings) == 1

    def test_past_renewal_warns(self, validator):
        result = validator.validate(_form(renewal_date=date(2024, 12, 1)), today=TODAY)
        assert result.is_valid is True
        assert result.issues[0].issue_type == "past_date"

    def test_no_warnings_when_errors(self, validator):
        result = validator.validate(
            _form(name="", renewal_date=date(2024, 12, 1)),
            today=TODAY,
        )
        assert result.warnings == []


class TestBuildSubscription:
    """Tests for turning forms into subscriptions."""

    def test_builds_normalized_subscription(self, validator):
        form = _form(
            name="  Netflix  ",
            cost_text=" 17.99 ",
            currency="usd",
            payment_cycle=PaymentCycle.QUARTERLY,
            category=Category.ENTERTAINMENT,
        )
        sub = validator.build_subscription(form, get_service(POPULAR_SERVICES[0].id))

        assert sub.name == "Netflix"
        assert sub.cost == Decimal("17.99")
        assert sub.currency_code == "USD"
        assert sub.payment_cycle == PaymentCycle.QUARTERLY
        assert sub.renewal_date == date(2025, 2, 1)
        assert sub.is_custom is False

    def test_custom_service_marks_subscription(self, validator):
        sub = validator.build_subscription(_form(name="Gym"), custom_service())
        assert sub.is_custom is True

    def test_invalid_form_raises(self, validator):
        with pytest.raises(ValueError, match="cost"):
            validator.build_subscription(_form(cost_text=""), custom_service())

    def test_summary(self, validator):
        assert validator.get_user_friendly_summary(
            validator.validate(_form(), today=TODAY)
        ) == "All checks passed."

        summary = validator.get_user_friendly_summary(
            validator.validate(_form(cost_text=""), today=TODAY)
        )
        assert "Cost is required" in summary


class TestCatalog:
    """Tests for the predefined services."""

    def test_ids_are_unique(self):
        ids = [service.id for service in POPULAR_SERVICES]
        assert len(ids) == len(set(ids))

    def test_exactly_one_custom_entry(self):
        custom = [service for service in POPULAR_SERVICES if service.is_custom]
        assert custom == [custom_service()]
        assert custom_service().default_category == Category.OTHER

    def test_get_service(self):
        netflix = POPULAR_SERVICES[0]
        assert get_service(netflix.id) is netflix
        assert get_service(custom_service().id).is_custom

    def test_filter_keeps_catalog_order(self):
        picked = [POPULAR_SERVICES[5].id, POPULAR_SERVICES[1].id]
        assert filter_services(picked) == (POPULAR_SERVICES[1], POPULAR_SERVICES[5])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
