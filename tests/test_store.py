"""
Tests for the subscription store, login state and storage backends.
"""

import json
import pytest
from datetime import date

from subtrack.models.audit import AuditEventType
from subtrack.models.subscription import Category, PaymentCycle
from subtrack.services.storage import (
    CorruptDataError,
    DuplicateError,
    InMemoryLoginStateStorage,
    InMemorySubscriptionStorage,
    JsonFileLoginStateStorage,
    JsonFileSubscriptionStorage,
)
from subtrack.store import LoginState, SubscriptionStore


def _event_types(audit_storage):
    return [event.event_type for event in audit_storage.events]


class TestSubscriptionStore:
    """Tests for store reads and mutations."""

    def test_starts_with_persisted_subscriptions(self, make_subscription, audit_logger):
        existing = make_subscription(name="Netflix")
        store = SubscriptionStore(InMemorySubscriptionStorage([existing]), audit_logger)
        assert store.subscriptions == (existing,)
        assert len(store) == 1

    def test_add_persists_full_list(self, store, subscription_storage, make_subscription):
        a = make_subscription(name="A")
        b = make_subscription(name="B")
        store.add_subscription(a)
        store.add_subscription(b)

        assert subscription_storage.saved == [a, b]
        assert subscription_storage.save_count == 2

    def test_add_rejects_duplicate_id(self, store, make_subscription):
        sub = make_subscription()
        store.add_subscription(sub)
        with pytest.raises(DuplicateError):
            store.add_subscription(sub)
        assert len(store) == 1

    def test_delete_removes_exactly_one(self, store, subscription_storage, make_subscription):
        subs = [make_subscription(name=name) for name in ("A", "B", "C")]
        for sub in subs:
            store.add_subscription(sub)

        assert store.delete_subscription(subs[1].id) is True

        assert [s.id for s in store] == [subs[0].id, subs[2].id]
        assert subscription_storage.saved == [subs[0], subs[2]]

    def test_delete_unknown_id(self, store, subscription_storage, make_subscription):
        store.add_subscription(make_subscription())
        saves_before = subscription_storage.save_count

        assert store.delete_subscription(make_subscription().id) is False
        assert len(store) == 1
        assert subscription_storage.save_count == saves_before

    def test_replace_all(self, store, subscription_storage, make_subscription):
        store.add_subscription(make_subscription(name="Old"))
        new = [make_subscription(name="New 1"), make_subscription(name="New 2")]

        store.replace_all(new)

        assert list(store) == new
        assert subscription_storage.saved == new

    def test_replace_all_rejects_duplicates(self, store, make_subscription):
        sub = make_subscription()
        with pytest.raises(DuplicateError):
            store.replace_all([sub, sub])

    def test_delete_all(self, store, subscription_storage, make_subscription):
        store.add_subscription(make_subscription())
        store.delete_all()
        assert len(store) == 0
        assert subscription_storage.saved == []

    def test_snapshot_is_immutable(self, store, make_subscription):
        """Callers cannot change the store through what it returns."""
        store.add_subscription(make_subscription())
        snapshot = store.subscriptions
        assert isinstance(snapshot, tuple)

        listed = store.sorted_by_renewal()
        listed.clear()
        assert len(store) == 1

    def test_get_and_contains(self, store, make_subscription):
        sub = make_subscription()
        store.add_subscription(sub)
        assert store.get(sub.id) == sub
        assert sub.id in store
        assert store.get(make_subscription().id) is None

    def test_sorted_by_renewal(self, store, make_subscription):
        late = make_subscription(name="Late", renewal_date=date(2025, 6, 1))
        soon = make_subscription(name="Soon", renewal_date=date(2025, 1, 3))
        mid = make_subscription(name="Mid", renewal_date=date(2025, 2, 1))
        for sub in (late, soon, mid):
            store.add_subscription(sub)

        assert [s.name for s in store.sorted_by_renewal()] == ["Soon", "Mid", "Late"]

    def test_upcoming_renewals(self, store, make_subscription):
        today = date(2025, 1, 1)
        store.add_subscription(make_subscription(name="Passed", renewal_date=date(2024, 12, 30)))
        store.add_subscription(make_subscription(name="In 3 days", renewal_date=date(2025, 1, 4)))
        store.add_subscription(make_subscription(name="In 20 days", renewal_date=date(2025, 1, 21)))

        upcoming = store.upcoming_renewals(within_days=7, today=today)
        assert [s.name for s in upcoming] == ["In 3 days"]

    def test_mutations_are_audited(self, store, audit_storage, make_subscription):
        sub = make_subscription()
        store.add_subscription(sub)
        store.delete_subscription(sub.id)
        store.replace_all([])

        types = _event_types(audit_storage)
        assert AuditEventType.STORE_LOADED in types
        assert AuditEventType.SUBSCRIPTION_ADDED in types
        assert AuditEventType.SUBSCRIPTION_DELETED in types
        assert AuditEventType.SUBSCRIPTIONS_REPLACED in types


class TestStorePersistenceFailures:
    """A broken backend never crashes the store."""

    def test_load_failure_starts_empty(self, make_subscription, audit_logger, audit_storage):
        storage = InMemorySubscriptionStorage([make_subscription()])
        storage.fail_on_load = True

        store = SubscriptionStore(storage, audit_logger)

        assert len(store) == 0
        assert AuditEventType.LOAD_FAILED in _event_types(audit_storage)

    def test_save_failure_keeps_memory_state(
        self, store, subscription_storage, audit_storage, make_subscription
    ):
        subscription_storage.fail_on_save = True
        sub = make_subscription()

        store.add_subscription(sub)

        assert store.get(sub.id) == sub
        assert store.has_unsaved_changes is True
        assert "Simulated save failure" in store.last_save_error
        assert subscription_storage.saved == []
        assert AuditEventType.SAVE_FAILED in _event_types(audit_storage)

    def test_next_successful_save_clears_warning(
        self, store, subscription_storage, make_subscription
    ):
        subscription_storage.fail_on_save = True
        first = make_subscription(name="First")
        store.add_subscription(first)

        subscription_storage.fail_on_save = False
        second = make_subscription(name="Second")
        store.add_subscription(second)

        assert store.has_unsaved_changes is False
        assert store.last_save_error is None
        assert subscription_storage.saved == [first, second]

    def test_retry_save(self, store, subscription_storage, make_subscription):
        subscription_storage.fail_on_save = True
        store.add_subscription(make_subscription())
        assert store.retry_save() is False

        subscription_storage.fail_on_save = False
        assert store.retry_save() is True
        assert len(subscription_storage.saved) == 1


class TestLoginState:
    """Tests for the persisted login flag."""

    def test_reads_flag_at_startup(self, audit_logger):
        state = LoginState(InMemoryLoginStateStorage(initial=True), audit_logger)
        assert state.is_logged_in is True

    def test_log_in_and_out_persist(self, login_state, login_storage):
        login_state.log_in()
        assert login_state.is_logged_in is True
        assert login_storage.value is True

        login_state.log_out()
        assert login_state.is_logged_in is False
        assert login_storage.value is False

    def test_load_failure_means_logged_out(self, audit_logger):
        storage = InMemoryLoginStateStorage(initial=True)
        storage.fail_on_load = True
        state = LoginState(storage, audit_logger)
        assert state.is_logged_in is False

    def test_save_failure_keeps_memory_state(self, login_state, login_storage):
        login_storage.fail_on_save = True
        login_state.log_in()
        assert login_state.is_logged_in is True
        assert login_state.has_unsaved_changes is True
        assert login_storage.value is False


class TestJsonFileStorage:
    """Tests for the JSON file backends."""

    def test_missing_file_loads_empty(self, tmp_path):
        storage = JsonFileSubscriptionStorage(tmp_path / "subscriptions.json")
        assert storage.load() == []

    def test_round_trip_keeps_ids(self, tmp_path, make_subscription):
        path = tmp_path / "nested" / "subscriptions.json"
        subs = [
            make_subscription(name="Netflix", cost="17.99"),
            make_subscription(
                name="Gym",
                cost="9.50",
                cycle=PaymentCycle.WEEKLY,
                category=Category.FITNESS,
                currency_code="GBP",
                is_custom=True,
            ),
        ]

        JsonFileSubscriptionStorage(path).save(subs)
        loaded = JsonFileSubscriptionStorage(path).load()

        assert loaded == subs
        assert [s.id for s in loaded] == [s.id for s in subs]

    def test_file_is_human_readable(self, tmp_path, make_subscription):
        path = tmp_path / "subscriptions.json"
        sub = make_subscription(name="Netflix", cost="17.99")
        JsonFileSubscriptionStorage(path).save([sub])

        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["version"] == 1
        record = document["subscriptions"][0]
        assert record["id"] == str(sub.id)
        assert record["name"] == "Netflix"
        assert record["cost"] == "17.99"
        assert record["renewal_date"] == "2025-01-15"
        assert record["payment_cycle"] == "monthly"
        assert set(record) == {
            "id", "name", "cost", "currency_code", "renewal_date",
            "payment_cycle", "category", "is_custom",
        }

    def test_invalid_json_raises_corrupt_data(self, tmp_path):
        path = tmp_path / "subscriptions.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CorruptDataError):
            JsonFileSubscriptionStorage(path).load()

    def test_invalid_record_raises_corrupt_data(self, tmp_path):
        path = tmp_path / "subscriptions.json"
        path.write_text(
            json.dumps({"version": 1, "subscriptions": [{"name": "No cost"}]}),
            encoding="utf-8",
        )
        with pytest.raises(CorruptDataError):
            JsonFileSubscriptionStorage(path).load()

    def test_invalid_utf8_raises_corrupt_data(self, tmp_path):
        path = tmp_path / "subscriptions.json"
        path.write_bytes(b'{"subscriptions": [\xff\xfe]}')
        with pytest.raises(CorruptDataError):
            JsonFileSubscriptionStorage(path).load()

    def test_store_survives_invalid_utf8(self, tmp_path, audit_logger, audit_storage):
        path = tmp_path / "subscriptions.json"
        path.write_bytes(b'{"subscriptions": [\xff\xfe]}')

        store = SubscriptionStore(JsonFileSubscriptionStorage(path), audit_logger)

        assert len(store) == 0
        assert AuditEventType.LOAD_FAILED in _event_types(audit_storage)

    def test_login_state_survives_invalid_utf8(self, tmp_path, audit_logger):
        path = tmp_path / "login_state.json"
        path.write_bytes(b'{"is_logged_in": \xff}')
        with pytest.raises(CorruptDataError):
            JsonFileLoginStateStorage(path).load()

        state = LoginState(JsonFileLoginStateStorage(path), audit_logger)
        assert state.is_logged_in is False

    def test_store_survives_corrupt_file(self, tmp_path, audit_logger):
        path = tmp_path / "subscriptions.json"
        path.write_text("garbage", encoding="utf-8")
        store = SubscriptionStore(JsonFileSubscriptionStorage(path), audit_logger)
        assert len(store) == 0

    def test_login_state_round_trip(self, tmp_path):
        path = tmp_path / "login_state.json"
        storage = JsonFileLoginStateStorage(path)
        assert storage.load() is False

        storage.save(True)
        assert JsonFileLoginStateStorage(path).load() is True

    def test_login_state_rejects_non_boolean(self, tmp_path):
        path = tmp_path / "login_state.json"
        path.write_text(json.dumps({"is_logged_in": "yes"}), encoding="utf-8")
        with pytest.raises(CorruptDataError):
            JsonFileLoginStateStorage(path).load()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
