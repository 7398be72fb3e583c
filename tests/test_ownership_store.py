import threading
from datetime import timezone

import pytest

from features.dashboard.infrastructure.repositories import (
    ProtectionStatusStore,
    SubscriptionStore,
    ThreatLogStore,
)
from features.ownership import OwnedRecordConflictError


@pytest.fixture
def owners(make_user):
    return make_user(), make_user()


def _aware(value):
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _threat(**overrides):
    payload = {
        "head_type": "deepfake",
        "threat_level": "high",
        "description": "Synthetic voice call",
        "status": "detected",
    }
    payload.update(overrides)
    return payload


def test_foreign_record_is_indistinguishable_from_missing(app, owners):
    alice, bob = owners
    with app.app_context():
        store = ThreatLogStore()
        log = store.create_owned(alice, _threat())

        assert store.get_owned_by_id(log.id, bob) is None
        assert store.get_owned_by_id("00000000-0000-4000-8000-000000000000", bob) is None
        assert store.get_owned_by_id(log.id, alice).id == log.id
        assert store.list_owned(bob) == []


def test_update_of_foreign_record_leaves_it_untouched(app, owners):
    alice, bob = owners
    with app.app_context():
        store = ThreatLogStore()
        log = store.create_owned(alice, _threat())

        assert store.update_owned_by_id(log.id, bob, {"status": "resolved"}) is None

        reloaded = store.get_owned_by_id(log.id, alice)
        assert reloaded.status == "detected"
        assert reloaded.resolved_at is None


def test_create_ignores_supplied_owner_and_id(app, owners):
    alice, bob = owners
    with app.app_context():
        store = ThreatLogStore()
        log = store.create_owned(alice, _threat(user_id=bob, id="forged-id"))

        assert log.user_id == alice
        assert log.id != "forged-id"
        assert store.list_owned(bob) == []


def test_patch_cannot_move_record_to_other_owner(app, owners):
    alice, bob = owners
    with app.app_context():
        store = ThreatLogStore()
        log = store.create_owned(alice, _threat())

        updated = store.update_owned_by_id(log.id, alice, {"user_id": bob, "status": "blocked"})

        assert updated.user_id == alice
        assert updated.status == "blocked"


def test_unknown_fields_are_rejected(app, owners):
    alice, _ = owners
    with app.app_context():
        with pytest.raises(ValueError):
            ThreatLogStore().create_owned(alice, _threat(not_a_column=True))


def test_owner_id_is_required(app):
    with app.app_context():
        with pytest.raises(ValueError):
            ThreatLogStore().list_owned("")


def test_resolved_status_stamps_and_clears_resolved_at(app, owners):
    alice, _ = owners
    with app.app_context():
        store = ThreatLogStore()
        log = store.create_owned(alice, _threat())

        resolved = store.update_owned_by_id(log.id, alice, {"status": "resolved"})
        assert resolved.resolved_at is not None

        reopened = store.update_owned_by_id(log.id, alice, {"status": "blocked"})
        assert reopened.resolved_at is None


def test_client_supplied_resolved_at_is_ignored(app, owners):
    alice, _ = owners
    with app.app_context():
        log = ThreatLogStore().create_owned(alice, _threat(resolved_at="2000-01-01"))

        assert log.resolved_at is None


def test_threat_logs_listed_newest_first(app, owners):
    alice, _ = owners
    with app.app_context():
        store = ThreatLogStore()
        first = store.create_owned(alice, _threat(description="first"))
        second = store.create_owned(alice, _threat(description="second"))

        ids = [log.id for log in store.list_owned(alice)]
        assert ids.index(second.id) < ids.index(first.id)


def test_second_subscription_is_a_conflict(app, owners, plan_id):
    alice, bob = owners
    with app.app_context():
        store = SubscriptionStore()
        store.create_owned(alice, {"plan_id": plan_id, "billing_cycle": "monthly"})

        with pytest.raises(OwnedRecordConflictError):
            store.create_owned(alice, {"plan_id": plan_id, "billing_cycle": "yearly"})

        assert store.create_owned(bob, {"plan_id": plan_id, "billing_cycle": "yearly"}).user_id == bob


def test_cancelling_subscription_stamps_end_date(app, owners, plan_id):
    alice, _ = owners
    with app.app_context():
        store = SubscriptionStore()
        store.create_owned(alice, {"plan_id": plan_id, "billing_cycle": "monthly"})

        cancelled = store.update_owned(alice, {"status": "cancelled"})
        assert cancelled.status == "cancelled"
        assert cancelled.end_date is not None

        reactivated = store.update_owned(alice, {"status": "active"})
        assert reactivated.end_date is None


def test_singleton_update_without_row_returns_none(app, owners):
    alice, _ = owners
    with app.app_context():
        assert SubscriptionStore().update_owned(alice, {"status": "cancelled"}) is None


def test_protection_update_touches_updated_at(app, owners):
    alice, _ = owners
    with app.app_context():
        store = ProtectionStatusStore()
        status, created = store.get_or_create_owned(alice, {"deepfake_enabled": True})
        assert created is True
        before = status.updated_at

        updated = store.update_owned(alice, {"deepfake_enabled": False, "updated_at": None})

        assert updated.deepfake_enabled is False
        assert updated.updated_at is not None
        assert _aware(updated.updated_at) >= _aware(before)


def test_get_or_create_returns_existing_row(app, owners):
    alice, _ = owners
    with app.app_context():
        store = ProtectionStatusStore()
        first, created_first = store.get_or_create_owned(alice, {})
        second, created_second = store.get_or_create_owned(alice, {})

        assert (created_first, created_second) == (True, False)
        assert first.id == second.id


def _race(app, worker, count=2):
    barrier = threading.Barrier(count)
    outcomes = []
    guard = threading.Lock()

    def run():
        from webapp.extensions import db

        with app.app_context():
            barrier.wait(timeout=10)
            try:
                result = worker()
            finally:
                db.session.remove()
        with guard:
            outcomes.append(result)

    threads = [threading.Thread(target=run) for _ in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return outcomes


def test_concurrent_subscription_creates_have_one_winner(app, owners, plan_id):
    alice, _ = owners

    def create():
        try:
            SubscriptionStore().create_owned(alice, {"plan_id": plan_id, "billing_cycle": "monthly"})
        except OwnedRecordConflictError:
            return "conflict"
        return "created"

    outcomes = _race(app, create)

    assert sorted(outcomes) == ["conflict", "created"]
    with app.app_context():
        assert SubscriptionStore().get_owned(alice) is not None


def test_concurrent_provisioning_yields_single_row(app, owners):
    alice, _ = owners

    def provision():
        record, created = ProtectionStatusStore().get_or_create_owned(alice, {})
        return record.id, created

    outcomes = _race(app, provision)

    assert len({record_id for record_id, _ in outcomes}) == 1
    assert sorted(created for _, created in outcomes) == [False, True]


def test_singleton_update_refused_for_multi_row_store(app, owners):
    alice, _ = owners
    with app.app_context():
        store = ThreatLogStore()
        store.create_owned(alice, _threat())

        with pytest.raises(TypeError):
            store.update_owned(alice, {"status": "resolved"})
