import pytest

from reclaim.models.activity_log import ACTIVITY_ACTIONS


def test_newest_first(store):
    for n in range(5):
        store.activity.record("user1", "John Doe", "item_reported", details=f"entry {n}")

    entries = store.activity.list_all()
    assert [e.details for e in entries] == [f"entry {n}" for n in reversed(range(5))]
    assert entries[0].id > entries[-1].id


def test_limit(store):
    for n in range(5):
        store.activity.record("user1", "John Doe", "item_reported", details=f"entry {n}")

    assert [e.details for e in store.activity.list_all(limit=2)] == ["entry 4", "entry 3"]
    assert store.activity.count() == 5


def test_unknown_action_rejected(store):
    with pytest.raises(ValueError):
        store.activity.record("user1", "John Doe", "item_teleported", details="?")

    assert store.activity.list_all() == []


def test_reserved_actions_are_recordable(store):
    assert {"failed_claim_attempt", "item_status_changed"} <= ACTIVITY_ACTIONS

    entry = store.activity.record("admin1", "Guard Admin", "item_status_changed", details="manual fix")
    assert entry.id is not None


def test_user_history_hides_staff_decisions(store, submit_report, admin):
    # an admin who also reports an item only sees the report in their own history
    item = submit_report(actor=admin)
    store.reports.decide_report(item.id, True, admin)
    store.activity.record("user9", "Someone Else", "item_reported", details="other user")

    history = store.activity.list_for_user("admin1")
    assert [e.action for e in history] == ["item_reported"]

    assert len(store.activity.list_all()) == 3
