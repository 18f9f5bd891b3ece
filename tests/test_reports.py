import uuid
from datetime import date, time

import pytest

from reclaim.db.db import create_db_engine
from reclaim.errors import InvalidState, NotFound
from reclaim.services.store import LifecycleStore


def test_submit_report_is_pending_and_logged(store, submit_report):
    item = submit_report(item_type="Wallet")

    assert item.status == "pending"
    assert item.security_questions == [{"question": "color?", "answer": "red"}]

    logs = store.activity.list_all()
    assert len(logs) == 1
    assert logs[0].action == "item_reported"
    assert logs[0].item_type == "Wallet"
    assert logs[0].item_id == item.id
    assert logs[0].details == "Reported found item: Wallet at Library - 2nd Floor"


def test_submit_report_requires_a_question(store, reporter):
    with pytest.raises(ValueError):
        store.reports.submit_report(
            item_type="Wallet",
            location="Gym",
            date_found=None,
            time_found=None,
            questions=[],
            reporter=reporter,
        )

    assert store.activity.list_all() == []


def test_submit_report_refuses_a_fourth_question(store, reporter):
    questions = [{"question": f"q{i}?", "answer": f"a{i}"} for i in range(4)]

    with pytest.raises(ValueError):
        store.reports.submit_report(
            item_type="Wallet",
            location="Gym",
            date_found=date(2025, 10, 1),
            time_found=time(14, 30),
            questions=questions,
            reporter=reporter,
        )

    assert store.reports.list_reports() == []
    assert store.activity.list_all() == []


def test_other_details_kept_only_for_other(submit_report):
    other = submit_report(item_type="Other", other_details="Umbrella")
    phone = submit_report(item_type="Phone", other_details="ignored")

    assert other.other_details == "Umbrella"
    assert phone.other_details is None


def test_default_photo_when_none_given(submit_report):
    item = submit_report()
    assert item.photo_ref.startswith("https://")


def test_approve_report_verifies_and_logs_once(store, submit_report, admin):
    item = submit_report()
    before = len(store.activity.list_all())

    store.reports.decide_report(item.id, True, admin)

    assert store.reports.get_report(item.id).status == "verified"
    logs = store.activity.list_all()
    assert len(logs) == before + 1
    assert logs[0].action == "item_verified"
    assert logs[0].user_id == "admin1"
    assert logs[0].details == "Verified item report for Wallet"


def test_reject_report_deletes_it(store, submit_report, admin):
    kept = submit_report(item_type="Wallet")
    rejected = submit_report(item_type="Laptop")

    assert store.reports.decide_report(rejected.id, False, admin) is None

    ids = [i.id for i in store.reports.list_reports()]
    assert rejected.id not in ids
    assert kept.id in ids

    with pytest.raises(NotFound):
        store.reports.get_report(rejected.id)

    latest = store.activity.list_all()[0]
    assert latest.action == "item_rejected"
    assert latest.item_type == "Laptop"
    assert latest.item_id == rejected.id


def test_redeciding_a_report_fails_without_logging(store, submit_report, admin):
    item = submit_report()
    store.reports.decide_report(item.id, True, admin)
    count = len(store.activity.list_all())

    with pytest.raises(InvalidState):
        store.reports.decide_report(item.id, True, admin)
    with pytest.raises(InvalidState):
        store.reports.decide_report(item.id, False, admin)

    assert len(store.activity.list_all()) == count
    assert store.reports.get_report(item.id).status == "verified"


def test_deciding_unknown_report(store, admin):
    with pytest.raises(NotFound):
        store.reports.decide_report(uuid.uuid4(), True, admin)

    assert store.activity.list_all() == []


def test_rejected_reports_can_be_retained(admin, reporter):
    store = LifecycleStore(engine=create_db_engine("sqlite://"), retain_rejected=True)

    item = store.reports.submit_report(
        item_type="Bag",
        location="Gym",
        date_found=date(2025, 10, 2),
        time_found=time(16, 0),
        questions=[{"question": "brand?", "answer": "jansport"}],
        reporter=reporter,
    )
    store.reports.decide_report(item.id, False, admin)

    # still hidden everywhere, and still terminal
    assert store.reports.list_reports() == []
    with pytest.raises(NotFound):
        store.reports.get_report(item.id)
    with pytest.raises(NotFound):
        store.reports.decide_report(item.id, True, admin)

    store.dispose()


def test_list_reports_filters(store, submit_report, admin, claimant):
    mine = submit_report()
    theirs = submit_report(actor=claimant)
    store.reports.decide_report(theirs.id, True, admin)

    assert [i.id for i in store.reports.list_reports(status="pending")] == [mine.id]
    assert [i.id for i in store.reports.list_reports(reported_by=claimant.user_id)] == [theirs.id]


def test_status_only_moves_forward(store, submit_report, admin):
    items = [submit_report() for _ in range(3)]
    store.reports.decide_report(items[0].id, True, admin)
    store.reports.decide_report(items[1].id, False, admin)

    statuses = {i.status for i in store.reports.list_reports()}
    assert statuses <= {"pending", "verified", "claimed"}
