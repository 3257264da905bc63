"""Tests for the monthly usage tracker and the session."""

import json
from datetime import datetime

from waylo.services.session import Session
from waylo.services.usage_tracker import USAGE_STORAGE_KEY, UsageTracker

AUGUST = datetime(2025, 8, 14, 9, 30)


def _clock():
    return AUGUST


def _tracker(store, limit=3):
    return UsageTracker(store, limit=limit, clock=_clock)


def _stored(store):
    return json.loads(store[USAGE_STORAGE_KEY])


def test_missing_blob_initialized():
    store = {}

    usage = _tracker(store).get_usage()

    assert usage.count == 0
    assert usage.month == "2025-08"
    assert _stored(store) == {"count": 0, "month": "2025-08"}


def test_can_generate_below_limit():
    for count, expected in [(0, True), (2, True), (3, False), (7, False)]:
        store = {USAGE_STORAGE_KEY: json.dumps({"count": count, "month": "2025-08"})}
        assert _tracker(store).can_generate() is expected


def test_new_month_resets():
    store = {USAGE_STORAGE_KEY: json.dumps({"count": 3, "month": "2025-07"})}
    tracker = _tracker(store)

    assert tracker.can_generate()
    assert tracker.remaining() == 3
    assert _stored(store) == {"count": 0, "month": "2025-08"}


def test_same_month_number_other_year_resets():
    store = {USAGE_STORAGE_KEY: json.dumps({"count": 3, "month": "2024-08"})}

    assert _tracker(store).get_usage().count == 0


def test_corrupt_blob_resets():
    for raw in ["not json", json.dumps({"count": "many"}), json.dumps([1, 2])]:
        store = {USAGE_STORAGE_KEY: raw}
        assert _tracker(store).get_usage().count == 0
        assert _stored(store)["month"] == "2025-08"


def test_increment():
    store = {USAGE_STORAGE_KEY: json.dumps({"count": 1, "month": "2025-08"})}
    tracker = _tracker(store)

    usage = tracker.increment()

    assert usage.count == 2
    assert _stored(store) == {"count": 2, "month": "2025-08"}
    assert tracker.remaining() == 1


def test_custom_limit():
    store = {USAGE_STORAGE_KEY: json.dumps({"count": 3, "month": "2025-08"})}
    assert _tracker(store, limit=5).can_generate()


class BrokenStore(dict):
    def __setitem__(self, key, value):
        raise OSError("storage full")


def test_store_write_failure_is_not_raised():
    tracker = _tracker(BrokenStore())

    assert tracker.increment().count == 1
    assert tracker.can_generate()


def test_session_premium_by_email():
    assert Session(user_id="u1", email="ada+premium@example.com").is_premium
    assert not Session(user_id="u1", email="ada@example.com").is_premium


def test_session_usage_tracker_uses_store():
    store = {USAGE_STORAGE_KEY: json.dumps({"count": 3, "month": "2025-08"})}
    session = Session(user_id="u1", email="ada@example.com", usage_store=store)

    tracker = session.usage_tracker(limit=4)

    assert tracker.store is store
    assert tracker.limit == 4
