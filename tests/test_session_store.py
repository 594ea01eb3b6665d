from datetime import datetime, timedelta, timezone

from app.core.session_store import TokenBlacklist


def test_add_and_contains():
    store = TokenBlacklist()
    store.init()

    store.add("abc", datetime.now(timezone.utc) + timedelta(hours=1))

    assert store.active
    assert store.contains("abc")
    assert not store.contains("other")


def test_sweep_drops_only_expired():
    store = TokenBlacklist()
    store.init()
    now = datetime(2030, 1, 1, tzinfo=timezone.utc)
    store.add("old", now - timedelta(seconds=1))
    store.add("fresh", now + timedelta(minutes=5))

    assert store.sweep(now) == 1
    assert not store.contains("old")
    assert store.contains("fresh")
    assert len(store) == 1


def test_teardown_clears():
    store = TokenBlacklist()
    store.init()
    store.add("abc", datetime.now(timezone.utc) + timedelta(hours=1))

    store.teardown()

    assert not store.active
    assert len(store) == 0
