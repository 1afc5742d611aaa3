"""Presence store and its sweep job."""

from datetime import datetime, timedelta, timezone

from groupcal.scheduler.presence_job import run_presence_sweep
from groupcal.services.presence import PresenceStore


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 6, 10, 18, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def test_active_users_expire_after_timeout():
    clock = FakeClock()
    store = PresenceStore(timeout=timedelta(minutes=30), clock=clock)
    store.touch("alice")
    clock.advance(minutes=20)
    store.touch("bob")
    assert [u["username"] for u in store.active()] == ["bob", "alice"]

    clock.advance(minutes=15)
    assert [u["username"] for u in store.active()] == ["bob"]
    # Hidden but not yet evicted
    assert len(store) == 2


def test_sweep_evicts_stale_entries():
    clock = FakeClock()
    store = PresenceStore(timeout=timedelta(minutes=30), clock=clock)
    store.touch("alice")
    store.touch("bob")
    clock.advance(minutes=31)
    store.touch("bob")
    assert run_presence_sweep(store) == 1
    assert len(store) == 1
    assert run_presence_sweep(store) == 0


def test_heartbeat_refreshes_last_seen():
    clock = FakeClock()
    store = PresenceStore(timeout=timedelta(minutes=30), clock=clock)
    store.touch("alice")
    clock.advance(minutes=29)
    store.touch("alice")
    clock.advance(minutes=29)
    assert store.sweep() == 0
    assert store.active()[0]["last_seen"] == (clock.now - timedelta(minutes=29)).isoformat()
