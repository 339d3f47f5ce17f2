"""SessionStore: opaque ids, fixed vs sliding expiry, idempotent destroy."""
from caseconf.models import UserRole
from caseconf.services.sessions import SessionStore


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_create_and_get_roundtrip():
    store = SessionStore()
    rec = store.create(user_id="T1001", role=UserRole.TEACHER, ttl_seconds=60)
    assert len(rec.session_id) >= 32
    got = store.get(rec.session_id)
    assert got is not None
    assert got.identity.user_id == "T1001"
    assert got.identity.role is UserRole.TEACHER


def test_session_ids_are_unique():
    store = SessionStore()
    ids = {store.create(user_id="A1001", role=UserRole.ADMIN, ttl_seconds=60).session_id for _ in range(50)}
    assert len(ids) == 50


def test_fixed_expiry():
    clock = FakeClock()
    store = SessionStore(sliding=False, clock=clock)
    rec = store.create(user_id="A1001", role=UserRole.ADMIN, ttl_seconds=60)
    clock.now += 50
    assert store.get(rec.session_id) is not None
    clock.now += 20
    assert store.get(rec.session_id) is None
    assert len(store) == 0


def test_sliding_expiry_extends_on_use():
    clock = FakeClock()
    store = SessionStore(sliding=True, clock=clock)
    rec = store.create(user_id="A1001", role=UserRole.ADMIN, ttl_seconds=60)
    for _ in range(5):
        clock.now += 50
        assert store.get(rec.session_id) is not None
    clock.now += 61
    assert store.get(rec.session_id) is None


def test_delete_is_idempotent():
    store = SessionStore()
    rec = store.create(user_id="A1001", role=UserRole.ADMIN, ttl_seconds=60)
    store.delete(rec.session_id)
    store.delete(rec.session_id)
    store.delete("never-issued")
    assert store.get(rec.session_id) is None


def test_delete_for_user_only_drops_that_user():
    store = SessionStore()
    a = store.create(user_id="T1001", role=UserRole.TEACHER, ttl_seconds=60)
    b = store.create(user_id="T1001", role=UserRole.TEACHER, ttl_seconds=60)
    other = store.create(user_id="P1001", role=UserRole.PARENT, ttl_seconds=60)
    assert store.delete_for_user("T1001") == 2
    assert store.get(a.session_id) is None
    assert store.get(b.session_id) is None
    assert store.get(other.session_id) is not None
