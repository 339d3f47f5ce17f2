"""IdentityManager: credential checks, live profiles, demo provisioning."""
import pytest

from caseconf.errors import InvalidCredentials, Unauthorized
from caseconf.models import RecordKind, UserRole
from caseconf.services.identity import IdentityManager
from caseconf.services.memory_store import InMemoryRecordStore
from caseconf.services.passwords import get_password_hash
from caseconf.services.sessions import SessionStore

from conftest import ADMIN


@pytest.fixture
def teacher(seeded_store):
    return seeded_store.create(
        RecordKind.TEACHERS,
        {"name": "Alice", "email": "alice@test.com", "password_hash": get_password_hash("secret")},
        ADMIN,
    )


@pytest.fixture
def manager(seeded_store):
    return IdentityManager(seeded_store, SessionStore(), default_ttl_minutes=30)


def test_login_returns_session_and_live_profile(manager, teacher):
    session, profile = manager.login("alice@test.com", "secret", UserRole.TEACHER)
    assert session.user_id == teacher.id
    assert profile["id"] == teacher.id
    assert profile["role"] == "teacher"
    assert "passwordHash" not in profile
    assert manager.store.recent_logs(1)[0].action == "Alice logged in"


def test_wrong_password_is_invalid_credentials(manager, teacher):
    with pytest.raises(InvalidCredentials) as exc:
        manager.login("alice@test.com", "nope", UserRole.TEACHER)
    assert exc.value.message == "Invalid credentials"


def test_wrong_role_is_invalid_credentials(manager, teacher):
    with pytest.raises(InvalidCredentials):
        manager.login("alice@test.com", "secret", UserRole.PARENT)


def test_unknown_email_rejected_without_provisioning(manager):
    with pytest.raises(InvalidCredentials):
        manager.login("ghost@test.com", "whatever", UserRole.TEACHER)
    assert manager.store.list(RecordKind.TEACHERS) == []


def test_demo_provisioning_is_opt_in(seeded_store):
    manager = IdentityManager(seeded_store, SessionStore(), allow_demo_provisioning=True)
    session, profile = manager.login("jane.doe@test.com", "pw", UserRole.PARENT)
    assert profile["name"] == "Jane Doe"
    assert profile["role"] == "parent"
    assert seeded_store.get(RecordKind.PARENTS, session.user_id).email == "jane.doe@test.com"
    # The provisioned account now requires its password.
    with pytest.raises(InvalidCredentials):
        manager.login("jane.doe@test.com", "other", UserRole.PARENT)


def test_current_user_reflects_later_edits(manager, teacher):
    session, _ = manager.login("alice@test.com", "secret", UserRole.TEACHER)
    manager.store.update(RecordKind.TEACHERS, teacher.id, {"phone": "555-0100"}, ADMIN)
    assert manager.current_user(session.session_id)["phone"] == "555-0100"


def test_current_user_requires_session(manager):
    with pytest.raises(Unauthorized):
        manager.current_user(None)
    with pytest.raises(Unauthorized):
        manager.current_user("bogus")


def test_session_invalid_once_account_deleted(manager, teacher):
    session, _ = manager.login("alice@test.com", "secret", UserRole.TEACHER)
    manager.store.delete(RecordKind.TEACHERS, teacher.id, ADMIN)
    with pytest.raises(Unauthorized):
        manager.resolve(session.session_id)
    assert manager.sessions.get(session.session_id) is None


def test_logout_is_idempotent(manager, teacher):
    session, _ = manager.login("alice@test.com", "secret", UserRole.TEACHER)
    manager.logout(session.session_id)
    manager.logout(session.session_id)
    manager.logout(None)
    with pytest.raises(Unauthorized):
        manager.resolve(session.session_id)


def test_session_ttl_follows_settings(manager, teacher):
    manager.store.update_settings({"sessionTimeout": 45}, ADMIN)
    session, _ = manager.login("alice@test.com", "secret", UserRole.TEACHER)
    assert session.ttl_seconds == 45 * 60


def test_demo_provisioning_refuses_admin_role(seeded_store):
    manager = IdentityManager(seeded_store, SessionStore(), allow_demo_provisioning=True)
    with pytest.raises(InvalidCredentials):
        manager.login("stranger@test.com", "pw", UserRole.ADMIN)
    assert seeded_store.find_user("stranger@test.com", UserRole.ADMIN) is None


class _LateRegistrationStore(InMemoryRecordStore):
    """Can miss one lookup, as when another login registers the email in between."""

    def __init__(self):
        super().__init__()
        self.miss_next_lookup = False

    def find_user(self, email, role):
        if self.miss_next_lookup:
            self.miss_next_lookup = False
            return None
        return super().find_user(email, role)


@pytest.mark.parametrize("password, accepted", [("first", True), ("second", False)])
def test_provisioning_race_falls_back_to_credential_check(password, accepted):
    store = _LateRegistrationStore()
    store.create(
        RecordKind.PARENTS, {"name": "Jane", "email": "jane@test.com", "password_hash": get_password_hash("first")}, None
    )
    manager = IdentityManager(store, SessionStore(), allow_demo_provisioning=True)
    store.miss_next_lookup = True

    if accepted:
        session, profile = manager.login("jane@test.com", password, UserRole.PARENT)
        assert profile["name"] == "Jane"
        assert session.user_id == "P1001"
    else:
        with pytest.raises(InvalidCredentials):
            manager.login("jane@test.com", password, UserRole.PARENT)
    assert len(store.list(RecordKind.PARENTS)) == 1
