"""Login, session resolution and logout."""
from __future__ import annotations

import logging
from typing import Any, Optional, assert_never

from caseconf.errors import InvalidCredentials, InvalidInput, NotFound, Unauthorized
from caseconf.models import Identity, RecordKind, User, UserRole
from caseconf.services.passwords import get_password_hash, verify_password
from caseconf.services.sessions import SessionRecord, SessionStore
from caseconf.services.store import RecordStore

logger = logging.getLogger(__name__)


def profile_kind(role: UserRole) -> RecordKind:
    """Collection holding the full record for a role."""
    match role:
        case UserRole.ADMIN:
            return RecordKind.USERS
        case UserRole.TEACHER:
            return RecordKind.TEACHERS
        case UserRole.PARENT:
            return RecordKind.PARENTS
        case _:
            assert_never(role)


class IdentityManager:
    def __init__(
        self,
        store: RecordStore,
        sessions: SessionStore,
        *,
        default_ttl_minutes: int = 30,
        allow_demo_provisioning: bool = False,
    ):
        self.store = store
        self.sessions = sessions
        self.default_ttl_minutes = default_ttl_minutes
        self.allow_demo_provisioning = allow_demo_provisioning

    def login(self, email: str, password: str, role: UserRole) -> tuple[SessionRecord, dict[str, Any]]:
        user = self.store.find_user(email, role)
        if user is None:
            # Admin accounts are never provisioned on the fly.
            if not self.allow_demo_provisioning or role is UserRole.ADMIN:
                logger.warning("Login failed for %s (%s): unknown account", email, role.value)
                raise InvalidCredentials()
            user = self._provision_demo_account(email, password, role)
        if not verify_password(password, user.password_hash):
            logger.warning("Login failed for %s (%s): bad password", email, role.value)
            raise InvalidCredentials()

        session = self.sessions.create(user_id=user.id, role=role, ttl_seconds=self._session_ttl_seconds())
        self.store.log(f"{user.name} logged in", session.identity)
        logger.info("User %s logged in as %s", user.id, role.value)
        return session, self.profile(session.identity)

    def resolve(self, session_id: Optional[str]) -> Identity:
        """Identity bound to a live session whose user still exists."""
        if not session_id:
            raise Unauthorized()
        session = self.sessions.get(session_id)
        if session is None:
            raise Unauthorized("Session expired or invalid")
        try:
            self.store.get(RecordKind.USERS, session.user_id)
        except NotFound:
            self.sessions.delete(session_id)
            raise Unauthorized("Session expired or invalid")
        return session.identity

    def current_user(self, session_id: Optional[str]) -> dict[str, Any]:
        return self.profile(self.resolve(session_id))

    def profile(self, identity: Identity) -> dict[str, Any]:
        """Live record for the identity, fetched fresh from the store."""
        try:
            record = self.store.get(profile_kind(identity.role), identity.user_id)
        except NotFound:
            raise Unauthorized("Session expired or invalid")
        return {**record.to_json(), "role": identity.role.value, "userType": identity.role.value}

    def logout(self, session_id: Optional[str]) -> None:
        if not session_id:
            return
        session = self.sessions.pop(session_id)
        if session is not None:
            self.store.log("Logged out", session.identity)

    def _session_ttl_seconds(self) -> int:
        minutes = self.store.get_settings().get("sessionTimeout") or self.default_ttl_minutes
        return int(minutes) * 60

    def _provision_demo_account(self, email: str, password: str, role: UserRole) -> User:
        local = email.split("@", 1)[0]
        name = " ".join(part.capitalize() for part in local.replace("_", ".").split(".") if part) or "Demo User"
        data = {"name": name, "email": email, "password_hash": get_password_hash(password)}
        logger.warning("Provisioning demo %s account for %s", role.value, email)
        try:
            record = self.store.create(profile_kind(role), data, None)
        except InvalidInput:
            # A concurrent login registered the email first; check against that account.
            logger.info("Demo %s account for %s already provisioned", role.value, email)
        else:
            self.store.log(f"Provisioned demo {role.value} account: {record.name}", None)
        user = self.store.find_user(email, role)
        if user is None:
            raise InvalidCredentials()
        return user
