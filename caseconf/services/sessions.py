"""
Server-side session store.

Cookies carry only an opaque session id; the identity it is bound to stays on
the server. Expiry is either fixed (set at login) or sliding (pushed forward on
every successful lookup).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional
import logging
import secrets
import threading
import time

from caseconf.models import Identity, UserRole

logger = logging.getLogger(__name__)


@dataclass
class SessionRecord:
    session_id: str
    user_id: str
    role: UserRole
    ttl_seconds: int
    expires_at: float

    @property
    def identity(self) -> Identity:
        return Identity(user_id=self.user_id, role=self.role)


class SessionStore:
    def __init__(self, *, sliding: bool = True, clock: Callable[[], float] = time.time):
        self._data: Dict[str, SessionRecord] = {}
        self._lock = threading.Lock()
        self._sliding = sliding
        self._clock = clock

    def create(self, *, user_id: str, role: UserRole, ttl_seconds: int) -> SessionRecord:
        sid = secrets.token_urlsafe(32)
        rec = SessionRecord(
            session_id=sid,
            user_id=user_id,
            role=role,
            ttl_seconds=ttl_seconds,
            expires_at=self._clock() + ttl_seconds,
        )
        with self._lock:
            self._data[sid] = rec
        return rec

    def get(self, session_id: str) -> Optional[SessionRecord]:
        now = self._clock()
        with self._lock:
            rec = self._data.get(session_id)
            if not rec:
                return None
            if rec.expires_at < now:
                self._data.pop(session_id, None)
                logger.info("Session for %s expired", rec.user_id)
                return None
            if self._sliding:
                rec.expires_at = now + rec.ttl_seconds
            return rec

    def pop(self, session_id: str) -> Optional[SessionRecord]:
        with self._lock:
            return self._data.pop(session_id, None)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._data.pop(session_id, None)

    def delete_for_user(self, user_id: str) -> int:
        """Drop every session bound to ``user_id``; returns how many were removed."""
        with self._lock:
            doomed = [sid for sid, rec in self._data.items() if rec.user_id == user_id]
            for sid in doomed:
                del self._data[sid]
        return len(doomed)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
