"""Record store interface.

Every request handler and service talks to this interface only; the process-local
``InMemoryRecordStore`` is the reference implementation. A persistent backend
implements the same methods and keeps the same transactional guarantees: each
call is one logical transaction, including the paired credential record on
teacher/parent creation and the roster bookkeeping on reassignment.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel

from caseconf.models import ActivityLog, FormKind, FormStatus, Identity, RecordKind, Student, User, UserRole


class RecordStore(ABC):
    @abstractmethod
    def create(self, kind: RecordKind, data: dict[str, Any], actor: Optional[Identity]) -> BaseModel:
        """Create a record with a fresh id and return it.

        Teacher and parent payloads carry ``password_hash`` for the paired User.
        Raises InvalidInput for malformed data or unknown references.
        """

    @abstractmethod
    def get(self, kind: RecordKind, record_id: str) -> BaseModel:
        """Return one record; dangling references read as absent. Raises NotFound."""

    @abstractmethod
    def list(self, kind: RecordKind) -> list[BaseModel]:
        """All records of a kind in creation order. Users come back without credentials."""

    @abstractmethod
    def update(self, kind: RecordKind, record_id: str, patch: dict[str, Any], actor: Optional[Identity]) -> BaseModel:
        """Apply a partial update. Raises NotFound / InvalidInput."""

    @abstractmethod
    def delete(self, kind: RecordKind, record_id: str, actor: Optional[Identity]) -> BaseModel:
        """Remove a record (and its paired User). Raises NotFound."""

    @abstractmethod
    def find_user(self, email: str, role: UserRole) -> Optional[User]:
        """Credential lookup by (email, role); the only read exposing the hash."""

    @abstractmethod
    def set_password(self, user_id: str, password_hash: str, actor: Optional[Identity]) -> User:
        ...

    @abstractmethod
    def transition_form(
        self,
        student_id: str,
        form: FormKind,
        status: FormStatus,
        payload: Optional[dict[str, Any]],
        actor: Optional[Identity],
    ) -> Student:
        """Move a student's form forward and merge ``payload`` into it."""

    @abstractmethod
    def log(self, action: str, actor: Optional[Identity]) -> ActivityLog:
        ...

    @abstractmethod
    def recent_logs(self, limit: int) -> list[ActivityLog]:
        """Newest first."""

    @abstractmethod
    def get_settings(self) -> dict[str, Any]:
        ...

    @abstractmethod
    def update_settings(self, patch: dict[str, Any], actor: Optional[Identity]) -> dict[str, Any]:
        """Shallow-merge ``patch`` into the settings record."""
