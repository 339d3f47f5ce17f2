"""Role-based authorization and visibility scoping."""
from __future__ import annotations

from typing import Any, assert_never

from pydantic import BaseModel

from caseconf.errors import Forbidden, NotFound
from caseconf.models import Identity, Parent, RecordKind, Student, Teacher, UserRole
from caseconf.rbac import PermissionAction, has_permission
from caseconf.services.store import RecordStore


class AccessPolicy:
    """Decides what an identity may do and which records it may see.

    Scoping always reads the live Teacher/Parent record, so roster or children
    changes apply to sessions that are already open.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def authorize(self, identity: Identity, module: str, action: PermissionAction) -> None:
        if not has_permission(identity.role, module, action):
            raise Forbidden(f"Missing {module}.{action} permission")

    def visible(self, identity: Identity, kind: RecordKind) -> list[BaseModel]:
        records = self.store.list(kind)
        match identity.role:
            case UserRole.ADMIN:
                return records
            case UserRole.TEACHER:
                allowed = self._teacher_scope(identity, kind)
            case UserRole.PARENT:
                allowed = self._parent_scope(identity, kind)
            case _:
                assert_never(identity.role)
        return [r for r in records if r.id in allowed]

    def get_visible(self, identity: Identity, kind: RecordKind, record_id: str) -> BaseModel:
        record = self.store.get(kind, record_id)
        if identity.role is not UserRole.ADMIN and not any(r.id == record_id for r in self.visible(identity, kind)):
            raise Forbidden(f"Not authorized for this {kind.value.rstrip('s')}")
        return record

    def prepare_student_create(self, identity: Identity, data: dict[str, Any]) -> dict[str, Any]:
        """Teachers may only add students to their own roster."""
        self.authorize(identity, "students", "add")
        match identity.role:
            case UserRole.ADMIN:
                return data
            case UserRole.TEACHER:
                requested = data.get("assigned_teacher")
                if requested not in (None, identity.user_id):
                    raise Forbidden("Teachers can only add students to their own roster")
                return {**data, "assigned_teacher": identity.user_id}
            case UserRole.PARENT:
                raise Forbidden("Parents cannot add students")
            case _:
                assert_never(identity.role)

    def _own(self, kind: RecordKind, identity: Identity) -> BaseModel:
        try:
            return self.store.get(kind, identity.user_id)
        except NotFound:
            raise Forbidden("Account record no longer exists")

    def _teacher_scope(self, identity: Identity, kind: RecordKind) -> set[str]:
        teacher: Teacher = self._own(RecordKind.TEACHERS, identity)
        roster = {s.id for s in self.store.list(RecordKind.STUDENTS) if s.assigned_teacher == identity.user_id}
        match kind:
            case RecordKind.STUDENTS:
                return roster
            case RecordKind.SCHOOLS:
                return set(teacher.assigned_schools)
            case RecordKind.TEACHERS | RecordKind.USERS:
                return {identity.user_id}
            case RecordKind.PARENTS:
                parents: list[Parent] = self.store.list(RecordKind.PARENTS)
                return {p.id for p in parents if roster.intersection(p.children)}
            case _:
                assert_never(kind)

    def _parent_scope(self, identity: Identity, kind: RecordKind) -> set[str]:
        parent: Parent = self._own(RecordKind.PARENTS, identity)
        children = set(parent.children)
        match kind:
            case RecordKind.STUDENTS:
                return children
            case RecordKind.SCHOOLS:
                students: list[Student] = self.store.list(RecordKind.STUDENTS)
                return {s.school for s in students if s.id in children and s.school}
            case RecordKind.TEACHERS:
                students = self.store.list(RecordKind.STUDENTS)
                return {s.assigned_teacher for s in students if s.id in children and s.assigned_teacher}
            case RecordKind.PARENTS | RecordKind.USERS:
                return {identity.user_id}
            case _:
                assert_never(kind)
