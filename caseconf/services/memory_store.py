"""Process-local record store guarded by a single lock."""
from __future__ import annotations

import itertools
import logging
import threading
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel, ValidationError

from caseconf.errors import InvalidInput, NotFound
from caseconf.models import (
    ActivityLog,
    FormKind,
    FormState,
    FormStatus,
    Identity,
    Parent,
    RecordKind,
    School,
    Student,
    SystemSettings,
    Teacher,
    User,
    UserOut,
    UserRole,
    utcnow,
)
from caseconf.services.store import RecordStore

logger = logging.getLogger(__name__)

ID_PREFIXES: dict[RecordKind, str] = {
    RecordKind.STUDENTS: "S",
    RecordKind.TEACHERS: "T",
    RecordKind.SCHOOLS: "SCH",
    RecordKind.PARENTS: "P",
    RecordKind.USERS: "A",
}

LABELS: dict[RecordKind, str] = {
    RecordKind.STUDENTS: "student",
    RecordKind.TEACHERS: "teacher",
    RecordKind.SCHOOLS: "school",
    RecordKind.PARENTS: "parent",
    RecordKind.USERS: "user",
}

# Fields only the store writes.
_MANAGED = {"id", "created_at", "created_by"}
_MANAGED_BY_KIND: dict[RecordKind, set[str]] = {
    RecordKind.STUDENTS: _MANAGED | {"forms"},
    RecordKind.TEACHERS: _MANAGED | {"students", "email", "password_hash"},
    RecordKind.SCHOOLS: _MANAGED | {"teachers"},
    RecordKind.PARENTS: _MANAGED | {"email", "password_hash"},
    RecordKind.USERS: _MANAGED | {"password_hash", "role", "email"},
}

SYSTEM_ACTOR = "System"


def _validate(model: type[BaseModel], data: dict[str, Any]) -> BaseModel:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidInput(f"Invalid {model.__name__.lower()} data: {e.errors(include_url=False)}") from e


def _unique(ids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(ids))


class IdAllocator:
    """Prefix + counter ids; never reuses a value."""

    def __init__(self, start: int = 1001):
        self._start = start
        self._counters: dict[str, itertools.count] = {}

    def next(self, prefix: str, taken: Callable[[str], bool]) -> str:
        counter = self._counters.setdefault(prefix, itertools.count(self._start))
        while True:
            candidate = f"{prefix}{next(counter)}"
            if not taken(candidate):
                return candidate


class InMemoryRecordStore(RecordStore):
    def __init__(self):
        self._lock = threading.RLock()
        self._ids = IdAllocator()
        self._records: dict[RecordKind, dict[str, BaseModel]] = {kind: {} for kind in RecordKind}
        self._logs: list[ActivityLog] = []
        self._settings: dict[str, Any] = SystemSettings().to_json()

    # ------------------------------------------------------------------ helpers

    def _table(self, kind: RecordKind) -> dict[str, BaseModel]:
        return self._records[kind]

    def _require(self, kind: RecordKind, record_id: str) -> BaseModel:
        record = self._table(kind).get(record_id)
        if record is None:
            raise NotFound(f"{LABELS[kind].capitalize()} not found")
        return record

    def _exists(self, kind: RecordKind, record_id: Optional[str]) -> bool:
        return record_id is not None and record_id in self._table(kind)

    def _check_refs(self, kind: RecordKind, ids: Iterable[str]) -> None:
        missing = [i for i in ids if not self._exists(kind, i)]
        if missing:
            raise InvalidInput(f"Unknown {LABELS[kind]} id(s): {', '.join(missing)}")

    def _new_id(self, kind: RecordKind) -> str:
        # Paired User records share the teacher/parent id, so check both tables.
        def taken(candidate: str) -> bool:
            return candidate in self._table(kind) or candidate in self._table(RecordKind.USERS)

        return self._ids.next(ID_PREFIXES[kind], taken)

    def _email_taken(self, email: str, role: UserRole) -> bool:
        return self.find_user(email, role) is not None

    def _stamp(self, data: dict[str, Any], kind: RecordKind, record_id: str, actor: Optional[Identity]) -> dict[str, Any]:
        clean = {k: v for k, v in data.items() if k not in _MANAGED_BY_KIND[kind]}
        clean.update(id=record_id, created_at=utcnow(), created_by=actor.user_id if actor else None)
        return clean

    def _display_name(self, actor: Optional[Identity]) -> str:
        if actor is None:
            return SYSTEM_ACTOR
        user = self._table(RecordKind.USERS).get(actor.user_id)
        return user.name if user else actor.user_id

    def _append_log(self, action: str, actor: Optional[Identity]) -> ActivityLog:
        entry = ActivityLog(action=action, user=self._display_name(actor))
        self._logs.append(entry)
        return entry

    def _resolved(self, kind: RecordKind, record: BaseModel) -> BaseModel:
        """Deep copy with references to deleted records dropped."""
        out = record.model_copy(deep=True)
        if kind is RecordKind.STUDENTS:
            if not self._exists(RecordKind.TEACHERS, out.assigned_teacher):
                out.assigned_teacher = None
            if not self._exists(RecordKind.SCHOOLS, out.school):
                out.school = None
        elif kind is RecordKind.TEACHERS:
            out.students = [s for s in out.students if self._exists(RecordKind.STUDENTS, s)]
            out.assigned_schools = [s for s in out.assigned_schools if self._exists(RecordKind.SCHOOLS, s)]
        elif kind is RecordKind.SCHOOLS:
            out.teachers = [t for t in out.teachers if self._exists(RecordKind.TEACHERS, t)]
        elif kind is RecordKind.PARENTS:
            out.children = [c for c in out.children if self._exists(RecordKind.STUDENTS, c)]
        elif kind is RecordKind.USERS:
            out = UserOut.model_validate(out.model_dump())
        return out

    def _link(self, kind: RecordKind, owner_id: Optional[str], field: str, member_id: str) -> None:
        owner = self._table(kind).get(owner_id) if owner_id else None
        if owner is not None and member_id not in getattr(owner, field):
            getattr(owner, field).append(member_id)

    def _unlink(self, kind: RecordKind, owner_id: Optional[str], field: str, member_id: str) -> None:
        owner = self._table(kind).get(owner_id) if owner_id else None
        if owner is not None and member_id in getattr(owner, field):
            getattr(owner, field).remove(member_id)

    # ------------------------------------------------------------------ create

    def create(self, kind: RecordKind, data: dict[str, Any], actor: Optional[Identity]) -> BaseModel:
        with self._lock:
            if kind is RecordKind.STUDENTS:
                record = self._create_student(data, actor)
            elif kind is RecordKind.TEACHERS:
                record = self._create_teacher(data, actor)
            elif kind is RecordKind.SCHOOLS:
                record = self._create_school(data, actor)
            elif kind is RecordKind.PARENTS:
                record = self._create_parent(data, actor)
            elif kind is RecordKind.USERS:
                record = self._create_admin(data, actor)
            else:
                raise InvalidInput(f"Unsupported collection: {kind}")
            self._append_log(f"Added {LABELS[kind]}: {record.name}", actor)
            return self._resolved(kind, record)

    def _create_student(self, data: dict[str, Any], actor: Optional[Identity]) -> Student:
        record_id = self._new_id(RecordKind.STUDENTS)
        student = _validate(Student, self._stamp(data, RecordKind.STUDENTS, record_id, actor))
        if student.school is not None:
            self._check_refs(RecordKind.SCHOOLS, [student.school])
        if student.assigned_teacher is not None:
            self._check_refs(RecordKind.TEACHERS, [student.assigned_teacher])
        self._table(RecordKind.STUDENTS)[record_id] = student
        self._link(RecordKind.TEACHERS, student.assigned_teacher, "students", record_id)
        return student

    def _paired_user(self, record_id: str, data: dict[str, Any], role: UserRole) -> User:
        email = data.get("email")
        password_hash = data.get("password_hash")
        if not email or not password_hash:
            raise InvalidInput("Email and password are required")
        if self._email_taken(email, role):
            raise InvalidInput("Email already registered")
        return _validate(
            User,
            {"id": record_id, "name": data.get("name"), "email": email, "password_hash": password_hash, "role": role},
        )

    def _create_teacher(self, data: dict[str, Any], actor: Optional[Identity]) -> Teacher:
        record_id = self._new_id(RecordKind.TEACHERS)
        user = self._paired_user(record_id, data, UserRole.TEACHER)
        stamped = self._stamp(data, RecordKind.TEACHERS, record_id, actor)
        stamped["email"] = user.email
        teacher = _validate(Teacher, stamped)
        teacher.assigned_schools = _unique(teacher.assigned_schools)
        self._check_refs(RecordKind.SCHOOLS, teacher.assigned_schools)
        self._table(RecordKind.TEACHERS)[record_id] = teacher
        self._table(RecordKind.USERS)[record_id] = user
        for school_id in teacher.assigned_schools:
            self._link(RecordKind.SCHOOLS, school_id, "teachers", record_id)
        return teacher

    def _create_parent(self, data: dict[str, Any], actor: Optional[Identity]) -> Parent:
        record_id = self._new_id(RecordKind.PARENTS)
        user = self._paired_user(record_id, data, UserRole.PARENT)
        stamped = self._stamp(data, RecordKind.PARENTS, record_id, actor)
        stamped["email"] = user.email
        parent = _validate(Parent, stamped)
        parent.children = _unique(parent.children)
        self._check_refs(RecordKind.STUDENTS, parent.children)
        self._table(RecordKind.PARENTS)[record_id] = parent
        self._table(RecordKind.USERS)[record_id] = user
        return parent

    def _create_school(self, data: dict[str, Any], actor: Optional[Identity]) -> School:
        record_id = self._new_id(RecordKind.SCHOOLS)
        school = _validate(School, self._stamp(data, RecordKind.SCHOOLS, record_id, actor))
        self._table(RecordKind.SCHOOLS)[record_id] = school
        return school

    def _create_admin(self, data: dict[str, Any], actor: Optional[Identity]) -> User:
        record_id = self._new_id(RecordKind.USERS)
        user = self._paired_user(record_id, data, UserRole.ADMIN)
        self._table(RecordKind.USERS)[record_id] = user
        return user

    # ------------------------------------------------------------------ read

    def get(self, kind: RecordKind, record_id: str) -> BaseModel:
        with self._lock:
            return self._resolved(kind, self._require(kind, record_id))

    def list(self, kind: RecordKind) -> list[BaseModel]:
        with self._lock:
            return [self._resolved(kind, r) for r in self._table(kind).values()]

    def find_user(self, email: str, role: UserRole) -> Optional[User]:
        wanted = email.strip().lower()
        with self._lock:
            for user in self._table(RecordKind.USERS).values():
                if user.role == role and user.email.lower() == wanted:
                    return user.model_copy(deep=True)
        return None

    # ------------------------------------------------------------------ update

    def update(self, kind: RecordKind, record_id: str, patch: dict[str, Any], actor: Optional[Identity]) -> BaseModel:
        with self._lock:
            current = self._require(kind, record_id)
            if kind is RecordKind.USERS:
                raise InvalidInput("User accounts only support password changes")
            changes = {k: v for k, v in patch.items() if k not in _MANAGED_BY_KIND[kind]}
            merged = _validate(type(current), {**current.model_dump(), **changes})
            if kind is RecordKind.STUDENTS:
                self._apply_student_update(current, merged)
            elif kind is RecordKind.TEACHERS:
                self._apply_teacher_update(current, merged)
            elif kind is RecordKind.PARENTS:
                merged.children = _unique(merged.children)
                self._check_refs(RecordKind.STUDENTS, [c for c in merged.children if c not in current.children])
            if kind in (RecordKind.TEACHERS, RecordKind.PARENTS):
                self._table(RecordKind.USERS)[record_id].name = merged.name
            self._table(kind)[record_id] = merged
            self._append_log(f"Updated {LABELS[kind]}: {merged.name}", actor)
            return self._resolved(kind, merged)

    def _apply_student_update(self, current: Student, merged: Student) -> None:
        """Validate references, then move the student between rosters."""
        if merged.school != current.school and merged.school is not None:
            self._check_refs(RecordKind.SCHOOLS, [merged.school])
        if merged.assigned_teacher == current.assigned_teacher:
            return
        if merged.assigned_teacher is not None:
            self._check_refs(RecordKind.TEACHERS, [merged.assigned_teacher])
        self._unlink(RecordKind.TEACHERS, current.assigned_teacher, "students", current.id)
        self._link(RecordKind.TEACHERS, merged.assigned_teacher, "students", current.id)
        logger.info("Student %s reassigned %s -> %s", current.id, current.assigned_teacher, merged.assigned_teacher)

    def _apply_teacher_update(self, current: Teacher, merged: Teacher) -> None:
        merged.assigned_schools = _unique(merged.assigned_schools)
        added = [s for s in merged.assigned_schools if s not in current.assigned_schools]
        removed = [s for s in current.assigned_schools if s not in merged.assigned_schools]
        self._check_refs(RecordKind.SCHOOLS, added)
        for school_id in removed:
            self._unlink(RecordKind.SCHOOLS, school_id, "teachers", current.id)
        for school_id in added:
            self._link(RecordKind.SCHOOLS, school_id, "teachers", current.id)

    def set_password(self, user_id: str, password_hash: str, actor: Optional[Identity]) -> User:
        with self._lock:
            user = self._require(RecordKind.USERS, user_id)
            user.password_hash = password_hash
            self._append_log(f"Password reset for {user.name}", actor)
            return self._resolved(RecordKind.USERS, user)

    def transition_form(
        self,
        student_id: str,
        form: FormKind,
        status: FormStatus,
        payload: Optional[dict[str, Any]],
        actor: Optional[Identity],
    ) -> Student:
        with self._lock:
            student = self._require(RecordKind.STUDENTS, student_id)
            state: FormState = getattr(student.forms, form.value)
            if status.rank < state.status.rank:
                raise InvalidInput(
                    f"The {form.value} form cannot move from {state.status.value} back to {status.value}"
                )
            merged = {**state.model_dump(by_alias=True), **(payload or {})}
            merged.update(status=status, lastUpdated=utcnow())
            merged.pop("last_updated", None)
            setattr(student.forms, form.value, _validate(FormState, merged))
            self._append_log(f"Updated {form.value} form for {student.name}: {status.value}", actor)
            return self._resolved(RecordKind.STUDENTS, student)

    # ------------------------------------------------------------------ delete

    def delete(self, kind: RecordKind, record_id: str, actor: Optional[Identity]) -> BaseModel:
        with self._lock:
            record = self._require(kind, record_id)
            if kind is RecordKind.USERS and record.role != UserRole.ADMIN:
                raise InvalidInput(f"Delete the {record.role.value} record instead")
            if kind is RecordKind.USERS and actor is not None and actor.user_id == record_id:
                raise InvalidInput("You cannot delete your own account")
            resolved = self._resolved(kind, record)
            if kind is RecordKind.STUDENTS:
                self._unlink(RecordKind.TEACHERS, record.assigned_teacher, "students", record_id)
                for parent in self._table(RecordKind.PARENTS).values():
                    if record_id in parent.children:
                        parent.children.remove(record_id)
            elif kind in (RecordKind.TEACHERS, RecordKind.PARENTS):
                self._table(RecordKind.USERS).pop(record_id, None)
                logger.info("Removed credentials paired with %s %s", LABELS[kind], record_id)
            del self._table(kind)[record_id]
            self._append_log(f"Deleted {LABELS[kind]}: {record.name}", actor)
            return resolved

    # ------------------------------------------------------------------ log / settings

    def log(self, action: str, actor: Optional[Identity]) -> ActivityLog:
        with self._lock:
            return self._append_log(action, actor).model_copy()

    def recent_logs(self, limit: int) -> list[ActivityLog]:
        if limit <= 0:
            return []
        with self._lock:
            return [entry.model_copy() for entry in reversed(self._logs[-limit:])]

    def get_settings(self) -> dict[str, Any]:
        with self._lock:
            return dict(self._settings)

    def update_settings(self, patch: dict[str, Any], actor: Optional[Identity]) -> dict[str, Any]:
        with self._lock:
            merged = _validate(SystemSettings, {**self._settings, **patch})
            self._settings = merged.to_json()
            self._append_log("Updated system settings", actor)
            return dict(self._settings)
