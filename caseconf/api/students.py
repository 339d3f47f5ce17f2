"""Student case files: CRUD, roster assignment and form progress."""
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Body, Depends

from caseconf.api.deps import Policy, Store, require_permission
from caseconf.models import (
    FormKind,
    FormStatus,
    FormStatusUpdate,
    Identity,
    RecordKind,
    StudentCreate,
    StudentUpdate,
)

router = APIRouter()


@router.get("")
def list_students(
    identity: Annotated[Identity, Depends(require_permission("students", "view"))],
    policy: Policy,
):
    return [s.to_json() for s in policy.visible(identity, RecordKind.STUDENTS)]


@router.post("", status_code=201)
def create_student(
    data: StudentCreate,
    identity: Annotated[Identity, Depends(require_permission("students", "add"))],
    policy: Policy,
    store: Store,
):
    payload = policy.prepare_student_create(identity, data.model_dump())
    student = store.create(RecordKind.STUDENTS, payload, identity)
    return {"success": True, "student": student.to_json()}


@router.get("/{student_id}")
def get_student(
    student_id: str,
    identity: Annotated[Identity, Depends(require_permission("students", "view"))],
    policy: Policy,
):
    return policy.get_visible(identity, RecordKind.STUDENTS, student_id).to_json()


@router.patch("/{student_id}")
def update_student(
    student_id: str,
    data: StudentUpdate,
    identity: Annotated[Identity, Depends(require_permission("students", "edit"))],
    store: Store,
):
    student = store.update(RecordKind.STUDENTS, student_id, data.model_dump(exclude_unset=True), identity)
    return {"success": True, "student": student.to_json()}


@router.post("/{student_id}/progress")
def submit_progress(
    student_id: str,
    identity: Annotated[Identity, Depends(require_permission("forms", "edit"))],
    policy: Policy,
    store: Store,
    payload: Annotated[Optional[dict[str, Any]], Body()] = None,
):
    """Merge a progress report into the student's progress form and mark it completed."""
    policy.get_visible(identity, RecordKind.STUDENTS, student_id)
    student = store.transition_form(student_id, FormKind.PROGRESS, FormStatus.COMPLETED, payload, identity)
    return {"success": True, "student": student.to_json()}


@router.patch("/{student_id}/forms/{form}")
def update_form_status(
    student_id: str,
    form: FormKind,
    data: FormStatusUpdate,
    identity: Annotated[Identity, Depends(require_permission("forms", "edit"))],
    policy: Policy,
    store: Store,
):
    policy.get_visible(identity, RecordKind.STUDENTS, student_id)
    student = store.transition_form(student_id, form, data.status, None, identity)
    return {"success": True, "student": student.to_json()}


@router.delete("/{student_id}")
def delete_student(
    student_id: str,
    identity: Annotated[Identity, Depends(require_permission("students", "delete"))],
    store: Store,
):
    store.delete(RecordKind.STUDENTS, student_id, identity)
    return {"success": True, "message": "Student deleted successfully"}
