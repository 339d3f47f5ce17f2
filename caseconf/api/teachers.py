"""Teacher accounts: profile, school assignments and read-only roster."""
from typing import Annotated

from fastapi import APIRouter, Depends

from caseconf.api.deps import Identities, Policy, Store, require_permission
from caseconf.models import Identity, RecordKind, TeacherCreate, TeacherUpdate
from caseconf.services.passwords import get_password_hash

router = APIRouter()


@router.get("")
def list_teachers(
    identity: Annotated[Identity, Depends(require_permission("teachers", "view"))],
    policy: Policy,
):
    return [t.to_json() for t in policy.visible(identity, RecordKind.TEACHERS)]


@router.post("", status_code=201)
def create_teacher(
    data: TeacherCreate,
    identity: Annotated[Identity, Depends(require_permission("teachers", "add"))],
    store: Store,
):
    payload = data.model_dump(exclude={"password"})
    payload["password_hash"] = get_password_hash(data.password)
    teacher = store.create(RecordKind.TEACHERS, payload, identity)
    return {"success": True, "teacher": teacher.to_json()}


@router.get("/{teacher_id}")
def get_teacher(
    teacher_id: str,
    identity: Annotated[Identity, Depends(require_permission("teachers", "view"))],
    policy: Policy,
):
    return policy.get_visible(identity, RecordKind.TEACHERS, teacher_id).to_json()


@router.patch("/{teacher_id}")
def update_teacher(
    teacher_id: str,
    data: TeacherUpdate,
    identity: Annotated[Identity, Depends(require_permission("teachers", "edit"))],
    store: Store,
):
    teacher = store.update(RecordKind.TEACHERS, teacher_id, data.model_dump(exclude_unset=True), identity)
    return {"success": True, "teacher": teacher.to_json()}


@router.delete("/{teacher_id}")
def delete_teacher(
    teacher_id: str,
    identity: Annotated[Identity, Depends(require_permission("teachers", "delete"))],
    store: Store,
    identities: Identities,
):
    """Delete the teacher and its login; assigned students read as unassigned."""
    store.delete(RecordKind.TEACHERS, teacher_id, identity)
    identities.sessions.delete_for_user(teacher_id)
    return {"success": True, "message": "Teacher deleted successfully"}
