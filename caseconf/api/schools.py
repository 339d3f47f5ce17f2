"""School CRUD."""
from typing import Annotated

from fastapi import APIRouter, Depends

from caseconf.api.deps import Policy, Store, require_permission
from caseconf.models import Identity, RecordKind, SchoolCreate, SchoolUpdate

router = APIRouter()


@router.get("")
def list_schools(
    identity: Annotated[Identity, Depends(require_permission("schools", "view"))],
    policy: Policy,
):
    return [s.to_json() for s in policy.visible(identity, RecordKind.SCHOOLS)]


@router.post("", status_code=201)
def create_school(
    data: SchoolCreate,
    identity: Annotated[Identity, Depends(require_permission("schools", "add"))],
    store: Store,
):
    school = store.create(RecordKind.SCHOOLS, data.model_dump(), identity)
    return {"success": True, "school": school.to_json()}


@router.get("/{school_id}")
def get_school(
    school_id: str,
    identity: Annotated[Identity, Depends(require_permission("schools", "view"))],
    policy: Policy,
):
    return policy.get_visible(identity, RecordKind.SCHOOLS, school_id).to_json()


@router.patch("/{school_id}")
def update_school(
    school_id: str,
    data: SchoolUpdate,
    identity: Annotated[Identity, Depends(require_permission("schools", "edit"))],
    store: Store,
):
    school = store.update(RecordKind.SCHOOLS, school_id, data.model_dump(exclude_unset=True), identity)
    return {"success": True, "school": school.to_json()}


@router.delete("/{school_id}")
def delete_school(
    school_id: str,
    identity: Annotated[Identity, Depends(require_permission("schools", "delete"))],
    store: Store,
):
    store.delete(RecordKind.SCHOOLS, school_id, identity)
    return {"success": True, "message": "School deleted successfully"}
