"""Parent accounts and the children they may see."""
from typing import Annotated

from fastapi import APIRouter, Depends

from caseconf.api.deps import Identities, Policy, Store, require_permission
from caseconf.models import Identity, ParentCreate, ParentUpdate, RecordKind
from caseconf.services.passwords import get_password_hash

router = APIRouter()


@router.get("")
def list_parents(
    identity: Annotated[Identity, Depends(require_permission("parents", "view"))],
    policy: Policy,
):
    return [p.to_json() for p in policy.visible(identity, RecordKind.PARENTS)]


@router.post("", status_code=201)
def create_parent(
    data: ParentCreate,
    identity: Annotated[Identity, Depends(require_permission("parents", "add"))],
    store: Store,
):
    payload = data.model_dump(exclude={"password"})
    payload["password_hash"] = get_password_hash(data.password)
    parent = store.create(RecordKind.PARENTS, payload, identity)
    return {"success": True, "parent": parent.to_json()}


@router.get("/{parent_id}")
def get_parent(
    parent_id: str,
    identity: Annotated[Identity, Depends(require_permission("parents", "view"))],
    policy: Policy,
):
    return policy.get_visible(identity, RecordKind.PARENTS, parent_id).to_json()


@router.patch("/{parent_id}")
def update_parent(
    parent_id: str,
    data: ParentUpdate,
    identity: Annotated[Identity, Depends(require_permission("parents", "edit"))],
    store: Store,
):
    parent = store.update(RecordKind.PARENTS, parent_id, data.model_dump(exclude_unset=True), identity)
    return {"success": True, "parent": parent.to_json()}


@router.delete("/{parent_id}")
def delete_parent(
    parent_id: str,
    identity: Annotated[Identity, Depends(require_permission("parents", "delete"))],
    store: Store,
    identities: Identities,
):
    store.delete(RecordKind.PARENTS, parent_id, identity)
    identities.sessions.delete_for_user(parent_id)
    return {"success": True, "message": "Parent deleted successfully"}
