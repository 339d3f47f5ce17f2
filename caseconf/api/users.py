"""Credential records - admin management."""
from typing import Annotated

from fastapi import APIRouter, Depends

from caseconf.api.deps import Identities, Store, require_permission
from caseconf.models import Identity, PasswordUpdate, RecordKind, UserCreate
from caseconf.services.passwords import get_password_hash

router = APIRouter()


@router.get("")
def list_users(
    identity: Annotated[Identity, Depends(require_permission("users", "view"))],
    store: Store,
):
    return [u.to_json() for u in store.list(RecordKind.USERS)]


@router.post("", status_code=201)
def create_admin(
    data: UserCreate,
    identity: Annotated[Identity, Depends(require_permission("users", "add"))],
    store: Store,
):
    """Add another admin account; teacher and parent logins come with their records."""
    payload = {"name": data.name, "email": data.email, "password_hash": get_password_hash(data.password)}
    user = store.create(RecordKind.USERS, payload, identity)
    return {"success": True, "user": user.to_json()}


@router.post("/{user_id}/set-password")
def set_user_password(
    user_id: str,
    data: PasswordUpdate,
    identity: Annotated[Identity, Depends(require_permission("users", "edit"))],
    store: Store,
):
    """Set or reset a user's password (admin-only)."""
    user = store.set_password(user_id, get_password_hash(data.password), identity)
    return {"success": True, "id": user.id}


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    identity: Annotated[Identity, Depends(require_permission("users", "delete"))],
    store: Store,
    identities: Identities,
):
    store.delete(RecordKind.USERS, user_id, identity)
    identities.sessions.delete_for_user(user_id)
    return {"success": True, "message": "User deleted successfully"}
