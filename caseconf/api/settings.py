"""System settings - read by every role, shallow-merged by admins."""
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends

from caseconf.api.deps import Store, require_permission
from caseconf.models import Identity

router = APIRouter()


@router.get("/settings")
def get_settings(
    identity: Annotated[Identity, Depends(require_permission("settings", "view"))],
    store: Store,
):
    return store.get_settings()


@router.put("/settings")
def update_settings(
    patch: Annotated[dict[str, Any], Body()],
    identity: Annotated[Identity, Depends(require_permission("settings", "edit"))],
    store: Store,
):
    return store.update_settings(patch, identity)
