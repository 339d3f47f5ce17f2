"""Shared dependencies: session resolution, role checks and permissions."""
from typing import Annotated, Optional

from fastapi import Depends, Request

from caseconf.config import Settings
from caseconf.models import Identity
from caseconf.rbac import PermissionAction
from caseconf.services.identity import IdentityManager
from caseconf.services.policy import AccessPolicy
from caseconf.services.store import RecordStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_identity_manager(request: Request) -> IdentityManager:
    return request.app.state.identity


def get_policy(request: Request) -> AccessPolicy:
    return request.app.state.policy


def get_session_id(
    request: Request,
    config: Annotated[Settings, Depends(get_app_settings)],
) -> Optional[str]:
    return request.cookies.get(config.session_cookie_name)


def get_current_identity(
    session_id: Annotated[Optional[str], Depends(get_session_id)],
    identities: Annotated[IdentityManager, Depends(get_identity_manager)],
) -> Identity:
    return identities.resolve(session_id)


def require_permission(module: str, action: PermissionAction):
    def checker(
        identity: Annotated[Identity, Depends(get_current_identity)],
        policy: Annotated[AccessPolicy, Depends(get_policy)],
    ) -> Identity:
        policy.authorize(identity, module, action)
        return identity

    return checker


# Type aliases for route injection
AppConfig = Annotated[Settings, Depends(get_app_settings)]
Store = Annotated[RecordStore, Depends(get_store)]
Policy = Annotated[AccessPolicy, Depends(get_policy)]
Identities = Annotated[IdentityManager, Depends(get_identity_manager)]
SessionId = Annotated[Optional[str], Depends(get_session_id)]
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
