"""Cookie-based server-side sessions: login, logout, current user."""
from fastapi import APIRouter, Response

from caseconf.api.deps import AppConfig, Identities, SessionId
from caseconf.models import LoginRequest

router = APIRouter()


@router.post("/login")
def login(req: LoginRequest, response: Response, identities: Identities, config: AppConfig):
    session, user = identities.login(req.email, req.password, req.role)
    response.set_cookie(
        key=config.session_cookie_name,
        value=session.session_id,
        max_age=session.ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=config.session_cookie_secure,
    )
    return {"success": True, "message": "Login successful", "user": user}


@router.post("/logout")
def logout(response: Response, session_id: SessionId, identities: Identities, config: AppConfig):
    identities.logout(session_id)
    response.delete_cookie(config.session_cookie_name)
    return {"success": True}


@router.get("/current-user")
def current_user(session_id: SessionId, identities: Identities):
    return identities.current_user(session_id)
