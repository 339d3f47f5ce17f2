"""Case Conference System - FastAPI entrypoint."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from caseconf.config import Settings, settings as default_settings
from caseconf.errors import CaseConfError
from caseconf.seed import seed_admin, seed_demo_data
from caseconf.services.identity import IdentityManager
from caseconf.services.memory_store import InMemoryRecordStore
from caseconf.services.policy import AccessPolicy
from caseconf.services.sessions import SessionStore
from caseconf.services.store import RecordStore
from caseconf.api import auth, students, teachers, parents, schools, users, dashboard, logs, settings as settings_api
from caseconf.api.deps import get_current_identity

logger = logging.getLogger(__name__)


def _install_error_handlers(app: FastAPI, config: Settings) -> None:
    @app.exception_handler(CaseConfError)
    async def caseconf_error_handler(request: Request, exc: CaseConfError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
            for e in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid input", "details": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {"error": "Internal server error"}
        if config.debug:
            content["detail"] = repr(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def create_app(config: Optional[Settings] = None, store: Optional[RecordStore] = None) -> FastAPI:
    config = config or default_settings
    logging.basicConfig(level=config.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        seed_admin(app.state.store, config)
        if config.seed_demo_data:
            seed_demo_data(app.state.store)
        yield

    app = FastAPI(
        title=config.app_name,
        description="Special-education case files: students, teachers, schools and parents",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.store = store or InMemoryRecordStore()
    app.state.sessions = SessionStore(sliding=config.session_sliding)
    app.state.identity = IdentityManager(
        app.state.store,
        app.state.sessions,
        default_ttl_minutes=config.session_ttl_minutes,
        allow_demo_provisioning=config.allow_demo_provisioning,
    )
    app.state.policy = AccessPolicy(app.state.store)
    if config.allow_demo_provisioning:
        logger.warning("Demo provisioning is ON: unknown logins create new accounts")

    _install_error_handlers(app, config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in config.cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Public: login/logout/current-user resolve the session themselves.
    app.include_router(auth.router, prefix="/api", tags=["Auth"])

    protected = [Depends(get_current_identity)]
    app.include_router(students.router, prefix="/api/students", tags=["Students"], dependencies=protected)
    app.include_router(teachers.router, prefix="/api/teachers", tags=["Teachers"], dependencies=protected)
    app.include_router(parents.router, prefix="/api/parents", tags=["Parents"], dependencies=protected)
    app.include_router(schools.router, prefix="/api/schools", tags=["Schools"], dependencies=protected)
    app.include_router(users.router, prefix="/api/users", tags=["Users"], dependencies=protected)
    app.include_router(dashboard.router, prefix="/api", tags=["Dashboard"], dependencies=protected)
    app.include_router(logs.router, prefix="/api", tags=["Activity Logs"], dependencies=protected)
    app.include_router(settings_api.router, prefix="/api", tags=["Settings"], dependencies=protected)

    @app.get("/")
    def root():
        return {"message": "Backend is running"}

    @app.get("/health")
    def health():
        return {"status": "ok", "app": config.app_name}

    return app


app = create_app()
