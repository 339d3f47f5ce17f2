"""RBAC module/action registry and per-role defaults."""
from __future__ import annotations

from typing import Literal, assert_never

from caseconf.models.user import UserRole

PermissionAction = Literal["view", "add", "edit", "delete"]

SYSTEM_MODULES: list[dict[str, str]] = [
    {"key": "dashboard", "name": "Dashboard"},
    {"key": "students", "name": "Students"},
    {"key": "forms", "name": "Student Forms"},
    {"key": "teachers", "name": "Teachers"},
    {"key": "schools", "name": "Schools"},
    {"key": "parents", "name": "Parents"},
    {"key": "users", "name": "Users"},
    {"key": "logs", "name": "Activity Logs"},
    {"key": "settings", "name": "Settings"},
]

MODULE_KEYS = {m["key"] for m in SYSTEM_MODULES}


def _full_permissions() -> dict[str, bool]:
    return {"view": True, "add": True, "edit": True, "delete": True}


def _view_only() -> dict[str, bool]:
    return {"view": True, "add": False, "edit": False, "delete": False}


def _no_access() -> dict[str, bool]:
    return {"view": False, "add": False, "edit": False, "delete": False}


def _module_defaults(fill: dict[str, bool]) -> dict[str, dict[str, bool]]:
    return {module["key"]: dict(fill) for module in SYSTEM_MODULES}


ADMIN_PERMISSIONS = _module_defaults(_full_permissions())

# Teachers read their own scope and add students to their own roster.
TEACHER_PERMISSIONS = {
    **_module_defaults(_no_access()),
    "dashboard": _view_only(),
    "students": {"view": True, "add": True, "edit": False, "delete": False},
    "forms": {"view": True, "add": False, "edit": True, "delete": False},
    "teachers": _view_only(),
    "schools": _view_only(),
    "parents": _view_only(),
    "settings": _view_only(),
}

PARENT_PERMISSIONS = {
    **_module_defaults(_no_access()),
    "dashboard": _view_only(),
    "students": _view_only(),
    "forms": _view_only(),
    "teachers": _view_only(),
    "schools": _view_only(),
    "settings": _view_only(),
}


def role_permissions(role: UserRole) -> dict[str, dict[str, bool]]:
    match role:
        case UserRole.ADMIN:
            return ADMIN_PERMISSIONS
        case UserRole.TEACHER:
            return TEACHER_PERMISSIONS
        case UserRole.PARENT:
            return PARENT_PERMISSIONS
        case _:
            assert_never(role)


def has_permission(role: UserRole, module: str, action: PermissionAction) -> bool:
    if module not in MODULE_KEYS:
        raise ValueError(f"Unknown module: {module}")
    return bool(role_permissions(role)[module].get(action, False))
