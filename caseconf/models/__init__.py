"""Pydantic record models and request payload schemas."""
from caseconf.models.common import CamelModel, RecordKind, utcnow
from caseconf.models.user import Identity, User, UserRole, UserCreate, UserOut, LoginRequest, PasswordUpdate
from caseconf.models.student import (
    FormKind,
    FormState,
    FormStatus,
    FormStatusUpdate,
    Student,
    StudentCreate,
    StudentForms,
    StudentUpdate,
)
from caseconf.models.teacher import Teacher, TeacherCreate, TeacherProfile, TeacherUpdate
from caseconf.models.parent import EmergencyContact, Parent, ParentCreate, ParentUpdate
from caseconf.models.school import School, SchoolCreate, SchoolUpdate
from caseconf.models.activity import ActivityLog
from caseconf.models.settings import SystemSettings

__all__ = [
    "CamelModel",
    "RecordKind",
    "utcnow",
    "Identity",
    "User",
    "UserRole",
    "UserCreate",
    "UserOut",
    "LoginRequest",
    "PasswordUpdate",
    "FormKind",
    "FormState",
    "FormStatus",
    "FormStatusUpdate",
    "Student",
    "StudentCreate",
    "StudentForms",
    "StudentUpdate",
    "Teacher",
    "TeacherCreate",
    "TeacherProfile",
    "TeacherUpdate",
    "EmergencyContact",
    "Parent",
    "ParentCreate",
    "ParentUpdate",
    "School",
    "SchoolCreate",
    "SchoolUpdate",
    "ActivityLog",
    "SystemSettings",
]
