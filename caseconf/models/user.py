"""RBAC: Admins, Teachers, Parents."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, EmailStr, Field

from caseconf.models.common import CamelModel, utcnow


class UserRole(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    PARENT = "parent"


@dataclass(frozen=True)
class Identity:
    """Who is acting: the session binding passed into every store/policy call."""

    user_id: str
    role: UserRole


class User(CamelModel):
    """Credential record. Teachers and parents share their record id with it."""

    id: str
    name: str
    email: str
    password_hash: str = Field(exclude=True, repr=False)
    role: UserRole
    created_at: datetime = Field(default_factory=utcnow)


class UserCreate(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)


class PasswordUpdate(CamelModel):
    password: str = Field(min_length=1)


class LoginRequest(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    role: UserRole = Field(validation_alias=AliasChoices("role", "userType"))


class UserOut(CamelModel):
    id: str
    name: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None
