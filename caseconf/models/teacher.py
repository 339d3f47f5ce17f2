"""Teacher profile, roster and school assignments."""
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from caseconf.models.common import CamelModel, utcnow


class TeacherProfile(CamelModel):
    qualifications: Optional[str] = None
    years_experience: int = Field(default=0, ge=0)
    certifications: list[str] = Field(default_factory=list)
    bio: Optional[str] = None


class Teacher(CamelModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    assigned_schools: list[str] = Field(default_factory=list)  # School ids
    students: list[str] = Field(default_factory=list)  # roster, maintained by the store
    profile: TeacherProfile = Field(default_factory=TeacherProfile)
    status: str = "active"
    created_at: datetime = Field(default_factory=utcnow)
    created_by: Optional[str] = None


class TeacherCreate(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    phone: Optional[str] = None
    assigned_schools: list[str] = Field(default_factory=list)
    profile: TeacherProfile = Field(default_factory=TeacherProfile)
    status: str = "active"


class TeacherUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    assigned_schools: Optional[list[str]] = None
    profile: Optional[TeacherProfile] = None
    status: Optional[str] = None
