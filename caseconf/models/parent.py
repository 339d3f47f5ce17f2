"""Parent accounts and their linked children."""
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from caseconf.models.common import CamelModel, utcnow


class EmergencyContact(CamelModel):
    name: str
    relationship: Optional[str] = None
    phone: str


class Parent(CamelModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    children: list[str] = Field(default_factory=list)  # Student ids
    emergency_contact: Optional[EmergencyContact] = None
    status: str = "active"
    created_at: datetime = Field(default_factory=utcnow)
    created_by: Optional[str] = None


class ParentCreate(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    phone: Optional[str] = None
    children: list[str] = Field(default_factory=list)
    emergency_contact: Optional[EmergencyContact] = None
    status: str = "active"


class ParentUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    children: Optional[list[str]] = None
    emergency_contact: Optional[EmergencyContact] = None
    status: Optional[str] = None
