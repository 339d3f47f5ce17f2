"""Schools served by the district."""
from datetime import datetime
from typing import Optional

from pydantic import Field

from caseconf.models.common import CamelModel, utcnow


class School(CamelModel):
    id: str
    name: str
    type: Optional[str] = None  # elementary, middle, high, special
    address: Optional[str] = None
    phone: Optional[str] = None
    principal: Optional[str] = None
    grades: Optional[str] = None
    enrollment: int = 0
    teachers: list[str] = Field(default_factory=list)  # maintained from Teacher.assigned_schools
    facilities: list[str] = Field(default_factory=list)
    status: str = "active"
    created_at: datetime = Field(default_factory=utcnow)
    created_by: Optional[str] = None


class SchoolCreate(CamelModel):
    name: str = Field(min_length=1)
    type: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    principal: Optional[str] = None
    grades: Optional[str] = None
    enrollment: int = Field(default=0, ge=0)
    facilities: list[str] = Field(default_factory=list)
    status: str = "active"


class SchoolUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    principal: Optional[str] = None
    grades: Optional[str] = None
    enrollment: Optional[int] = Field(default=None, ge=0)
    facilities: Optional[list[str]] = None
    status: Optional[str] = None
