"""Student case file: profile, teacher assignment and IEP form progress."""
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from caseconf.models.common import CamelModel, blank_to_none, utcnow


class FormStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        return _FORM_ORDER.index(self)


_FORM_ORDER = [FormStatus.PENDING, FormStatus.IN_PROGRESS, FormStatus.COMPLETED]


class FormKind(str, Enum):
    PROGRESS = "progress"
    ASSESSMENT = "assessment"
    IEP = "iep"


class FormState(CamelModel):
    """One form's status; extra keys hold the merged form payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    status: FormStatus = FormStatus.PENDING
    last_updated: Optional[datetime] = None


class StudentForms(CamelModel):
    progress: FormState = Field(default_factory=FormState)
    assessment: FormState = Field(default_factory=FormState)
    iep: FormState = Field(default_factory=FormState)


class Student(CamelModel):
    id: str
    name: str
    dob: Optional[date] = None
    gender: Optional[str] = None
    school: Optional[str] = None  # School id
    disability_category: Optional[str] = None
    iep_date: Optional[date] = None
    notes: Optional[str] = None
    status: str = "active"
    assigned_teacher: Optional[str] = None  # Teacher id
    forms: StudentForms = Field(default_factory=StudentForms)
    created_at: datetime = Field(default_factory=utcnow)
    created_by: Optional[str] = None  # User id


class StudentCreate(CamelModel):
    name: str = Field(min_length=1)
    dob: Optional[date] = None
    gender: Optional[str] = None
    school: Optional[str] = None
    disability_category: Optional[str] = None
    iep_date: Optional[date] = None
    notes: Optional[str] = None
    status: str = "active"
    assigned_teacher: Optional[str] = None

    @field_validator("dob", "school", "iep_date", "assigned_teacher", mode="before")
    @classmethod
    def blank_is_unset(cls, value):
        return blank_to_none(value)


class StudentUpdate(CamelModel):
    """All fields optional for PATCH; forms change only through form transitions.

    A blank school or teacher clears the reference.
    """
    name: Optional[str] = Field(default=None, min_length=1)
    dob: Optional[date] = None
    gender: Optional[str] = None
    school: Optional[str] = None
    disability_category: Optional[str] = None
    iep_date: Optional[date] = None
    notes: Optional[str] = None
    status: Optional[str] = None
    assigned_teacher: Optional[str] = None

    @field_validator("dob", "school", "iep_date", "assigned_teacher", mode="before")
    @classmethod
    def blank_is_unset(cls, value):
        return blank_to_none(value)


class FormStatusUpdate(CamelModel):
    status: FormStatus
