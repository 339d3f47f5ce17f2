"""Shared base for record and payload models."""
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordKind(str, Enum):
    """Collections owned by the record store; values double as URL segments."""

    STUDENTS = "students"
    TEACHERS = "teachers"
    SCHOOLS = "schools"
    PARENTS = "parents"
    USERS = "users"


class CamelModel(BaseModel):
    """Python attributes in snake_case, JSON in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def blank_to_none(value):
    """HTML forms send untouched inputs as ""; treat those as not given."""
    if isinstance(value, str) and not value.strip():
        return None
    return value
