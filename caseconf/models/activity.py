"""Append-only activity log."""
from datetime import datetime

from pydantic import Field

from caseconf.models.common import CamelModel, utcnow


class ActivityLog(CamelModel):
    action: str
    user: str  # display name of the actor
    timestamp: datetime = Field(default_factory=utcnow)
