"""System-wide settings record; unknown keys are kept as-is."""
from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from caseconf.models.common import CamelModel


class SystemSettings(CamelModel):
    """Single settings record. Updates are shallow merges over the stored keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    system_name: str = "Case Conference System"
    school_year: str = "2024-2025"
    session_timeout: int = Field(default=30, gt=0)  # minutes
    email_notifications: bool = True
    auto_backup: bool = False
    max_file_size_mb: int = Field(default=10, gt=0)
