from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from .constants import ActivityCategory


class ActivityIn(BaseModel):
    time: datetime
    title: str
    location: str = ""
    notes: str = ""
    category: ActivityCategory = ActivityCategory.other

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("title cannot be empty")
        return value.strip()


class Activity(ActivityIn):
    id: UUID = Field(default_factory=uuid4)
