from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any, List
from uuid import UUID, uuid4

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from .activity import Activity
from .budget import Budget


def date_only(value: Any) -> Any:
    """Drop the time-of-day from datetimes so date fields keep calendar semantics."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value.strip()) > 10:
        # Any ISO 8601 date-time, whether separated by "T" or a space.
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
    return value


def start_of_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def number_of_days(start: date | datetime, end: date | datetime) -> int:
    """Inclusive count of calendar days between two bounds."""
    return (start_of_day(end) - start_of_day(start)).days + 1


CalendarDate = Annotated[date, BeforeValidator(date_only)]


class Transportation(BaseModel):
    mode: str = ""
    time: datetime


class ChecklistItem(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    text: str
    is_done: bool = False

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("checklist text cannot be empty")
        return value.strip()


class Day(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    date: CalendarDate
    title: str = ""
    activities: List[Activity] = Field(default_factory=list)
    transportation: Transportation
    budget: Budget = Field(default_factory=Budget)
    checklist: List[ChecklistItem] = Field(default_factory=list)

    @property
    def sorted_activities(self) -> List[Activity]:
        """Activities in display order; stored order stays insertion order."""
        return sorted(self.activities, key=lambda a: a.time)
