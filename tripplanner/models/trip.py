from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import DEFAULT_CURRENCY, normalize_currency
from .day import CalendarDate, Day, number_of_days


class Destination(BaseModel):
    """Place reference picked from an external place search."""

    id: str
    name: str
    full_name: str = ""
    photo_reference: Optional[str] = None


class TripBase(BaseModel):
    name: str
    destination: Optional[Destination] = None
    destination_image_url: Optional[str] = None
    local_currency: str = DEFAULT_CURRENCY

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("name cannot be empty")
        return value.strip()

    @field_validator("local_currency")
    @classmethod
    def _valid_currency(cls, value: str) -> str:
        return normalize_currency(value)


class TripCreate(TripBase):
    # Range order is checked when the schedule is derived so callers get InvalidRangeError.
    start_date: CalendarDate
    end_date: CalendarDate
    local_currency: Optional[str] = None  # type: ignore[assignment]

    @field_validator("local_currency")
    @classmethod
    def _valid_currency(cls, value: Optional[str]) -> Optional[str]:
        return normalize_currency(value) if value is not None else None


class TripUpdate(BaseModel):
    name: Optional[str] = None
    destination: Optional[Destination] = None
    destination_image_url: Optional[str] = None
    local_currency: Optional[str] = None
    start_date: Optional[CalendarDate] = None
    end_date: Optional[CalendarDate] = None

    @model_validator(mode="after")
    def _at_least_one(self) -> "TripUpdate":
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided")
        return self

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("name cannot be empty")
        return value.strip() if value is not None else None

    @field_validator("local_currency")
    @classmethod
    def _valid_currency(cls, value: Optional[str]) -> Optional[str]:
        return normalize_currency(value) if value is not None else None


class TripDates(BaseModel):
    start_date: CalendarDate
    end_date: CalendarDate


class Trip(TripBase):
    id: UUID = Field(default_factory=uuid4)
    start_date: CalendarDate
    end_date: CalendarDate
    days: List[Day] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def number_of_days(self) -> int:
        """Inclusive count of calendar days in the trip's range."""
        return number_of_days(self.start_date, self.end_date)
