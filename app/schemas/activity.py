"""
Activity definition schemas.

POST /activities       → ActivityCreate → ActivityResponse
PUT  /activities/{id}  → ActivityUpdate → ActivityResponse
GET  /activities/grouped               → ActivitiesByFrequency
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models.activity import Frequency

Title = Annotated[str, Field(min_length=1, max_length=200, examples=["Morning run"])]
Description = Annotated[str, Field(max_length=1000)]
Duration = Annotated[int, Field(gt=0, description="Expected duration in minutes.")]
Category = Annotated[str, Field(max_length=100, examples=["health"])]


class ActivityCreate(BaseModel):
    title: Title
    description: Optional[Description] = None
    frequency: Frequency = Frequency.DAILY
    duration: Optional[Duration] = None
    category: Optional[Category] = None
    start_date: Optional[date] = Field(
        default=None, description="First eligible day (inclusive).", examples=["2026-03-01"],
    )
    end_date: Optional[date] = Field(
        default=None, description="Last eligible day (inclusive).", examples=["2026-06-30"],
    )

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_range(self) -> "ActivityCreate":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ActivityUpdate(BaseModel):
    """Partial update. Only fields present in the body are applied."""
    title: Optional[Title] = None
    description: Optional[Description] = None
    frequency: Optional[Frequency] = None
    duration: Optional[Duration] = None
    category: Optional[Category] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("title", "frequency")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    frequency: Frequency
    duration: Optional[int] = None
    category: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime


class ActivitySummary(BaseModel):
    """Compact activity embedded in log responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    frequency: Frequency
    category: Optional[str] = None


class ActivitiesByFrequency(BaseModel):
    daily: list[ActivityResponse]
    weekly: list[ActivityResponse]
    monthly: list[ActivityResponse]
