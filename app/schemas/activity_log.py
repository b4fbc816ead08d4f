"""
Activity log, comment, generation and excluded-interval schemas.

POST  /activity-logs/generate            → GenerateRequest → GenerateResponse
POST  /activity-logs                     → ActivityLogCreate → ActivityLogResponse
PATCH /activity-logs/{id}/status         → StatusUpdate → ActivityLogResponse
POST  /activity-logs/{id}/comments       → CommentCreate → CommentResponse
POST  /activity-logs/excluded-intervals  → ExcludedIntervalCreate → ExcludedIntervalResponse
"""
from __future__ import annotations

import datetime as dt
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.activity import Frequency
from app.models.activity_log import ActivityStatus
from app.models.excluded_interval import IntervalType
from app.schemas.activity import ActivitySummary


# ---------------------------------------------------------------------------
# Logs
# ---------------------------------------------------------------------------

class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    activity_log_id: int
    comment: str
    created_at: datetime


class ActivityLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    activity_id: int
    user_id: int
    period_start: datetime
    period_end: datetime
    status: ActivityStatus
    duration: Optional[int] = Field(default=None, description="Minutes, copied from the activity.")
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    activity: Optional[ActivitySummary] = Field(
        default=None,
        description="Null when the activity has since been deleted.",
    )
    comments: Optional[list[CommentResponse]] = Field(
        default=None,
        description="Populated only when requested with `comments=true` or on single-log reads.",
    )


class ActivityLogCreate(BaseModel):
    activity_id: int
    period_start: datetime
    period_end: datetime
    status: Optional[ActivityStatus] = None


class StatusUpdate(BaseModel):
    status: ActivityStatus


class CommentCreate(BaseModel):
    comment: Annotated[str, Field(min_length=1, max_length=1000)]

    @field_validator("comment", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if isinstance(stripped, str) and not stripped:
            raise ValueError("comment must not be empty after stripping whitespace")
        return stripped


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

class GenerateRequest(BaseModel):
    date: Optional[dt.date] = Field(
        default=None,
        description="Target date (YYYY-MM-DD). Defaults to today in the configured timezone.",
        examples=["2024-03-15"],
    )


class GenerateResponse(BaseModel):
    created: int = Field(description="Number of logs created by this run.")
    date: str = Field(description="ISO date that was generated.")
    frequencies: list[str] = Field(
        description='Frequency classes processed: "daily", "weekly", "monthly".',
        examples=[["daily", "weekly"]],
    )


# ---------------------------------------------------------------------------
# Excluded intervals
# ---------------------------------------------------------------------------

class ExcludedIntervalCreate(BaseModel):
    frequency: Frequency
    type: IntervalType
    value: int = Field(
        description="DAY_OF_WEEK 0-6 (0 = Sunday), WEEK_OF_YEAR 1-52, MONTH 1-12.",
        examples=[0],
    )


class ExcludedIntervalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    frequency: Frequency
    type: IntervalType
    value: int
    created_at: datetime
