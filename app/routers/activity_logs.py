"""
Activity logs router.

POST   /activity-logs/generate
POST   /activity-logs/generate-today
GET    /activity-logs/today
GET    /activity-logs/pending
GET    /activity-logs/excluded-intervals
POST   /activity-logs/excluded-intervals
DELETE /activity-logs/excluded-intervals/{interval_id}
GET    /activity-logs
POST   /activity-logs
GET    /activity-logs/{log_id}
PATCH  /activity-logs/{log_id}/status
GET    /activity-logs/{log_id}/comments
POST   /activity-logs/{log_id}/comments
DELETE /activity-logs/{log_id}/comments/{comment_id}
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.deps import get_calendar, get_current_user
from app.core.errors import LogsAlreadyGeneratedError
from app.db.base import get_db
from app.models.activity_log import ActivityLog, ActivityStatus
from app.models.user import User
from app.schemas.activity import ActivitySummary
from app.schemas.activity_log import (
    ActivityLogCreate,
    ActivityLogResponse,
    CommentCreate,
    CommentResponse,
    ExcludedIntervalCreate,
    ExcludedIntervalResponse,
    GenerateRequest,
    GenerateResponse,
    StatusUpdate,
)
from app.schemas.common import ERROR_RESPONSES, ErrorResponse, MessageResponse
from app.services import activity_logs as svc
from app.services import exclusions
from app.services.generator import generate_for_date, logs_exist_for_date
from app.services.periods import Calendar

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/activity-logs", tags=["activity-logs"], responses=ERROR_RESPONSES)

_LOG_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Activity log not found."}}


# ---------------------------------------------------------------------------
# Serialization helper
# ---------------------------------------------------------------------------

def _log_to_response(log: ActivityLog, include_comments: bool = False) -> ActivityLogResponse:
    return ActivityLogResponse(
        id=log.id,
        activity_id=log.activity_id,
        user_id=log.user_id,
        period_start=log.period_start,
        period_end=log.period_end,
        status=log.status,
        duration=log.duration,
        completed_at=log.completed_at,
        created_at=log.created_at,
        updated_at=log.updated_at,
        activity=ActivitySummary.model_validate(log.activity) if log.activity else None,
        comments=(
            [CommentResponse.model_validate(c) for c in log.comments]
            if include_comments else None
        ),
    )


def _day_start(d: Optional[date]) -> Optional[datetime]:
    return datetime.combine(d, datetime.min.time()) if d else None


def _day_end(d: Optional[date]) -> Optional[datetime]:
    return datetime.combine(d, datetime.max.time()) if d else None


def _run_generation(db: Session, user: User, target: date) -> GenerateResponse:
    if logs_exist_for_date(db, user.id, target):
        raise LogsAlreadyGeneratedError(day=target)
    logger.info("Manual activity log generation by user %s for %s", user.id, target)
    result = generate_for_date(db, target, user_id=user.id)
    return GenerateResponse(
        created=result.created,
        date=str(result.target_date),
        frequencies=result.frequency_names,
    )


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

_GENERATE_RESPONSES = {
    409: {"model": ErrorResponse, "description": "Logs for that date already exist."},
    500: {"model": ErrorResponse, "description": "Generation failed; nothing was saved."},
}


@router.post(
    "/generate",
    response_model=GenerateResponse,
    summary="Generate the caller's activity logs for a date",
    responses=_GENERATE_RESPONSES,
)
def generate(
    payload: Optional[GenerateRequest] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    calendar: Calendar = Depends(get_calendar),
):
    """
    Materialize logs for `date` (default: today) from the caller's activities:

    | Class | Generated on | Period |
    |---|---|---|
    | daily   | every day       | that day |
    | weekly  | Sundays         | Sunday to Saturday |
    | monthly | the 1st         | whole month |

    Classes suppressed by the caller's excluded intervals are skipped and
    omitted from `frequencies`. Responds **409** if the caller already has
    logs starting on that date.
    """
    target = (payload.date if payload else None) or calendar.today()
    return _run_generation(db, user, target)


@router.post(
    "/generate-today",
    response_model=GenerateResponse,
    summary="Generate the caller's activity logs for today",
    responses=_GENERATE_RESPONSES,
)
def generate_today(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    calendar: Calendar = Depends(get_calendar),
):
    return _run_generation(db, user, calendar.today())


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

@router.get(
    "/today",
    response_model=list[ActivityLogResponse],
    summary="Today view: current, still-open and completed-today logs",
)
def today_view(
    activity_id: Optional[int] = Query(default=None),
    comments: bool = Query(default=False, description="Embed comments."),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    calendar: Calendar = Depends(get_calendar),
):
    """
    A log is included when **any** holds:
    - its period ends today or later,
    - it is not DONE (however old),
    - it was completed today.

    Ordered by period end, earliest deadline first.
    """
    logs = svc.get_today_view(db, user.id, calendar, activity_id=activity_id)
    return [_log_to_response(log, comments) for log in logs]


def _log_filter(
    activity_id: Optional[int] = Query(default=None),
    status: Optional[ActivityStatus] = Query(default=None),
    start_date: Optional[date] = Query(
        default=None, description="Period starts on or after this date."
    ),
    end_date: Optional[date] = Query(
        default=None, description="Period ends on or before this date."
    ),
    comments: bool = Query(default=False, description="Embed comments."),
) -> svc.LogFilter:
    return svc.LogFilter(
        activity_id=activity_id,
        status=status,
        start_from=_day_start(start_date),
        end_until=_day_end(end_date),
        include_comments=comments,
    )


@router.get(
    "/pending",
    response_model=list[ActivityLogResponse],
    summary="All logs that are not DONE (newest period first)",
)
def pending(
    filters: svc.LogFilter = Depends(_log_filter),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    logs = svc.list_pending(db, user.id, filters)
    return [_log_to_response(log, filters.include_comments) for log in logs]


# ---------------------------------------------------------------------------
# Excluded intervals
# ---------------------------------------------------------------------------

@router.get(
    "/excluded-intervals",
    response_model=list[ExcludedIntervalResponse],
    summary="List the caller's excluded intervals",
)
def list_excluded_intervals(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [
        ExcludedIntervalResponse.model_validate(ei)
        for ei in exclusions.list_intervals(db, user.id)
    ]


@router.post(
    "/excluded-intervals",
    response_model=ExcludedIntervalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add an excluded interval",
    responses={409: {"model": ErrorResponse, "description": "Interval already exists."}},
)
def add_excluded_interval(
    payload: ExcludedIntervalCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    | type | value |
    |---|---|
    | `DAY_OF_WEEK`  | 0 (Sunday) to 6 (Saturday) |
    | `WEEK_OF_YEAR` | 1 to 52 |
    | `MONTH`        | 1 to 12 |

    Only DAILY/DAY_OF_WEEK, WEEKLY/WEEK_OF_YEAR and MONTHLY/MONTH pairs
    affect generation.
    """
    interval = exclusions.add_interval(
        db, user.id, payload.frequency, payload.type, payload.value
    )
    return ExcludedIntervalResponse.model_validate(interval)


@router.delete(
    "/excluded-intervals/{interval_id}",
    response_model=MessageResponse,
    summary="Delete an excluded interval",
    responses={404: {"model": ErrorResponse, "description": "Interval not found."}},
)
def delete_excluded_interval(
    interval_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    exclusions.delete_interval(db, user.id, interval_id)
    return MessageResponse(message="Excluded interval deleted successfully.")


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=list[ActivityLogResponse],
    summary="List logs (newest period first)",
)
def list_logs(
    filters: svc.LogFilter = Depends(_log_filter),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    logs = svc.list_logs(db, user.id, filters)
    return [_log_to_response(log, filters.include_comments) for log in logs]


@router.post(
    "",
    response_model=ActivityLogResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a log manually",
    responses={
        404: {"model": ErrorResponse, "description": "Activity not found."},
        409: {"model": ErrorResponse, "description": "A log already starts at that time."},
    },
)
def create_log(
    payload: ActivityLogCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    calendar: Calendar = Depends(get_calendar),
):
    log = svc.create_log(
        db,
        user.id,
        activity_id=payload.activity_id,
        period_start=payload.period_start,
        period_end=payload.period_end,
        status=payload.status,
        calendar=calendar,
    )
    return _log_to_response(log)


# ---------------------------------------------------------------------------
# Single log
# ---------------------------------------------------------------------------

@router.get(
    "/{log_id}",
    response_model=ActivityLogResponse,
    summary="Get one log with its comments",
    responses=_LOG_NOT_FOUND,
)
def get_log(
    log_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _log_to_response(svc.get_log(db, user.id, log_id), include_comments=True)


@router.patch(
    "/{log_id}/status",
    response_model=ActivityLogResponse,
    summary="Set a log's status",
    responses=_LOG_NOT_FOUND,
)
def update_status(
    log_id: int,
    payload: StatusUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    calendar: Calendar = Depends(get_calendar),
):
    """
    Any status may be set from any other. Moving to DONE stamps
    `completed_at`; moving away from DONE leaves it as it was.
    """
    log = svc.update_status(db, user.id, log_id, payload.status, calendar)
    return _log_to_response(log, include_comments=True)


@router.get(
    "/{log_id}/comments",
    response_model=list[CommentResponse],
    summary="List a log's comments (newest first)",
    responses=_LOG_NOT_FOUND,
)
def list_comments(
    log_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [CommentResponse.model_validate(c) for c in svc.list_comments(db, user.id, log_id)]


@router.post(
    "/{log_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a comment to a log",
    responses=_LOG_NOT_FOUND,
)
def add_comment(
    log_id: int,
    payload: CommentCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CommentResponse.model_validate(svc.add_comment(db, user.id, log_id, payload.comment))


@router.delete(
    "/{log_id}/comments/{comment_id}",
    response_model=MessageResponse,
    summary="Delete a comment",
    responses={404: {"model": ErrorResponse, "description": "Log or comment not found."}},
)
def delete_comment(
    log_id: int,
    comment_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc.delete_comment(db, user.id, log_id, comment_id)
    return MessageResponse(message="Comment deleted successfully.")
