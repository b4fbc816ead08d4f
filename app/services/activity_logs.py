"""
Activity log queries, today view, status updates and comments.

Public API
----------
list_logs(db, user_id, filters)                  -> list[ActivityLog]  (period_start desc)
list_pending(db, user_id, filters)               -> list[ActivityLog]  (status != DONE)
get_today_view(db, user_id, calendar, ...)       -> list[ActivityLog]  (period_end asc)
get_log(db, user_id, log_id)                     -> ActivityLog
create_log(db, user_id, activity_id, ...)        -> ActivityLog        (manual path)
update_status(db, user_id, log_id, status, cal)  -> ActivityLog
add_comment / list_comments / delete_comment
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from app.core.errors import (
    ActivityLogExistsError,
    ActivityLogNotFoundError,
    CommentNotFoundError,
    InvalidDateRangeError,
)
from app.models.activity_log import ActivityLog, ActivityLogComment, ActivityStatus
from app.services.activities import get_activity
from app.services.periods import Calendar


@dataclass
class LogFilter:
    """Supported predicates for log listings. Every supplied field is AND-ed."""
    activity_id: Optional[int] = None
    status: Optional[ActivityStatus] = None
    start_from: Optional[datetime] = None   # period_start >= start_from
    end_until: Optional[datetime] = None    # period_end <= end_until
    include_comments: bool = False


def _apply_filter(q: Query, filters: LogFilter) -> Query:
    if filters.activity_id is not None:
        q = q.filter(ActivityLog.activity_id == filters.activity_id)
    if filters.status is not None:
        q = q.filter(ActivityLog.status == filters.status)
    if filters.start_from is not None:
        q = q.filter(ActivityLog.period_start >= filters.start_from)
    if filters.end_until is not None:
        q = q.filter(ActivityLog.period_end <= filters.end_until)
    return q


def _user_logs(db: Session, user_id: int) -> Query:
    return db.query(ActivityLog).filter(ActivityLog.user_id == user_id)


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------

def list_logs(db: Session, user_id: int, filters: Optional[LogFilter] = None) -> list[ActivityLog]:
    q = _apply_filter(_user_logs(db, user_id), filters or LogFilter())
    return q.order_by(ActivityLog.period_start.desc(), ActivityLog.id.desc()).all()


def list_pending(db: Session, user_id: int, filters: Optional[LogFilter] = None) -> list[ActivityLog]:
    q = _user_logs(db, user_id).filter(ActivityLog.status != ActivityStatus.DONE)
    q = _apply_filter(q, filters or LogFilter())
    return q.order_by(ActivityLog.period_start.desc(), ActivityLog.id.desc()).all()


def get_today_view(
    db: Session,
    user_id: int,
    calendar: Calendar,
    activity_id: Optional[int] = None,
) -> list[ActivityLog]:
    """
    Everything relevant to today, earliest deadline first:
      - period still running or upcoming   (period_end >= start of today)
      - anything not DONE, however old     (status != DONE)
      - completed today                    (completed_at >= start of today)
    """
    start_of_today = calendar.start_of_today()
    q = _user_logs(db, user_id).filter(
        or_(
            ActivityLog.period_end >= start_of_today,
            ActivityLog.status != ActivityStatus.DONE,
            ActivityLog.completed_at >= start_of_today,
        )
    )
    if activity_id is not None:
        q = q.filter(ActivityLog.activity_id == activity_id)
    return q.order_by(ActivityLog.period_end.asc(), ActivityLog.id.asc()).all()


# ---------------------------------------------------------------------------
# Single log
# ---------------------------------------------------------------------------

def get_log(db: Session, user_id: int, log_id: int) -> ActivityLog:
    log = _user_logs(db, user_id).filter(ActivityLog.id == log_id).first()
    if log is None:
        raise ActivityLogNotFoundError(log_id)
    return log


def create_log(
    db: Session,
    user_id: int,
    activity_id: int,
    period_start: datetime,
    period_end: datetime,
    calendar: Calendar,
    status: Optional[ActivityStatus] = None,
) -> ActivityLog:
    """Manual creation; bypasses the generator's gating but not the unique period."""
    activity = get_activity(db, user_id, activity_id)
    period_start = calendar.as_local(period_start)
    period_end = calendar.as_local(period_end)
    if period_end < period_start:
        raise InvalidDateRangeError(period_start, period_end)

    status = status or ActivityStatus.TODO
    log = ActivityLog(
        activity_id=activity.id,
        user_id=user_id,
        period_start=period_start,
        period_end=period_end,
        status=status,
        duration=activity.duration,
    )
    if status == ActivityStatus.DONE:
        log.completed_at = calendar.now()
    db.add(log)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ActivityLogExistsError(activity.id, period_start) from exc
    db.refresh(log)
    return log


def update_status(
    db: Session,
    user_id: int,
    log_id: int,
    status: ActivityStatus,
    calendar: Calendar,
) -> ActivityLog:
    """
    Any status may follow any other. Entering DONE stamps completed_at;
    leaving DONE keeps the previous stamp.
    """
    log = get_log(db, user_id, log_id)
    if status == ActivityStatus.DONE and log.status != ActivityStatus.DONE:
        log.completed_at = calendar.now()
    log.status = status
    db.commit()
    db.refresh(log)
    return log


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

def add_comment(db: Session, user_id: int, log_id: int, text: str) -> ActivityLogComment:
    log = get_log(db, user_id, log_id)
    comment = ActivityLogComment(activity_log_id=log.id, comment=text)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def list_comments(db: Session, user_id: int, log_id: int) -> list[ActivityLogComment]:
    log = get_log(db, user_id, log_id)
    return (
        db.query(ActivityLogComment)
        .filter(ActivityLogComment.activity_log_id == log.id)
        .order_by(ActivityLogComment.id.desc())
        .all()
    )


def delete_comment(db: Session, user_id: int, log_id: int, comment_id: int) -> None:
    log = get_log(db, user_id, log_id)
    comment = (
        db.query(ActivityLogComment)
        .filter(
            ActivityLogComment.id == comment_id,
            ActivityLogComment.activity_log_id == log.id,
        )
        .first()
    )
    if comment is None:
        raise CommentNotFoundError(comment_id)
    db.delete(comment)
    db.commit()
