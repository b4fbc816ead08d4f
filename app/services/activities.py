"""
Activity definition CRUD.

Deleting an activity never touches its logs; they stay as history.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.errors import ActivityNotFoundError, InvalidDateRangeError
from app.models.activity import Activity, Frequency

_UPDATABLE_FIELDS = (
    "title", "description", "frequency", "duration", "category", "start_date", "end_date",
)


@dataclass
class ActivityFilter:
    frequency: Optional[Frequency] = None
    category: Optional[str] = None
    start_from: Optional[date] = None   # start_date >= start_from
    end_until: Optional[date] = None    # end_date <= end_until


def _check_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date is not None and end_date is not None and end_date < start_date:
        raise InvalidDateRangeError(start_date, end_date)


def create_activity(db: Session, user_id: int, **fields: Any) -> Activity:
    _check_range(fields.get("start_date"), fields.get("end_date"))
    if fields.get("frequency") is None:
        fields["frequency"] = Frequency.DAILY
    activity = Activity(user_id=user_id, **fields)
    db.add(activity)
    db.commit()
    db.refresh(activity)
    return activity


def list_activities(
    db: Session, user_id: int, filters: Optional[ActivityFilter] = None
) -> list[Activity]:
    filters = filters or ActivityFilter()
    q = db.query(Activity).filter(Activity.user_id == user_id)
    if filters.frequency is not None:
        q = q.filter(Activity.frequency == filters.frequency)
    if filters.category is not None:
        q = q.filter(Activity.category == filters.category)
    if filters.start_from is not None:
        q = q.filter(Activity.start_date >= filters.start_from)
    if filters.end_until is not None:
        q = q.filter(Activity.end_date <= filters.end_until)
    return q.order_by(Activity.created_at.desc(), Activity.id.desc()).all()


def group_by_frequency(activities: list[Activity]) -> dict[str, list[Activity]]:
    grouped: dict[str, list[Activity]] = {f.value.lower(): [] for f in Frequency}
    for activity in activities:
        grouped[Frequency(activity.frequency).value.lower()].append(activity)
    return grouped


def list_categories(db: Session, user_id: int) -> list[str]:
    rows = (
        db.query(Activity.category)
        .filter(Activity.user_id == user_id, Activity.category.isnot(None))
        .distinct()
        .all()
    )
    return sorted(row.category for row in rows)


def get_activity(db: Session, user_id: int, activity_id: int) -> Activity:
    activity = (
        db.query(Activity)
        .filter(Activity.id == activity_id, Activity.user_id == user_id)
        .first()
    )
    if activity is None:
        raise ActivityNotFoundError(activity_id)
    return activity


def update_activity(db: Session, user_id: int, activity_id: int, changes: dict[str, Any]) -> Activity:
    """Apply a partial update. Keys present with None clear optional fields."""
    activity = get_activity(db, user_id, activity_id)
    updates = {k: v for k, v in changes.items() if k in _UPDATABLE_FIELDS}

    _check_range(
        updates.get("start_date", activity.start_date),
        updates.get("end_date", activity.end_date),
    )
    for key, value in updates.items():
        setattr(activity, key, value)
    db.commit()
    db.refresh(activity)
    return activity


def delete_activity(db: Session, user_id: int, activity_id: int) -> None:
    activity = get_activity(db, user_id, activity_id)
    db.delete(activity)
    db.commit()
