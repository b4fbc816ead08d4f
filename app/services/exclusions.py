"""
Exclusion filter and excluded-interval CRUD.

Public API
----------
is_suppressed(frequency, day, rules)           -> bool   (pure)
load_rules(db, user_id)                        -> ExclusionRules
list_intervals(db, user_id)                    -> list[ExcludedInterval]
add_interval(db, user_id, frequency, type, v)  -> ExcludedInterval
delete_interval(db, user_id, interval_id)      -> None
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    DuplicateExcludedIntervalError,
    ExcludedIntervalNotFoundError,
    InvalidIntervalValueError,
)
from app.models.activity import Frequency
from app.models.excluded_interval import (
    ExcludedInterval,
    IntervalType,
    INTERVAL_VALUE_RANGES,
)
from app.services.periods import day_of_week, month_of_year, week_of_year


@dataclass
class ExclusionRules:
    """A user's exclusion values, bucketed by the only pairings that matter."""
    daily_days: set[int] = field(default_factory=set)
    weekly_weeks: set[int] = field(default_factory=set)
    monthly_months: set[int] = field(default_factory=set)

    @classmethod
    def from_intervals(cls, intervals: Iterable[ExcludedInterval]) -> "ExclusionRules":
        rules = cls()
        for ei in intervals:
            if ei.frequency == Frequency.DAILY and ei.type == IntervalType.DAY_OF_WEEK:
                rules.daily_days.add(ei.value)
            elif ei.frequency == Frequency.WEEKLY and ei.type == IntervalType.WEEK_OF_YEAR:
                rules.weekly_weeks.add(ei.value)
            elif ei.frequency == Frequency.MONTHLY and ei.type == IntervalType.MONTH:
                rules.monthly_months.add(ei.value)
        return rules


def is_suppressed(frequency: Frequency, day: date, rules: ExclusionRules) -> bool:
    if frequency == Frequency.DAILY:
        return day_of_week(day) in rules.daily_days
    if frequency == Frequency.WEEKLY:
        return week_of_year(day) in rules.weekly_weeks
    if frequency == Frequency.MONTHLY:
        return month_of_year(day) in rules.monthly_months
    return False


def load_rules(db: Session, user_id: int) -> ExclusionRules:
    intervals = db.query(ExcludedInterval).filter(ExcludedInterval.user_id == user_id).all()
    return ExclusionRules.from_intervals(intervals)


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

def validate_interval_value(interval_type: IntervalType, value: int) -> None:
    low, high = INTERVAL_VALUE_RANGES[interval_type]
    if not low <= value <= high:
        raise InvalidIntervalValueError(interval_type.value, value, low, high)


def list_intervals(db: Session, user_id: int) -> list[ExcludedInterval]:
    return (
        db.query(ExcludedInterval)
        .filter(ExcludedInterval.user_id == user_id)
        .order_by(
            ExcludedInterval.frequency,
            ExcludedInterval.type,
            ExcludedInterval.value,
        )
        .all()
    )


def add_interval(
    db: Session,
    user_id: int,
    frequency: Frequency,
    interval_type: IntervalType,
    value: int,
) -> ExcludedInterval:
    validate_interval_value(interval_type, value)

    exists = (
        db.query(ExcludedInterval.id)
        .filter(
            ExcludedInterval.user_id == user_id,
            ExcludedInterval.frequency == frequency,
            ExcludedInterval.type == interval_type,
            ExcludedInterval.value == value,
        )
        .first()
        is not None
    )
    if exists:
        raise DuplicateExcludedIntervalError(frequency.value, interval_type.value, value)

    interval = ExcludedInterval(
        user_id=user_id,
        frequency=frequency,
        type=interval_type,
        value=value,
    )
    db.add(interval)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race with an identical insert
        db.rollback()
        raise DuplicateExcludedIntervalError(
            frequency.value, interval_type.value, value
        ) from exc
    db.refresh(interval)
    return interval


def delete_interval(db: Session, user_id: int, interval_id: int) -> None:
    interval = (
        db.query(ExcludedInterval)
        .filter(ExcludedInterval.id == interval_id, ExcludedInterval.user_id == user_id)
        .first()
    )
    if interval is None:
        raise ExcludedIntervalNotFoundError(interval_id)
    db.delete(interval)
    db.commit()
