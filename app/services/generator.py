"""
Log generator: materializes ActivityLog rows for a target date.

Rules per target date
---------------------
  DAILY    active every day
  WEEKLY   active only on Sundays       (period = Sunday..Saturday)
  MONTHLY  active only on the 1st       (period = whole month)

An active class is skipped when the user's exclusion rules suppress it for
the target date (see app/services/exclusions.py). For every remaining class,
each of the user's activities of that class that is eligible for the period
(see app/services/eligibility.py) gets one TODO log, unless a log already
starts inside [period_start, next_period_start).

Idempotency
-----------
The existence check makes a second run for the same date a no-op.
The (activity_id, period_start) unique constraint is the final guard when two
runs race: the loser's commit fails, the whole run is rolled back and a
GenerationError is raised. Re-running the date is always safe.

db.commit() called once at the end; any persistence failure rolls back
everything written by the run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import GenerationError
from app.models.activity import Activity, Frequency
from app.models.activity_log import ActivityLog, ActivityStatus
from app.models.user import User
from app.services.eligibility import is_eligible
from app.services.exclusions import is_suppressed, load_rules
from app.services.periods import (
    Period,
    day_of_week,
    day_range,
    next_period_start,
    period_bounds,
)

logger = logging.getLogger(__name__)

_FREQUENCY_ORDER = (Frequency.DAILY, Frequency.WEEKLY, Frequency.MONTHLY)


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class GenerationResult:
    """Summary of one generation run."""
    target_date: date
    created: int = 0
    frequencies: list[Frequency] = field(default_factory=list)  # processed classes

    @property
    def frequency_names(self) -> list[str]:
        return [f.value.lower() for f in self.frequencies]


# ---------------------------------------------------------------------------
# Trigger gating
# ---------------------------------------------------------------------------

def active_frequencies(day: date) -> list[Frequency]:
    """Frequency classes whose generation day is `day` (before exclusions)."""
    active = [Frequency.DAILY]
    if day_of_week(day) == 0:
        active.append(Frequency.WEEKLY)
    if day.day == 1:
        active.append(Frequency.MONTHLY)
    return active


# ---------------------------------------------------------------------------
# Idempotency helpers
# ---------------------------------------------------------------------------

def _log_exists(db: Session, activity_id: int, frequency: Frequency, period: Period) -> bool:
    return (
        db.query(ActivityLog.id)
        .filter(
            ActivityLog.activity_id == activity_id,
            ActivityLog.period_start >= period.start,
            ActivityLog.period_start < next_period_start(frequency, period.start),
        )
        .first()
        is not None
    )


def logs_exist_for_date(db: Session, user_id: int, day: date) -> bool:
    """True if the user has any log whose period starts on `day`."""
    start, end = day_range(day)
    return (
        db.query(ActivityLog.id)
        .filter(
            ActivityLog.user_id == user_id,
            ActivityLog.period_start >= start,
            ActivityLog.period_start < end,
        )
        .first()
        is not None
    )


# ---------------------------------------------------------------------------
# Per-user core
# ---------------------------------------------------------------------------

def _generate_for_user(
    db: Session,
    user_id: int,
    target_date: date,
    result: GenerationResult,
) -> None:
    rules = load_rules(db, user_id)

    for frequency in active_frequencies(target_date):
        if is_suppressed(frequency, target_date, rules):
            logger.info(
                "Skipping %s generation for user %s on %s (excluded interval)",
                frequency.value, user_id, target_date,
            )
            continue

        period = period_bounds(frequency, target_date)
        activities = (
            db.query(Activity)
            .filter(Activity.user_id == user_id, Activity.frequency == frequency)
            .order_by(Activity.id)
            .all()
        )

        for activity in activities:
            if not is_eligible(activity, period.start):
                continue
            if _log_exists(db, activity.id, frequency, period):
                continue
            db.add(ActivityLog(
                activity_id=activity.id,
                user_id=user_id,
                period_start=period.start,
                period_end=period.end,
                status=ActivityStatus.TODO,
                duration=activity.duration,
            ))
            result.created += 1
            logger.debug(
                "Queued %s log for activity %s (%s)",
                frequency.value, activity.id, activity.title,
            )

        if frequency not in result.frequencies:
            result.frequencies.append(frequency)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def generate_for_date(
    db: Session,
    target_date: date,
    user_id: Optional[int] = None,
) -> GenerationResult:
    """
    Generate logs for `target_date`.

    user_id=None runs the batch over every user; otherwise only that user's
    activities are considered. Both paths share `_generate_for_user`.
    Idempotent: safe to call multiple times for the same date.
    """
    result = GenerationResult(target_date=target_date)

    try:
        if user_id is None:
            user_ids = [row.id for row in db.query(User.id).order_by(User.id).all()]
        else:
            user_ids = [user_id]

        if not user_ids:
            # No exclusions apply without users
            result.frequencies.extend(active_frequencies(target_date))

        for uid in user_ids:
            _generate_for_user(db, uid, target_date, result)

        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Activity log generation for %s failed: %s", target_date, exc)
        raise GenerationError(day=target_date, reason=exc.__class__.__name__) from exc

    result.frequencies.sort(key=_FREQUENCY_ORDER.index)
    logger.info(
        "Generated %d activity logs for %s (users=%d, frequencies=%s)",
        result.created, target_date, len(user_ids), ",".join(result.frequency_names),
    )
    return result
