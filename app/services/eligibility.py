"""Occurrence eligibility: is an activity live during a given period?"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Union


class _Bounded(Protocol):
    start_date: Optional[date]
    end_date: Optional[date]


def is_eligible(activity: _Bounded, period_start: Union[date, datetime]) -> bool:
    """
    Both bounds are inclusive and compared as dates (time-of-day dropped):
    an activity is eligible for a period that starts exactly on its
    start_date or exactly on its end_date.
    """
    day = period_start.date() if isinstance(period_start, datetime) else period_start
    if activity.start_date is not None and day < activity.start_date:
        return False
    if activity.end_date is not None and day > activity.end_date:
        return False
    return True
