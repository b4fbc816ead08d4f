"""
Period calculator: maps a calendar date to the day / week / month bucket it
belongs to, plus the calendar coordinates used by exclusion rules.

Pure functions, no I/O. The only clock access goes through `Calendar`,
which is built once from settings.TIMEZONE and passed where "now" is needed.

Conventions
-----------
- Weeks start on Sunday.
- day_of_week: 0 = Sunday .. 6 = Saturday.
- week_of_year: ISO week number (shift to the Thursday of the week,
  count weeks from that year's first Thursday).
- Period end is the last millisecond of the bucket (next start - 1 ms).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

from app.models.activity import Frequency

_ONE_MS = timedelta(milliseconds=1)


@dataclass(frozen=True)
class Period:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class Calendar:
    """The process-wide calendar context (one timezone)."""
    tz: tzinfo

    def now(self) -> datetime:
        """Current wall-clock time in `tz`, naive (as stored in the DB)."""
        return datetime.now(tz=self.tz).replace(tzinfo=None)

    def today(self) -> date:
        return datetime.now(tz=self.tz).date()

    def start_of_today(self) -> datetime:
        return datetime.combine(self.today(), time.min)

    def as_local(self, value: datetime) -> datetime:
        """Aware datetimes are converted into `tz` and made naive; naive ones are already local."""
        if value.tzinfo is None:
            return value
        return value.astimezone(self.tz).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Calendar coordinates
# ---------------------------------------------------------------------------

def day_of_week(day: date) -> int:
    """0 = Sunday .. 6 = Saturday."""
    return (day.weekday() + 1) % 7


def week_of_year(day: date) -> int:
    return day.isocalendar()[1]


def month_of_year(day: date) -> int:
    return day.month


# ---------------------------------------------------------------------------
# Bucket boundaries
# ---------------------------------------------------------------------------

def start_of_week(day: date) -> date:
    return day - timedelta(days=day_of_week(day))


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def _add_month(day: date) -> date:
    if day.month == 12:
        return day.replace(year=day.year + 1, month=1, day=1)
    return day.replace(month=day.month + 1, day=1)


def bucket_start(frequency: Frequency, day: date) -> date:
    if frequency == Frequency.DAILY:
        return day
    if frequency == Frequency.WEEKLY:
        return start_of_week(day)
    if frequency == Frequency.MONTHLY:
        return start_of_month(day)
    raise ValueError(f"Unsupported frequency: {frequency!r}")


def next_period_start(frequency: Frequency, start: datetime) -> datetime:
    """Start of the bucket following the one that begins at `start`."""
    if frequency == Frequency.DAILY:
        return start + timedelta(days=1)
    if frequency == Frequency.WEEKLY:
        return start + timedelta(weeks=1)
    if frequency == Frequency.MONTHLY:
        return datetime.combine(_add_month(start.date()), start.time())
    raise ValueError(f"Unsupported frequency: {frequency!r}")


def period_bounds(frequency: Frequency, day: date) -> Period:
    """Inclusive [start, end] of the `frequency` bucket containing `day`."""
    start = datetime.combine(bucket_start(frequency, day), time.min)
    return Period(start=start, end=next_period_start(frequency, start) - _ONE_MS)


def day_range(day: date) -> tuple[datetime, datetime]:
    """Half-open [00:00 of day, 00:00 of next day)."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)
