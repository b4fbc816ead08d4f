"""
ExcludedInterval: per-user rule suppressing generation for one frequency
class on one recurring calendar coordinate.

  DAILY   / DAY_OF_WEEK   value 0..6  (0 = Sunday)
  WEEKLY  / WEEK_OF_YEAR  value 1..52 (ISO week number)
  MONTHLY / MONTH         value 1..12

One row per (user_id, frequency, type, value).
"""
from datetime import datetime
from sqlalchemy import Integer, DateTime, Enum, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from app.db.base import Base
from app.models.activity import Frequency


class IntervalType(str, enum.Enum):
    DAY_OF_WEEK = "DAY_OF_WEEK"
    WEEK_OF_YEAR = "WEEK_OF_YEAR"
    MONTH = "MONTH"


# Inclusive value range per coordinate kind
INTERVAL_VALUE_RANGES: dict[IntervalType, tuple[int, int]] = {
    IntervalType.DAY_OF_WEEK: (0, 6),
    IntervalType.WEEK_OF_YEAR: (1, 52),
    IntervalType.MONTH: (1, 12),
}


class ExcludedInterval(Base):
    __tablename__ = "excluded_intervals"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "frequency", "type", "value", name="uq_excluded_interval"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    frequency: Mapped[Frequency] = mapped_column(
        Enum(Frequency, name="frequency_enum"), nullable=False
    )
    type: Mapped[IntervalType] = mapped_column(
        Enum(IntervalType, name="interval_type_enum"), nullable=False
    )
    value: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
