from datetime import datetime, date
from sqlalchemy import Integer, String, Text, DateTime, Date, Enum, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from app.db.base import Base


class Frequency(str, enum.Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class Activity(Base):
    """Recurring activity definition; one ActivityLog is generated per period."""

    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    frequency: Mapped[Frequency] = mapped_column(
        Enum(Frequency, name="frequency_enum"),
        nullable=False,
        default=Frequency.DAILY,
        index=True,
    )
    duration: Mapped[int | None] = mapped_column(
        Integer, nullable=True, comment="Expected duration in minutes"
    )
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # Inclusive bounds, date-only semantics
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
