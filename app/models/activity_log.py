"""
ActivityLog: one concrete occurrence of an Activity within one period.

UniqueConstraint (activity_id, period_start) backs the "one entry per
(activity, period)" rule at the DB level; the generator's existence check
is the first line, the constraint catches concurrent writers.

activity_id is not a foreign key: deleting an Activity leaves
its logs behind as history.

period_start / period_end / completed_at are naive wall-clock datetimes in
settings.TIMEZONE.
"""
from datetime import datetime
from sqlalchemy import (
    Integer, Text, DateTime, Enum, ForeignKey, UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum

from app.db.base import Base
from app.models.activity import Activity


class ActivityStatus(str, enum.Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class ActivityLog(Base):
    __tablename__ = "activity_logs"
    __table_args__ = (
        UniqueConstraint("activity_id", "period_start", name="uq_activity_log_period"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    activity_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    period_start: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    period_end: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    status: Mapped[ActivityStatus] = mapped_column(
        Enum(ActivityStatus, name="activity_status_enum"),
        nullable=False,
        default=ActivityStatus.TODO,
    )
    duration: Mapped[int | None] = mapped_column(
        Integer, nullable=True, comment="Snapshot of Activity.duration at creation"
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    activity: Mapped[Activity | None] = relationship(
        Activity,
        primaryjoin="foreign(ActivityLog.activity_id) == Activity.id",
        viewonly=True,
        lazy="selectin",
    )
    comments: Mapped[list["ActivityLogComment"]] = relationship(
        back_populates="activity_log",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ActivityLogComment.id.desc()",
    )


class ActivityLogComment(Base):
    __tablename__ = "activity_log_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    activity_log_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("activity_logs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    activity_log: Mapped[ActivityLog] = relationship(back_populates="comments")
