"""initial schema

Revision ID: 0001
Revises:
Create Date: 2024-03-01 00:00:00.000000

Unique constraint (activity_id, period_start) on activity_logs enforces
one log per activity per period. activity_logs.activity_id has no FK so
logs survive deletion of their activity.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # --- ENUM types ---
    frequency_enum = sa.Enum("DAILY", "WEEKLY", "MONTHLY", name="frequency_enum")
    frequency_enum.create(op.get_bind(), checkfirst=True)

    activity_status_enum = sa.Enum("TODO", "IN_PROGRESS", "DONE", name="activity_status_enum")
    activity_status_enum.create(op.get_bind(), checkfirst=True)

    interval_type_enum = sa.Enum("DAY_OF_WEEK", "WEEK_OF_YEAR", "MONTH", name="interval_type_enum")
    interval_type_enum.create(op.get_bind(), checkfirst=True)

    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column("password_hash", sa.String(256), nullable=False),
        sa.Column("name", sa.String(128), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # --- activities ---
    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("frequency", sa.Enum(
            "DAILY", "WEEKLY", "MONTHLY", name="frequency_enum", create_type=False,
        ), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=True, comment="Expected duration in minutes"),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_activities_id", "activities", ["id"])
    op.create_index("ix_activities_user_id", "activities", ["user_id"])
    op.create_index("ix_activities_frequency", "activities", ["frequency"])

    # --- activity_logs ---
    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("activity_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("period_start", sa.DateTime(), nullable=False),
        sa.Column("period_end", sa.DateTime(), nullable=False),
        sa.Column("status", sa.Enum(
            "TODO", "IN_PROGRESS", "DONE", name="activity_status_enum", create_type=False,
        ), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=True, comment="Snapshot of Activity.duration at creation"),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("activity_id", "period_start", name="uq_activity_log_period"),
    )
    op.create_index("ix_activity_logs_id", "activity_logs", ["id"])
    op.create_index("ix_activity_logs_activity_id", "activity_logs", ["activity_id"])
    op.create_index("ix_activity_logs_user_id", "activity_logs", ["user_id"])
    op.create_index("ix_activity_logs_period_start", "activity_logs", ["period_start"])
    op.create_index("ix_activity_logs_period_end", "activity_logs", ["period_end"])

    # --- activity_log_comments ---
    op.create_table(
        "activity_log_comments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("activity_log_id", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["activity_log_id"], ["activity_logs.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_activity_log_comments_id", "activity_log_comments", ["id"])
    op.create_index(
        "ix_activity_log_comments_activity_log_id", "activity_log_comments", ["activity_log_id"]
    )

    # --- excluded_intervals ---
    op.create_table(
        "excluded_intervals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("frequency", sa.Enum(
            "DAILY", "WEEKLY", "MONTHLY", name="frequency_enum", create_type=False,
        ), nullable=False),
        sa.Column("type", sa.Enum(
            "DAY_OF_WEEK", "WEEK_OF_YEAR", "MONTH", name="interval_type_enum", create_type=False,
        ), nullable=False),
        sa.Column("value", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "frequency", "type", "value", name="uq_excluded_interval"),
    )
    op.create_index("ix_excluded_intervals_id", "excluded_intervals", ["id"])
    op.create_index("ix_excluded_intervals_user_id", "excluded_intervals", ["user_id"])


def downgrade() -> None:
    op.drop_table("excluded_intervals")
    op.drop_table("activity_log_comments")
    op.drop_table("activity_logs")
    op.drop_table("activities")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS interval_type_enum")
    op.execute("DROP TYPE IF EXISTS activity_status_enum")
    op.execute("DROP TYPE IF EXISTS frequency_enum")
