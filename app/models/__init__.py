from .user import User
from .activity import Activity, Frequency
from .activity_log import ActivityLog, ActivityLogComment, ActivityStatus
from .excluded_interval import ExcludedInterval, IntervalType

__all__ = [
    "User",
    "Activity",
    "Frequency",
    "ActivityLog",
    "ActivityLogComment",
    "ActivityStatus",
    "ExcludedInterval",
    "IntervalType",
]
