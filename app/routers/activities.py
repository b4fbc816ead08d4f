"""
Activities router (recurring activity definitions).

POST   /activities
GET    /activities
GET    /activities/grouped
GET    /activities/categories
GET    /activities/{activity_id}
PUT    /activities/{activity_id}
DELETE /activities/{activity_id}
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_user
from app.db.base import get_db
from app.models.activity import Frequency
from app.models.user import User
from app.schemas.activity import (
    ActivitiesByFrequency,
    ActivityCreate,
    ActivityResponse,
    ActivityUpdate,
)
from app.schemas.common import ERROR_RESPONSES, ErrorResponse, MessageResponse
from app.services import activities as svc

router = APIRouter(prefix="/activities", tags=["activities"], responses=ERROR_RESPONSES)

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Activity not found."}}


@router.post(
    "",
    response_model=ActivityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a recurring activity",
)
def create_activity(
    payload: ActivityCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    activity = svc.create_activity(db, user.id, **payload.model_dump())
    return ActivityResponse.model_validate(activity)


@router.get(
    "",
    response_model=list[ActivityResponse],
    summary="List activities (newest first)",
)
def list_activities(
    frequency: Optional[Frequency] = Query(default=None),
    category: Optional[str] = Query(default=None, max_length=100),
    start_date: Optional[date] = Query(
        default=None, description="Only activities starting on or after this date."
    ),
    end_date: Optional[date] = Query(
        default=None, description="Only activities ending on or before this date."
    ),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    filters = svc.ActivityFilter(
        frequency=frequency,
        category=category,
        start_from=start_date,
        end_until=end_date,
    )
    return [ActivityResponse.model_validate(a) for a in svc.list_activities(db, user.id, filters)]


@router.get(
    "/grouped",
    response_model=ActivitiesByFrequency,
    summary="Activities grouped by frequency",
)
def grouped_activities(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    grouped = svc.group_by_frequency(svc.list_activities(db, user.id))
    return ActivitiesByFrequency(**{
        key: [ActivityResponse.model_validate(a) for a in items]
        for key, items in grouped.items()
    })


@router.get(
    "/categories",
    response_model=list[str],
    summary="Distinct categories in use, sorted",
)
def categories(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return svc.list_categories(db, user.id)


@router.get(
    "/{activity_id}",
    response_model=ActivityResponse,
    summary="Get one activity",
    responses=_NOT_FOUND,
)
def get_activity(
    activity_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ActivityResponse.model_validate(svc.get_activity(db, user.id, activity_id))


@router.put(
    "/{activity_id}",
    response_model=ActivityResponse,
    summary="Update an activity (partial)",
    responses=_NOT_FOUND,
)
def update_activity(
    activity_id: int,
    payload: ActivityUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Only fields present in the body change. Sending `null` clears an optional
    field. The resulting start/end range is re-validated (400 `INVALID_DATE_RANGE`).
    Existing logs keep the duration they were created with.
    """
    activity = svc.update_activity(db, user.id, activity_id, payload.changes())
    return ActivityResponse.model_validate(activity)


@router.delete(
    "/{activity_id}",
    response_model=MessageResponse,
    summary="Delete an activity (its logs are kept)",
    responses=_NOT_FOUND,
)
def delete_activity(
    activity_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc.delete_activity(db, user.id, activity_id)
    return MessageResponse(message="Activity deleted successfully.")
