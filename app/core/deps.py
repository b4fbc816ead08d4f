"""Shared FastAPI dependencies: current user and the calendar context."""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import AuthenticationError
from app.db.base import get_db
from app.models.user import User
from app.services.auth import user_from_token
from app.services.periods import Calendar

_bearer = HTTPBearer(auto_error=False)


def get_calendar() -> Calendar:
    return Calendar(tz=settings.tzinfo)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Access token required.")
    return user_from_token(db, credentials.credentials)
