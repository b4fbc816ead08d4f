"""User registration and credential checks."""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import AuthenticationError, EmailAlreadyRegisteredError
from app.core.security import decode_access_token, hash_password, verify_password
from app.models.user import User

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def register_user(db: Session, email: str, password: str, name: Optional[str] = None) -> User:
    email = _normalize_email(email)
    if db.query(User.id).filter(User.email == email).first() is not None:
        raise EmailAlreadyRegisteredError(email)

    user = User(email=email, password_hash=hash_password(password), name=name)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise EmailAlreadyRegisteredError(email) from exc
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == _normalize_email(email)).first()
    if user is None or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid email or password.")
    return user


def user_from_token(db: Session, token: str) -> User:
    user_id = decode_access_token(token)
    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationError("User not found.")
    return user
