"""
Auth router.

POST /auth/register
POST /auth/login
GET  /auth/me
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_current_user
from app.core.security import create_access_token
from app.db.base import get_db
from app.models.user import User
from app.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from app.schemas.common import ERROR_RESPONSES, ErrorResponse
from app.services.auth import authenticate, register_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={
        400: ERROR_RESPONSES[400],
        409: {"model": ErrorResponse, "description": "Email already registered."},
    },
)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user = register_user(db, email=payload.email, password=payload.password, name=payload.name)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Exchange credentials for a bearer token",
    responses={401: {"model": ErrorResponse, "description": "Invalid email or password."}},
)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, email=payload.email, password=payload.password)
    return TokenResponse(
        access_token=create_access_token(user.id),
        expires_in=settings.ACCESS_TOKEN_TTL_SECONDS,
        user=UserResponse.model_validate(user),
    )


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Current user profile",
    responses={401: ERROR_RESPONSES[401]},
)
def me(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)
