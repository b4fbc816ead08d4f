"""
Auth request / response schemas.

POST /auth/register → RegisterRequest → UserResponse
POST /auth/login    → LoginRequest    → TokenResponse
GET  /auth/me       →                 → UserResponse
"""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    email: Annotated[str, Field(
        max_length=254,
        pattern=_EMAIL_PATTERN,
        examples=["ana@example.com"],
    )]
    password: Annotated[str, Field(min_length=8, max_length=128)]
    name: Optional[str] = Field(default=None, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v


class LoginRequest(BaseModel):
    email: Annotated[str, Field(min_length=1, max_length=254)]
    password: Annotated[str, Field(min_length=1, max_length=128)]


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: Optional[str] = None
    created_at: datetime


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds.")
    user: UserResponse
