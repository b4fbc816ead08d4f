"""
Shared schema primitives used across the API.
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """A single field-level validation error."""
    field: str
    message: str
    type: str


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class MessageResponse(BaseModel):
    message: str


# Reused in router `responses=` declarations
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Validation error."},
    401: {"model": ErrorResponse, "description": "Missing, invalid or expired access token."},
}
