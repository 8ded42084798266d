"""
Common schema types used across the API.
"""

from typing import Any, List, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: Optional[str] = None
    details: Optional[dict[str, Any]] = None
    request_id: Optional[str] = None


class FieldError(BaseModel):
    """One failing field of a request body."""

    field: str
    message: str
    type: str


class ValidationErrorResponse(BaseModel):
    """Request body validation failure."""

    detail: str = "Validation error"
    code: str = "VALIDATION_ERROR"
    errors: List[FieldError]
    request_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
